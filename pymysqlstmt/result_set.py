"""MySQL prepared statement result sets.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

try:
    from typing import Any, List, Optional, Tuple  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import DatabaseError, ProgrammingError
from . import datatype
from . import protocol

# Larger values grow the buffer when they arrive
MAX_PREALLOCATE = 0x10000


class ColumnDescriptor(object):
    """Metadata for one column of a result set (or one parameter)."""

    def __init__(self, name,          # type: str
                 type_code,           # type: int
                 length,              # type: int
                 flags=0,             # type: int
                 charset=protocol.BINARY_CHARSET,  # type: int
                 decimals=0,          # type: int
                 catalog='def',       # type: str
                 schema='',           # type: str
                 table=''             # type: str
                 ):
        # type: (...) -> None
        self.name = name
        self.type_code = type_code
        self.length = length
        self.flags = flags
        self.charset = charset
        self.decimals = decimals
        self.catalog = catalog
        self.schema = schema
        self.table = table
        # Only maintained when STMT_ATTR_UPDATE_MAX_LENGTH is set
        self.max_length = 0

    @property
    def unsigned(self):
        # type: () -> bool
        return bool(self.flags & protocol.UNSIGNED_FLAG)

    @property
    def nullable(self):
        # type: () -> bool
        return not self.flags & protocol.NOT_NULL_FLAG

    @property
    def binary(self):
        # type: () -> bool
        """True if the column holds bytes rather than characters."""
        return self.charset == protocol.BINARY_CHARSET

    def __repr__(self):
        return 'ColumnDescriptor(%r, type=%d, length=%d, flags=0x%x)' % (
            self.name, self.type_code, self.length, self.flags)


class OutputSlot(object):
    """Scratch buffer receiving one column value of a fetched row.

    The buffer starts at the column's declared size and grows when a value
    needs more room, unless a capacity limit was given: then longer values
    are truncated to the limit.  `length` is the number of bytes written.
    """

    def __init__(self, column, limit=None):
        # type: (ColumnDescriptor, Optional[int]) -> None
        self.column = column
        self.limit = limit
        size = min(column.length, MAX_PREALLOCATE)
        if limit is not None:
            size = min(size, limit)
        self.buffer = bytearray(max(size, 0))
        self.length = 0
        self.is_null = True
        self.truncated = False

    def write(self, data):
        # type: (Optional[bytes]) -> None
        """Store DATA (None for NULL) in the slot."""
        if data is None:
            self.is_null = True
            self.length = 0
            self.truncated = False
            return
        self.is_null = False
        self.truncated = self.limit is not None and len(data) > self.limit
        if self.truncated:
            data = data[:self.limit]
        if len(data) > len(self.buffer):
            self.buffer.extend(bytes(len(data) - len(self.buffer)))
        self.buffer[:len(data)] = data
        self.length = len(data)

    @property
    def data(self):
        # type: () -> bytes
        return bytes(self.buffer[:self.length])


class ResultSet(object):
    """The rows of an executed statement.

    Rows are kept as binary protocol payloads.  Until the set is stored they
    are pulled from the wire (or the server cursor) on demand.
    """

    def __init__(self, handle, columns, cursor=False, prefetch=protocol.DEFAULT_PREFETCH_ROWS):
        """
        :type handle int
        :type columns list
        :type cursor bool
        :type prefetch int
        """
        self.handle = handle
        self.columns = columns
        self.cursor = cursor
        self.prefetch = prefetch
        self.results = []  # type: List[bytes]
        self.results_idx = 0
        self.complete = False
        self.stored = False

    @property
    def col_count(self):
        # type: () -> int
        return len(self.columns)

    def clear_results(self):
        del self.results[:]
        self.results_idx = 0

    def add_row(self, row):
        self.results.append(row)

    def _read(self, session, num_rows):
        """Read the next cursor batch or the next streamed row.

        An error from the server ends the result set: the rows read so far
        are dropped and there is nothing more to read.

        :type session EncodedSession
        """
        try:
            if self.cursor:
                rows, last = session.cursor_fetch(self.handle, num_rows)
                self.results.extend(rows)
                self.complete = last
            else:
                row = session.read_binary_row()
                if row is None:
                    self.complete = True
                else:
                    self.add_row(row)
        except DatabaseError:
            self.discard()
            raise

    def _fetch_next(self, session):
        """
        :type session EncodedSession
        """
        self.clear_results()
        self._read(session, self.prefetch)

    def fetchone(self, session):
        """
        :type session EncodedSession
        """
        if self.results_idx == len(self.results) and not self.complete:
            self._fetch_next(session)

        if self.results_idx == len(self.results):
            return None

        res = self.results[self.results_idx]
        self.results_idx += 1
        return res

    def store(self, session):
        """Pull every remaining row into memory.

        :type session EncodedSession
        """
        if self.stored:
            return
        del self.results[:self.results_idx]
        self.results_idx = 0
        while not self.complete:
            self._read(session, protocol.FETCH_ALL_ROWS)
        self.stored = True

    @property
    def num_rows(self):
        # type: () -> int
        return len(self.results)

    def seek(self, offset):
        # type: (int) -> None
        if offset < 0 or offset >= len(self.results):
            raise ProgrammingError("Invalid row offset")
        self.results_idx = offset

    def discard(self):
        # type: () -> None
        """Forget all rows: the set is complete with nothing left to read."""
        self.clear_results()
        self.complete = True


class ResultMetadata(object):
    """Description of the result set a prepared statement produces."""

    def __init__(self, connection, columns, field_count):
        # type: (Any, List[ColumnDescriptor], int) -> None
        self.connection = connection
        self.fields = list(columns)
        self.field_count = field_count

    def field_names(self):
        # type: () -> List[str]
        return [col.name for col in self.fields]

    @property
    def description(self):
        # type: () -> List[Tuple[Any, ...]]
        """Return a PEP 249 cursor-style description of the columns."""
        return [(col.name,
                 datatype.TYPEMAP.get(col.type_code),
                 col.max_length or None,
                 col.length,
                 col.length if col.type_code in (protocol.MYSQL_TYPE_DECIMAL,
                                                 protocol.MYSQL_TYPE_NEWDECIMAL) else None,
                 col.decimals,
                 col.nullable) for col in self.fields]
