"""MySQL prepared statements.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
PreparedStatement -- What the server told us about a prepared statement.
ExecutionResult -- Result of a statement execution.
Statement -- A prepared statement handle and its lifecycle.
"""

__all__ = ['PreparedStatement', 'ExecutionResult', 'Statement']

import logging
import functools
import threading

try:
    from typing import Any, Callable, Dict, List, Optional, Union  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import DatabaseError, InterfaceError, ProgrammingError
from .exception import client_error
from .session import SessionException

from . import protocol
from . import binder
from . import marshaller
from . import attributes
from . import result_set

_log = logging.getLogger('pymysqlstmt.statement')

# Lifecycle states
CREATED = 'Created'
PREPARED = 'Prepared'
BOUND = 'Bound'
EXECUTED = 'Executed'
STORED = 'Stored'
CLOSED = 'Closed'


class PreparedStatement(object):
    """A statement prepared on the server."""

    def __init__(self, handle, parameter_count, params=None, columns=None):
        # type: (int, int, Optional[List[result_set.ColumnDescriptor]], Optional[List[result_set.ColumnDescriptor]]) -> None
        """Create a prepared statement.

        :param handle: The server's statement ID.
        :param parameter_count: Number of parameters needed.
        :param params: Descriptors of the parameters.
        :param columns: Descriptors of the result columns.
        """
        self.handle = handle
        self.parameter_count = parameter_count
        self.params = params or []
        self.columns = columns or []


class ExecutionResult(object):
    """Result of a statement execution."""

    def __init__(self, statement, row_count, insert_id, resultset=None):
        # type: (PreparedStatement, int, int, Optional[result_set.ResultSet]) -> None
        """Create the result of a statement execution.

        :param statement: Statement that was executed.
        :param row_count: Number of rows affected, -1 for a result set.
        :param insert_id: The AUTO_INCREMENT value generated, or 0.
        :param resultset: The rows produced, if any.
        """
        self.statement = statement
        self.row_count = row_count
        self.insert_id = insert_id
        self.resultset = resultset


def _operation(failure=False):
    # type: (Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]
    """Guard a Statement method.

    Only one operation can be in flight on a statement at a time.  Errors
    reported by the server are recorded on the statement and the method
    returns FAILURE; misuse of the API and transport failures are raised.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            self._enter()
            try:
                return func(self, *args, **kwargs)
            except SessionException:
                raise
            except DatabaseError as e:
                if e.errno is None:
                    raise
                self._record_error(e)
                return failure
            finally:
                self._leave()
        return wrapper
    return decorator


class Statement(object):  # pylint: disable=too-many-instance-attributes,too-many-public-methods
    """A prepared statement on a connection.

    Typical use:

        stmt = connection.statement()
        if not stmt.prepare("SELECT a FROM t WHERE b = ?"):
            raise ... stmt.error()
        stmt.bind_params([42])
        stmt.execute()
        rows = stmt.fetch_all()
        stmt.close()

    Operations that reach the server return False (None for fetch_all)
    when the server reports an error; errno(), error() and sqlstate()
    describe it.
    """

    def __init__(self, connection):
        # type: (Any) -> None
        self._connection = connection
        self.__session = connection._session
        self.__lock = threading.Lock()
        self.__state = CREATED
        self.__prepared = None  # type: Optional[PreparedStatement]
        self.__slots = None     # type: Optional[List[binder.BindSlot]]
        self.__result = None    # type: Optional[result_set.ResultSet]
        self.__field_count = 0
        self.__affected_rows = -1
        self.__insert_id = 0
        self.__attributes = attributes.AttributeStore()
        self.__clear_error()

    # Lifecycle plumbing

    def _enter(self):
        # type: () -> None
        if self.__state == CLOSED:
            raise InterfaceError("Statement not initialized")
        if not self.__lock.acquire(False):
            raise InterfaceError("Statement is busy")

    def _leave(self):
        # type: () -> None
        self.__lock.release()

    def __clear_error(self):
        # type: () -> None
        self.__errno = 0
        self.__error = ''
        self.__sqlstate = protocol.SQLSTATE_OK

    def _record_error(self, e):
        # type: (DatabaseError) -> None
        self.__errno = e.errno or protocol.CR_UNKNOWN_ERROR
        self.__error = e.msg
        self.__sqlstate = e.sqlstate or protocol.SQLSTATE_UNKNOWN
        _log.debug("statement error %d (%s): %s", self.__errno, self.__sqlstate, self.__error)

    def __check_prepared(self):
        # type: () -> PreparedStatement
        if self.__prepared is None:
            raise ProgrammingError("Statement is not prepared")
        return self.__prepared

    def __check_stored(self):
        # type: () -> None
        if self.__state != STORED:
            raise ProgrammingError("Result set is not stored")

    def __set_state(self, state):
        # type: (str) -> None
        _log.debug("statement %s: %s -> %s",
                   self.__prepared.handle if self.__prepared else '-', self.__state, state)
        self.__state = state

    def __drop_result(self, close_cursor=True):
        # type: (bool) -> None
        rs = self.__result
        self.__result = None
        if rs is not None and not rs.complete:
            if rs.cursor:
                # executing again closes the cursor on the server
                if close_cursor:
                    self.__session.reset_statement(rs.handle)
            else:
                self.__session.discard_pending()
            rs.discard()

    def __forget(self):
        # type: () -> None
        self.__prepared = None
        self.__slots = None
        self.__result = None
        self.__set_state(CLOSED)

    def __store(self, rs):
        # type: (result_set.ResultSet) -> None
        rs.store(self.__session)
        if self.__attributes.update_max_length:
            marshaller.update_max_length(self.__session, rs)
        self.__affected_rows = rs.num_rows
        self.__set_state(STORED)

    @property
    def state(self):
        # type: () -> str
        return self.__state

    @property
    def param_count(self):
        # type: () -> int
        """Return the number of parameters of the prepared statement."""
        return self.__prepared.parameter_count if self.__prepared else 0

    @property
    def result_stored(self):
        # type: () -> bool
        return self.__result is not None and self.__result.stored

    @property
    def bind_slots(self):
        # type: () -> Optional[List[binder.BindSlot]]
        return self.__slots

    # Operations

    @_operation()
    def prepare(self, query):
        # type: (str) -> bool
        """Prepare QUERY on the server, replacing any previous statement."""
        self.__clear_error()
        old = self.__prepared
        if old is not None:
            self.__drop_result()
            self.__session.close_statement(old.handle)
        self.__prepared = None
        self.__slots = None
        self.__field_count = 0
        self.__set_state(CREATED)

        prepared = self.__session.prepare_statement(query)
        self.__prepared = prepared
        self.__field_count = len(prepared.columns)
        self.__set_state(PREPARED)
        return True

    @_operation()
    def bind_params(self, values):
        # type: (Union[List[Any], tuple]) -> bool
        """Bind VALUES to the parameters, in order.

        :raises ProgrammingError: If the statement isn't prepared, VALUES has
            the wrong length or contains Undefined.
        """
        prepared = self.__check_prepared()
        session = self.__session
        slots = binder.build_slots(values, prepared.parameter_count,
                                   session.bind_timezone, session.encoding)
        self.__slots = slots
        self.__set_state(BOUND)
        return True

    @_operation()
    def execute(self):
        # type: () -> bool
        """Execute the statement with the bound parameters."""
        prepared = self.__check_prepared()
        if prepared.parameter_count > 0 and self.__slots is None:
            raise ProgrammingError("Parameters are not bound")
        self.__clear_error()
        self.__drop_result(close_cursor=False)
        self.__affected_rows = -1
        slots = self.__slots or []
        try:
            result = self.__session.execute_statement(prepared, slots,
                                                      self.__attributes.cursor_type)
        finally:
            # the server discards long data once it has been used
            for slot in slots:
                slot.long_data = False

        self.__affected_rows = result.row_count
        self.__insert_id = result.insert_id
        rs = result.resultset
        if rs is not None:
            rs.prefetch = self.__attributes.prefetch_rows
            self.__field_count = rs.col_count
        self.__result = rs
        self.__set_state(EXECUTED)
        return True

    @_operation(failure=None)
    def fetch_all(self):
        # type: () -> Optional[List[Dict[str, Any]]]
        """Return all remaining rows as dicts of column name to value.

        The result is stored first if it hasn't been.  Returns None when the
        statement produced no result set (errno() is 0) or when the rows
        couldn't be converted (errno() reports why).
        """
        self.__check_prepared()
        self.__clear_error()
        rs = self.__result
        if rs is None:
            return None
        slots = marshaller.allocate_slots(rs.columns, self.__session.max_string_length)
        if not rs.stored:
            self.__store(rs)
        return marshaller.fetch_all(self.__session, rs, slots)

    @_operation(failure=None)
    def fetch(self):
        # type: () -> Optional[Dict[str, Any]]
        """Return the next row, or None when there are no more rows."""
        self.__check_prepared()
        self.__clear_error()
        rs = self.__result
        if rs is None:
            client_error(protocol.CR_NO_RESULT_SET)
        slots = marshaller.allocate_slots(rs.columns, self.__session.max_string_length)
        return marshaller.fetch_row(self.__session, rs, slots)

    @_operation()
    def store_result(self):
        # type: () -> bool
        """Read the whole result set into memory."""
        self.__clear_error()
        if self.__state not in (EXECUTED, STORED):
            client_error(protocol.CR_COMMANDS_OUT_OF_SYNC)
        rs = self.__result
        if rs is None:
            return True
        if not rs.stored:
            self.__store(rs)
        return True

    @_operation()
    def free_result(self):
        # type: () -> bool
        """Discard the result set, closing any server cursor."""
        self.__check_prepared()
        self.__clear_error()
        self.__drop_result()
        if self.__state == STORED:
            self.__set_state(EXECUTED)
        return True

    @_operation()
    def num_rows(self):
        # type: () -> int
        """Return the number of rows in the stored result set."""
        self.__check_stored()
        return self.__result.num_rows if self.__result is not None else 0

    @_operation()
    def data_seek(self, offset):
        # type: (int) -> None
        """Move to row OFFSET of the stored result set.

        :raises ProgrammingError: If OFFSET is not a valid row.
        """
        self.__check_stored()
        if self.__result is None:
            raise ProgrammingError("Invalid row offset")
        self.__result.seek(offset)

    @_operation()
    def reset(self):
        # type: () -> bool
        """Reset the statement on the server.  Bound parameters are kept."""
        prepared = self.__check_prepared()
        self.__clear_error()
        rs = self.__result
        self.__result = None
        if rs is not None:
            if not rs.complete and not rs.cursor:
                self.__session.discard_pending()
            rs.discard()
        for slot in self.__slots or []:
            slot.long_data = False
        self.__session.reset_statement(prepared.handle)
        self.__set_state(BOUND if self.__slots is not None else PREPARED)
        return True

    @_operation()
    def send_long_data(self, param_number, data):
        # type: (int, Union[str, bytes]) -> bool
        """Send DATA for a string or binary parameter ahead of execute().

        May be called several times for the same parameter; the chunks are
        concatenated by the server.

        :raises ProgrammingError: If PARAM_NUMBER is not a valid parameter.
        """
        prepared = self.__check_prepared()
        if self.__slots is None:
            raise ProgrammingError("Parameters are not bound")
        if param_number < 0 or param_number >= prepared.parameter_count:
            raise ProgrammingError("Invalid parameter number %d" % (param_number))
        self.__clear_error()
        slot = self.__slots[param_number]
        if not slot.accepts_long_data:
            client_error(protocol.CR_INVALID_BUFFER_USE)
        if isinstance(data, str):
            data = data.encode(self.__session.encoding)
        self.__session.send_long_data(prepared.handle, param_number, bytes(data))
        slot.long_data = True
        return True

    @_operation()
    def result_metadata(self):
        # type: () -> Union[result_set.ResultMetadata, bool]
        """Return the metadata of the statement's result set.

        Returns False (with CR_NO_RESULT_SET recorded) if the statement
        produces no result set.
        """
        prepared = self.__check_prepared()
        self.__clear_error()
        columns = self.__result.columns if self.__result is not None else prepared.columns
        if not columns:
            client_error(protocol.CR_NO_RESULT_SET)
        return result_set.ResultMetadata(self._connection, columns, len(columns))

    def close(self):
        # type: () -> bool
        """Deallocate the statement.  Closing a closed statement does nothing."""
        if self.__state == CLOSED:
            return True
        self._enter()
        try:
            prepared = self.__prepared
            # a lost connection took the statement with it
            if prepared is not None and self.__session.connected:
                try:
                    self.__drop_result()
                    self.__session.close_statement(prepared.handle)
                except SessionException:
                    self.__forget()
                    raise
                except DatabaseError as e:
                    if e.errno is None:
                        raise
                    self._record_error(e)
                    return False
            self.__forget()
            return True
        finally:
            self._leave()

    # Attributes

    @_operation()
    def attr_get(self, attr):
        # type: (int) -> Union[bool, int]
        return self.__attributes.get(attr)

    @_operation()
    def attr_set(self, attr, value):
        # type: (int, Union[bool, int]) -> bool
        self.__attributes.set(attr, value)
        return True

    # Pass-through accessors

    @_operation()
    def field_count(self):
        # type: () -> int
        return self.__field_count

    @_operation()
    def affected_rows(self):
        # type: () -> int
        """Rows changed by the last execute, or -1 if unknown."""
        return self.__affected_rows

    @_operation()
    def last_insert_id(self):
        # type: () -> int
        return self.__insert_id

    def errno(self):
        # type: () -> int
        return self.__errno

    def error(self):
        # type: () -> str
        return self.__error

    def sqlstate(self):
        # type: () -> str
        return self.__sqlstate
