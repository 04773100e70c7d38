"""Prepared statement attributes.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
AttributeStore -- The attributes of a single prepared statement.
"""

__all__ = ['AttributeStore']

try:
    from typing import Union  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import NotSupportedError, ProgrammingError
from . import protocol

UINT32_MAX = 0xFFFFFFFF

SUPPORTED_CURSOR_TYPES = (protocol.CURSOR_TYPE_NO_CURSOR,
                          protocol.CURSOR_TYPE_READ_ONLY)


class AttributeStore(object):
    """The attributes of a single prepared statement.

    STMT_ATTR_UPDATE_MAX_LENGTH -- bool: compute each column's max_length
                                   when the result is stored.
    STMT_ATTR_CURSOR_TYPE -- unsigned int: open a server cursor on execute
                             (CURSOR_TYPE_NO_CURSOR or CURSOR_TYPE_READ_ONLY).
    STMT_ATTR_PREFETCH_ROWS -- unsigned int: rows to fetch per round trip
                               from a server cursor.
    """

    def __init__(self):
        # type: () -> None
        self.update_max_length = False
        self.cursor_type = protocol.CURSOR_TYPE_NO_CURSOR
        self.prefetch_rows = protocol.DEFAULT_PREFETCH_ROWS

    def get(self, attr):
        # type: (int) -> Union[bool, int]
        if attr == protocol.STMT_ATTR_UPDATE_MAX_LENGTH:
            return self.update_max_length
        if attr == protocol.STMT_ATTR_CURSOR_TYPE:
            return self.cursor_type
        if attr == protocol.STMT_ATTR_PREFETCH_ROWS:
            return self.prefetch_rows
        raise NotSupportedError("This attribute isn't supported yet")

    def set(self, attr, value):
        # type: (int, Union[bool, int]) -> None
        if attr == protocol.STMT_ATTR_UPDATE_MAX_LENGTH:
            if not isinstance(value, bool):
                raise ProgrammingError("STMT_ATTR_UPDATE_MAX_LENGTH must be a boolean")
            self.update_max_length = value
        elif attr == protocol.STMT_ATTR_CURSOR_TYPE:
            value = self._unsigned('STMT_ATTR_CURSOR_TYPE', value)
            if value not in SUPPORTED_CURSOR_TYPES:
                raise NotSupportedError("Cursor type %d is not supported" % (value))
            self.cursor_type = value
        elif attr == protocol.STMT_ATTR_PREFETCH_ROWS:
            value = self._unsigned('STMT_ATTR_PREFETCH_ROWS', value)
            if value == 0:
                raise NotSupportedError("STMT_ATTR_PREFETCH_ROWS must be at least 1")
            self.prefetch_rows = value
        else:
            raise NotSupportedError("This attribute isn't supported yet")

    @staticmethod
    def _unsigned(name, value):
        # type: (str, Union[bool, int]) -> int
        if isinstance(value, bool) or not isinstance(value, int):
            raise ProgrammingError("%s must be an unsigned integer" % (name))
        if value < 0 or value > UINT32_MAX:
            raise ProgrammingError("%s must be an unsigned integer" % (name))
        return value
