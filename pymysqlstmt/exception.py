"""Classes containing the exceptions for reporting errors.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

from . import protocol

try:
    from typing import NoReturn, Optional  # pylint: disable=unused-import
except ImportError:
    pass

__all__ = ['Warning', 'Error', 'InterfaceError', 'DatabaseError',
           'DataError', 'OperationalError', 'IntegrityError', 'InternalError',
           'ProgrammingError', 'NotSupportedError', 'EndOfStream',
           'db_error_handler']


class Warning(Exception):  # pylint: disable=redefined-builtin
    def __init__(self, value):
        self.__value = value

    def __str__(self):
        return repr(self.__value)


class Error(Exception):
    """Base class of all driver errors.

    Errors reported by the server (or by the client library on the server's
    behalf) carry the MySQL error number and SQLSTATE; errors raised for
    misuse of the API leave both as None.
    """

    errno = None     # type: Optional[int]
    sqlstate = None  # type: Optional[str]

    def __init__(self, value, errno=None, sqlstate=None, msg=None):
        # type: (str, Optional[int], Optional[str], Optional[str]) -> None
        self.__value = value
        self.errno = errno
        self.sqlstate = sqlstate
        # The text reported by the server, without the error code prefix
        self.msg = value if msg is None else msg

    def __str__(self):
        return self.__value


class InterfaceError(Error):
    pass


class DatabaseError(Error):
    pass


class DataError(DatabaseError):
    pass


class OperationalError(DatabaseError):
    pass


class IntegrityError(DatabaseError):
    pass


class InternalError(DatabaseError):
    pass


class ProgrammingError(DatabaseError):
    pass


class NotSupportedError(DatabaseError):
    pass


class EndOfStream(Exception):
    def __init__(self, value):
        self.__value = value

    def __str__(self):
        return repr(self.__value)


def db_error_handler(error_code, sqlstate, error_string):
    # type: (int, str, str) -> NoReturn
    """Raise the PEP 249 exception matching a MySQL error code.

    :type error_code int
    :type sqlstate str
    :type error_string str
    """
    if error_code in protocol.DATA_ERRORS:
        cls = DataError
    elif error_code in protocol.OPERATIONAL_ERRORS:
        cls = OperationalError
    elif error_code in protocol.INTEGRITY_ERRORS:
        cls = IntegrityError
    elif error_code in protocol.INTERNAL_ERRORS:
        cls = InternalError
    elif error_code in protocol.PROGRAMMING_ERRORS:
        cls = ProgrammingError
    elif error_code in protocol.NOT_SUPPORTED_ERRORS:
        cls = NotSupportedError
    elif sqlstate.startswith('23'):
        cls = IntegrityError
    elif sqlstate.startswith('22'):
        cls = DataError
    elif sqlstate.startswith('42'):
        cls = ProgrammingError
    else:
        cls = DatabaseError
    raise cls('%s (%d): %s' % (protocol.lookup_code(error_code), error_code, error_string),
              errno=error_code, sqlstate=sqlstate, msg=error_string)


def client_error(error_code):
    # type: (int) -> NoReturn
    """Raise the exception for a client-side protocol error code."""
    db_error_handler(error_code, protocol.SQLSTATE_UNKNOWN,
                     protocol.clientErrorMessages.get(error_code, 'Unknown error'))
