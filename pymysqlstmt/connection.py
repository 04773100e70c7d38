"""A module for connecting to a MySQL server.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Connection -- Class for establishing connection with host.

Exported Functions:
connect -- Creates a connection object.
"""

__all__ = ['apilevel', 'threadsafety', 'paramstyle', 'connect', 'Connection']

import copy
import logging

try:
    from typing import Any, Dict, Mapping, Optional  # pylint: disable=unused-import
except ImportError:
    pass

from . import __version__
from .exception import Error, InterfaceError, ProgrammingError

from . import session
from . import statement
from . import encodedsession

apilevel = "2.0"
threadsafety = 1
paramstyle = "qmark"

_log = logging.getLogger('pymysqlstmt.connection')


def connect(database=None,  # type: Optional[str]
            host=None,      # type: Optional[str]
            user=None,      # type: Optional[str]
            password=None,  # type: Optional[str]
            options=None,   # type: Optional[Mapping[str, str]]
            **kwargs
            ):
    # type: (...) -> Connection
    """Return a new MySQL Connection object.

    :param database: Name of the default database, or None.
    :param host: Hostname (and port if non-default) of the server.
    :param user: Username to connect with.
    :param password: Password to connect with.
    :param options: Connection options.
    :returns: A new Connection object.
    """
    return Connection(database=database, host=host,
                      user=user, password=password,
                      options=options, **kwargs)


class Connection(object):
    """An established connection with a MySQL server.

    Public Functions:
    testConnection -- Tests to ensure the connection was properly established.
    statement -- Return a new prepared Statement using the connection.
    close -- Closes the connection with the host.
    connection_config -- Return a copy of the connection configuration.

    Options:
    port -- Server port, if not given in the host string.
    ipVersion -- 'v6' to resolve host names as IPv6.
    charset -- Connection character set: latin1, utf8, utf8mb4 or binary.
    bindTimeZone -- Timezone DATETIME parameters are sent in (default UTC).
    resultTimeZone -- Timezone DATETIME results are placed in (default local).
    maxStringLength -- Truncate string results to this many bytes.
    connectTimeout, readTimeout -- Socket timeouts in seconds.
    Any other option is sent to the server as a connection attribute.
    """

    # PEP 249 recommends that all exceptions be exposed as attributes in the
    # Connection object.
    from .exception import Warning, Error, InterfaceError, DatabaseError
    from .exception import OperationalError, IntegrityError, InternalError
    from .exception import ProgrammingError, NotSupportedError

    __session = None          # type: encodedsession.EncodedSession

    __config = None           # type: Dict[str, Any]

    def __init__(self, database=None,  # type: Optional[str]
                 host=None,            # type: Optional[str]
                 user=None,            # type: Optional[str]
                 password=None,        # type: Optional[str]
                 options=None,         # type: Optional[Mapping[str, str]]
                 **kwargs
                 ):
        # type: (...) -> None
        """Construct a Connection object.

        :param database: Name of the default database, or None.
        :param host: Host (and port if needed) of the server.
        :param user: Username to connect with.
        :param password: Password to connect with.
        :param options: Connection options.
        :param kwargs: Extra arguments to pass to EncodedSession.
        """
        if user is None:
            raise InterfaceError("No user provided.")

        self.__config = {'driver_version': __version__,
                         'db_name': database,
                         'user': user,
                         'options': copy.deepcopy(options)}

        # Split the options into connection attributes and session options
        params, opts = session.Session.session_options(options)

        if host is None:
            host = 'localhost'

        port = None
        if opts.get('port'):
            port = int(opts['port'])
        for (opt, arg) in (('connectTimeout', 'connect_timeout'),
                           ('readTimeout', 'read_timeout')):
            if opts.get(opt) and arg not in kwargs:
                kwargs[arg] = float(opts[opt])

        self.__session = encodedsession.EncodedSession(
            host, port=port, options=opts, **kwargs)
        try:
            # fails if a timezone name is bad
            self.__session.bind_timezone_name = opts.get('bindTimeZone', 'UTC')
            if opts.get('resultTimeZone'):
                self.__session.result_timezone_name = opts['resultTimeZone']
            if opts.get('maxStringLength'):
                limit = int(opts['maxStringLength'])
                if limit <= 0:
                    raise ProgrammingError("maxStringLength must be positive")
                self.__session.max_string_length = limit
            self.__session.open_database(database, user, password, params)
        except Exception:
            self.__session.close()
            raise

        _log.debug("connected to %s:%d as %s",
                   self.__session.address, self.__session.port, user)

        self.__config['host'] = '%s:%d' % (self.__session.address, self.__session.port)
        self.__config['server_version'] = self.__session.server_version
        self.__config['connection_id'] = self.__session.connection_id
        self.__config['charset'] = self.__session.charset
        self.__config['bind_timezone'] = self.__session.bind_timezone_name
        self.__config['result_timezone'] = self.__session.result_timezone_name
        self.__config['max_string_length'] = self.__session.max_string_length

    @property
    def _session(self):
        # type: () -> encodedsession.EncodedSession
        return self.__session

    def testConnection(self):
        # type: () -> None
        """Ensure the connection was properly established.

        :raises OperationalError: If the connection is not established.
        """
        self._check_closed()
        self.__session.test_connection()

    def connection_config(self):
        # type: () -> Dict[str, Any]
        """Returns a copy of the connection configuration.

        Configuration:
          bind_timezone     :str:  Timezone DATETIME parameters are sent in
          charset           :str:  Connection character set
          connected         :bool: True if the connection is active
          connection_id     :int:  ID of the connection
          db_name           :str:  name of the default database
          driver_version    :str:  Version of this driver
          host              :str:  Address and port of the server
          max_string_length :int:  String result limit, or None
          options           :dict: Dictionary of connection options
          result_timezone   :str:  Timezone DATETIME results are placed in
          server_version    :str:  Version reported by the server
          user              :str:  name of the connected user

        :returns: Copy of the connection config names and values.
                  Modifying these values has no effect on the connection.
        """
        config = copy.deepcopy(self.__config)
        config['connected'] = not self.__session.closed and self.__session.connected
        return config

    def statement(self):
        # type: () -> statement.Statement
        """Return a new, unprepared Statement using the connection."""
        self._check_closed()
        return statement.Statement(self)

    def close(self):
        # type: () -> None
        """Close this connection to the server."""
        self._check_closed()
        try:
            # nobody to say goodbye to if the server has gone away
            if self.__session.connected:
                self.__session.send_close()
        finally:
            self.__session.closed = True
            self.__session.close()

    def _check_closed(self):
        # type: () -> None
        """Check if the connection is available.

        :raises Error: If the connection to the host is closed.
        """
        if self.__session.closed:
            raise Error("connection is closed")

    def __enter__(self):
        # Return self to allow use within the 'with' block
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # There are no transactions to finish: just close.
        if not self.__session.closed:
            self.close()
