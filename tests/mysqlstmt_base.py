"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import pytest
import copy

try:
    from typing import Any, Optional  # pylint: disable=unused-import
except ImportError:
    pass

import pymysqlstmt
from pymysqlstmt import protocol

from .conftest import DATABASE_NAME, DBA_USER, DBA_PASSWORD

# A test that hangs is worse than one that fails
READ_TIMEOUT = '10'


class MysqlStmtBase(object):
    longMessage = True

    # Set the driver module for the imported test suites
    driver = pymysqlstmt  # type: Any

    connect_args = ()  # type: Any
    server = None  # type: Any

    @pytest.fixture(autouse=True)
    def _setup(self, server):
        # Preserve the options we'll need to create a connection to the server
        self.server = server
        self.connect_args = {'database': DATABASE_NAME,
                             'host': server.host,
                             'user': DBA_USER,
                             'password': DBA_PASSWORD,
                             'options': {'readTimeout': READ_TIMEOUT}}

    def _connect(self, options=None):
        connect_args = copy.deepcopy(self.connect_args)
        if options:
            if 'options' not in connect_args:
                connect_args['options'] = {}
            for k, v in options.items():
                if v is not None:
                    connect_args['options'][k] = v
                elif k in connect_args['options']:
                    del connect_args['options'][k]
            if not connect_args['options']:
                del connect_args['options']
        return pymysqlstmt.connect(**connect_args)

    def _prepared(self, con, query, params=None):
        # type: (Any, str, Optional[list]) -> Any
        """Return a statement on CON prepared with QUERY, optionally bound."""
        stmt = con.statement()
        assert stmt.prepare(query), stmt.error()
        if params is not None:
            assert stmt.bind_params(params)
        return stmt


# Shorthand for the column types used throughout the tests
TINY = protocol.MYSQL_TYPE_TINY
SHORT = protocol.MYSQL_TYPE_SHORT
LONG = protocol.MYSQL_TYPE_LONG
LONGLONG = protocol.MYSQL_TYPE_LONGLONG
INT24 = protocol.MYSQL_TYPE_INT24
YEAR = protocol.MYSQL_TYPE_YEAR
FLOAT = protocol.MYSQL_TYPE_FLOAT
DOUBLE = protocol.MYSQL_TYPE_DOUBLE
NEWDECIMAL = protocol.MYSQL_TYPE_NEWDECIMAL
NULL = protocol.MYSQL_TYPE_NULL
VAR_STRING = protocol.MYSQL_TYPE_VAR_STRING
STRING = protocol.MYSQL_TYPE_STRING
BLOB = protocol.MYSQL_TYPE_BLOB
JSON = protocol.MYSQL_TYPE_JSON
DATE = protocol.MYSQL_TYPE_DATE
DATETIME = protocol.MYSQL_TYPE_DATETIME
TIMESTAMP = protocol.MYSQL_TYPE_TIMESTAMP
TIME = protocol.MYSQL_TYPE_TIME
BIT = protocol.MYSQL_TYPE_BIT
GEOMETRY = protocol.MYSQL_TYPE_GEOMETRY
