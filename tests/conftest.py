"""
(C) Copyright 2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import logging
import pytest

try:
    from typing import Generator  # pylint: disable=unused-import
except ImportError:
    pass

from .mock_server import MockServer

_log = logging.getLogger("pymysqlstmttest")

DATABASE_NAME = 'test'
DBA_USER      = 'root'
DBA_PASSWORD  = 'secret'


@pytest.fixture()
def server():
    # type: () -> Generator[MockServer, None, None]
    """Start a mock MySQL server for a single test."""
    srv = MockServer(user=DBA_USER, password=DBA_PASSWORD).start()
    _log.info("Mock MySQL server listening on %s", srv.host)
    try:
        yield srv
    finally:
        srv.stop()
