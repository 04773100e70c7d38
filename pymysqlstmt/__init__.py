"""MySQL prepared statements for Python, over the binary protocol.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__version__ = '1.0.0'

from .connection import *  # pylint: disable=wildcard-import
from .datatype import *    # pylint: disable=wildcard-import
from .exception import *   # pylint: disable=wildcard-import, redefined-builtin
from .statement import Statement

from .protocol import STMT_ATTR_UPDATE_MAX_LENGTH, STMT_ATTR_CURSOR_TYPE
from .protocol import STMT_ATTR_PREFETCH_ROWS
from .protocol import CURSOR_TYPE_NO_CURSOR, CURSOR_TYPE_READ_ONLY
from .protocol import CURSOR_TYPE_FOR_UPDATE, CURSOR_TYPE_SCROLLABLE
