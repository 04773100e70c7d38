"""Constants for the MySQL client/server protocol.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

# pylint: disable=bad-whitespace

# Packet framing
MAX_PACKET_LEN                    = 0xFFFFFF
HEADER_LEN                        = 4

# Packet markers (first byte of a response payload)
OK_PACKET                         = 0x00
AUTH_MORE_DATA                    = 0x01
LOCAL_INFILE                      = 0xFB
EOF_PACKET                        = 0xFE
ERR_PACKET                        = 0xFF

# Length-encoded integer prefixes
LENENC_NULL                       = 0xFB
LENENC_INT2                       = 0xFC
LENENC_INT3                       = 0xFD
LENENC_INT8                       = 0xFE

# Commands
COM_QUIT                          = 0x01
COM_INIT_DB                       = 0x02
COM_QUERY                         = 0x03
COM_PING                          = 0x0E
COM_STMT_PREPARE                  = 0x16
COM_STMT_EXECUTE                  = 0x17
COM_STMT_SEND_LONG_DATA           = 0x18
COM_STMT_CLOSE                    = 0x19
COM_STMT_RESET                    = 0x1A
COM_STMT_FETCH                    = 0x1C

# Column (field) types
MYSQL_TYPE_DECIMAL                = 0
MYSQL_TYPE_TINY                   = 1
MYSQL_TYPE_SHORT                  = 2
MYSQL_TYPE_LONG                   = 3
MYSQL_TYPE_FLOAT                  = 4
MYSQL_TYPE_DOUBLE                 = 5
MYSQL_TYPE_NULL                   = 6
MYSQL_TYPE_TIMESTAMP              = 7
MYSQL_TYPE_LONGLONG               = 8
MYSQL_TYPE_INT24                  = 9
MYSQL_TYPE_DATE                   = 10
MYSQL_TYPE_TIME                   = 11
MYSQL_TYPE_DATETIME               = 12
MYSQL_TYPE_YEAR                   = 13
MYSQL_TYPE_NEWDATE                = 14
MYSQL_TYPE_VARCHAR                = 15
MYSQL_TYPE_BIT                    = 16
MYSQL_TYPE_JSON                   = 245
MYSQL_TYPE_NEWDECIMAL             = 246
MYSQL_TYPE_ENUM                   = 247
MYSQL_TYPE_SET                    = 248
MYSQL_TYPE_TINY_BLOB              = 249
MYSQL_TYPE_MEDIUM_BLOB            = 250
MYSQL_TYPE_LONG_BLOB              = 251
MYSQL_TYPE_BLOB                   = 252
MYSQL_TYPE_VAR_STRING             = 253
MYSQL_TYPE_STRING                 = 254
MYSQL_TYPE_GEOMETRY               = 255

# Parameter type flag sent with COM_STMT_EXECUTE
PARAM_UNSIGNED                    = 0x80

# Column definition flags
NOT_NULL_FLAG                     = 0x0001
PRI_KEY_FLAG                      = 0x0002
UNIQUE_KEY_FLAG                   = 0x0004
MULTIPLE_KEY_FLAG                 = 0x0008
BLOB_FLAG                         = 0x0010
UNSIGNED_FLAG                     = 0x0020
ZEROFILL_FLAG                     = 0x0040
BINARY_FLAG                       = 0x0080
ENUM_FLAG                         = 0x0100
AUTO_INCREMENT_FLAG               = 0x0200
TIMESTAMP_FLAG                    = 0x0400
SET_FLAG                          = 0x0800

# Capability flags
CLIENT_LONG_PASSWORD              = 0x00000001
CLIENT_FOUND_ROWS                 = 0x00000002
CLIENT_LONG_FLAG                  = 0x00000004
CLIENT_CONNECT_WITH_DB            = 0x00000008
CLIENT_PROTOCOL_41                = 0x00000200
CLIENT_TRANSACTIONS               = 0x00002000
CLIENT_SECURE_CONNECTION          = 0x00008000
CLIENT_MULTI_RESULTS              = 0x00020000
CLIENT_PS_MULTI_RESULTS           = 0x00040000
CLIENT_PLUGIN_AUTH                = 0x00080000
CLIENT_CONNECT_ATTRS              = 0x00100000
CLIENT_PLUGIN_AUTH_LENENC_DATA    = 0x00200000
CLIENT_DEPRECATE_EOF              = 0x01000000

CLIENT_CAPABILITIES = (CLIENT_LONG_PASSWORD |
                       CLIENT_FOUND_ROWS |
                       CLIENT_LONG_FLAG |
                       CLIENT_PROTOCOL_41 |
                       CLIENT_TRANSACTIONS |
                       CLIENT_SECURE_CONNECTION |
                       CLIENT_MULTI_RESULTS |
                       CLIENT_PS_MULTI_RESULTS |
                       CLIENT_PLUGIN_AUTH |
                       CLIENT_PLUGIN_AUTH_LENENC_DATA)

# Server status flags
SERVER_STATUS_IN_TRANS            = 0x0001
SERVER_STATUS_AUTOCOMMIT          = 0x0002
SERVER_MORE_RESULTS_EXISTS        = 0x0008
SERVER_STATUS_CURSOR_EXISTS       = 0x0040
SERVER_STATUS_LAST_ROW_SENT       = 0x0080

# Statement attributes
STMT_ATTR_UPDATE_MAX_LENGTH       = 0
STMT_ATTR_CURSOR_TYPE             = 1
STMT_ATTR_PREFETCH_ROWS           = 2

# Cursor types (the COM_STMT_EXECUTE flags byte)
CURSOR_TYPE_NO_CURSOR             = 0
CURSOR_TYPE_READ_ONLY             = 1
CURSOR_TYPE_FOR_UPDATE            = 2
CURSOR_TYPE_SCROLLABLE            = 4

DEFAULT_PREFETCH_ROWS             = 1

# Fetch as many rows as the server has
FETCH_ALL_ROWS                    = 0xFFFFFFFF

# Character sets
BINARY_CHARSET                    = 63

CHARSETS = {'latin1':  (8, 'cp1252'),
            'utf8':    (33, 'utf-8'),
            'utf8mb4': (45, 'utf-8'),
            'binary':  (BINARY_CHARSET, 'latin-1'),
            }

DEFAULT_CHARSET = 'utf8mb4'

# Authentication
NATIVE_PASSWORD                   = 'mysql_native_password'
CACHING_SHA2_PASSWORD             = 'caching_sha2_password'

SHA2_REQUEST_PUBLIC_KEY           = 0x02
SHA2_FAST_AUTH_OK                 = 0x03
SHA2_FULL_AUTH_NEEDED             = 0x04

# Server error codes
ER_DUP_KEY                        = 1022
ER_CON_COUNT_ERROR                = 1040
ER_ACCESS_DENIED_ERROR            = 1045
ER_BAD_NULL_ERROR                 = 1048
ER_BAD_DB_ERROR                   = 1049
ER_TABLE_EXISTS_ERROR             = 1050
ER_SERVER_SHUTDOWN                = 1053
ER_BAD_FIELD_ERROR                = 1054
ER_DUP_ENTRY                      = 1062
ER_PARSE_ERROR                    = 1064
ER_UNKNOWN_ERROR                  = 1105
ER_TABLEACCESS_DENIED_ERROR       = 1142
ER_NO_SUCH_TABLE                  = 1146
ER_LOCK_WAIT_TIMEOUT              = 1205
ER_WRONG_ARGUMENTS                = 1210
ER_LOCK_DEADLOCK                  = 1213
ER_NOT_SUPPORTED_YET              = 1235
ER_UNKNOWN_STMT_HANDLER           = 1243
ER_WARN_DATA_OUT_OF_RANGE         = 1264
ER_TRUNCATED_WRONG_VALUE          = 1292
ER_UNSUPPORTED_PS                 = 1295
ER_QUERY_INTERRUPTED              = 1317
ER_DIVISION_BY_ZERO               = 1365
ER_TRUNCATED_WRONG_VALUE_FOR_FIELD = 1366
ER_DATA_TOO_LONG                  = 1406
ER_ROW_IS_REFERENCED_2            = 1451
ER_NO_REFERENCED_ROW_2            = 1452
ER_INTERNAL_ERROR                 = 1815

# Client error codes, reported the same way as server errors
CR_UNKNOWN_ERROR                  = 2000
CR_SERVER_LOST                    = 2013
CR_COMMANDS_OUT_OF_SYNC           = 2014
CR_PARAMS_NOT_BOUND               = 2031
CR_INVALID_BUFFER_USE             = 2035
CR_UNSUPPORTED_PARAM_TYPE         = 2036
CR_NO_RESULT_SET                  = 2053

SQLSTATE_OK                       = '00000'
SQLSTATE_UNKNOWN                  = 'HY000'


DATA_ERRORS = {ER_WARN_DATA_OUT_OF_RANGE,
               ER_TRUNCATED_WRONG_VALUE,
               ER_DIVISION_BY_ZERO,
               ER_TRUNCATED_WRONG_VALUE_FOR_FIELD,
               ER_DATA_TOO_LONG}

OPERATIONAL_ERRORS = {ER_CON_COUNT_ERROR,
                      ER_ACCESS_DENIED_ERROR,
                      ER_SERVER_SHUTDOWN,
                      ER_LOCK_WAIT_TIMEOUT,
                      ER_LOCK_DEADLOCK,
                      ER_QUERY_INTERRUPTED,
                      CR_SERVER_LOST}

INTERNAL_ERRORS = {ER_UNKNOWN_ERROR,
                   ER_INTERNAL_ERROR,
                   CR_UNKNOWN_ERROR}

INTEGRITY_ERRORS = {ER_DUP_KEY,
                    ER_BAD_NULL_ERROR,
                    ER_DUP_ENTRY,
                    ER_ROW_IS_REFERENCED_2,
                    ER_NO_REFERENCED_ROW_2}

PROGRAMMING_ERRORS = {ER_BAD_DB_ERROR,
                      ER_TABLE_EXISTS_ERROR,
                      ER_BAD_FIELD_ERROR,
                      ER_PARSE_ERROR,
                      ER_TABLEACCESS_DENIED_ERROR,
                      ER_NO_SUCH_TABLE,
                      ER_WRONG_ARGUMENTS,
                      ER_UNKNOWN_STMT_HANDLER,
                      CR_COMMANDS_OUT_OF_SYNC,
                      CR_PARAMS_NOT_BOUND,
                      CR_INVALID_BUFFER_USE,
                      CR_NO_RESULT_SET}

NOT_SUPPORTED_ERRORS = {ER_NOT_SUPPORTED_YET,
                        ER_UNSUPPORTED_PS,
                        CR_UNSUPPORTED_PARAM_TYPE}


stringifyError = {
    ER_DUP_KEY: 'ER_DUP_KEY',
    ER_CON_COUNT_ERROR: 'ER_CON_COUNT_ERROR',
    ER_ACCESS_DENIED_ERROR: 'ER_ACCESS_DENIED_ERROR',
    ER_BAD_NULL_ERROR: 'ER_BAD_NULL_ERROR',
    ER_BAD_DB_ERROR: 'ER_BAD_DB_ERROR',
    ER_TABLE_EXISTS_ERROR: 'ER_TABLE_EXISTS_ERROR',
    ER_SERVER_SHUTDOWN: 'ER_SERVER_SHUTDOWN',
    ER_BAD_FIELD_ERROR: 'ER_BAD_FIELD_ERROR',
    ER_DUP_ENTRY: 'ER_DUP_ENTRY',
    ER_PARSE_ERROR: 'ER_PARSE_ERROR',
    ER_UNKNOWN_ERROR: 'ER_UNKNOWN_ERROR',
    ER_TABLEACCESS_DENIED_ERROR: 'ER_TABLEACCESS_DENIED_ERROR',
    ER_NO_SUCH_TABLE: 'ER_NO_SUCH_TABLE',
    ER_LOCK_WAIT_TIMEOUT: 'ER_LOCK_WAIT_TIMEOUT',
    ER_WRONG_ARGUMENTS: 'ER_WRONG_ARGUMENTS',
    ER_LOCK_DEADLOCK: 'ER_LOCK_DEADLOCK',
    ER_NOT_SUPPORTED_YET: 'ER_NOT_SUPPORTED_YET',
    ER_UNKNOWN_STMT_HANDLER: 'ER_UNKNOWN_STMT_HANDLER',
    ER_WARN_DATA_OUT_OF_RANGE: 'ER_WARN_DATA_OUT_OF_RANGE',
    ER_TRUNCATED_WRONG_VALUE: 'ER_TRUNCATED_WRONG_VALUE',
    ER_UNSUPPORTED_PS: 'ER_UNSUPPORTED_PS',
    ER_QUERY_INTERRUPTED: 'ER_QUERY_INTERRUPTED',
    ER_DIVISION_BY_ZERO: 'ER_DIVISION_BY_ZERO',
    ER_TRUNCATED_WRONG_VALUE_FOR_FIELD: 'ER_TRUNCATED_WRONG_VALUE_FOR_FIELD',
    ER_DATA_TOO_LONG: 'ER_DATA_TOO_LONG',
    ER_ROW_IS_REFERENCED_2: 'ER_ROW_IS_REFERENCED_2',
    ER_NO_REFERENCED_ROW_2: 'ER_NO_REFERENCED_ROW_2',
    ER_INTERNAL_ERROR: 'ER_INTERNAL_ERROR',
    CR_UNKNOWN_ERROR: 'CR_UNKNOWN_ERROR',
    CR_SERVER_LOST: 'CR_SERVER_LOST',
    CR_COMMANDS_OUT_OF_SYNC: 'CR_COMMANDS_OUT_OF_SYNC',
    CR_PARAMS_NOT_BOUND: 'CR_PARAMS_NOT_BOUND',
    CR_INVALID_BUFFER_USE: 'CR_INVALID_BUFFER_USE',
    CR_UNSUPPORTED_PARAM_TYPE: 'CR_UNSUPPORTED_PARAM_TYPE',
    CR_NO_RESULT_SET: 'CR_NO_RESULT_SET',
}

clientErrorMessages = {
    CR_UNKNOWN_ERROR: 'Unknown MySQL error',
    CR_SERVER_LOST: 'Lost connection to MySQL server during query',
    CR_COMMANDS_OUT_OF_SYNC: "Commands out of sync; you can't run this command now",
    CR_PARAMS_NOT_BOUND: 'No data supplied for parameters in prepared statement',
    CR_INVALID_BUFFER_USE: "Can't send long data for non-string/non-binary data types",
    CR_UNSUPPORTED_PARAM_TYPE: 'Using unsupported buffer type',
    CR_NO_RESULT_SET: 'Attempt to read a row while there is no result set'
                      ' associated with the statement',
}


def lookup_code(error_code):
    # type: (int) -> str
    """Return a string-ified version of an error code."""
    return stringifyError.get(error_code, '[UNKNOWN ERROR CODE %d]' % (error_code))
