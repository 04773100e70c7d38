"""A module for housing the EncodedSession class.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
EncodedSession -- Class for representing an encoded session with the server.
"""

__all__ = ['EncodedSession']

import os
import struct
import logging
import datetime  # pylint: disable=unused-import

try:
    from typing import Any, Dict, List, Mapping, Optional, Tuple  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import EndOfStream, InterfaceError, ProgrammingError
from .exception import db_error_handler

from . import __version__
from . import crypt
from . import protocol
from . import datatype
from . import session
from . import statement
from . import result_set
from .datatype import LOCALZONE_NAME

_log = logging.getLogger('pymysqlstmt.encodedsession')


class EncodedSession(session.Session):  # pylint: disable=too-many-public-methods
    """Class for representing an encoded session with the server.

    Public Functions:
    putInt1 -- Appends a 1-byte integer to the message.
    putInt2 -- Appends a 2-byte little-endian integer to the message.
    putInt4 -- Appends a 4-byte little-endian integer to the message.
    putInt8 -- Appends an 8-byte little-endian integer to the message.
    putLenencInt -- Appends a length-encoded integer to the message.
    putLenencString -- Appends a length-encoded string to the message.
    putNulString -- Appends a NUL-terminated string to the message.
    putBytes -- Appends raw bytes to the message.
    putSlot -- Appends the value held by a bind slot to the message.
    getInt1 -- Read the next 1-byte integer off the session.
    getInt2 -- Read the next 2-byte integer off the session.
    getInt3 -- Read the next 3-byte integer off the session.
    getInt4 -- Read the next 4-byte integer off the session.
    getInt8 -- Read the next 8-byte integer off the session.
    getLenencInt -- Read the next length-encoded integer off the session.
    getLenencBytes -- Read the next length-encoded string off the session.
    getNulBytes -- Read the next NUL-terminated string off the session.
    getRemaining -- Read the rest of the current packet.
    open_database -- Perform the connection handshake.
    prepare_statement -- Prepare a statement on the server.
    execute_statement -- Execute a prepared statement with bound parameters.
    read_binary_row -- Read the next row of a pending result set.
    unpack_binary_row -- Split a binary row into its column values.
    cursor_fetch -- Fetch rows from an open server cursor.
    reset_statement -- Reset a prepared statement on the server.
    close_statement -- Deallocate a prepared statement on the server.
    send_long_data -- Send a chunk of parameter data ahead of execution.
    """

    # This is managed by the connection
    closed = False

    __output = None  # type: bytearray
    __input = None   # type: bytes
    __inpos = 0      # type: int

    __serverVersion = ''      # type: str
    __connectionID = -1       # type: int
    __capabilities = 0        # type: int
    __status = 0              # type: int
    __warnings = 0            # type: int

    # The result set whose rows are still waiting on the wire
    __pending = None  # type: Optional[result_set.ResultSet]

    def __init__(self, host, options=None, **kwargs):
        # type: (str, Optional[Mapping[str, str]], Any) -> None
        """Construct an EncodedSession object."""
        self.__output = bytearray()
        self.__input = b''
        charset = protocol.DEFAULT_CHARSET
        if options and options.get('charset'):
            charset = options['charset']
        if charset not in protocol.CHARSETS:
            raise ProgrammingError('Unknown character set ' + charset)
        self.__charset = charset
        self.__charsetId, self.__encoding = protocol.CHARSETS[charset]
        self.__bind_timezone_name = 'UTC'
        self.__result_timezone_name = LOCALZONE_NAME
        self.__bind_timezone = datatype.UTC    # type: datetime.tzinfo
        self.__result_timezone = datatype.LOCALZONE  # type: datetime.tzinfo
        self.max_string_length = None  # type: Optional[int]
        super(EncodedSession, self).__init__(host, options=options, **kwargs)

    @property
    def server_version(self):
        # type: () -> str
        """Return the version string sent by the server."""
        return self.__serverVersion

    @property
    def connection_id(self):
        # type: () -> int
        """Return the server's ID for this connection, or -1 if unknown."""
        return self.__connectionID

    @property
    def capabilities(self):
        # type: () -> int
        """Return the capability flags agreed with the server."""
        return self.__capabilities

    @property
    def server_status(self):
        # type: () -> int
        """Return the status flags from the last OK or EOF packet."""
        return self.__status

    @property
    def warning_count(self):
        # type: () -> int
        """Return the warning count from the last OK or EOF packet."""
        return self.__warnings

    @property
    def charset(self):
        # type: () -> str
        return self.__charset

    @property
    def encoding(self):
        # type: () -> str
        """Return the Python codec matching the connection character set."""
        return self.__encoding

    @property
    def bind_timezone_name(self):
        # type: () -> str
        """ name of the timezone bound DATETIME parameters are sent in """
        return self.__bind_timezone_name

    @bind_timezone_name.setter
    def bind_timezone_name(self, tzname):
        # type: (str) -> None
        # fails if tzname is bad
        self.__bind_timezone = datatype.get_timezone(tzname)
        self.__bind_timezone_name = tzname

    @property
    def bind_timezone(self):
        # type: () -> datetime.tzinfo
        return self.__bind_timezone

    @property
    def result_timezone_name(self):
        # type: () -> str
        """ name of the timezone DATETIME results are placed in """
        return self.__result_timezone_name

    @result_timezone_name.setter
    def result_timezone_name(self, tzname):
        # type: (str) -> None
        self.__result_timezone = datatype.get_timezone(tzname)
        self.__result_timezone_name = tzname

    @property
    def result_timezone(self):
        # type: () -> datetime.tzinfo
        return self.__result_timezone

    def open_database(self, db_name, user, password, parameters):  # pylint: disable=too-many-branches,too-many-statements
        # type: (Optional[str], str, Optional[str], Dict[str, str]) -> None
        """Perform the handshake as a client of a MySQL server.

        :param db_name: Name of the default database, or None.
        :param user: Name of the user to authenticate as.
        :param password: The user's password.
        :param parameters: Connection attributes to send to the server.
        """
        self._reset_sequence()
        self._readPacket()

        protocolVersion = self.getInt1()
        if protocolVersion != 10:
            raise InterfaceError('Unsupported protocol version %d' % (protocolVersion))
        self.__serverVersion = self.getNulBytes().decode('latin-1')
        self.__connectionID = self.getInt4()
        salt = self.getBytes(8)
        self.getInt1()  # filler
        serverCaps = self.getInt2()
        plugin = protocol.NATIVE_PASSWORD
        if self._hasBytes(1):
            self.getInt1()  # server charset
            self.__status = self.getInt2()
            serverCaps |= self.getInt2() << 16
            saltLen = self.getInt1()
            self.getBytes(10)  # reserved
            if serverCaps & protocol.CLIENT_SECURE_CONNECTION:
                # The second part is NUL-terminated
                salt += self.getBytes(max(13, saltLen - 8))[:-1]
            if serverCaps & protocol.CLIENT_PLUGIN_AUTH:
                plugin = self.getNulBytes().decode('latin-1')

        if not serverCaps & protocol.CLIENT_PROTOCOL_41:
            raise InterfaceError('Server %s does not support the 4.1 protocol'
                                 % (self.__serverVersion))

        caps = protocol.CLIENT_CAPABILITIES & serverCaps
        if db_name:
            caps |= protocol.CLIENT_CONNECT_WITH_DB
        attrs = parameters.copy()
        if 'program_name' not in attrs:
            attrs['program_name'] = 'pymysqlstmt'
        attrs['_client_name'] = 'pymysqlstmt'
        attrs['_client_version'] = __version__
        attrs['_pid'] = str(os.getpid())
        if serverCaps & protocol.CLIENT_CONNECT_ATTRS:
            caps |= protocol.CLIENT_CONNECT_ATTRS
        self.__capabilities = caps

        _log.debug("server %s connection %d: authenticating %s with %s",
                   self.__serverVersion, self.__connectionID, user, plugin)

        pwd = password.encode('utf-8') if password else b''
        if plugin not in (protocol.NATIVE_PASSWORD, protocol.CACHING_SHA2_PASSWORD):
            # We'll be switched to a plugin we know
            plugin = protocol.NATIVE_PASSWORD
        authResponse = crypt.scramble(plugin, pwd, salt)

        self.putInt4(caps)
        self.putInt4(protocol.MAX_PACKET_LEN)
        self.putInt1(self.__charsetId)
        self.putBytes(b'\0' * 23)
        self.putNulString(user.encode(self.__encoding))
        if caps & protocol.CLIENT_PLUGIN_AUTH_LENENC_DATA:
            self.putLenencString(authResponse)
        else:
            self.putInt1(len(authResponse)).putBytes(authResponse)
        if caps & protocol.CLIENT_CONNECT_WITH_DB:
            self.putNulString(db_name.encode(self.__encoding))  # type: ignore[union-attr]
        if caps & protocol.CLIENT_PLUGIN_AUTH:
            self.putNulString(plugin.encode('latin-1'))
        if caps & protocol.CLIENT_CONNECT_ATTRS:
            packed = bytearray()
            for (k, v) in attrs.items():
                packed += self._lenencString(k.encode('utf-8'))
                packed += self._lenencString(v.encode('utf-8'))
            self.putLenencString(bytes(packed))

        self._exchangeMessages()
        self._authenticate(plugin, pwd, salt)

    def _authenticate(self, plugin, password, salt):
        # type: (str, bytes, bytes) -> None
        """Complete authentication once the handshake response is sent."""
        while True:
            marker = self._peekMarker()
            if marker == protocol.OK_PACKET:
                self._readOk()
                _log.debug("authenticated with %s", plugin)
                return

            if marker == protocol.EOF_PACKET:
                # Authentication switch request
                self.getInt1()
                plugin = self.getNulBytes().decode('latin-1')
                salt = self.getRemaining().rstrip(b'\0')
                _log.debug("server requested switch to %s", plugin)
                self.putBytes(crypt.scramble(plugin, password, salt))
                self._exchangeMessages()
                continue

            if marker == protocol.AUTH_MORE_DATA and plugin == protocol.CACHING_SHA2_PASSWORD:
                self.getInt1()
                state = self.getInt1()
                if state == protocol.SHA2_FAST_AUTH_OK:
                    self._readPacket()
                    continue
                if state != protocol.SHA2_FULL_AUTH_NEEDED:
                    raise InterfaceError('Unexpected caching_sha2_password state %d' % (state))
                self.putInt1(protocol.SHA2_REQUEST_PUBLIC_KEY)
                self._exchangeMessages()
                if self.getInt1() != protocol.AUTH_MORE_DATA:
                    raise InterfaceError('Expected the server public key')
                publicKey = self.getRemaining()
                self.putBytes(crypt.sha2_rsa_encrypt(password, salt, publicKey))
                self._exchangeMessages()
                continue

            raise InterfaceError('Unexpected packet 0x%02x during authentication' % (marker))

    def send_close(self):
        # type: () -> None
        """Tell the server we're going away."""
        self._putCommand(protocol.COM_QUIT)
        self._exchangeMessages(getResponse=False)

    def test_connection(self):
        # type: () -> None
        """Ping the server."""
        self._putCommand(protocol.COM_PING)
        self._exchangeMessages()
        self._readOk()

    # Prepared statement commands

    def prepare_statement(self, query):
        # type: (str) -> statement.PreparedStatement
        """Prepare QUERY on the server."""
        self._putCommand(protocol.COM_STMT_PREPARE)
        self.putBytes(query.encode(self.__encoding))
        self._exchangeMessages()

        if self.getInt1() != protocol.OK_PACKET:
            raise InterfaceError('Malformed COM_STMT_PREPARE response')
        stmt_id = self.getInt4()
        num_columns = self.getInt2()
        num_params = self.getInt2()
        self.getInt1()  # filler
        if self._hasBytes(2):
            self.__warnings = self.getInt2()

        params = self._readColumnDefinitions(num_params)
        columns = self._readColumnDefinitions(num_columns)

        _log.debug("prepared statement %d: %d params, %d columns",
                   stmt_id, num_params, num_columns)
        return statement.PreparedStatement(stmt_id, num_params, params, columns)

    def execute_statement(self, prepared, slots, cursor_type=protocol.CURSOR_TYPE_NO_CURSOR):
        # type: (statement.PreparedStatement, List[Any], int) -> statement.ExecutionResult
        """Execute a prepared statement with the given bind slots.

        If the statement returns a result set its rows are left pending on
        the wire (or in the server cursor) for the returned ResultSet.
        """
        self._putCommand(protocol.COM_STMT_EXECUTE)
        self.putInt4(prepared.handle)
        self.putInt1(cursor_type)
        self.putInt4(1)  # iteration count

        if prepared.parameter_count > 0:
            bitmap = bytearray((len(slots) + 7) // 8)
            for i, slot in enumerate(slots):
                if slot.is_null:
                    bitmap[i // 8] |= 1 << (i % 8)
            self.putBytes(bytes(bitmap))
            self.putInt1(1)  # new params bound
            for slot in slots:
                self.putInt1(slot.type_code)
                self.putInt1(protocol.PARAM_UNSIGNED if slot.unsigned else 0)
            for slot in slots:
                if not slot.is_null and not slot.long_data:
                    self.putSlot(slot)

        self._exchangeMessages()

        if self._peekMarker() == protocol.OK_PACKET:
            affected, insert_id = self._readOk()
            return statement.ExecutionResult(prepared, affected, insert_id)

        columns = self._readColumnDefinitions(self.getLenencInt())
        cursor = bool(self.__status & protocol.SERVER_STATUS_CURSOR_EXISTS)
        rs = result_set.ResultSet(prepared.handle, columns, cursor=cursor)
        if not cursor:
            self.__pending = rs
        return statement.ExecutionResult(prepared, -1, 0, rs)

    def read_binary_row(self):
        # type: () -> Optional[bytes]
        """Read the next binary row of the pending result set.

        :returns: The row payload, or None once the result set is complete.
        """
        try:
            self._readPacket()
        except Exception:
            self.__pending = None
            raise
        if self._isEof():
            self._readEof()
            self.__pending = None
            return None
        return self.__input

    def cursor_fetch(self, stmt_id, num_rows):
        # type: (int, int) -> Tuple[List[bytes], bool]
        """Fetch up to NUM_ROWS rows from the statement's server cursor.

        :returns: A tuple of (row payloads, whether the last row was sent).
        """
        self._putCommand(protocol.COM_STMT_FETCH)
        self.putInt4(stmt_id).putInt4(num_rows)
        self._exchangeMessages()

        rows = []  # type: List[bytes]
        while not self._isEof():
            rows.append(self.__input)
            self._readPacket()
        self._readEof()
        last = bool(self.__status & protocol.SERVER_STATUS_LAST_ROW_SENT)
        _log.debug("fetched %d rows from cursor %d (last=%s)", len(rows), stmt_id, last)
        return rows, last

    def reset_statement(self, stmt_id):
        # type: (int) -> None
        """Reset the statement: close its cursor and discard long data."""
        self._putCommand(protocol.COM_STMT_RESET).putInt4(stmt_id)
        self._exchangeMessages()
        self._readOk()

    def close_statement(self, stmt_id):
        # type: (int) -> None
        """Deallocate the statement.  The server doesn't reply."""
        self._putCommand(protocol.COM_STMT_CLOSE).putInt4(stmt_id)
        self._exchangeMessages(getResponse=False)

    def send_long_data(self, stmt_id, param_id, data):
        # type: (int, int, bytes) -> None
        """Send a chunk of data for a parameter.  The server doesn't reply."""
        self._putCommand(protocol.COM_STMT_SEND_LONG_DATA)
        self.putInt4(stmt_id).putInt2(param_id).putBytes(data)
        self._exchangeMessages(getResponse=False)

    def discard_pending(self):
        # type: () -> None
        """Read and drop any rows still pending from an unbuffered result."""
        owner = self.__pending
        if owner is None:
            return
        count = 0
        while self.read_binary_row() is not None:
            count += 1
        owner.discard()
        _log.debug("discarded %d pending rows of statement %d", count, owner.handle)

    def unpack_binary_row(self, payload, columns):
        # type: (bytes, List[result_set.ColumnDescriptor]) -> List[Optional[bytes]]
        """Split a binary protocol row into the wire bytes of each column.

        NULL columns are returned as None.
        """
        self.__input = payload
        self.__inpos = 0
        if self.getInt1() != protocol.OK_PACKET:
            raise InterfaceError('Malformed binary row')
        ncols = len(columns)
        # The NULL bitmap of result rows is offset by 2 bits
        bitmap = self.getBytes((ncols + 9) // 8)
        values = []  # type: List[Optional[bytes]]
        for i, col in enumerate(columns):
            bit = i + 2
            if bitmap[bit // 8] & (1 << (bit % 8)):
                values.append(None)
                continue
            width = FIXED_WIDTHS.get(col.type_code)
            if width is not None:
                values.append(self.getBytes(width))
            elif col.type_code in TEMPORAL_TYPES:
                values.append(self.getBytes(self.getInt1()))
            else:
                values.append(self.getLenencBytes())
        return values

    def _readColumnDefinitions(self, count):
        # type: (int) -> List[result_set.ColumnDescriptor]
        """Read COUNT column definitions and the EOF packet that follows."""
        columns = []  # type: List[result_set.ColumnDescriptor]
        if count == 0:
            return columns
        for _ in range(count):
            self._readPacket()
            columns.append(self._parseColumnDefinition())
        self._readPacket()
        self._readEof()
        return columns

    def _parseColumnDefinition(self):
        # type: () -> result_set.ColumnDescriptor
        """Parse a Protocol::ColumnDefinition41 packet."""
        enc = self.__encoding
        catalog = self.getLenencBytes().decode(enc)
        schema = self.getLenencBytes().decode(enc)
        table = self.getLenencBytes().decode(enc)
        self.getLenencBytes()  # org_table
        name = self.getLenencBytes().decode(enc)
        self.getLenencBytes()  # org_name
        self.getLenencInt()    # length of the fixed fields
        charset = self.getInt2()
        length = self.getInt4()
        type_code = self.getInt1()
        flags = self.getInt2()
        decimals = self.getInt1()
        return result_set.ColumnDescriptor(name, type_code, length, flags=flags,
                                           charset=charset, decimals=decimals,
                                           catalog=catalog, schema=schema,
                                           table=table)

    # Methods to put values into the next message

    def _putCommand(self, command):
        # type: (int) -> EncodedSession
        """Start a new command message.

        Rows still pending from an unbuffered result set are drained first:
        the server won't read a new command until they've been consumed.

        :type command: int
        """
        self.discard_pending()
        self._reset_sequence()
        self.__output = bytearray()
        self.putInt1(command)
        return self

    def putInt1(self, value):
        # type: (int) -> EncodedSession
        self.__output += struct.pack('<B', value)
        return self

    def putInt2(self, value):
        # type: (int) -> EncodedSession
        self.__output += struct.pack('<H', value)
        return self

    def putInt4(self, value):
        # type: (int) -> EncodedSession
        self.__output += struct.pack('<I', value)
        return self

    def putInt8(self, value):
        # type: (int) -> EncodedSession
        self.__output += struct.pack('<Q', value)
        return self

    @staticmethod
    def _lenencInt(value):
        # type: (int) -> bytes
        if value < 0xFB:
            return struct.pack('<B', value)
        if value < (1 << 16):
            return struct.pack('<BH', protocol.LENENC_INT2, value)
        if value < (1 << 24):
            return struct.pack('<BI', protocol.LENENC_INT3, value)[:4]
        return struct.pack('<BQ', protocol.LENENC_INT8, value)

    @staticmethod
    def _lenencString(value):
        # type: (bytes) -> bytes
        return EncodedSession._lenencInt(len(value)) + value

    def putLenencInt(self, value):
        # type: (int) -> EncodedSession
        """Append a length-encoded integer to the message."""
        self.__output += self._lenencInt(value)
        return self

    def putLenencString(self, value):
        # type: (bytes) -> EncodedSession
        """Append a length-encoded string to the message."""
        self.__output += self._lenencString(value)
        return self

    def putNulString(self, value):
        # type: (bytes) -> EncodedSession
        """Append a NUL-terminated string to the message."""
        self.__output += value
        self.__output += b'\0'
        return self

    def putBytes(self, value):
        # type: (bytes) -> EncodedSession
        self.__output += value
        return self

    def putSlot(self, slot):
        # type: (Any) -> EncodedSession
        """Append the encoded value of a bind slot to the message."""
        if slot.length_encoded:
            return self.putLenencString(slot.buffer)
        return self.putBytes(slot.buffer)

    # Methods to get values out of the last message

    def getInt1(self):
        # type: () -> int
        return self._takeBytes(1)[0]

    def getInt2(self):
        # type: () -> int
        return struct.unpack('<H', self._takeBytes(2))[0]

    def getInt3(self):
        # type: () -> int
        return struct.unpack('<I', self._takeBytes(3) + b'\0')[0]

    def getInt4(self):
        # type: () -> int
        return struct.unpack('<I', self._takeBytes(4))[0]

    def getInt8(self):
        # type: () -> int
        return struct.unpack('<Q', self._takeBytes(8))[0]

    def getLenencInt(self):
        # type: () -> Optional[int]
        """Read the next length-encoded integer; None for the NULL marker."""
        first = self.getInt1()
        if first < 0xFB:
            return first
        if first == protocol.LENENC_NULL:
            return None
        if first == protocol.LENENC_INT2:
            return self.getInt2()
        if first == protocol.LENENC_INT3:
            return self.getInt3()
        return self.getInt8()

    def getLenencBytes(self):
        # type: () -> bytes
        length = self.getLenencInt()
        if length is None:
            return b''
        return self.getBytes(length)

    def getNulBytes(self):
        # type: () -> bytes
        """Read a NUL-terminated string, or the rest of the packet if unterminated."""
        end = self.__input.find(b'\0', self.__inpos)
        if end < 0:
            return self.getRemaining()
        try:
            return self.__input[self.__inpos:end]
        finally:
            self.__inpos = end + 1

    def getBytes(self, length):
        # type: (int) -> bytes
        return self._takeBytes(length)

    def getRemaining(self):
        # type: () -> bytes
        return self._takeBytes(len(self.__input) - self.__inpos)

    def _exchangeMessages(self, getResponse=True):
        # type: (bool) -> None
        """Send the pending message and read a response from the server.

        Packets sent without _putCommand() (the authentication exchange)
        continue the sequence of the packet they answer.
        """
        out = bytes(self.__output)
        self.__output = bytearray()

        self.send(out)

        if getResponse is True:
            self._readPacket()

    def _readPacket(self):
        # type: () -> None
        """Read the next packet into the input buffer.  Raise on ERR."""
        self.__input = self.recv()
        self.__inpos = 0
        if self.__input and self.__input[0] == protocol.ERR_PACKET:
            self.__pending = None
            self.getInt1()
            errno = self.getInt2()
            sqlstate = protocol.SQLSTATE_UNKNOWN
            if self._hasBytes(1) and self.__input[self.__inpos:self.__inpos + 1] == b'#':
                self.getInt1()
                sqlstate = self.getBytes(5).decode('latin-1')
            message = self.getRemaining().decode(self.__encoding, 'replace')
            _log.debug("server error %d (%s): %s", errno, sqlstate, message)
            db_error_handler(errno, sqlstate, message)

    def _readOk(self):
        # type: () -> Tuple[int, int]
        """Parse an OK packet.

        :returns: A tuple of (affected rows, last insert id).
        """
        if self.getInt1() != protocol.OK_PACKET:
            raise InterfaceError('Expected an OK packet')
        affected = self.getLenencInt() or 0
        insert_id = self.getLenencInt() or 0
        if self._hasBytes(4):
            self.__status = self.getInt2()
            self.__warnings = self.getInt2()
        return affected, insert_id

    def _isEof(self):
        # type: () -> bool
        return (len(self.__input) < 9
                and self.__input[:1] == struct.pack('<B', protocol.EOF_PACKET))

    def _readEof(self):
        # type: () -> None
        """Parse an EOF packet."""
        if not self._isEof():
            raise InterfaceError('Expected an EOF packet')
        self.getInt1()
        if self._hasBytes(4):
            self.__warnings = self.getInt2()
            self.__status = self.getInt2()

    # Protected utility routines

    def _hasBytes(self, length):
        # type: (int) -> bool
        return self.__inpos + length <= len(self.__input)

    def _peekMarker(self):
        # type: () -> int
        """Peek the first byte of the packet. (Does not move inpos)."""
        if not self._hasBytes(1):
            raise EndOfStream('end of stream reached')
        return self.__input[self.__inpos]

    def _takeBytes(self, length):
        # type: (int) -> bytes
        """Get the next length of bytes off the session.

        :type length: int
        :rtype: bytes
        """
        if not self._hasBytes(length):
            raise EndOfStream('end of stream reached (need %d bytes)' % (length))
        try:
            return self.__input[self.__inpos:self.__inpos + length]
        finally:
            self.__inpos += length


# Bytes on the wire for the fixed-width binary result types
FIXED_WIDTHS = {protocol.MYSQL_TYPE_TINY: 1,
                protocol.MYSQL_TYPE_SHORT: 2,
                protocol.MYSQL_TYPE_YEAR: 2,
                protocol.MYSQL_TYPE_INT24: 4,
                protocol.MYSQL_TYPE_LONG: 4,
                protocol.MYSQL_TYPE_LONGLONG: 8,
                protocol.MYSQL_TYPE_FLOAT: 4,
                protocol.MYSQL_TYPE_DOUBLE: 8,
                protocol.MYSQL_TYPE_NULL: 0,
                }

# Temporal values are sent with a 1-byte length prefix
TEMPORAL_TYPES = frozenset([protocol.MYSQL_TYPE_DATE,
                            protocol.MYSQL_TYPE_NEWDATE,
                            protocol.MYSQL_TYPE_DATETIME,
                            protocol.MYSQL_TYPE_TIMESTAMP,
                            protocol.MYSQL_TYPE_TIME])
