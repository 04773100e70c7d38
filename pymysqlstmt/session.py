"""Establish and manage a network session with a MySQL server.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ["SessionException", "Session"]

# This module abstracts the transport needed to talk to a MySQL server.  It
# handles the socket and correctly frames and re-assembles packets based on
# their 3-byte length and 1-byte sequence header.  Payloads of 16MiB or more
# are split into several packets, terminated by a shorter one.

import logging
import socket
import struct
from ipaddress import ip_address
from urllib.parse import urlparse

try:
    from typing import Dict, Mapping, Optional, Tuple  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import OperationalError, InterfaceError
from . import protocol

_log = logging.getLogger('pymysqlstmt.session')

MYSQL_PORT = 3306


class SessionException(OperationalError):  # pylint: disable=too-many-ancestors
    """Raised for problems encountered with the network session."""

    pass


class Session(object):
    """A network session with a MySQL server."""

    __port = MYSQL_PORT  # type: int
    __sock = None        # type: Optional[socket.socket]
    __sequence = 0       # type: int

    @property
    def _sock(self):
        # type: () -> socket.socket
        """Return the socket: raise if it's closed."""
        sock = self.__sock
        if sock is None:
            raise SessionException("Session is closed")
        return sock

    def __init__(self, host,            # type: str
                 port=None,             # type: Optional[int]
                 timeout=None,          # type: Optional[float]
                 connect_timeout=None,  # type: Optional[float]
                 read_timeout=None,     # type: Optional[float]
                 options=None           # type: Optional[Mapping[str, str]]
                 ):
        # type: (...) -> None
        if options is None:
            options = {}

        self.__address, _port, ver = self._parse_addr(host, options.get('ipVersion'))
        if port is not None:
            self.__port = port
        elif _port is not None:
            self.__port = _port

        af = socket.AF_INET
        if ver == 6:
            af = socket.AF_INET6

        # for backwards-compatibility, set connect and read timeout to
        # `timeout` if either is not specified
        if connect_timeout is None:
            connect_timeout = timeout
        if read_timeout is None:
            read_timeout = timeout

        self._open_socket(connect_timeout, self.__address, self.__port, af, read_timeout)

    @staticmethod
    def session_options(options):
        # type: (Optional[Mapping[str, str]]) -> Tuple[Dict[str, str], Dict[str, str]]
        """Split into connection attributes and session options.

        Connection attributes are sent to the server during the handshake
        and show up in performance_schema.  Session options are not sent to
        the server, and instead control the local session.

        :return: A tuple of (connection attributes, session options).
        """
        opts = ['password', 'user', 'port', 'ipVersion', 'charset',
                'connectTimeout', 'readTimeout', 'bindTimeZone',
                'resultTimeZone', 'maxStringLength']
        session = {}
        parameters = {}
        if options:
            for key, val in options.items():
                if key in opts:
                    session[key] = val
                else:
                    parameters[key] = val
        return parameters, session

    @staticmethod
    def _to_ipaddr(addr):
        # type: (str) -> Tuple[str, int]
        ipaddr = ip_address(addr)
        return (str(ipaddr), ipaddr.version)

    def _parse_addr(self, addr, ipver):
        # type: (str, Optional[str]) -> Tuple[str, Optional[int], int]
        port = None
        try:
            # v4/v6 addr w/o port e.g. 192.168.1.1, 2001:3200:3200::10
            ip, ver = self._to_ipaddr(addr)
        except ValueError:
            # v4/v6 addr w/port e.g. 192.168.1.1:3306, [2001::10]:3306
            parsed = urlparse('//{}'.format(addr))
            if parsed.hostname is None:
                raise InterfaceError("Invalid Host/IP Address format: %s" % (addr))
            try:
                ip, ver = self._to_ipaddr(parsed.hostname)
                port = parsed.port
            except ValueError:
                parts = addr.split(":")
                if len(parts) == 1:
                    # hostname w/o port e.g. db0
                    ip = addr
                elif len(parts) == 2:
                    # hostname with port e.g. db0:3306
                    ip = parts[0]
                    try:
                        port = int(parts[1])
                    except ValueError:
                        raise InterfaceError("Invalid Host/IP Address Format %s" % addr)
                else:
                    # failed
                    raise InterfaceError("Invalid Host/IP Address Format %s" % addr)

                # select v6/v4 for hostname based on user option
                ver = 4
                if ipver == 'v6':
                    ver = 6

        return ip, port, ver

    def _open_socket(self, connect_timeout, host, port, af, read_timeout):
        # type: (Optional[float], str, int, int, Optional[float]) -> None
        assert self.__sock is None, "Open called with already open socket"
        self.__sock = socket.socket(af, socket.SOCK_STREAM)
        # disable Nagle's algorithm
        self.__sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        # separate connect and read timeout; a long-running statement can
        # keep us waiting for the first byte of the response
        self.__sock.settimeout(connect_timeout)
        try:
            self.__sock.connect((host, port))
        except (OSError, socket.error) as e:
            self.close()
            raise SessionException("Can't connect to MySQL server on %s:%d: %s"
                                   % (host, port, str(e)))
        self.__sock.settimeout(read_timeout)

    @property
    def connected(self):
        # type: () -> bool
        """Return True until the socket is closed, by us or by a failure."""
        return self.__sock is not None

    @property
    def address(self):
        # type: () -> str
        """Return the address of the server."""
        return self.__address

    @property
    def port(self):
        # type: () -> int
        """Return the port of the server."""
        return self.__port

    def _reset_sequence(self):
        # type: () -> None
        """Start a new command: packet sequence numbers restart at 0."""
        self.__sequence = 0

    def send(self, payload):
        # type: (bytes) -> None
        """Send a payload to the server, split into as many packets as needed."""
        sock = self._sock
        data = bytes(payload)
        view = memoryview(data)
        start = 0
        try:
            while True:
                chunk = view[start:start + protocol.MAX_PACKET_LEN]
                header = struct.pack('<I', len(chunk))[:3] + struct.pack('B', self.__sequence)
                self.__sequence = (self.__sequence + 1) & 0xFF
                sock.sendall(header + chunk.tobytes())
                start += len(chunk)
                # A payload that is an exact multiple of the maximum
                # length is terminated with an empty packet.
                if len(chunk) < protocol.MAX_PACKET_LEN:
                    break
        except (OSError, socket.error) as e:
            self.close()
            raise SessionException("Session closed while sending: %s" % (str(e)),
                                   errno=protocol.CR_SERVER_LOST)
        _log.debug("sent %d byte payload", len(data))

    def recv(self):
        # type: () -> bytes
        """Pull the next complete payload from the socket."""
        payload = bytearray()
        try:
            while True:
                header = self.__readFully(protocol.HEADER_LEN)
                length = struct.unpack('<I', header[:3] + b'\0')[0]
                seq = header[3]
                if seq != self.__sequence:
                    raise SessionException(
                        "Packet sequence number wrong: got %d, expected %d"
                        % (seq, self.__sequence))
                self.__sequence = (self.__sequence + 1) & 0xFF
                payload += self.__readFully(length)
                if length < protocol.MAX_PACKET_LEN:
                    break
        except Exception:
            self.close()
            raise

        return bytes(payload)

    def __readFully(self, msgLength):
        # type: (int) -> bytes
        """Pull exactly msgLength raw bytes from the socket."""
        sock = self._sock
        msg = bytearray()
        while msgLength > 0:
            try:
                received = sock.recv(msgLength)
            except socket.timeout:
                raise SessionException("Timed out waiting for the server",
                                       errno=protocol.CR_SERVER_LOST)
            except IOError as e:
                raise SessionException(
                    "Session closed while receiving: network error %s: %s" %
                    (str(e.errno), e.strerror if e.strerror else str(e.args)),
                    errno=protocol.CR_SERVER_LOST)

            if not received:
                raise SessionException(
                    "Session closed waiting for data: wanted length=%d,"
                    " received length=%d"
                    % (msgLength, len(msg)), errno=protocol.CR_SERVER_LOST)
            msg += received
            msgLength -= len(received)

        return bytes(msg)

    def close(self, force=False):
        # type: (bool) -> None
        """Close the current socket connection with the server."""
        sock = self.__sock
        if sock is None:
            return
        try:
            if force:
                try:
                    sock.shutdown(socket.SHUT_RDWR)
                except (OSError, socket.error):
                    # On MacOS this can raise "Socket is not connected"
                    pass
            sock.close()
        finally:
            self.__sock = None
