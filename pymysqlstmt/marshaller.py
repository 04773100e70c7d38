"""Convert binary result rows back into Python values.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Functions:
allocate_slots -- Allocate one output slot per result column.
update_max_length -- Record the longest value of each column of a stored result.
fetch_row -- Fetch and convert the next row of a result set.
fetch_all -- Fetch and convert every remaining row of a result set.
"""

__all__ = ['allocate_slots', 'update_max_length', 'fetch_row', 'fetch_all']

import struct

try:
    from typing import Any, Callable, Dict, List, Optional  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import client_error
from . import datatype
from . import protocol
from .result_set import ColumnDescriptor, OutputSlot, ResultSet  # pylint: disable=unused-import

_SIGNED = {protocol.MYSQL_TYPE_TINY: '<b',
           protocol.MYSQL_TYPE_SHORT: '<h',
           protocol.MYSQL_TYPE_YEAR: '<H',
           protocol.MYSQL_TYPE_INT24: '<i',
           protocol.MYSQL_TYPE_LONG: '<i',
           protocol.MYSQL_TYPE_LONGLONG: '<q'}

_UNSIGNED = {protocol.MYSQL_TYPE_TINY: '<B',
             protocol.MYSQL_TYPE_SHORT: '<H',
             protocol.MYSQL_TYPE_YEAR: '<H',
             protocol.MYSQL_TYPE_INT24: '<I',
             protocol.MYSQL_TYPE_LONG: '<I',
             protocol.MYSQL_TYPE_LONGLONG: '<Q'}


def _to_int(slot, session):
    # type: (OutputSlot, Any) -> Optional[int]
    col = slot.column
    if col.type_code == protocol.MYSQL_TYPE_NULL:
        return None
    fmt = _UNSIGNED[col.type_code] if col.unsigned else _SIGNED[col.type_code]
    return struct.unpack(fmt, slot.data)[0]


def _to_tiny(slot, session):
    # type: (OutputSlot, Any) -> Any
    # every TINY value is one byte on the binary wire: only the declared
    # width of TINYINT(1) (and BOOL) marks a boolean
    if slot.column.length == 1:
        return slot.data[0] != 0
    return _to_int(slot, session)


def _to_float(slot, session):
    # type: (OutputSlot, Any) -> float
    fmt = '<f' if slot.column.type_code == protocol.MYSQL_TYPE_FLOAT else '<d'
    return struct.unpack(fmt, slot.data)[0]


def _to_decimal_text(slot, session):
    # type: (OutputSlot, Any) -> str
    return slot.data.decode('ascii')


def _to_text(slot, session):
    # type: (OutputSlot, Any) -> Any
    # JSON is reported with the binary charset but is always utf8mb4 text
    if slot.column.type_code == protocol.MYSQL_TYPE_JSON:
        return slot.data.decode('utf-8', 'ignore' if slot.truncated else 'strict')
    if slot.column.binary:
        return slot.data
    # a truncated value may end part way through a character
    return slot.data.decode(session.encoding, 'ignore' if slot.truncated else 'strict')


def _to_timestamp(slot, session):
    # type: (OutputSlot, Any) -> Any
    data = slot.data
    length = len(data)
    if length == 0:
        # 0000-00-00 00:00:00
        return None
    year, month, day = struct.unpack('<HBB', data[:4])
    hour = minute = second = micros = 0
    if length >= 7:
        hour, minute, second = struct.unpack('<BBB', data[4:7])
    if length >= 11:
        micros = struct.unpack('<I', data[7:11])[0]
    dt = datatype.TimestampFromFields(
        datatype.DateTimeFields(year, month, day, hour, minute, second),
        session.result_timezone)
    if dt is not None and micros:
        dt = dt.replace(microsecond=micros)
    return dt


def _to_timedelta(slot, session):
    # type: (OutputSlot, Any) -> Any
    data = slot.data
    if len(data) == 0:
        return datatype.TimeDeltaFromFields(False, 0, 0, 0, 0)
    negative, days, hours, minutes, seconds = struct.unpack('<BIBBB', data[:8])
    micros = 0
    if len(data) >= 12:
        micros = struct.unpack('<I', data[8:12])[0]
    return datatype.TimeDeltaFromFields(bool(negative), days, hours, minutes,
                                        seconds, micros)


def _to_bit(slot, session):
    # type: (OutputSlot, Any) -> int
    return int.from_bytes(slot.data, 'big')


CONVERTERS = {
    protocol.MYSQL_TYPE_SHORT: _to_int,
    protocol.MYSQL_TYPE_LONG: _to_int,
    protocol.MYSQL_TYPE_LONGLONG: _to_int,
    protocol.MYSQL_TYPE_INT24: _to_int,
    protocol.MYSQL_TYPE_YEAR: _to_int,
    protocol.MYSQL_TYPE_NULL: _to_int,
    protocol.MYSQL_TYPE_TINY: _to_tiny,
    protocol.MYSQL_TYPE_FLOAT: _to_float,
    protocol.MYSQL_TYPE_DOUBLE: _to_float,
    protocol.MYSQL_TYPE_DECIMAL: _to_decimal_text,
    protocol.MYSQL_TYPE_NEWDECIMAL: _to_decimal_text,
    protocol.MYSQL_TYPE_STRING: _to_text,
    protocol.MYSQL_TYPE_VAR_STRING: _to_text,
    protocol.MYSQL_TYPE_VARCHAR: _to_text,
    protocol.MYSQL_TYPE_ENUM: _to_text,
    protocol.MYSQL_TYPE_SET: _to_text,
    protocol.MYSQL_TYPE_JSON: _to_text,
    protocol.MYSQL_TYPE_TINY_BLOB: _to_text,
    protocol.MYSQL_TYPE_MEDIUM_BLOB: _to_text,
    protocol.MYSQL_TYPE_LONG_BLOB: _to_text,
    protocol.MYSQL_TYPE_BLOB: _to_text,
    protocol.MYSQL_TYPE_GEOMETRY: _to_text,
    protocol.MYSQL_TYPE_DATE: _to_timestamp,
    protocol.MYSQL_TYPE_NEWDATE: _to_timestamp,
    protocol.MYSQL_TYPE_DATETIME: _to_timestamp,
    protocol.MYSQL_TYPE_TIMESTAMP: _to_timestamp,
    protocol.MYSQL_TYPE_TIME: _to_timedelta,
    protocol.MYSQL_TYPE_BIT: _to_bit,
}  # type: Dict[int, Callable[[OutputSlot, Any], Any]]

# Only character data is subject to the string length limit
_CAPPED = frozenset([protocol.MYSQL_TYPE_STRING,
                     protocol.MYSQL_TYPE_VAR_STRING,
                     protocol.MYSQL_TYPE_VARCHAR,
                     protocol.MYSQL_TYPE_ENUM,
                     protocol.MYSQL_TYPE_SET,
                     protocol.MYSQL_TYPE_JSON])


def allocate_slots(columns, max_string_length=None):
    # type: (List[ColumnDescriptor], Optional[int]) -> List[OutputSlot]
    """Allocate one output slot per column.

    :param max_string_length: If set, string values are truncated to this
        many bytes.
    :raises NotSupportedError: If a column has a type we can't convert.
    """
    slots = []  # type: List[OutputSlot]
    for col in columns:
        if col.type_code not in CONVERTERS:
            client_error(protocol.CR_UNSUPPORTED_PARAM_TYPE)
        limit = max_string_length if col.type_code in _CAPPED else None
        slots.append(OutputSlot(col, limit))
    return slots


def update_max_length(session, resultset):
    # type: (Any, ResultSet) -> None
    """Record the longest wire value of each column of a stored result."""
    for col in resultset.columns:
        col.max_length = 0
    for row in resultset.results:
        values = session.unpack_binary_row(row, resultset.columns)
        for col, raw in zip(resultset.columns, values):
            if raw is not None and len(raw) > col.max_length:
                col.max_length = len(raw)


def fetch_row(session, resultset, slots):
    # type: (Any, ResultSet, List[OutputSlot]) -> Optional[Dict[str, Any]]
    """Fetch the next row and convert it to a dict keyed by column name.

    :returns: The row, or None when there are no more rows.
    """
    payload = resultset.fetchone(session)
    if payload is None:
        return None
    row = {}  # type: Dict[str, Any]
    for slot, raw in zip(slots, session.unpack_binary_row(payload, resultset.columns)):
        slot.write(raw)
        if slot.is_null:
            row[slot.column.name] = None
        else:
            row[slot.column.name] = CONVERTERS[slot.column.type_code](slot, session)
    return row


def fetch_all(session, resultset, slots):
    # type: (Any, ResultSet, List[OutputSlot]) -> List[Dict[str, Any]]
    """Fetch and convert every remaining row."""
    rows = []  # type: List[Dict[str, Any]]
    while True:
        row = fetch_row(session, resultset, slots)
        if row is None:
            return rows
        rows.append(row)
