"""A module for housing the datatype classes.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Binary -- Class for a Binary object
DateTimeFields -- Calendar fields exchanged with the server for temporal values.

Exported Functions:
DateFromTicks -- Converts ticks to a Date object.
TimeFromTicks -- Converts ticks to a Time object.
TimestampFromTicks -- Converts ticks to a Timestamp object.
TimestampToFields -- Converts a Timestamp object to calendar fields.
DateToFields -- Converts a Date object to calendar fields.
TimestampFromFields -- Converts calendar fields to a Timestamp object.
TimeDeltaFromFields -- Converts TIME fields to a timedelta object.
TypeObjectFromMysql -- Converts a MySQL column type to a TypeObject variable.
get_timezone -- Returns a tzinfo for a timezone name.

TypeObject Variables:
STRING -- TypeObject(str)
BINARY -- TypeObject(bytes)
NUMBER -- TypeObject(int, float, decimal.Decimal)
DATETIME -- TypeObject(datetime.datetime, datetime.date, datetime.time)
ROWID -- TypeObject()
"""

__all__ = ['Date', 'Time', 'Timestamp', 'DateFromTicks', 'TimeFromTicks',
           'TimestampFromTicks', 'Binary', 'STRING', 'BINARY', 'NUMBER',
           'DATETIME', 'ROWID', 'Undefined', 'TypeObjectFromMysql']

import sys
import time
import decimal
from collections import namedtuple
from datetime import datetime as Timestamp, date as Date, time as Time
from datetime import timedelta as TimeDelta
from datetime import tzinfo  # pylint: disable=unused-import

try:
    from typing import Optional, Union  # pylint: disable=unused-import
except ImportError:
    pass

import tzlocal
from . import protocol
from .exception import DataError, ProgrammingError

# zoneinfo.ZoneInfo is preferred but not introduced until python3.9
if sys.version_info >= (3, 9):
    # used for python>=3.9 with support for zoneinfo.ZoneInfo
    from zoneinfo import ZoneInfo
    from datetime import timezone
    UTC = timezone.utc

    def timezone_aware(tstamp, tz_info):
        # type: (Timestamp, tzinfo) -> Timestamp
        return tstamp.replace(tzinfo=tz_info)

else:
    # used for python<3.9 without support for zoneinfo.ZoneInfo
    from pytz import utc as UTC
    from pytz import timezone as ZoneInfo

    def timezone_aware(tstamp, tz_info):
        # type: (Timestamp, tzinfo) -> Timestamp
        return tz_info.localize(tstamp, is_dst=None)  # type: ignore[attr-defined]

LOCALZONE = tzlocal.get_localzone()

if hasattr(tzlocal, 'get_localzone_name'):
    # tzlocal >= 3.0
    LOCALZONE_NAME = tzlocal.get_localzone_name()
else:
    # tzlocal < 3.0
    # local_tz is a pytz.tzinfo object.  should have zone attribute
    LOCALZONE_NAME = getattr(LOCALZONE, 'zone')


class _Undefined(object):
    """Marks a parameter value that was never supplied."""

    def __repr__(self):
        return 'Undefined'

    def __bool__(self):
        return False


Undefined = _Undefined()


class Binary(bytes):
    """A binary string.

    If passed a string we assume it's encoded as LATIN-1, which ensures that
    the characters 0-255 are considered single-character sequences.
    """

    def __new__(cls, data):
        # type: (Union[str, bytes, bytearray]) -> Binary
        if isinstance(data, str):
            return bytes.__new__(cls, data.encode('latin-1'))  # type: ignore
        return bytes.__new__(cls, data)  # type: ignore


DateTimeFields = namedtuple('DateTimeFields',
                            ['year', 'month', 'day', 'hour', 'minute', 'second'])


def get_timezone(tzname):
    # type: (str) -> tzinfo
    """Return a tzinfo for the given timezone name.

    :raises ProgrammingError: If the name is not a known timezone.
    """
    if tzname.upper() == 'UTC':
        return UTC
    try:
        return ZoneInfo(tzname)
    except (KeyError, LookupError, ValueError):
        raise ProgrammingError('Invalid TimeZone ' + tzname)


def DateFromTicks(ticks):
    # type: (float) -> Date
    """Convert ticks to a Date object."""
    return Date(*time.localtime(ticks)[:3])


def TimeFromTicks(ticks):
    # type: (float) -> Time
    """Convert ticks to a Time object."""
    return Time(*time.localtime(ticks)[3:6])


def TimestampFromTicks(ticks):
    # type: (float) -> Timestamp
    """Convert ticks to a Timestamp object."""
    return Timestamp(*time.localtime(ticks)[:6])


def TimestampToFields(value, zoneinfo=UTC):
    # type: (Timestamp, tzinfo) -> DateTimeFields
    """Convert a Timestamp object to the calendar fields sent to the server.

    The instant is expressed in ZONEINFO (UTC unless configured otherwise).
    A naive value is taken to be local time, the same way the local clock
    would describe it.  Sub-second precision is dropped.

    :raises DataError: If the instant can't be expressed in ZONEINFO.
    """
    try:
        if value.tzinfo is None:
            value = timezone_aware(value, LOCALZONE)
        dt = value.astimezone(zoneinfo)
    except (OverflowError, ValueError) as e:
        raise DataError('Error converting %r to calendar fields: %s' % (value, str(e)))
    return DateTimeFields(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)


def DateToFields(value):
    # type: (Date) -> DateTimeFields
    """Convert a Date object to calendar fields."""
    return DateTimeFields(value.year, value.month, value.day, 0, 0, 0)


def TimestampFromFields(fields, zoneinfo=LOCALZONE):
    # type: (DateTimeFields, tzinfo) -> Optional[Timestamp]
    """Convert calendar fields received from the server to a Timestamp.

    The fields are placed in ZONEINFO (the local zone unless configured
    otherwise): the result is timezone-aware.  MySQL's zero date
    (0000-00-00) has no Timestamp equivalent and is returned as None.

    :raises DataError: If the fields don't describe a valid date.
    """
    if fields.year == 0 and fields.month == 0 and fields.day == 0:
        return None
    try:
        dt = Timestamp(year=fields.year, month=fields.month, day=fields.day,
                       hour=fields.hour, minute=fields.minute, second=fields.second)
    except ValueError as e:
        raise DataError('Invalid date received %r: %s' % (tuple(fields), str(e)))
    return timezone_aware(dt, zoneinfo)


def TimeDeltaFromFields(negative, days, hours, minutes, seconds, micros=0):
    # type: (bool, int, int, int, int, int) -> TimeDelta
    """Convert the fields of a MySQL TIME value to a timedelta."""
    delta = TimeDelta(days=days, hours=hours, minutes=minutes,
                      seconds=seconds, microseconds=micros)
    return -delta if negative else delta


class TypeObject(object):
    """A SQL type object."""

    def __init__(self, *values):
        self.values = values

    def __eq__(self, other):
        if isinstance(other, TypeObject):
            return self is other
        return other in self.values

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return id(self)


STRING = TypeObject(str)
BINARY = TypeObject(bytes)
NUMBER = TypeObject(int, float, decimal.Decimal)
DATETIME = TypeObject(Timestamp, Date, Time)
ROWID = TypeObject()
NULL = TypeObject(None)

TYPEMAP = {protocol.MYSQL_TYPE_NULL: NULL,
           protocol.MYSQL_TYPE_DECIMAL: NUMBER,
           protocol.MYSQL_TYPE_NEWDECIMAL: NUMBER,
           protocol.MYSQL_TYPE_TINY: NUMBER,
           protocol.MYSQL_TYPE_SHORT: NUMBER,
           protocol.MYSQL_TYPE_LONG: NUMBER,
           protocol.MYSQL_TYPE_INT24: NUMBER,
           protocol.MYSQL_TYPE_LONGLONG: NUMBER,
           protocol.MYSQL_TYPE_FLOAT: NUMBER,
           protocol.MYSQL_TYPE_DOUBLE: NUMBER,
           protocol.MYSQL_TYPE_YEAR: NUMBER,
           protocol.MYSQL_TYPE_BIT: NUMBER,
           protocol.MYSQL_TYPE_DATE: DATETIME,
           protocol.MYSQL_TYPE_NEWDATE: DATETIME,
           protocol.MYSQL_TYPE_TIME: DATETIME,
           protocol.MYSQL_TYPE_DATETIME: DATETIME,
           protocol.MYSQL_TYPE_TIMESTAMP: DATETIME,
           protocol.MYSQL_TYPE_VARCHAR: STRING,
           protocol.MYSQL_TYPE_VAR_STRING: STRING,
           protocol.MYSQL_TYPE_STRING: STRING,
           protocol.MYSQL_TYPE_ENUM: STRING,
           protocol.MYSQL_TYPE_SET: STRING,
           protocol.MYSQL_TYPE_JSON: STRING,
           protocol.MYSQL_TYPE_TINY_BLOB: BINARY,
           protocol.MYSQL_TYPE_MEDIUM_BLOB: BINARY,
           protocol.MYSQL_TYPE_LONG_BLOB: BINARY,
           protocol.MYSQL_TYPE_BLOB: BINARY,
           protocol.MYSQL_TYPE_GEOMETRY: BINARY,
           }


def TypeObjectFromMysql(type_code):
    # type: (int) -> TypeObject
    """Return a TypeObject based on the supplied MySQL column type."""
    obj = TYPEMAP.get(type_code)
    if obj is None:
        raise DataError('received unknown column type %d' % (type_code))
    return obj
