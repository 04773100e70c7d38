"""Convert Python values into typed bind slots for statement parameters.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
BindSlot -- Base class of the parameter bind slots.
NullSlot, Int32Slot, TinySlot, DoubleSlot, DecimalTextSlot,
FixedStringSlot, BlobSlot, DateTimeSlot, DateSlot -- The slot variants.

Exported Functions:
to_slot -- Build the bind slot for a single value.
build_slots -- Build the bind slots for a sequence of parameter values.
"""

__all__ = ['BindSlot', 'NullSlot', 'Int32Slot', 'TinySlot', 'DoubleSlot',
           'DecimalTextSlot', 'FixedStringSlot', 'BlobSlot', 'DateTimeSlot',
           'DateSlot', 'to_slot', 'build_slots']

import struct
import numbers
import decimal
import datetime

try:
    from typing import Any, List, Sequence  # pylint: disable=unused-import
except ImportError:
    pass

from .exception import DataError, ProgrammingError
from . import datatype
from . import protocol

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT32_MAX = (1 << 32) - 1


class BindSlot(object):
    """A parameter value encoded for COM_STMT_EXECUTE.

    The wire type is fixed by the class, so a slot can't carry a buffer
    that disagrees with its type.
    """

    type_code = None     # type: int
    unsigned = False
    is_null = False
    # Sent with a length-encoded prefix rather than at a fixed width
    length_encoded = False
    # Can be sent in chunks with COM_STMT_SEND_LONG_DATA
    accepts_long_data = False

    def __init__(self, buffer):
        # type: (bytes) -> None
        self.buffer = buffer
        # Set once data has been sent with COM_STMT_SEND_LONG_DATA
        self.long_data = False

    @property
    def length(self):
        # type: () -> int
        return len(self.buffer)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.buffer)


class NullSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_NULL
    is_null = True

    def __init__(self):
        # type: () -> None
        super(NullSlot, self).__init__(b'\0')


class Int32Slot(BindSlot):
    type_code = protocol.MYSQL_TYPE_LONG

    def __init__(self, value, unsigned=False):
        # type: (int, bool) -> None
        super(Int32Slot, self).__init__(struct.pack('<I' if unsigned else '<i', value))
        self.unsigned = unsigned


class TinySlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_TINY

    def __init__(self, value):
        # type: (bool) -> None
        super(TinySlot, self).__init__(struct.pack('<b', 1 if value else 0))


class DoubleSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_DOUBLE

    def __init__(self, value):
        # type: (float) -> None
        super(DoubleSlot, self).__init__(struct.pack('<d', value))


class DecimalTextSlot(BindSlot):
    """A decimal sent as its exact text."""

    type_code = protocol.MYSQL_TYPE_NEWDECIMAL
    length_encoded = True

    def __init__(self, value):
        # type: (decimal.Decimal) -> None
        super(DecimalTextSlot, self).__init__(str(value).encode('ascii'))


class FixedStringSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_STRING
    length_encoded = True
    accepts_long_data = True


class BlobSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_BLOB
    length_encoded = True
    accepts_long_data = True


class DateTimeSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_DATETIME

    def __init__(self, fields):
        # type: (datatype.DateTimeFields) -> None
        super(DateTimeSlot, self).__init__(
            struct.pack('<BHBBBBB', 7, fields.year, fields.month, fields.day,
                        fields.hour, fields.minute, fields.second))
        self.fields = fields


class DateSlot(BindSlot):
    type_code = protocol.MYSQL_TYPE_DATE

    def __init__(self, fields):
        # type: (datatype.DateTimeFields) -> None
        super(DateSlot, self).__init__(
            struct.pack('<BHBB', 4, fields.year, fields.month, fields.day))
        self.fields = fields


def to_slot(value, zoneinfo=datatype.UTC, encoding='utf-8'):  # pylint: disable=too-many-return-statements
    # type: (Any, datetime.tzinfo, str) -> BindSlot
    """Build the bind slot for VALUE.

    :param zoneinfo: The timezone DATETIME values are sent in.
    :param encoding: The codec for the text of other values.
    """
    if value is datatype.Undefined:
        raise ProgrammingError("All arguments must be defined")

    if value is None:
        return NullSlot()

    # bool is an int: check it first
    if isinstance(value, bool):
        return TinySlot(value)

    if isinstance(value, int):
        if INT32_MIN <= value <= INT32_MAX:
            return Int32Slot(value)
        if INT32_MAX < value <= UINT32_MAX:
            return Int32Slot(value, unsigned=True)
        try:
            return DoubleSlot(float(value))
        except OverflowError:
            raise DataError('Integer %d is too large to bind' % (value))

    if isinstance(value, numbers.Real):
        return DoubleSlot(float(value))

    if isinstance(value, decimal.Decimal):
        return DecimalTextSlot(value)

    # datetime is a date: check it first
    if isinstance(value, datetime.datetime):
        return DateTimeSlot(datatype.TimestampToFields(value, zoneinfo))

    if isinstance(value, datetime.date):
        return DateSlot(datatype.DateToFields(value))

    if isinstance(value, (bytes, bytearray, memoryview)):
        return BlobSlot(bytes(value))

    return FixedStringSlot(str(value).encode(encoding))


def build_slots(values, param_count, zoneinfo=datatype.UTC, encoding='utf-8'):
    # type: (Sequence[Any], int, datetime.tzinfo, str) -> List[BindSlot]
    """Build a bind slot for each parameter value.

    All slots are built before any is returned, so a failure leaves the
    caller's existing slots untouched.

    :raises ProgrammingError: If VALUES is not a list or tuple, has the wrong
        number of values, or contains Undefined.
    :raises DataError: If a value can't be represented on the wire.
    """
    if not isinstance(values, (list, tuple)):
        raise ProgrammingError("Parameters must be passed as a list or tuple")
    if len(values) != param_count:
        raise ProgrammingError("Incorrect number of parameters specified,"
                               " expected %d, got %d" % (param_count, len(values)))
    return [to_slot(v, zoneinfo, encoding) for v in values]
