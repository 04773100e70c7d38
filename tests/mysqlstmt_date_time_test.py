# -*- coding: utf-8 -*-
"""
(C) Copyright 2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import datetime
from contextlib import closing
import pytest

from pymysqlstmt.datatype import LOCALZONE_NAME
from pymysqlstmt.exception import DataError, ProgrammingError

from . import mysqlstmt_base
from .mysqlstmt_base import DATE, DATETIME
from .mock_server import Column, Rows
from .mock_tzs import localize, wall_clock, UTC, Local, TimeZoneInfo

ECHO = "SELECT ? AS t"


def _echo(params):
    value = params[0]
    typ = DATETIME if isinstance(value, datetime.datetime) else DATE
    return Rows([(value,)], columns=[Column('t', typ)])


class TestDateTime(mysqlstmt_base.MysqlStmtBase):
    """Datetime parameters and results with configurable timezones."""

    @pytest.fixture(autouse=True)
    def _echo(self, _setup):
        self.server.add_statement(ECHO, param_count=1,
                                  columns=[Column('t', DATETIME)], execute=_echo)

    def _round_trip(self, con, value):
        stmt = self._prepared(con, ECHO, [value])
        assert stmt.execute()
        rows = stmt.fetch_all()
        stmt.close()
        return self.server.executions[-1][0], rows[0]['t']

    def test_defaults(self):
        # type: () -> None
        with closing(self._connect()) as con:
            config = con.connection_config()
            assert config['bind_timezone'] == 'UTC'
            assert config['result_timezone'] == LOCALZONE_NAME

    def test_connect_timezone(self):
        # type: () -> None
        """ test invalid TimeZone """
        for opt in ('bindTimeZone', 'resultTimeZone'):
            with pytest.raises(ProgrammingError):
                self._connect(options={opt: 'XYZ'})
            with pytest.raises(ProgrammingError):
                self._connect(options={opt: 'Not/AZone'})

    def test_utc_in_local_out(self):
        # type: () -> None
        """By default values are sent in UTC and read back as local time."""
        dt = localize(datetime.datetime(2021, 6, 1, 12, 0, 0), TimeZoneInfo('Asia/Tokyo'))
        with closing(self._connect()) as con:
            sent, got = self._round_trip(con, dt)
        assert sent == wall_clock(dt, UTC)
        assert sent == datetime.datetime(2021, 6, 1, 3, 0, 0)
        assert got == localize(datetime.datetime(2021, 6, 1, 3, 0, 0), Local)

    def test_asymmetric(self):
        # type: () -> None
        dt = datetime.datetime(2021, 6, 1, 12, 0, 0, tzinfo=UTC)
        ny = TimeZoneInfo('America/New_York')
        with closing(self._connect(options={'resultTimeZone': 'America/New_York'})) as con:
            sent, got = self._round_trip(con, dt)
        assert sent == datetime.datetime(2021, 6, 1, 12, 0, 0)
        # the same wall clock in another zone is another instant
        assert got == localize(datetime.datetime(2021, 6, 1, 12, 0, 0), ny)
        assert got != dt
        assert got - dt == datetime.timedelta(hours=4)

    def test_symmetric(self):
        # type: () -> None
        """Sending and reading in the same zone preserves the instant."""
        dt = localize(datetime.datetime(1990, 1, 1, 1, 30, 10), TimeZoneInfo('Europe/Paris'))
        with closing(self._connect(options={'bindTimeZone': 'America/Chicago',
                                            'resultTimeZone': 'America/Chicago'})) as con:
            sent, got = self._round_trip(con, dt)
        assert sent == wall_clock(dt, TimeZoneInfo('America/Chicago'))
        assert sent == datetime.datetime(1989, 12, 31, 18, 30, 10)
        assert got == dt
        assert got.utcoffset() == datetime.timedelta(hours=-6)

    def test_offset_of_the_date(self):
        # type: () -> None
        """Results carry the offset in force on their own date."""
        ny = TimeZoneInfo('America/New_York')
        winter = localize(datetime.datetime(2021, 1, 15, 12, 0, 0), ny)
        summer = localize(datetime.datetime(2021, 7, 15, 12, 0, 0), ny)
        with closing(self._connect(options={'bindTimeZone': 'America/New_York',
                                            'resultTimeZone': 'America/New_York'})) as con:
            _, got_winter = self._round_trip(con, winter)
            _, got_summer = self._round_trip(con, summer)
        assert got_winter == winter
        assert got_winter.utcoffset() == datetime.timedelta(hours=-5)
        assert got_summer == summer
        assert got_summer.utcoffset() == datetime.timedelta(hours=-4)

    def test_naive_is_local(self):
        # type: () -> None
        dt = datetime.datetime(2015, 3, 17, 9, 45, 0)
        with closing(self._connect(options={'bindTimeZone': LOCALZONE_NAME})) as con:
            sent, got = self._round_trip(con, dt)
        assert sent == dt
        assert got == localize(dt, Local)

    def test_microseconds_dropped(self):
        # type: () -> None
        dt = datetime.datetime(2000, 1, 1, 0, 0, 1, 999999, tzinfo=UTC)
        with closing(self._connect(options={'resultTimeZone': 'UTC'})) as con:
            _, got = self._round_trip(con, dt)
        assert got == dt.replace(microsecond=0)

    def test_date(self):
        # type: () -> None
        """Dates are sent as they are, without any timezone conversion."""
        day = datetime.date(1969, 7, 20)
        with closing(self._connect(options={'bindTimeZone': 'Pacific/Auckland',
                                            'resultTimeZone': 'Asia/Kolkata'})) as con:
            sent, got = self._round_trip(con, day)
        assert sent == day
        assert got == localize(datetime.datetime(1969, 7, 20), TimeZoneInfo('Asia/Kolkata'))

    def test_out_of_range(self):
        # type: () -> None
        dt = datetime.datetime(1, 1, 1, 0, 0, 0, tzinfo=TimeZoneInfo('Asia/Tokyo'))
        with closing(self._connect()) as con:
            stmt = self._prepared(con, ECHO)
            with pytest.raises(DataError):
                stmt.bind_params([dt])
            stmt.close()
