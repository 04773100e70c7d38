"""
(C) Copyright 2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import decimal
import datetime
import threading
from contextlib import closing
import pytest

import pymysqlstmt
from pymysqlstmt import protocol
from pymysqlstmt.exception import Error, InterfaceError, ProgrammingError

from . import mysqlstmt_base
from .mysqlstmt_base import LONG, NULL, LONGLONG, VAR_STRING
from .mock_server import Column, Err, Ok, Rows
from .mock_tzs import UTC

SELECT_PEOPLE = "SELECT id, name FROM people WHERE id > ?"
INSERT_PERSON = "INSERT INTO people (name) VALUES (?)"

PEOPLE = [(1, 'alice'), (2, 'bob'), (3, 'carol')]


class TestStatement(mysqlstmt_base.MysqlStmtBase):
    """Prepared statement lifecycle."""

    @pytest.fixture(autouse=True)
    def _people(self, _setup):
        columns = [Column('id', LONG,
                          flags=protocol.NOT_NULL_FLAG | protocol.PRI_KEY_FLAG),
                   Column('name', VAR_STRING)]
        self.server.add_statement(SELECT_PEOPLE, param_count=1, columns=columns,
                                  execute=lambda p: [r for r in PEOPLE if r[0] > p[0]])

        inserted = []

        def insert(params):
            inserted.append(params[0])
            return Ok(affected_rows=1, insert_id=len(PEOPLE) + len(inserted))

        self.server.add_statement(INSERT_PERSON, param_count=1, execute=insert)
        self.inserted = inserted

    def test_prepare(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = con.statement()
            assert stmt.state == 'Created'
            assert stmt.prepare(SELECT_PEOPLE)
            assert stmt.state == 'Prepared'
            assert stmt.param_count == 1
            assert stmt.field_count() == 2
            assert stmt.errno() == 0
            assert stmt.sqlstate() == '00000'
            stmt.close()

    def test_prepare_failure(self):
        # type: () -> None
        """Server errors are reported through errno(), not raised."""
        with closing(self._connect()) as con:
            stmt = con.statement()
            assert stmt.prepare("SELEC nonsense") is False
            assert stmt.errno() == protocol.ER_PARSE_ERROR
            assert stmt.sqlstate() == '42000'
            assert 'error in your SQL syntax' in stmt.error()
            assert stmt.state == 'Created'

            # A successful operation clears the error
            assert stmt.prepare(SELECT_PEOPLE)
            assert stmt.errno() == 0
            assert stmt.error() == ''
            stmt.close()

    def test_prepare_missing_table(self):
        # type: () -> None
        self.server.add_prepare_error("SELECT * FROM missing", protocol.ER_NO_SUCH_TABLE,
                                      '42S02', "Table 'test.missing' doesn't exist")
        with closing(self._connect()) as con:
            stmt = con.statement()
            assert stmt.prepare("SELECT * FROM missing") is False
            assert stmt.errno() == protocol.ER_NO_SUCH_TABLE
            assert stmt.sqlstate() == '42S02'
            assert stmt.error() == "Table 'test.missing' doesn't exist"
            with pytest.raises(ProgrammingError):
                stmt.execute()
            stmt.close()

    def test_parameter_wire_types(self):
        # type: () -> None
        """Each kind of value is sent with its own type."""
        query = "INSERT INTO everything VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
        self.server.add_statement(query, param_count=10)
        day = datetime.date(2001, 9, 9)
        stamp = datetime.datetime(2001, 9, 9, 1, 46, 40, tzinfo=UTC)
        with closing(self._connect()) as con:
            stmt = self._prepared(con, query, [True, 1, 3000000000, 2.5, None, u'x',
                                               b'y', decimal.Decimal('1.25'), day, stamp])
            assert stmt.execute()
            assert stmt.affected_rows() == 0
            stmt.close()
        assert self.server.param_types[-1] == [
            (protocol.MYSQL_TYPE_TINY, False),
            (protocol.MYSQL_TYPE_LONG, False),
            (protocol.MYSQL_TYPE_LONG, True),
            (protocol.MYSQL_TYPE_DOUBLE, False),
            (protocol.MYSQL_TYPE_NULL, False),
            (protocol.MYSQL_TYPE_STRING, False),
            (protocol.MYSQL_TYPE_BLOB, False),
            (protocol.MYSQL_TYPE_NEWDECIMAL, False),
            (protocol.MYSQL_TYPE_DATE, False),
            (protocol.MYSQL_TYPE_DATETIME, False)]
        assert self.server.executions[-1] == [
            1, 1, 3000000000, 2.5, None, u'x', b'y', u'1.25', day,
            datetime.datetime(2001, 9, 9, 1, 46, 40)]

    def _interrupted(self):
        # type: () -> str
        query = "SELECT id FROM slow_people"
        self.server.add_statement(
            query, columns=[Column('id', LONG)],
            execute=lambda p: [(1,), Err(protocol.ER_QUERY_INTERRUPTED, '70100',
                                         'Query execution was interrupted'), (2,)])
        return query

    def test_error_mid_result(self):
        # type: () -> None
        """An error part way through the rows ends the result set."""
        query = self._interrupted()
        with closing(self._connect()) as con:
            stmt = self._prepared(con, query)
            assert stmt.execute()
            assert stmt.fetch_all() is None
            assert stmt.errno() == protocol.ER_QUERY_INTERRUPTED
            assert stmt.sqlstate() == '70100'

            sent = len(self.server.commands)
            assert stmt.fetch_all() == []
            assert stmt.errno() == 0
            assert stmt.num_rows() == 0
            assert len(self.server.commands) == sent

            con.testConnection()
            assert self._execute_people(stmt)
            stmt.close()

    def test_error_mid_fetch(self):
        # type: () -> None
        query = self._interrupted()
        with closing(self._connect()) as con:
            stmt = self._prepared(con, query)
            assert stmt.execute()
            assert stmt.fetch() == {'id': 1}
            assert stmt.fetch() is None
            assert stmt.errno() == protocol.ER_QUERY_INTERRUPTED
            assert stmt.fetch() is None
            assert stmt.errno() == 0
            assert stmt.store_result()
            con.testConnection()
            stmt.close()

    @staticmethod
    def _execute_people(stmt):
        """Reuse STMT for the people query and check its rows."""
        if not (stmt.prepare(SELECT_PEOPLE) and stmt.bind_params([0]) and stmt.execute()):
            return False
        return stmt.fetch_all() == [{'id': i, 'name': n} for i, n in PEOPLE]

    def test_busy(self):
        # type: () -> None
        """A statement serves one operation at a time."""
        started = threading.Event()
        release = threading.Event()

        def slow(params):
            started.set()
            release.wait(10)
            return Ok(affected_rows=1)

        query = "UPDATE people SET name = name"
        self.server.add_statement(query, execute=slow)
        with closing(self._connect()) as con:
            stmt = self._prepared(con, query, [])
            results = []
            worker = threading.Thread(target=lambda: results.append(stmt.execute()))
            worker.start()
            try:
                assert started.wait(10)
                with pytest.raises(InterfaceError) as ex:
                    stmt.field_count()
                assert str(ex.value) == "Statement is busy"
            finally:
                release.set()
                worker.join(10)
            assert results == [True]
            assert stmt.affected_rows() == 1
            stmt.close()

    def test_prepare_replaces(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            assert stmt.prepare(INSERT_PERSON)
            assert stmt.field_count() == 0
            con.testConnection()
            closed = [c for c in self.server.commands if c[0] == protocol.COM_STMT_CLOSE]
            assert len(closed) == 1
            stmt.close()

    def test_close(self):
        # type: () -> None
        """Closing twice is harmless; any other use of a closed statement fails."""
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            assert stmt.close()
            assert stmt.state == 'Closed'
            assert stmt.close()
            con.testConnection()
            assert self.server.command_names().count(protocol.COM_STMT_CLOSE) == 1

            for op in (lambda: stmt.prepare(SELECT_PEOPLE),
                       lambda: stmt.bind_params([1]),
                       lambda: stmt.execute(),
                       lambda: stmt.fetch_all(),
                       lambda: stmt.field_count()):
                with pytest.raises(InterfaceError) as ex:
                    op()
                assert str(ex.value) == "Statement not initialized"

    def test_close_after_connection(self):
        # type: () -> None
        con = self._connect()
        stmt = self._prepared(con, SELECT_PEOPLE)
        con.close()
        assert stmt.close()
        with pytest.raises(Error):
            con.statement()

    def test_not_prepared(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = con.statement()
            with pytest.raises(ProgrammingError):
                stmt.bind_params([])
            with pytest.raises(ProgrammingError):
                stmt.execute()
            stmt.close()

    def test_execute_unbound(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            with pytest.raises(ProgrammingError):
                stmt.execute()
            stmt.close()

    def test_bind_mismatch(self):
        # type: () -> None
        """A failed bind keeps the statement's state."""
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            with pytest.raises(ProgrammingError):
                stmt.bind_params([1, 2])
            with pytest.raises(ProgrammingError):
                stmt.bind_params({'id': 1})
            with pytest.raises(ProgrammingError):
                stmt.bind_params([pymysqlstmt.Undefined])
            assert stmt.state == 'Prepared'
            assert stmt.bind_slots is None
            stmt.close()

    def test_select(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [1])
            assert stmt.execute()
            assert stmt.state == 'Executed'
            assert stmt.affected_rows() == -1
            rows = stmt.fetch_all()
            assert rows == [{'id': 2, 'name': 'bob'}, {'id': 3, 'name': 'carol'}]
            assert stmt.state == 'Stored'
            assert stmt.affected_rows() == 2
            assert self.server.executions[-1] == [1]
            stmt.close()

    def test_zero_rows(self):
        # type: () -> None
        """An empty result set is an empty list, not None."""
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [99])
            assert stmt.execute()
            assert stmt.fetch_all() == []
            assert stmt.errno() == 0
            stmt.close()

    def test_fetch(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [0])
            assert stmt.execute()
            assert stmt.fetch() == {'id': 1, 'name': 'alice'}
            assert stmt.fetch() == {'id': 2, 'name': 'bob'}
            assert stmt.fetch() == {'id': 3, 'name': 'carol'}
            assert stmt.fetch() is None
            assert stmt.errno() == 0
            stmt.close()

    def test_insert(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, INSERT_PERSON, ['dave'])
            assert stmt.execute()
            assert stmt.affected_rows() == 1
            assert stmt.last_insert_id() > 0
            assert self.inserted == ['dave']

            # no result set: None, but no error either
            assert stmt.fetch_all() is None
            assert stmt.errno() == 0

            assert stmt.fetch() is None
            assert stmt.errno() == protocol.CR_NO_RESULT_SET
            stmt.close()

    def test_execute_error(self):
        # type: () -> None
        self.server.add_statement(
            "INSERT INTO uniq VALUES (?)", param_count=1,
            execute=lambda p: Err(protocol.ER_DUP_ENTRY, '23000',
                                  "Duplicate entry '%s' for key 'PRIMARY'" % (p[0])))
        with closing(self._connect()) as con:
            stmt = self._prepared(con, "INSERT INTO uniq VALUES (?)", [7])
            assert stmt.execute() is False
            assert stmt.errno() == protocol.ER_DUP_ENTRY
            assert stmt.sqlstate() == '23000'
            assert stmt.error() == "Duplicate entry '7' for key 'PRIMARY'"
            # the connection is still usable
            con.testConnection()
            stmt.close()

    def test_select_null_param(self):
        # type: () -> None
        def echo(params):
            typ = NULL if params[0] is None else LONGLONG
            return Rows([(params[0],)], columns=[Column('n', typ)])

        self.server.add_statement("SELECT ? AS n", param_count=1,
                                  columns=[Column('n', LONGLONG)], execute=echo)
        with closing(self._connect()) as con:
            stmt = self._prepared(con, "SELECT ? AS n", [None])
            assert stmt.execute()
            assert stmt.fetch_all() == [{'n': None}]

            assert stmt.bind_params([12])
            assert stmt.execute()
            assert stmt.fetch_all() == [{'n': 12}]
            stmt.close()

    def test_store_result(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [0])
            assert stmt.store_result() is False
            assert stmt.errno() == protocol.CR_COMMANDS_OUT_OF_SYNC
            assert stmt.sqlstate() == 'HY000'

            with pytest.raises(ProgrammingError):
                stmt.num_rows()

            assert stmt.execute()
            assert not stmt.result_stored
            assert stmt.store_result()
            assert stmt.result_stored
            assert stmt.num_rows() == 3
            assert stmt.affected_rows() == 3
            # storing again does nothing
            assert stmt.store_result()
            assert stmt.num_rows() == 3
            stmt.close()

    def test_data_seek(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [0])
            assert stmt.execute()
            with pytest.raises(ProgrammingError):
                stmt.data_seek(0)
            assert stmt.store_result()

            stmt.data_seek(2)
            assert stmt.fetch() == {'id': 3, 'name': 'carol'}
            stmt.data_seek(0)
            assert stmt.fetch_all() == [{'id': 1, 'name': 'alice'},
                                        {'id': 2, 'name': 'bob'},
                                        {'id': 3, 'name': 'carol'}]
            for offset in (-1, 3, 100):
                with pytest.raises(ProgrammingError):
                    stmt.data_seek(offset)
            stmt.close()

    def test_reexecute(self):
        # type: () -> None
        """Rows left unread are dropped when the statement is executed again."""
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [0])
            assert stmt.execute()
            assert stmt.fetch() == {'id': 1, 'name': 'alice'}
            assert stmt.bind_params([2])
            assert stmt.execute()
            assert stmt.fetch_all() == [{'id': 3, 'name': 'carol'}]
            stmt.close()

    def test_interleaved(self):
        # type: () -> None
        """Another command drains a pending unbuffered result."""
        with closing(self._connect()) as con:
            s1 = self._prepared(con, SELECT_PEOPLE, [0])
            assert s1.execute()
            assert s1.fetch() == {'id': 1, 'name': 'alice'}

            s2 = self._prepared(con, INSERT_PERSON, ['erin'])
            assert s2.execute()
            assert s2.affected_rows() == 1

            assert s1.fetch() is None
            s1.close()
            s2.close()

    def test_free_result(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [0])
            assert stmt.execute()
            assert stmt.store_result()
            assert stmt.free_result()
            assert stmt.state == 'Executed'
            assert not stmt.result_stored
            assert stmt.fetch() is None
            assert stmt.errno() == protocol.CR_NO_RESULT_SET
            stmt.close()

    def test_reset(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [1])
            assert stmt.execute()
            assert stmt.fetch() == {'id': 2, 'name': 'bob'}
            assert stmt.reset()
            assert stmt.state == 'Bound'
            assert protocol.COM_STMT_RESET in self.server.command_names()

            # the bound parameters are kept
            assert stmt.execute()
            assert stmt.fetch_all() == [{'id': 2, 'name': 'bob'},
                                        {'id': 3, 'name': 'carol'}]
            stmt.close()

        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            assert stmt.reset()
            assert stmt.state == 'Prepared'
            stmt.close()

    def test_result_metadata(self):
        # type: () -> None
        with closing(self._connect()) as con:
            stmt = self._prepared(con, SELECT_PEOPLE)
            meta = stmt.result_metadata()
            assert meta.field_count == 2
            assert meta.field_names() == ['id', 'name']
            desc = meta.description
            assert desc[0][0] == 'id'
            assert desc[0][1] == pymysqlstmt.NUMBER
            assert desc[0][6] is False
            assert desc[1][1] == pymysqlstmt.STRING
            assert desc[1][6] is True

            assert stmt.prepare(INSERT_PERSON)
            assert stmt.result_metadata() is False
            assert stmt.errno() == protocol.CR_NO_RESULT_SET
            stmt.close()

    def test_context_manager(self):
        # type: () -> None
        with self._connect() as con:
            stmt = self._prepared(con, SELECT_PEOPLE, [2])
            assert stmt.execute()
            assert stmt.fetch_all() == [{'id': 3, 'name': 'carol'}]
        assert not con.connection_config()['connected']
