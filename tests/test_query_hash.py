"""
Hashing the results of SQL statements through an in-memory SQLite database.
"""

import sqlite3
import struct

import pytest
from Crypto.Hash import SHA3_256, SHA3_512

from SHA3_SQL import SHA3_SQL as api
from SHA3_SQL.GLOBAL import LIB_HASH, MY_HASH, SIZE_ERROR_MSG
from SHA3_SQL.QueryHash import HashQueries, SplitStatements
from SHA3_SQL.SHA3_SQL import Sha3, Sha3Query, FloatText
from SHA3_SQL.Errors import (
    InvalidSizeError,
    QueryCompileError,
    NonReadOnlyStatementError,
)


@pytest.fixture
def conn():
    c = sqlite3.connect(":memory:")
    c.execute("CREATE TABLE t(a, b)")
    c.executemany("INSERT INTO t VALUES (?, ?)", [(1, "one"), (2, "two")])
    c.commit()
    yield c
    c.close()


def stream_digest(stream, cls=SHA3_256):
    return cls.new(stream).digest()


# ---------------------------------------------------------------------
# Statement splitting
# ---------------------------------------------------------------------

def test_split_keeps_prepare_tail_text():
    sql = "SELECT 1; SELECT 'x';"
    assert list(SplitStatements(sql)) == [(0, "SELECT 1;"), (9, " SELECT 'x';")]


def test_split_unterminated_last_statement():
    assert [s for _, s in SplitStatements("SELECT 1")] == ["SELECT 1"]
    assert [s for _, s in SplitStatements("SELECT 1;SELECT 2")] == ["SELECT 1;", "SELECT 2"]


def test_split_ignores_semicolons_in_literals_and_comments():
    sql = "SELECT ';' AS a; /* ; */ SELECT 2 -- ;\n;"
    assert [s for _, s in SplitStatements(sql)] == [
        "SELECT ';' AS a;",
        " /* ; */ SELECT 2 -- ;\n;",
    ]


def test_split_skips_blank_remainders():
    sql = "SELECT 1;  ;\n-- trailing comment\n"
    assert [s for _, s in SplitStatements(sql)] == ["SELECT 1;"]
    assert list(SplitStatements("")) == []
    assert list(SplitStatements("   /* only a comment */ ")) == []


def test_split_keeps_trigger_body_together():
    sql = ("CREATE TRIGGER tr AFTER INSERT ON t BEGIN "
           "UPDATE t SET b = 'x'; DELETE FROM t WHERE a = 0; END; SELECT 1;")
    pieces = [s for _, s in SplitStatements(sql)]
    assert len(pieces) == 2
    assert pieces[0].endswith("END;")
    assert pieces[1] == " SELECT 1;"


# ---------------------------------------------------------------------
# Canonical stream
# ---------------------------------------------------------------------

def test_two_statement_stream(conn):
    stream = (
        b"S9:SELECT 1;" + b"R" + b"I" + (1).to_bytes(8, "big")
        + b"S12: SELECT 'x';" + b"R" + b"T1:x"
    )
    assert HashQueries(conn, "SELECT 1; SELECT 'x';", 256) == stream_digest(stream)


def test_unterminated_statement_stream(conn):
    stream = b"S8:SELECT 1" + b"RI" + (1).to_bytes(8, "big")
    assert HashQueries(conn, "SELECT 1") == stream_digest(stream)


def test_every_column_type(conn):
    conn.execute("CREATE TABLE v(n, i, f, t, b)")
    conn.execute("INSERT INTO v VALUES (NULL, -2, 1.5, 'héllo', x'00ff')")
    sql = "SELECT n, i, f, t, b FROM v"
    stream = (
        b"S27:" + sql.encode() + b"R"
        + b"N"
        + b"I" + (-2).to_bytes(8, "big", signed=True)
        + b"F" + struct.pack(">d", 1.5)
        + b"T6:h\xc3\xa9llo"
        + b"B2:\x00\xff"
    )
    assert HashQueries(conn, sql) == stream_digest(stream)


def test_rows_in_order(conn):
    sql = "SELECT a, b FROM t ORDER BY a;"
    stream = (
        b"S30:" + sql.encode()
        + b"RI" + (1).to_bytes(8, "big") + b"T3:one"
        + b"RI" + (2).to_bytes(8, "big") + b"T3:two"
    )
    assert HashQueries(conn, sql) == stream_digest(stream)


def test_empty_result_still_hashes_statement(conn):
    sql = "SELECT a FROM t WHERE 0;"
    assert HashQueries(conn, sql) == stream_digest(b"S24:" + sql.encode())


def test_no_statements_hashes_empty_stream(conn):
    assert HashQueries(conn, "  -- nothing\n") == stream_digest(b"")


def test_trailing_whitespace_does_not_change_hash(conn):
    assert HashQueries(conn, "SELECT 1;") == HashQueries(conn, "SELECT 1;  \n-- done\n")


def test_statement_text_is_part_of_hash(conn):
    assert HashQueries(conn, "SELECT 1;") != HashQueries(conn, "SELECT  1;")


def test_size_and_backend(conn):
    sql = "SELECT * FROM t ORDER BY a;"
    digest = HashQueries(conn, sql, 512)
    assert len(digest) == 64
    assert HashQueries(conn, sql, 512, LIB_HASH) == digest
    assert HashQueries(conn, sql, 512, MY_HASH) == digest


def test_read_only_pragmas(conn):
    sql = "PRAGMA user_version; PRAGMA table_info(t);"
    assert len(HashQueries(conn, sql)) == 32


def test_text_factory_is_ignored(conn):
    sql = "SELECT a, b FROM t ORDER BY a"
    expected = HashQueries(conn, sql)
    conn.text_factory = bytes
    assert HashQueries(conn, sql) == expected
    assert conn.text_factory is bytes
    assert conn.execute("SELECT b FROM t WHERE a = 1").fetchone()[0] == b"one"


def test_text_that_is_not_utf8(conn):
    sql = "SELECT CAST(x'ff' AS TEXT)"
    assert HashQueries(conn, sql) == stream_digest(b"S26:" + sql.encode() + b"RT1:\xff")
    assert conn.text_factory is str


def test_row_factory_is_ignored(conn):
    conn.row_factory = sqlite3.Row
    expected = stream_digest(b"S8:SELECT 1" + b"RI" + (1).to_bytes(8, "big"))
    assert HashQueries(conn, "SELECT 1") == expected


# ---------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------

def test_insert_is_rejected_and_not_run(conn):
    with pytest.raises(NonReadOnlyStatementError) as exc:
        HashQueries(conn, "INSERT INTO t VALUES (3, 'three')")
    assert str(exc.value) == "non-query: [INSERT INTO t VALUES (3, 'three')]"
    assert conn.execute("SELECT count(*) FROM t").fetchone()[0] == 2


def test_write_after_reads_aborts_everything(conn):
    with pytest.raises(NonReadOnlyStatementError) as exc:
        HashQueries(conn, "SELECT 1; DELETE FROM t;")
    assert exc.value.sql == " DELETE FROM t;"
    assert conn.execute("SELECT count(*) FROM t").fetchone()[0] == 2


@pytest.mark.parametrize("sql", [
    "UPDATE t SET b = 'x'",
    "CREATE TABLE u(x)",
    "DROP TABLE t",
    "PRAGMA user_version = 7",
])
def test_other_writes_are_rejected(conn, sql):
    with pytest.raises(NonReadOnlyStatementError):
        HashQueries(conn, sql)
    assert conn.execute("PRAGMA user_version").fetchone()[0] == 0
    assert conn.execute("SELECT count(*) FROM t WHERE b = 'x'").fetchone()[0] == 0


@pytest.mark.parametrize("sql", [
    "REINDEX",
    "REINDEX t",
    "VACUUM",
    "PRAGMA incremental_vacuum",
    "PRAGMA wal_checkpoint",
    "PRAGMA journal_mode",
    "EXPLAIN DELETE FROM t",
])
def test_maintenance_statements_are_rejected(conn, sql):
    conn.execute("CREATE INDEX t_a ON t(a)")
    with pytest.raises(NonReadOnlyStatementError) as exc:
        HashQueries(conn, sql)
    assert exc.value.sql == sql


@pytest.mark.parametrize("sql", [
    "PRAGMA cache_size=10",
    "PRAGMA foreign_keys=1",
    "PRAGMA user_version",
    "EXPLAIN QUERY PLAN SELECT * FROM t",
    "/* note */ EXPLAIN SELECT a FROM t",
])
def test_settings_and_explain_are_read_only(conn, sql):
    assert len(HashQueries(conn, sql)) == 32


def test_setting_pragma_takes_effect(conn):
    HashQueries(conn, "PRAGMA cache_size=10")
    assert conn.execute("PRAGMA cache_size").fetchone()[0] == 10


def test_rejected_write_leaves_connection_usable(conn):
    with pytest.raises(NonReadOnlyStatementError):
        HashQueries(conn, "DELETE FROM t")
    conn.execute("INSERT INTO t VALUES (3, 'three')")
    assert conn.execute("SELECT count(*) FROM t").fetchone()[0] == 3


def test_caller_authorizer_still_fires(conn):
    actions = []

    def record(action, arg1, arg2, db_name, source):
        actions.append(action)
        return sqlite3.SQLITE_OK

    conn.set_authorizer(record)
    HashQueries(conn, "SELECT 1; SELECT a FROM t;")
    actions.clear()
    conn.execute("SELECT b FROM t")
    assert sqlite3.SQLITE_READ in actions


def test_syntax_error(conn):
    with pytest.raises(QueryCompileError) as exc:
        HashQueries(conn, "SELECT 1; SELEC 2; SELECT 3;")
    err = exc.value
    assert err.sql == " SELEC 2; SELECT 3;"
    assert "syntax error" in err.engine_message
    assert str(err) == f"error SQL statement [ SELEC 2; SELECT 3;]: {err.engine_message}"


def test_missing_table(conn):
    with pytest.raises(QueryCompileError) as exc:
        HashQueries(conn, "SELECT * FROM nope")
    assert "no such table" in str(exc.value)


def test_invalid_size_before_running(conn):
    with pytest.raises(InvalidSizeError):
        HashQueries(conn, "DELETE FROM t", 128)
    assert conn.execute("SELECT count(*) FROM t").fetchone()[0] == 2


# ---------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------

def test_sha3_of_values():
    assert Sha3(b"abc") == SHA3_256.new(b"abc").digest()
    assert Sha3("abc") == Sha3(b"abc")
    assert Sha3(bytearray(b"abc")) == Sha3(b"abc")
    assert Sha3(42) == Sha3("42")
    assert Sha3(-7) == Sha3("-7")
    assert Sha3(1.5) == Sha3("1.5")
    assert Sha3(2.0) == Sha3("2.0")
    assert Sha3("abc", 512) == SHA3_512.new(b"abc").digest()


@pytest.mark.parametrize("size", [224, 256, 384, 512])
def test_sha3_output_length(size):
    assert len(Sha3("x", size)) == size // 8


def test_sha3_of_null_never_hashes(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("hash computed for NULL")

    monkeypatch.setattr(api, "Sha3Digest", boom)
    assert Sha3(None) is None
    assert Sha3(None, 512) is None
    assert Sha3(float("nan")) is None


def test_sha3_invalid_size_message():
    with pytest.raises(InvalidSizeError) as exc:
        Sha3("abc", 128)
    assert str(exc.value) == SIZE_ERROR_MSG == "SHA3 size should be one of: 224 256 384 512"
    # size is checked before the NULL shortcut
    with pytest.raises(InvalidSizeError):
        Sha3(None, 100)


@pytest.mark.parametrize("value, text", [
    (1.5, "1.5"),
    (2.0, "2.0"),
    (-0.25, "-0.25"),
    (0.1, "0.1"),
    (1e100, "1.0e+100"),
    (1.5e-7, "1.5e-07"),
    (123456789012345678.0, "1.23456789012346e+17"),
    (float("inf"), "Inf"),
    (float("-inf"), "-Inf"),
])
def test_float_text(value, text):
    assert FloatText(value) == text


def test_sha3_query(conn):
    sql = "SELECT a FROM t ORDER BY a"
    assert Sha3Query(conn, sql) == HashQueries(conn, sql)
    assert Sha3Query(conn, sql.encode()) == HashQueries(conn, sql)
    assert Sha3Query(conn, None) is None
    assert len(Sha3Query(conn, sql, 384)) == 48


def test_sha3_query_invalid_size(conn):
    with pytest.raises(InvalidSizeError) as exc:
        Sha3Query(conn, None, 128)
    assert str(exc.value) == SIZE_ERROR_MSG


def test_sha3_query_non_query(conn):
    with pytest.raises(NonReadOnlyStatementError, match=r"^non-query: \[DELETE FROM t\]$"):
        Sha3Query(conn, "DELETE FROM t")
