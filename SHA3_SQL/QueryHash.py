import logging
import re
import sqlite3

from .GLOBAL import DEFAULT_SIZE
from .CryptoFunc import NewHasher
from .Encoding import EncodeStatement, EncodeRow, RawText
from .Errors import QueryCompileError, NonReadOnlyStatementError

logger = logging.getLogger(__name__)


_COMMENT_RE = re.compile(r"--[^\n]*|/\*.*?(?:\*/|$)", re.DOTALL)


def _IsBlank(sql: str) -> bool:
    """True when the text holds nothing but whitespace, comments and ';'."""
    return not _COMMENT_RE.sub("", sql).strip(" \t\r\n\f\v;")


def SplitStatements(sql: str):
    """
    Yields (offset, text) for each statement in 'sql', in order.

    A statement's text starts where the previous one ended (leading
    whitespace and comments included) and runs up to and including its
    terminating ';', as the tail returned by sqlite3_prepare_v2 does.
    Whitespace- or comment-only pieces are skipped.
    """
    start = 0
    pos = 0
    while start < len(sql):
        end = sql.find(";", pos)
        if end < 0:
            piece = sql[start:]
            if not _IsBlank(piece):
                yield start, piece
            return

        piece = sql[start:end + 1]
        if sqlite3.complete_statement(piece):
            if not _IsBlank(piece):
                yield start, piece
            start = end + 1
        pos = end + 1


# Opcodes that make sqlite3_stmt_readonly() report a write. OP_Transaction
# counts as well when its p2 (write flag) is set.
OP_TRANSACTION = "Transaction"
WRITE_OPCODES = frozenset(("Vacuum", "JournalMode", "Checkpoint", "IncrVacuum"))

_EXPLAIN_RE = re.compile(
    r"(?:\s|--[^\n]*|/\*.*?(?:\*/|$))*EXPLAIN\b(?:\s+QUERY\s+PLAN\b)?",
    re.IGNORECASE | re.DOTALL,
)


def IsReadOnly(cursor: sqlite3.Cursor, sql: str) -> bool:
    """
    Compiles 'EXPLAIN <sql>' on 'cursor' and inspects the program the way
    sqlite3_stmt_readonly() does. The statement itself is never run.

    A leading EXPLAIN or EXPLAIN QUERY PLAN is looked through, so such a
    statement is read-only exactly when the statement it explains is.

    Raises:
        sqlite3.Error: If the statement does not compile.
    """
    m = _EXPLAIN_RE.match(sql)
    if m:
        sql = sql[m.end():]

    # columns: addr, opcode, p1, p2, p3, p4, p5, comment
    for row in cursor.execute("EXPLAIN " + sql).fetchall():
        opcode, p2 = row[1], row[3]
        if isinstance(opcode, bytes):
            opcode = opcode.decode('ascii')
        if opcode == OP_TRANSACTION and p2 != 0:
            return False
        if opcode in WRITE_OPCODES:
            return False
    return True


def _HashStatement(conn, hasher, sql: str, remaining: str) -> int:
    """Feeds one statement and its result rows into 'hasher'. Returns the row count."""
    rows = 0
    cursor = conn.cursor()
    cursor.row_factory = None
    try:
        try:
            read_only = IsReadOnly(cursor, sql)
        except sqlite3.Error as e:
            raise QueryCompileError(remaining, str(e)) from e
        if not read_only:
            raise NonReadOnlyStatementError(sql)

        try:
            cursor.execute(sql)
        except sqlite3.Error as e:
            raise QueryCompileError(remaining, str(e)) from e

        hasher.update(EncodeStatement(sql))
        try:
            for row in cursor:
                hasher.update(EncodeRow(row))
                rows += 1
        except sqlite3.Error as e:
            raise QueryCompileError(remaining, str(e)) from e
    finally:
        cursor.close()
    return rows


def HashQueries(conn: sqlite3.Connection, sql: str, size: int = DEFAULT_SIZE, mode: int = None) -> bytes:
    """
    Runs every statement in 'sql' on 'conn' and returns the SHA3 hash of
    the canonical encoding of the statements and their result rows.

    Args:
        conn: Open SQLite connection.
        sql: One or more SQL statements.
        size: Digest size in bits.
        mode: Hash backend, see CryptoFunc.NewHasher.

    Returns:
        A (size / 8)-byte digest.

    Raises:
        InvalidSizeError: If the size is not supported.
        QueryCompileError: If a statement fails to compile or run.
        NonReadOnlyStatementError: If a statement would write to the database.
    """
    hasher = NewHasher(size, mode)
    count = 0

    # TEXT comes back as the stored bytes whatever the caller configured
    text_factory = conn.text_factory
    conn.text_factory = RawText
    try:
        for offset, statement in SplitStatements(sql):
            rows = _HashStatement(conn, hasher, statement, sql[offset:])
            count += 1
            logger.debug("hashed statement %d (%d rows): %s", count, rows, statement.strip())
    finally:
        conn.text_factory = text_factory
    return hasher.digest()
