import logging
import re
import sqlite3

from .GLOBAL import DEFAULT_SIZE
from .Errors import InvalidSizeError, QueryHashError
from .SHA3_SQL import Sha3, Sha3Query

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def SqlInt(value) -> int:
    """Integer value of a SQL argument, as sqlite3_value_int() would read it."""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else 0
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode('utf-8', 'replace')
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def RegisterFunctions(conn: sqlite3.Connection):
    """
    Registers sha3(X), sha3(X,SIZE), sha3_query(Y) and sha3_query(Y,SIZE)
    on 'conn'. Both return BLOBs; SIZE defaults to 256.

    Errors raised inside the functions reach the caller as
    sqlite3.OperationalError; their text is logged.
    """

    def sha3(value, size=DEFAULT_SIZE):
        try:
            return Sha3(value, SqlInt(size))
        except InvalidSizeError as e:
            logger.warning("sha3(): %s", e)
            raise

    def sha3_query(sql, size=DEFAULT_SIZE):
        try:
            return Sha3Query(conn, sql, SqlInt(size))
        except (InvalidSizeError, QueryHashError) as e:
            logger.warning("sha3_query(): %s", e)
            raise

    conn.create_function("sha3", 1, sha3, deterministic=True)
    conn.create_function("sha3", 2, sha3, deterministic=True)
    conn.create_function("sha3_query", 1, sha3_query)
    conn.create_function("sha3_query", 2, sha3_query)
    return conn
