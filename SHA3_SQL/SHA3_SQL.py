import math
import sqlite3

from .GLOBAL import DEFAULT_SIZE
from .CryptoFunc import Sha3Digest
from .QueryHash import HashQueries
from .SHA3 import CheckSize


def FloatText(r: float) -> str:
    """
    Renders a float the way SQLite converts a REAL to TEXT ("%!.15g"):
    15 significant digits, ".0" kept on integral values, "Inf"/"-Inf".
    """
    if math.isinf(r):
        return "Inf" if r > 0 else "-Inf"
    text = "%.15g" % r
    if "e" in text:
        mantissa, exponent = text.split("e")
        if "." not in mantissa:
            mantissa += ".0"
        return mantissa + "e" + exponent
    if "." not in text:
        text += ".0"
    return text


def ValueBytes(value):
    """
    The bytes that sha3() hashes for a value: blobs as they are, every
    other type as its UTF-8 text. None (and NaN, which SQLite stores as
    NULL) gives None.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, bool):
        return str(int(value)).encode('ascii')
    if isinstance(value, int):
        return str(value).encode('ascii')
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return FloatText(value).encode('ascii')
    raise TypeError(f"Cannot hash a value of type {type(value).__name__}.")


def Sha3(value, size: int = DEFAULT_SIZE, mode: int = None):
    """
    Computes the SHA3 hash of a single value.

    Args:
        value: bytes-like values are hashed raw; str, int and float are
               hashed as their UTF-8 text.
        size: Digest size in bits, one of 224, 256, 384, 512.

    Returns:
        The (size / 8)-byte digest, or None if value is None.

    Raises:
        InvalidSizeError: If the size is not supported.
    """
    # Step 1: The size is checked before anything else
    CheckSize(size)

    # Step 2: NULL in, NULL out
    data = ValueBytes(value)
    if data is None:
        return None

    # Step 3: Hash
    return Sha3Digest(data, size, mode)


def Sha3Query(conn: sqlite3.Connection, sql, size: int = DEFAULT_SIZE, mode: int = None):
    """
    Computes the SHA3 hash of the results of every statement in 'sql'.

    Args:
        conn: The connection the statements run on.
        sql: SQL text holding one or more read-only statements.
        size: Digest size in bits, one of 224, 256, 384, 512.

    Returns:
        The (size / 8)-byte digest, or None if sql is None.

    Raises:
        InvalidSizeError: If the size is not supported.
        QueryCompileError: "error SQL statement [<sql>]: <message>"
        NonReadOnlyStatementError: "non-query: [<sql>]"
    """
    CheckSize(size)
    if sql is None:
        return None
    if not isinstance(sql, str):
        data = ValueBytes(sql)
        if data is None:
            return None
        sql = data.decode('utf-8')

    return HashQueries(conn, sql, size, mode)
