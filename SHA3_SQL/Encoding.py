"""
Canonical byte stream for query-result hashing.

    S<n>:<sql>          one per statement, <sql> is its UTF-8 text
    R                   one per result row
    N                   NULL
    I<int>              8-byte big-endian two's complement integer
    F<ieee-float>       8-byte big-endian IEEE-754 double
    T<size>:<text>      text bytes as stored (UTF-8)
    B<size>:<bytes>     blob

<n> and <size> are byte counts written as ASCII decimal. Segments are
concatenated with no other delimiters.
"""

import struct

TAG_STATEMENT   = b'S'
TAG_ROW         = b'R'
TAG_NULL        = b'N'
TAG_INTEGER     = b'I'
TAG_FLOAT       = b'F'
TAG_TEXT        = b'T'
TAG_BLOB        = b'B'
LENGTH_END      = b':'

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

DIGITS = b'0123456789'


class RawText(bytes):
    """A TEXT column value exactly as SQLite returns it, not decoded."""


def EncodeLength(n: int) -> bytes:
    """
    Encodes a non-negative integer as ASCII decimal digits.

    Raises:
        ValueError: If n is negative.
    """
    if n < 0:
        raise ValueError("Length must be non-negative.")
    if n == 0:
        return DIGITS[0:1]

    out = bytearray()
    while n > 0:
        n, d = divmod(n, 10)
        out.append(DIGITS[d])
    out.reverse()
    return bytes(out)


def _Prefixed(tag: bytes, payload: bytes) -> bytes:
    return tag + EncodeLength(len(payload)) + LENGTH_END + payload


def EncodeStatement(sql: str) -> bytes:
    """S<n>:<sql>"""
    return _Prefixed(TAG_STATEMENT, sql.encode('utf-8'))


def EncodeValue(value) -> bytes:
    """
    Encodes one column value according to its SQLite storage class.

    Raises:
        TypeError: If the value is not None, int, float, RawText, str or bytes.
        OverflowError: If an int does not fit in 64 bits.
    """
    if value is None:
        return TAG_NULL
    # bool is a subclass of int; sqlite3 never returns one for a column
    if isinstance(value, int):
        if not (INT64_MIN <= value <= INT64_MAX):
            raise OverflowError(f"Integer {value} does not fit in 64 bits.")
        return TAG_INTEGER + value.to_bytes(8, 'big', signed=True)
    if isinstance(value, float):
        return TAG_FLOAT + struct.pack('>d', value)
    if isinstance(value, RawText):
        return _Prefixed(TAG_TEXT, bytes(value))
    if isinstance(value, str):
        return _Prefixed(TAG_TEXT, value.encode('utf-8'))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _Prefixed(TAG_BLOB, bytes(value))
    raise TypeError(f"Cannot encode column value of type {type(value).__name__}.")


def EncodeRow(row) -> bytes:
    """R followed by each column value in order."""
    return TAG_ROW + b''.join(EncodeValue(v) for v in row)
