"""
SHA3 (Keccak) hashing and reproducible hashing of SQLite query results
"""

from . import SHA3_SQL
from .SHA3_SQL import Sha3, Sha3Query
from .SHA3 import SHA3, SHA3_224, SHA3_256, SHA3_384, SHA3_512
from .QueryHash import HashQueries
from .SQLFunc import RegisterFunctions
from .Errors import (
    InvalidSizeError,
    QueryHashError,
    QueryCompileError,
    NonReadOnlyStatementError,
)

__all__ = [
    "SHA3_SQL", "Sha3", "Sha3Query", "HashQueries", "RegisterFunctions",
    "SHA3", "SHA3_224", "SHA3_256", "SHA3_384", "SHA3_512",
    "InvalidSizeError", "QueryHashError", "QueryCompileError",
    "NonReadOnlyStatementError",
]
