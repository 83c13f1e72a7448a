from .GLOBAL import SIZE_ERROR_MSG


class InvalidSizeError(ValueError):
    """Requested digest size is not one of 224, 256, 384 or 512 bits."""

    def __init__(self, size=None):
        super().__init__(SIZE_ERROR_MSG)
        self.size = size


class QueryHashError(Exception):
    """Base class for failures while hashing the results of SQL statements."""


class QueryCompileError(QueryHashError):
    """
    A statement could not be compiled (or failed while running).

    Args:
        sql: The SQL text from the failing statement to the end of the input.
        engine_message: The diagnostic reported by SQLite.
    """

    def __init__(self, sql: str, engine_message: str):
        super().__init__(f"error SQL statement [{sql}]: {engine_message}")
        self.sql = sql
        self.engine_message = engine_message


class NonReadOnlyStatementError(QueryHashError):
    """A statement would modify the database."""

    def __init__(self, sql: str):
        super().__init__(f"non-query: [{sql}]")
        self.sql = sql
