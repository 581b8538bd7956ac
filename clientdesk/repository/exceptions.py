"""Errors raised by repositories in place of raw SQLAlchemy exceptions.

Usecases translate them into AppExceptions.
"""


class RepositoryException(Exception):
    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail  # Driver message, for logs only
        super().__init__(message)


class DuplicateRecordException(RepositoryException):
    """A unique index rejected the write.

    ``field`` is the column the index covers, when it could be identified.
    """
    def __init__(
        self,
        message: str = "Record already exists",
        detail: str | None = None,
        field: str | None = None,
    ):
        super().__init__(message, detail)
        self.field = field


class DatabaseConnectionException(RepositoryException):
    def __init__(self, message: str = "Database connection error", detail: str | None = None):
        super().__init__(message, detail)


class DatabaseOperationException(RepositoryException):
    def __init__(self, message: str = "Database operation failed", detail: str | None = None):
        super().__init__(message, detail)
