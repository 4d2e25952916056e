class MovieStoreError(Exception):
    """Base class for every failure a movie operation can report."""

    kind = "error"


class ValidationError(MovieStoreError):
    """Input is missing a required field or has the wrong shape."""

    kind = "validation_error"


class NotFoundError(MovieStoreError):
    kind = "not_found"


class StorageError(MovieStoreError):
    """The underlying store failed to read or write."""

    kind = "storage_error"

    def __init__(self, action: str, cause: BaseException):
        super().__init__(f"{action}: {cause}")
        self.action = action
        self.cause = cause
