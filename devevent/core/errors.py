"""Error taxonomy shared by the services and the HTTP layer."""


class DomainError(Exception):
    """Base error carrying a user-safe message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Malformed or missing input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConflictError(DomainError):
    """A uniqueness constraint was violated."""


class NotFoundError(DomainError):
    """A referenced entity does not exist."""


class ConnectivityError(DomainError):
    """The store could not be reached."""


class UploadError(DomainError):
    """The image upload service rejected or failed the upload."""
