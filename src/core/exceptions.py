"""
Exceptions raised by the validation data repository.

Every exception carries an HTTP status classifying the fault as a
client error (4xx) or a server error (5xx) for the administrative caller.
"""

from http import HTTPStatus


class ValidationLibException(Exception):
    """Base class for repository errors."""

    def __init__(self, message: str, status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR):
        self.message = message
        self.status = status
        super().__init__(f"[{status.value}] {message}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status.value < 500


class MandatoryFieldError(ValidationLibException):
    """Raised when a record is saved without one of its mandatory fields."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(
            f"mandatory field is null: {', '.join(missing_fields)}",
            HTTPStatus.BAD_REQUEST,
        )


class PersistenceError(ValidationLibException):
    """Raised when the collection cannot be serialized or written."""

    def __init__(self, message: str):
        super().__init__(message, HTTPStatus.INTERNAL_SERVER_ERROR)


class RepositoryLoadError(ValidationLibException):
    """Raised when the repository file exists but cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"repository json file read error: {path} ({reason})",
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )
