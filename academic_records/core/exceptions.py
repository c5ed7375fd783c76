from typing import Any, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[str] = None,
        result: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors
        self.result = result


class InvalidInputError(ServiceError):
    """Malformed, missing or out-of-range input. `errors` joins every field message."""

    def __init__(self, message: str = "Invalid input data.", errors: Optional[str] = None) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors=errors)


class NotFoundError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    """Uniqueness or referential-integrity violation. May carry the conflicting record."""

    def __init__(self, message: str, result: Any = None, errors: Optional[str] = None) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT, errors=errors, result=result)
