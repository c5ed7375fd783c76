from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every API response. `errors` is only sent on failures."""

    message: str
    result: Optional[T] = None
    errors: Optional[str] = None


class DeletedResult(BaseModel):
    id: int


def envelope(message: str, result=None, errors: Optional[str] = None) -> dict:
    """Plain-dict envelope for exception handlers (result must already be JSON-ready)."""
    content = {"message": message, "result": result}
    if errors is not None:
        content["errors"] = errors
    return content
