"""Generic input validation on top of pydantic schemas.

Each resource declares its field rules as a pydantic model (type, required,
min/max length, format). `validate_input` evaluates a raw record against one
of them and either returns the typed value or raises `InvalidInputError`
carrying every violated field, joined into one human-readable message.
"""

from typing import Annotated, Any, Iterable, List, Mapping, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, PositiveInt, ValidationError
from pydantic_core import PydanticCustomError

from academic_records.core.exceptions import InvalidInputError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Request-level location prefixes added by FastAPI; not field names.
_LOCATION_PREFIXES = {"body", "path", "query", "header", "cookie"}


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; lax mode would turn true into 1
    if isinstance(value, bool):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return value


# Id of another record sent in a request body. Numeric strings are still accepted.
ReferenceId = Annotated[PositiveInt, BeforeValidator(_reject_bool)]


def _field_label(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc if not isinstance(p, int)]
    while len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "input"


def describe_error(error: Mapping[str, Any]) -> str:
    """Turn one pydantic error dict into a sentence naming the field."""
    label = _field_label(error.get("loc", ()))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required."
    if kind == "string_too_short":
        value = error.get("input")
        if isinstance(value, str) and not value.strip():
            return f"{label} is required."
        return f"{label} must be at least {ctx.get('min_length')} characters long."
    if kind == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters long."
    if kind == "string_type":
        return f"{label} must be text."
    if kind in ("int_type", "int_parsing", "int_from_float"):
        return f"{label} must be an integer."
    if kind == "greater_than" and ctx.get("gt") == 0:
        return f"{label} must be a positive number."
    if kind == "value_error" and "email" in str(error.get("msg", "")).lower():
        return f"{label} must be a valid email address."
    if kind in ("json_invalid", "model_attributes_type", "dict_type", "model_type"):
        return "Request body must be a JSON object."
    msg = str(error.get("msg", "is invalid"))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{label}: {msg}"


def format_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    messages: List[str] = []
    for error in errors:
        message = describe_error(error).rstrip(".")
        if message not in messages:
            messages.append(message)
    return ". ".join(messages) + "." if messages else ""


def validate_input(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Validate raw input against schema, collecting every field error before failing."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(errors=format_errors(e.errors()))
