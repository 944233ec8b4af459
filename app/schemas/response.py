from typing import Any, Generic, Iterable, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

# Request parts FastAPI prefixes onto validation error locations
_LOCATION_PREFIXES = ("body", "path", "query")


class FieldError(BaseModel):
    """A single validation problem on one request field."""
    field: str
    message: str


def field_errors_from(errors: Iterable[dict[str, Any]]) -> list[FieldError]:
    """
    Convert pydantic error dictionaries into FieldError entries.

    Args:
        errors: Output of ``ValidationError.errors()`` or ``RequestValidationError.errors()``

    Returns:
        One FieldError per problem, with dotted field paths
    """
    result = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        result.append(FieldError(field=field, message=error.get("msg", "Invalid value")))
    return result


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform response envelope.

    Every endpoint, including error responses, answers with this shape.
    Keys that are not set are left out of the JSON body.
    """
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[list[FieldError]] = None
