"""Exceptions raised by typedparams."""

from typing import Any

from ._types import ErrorTree


class CastingError(ValueError):
    """A single value cannot be converted to its target type."""

    pass


class SchemaDefinitionError(TypeError):
    """A schema declaration is invalid or used incorrectly."""

    pass


class ValidationError(ValueError):
    """Raised when incoming data does not match a schema.

    Carries either a nested error tree keyed by field name (and array index)
    or a free-text message.

    Attributes:
        details: The error tree, or None for a free-text error.

    Example:
        >>> try:
        ...     Person.build_from_params({})
        ... except ValidationError as e:
        ...     e.errors
        {'message': 'bad_request', 'details': {'name': ['Field is required']}}
    """

    def __init__(self, errors: ErrorTree | str):
        self._errors = errors
        super().__init__(errors if isinstance(errors, str) else repr(errors))

    @property
    def message(self) -> str:
        return str(self)

    @property
    def details(self) -> ErrorTree | None:
        if isinstance(self._errors, str):
            return None
        return self._errors

    @property
    def errors(self) -> dict[str, Any]:
        """Response body for a bad request."""
        if isinstance(self._errors, str):
            return {"message": self._errors}
        return {"message": "bad_request", "details": self._errors}
