"""Pydantic models for typedparams.

This module contains the model definitions shared across the package:

- `ParamsBaseModel`: base class giving every model strict, immutable behavior
- `PropertyDescriptorModel`: one declared field of a schema
- `Bounds`: an inclusive value interval usable as a field option
- `ParamsConfigModel`: process-wide conversion settings

Example:
    >>> from typedparams.models import PropertyDescriptorModel
    >>> descriptor = PropertyDescriptorModel(name="age", declared_type=int, optional=True)
    >>> descriptor.is_skippable
    True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ParamsBaseModel(BaseModel):
    """Base model for all typedparams Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class Bounds(ParamsBaseModel):
    """Inclusive interval constraint for a field value.

    Either end may be omitted to leave that side open.

    Example:
        >>> Bounds(minimum=18, maximum=65).contains(30)
        True
    """

    minimum: Any | None = None
    maximum: Any | None = None

    @model_validator(mode="after")
    def check_order(self) -> Bounds:
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError(f"minimum {self.minimum} is greater than maximum {self.maximum}")
        return self

    def contains(self, value: Any) -> bool:
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True

    def describe(self) -> str:
        if self.minimum is None:
            return f"at most {self.maximum}"
        if self.maximum is None:
            return f"at least {self.minimum}"
        return f"between {self.minimum} and {self.maximum}"


FieldCheck = Callable[[Any], Any]


class PropertyDescriptorModel(ParamsBaseModel):
    """Declaration of a single schema field.

    Attributes:
        name: Field name, also the key looked up in the incoming data.
        declared_type: The raw declared type annotation (e.g. ``int``,
            ``list[Address]``, ``Status | None``).
        optional: The field may be absent without error.
        nilable: The field may be ``None`` (declared ``Optional[T]``).
        has_default: The host supplies a value when the field is absent.
        options: Allowed values, a ``range`` or a ``Bounds`` interval.
        checks: Callables run on the built field value; a falsy result
            marks the field invalid.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    declared_type: Any
    optional: bool = False
    nilable: bool = False
    has_default: bool = False
    options: Any | None = None
    checks: tuple[FieldCheck, ...] = ()

    @property
    def is_skippable(self) -> bool:
        """Whether a missing value for this field is acceptable."""
        return self.optional or self.has_default or self.nilable


class ParamsConfigModel(ParamsBaseModel):
    """Conversion settings.

    Attributes:
        epoch_timezone: Timezone applied when integers are read as Unix
            epoch seconds. ``"utc"`` yields aware datetimes, ``"local"``
            yields naive local datetimes.
        dayfirst: Resolve ambiguous dates such as ``01/02/2024`` day first.
        true_values: Strings (lowercase) accepted as ``True``.
        false_values: Strings (lowercase) accepted as ``False``.
        telemetry_enabled: Emit OpenTelemetry spans and counters.

    Example:
        >>> config = ParamsConfigModel(dayfirst=True)
        >>> config.epoch_timezone
        'utc'
    """

    epoch_timezone: Literal["utc", "local"] = "utc"
    dayfirst: bool = False
    true_values: frozenset[str] = frozenset({"true", "t", "yes", "y", "1"})
    false_values: frozenset[str] = frozenset({"false", "f", "no", "n", "0"})
    telemetry_enabled: bool = False

    @model_validator(mode="after")
    def check_boolean_literals(self) -> ParamsConfigModel:
        overlap = self.true_values & self.false_values
        if overlap:
            raise ValueError(f"Values cannot be both true and false: {sorted(overlap)}")
        return self
