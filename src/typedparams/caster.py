"""Casting of raw parameter values to their declared types."""

import logging
import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from .classification import is_enumeration
from .config import get_config
from .errors import CastingError
from .models import ParamsConfigModel

logger = logging.getLogger(__name__)

TYPE_NAMES: dict[Any, str] = {
    bool: "Boolean",
    int: "Integer",
    float: "Float",
    str: "String",
    date: "Date",
    time: "Time",
    datetime: "DateTime",
}


def type_name(target_type: Any) -> str:
    if target_type in TYPE_NAMES:
        return TYPE_NAMES[target_type]
    return getattr(target_type, "__name__", str(target_type))


def deserialize(enum_type: Any, raw: Any) -> Any:
    """Look up a member of an enumeration type by its raw value.

    Classes exposing a ``deserialize`` callable are delegated to. ``Enum``
    subclasses are looked up by value, and strings additionally match members
    whose value renders to the same text (so ``"2"`` finds ``Level.HIGH = 2``).

    Raises:
        CastingError: If no member matches
    """
    if isinstance(enum_type, type) and isinstance(raw, enum_type):
        return raw

    custom = getattr(enum_type, "deserialize", None)
    if callable(custom):
        try:
            return custom(raw)
        except (ValueError, KeyError, TypeError, LookupError) as e:
            raise CastingError(f"Cannot cast {raw} to {type_name(enum_type)}") from e

    if isinstance(enum_type, type) and issubclass(enum_type, Enum):
        try:
            return enum_type(raw)
        except ValueError:
            pass
        if isinstance(raw, str):
            for member in enum_type:
                if str(member.value) == raw:
                    return member

    raise CastingError(f"Cannot cast {raw} to {type_name(enum_type)}")


class ParameterCaster:
    """Casts raw values to target types.

    Used by the validator to check that a value can be converted, and by the
    builder to perform the conversion.

    Example:
        >>> caster = ParameterCaster()
        >>> caster.cast_value("42", int)
        42
        >>> caster.cast_value("yes", bool)
        True
    """

    def __init__(self, config: ParamsConfigModel | None = None):
        self.config = config or get_config()

    def cast_value(self, value: Any, target_type: Any) -> Any:
        """Cast a value to the target type.

        Args:
            value: The value to cast
            target_type: The target type to cast to

        Returns:
            The cast value

        Raises:
            CastingError: If the value cannot be cast to the target type
        """
        if value is None:
            return value
        if target_type is Any or target_type is object:
            return value

        if is_enumeration(target_type):
            return self._cast_to_enum(value, target_type)
        if target_type is bool:
            return self._cast_to_boolean(value)
        if target_type is int:
            return self._cast_to_integer(value)
        if target_type is float:
            return self._cast_to_float(value)
        if target_type is str:
            return self._cast_to_string(value)
        # datetime before date: datetime is a date subclass
        if target_type is datetime:
            return self._cast_to_datetime(value)
        if target_type is date:
            return self._cast_to_date(value)
        if target_type is time:
            return self._cast_to_time(value)

        # For other types like dicts or unions: not castable unless
        # it is already an instance
        try:
            if isinstance(value, target_type):
                return value
        except TypeError:
            pass
        raise CastingError(f"Cannot cast {type(value).__name__} to {type_name(target_type)}")

    def _cast_to_integer(self, value: Any) -> int:
        if isinstance(value, bool | np.bool_):
            raise CastingError(f"Cannot cast {value} to Integer")
        if isinstance(value, int):
            return value
        if isinstance(value, np.integer):
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text, 10)
            except ValueError:
                pass
            try:
                # Prefixed literals such as 0x1F or 0b101
                return int(text, 0)
            except ValueError:
                raise CastingError(f"Cannot cast {value} to Integer") from None
        if isinstance(value, float | np.floating):
            if not math.isfinite(value):
                raise CastingError(f"Cannot cast {value} to Integer")
            return int(value)
        raise CastingError(f"Cannot cast {type(value).__name__} to Integer")

    def _cast_to_float(self, value: Any) -> float:
        if isinstance(value, bool | np.bool_):
            raise CastingError(f"Cannot cast {value} to Float")
        if isinstance(value, float):
            return value
        if isinstance(value, int | np.integer | np.floating):
            return float(value)
        if isinstance(value, str):
            try:
                result = float(value)
            except ValueError:
                raise CastingError(f"Cannot cast {value} to Float") from None
            if not math.isfinite(result):
                raise CastingError(f"Cannot cast {value} to Float")
            return result
        raise CastingError(f"Cannot cast {type(value).__name__} to Float")

    def _cast_to_string(self, value: Any) -> str:
        return str(value)

    def _cast_to_boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, np.bool_):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in self.config.true_values:
                return True
            if lowered in self.config.false_values:
                return False
            raise CastingError(f"Cannot cast {value} to Boolean")
        if isinstance(value, int | np.integer):
            return value != 0
        raise CastingError(f"Cannot cast {type(value).__name__} to Boolean")

    def _parse_timestamp(self, value: str, target_name: str) -> datetime:
        try:
            parsed = pd.to_datetime(value.strip(), dayfirst=self.config.dayfirst)
        except (ValueError, TypeError, OverflowError):
            raise CastingError(f"Cannot cast {value} to {target_name}") from None
        if pd.isna(parsed):
            raise CastingError(f"Cannot cast {value} to {target_name}")
        return parsed.to_pydatetime()

    def _from_epoch(self, value: Any, target_name: str) -> datetime:
        try:
            if self.config.epoch_timezone == "utc":
                return datetime.fromtimestamp(int(value), tz=timezone.utc)
            return datetime.fromtimestamp(int(value))
        except (OverflowError, OSError, ValueError):
            raise CastingError(f"Cannot cast {value} to {target_name}") from None

    def _cast_to_date(self, value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return self._parse_timestamp(value, "Date").date()
        raise CastingError(f"Cannot cast {type(value).__name__} to Date")

    def _cast_to_time(self, value: Any) -> time:
        if isinstance(value, time):
            return value
        if isinstance(value, datetime):
            return value.timetz()
        if isinstance(value, str):
            return self._parse_timestamp(value, "Time").timetz()
        if isinstance(value, int | np.integer) and not isinstance(value, bool):
            return self._from_epoch(value, "Time").timetz()
        raise CastingError(f"Cannot cast {type(value).__name__} to Time")

    def _cast_to_datetime(self, value: Any) -> datetime:
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, str):
            return self._parse_timestamp(value, "DateTime")
        if isinstance(value, int | np.integer) and not isinstance(value, bool):
            return self._from_epoch(value, "DateTime")
        raise CastingError(f"Cannot cast {type(value).__name__} to DateTime")

    def _cast_to_enum(self, value: Any, enum_type: Any) -> Any:
        if isinstance(value, enum_type):
            return value
        if isinstance(value, bool) or not isinstance(value, str | int):
            raise CastingError(f"Cannot cast {type(value).__name__} to {type_name(enum_type)}")
        return deserialize(enum_type, value)


def cast_value(value: Any, target_type: Any) -> Any:
    """Cast with a caster built from the active configuration."""
    return ParameterCaster().cast_value(value, target_type)
