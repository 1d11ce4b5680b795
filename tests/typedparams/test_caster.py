"""Tests for typedparams.caster module."""

from datetime import date, datetime, time, timezone
from enum import Enum, IntEnum

import numpy as np
import pytest

from typedparams import CastingError, ParameterCaster, ParamsConfigModel
from typedparams.caster import deserialize, type_name


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Currency:
    """Enumeration-like class with its own deserialize."""

    CODES = {"usd": "USD", "eur": "EUR"}

    def __init__(self, code: str):
        self.code = code

    @classmethod
    def deserialize(cls, raw):
        return cls(cls.CODES[raw.lower()])


@pytest.fixture
def caster():
    return ParameterCaster(ParamsConfigModel())


class TestPassThrough:
    """None and values already of the target type."""

    def test_none_passes_through(self, caster):
        for target in (int, float, str, bool, date, datetime, Color):
            assert caster.cast_value(None, target) is None

    def test_same_type_unchanged(self, caster):
        today = date(2024, 1, 15)
        assert caster.cast_value(7, int) == 7
        assert caster.cast_value(today, date) is today
        assert caster.cast_value(Color.RED, Color) is Color.RED


class TestBoolean:
    """Boolean casting."""

    @pytest.mark.parametrize("raw", ["true", "T", "Yes", "y", "1"])
    def test_true_strings(self, caster, raw):
        assert caster.cast_value(raw, bool) is True

    @pytest.mark.parametrize("raw", ["false", "F", "NO", "n", "0"])
    def test_false_strings(self, caster, raw):
        assert caster.cast_value(raw, bool) is False

    def test_integers_by_truthiness(self, caster):
        assert caster.cast_value(5, bool) is True
        assert caster.cast_value(0, bool) is False

    def test_unknown_string_fails(self, caster):
        with pytest.raises(CastingError, match="Cannot cast maybe to Boolean"):
            caster.cast_value("maybe", bool)

    def test_float_fails(self, caster):
        with pytest.raises(CastingError):
            caster.cast_value(1.0, bool)

    def test_custom_literals_from_config(self):
        caster = ParameterCaster(ParamsConfigModel(true_values={"on"}, false_values={"off"}))
        assert caster.cast_value("ON", bool) is True
        assert caster.cast_value("off", bool) is False
        with pytest.raises(CastingError):
            caster.cast_value("yes", bool)


class TestNumbers:
    """Integer and float casting."""

    def test_integer_strings(self, caster):
        assert caster.cast_value("42", int) == 42
        assert caster.cast_value(" -3 ", int) == -3
        assert caster.cast_value("0x1F", int) == 31

    def test_integer_truncates_floats(self, caster):
        assert caster.cast_value(3.9, int) == 3
        assert caster.cast_value(-3.9, int) == -3

    def test_integer_rejects_text(self, caster):
        with pytest.raises(CastingError, match="Cannot cast x to Integer"):
            caster.cast_value("x", int)
        with pytest.raises(CastingError):
            caster.cast_value("1.5", int)

    def test_integer_rejects_booleans(self, caster):
        with pytest.raises(CastingError):
            caster.cast_value(True, int)

    def test_numpy_integer(self, caster):
        result = caster.cast_value(np.int64(9), int)
        assert result == 9
        assert type(result) is int

    def test_float_conversions(self, caster):
        assert caster.cast_value(2, float) == 2.0
        assert caster.cast_value("2.5", float) == 2.5
        assert caster.cast_value(1.25, float) == 1.25

    def test_float_rejects_text_and_non_finite(self, caster):
        with pytest.raises(CastingError, match="Cannot cast abc to Float"):
            caster.cast_value("abc", float)
        with pytest.raises(CastingError):
            caster.cast_value("nan", float)


class TestString:
    """String casting never fails."""

    def test_canonical_text(self, caster):
        assert caster.cast_value(5, str) == "5"
        assert caster.cast_value(2.5, str) == "2.5"
        assert caster.cast_value(True, str) == "True"
        assert caster.cast_value("a", str) == "a"


class TestTemporal:
    """Date, time and datetime casting."""

    def test_date_from_string(self, caster):
        assert caster.cast_value("2024-01-15", date) == date(2024, 1, 15)

    def test_date_from_datetime(self, caster):
        result = caster.cast_value(datetime(2024, 1, 15, 10, 30), date)
        assert result == date(2024, 1, 15)
        assert type(result) is date

    def test_date_rejects_garbage(self, caster):
        with pytest.raises(CastingError, match="Cannot cast not a date to Date"):
            caster.cast_value("not a date", date)
        with pytest.raises(CastingError):
            caster.cast_value("", date)

    def test_date_rejects_integers(self, caster):
        with pytest.raises(CastingError):
            caster.cast_value(1700000000, date)

    def test_datetime_from_string(self, caster):
        assert caster.cast_value("2024-01-15T10:30:00", datetime) == datetime(2024, 1, 15, 10, 30)

    def test_datetime_from_date(self, caster):
        assert caster.cast_value(date(2024, 1, 15), datetime) == datetime(2024, 1, 15)

    def test_datetime_from_epoch(self, caster):
        assert caster.cast_value(0, datetime) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_datetime_dayfirst(self):
        caster = ParameterCaster(ParamsConfigModel(dayfirst=True))
        assert caster.cast_value("02/01/2024", date) == date(2024, 1, 2)

    def test_time_from_datetime_and_epoch(self, caster):
        assert caster.cast_value(datetime(2024, 1, 15, 10, 30), time) == time(10, 30)
        assert caster.cast_value(3600, time) == time(1, 0, tzinfo=timezone.utc)

    def test_time_from_string(self, caster):
        assert caster.cast_value("2024-01-15 08:15:00", time) == time(8, 15)


class TestEnumeration:
    """Enumeration casting and deserialization."""

    def test_member_by_value(self, caster):
        assert caster.cast_value("red", Color) is Color.RED
        assert caster.cast_value(2, Level) is Level.HIGH

    def test_member_by_rendered_value(self, caster):
        assert caster.cast_value("2", Level) is Level.HIGH

    def test_unknown_value_fails(self, caster):
        with pytest.raises(CastingError, match="Cannot cast blue to Color"):
            caster.cast_value("blue", Color)

    def test_non_scalar_fails(self, caster):
        with pytest.raises(CastingError):
            caster.cast_value(["red"], Color)

    def test_custom_deserialize(self, caster):
        assert caster.cast_value("USD", Currency).code == "USD"
        with pytest.raises(CastingError, match="Cannot cast gbp to Currency"):
            deserialize(Currency, "gbp")


class TestOtherTypes:
    """Types without a dedicated conversion."""

    def test_instance_passes(self, caster):
        payload = {"a": 1}
        assert caster.cast_value(payload, dict) is payload

    def test_non_instance_fails(self, caster):
        with pytest.raises(CastingError, match="Cannot cast str to dict"):
            caster.cast_value("x", dict)

    def test_type_names(self):
        assert type_name(int) == "Integer"
        assert type_name(datetime) == "DateTime"
        assert type_name(Color) == "Color"


class TestIdempotence:
    """Casting an already cast value returns the same value."""

    @pytest.mark.parametrize(
        "raw,target",
        [
            ("42", int),
            ("2.5", float),
            ("yes", bool),
            (5, str),
            ("2024-01-15", date),
            ("2024-01-15T10:30:00", datetime),
            (3600, time),
            ("green", Color),
        ],
    )
    def test_cast_twice(self, caster, raw, target):
        once = caster.cast_value(raw, target)
        assert caster.cast_value(once, target) == once
