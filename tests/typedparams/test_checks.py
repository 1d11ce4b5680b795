"""Tests for typedparams.checks module."""

from typing import Optional

from typedparams import ValidationError, params_schema, prop, run_checks


def not_blank(value):
    return value.strip() != ""


def no_admin(value):
    if value == "admin":
        raise ValidationError("Reserved name")
    return True


@params_schema
class Guest:
    name: str = prop(checks=[not_blank, no_admin])

    def validate(self):
        if self.name == "nobody":
            raise ValidationError("Guest must be named")


@params_schema
class Booking:
    start: int
    end: int
    host: Optional[Guest] = None
    guests: list[Guest] = prop(default_factory=list)

    def validate(self):
        if self.end < self.start:
            raise ValidationError("End must not precede start")


class TestInstanceHook:
    """The instance's own validate() method."""

    def test_passing_hook(self):
        assert run_checks(Booking(start=1, end=2)) == {}

    def test_hook_error_under_base(self):
        assert run_checks(Booking(start=3, end=2)) == {"base": ["End must not precede start"]}

    def test_instance_without_schema(self):
        assert run_checks(object()) == {}


class TestFieldChecks:
    """Checks declared on fields."""

    def test_falsy_result(self):
        assert run_checks(Guest(name="  ")) == {"name": ["Invalid value"]}

    def test_raised_message(self):
        assert run_checks(Guest(name="admin")) == {"name": ["Reserved name"]}

    def test_none_values_skipped(self):
        assert run_checks(Guest(name=None)) == {}

    def test_explicit_schema(self):
        schema = Guest.__params_schema__
        assert run_checks(Guest(name="Ann"), schema) == {}


class TestNestedChecks:
    """Checks recurse into nested instances."""

    def test_nested_instance(self):
        booking = Booking(start=1, end=2, host=Guest(name="nobody"))
        assert run_checks(booking) == {"host": {"base": ["Guest must be named"]}}

    def test_array_of_instances(self):
        booking = Booking(start=1, end=2, guests=[Guest(name="Ann"), None, Guest(name="admin")])
        assert run_checks(booking) == {"guests": {2: {"name": ["Reserved name"]}}}

    def test_base_and_nested_together(self):
        booking = Booking(start=5, end=1, host=Guest(name=""))
        assert run_checks(booking) == {
            "base": ["End must not precede start"],
            "host": {"name": ["Invalid value"]},
        }
