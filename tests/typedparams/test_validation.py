"""Tests for typedparams.validation module."""

from datetime import date
from enum import Enum
from typing import Optional

import pytest

from typedparams import Bounds, Params, params_schema, prop, validate_keys
from typedparams.validation import set_nested_error


class Status(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@params_schema
class LineItem:
    sku: str
    quantity: int = prop(options=Bounds(minimum=1, maximum=99), default=1)


@params_schema
class Address:
    street: str
    zip_code: Optional[str] = None


@params_schema
class Order:
    customer: str
    status: Status
    items: list[LineItem]
    address: Address
    placed_on: Optional[date] = None
    notes: list[str] = prop(default_factory=list)
    scores: list[int] = prop(optional=True, options=range(0, 11))
    priority: int = prop(default=0)
    channel: str = prop(optional=True, options=["web", "store"])


def valid_order(**overrides):
    data = {
        "customer": "Ann",
        "status": "active",
        "items": [{"sku": "A1", "quantity": "2"}],
        "address": {"street": "Main"},
    }
    data.update(overrides)
    return data


SCHEMA = Order.__params_schema__


class TestValidInput:
    """Inputs that validate cleanly."""

    def test_valid_order(self):
        assert validate_keys(valid_order(), SCHEMA) == {}

    def test_accepts_params_container(self):
        assert validate_keys(Params(valid_order()), SCHEMA) == {}

    def test_empty_array_is_valid(self):
        assert validate_keys(valid_order(items=[]), SCHEMA) == {}

    def test_none_elements_skipped(self):
        assert validate_keys(valid_order(items=[None, {"sku": "B"}]), SCHEMA) == {}

    def test_optional_nilable_and_defaulted_fields_skipped(self):
        data = valid_order(placed_on=None, notes=None, scores=None, priority=None)
        assert validate_keys(data, SCHEMA) == {}

    def test_does_not_mutate_input(self):
        data = valid_order()
        validate_keys(data, SCHEMA)
        assert data == valid_order()


class TestRequiredFields:
    """Missing required fields."""

    def test_missing_fields(self):
        errors = validate_keys({}, SCHEMA)
        assert errors == {
            "customer": ["Field is required"],
            "status": ["Field is required"],
            "items": ["Field is required"],
            "address": ["Field is required"],
        }

    def test_explicit_none_is_missing(self):
        errors = validate_keys(valid_order(customer=None), SCHEMA)
        assert errors == {"customer": ["Field is required"]}

    def test_nested_required(self):
        errors = validate_keys(valid_order(address={}), SCHEMA)
        assert errors == {"address": {"street": ["Field is required"]}}


class TestTypeErrors:
    """Values that cannot be cast."""

    def test_invalid_primitive(self):
        errors = validate_keys(valid_order(placed_on="someday"), SCHEMA)
        assert errors == {"placed_on": ["Invalid value"]}

    def test_invalid_enumeration(self):
        errors = validate_keys(valid_order(status="deleted"), SCHEMA)
        assert errors == {"status": ["Invalid value"]}

    def test_not_an_array(self):
        errors = validate_keys(valid_order(items={"sku": "A1"}), SCHEMA)
        assert errors == {"items": ["Must be an array"]}

    def test_string_is_not_an_array(self):
        errors = validate_keys(valid_order(notes="hello"), SCHEMA)
        assert errors == {"notes": ["Must be an array"]}

    def test_nested_not_a_mapping(self):
        errors = validate_keys(valid_order(address="Main street"), SCHEMA)
        assert errors == {"address": ["Invalid value"]}

    def test_string_arrays_never_fail(self):
        assert validate_keys(valid_order(notes=["a", 5, 2.5]), SCHEMA) == {}


class TestArrayErrors:
    """Errors inside arrays are keyed by index."""

    def test_invalid_nested_element_keyed_by_index(self):
        items = [{"sku": "A"}, {"sku": "B"}, {"quantity": "x"}]
        errors = validate_keys(valid_order(items=items), SCHEMA)
        assert errors == {
            "items": {2: {"sku": ["Field is required"], "quantity": ["Invalid value"]}}
        }

    def test_scalar_where_nested_element_expected(self):
        errors = validate_keys(valid_order(items=[{"sku": "A"}, "B"]), SCHEMA)
        assert errors == {"items": {1: ["Invalid value"]}}

    def test_primitive_element_message(self):
        errors = validate_keys(valid_order(scores=["1", "x", "3"]), SCHEMA)
        assert errors == {"scores": {1: ["Cannot cast x to Integer"]}}

    def test_element_options(self):
        errors = validate_keys(valid_order(scores=[5, 11]), SCHEMA)
        assert errors == {"scores": {1: ["Must be between 0 and 10"]}}


class TestOptions:
    """Options are checked after casting."""

    def test_bounds_on_nested_field(self):
        errors = validate_keys(valid_order(items=[{"sku": "A", "quantity": "150"}]), SCHEMA)
        assert errors == {"items": {0: {"quantity": ["Must be between 1 and 99"]}}}

    def test_allowed_values(self):
        errors = validate_keys(valid_order(channel="phone"), SCHEMA)
        assert errors == {"channel": ["Must be one of: web, store"]}

    def test_allowed_value_passes(self):
        assert validate_keys(valid_order(channel="web"), SCHEMA) == {}


class TestPathPrefix:
    """Errors placed under a caller-supplied path."""

    def test_prefix(self):
        errors = validate_keys({}, Address.__params_schema__, path=["order", "address"])
        assert errors == {"order": {"address": {"street": ["Field is required"]}}}


class TestSetNestedError:
    """Error tree construction."""

    def test_creates_intermediate_nodes(self):
        errors = {}
        set_nested_error(errors, ["a", 0, "b"], ["bad"])
        assert errors == {"a": {0: {"b": ["bad"]}}}

    @pytest.mark.parametrize("empty", [None, [], {}])
    def test_empty_messages_pruned(self, empty):
        errors = {}
        set_nested_error(errors, ["a", "b"], empty)
        assert errors == {}
