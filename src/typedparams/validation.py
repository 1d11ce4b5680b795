"""Validation of request data against a schema.

The validator walks the data alongside the schema and collects every problem
into an error tree instead of stopping at the first one, so that a caller can
map the result directly onto per-field feedback:

    {"name": ["Field is required"],
     "address": {"street": ["Field is required"]},
     "items": {2: {"qty": ["Invalid value"]}}}
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ._types import ErrorTree, TypeCategory
from .caster import ParameterCaster
from .classification import classify, classify_element
from .errors import CastingError
from .params import as_list, is_array
from .schema import Schema, options_error

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Field is required"
INVALID_MESSAGE = "Invalid value"
ARRAY_MESSAGE = "Must be an array"


def set_nested_error(errors: ErrorTree, path: Sequence[str | int], messages: Any) -> None:
    """Set an error in a tree at ``path``, creating intermediate nodes.

    Empty messages are ignored so that empty interior nodes never appear.
    """
    if not messages:
        return

    current = errors
    for key in path[:-1]:
        current = current.setdefault(key, {})  # type: ignore[assignment]
    current[path[-1]] = messages


def validate_keys(
    params: Mapping[str, Any],
    schema: Schema,
    path: Sequence[str | int] = (),
    caster: ParameterCaster | None = None,
) -> ErrorTree:
    """Validate request data against a schema.

    Args:
        params: The data to validate
        schema: The schema to validate against
        path: Prefix for error placement in the returned tree
        caster: Caster used for type checks (defaults to one built from the
            active configuration)

    Returns:
        The error tree; empty when the data is valid
    """
    errors: ErrorTree = {}
    caster = caster or ParameterCaster()

    for name, descriptor in schema.properties.items():
        value = params.get(name)
        current_path = [*path, name]

        if value is None:
            if not descriptor.is_skippable:
                set_nested_error(errors, current_path, [REQUIRED_MESSAGE])
            continue

        category, underlying = classify(schema, name)

        if category is TypeCategory.ARRAY:
            _validate_array(value, schema, name, current_path, caster, errors)
        elif category is TypeCategory.NESTED_SCHEMA:
            _validate_struct(value, underlying, current_path, caster, errors)
        else:
            _validate_primitive(value, underlying, descriptor.options, current_path, caster, errors)

    return errors


def _validate_array(
    value: Any,
    schema: Schema,
    name: str,
    current_path: list[str | int],
    caster: ParameterCaster,
    errors: ErrorTree,
) -> None:
    if not is_array(value):
        set_nested_error(errors, current_path, [ARRAY_MESSAGE])
        return

    items = as_list(value)
    if not items:
        return

    element_category, element_type = classify_element(schema, name)
    options = schema.properties[name].options
    array_errors: ErrorTree = {}

    for index, item in enumerate(items):
        if item is None:
            continue

        if element_category is TypeCategory.NESTED_SCHEMA:
            if not isinstance(item, Mapping):
                array_errors[index] = [INVALID_MESSAGE]
                continue
            item_errors = validate_keys(item, element_type, (), caster)
            if item_errors:
                array_errors[index] = item_errors
        elif element_category is TypeCategory.ARRAY:
            if not is_array(item):
                array_errors[index] = [ARRAY_MESSAGE]
        else:
            message = _item_error(item, element_type, options, caster)
            if message:
                array_errors[index] = [message]

    set_nested_error(errors, current_path, array_errors)


def _item_error(item: Any, element_type: Any, options: Any, caster: ParameterCaster) -> str | None:
    try:
        cast = caster.cast_value(item, element_type)
    except CastingError as e:
        return str(e)
    return options_error(cast, options)


def _validate_struct(
    value: Any,
    nested: Schema,
    current_path: list[str | int],
    caster: ParameterCaster,
    errors: ErrorTree,
) -> None:
    if isinstance(nested.constructor, type) and isinstance(value, nested.constructor):
        # Already built; its own checks run after construction
        return
    if not isinstance(value, Mapping):
        set_nested_error(errors, current_path, [INVALID_MESSAGE])
        return
    set_nested_error(errors, current_path, validate_keys(value, nested, (), caster))


def _validate_primitive(
    value: Any,
    target_type: Any,
    options: Any,
    current_path: list[str | int],
    caster: ParameterCaster,
    errors: ErrorTree,
) -> None:
    try:
        cast = caster.cast_value(value, target_type)
    except CastingError:
        set_nested_error(errors, current_path, [INVALID_MESSAGE])
        return

    message = options_error(cast, options)
    if message:
        set_nested_error(errors, current_path, [message])
