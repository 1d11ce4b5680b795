"""Construction of typed objects from validated request data.

The builder runs only after validation succeeded. It never raises for a value
it cannot convert: such values are passed through unchanged, or omitted when
they cannot take the declared shape at all.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ._types import Classification, TypeCategory
from .caster import ParameterCaster, deserialize
from .classification import classify, classify_element, classify_type
from .errors import CastingError
from .params import as_list, is_array
from .schema import Schema

logger = logging.getLogger(__name__)


def convert_params_to_objects(
    params: Mapping[str, Any],
    schema: Schema,
    caster: ParameterCaster | None = None,
) -> dict[str, Any]:
    """Convert request data to constructor keyword arguments for a schema.

    Fields that are absent (or None) are left to the host's defaults when the
    field has one, and set to None otherwise.
    """
    caster = caster or ParameterCaster()
    converted: dict[str, Any] = {}

    for name, descriptor in schema.properties.items():
        value = params.get(name)
        if value is not None:
            category, underlying = classify(schema, name)
            if category is TypeCategory.ARRAY:
                value = _convert_array(value, classify_element(schema, name), caster)
            else:
                value = convert_value_by_type(category, value, underlying, caster)

        if value is None:
            if not descriptor.has_default:
                converted[name] = None
            continue
        converted[name] = value

    return converted


def build(
    params: Mapping[str, Any],
    schema: Schema,
    caster: ParameterCaster | None = None,
) -> Any:
    """Instantiate the schema's type from validated request data."""
    return schema.constructor(**convert_params_to_objects(params, schema, caster))


def convert_value_by_type(
    category: TypeCategory, value: Any, underlying: Any, caster: ParameterCaster
) -> Any:
    """Convert a non-None value according to its type category."""
    if category is TypeCategory.ARRAY:
        return _convert_array(value, classify_type(underlying), caster)
    if category is TypeCategory.NESTED_SCHEMA:
        return _convert_struct(value, underlying, caster)
    if category is TypeCategory.ENUMERATION:
        return _convert_enum(value, underlying)
    return _convert_primitive(value, underlying, caster)


def _convert_array(value: Any, element: Classification, caster: ParameterCaster) -> list[Any]:
    if not is_array(value):
        return []

    element_category, element_type = element
    return [
        None if item is None else convert_value_by_type(element_category, item, element_type, caster)
        for item in as_list(value)
    ]


def _convert_struct(value: Any, nested: Schema, caster: ParameterCaster) -> Any:
    if isinstance(nested.constructor, type) and isinstance(value, nested.constructor):
        return value
    if isinstance(value, Mapping):
        return build(value, nested, caster)
    return None


def _convert_enum(value: Any, enum_type: Any) -> Any:
    try:
        return deserialize(enum_type, value)
    except CastingError:
        logger.debug(f"Passing through unknown {getattr(enum_type, '__name__', enum_type)} value")
        return value


def _convert_primitive(value: Any, target_type: Any, caster: ParameterCaster) -> Any:
    try:
        return caster.cast_value(value, target_type)
    except CastingError:
        return value
