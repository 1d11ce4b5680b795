"""Type classification for declared field types.

Every declared type is reduced to one of four categories that decide how the
validator and the builder treat a value:

- ``ARRAY``: ``list[T]``, ``Sequence[T]``, ``tuple[T, ...]``
- ``NESTED_SCHEMA``: a class carrying its own params schema
- ``ENUMERATION``: an ``Enum`` subclass or a class exposing ``deserialize``
- ``PRIMITIVE``: everything else

``Optional[T]`` is classified as ``T``; whether ``None`` is acceptable is
recorded on the property descriptor, not in the category. Results are cached
on the owning schema under the field name, and under ``"<field>[]"`` for the
element type of an array field.
"""

import collections.abc
import logging
import types
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

from ._types import Classification, TypeCategory
from .schema import Schema, schema_for

logger = logging.getLogger(__name__)

_ARRAY_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)

ELEMENT_SUFFIX = "[]"


def is_enumeration(tp: Any) -> bool:
    """Whether values of ``tp`` are looked up by raw value."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return issubclass(tp, Enum) or callable(getattr(tp, "deserialize", None))


def is_nilable(declared_type: Any) -> bool:
    """Whether a declared type admits ``None`` (``Optional[T]``, ``T | None``)."""
    if get_origin(declared_type) is Annotated:
        return is_nilable(get_args(declared_type)[0])
    if get_origin(declared_type) in (Union, types.UnionType):
        return type(None) in get_args(declared_type)
    return declared_type is None or declared_type is type(None)


def classify_type(declared_type: Any) -> Classification:
    """Classify a declared type. Never raises.

    Args:
        declared_type: A type annotation

    Returns:
        Tuple of (category, underlying type). The underlying type is the
        element type for arrays and the Schema for nested schemas.
    """
    origin = get_origin(declared_type)

    if origin is Annotated:
        return classify_type(get_args(declared_type)[0])

    if declared_type in (list, tuple):
        return TypeCategory.ARRAY, Any

    if origin in _ARRAY_ORIGINS:
        args = get_args(declared_type)
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            # Fixed-length tuples are records, not arrays
            return TypeCategory.PRIMITIVE, declared_type
        return TypeCategory.ARRAY, args[0] if args else Any

    nested = schema_for(declared_type)
    if nested is not None:
        return TypeCategory.NESTED_SCHEMA, nested

    if is_enumeration(declared_type):
        return TypeCategory.ENUMERATION, declared_type

    if origin in (Union, types.UnionType):
        non_nil = [arg for arg in get_args(declared_type) if arg is not type(None)]
        if len(non_nil) == 1:
            return classify_type(non_nil[0])

    return TypeCategory.PRIMITIVE, declared_type


def classify(schema: Schema, field_name: str) -> Classification:
    """Classify a declared field of ``schema``, using the schema's cache."""
    cached = schema.cached_classification(field_name)
    if cached is not None:
        return cached

    descriptor = schema.properties[field_name]
    result = classify_type(descriptor.declared_type)
    logger.debug(f"Classified {schema.name}.{field_name} as {result[0].value}")
    return schema.store_classification(field_name, result)


def classify_element(schema: Schema, field_name: str) -> Classification:
    """Classify the element type of an array field of ``schema``."""
    key = field_name + ELEMENT_SUFFIX
    cached = schema.cached_classification(key)
    if cached is not None:
        return cached

    category, element_type = classify(schema, field_name)
    if category is not TypeCategory.ARRAY:
        raise ValueError(f"{schema.name}.{field_name} is not an array field")
    return schema.store_classification(key, classify_type(element_type))
