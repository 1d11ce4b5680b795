"""Dataclass adapter for declaring schemas.

Decorating a class with `params_schema` turns it into a dataclass (if it is
not one already), derives one property descriptor per init field, registers
the finalized schema on the class and adds ``build_from_params`` and
``permitted_params`` class methods.

Example:
    >>> @params_schema
    ... class Address:
    ...     street: str
    ...     city: str | None = None
    >>>
    >>> @params_schema
    ... class Person:
    ...     name: str
    ...     age: int = prop(optional=True, options=Bounds(minimum=0, maximum=150))
    ...     tags: list[str] = prop(default_factory=list)
    ...     address: Address | None = None
    >>>
    >>> Person.build_from_params({"name": "Ann", "age": "30"})
    Person(name='Ann', age=30, tags=[], address=None)
"""

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar, get_type_hints, overload

from .classification import is_nilable
from .errors import SchemaDefinitionError
from .models import FieldCheck, PropertyDescriptorModel
from .params import Params
from .pipeline import build_from_params, permitted_params
from .schema import Schema, register_schema

METADATA_KEY = "typedparams"

T = TypeVar("T")


def prop(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Callable[[], Any] | Any = dataclasses.MISSING,
    optional: bool = False,
    options: Any = None,
    checks: Iterable[FieldCheck] = (),
) -> Any:
    """Declare a dataclass field with typedparams metadata.

    Args:
        default: Default value used when the field is absent
        default_factory: Factory for the default value
        optional: The field may be absent; without an explicit default it
            is set to None
        options: Allowed values, a ``range`` or a ``Bounds`` interval
        checks: Callables run on the built value; a falsy result marks the
            field invalid
    """
    implicit_default = (
        optional and default is dataclasses.MISSING and default_factory is dataclasses.MISSING
    )
    metadata = {
        METADATA_KEY: {
            "optional": optional,
            "options": options,
            "checks": tuple(checks),
            "implicit_default": implicit_default,
        }
    }
    if implicit_default:
        default = None
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata)


def _descriptor_for(field: dataclasses.Field[Any], declared_type: Any) -> PropertyDescriptorModel:
    meta = field.metadata.get(METADATA_KEY, {})
    has_default = (
        field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING
    ) and not meta.get("implicit_default", False)

    return PropertyDescriptorModel(
        name=field.name,
        declared_type=declared_type,
        optional=meta.get("optional", False),
        nilable=is_nilable(declared_type),
        has_default=has_default,
        options=meta.get("options"),
        checks=meta.get("checks", ()),
    )


def schema_from_dataclass(cls: type, name: str | None = None) -> Schema:
    """Build a finalized schema from a dataclass's init fields.

    Raises:
        SchemaDefinitionError: If annotations cannot be resolved
    """
    if not dataclasses.is_dataclass(cls):
        raise SchemaDefinitionError(f"{cls.__name__} is not a dataclass")

    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise SchemaDefinitionError(f"Cannot resolve annotations of {cls.__name__}: {e}") from e

    schema = Schema(name or f"{cls.__module__}.{cls.__qualname__}", cls)
    for field in dataclasses.fields(cls):
        if field.init:
            schema.add_property(_descriptor_for(field, hints.get(field.name, field.type)))
    return schema.finalize()


def _build_from_params(cls: type[T], params: Params | Mapping[str, Any]) -> T:
    return build_from_params(cls, params)  # type: ignore[no-any-return]


def _permitted_params(cls: type, params: Params | Mapping[str, Any]) -> Params:
    return permitted_params(params, cls)


@overload
def params_schema(cls: type[T]) -> type[T]: ...


@overload
def params_schema(*, name: str | None = None) -> Callable[[type[T]], type[T]]: ...


def params_schema(cls: type[T] | None = None, *, name: str | None = None) -> Any:
    """Class decorator registering a params schema for a dataclass."""

    def wrap(target: type[T]) -> type[T]:
        if not dataclasses.is_dataclass(target):
            target = dataclasses.dataclass(target)
        register_schema(target, schema_from_dataclass(target, name))
        target.build_from_params = classmethod(_build_from_params)  # type: ignore[attr-defined]
        target.permitted_params = classmethod(_permitted_params)  # type: ignore[attr-defined]
        return target

    if cls is None:
        return wrap
    return wrap(cls)
