"""Schema declarations and their derived caches.

A `Schema` is an ordered list of property descriptors plus the constructor
that turns converted field values into an instance. Schemas are declared once,
at import time, and then finalized; after that point the descriptor list is
immutable and the classification and permitted-key caches stay valid for the
lifetime of the process.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, get_origin

from ._types import Classification, PermittedKeyPlan
from .errors import SchemaDefinitionError
from .models import Bounds, FieldCheck, PropertyDescriptorModel

logger = logging.getLogger(__name__)

SCHEMA_ATTRIBUTE = "__params_schema__"


class Schema:
    """Named, ordered set of typed field declarations.

    Example:
        >>> schema = Schema("Person", Person)
        >>> schema.add_property(PropertyDescriptorModel(name="name", declared_type=str))
        >>> schema.finalize()
    """

    def __init__(
        self,
        name: str,
        constructor: Callable[..., Any],
        properties: Iterable[PropertyDescriptorModel] = (),
    ):
        self.name = name
        self.constructor = constructor
        self._properties: dict[str, PropertyDescriptorModel] = {}
        self._extra_checks: dict[str, list[FieldCheck]] = {}
        self._finalized = False

        # Derived caches, keyed structurally by field path
        self._classification_cache: dict[str, Classification] = {}
        self._permitted_keys: PermittedKeyPlan | None = None

        for descriptor in properties:
            self.add_property(descriptor)

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, fields={list(self._properties)})"

    @property
    def properties(self) -> Mapping[str, PropertyDescriptorModel]:
        return MappingProxyType(self._properties)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_property(self, descriptor: PropertyDescriptorModel) -> None:
        """Declare a field.

        Raises:
            SchemaDefinitionError: If the schema is finalized or the field
                is already declared
        """
        if self._finalized:
            raise SchemaDefinitionError(
                f"Cannot add field '{descriptor.name}' to finalized schema {self.name}"
            )
        if descriptor.name in self._properties:
            raise SchemaDefinitionError(f"Field '{descriptor.name}' already declared on {self.name}")

        self._properties[descriptor.name] = descriptor
        self.clear_caches()

    def add_check(self, field_name: str, check: FieldCheck) -> None:
        """Attach a post-construction check to a declared field."""
        if self._finalized:
            raise SchemaDefinitionError(
                f"Cannot add check for '{field_name}' to finalized schema {self.name}"
            )
        if field_name not in self._properties:
            raise SchemaDefinitionError(f"Unknown field '{field_name}' on {self.name}")
        self._extra_checks.setdefault(field_name, []).append(check)

    def checks_for(self, field_name: str) -> list[FieldCheck]:
        descriptor = self._properties.get(field_name)
        if descriptor is None:
            return []
        return [*descriptor.checks, *self._extra_checks.get(field_name, [])]

    def options_for(self, field_name: str) -> list[Any] | None:
        """Return the options of a field as a list of constraints, or None."""
        descriptor = self._properties.get(field_name)
        if descriptor is None:
            return None
        return normalize_options(descriptor.options)

    def finalize(self) -> "Schema":
        self._finalized = True
        logger.debug(f"Finalized schema {self.name} with {len(self._properties)} fields")
        return self

    def clear_caches(self) -> None:
        self._classification_cache = {}
        self._permitted_keys = None

    # Cache accessors used by the classifier and the planner

    def cached_classification(self, key: str) -> Classification | None:
        return self._classification_cache.get(key)

    def store_classification(self, key: str, classification: Classification) -> Classification:
        self._classification_cache[key] = classification
        return classification

    def cached_permitted_keys(self) -> PermittedKeyPlan | None:
        return self._permitted_keys

    def store_permitted_keys(self, plan: PermittedKeyPlan) -> PermittedKeyPlan:
        self._permitted_keys = plan
        return plan


def register_schema(cls: type, schema: Schema) -> Schema:
    """Attach a schema to a class so that type references to it resolve."""
    setattr(cls, SCHEMA_ATTRIBUTE, schema)
    return schema


def schema_for(tp: Any) -> Schema | None:
    """Return the schema declared on exactly this class, if any.

    Subclasses do not inherit the schema of their parent.
    """
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return None
    schema = vars(tp).get(SCHEMA_ATTRIBUTE)
    return schema if isinstance(schema, Schema) else None


def resolve_schema(target: "Schema | type") -> Schema:
    """Accept either a schema or a class carrying one."""
    if isinstance(target, Schema):
        return target
    schema = schema_for(target)
    if schema is None:
        raise SchemaDefinitionError(f"{target!r} has no params schema")
    return schema


# Options


def normalize_options(options: Any) -> list[Any] | None:
    """Normalize field options to a list of constraints.

    A single ``range`` or ``Bounds`` becomes a one-element list; any other
    collection becomes a list of allowed values.
    """
    if options is None:
        return None
    if isinstance(options, range | Bounds):
        return [options]
    if isinstance(options, str | bytes) or not isinstance(options, Iterable):
        return [options]
    return list(options)


def _satisfies(value: Any, constraint: Any) -> bool:
    try:
        if isinstance(constraint, Bounds):
            return constraint.contains(value)
        if isinstance(constraint, range):
            return value in constraint
        return bool(value == constraint)
    except TypeError:
        return False


def _describe(constraint: Any) -> str:
    if isinstance(constraint, Bounds):
        return constraint.describe()
    if isinstance(constraint, range):
        if constraint.step == 1 and len(constraint) > 0:
            return f"between {constraint.start} and {constraint[-1]}"
        return f"in {constraint!r}"
    return str(getattr(constraint, "value", constraint))


def options_error(value: Any, options: Any) -> str | None:
    """Return an error message when a value violates its options, else None."""
    constraints = normalize_options(options)
    if not constraints:
        return None
    if any(_satisfies(value, constraint) for constraint in constraints):
        return None
    if len(constraints) == 1 and isinstance(constraints[0], range | Bounds):
        return f"Must be {_describe(constraints[0])}"
    return f"Must be one of: {', '.join(_describe(c) for c in constraints)}"
