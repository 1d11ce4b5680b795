"""Permitted-key planning.

Computes, per schema, the structural allowlist of keys accepted from request
data, and converts it to the filter expression understood by
`typedparams.params.Params.permit`.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ._types import FilterExpression, PermittedKeyPlan, TypeCategory
from .classification import classify, classify_element
from .errors import SchemaDefinitionError
from .params import Params
from .schema import Schema

logger = logging.getLogger(__name__)


def permitted_keys(schema: Schema, _stack: tuple[Schema, ...] = ()) -> PermittedKeyPlan:
    """Get the permitted-key plan for a schema.

    Results are cached on the schema. Concurrent first calls may both compute
    the plan; the result is the same either way.

    Raises:
        SchemaDefinitionError: If the schema refers to itself, directly or
            through nested schemas
    """
    cached = schema.cached_permitted_keys()
    if cached is not None:
        return cached

    if any(schema is planned for planned in _stack):
        raise SchemaDefinitionError(f"Schema {schema.name} is recursive; cannot plan permitted keys")

    plan = compute_permitted_keys(schema, (*_stack, schema))
    logger.debug(f"Computed permitted keys for {schema.name}: {sorted(plan)}")
    return schema.store_permitted_keys(plan)


def compute_permitted_keys(schema: Schema, _stack: tuple[Schema, ...] = ()) -> PermittedKeyPlan:
    """Actual computation for permitted_keys (not cached).

    ``_stack`` holds the schemas being planned further up the recursion.
    """
    if not _stack:
        _stack = (schema,)
    plan: PermittedKeyPlan = {}
    for name in schema.properties:
        category, underlying = classify(schema, name)

        if category is TypeCategory.ARRAY:
            element_category, element_type = classify_element(schema, name)
            if element_category is TypeCategory.NESTED_SCHEMA:
                plan[name] = [permitted_keys(element_type, _stack)]
            else:
                plan[name] = []
        elif category is TypeCategory.NESTED_SCHEMA:
            plan[name] = permitted_keys(underlying, _stack)
        else:
            plan[name] = None
    return plan


def to_filter_expression(plan: PermittedKeyPlan) -> FilterExpression:
    """Convert a permitted-key plan to a filter expression.

    - ``None`` becomes the bare key
    - a nested plan becomes ``{key: <converted plan>}``
    - ``[plan]`` becomes ``{key: [<converted plan>]}``
    - ``[]`` becomes ``{key: []}``
    """
    expression: FilterExpression = []
    for key, value in plan.items():
        if isinstance(value, list) and value and isinstance(value[0], Mapping):
            expression.append({key: [to_filter_expression(value[0])]})
        elif isinstance(value, list):
            expression.append({key: []})
        elif isinstance(value, Mapping):
            expression.append({key: to_filter_expression(value)})
        else:
            expression.append(key)
    return expression


def build_safe_params(params: Params | Mapping[str, Any], schema: Schema) -> Params:
    """Restrict request data to the keys the schema accepts."""
    if not isinstance(params, Params):
        params = Params(params)
    return params.permit(to_filter_expression(permitted_keys(schema)))
