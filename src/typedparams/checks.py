"""Post-construction checks on built instances.

Two kinds of checks run once an instance exists:

- the instance's own ``validate()`` method, if its class defines one; a
  `ValidationError` raised from it is reported under the ``"base"`` key
- the field checks declared on the schema; a falsy result reports
  ``"Invalid value"`` for the field, a raised `ValidationError` reports its
  message

Nested instances, and lists of them, are checked recursively.
"""

import logging
from typing import Any

from ._types import ErrorTree, TypeCategory
from .classification import classify, classify_element
from .errors import ValidationError
from .schema import Schema, schema_for

logger = logging.getLogger(__name__)

BASE_KEY = "base"
HOOK_NAME = "validate"


def run_checks(instance: Any, schema: Schema | None = None) -> ErrorTree:
    """Run instance and field checks, returning the error tree.

    Fields whose value is None are not checked.
    """
    schema = schema or schema_for(type(instance))
    if schema is None:
        return {}

    errors: ErrorTree = {}

    hook = getattr(instance, HOOK_NAME, None)
    if callable(hook):
        try:
            hook()
        except ValidationError as e:
            errors[BASE_KEY] = [e.message]

    for name in schema.properties:
        value = getattr(instance, name, None)
        if value is None:
            continue

        field_errors = _check_nested(value, schema, name)
        if field_errors:
            errors[name] = field_errors
            continue

        messages = _run_field_checks(value, schema, name)
        if messages:
            errors[name] = messages

    if errors:
        logger.debug(f"Post-construction checks failed for {schema.name}: {sorted(map(str, errors))}")
    return errors


def _check_nested(value: Any, schema: Schema, name: str) -> ErrorTree:
    category, underlying = classify(schema, name)

    if category is TypeCategory.NESTED_SCHEMA:
        return run_checks(value, underlying)

    if category is TypeCategory.ARRAY and isinstance(value, list):
        element_category, element_type = classify_element(schema, name)
        if element_category is not TypeCategory.NESTED_SCHEMA:
            return {}
        array_errors: ErrorTree = {}
        for index, item in enumerate(value):
            if item is None:
                continue
            item_errors = run_checks(item, element_type)
            if item_errors:
                array_errors[index] = item_errors
        return array_errors

    return {}


def _run_field_checks(value: Any, schema: Schema, name: str) -> list[str]:
    messages: list[str] = []
    for check in schema.checks_for(name):
        try:
            if not check(value):
                messages.append("Invalid value")
        except ValidationError as e:
            messages.append(e.message)
    return messages
