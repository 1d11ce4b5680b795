"""Main entry point: build a typed instance from request parameters."""

import logging
from collections.abc import Mapping
from typing import Any

from .builder import build
from .caster import ParameterCaster
from .checks import run_checks
from .errors import ValidationError
from .params import Params
from .permits import build_safe_params
from .schema import Schema, resolve_schema
from .telemetry import record_counter, traced_operation
from .validation import validate_keys

logger = logging.getLogger(__name__)


def permitted_params(params: Params | Mapping[str, Any], target: Schema | type) -> Params:
    """Restrict request data to a schema's keys and validate it.

    Args:
        params: The request parameters
        target: A schema, or a class carrying one

    Returns:
        The permitted parameters

    Raises:
        ValidationError: If validation fails
    """
    schema = resolve_schema(target)
    cleaned = build_safe_params(params, schema)
    errors = validate_keys(cleaned, schema)
    if errors:
        raise ValidationError(errors)
    return cleaned


def build_from_params(target: Schema | type, params: Params | Mapping[str, Any]) -> Any:
    """Create and validate an instance from request parameters.

    This is the main entry point for creating objects from request data:
    permit, validate, build, then run post-construction checks.

    Args:
        target: A schema, or a class carrying one
        params: The request parameters

    Returns:
        The validated instance

    Raises:
        ValidationError: If validation or a post-construction check fails
    """
    schema = resolve_schema(target)
    caster = ParameterCaster()

    with traced_operation("typedparams.build_from_params", {"typedparams.schema": schema.name}):
        cleaned = build_safe_params(params, schema)

        errors = validate_keys(cleaned, schema, caster=caster)
        if errors:
            _record_failure(schema, "validation", len(errors))
            raise ValidationError(errors)

        instance = build(cleaned, schema, caster)

        errors = run_checks(instance, schema)
        if errors:
            _record_failure(schema, "checks", len(errors))
            raise ValidationError(errors)

    logger.debug(f"Built {schema.name} from params")
    return instance


def _record_failure(schema: Schema, stage: str, field_count: int) -> None:
    logger.debug(f"{schema.name} rejected at {stage} stage ({field_count} field(s) with errors)")
    record_counter(
        "typedparams.validation.failures",
        attributes={"schema": schema.name, "stage": stage},
        description="Requests rejected during parameter conversion",
    )
