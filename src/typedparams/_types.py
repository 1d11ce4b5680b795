"""Type definitions for typedparams.

This module re-exports the Pydantic models from models.py and defines the
aliases used across the conversion pipeline.
"""

from enum import Enum
from typing import Any, TypeAlias, Union

from .models import Bounds, ParamsConfigModel, PropertyDescriptorModel


class TypeCategory(Enum):
    """How a declared field type is processed."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    NESTED_SCHEMA = "nested_schema"
    ENUMERATION = "enumeration"


# (category, underlying type); the type is a Schema for NESTED_SCHEMA
Classification: TypeAlias = tuple[TypeCategory, Any]

# field -> None | nested plan | [nested plan] | []
PermittedKeyPlan: TypeAlias = dict[str, Union[None, "PermittedKeyPlan", list["PermittedKeyPlan"]]]

FilterExpression: TypeAlias = list[Union[str, dict[str, list[Any]]]]

ErrorTree: TypeAlias = dict[Union[str, int], Union[list[str], "ErrorTree"]]

PropertyDescriptor = PropertyDescriptorModel

__all__ = [
    "Bounds",
    "Classification",
    "ErrorTree",
    "FilterExpression",
    "ParamsConfigModel",
    "PermittedKeyPlan",
    "PropertyDescriptor",
    "PropertyDescriptorModel",
    "TypeCategory",
]
