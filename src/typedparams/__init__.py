"""typedparams - typed objects from untrusted request parameters.

Converts loosely-typed nested request data (mappings, sequences and scalars
of unknown shape) into instances of declared schemas. Conversion runs as a
pipeline:

1. **Permit**: drop every key the schema does not declare
2. **Validate**: check every field, collecting a nested error tree
3. **Build**: coerce values and construct nested instances
4. **Check**: run the instance's ``validate()`` hook and declared field checks

## Key Components

### Declaring schemas
- `params_schema`: class decorator deriving a schema from a dataclass
- `prop`: dataclass field with options, checks and optionality
- `Schema`, `PropertyDescriptorModel`: explicit schema declaration

### Pipeline
- `build_from_params`: main entry point
- `validate_keys`, `build`, `run_checks`: the individual stages
- `permitted_keys`, `to_filter_expression`: the structural allowlist
- `ParameterCaster`: scalar coercion

### Errors
- `ValidationError`: carries the error tree; ``.errors`` is the response body
- `CastingError`: a single value cannot be converted

## Quick Example

```python
from typedparams import ValidationError, params_schema, prop


@params_schema
class Address:
    street: str


@params_schema
class Person:
    name: str
    address: Address
    age: int = prop(optional=True)


person = Person.build_from_params({"name": "Ann", "age": "30", "address": {"street": "Main"}})
# Person(name='Ann', address=Address(street='Main'), age=30)

try:
    Person.build_from_params({"address": {}})
except ValidationError as e:
    e.errors
    # {"message": "bad_request",
    #  "details": {"name": ["Field is required"],
    #              "address": {"street": ["Field is required"]}}}
```
"""

from ._types import (
    Classification,
    ErrorTree,
    FilterExpression,
    PermittedKeyPlan,
    PropertyDescriptor,
    TypeCategory,
)
from .builder import build, convert_params_to_objects
from .caster import ParameterCaster, cast_value
from .checks import run_checks
from .classification import classify, classify_element, classify_type
from .config import get_config, load_config, reset_config, set_config
from .errors import CastingError, SchemaDefinitionError, ValidationError
from .host import params_schema, prop, schema_from_dataclass
from .models import Bounds, ParamsConfigModel, PropertyDescriptorModel
from .params import Params
from .permits import build_safe_params, permitted_keys, to_filter_expression
from .pipeline import build_from_params, permitted_params
from .schema import Schema, register_schema, resolve_schema, schema_for
from .validation import validate_keys

__all__ = [
    # Types
    "Bounds",
    "Classification",
    "ErrorTree",
    "FilterExpression",
    "ParamsConfigModel",
    "PermittedKeyPlan",
    "PropertyDescriptor",
    "PropertyDescriptorModel",
    "TypeCategory",
    # Schemas
    "Schema",
    "params_schema",
    "prop",
    "register_schema",
    "resolve_schema",
    "schema_for",
    "schema_from_dataclass",
    # Classification
    "classify",
    "classify_element",
    "classify_type",
    # Casting
    "ParameterCaster",
    "cast_value",
    # Container and permitted keys
    "Params",
    "build_safe_params",
    "permitted_keys",
    "to_filter_expression",
    # Pipeline
    "build",
    "build_from_params",
    "convert_params_to_objects",
    "permitted_params",
    "run_checks",
    "validate_keys",
    # Configuration
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
    # Errors
    "CastingError",
    "SchemaDefinitionError",
    "ValidationError",
]
