"""Untrusted request parameter container.

`Params` wraps nested request data and narrows it to an allowlist with
`permit`. The filter expression format:

- ``"name"``: keep ``name`` when its value is a scalar
- ``{"tags": []}``: keep ``tags`` when it is a sequence of scalars; a
  mapping value is kept with no keys
- ``{"address": ["street", "city"]}``: keep ``address`` filtered to the
  listed keys; a sequence value has each of its mapping elements filtered
- ``{"items": [["sku", "qty"]]}``: keep ``items`` as a sequence whose
  mapping elements are filtered to the inner list; a lone mapping value is
  filtered the same way and kept

Scalars are str, int, float, bool, None, Decimal and temporal values. A scalar
found where a mapping or sequence is expected is kept as-is so that the
validator can report it; a mapping or sequence found where a scalar is
expected is dropped.

Example:
    >>> params = Params({"name": "Ann", "role": "admin", "tags": ["a", {"x": 1}]})
    >>> params.permit(["name", {"tags": []}]).to_dict()
    {'name': 'Ann'}
"""

import copy
import logging
from collections.abc import Iterator, Mapping, Sequence
from datetime import date, time
from decimal import Decimal
from typing import Any

import numpy as np

from ._types import FilterExpression

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool, Decimal, date, time, np.generic)

_DROP = object()


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, SCALAR_TYPES)


def is_array(value: Any) -> bool:
    """Whether a value is array-shaped (strings and mappings are not)."""
    if isinstance(value, np.ndarray):
        return True
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


def as_list(value: Any) -> list[Any]:
    if isinstance(value, np.ndarray):
        return list(value.tolist())
    return list(value)


class Params(Mapping[str, Any]):
    """Read-only view over untrusted nested request data.

    Nested mappings are returned wrapped in `Params`; sequences are returned
    as lists with their mapping elements wrapped.
    """

    def __init__(self, data: Mapping[str, Any] | None = None):
        if isinstance(data, Params):
            data = data._data
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"Params requires a mapping, got {type(data).__name__}")
        self._data: dict[str, Any] = dict(data)

    def __getitem__(self, key: str) -> Any:
        return _wrap(self._data[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Params({self._data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Params):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the underlying data as plain containers."""
        return {key: _unwrap(value) for key, value in self._data.items()}

    def permit(self, *filters: Any) -> "Params":
        """Return a new Params restricted to the given filter expression.

        Accepts either a single list (the format produced by
        ``typedparams.permits.to_filter_expression``) or the filters as
        positional arguments.
        """
        if len(filters) == 1 and isinstance(filters[0], list):
            expression: FilterExpression = filters[0]
        else:
            expression = list(filters)

        permitted = _permit_mapping(self._data, expression)
        dropped = len(self._data) - len(permitted)
        if dropped:
            logger.debug(f"Dropped {dropped} unpermitted top-level key(s)")
        return Params(permitted)


def _wrap(value: Any) -> Any:
    if isinstance(value, Mapping) and not isinstance(value, Params):
        return Params(value)
    if is_array(value):
        return [_wrap(item) for item in as_list(value)]
    return value


def _unwrap(value: Any) -> Any:
    if isinstance(value, Params):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _unwrap(item) for key, item in value.items()}
    if is_array(value):
        return [_unwrap(item) for item in as_list(value)]
    return copy.copy(value)


def _permit_mapping(data: Mapping[str, Any], expression: FilterExpression) -> dict[str, Any]:
    if isinstance(data, Params):
        data = data._data
    permitted: dict[str, Any] = {}
    for entry in expression:
        if isinstance(entry, str):
            if entry in data and is_scalar(data[entry]):
                permitted[entry] = data[entry]
        elif isinstance(entry, Mapping):
            for key, nested in entry.items():
                if key not in data:
                    continue
                result = _permit_value(data[key], nested)
                if result is not _DROP:
                    permitted[key] = result
        else:
            raise TypeError(f"Invalid filter entry: {entry!r}")
    return permitted


def _permit_value(value: Any, nested: list[Any]) -> Any:
    if is_scalar(value):
        return value

    if not nested:
        # {key: []} -> sequence of scalars only, or a mapping with no
        # permitted keys
        if isinstance(value, Mapping):
            return {}
        if is_array(value):
            items = as_list(value)
            if all(is_scalar(item) for item in items):
                return items
        return _DROP

    if len(nested) == 1 and isinstance(nested[0], list):
        # {key: [[...]]} -> sequence of filtered mappings; a lone mapping is
        # filtered and kept so that validation reports the wrong shape
        if is_array(value):
            return _permit_elements(as_list(value), nested[0])
        if isinstance(value, Mapping):
            return _permit_mapping(value, nested[0])
        return _DROP

    if isinstance(value, Mapping):
        return _permit_mapping(value, nested)
    if is_array(value):
        return _permit_elements(as_list(value), nested)
    return _DROP


def _permit_elements(items: list[Any], expression: FilterExpression) -> list[Any]:
    permitted = []
    for item in items:
        if isinstance(item, Mapping):
            permitted.append(_permit_mapping(item, expression))
        elif is_scalar(item):
            permitted.append(item)
    return permitted
