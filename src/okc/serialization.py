"""
Serialization helpers for OKC collections.

Provides JSON/YAML round-trip via an intermediate native representation
(plain dict / list). Nested collections are converted at every level.

A collection whose keys are exactly 0..n-1 becomes a list; any other
collection becomes a dict.
"""
from __future__ import annotations

from typing import Any

import yaml

from okc import json_adapter
from okc.collection import Collection
from okc.errors import InvalidArgument
from okc.model import is_int_key


def _is_positional(c: Collection) -> bool:
    keys = c.keys()
    return all(is_int_key(k) for k in keys) and keys == list(range(len(keys)))


def collection_to_native(value: Any) -> Any:
    if isinstance(value, Collection):
        if _is_positional(value):
            return [collection_to_native(v) for v in value.values()]
        return {k: collection_to_native(v) for k, v in value.items()}
    if isinstance(value, dict):
        return {k: collection_to_native(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [collection_to_native(v) for v in value]
    return value


def collection_from_native(value: Any) -> Any:
    if isinstance(value, (dict, list, tuple, Collection)):
        items = value.items() if not isinstance(value, (list, tuple)) else enumerate(value)
        return Collection({k: collection_from_native(v) for k, v in items})
    return value


def collection_to_json(c: Collection) -> str:
    return json_adapter.encode(collection_to_native(c))


def collection_from_json(s: str) -> Collection:
    d = json_adapter.decode(s)
    if d is None:
        return Collection()
    if not isinstance(d, (dict, list)):
        raise InvalidArgument(f"JSON document is not an object or array: {type(d).__name__}")
    return collection_from_native(d)


def collection_to_yaml(c: Collection) -> str:
    return yaml.safe_dump(collection_to_native(c), sort_keys=False)


def collection_from_yaml(s: str) -> Collection:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise InvalidArgument(f"Invalid YAML: {e}")
    if d is None:
        return Collection()
    if not isinstance(d, (dict, list)):
        raise InvalidArgument(f"YAML document is not a mapping or sequence: {type(d).__name__}")
    return collection_from_native(d)
