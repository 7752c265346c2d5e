"""Shared utility functions for cloudconfig.

Structural helpers used by every configuration layer: deep-merging
mappings and expanding dot-separated property keys into nested mappings.
"""

from copy import deepcopy
from typing import Any, Iterable, Mapping, Optional

_MASK = "******"
_SECRET_KEYS = frozenset({"pass", "password", "secret", "token"})


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base`` and return a new dict.

    Merge policy:
        - mapping + mapping: merged recursively, key by key
        - list: replaced wholesale, never merged element-wise
        - anything else: the override value replaces the base value

    Neither input is mutated; values taken from either side are deep copies.

    Args:
        base: Lower-priority mapping.
        override: Higher-priority mapping.

    Returns:
        A new dict holding the merged result.
    """
    result: dict[str, Any] = deepcopy(dict(base))

    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = deepcopy(override_value)

    return result


def merge_properties(objects: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge mappings in order; keys in later mappings win.

    Handles deeply nested keys, e.g. ``{"spring": {"profiles": {"active": "dev"}}}``.
    An empty sequence yields ``{}`` and a single mapping yields a deep copy.
    """
    merged: dict[str, Any] = {}
    for obj in objects:
        if obj:
            merged = deep_merge(merged, obj)
    return merged


def create_object_for_property(property_keys: list[str], property_value: Any) -> Any:
    """Turn key segments and a value into a nested dict.

    Example: ``["spring", "profiles", "active"], "dev"`` ->
    ``{"spring": {"profiles": {"active": "dev"}}}``
    """
    if not property_keys:
        return property_value

    name, rest = property_keys[0], property_keys[1:]
    return {name: create_object_for_property(rest, property_value)}


def parse_properties_to_objects(properties: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Expand dot-separated keys into nested dicts.

    ``{"a.b.c": 1, "a.b.d": 2}`` -> ``{"a": {"b": {"c": 1, "d": 2}}}``.
    Keys without dots are kept as they are; ``None`` yields ``{}``.
    """
    result: dict[str, Any] = {}
    if not properties:
        return result

    for name, value in properties.items():
        branch = create_object_for_property(str(name).split("."), value)
        result = deep_merge(result, branch)
    return result


def get_property(config: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Look up a dotted key in a nested config, returning ``default`` when absent."""
    node: Any = config
    for segment in dotted_key.split("."):
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node


def mask_secrets(options: Any) -> Any:
    """Return a copy of ``options`` with credential values masked for logging."""
    if isinstance(options, Mapping):
        return {
            key: _MASK if key in _SECRET_KEYS and value is not None else mask_secrets(value)
            for key, value in options.items()
        }
    if isinstance(options, list):
        return [mask_secrets(item) for item in options]
    return options
