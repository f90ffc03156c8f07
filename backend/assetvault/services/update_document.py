"""
AssetVault Backend — Dot-Path Update Documents
================================================

What:  Pure helpers that convert between nested payloads and flat
       "dot-path → value" update documents.
Why:   A PATCH body is compiled into a flat "set these fields" document so
       the store applies exactly the leaves the client sent and nothing else.
How:   `flatten` walks nested dicts; everything that is not a dict (scalars,
       None, lists) is a leaf and is stored whole under its joined path.

Array policy:
    Lists are NEVER expanded into indexed sub-paths. `{"images": [...]}`
    flattens to one key, "images", so a partial update replaces the whole
    array atomically.

Examples:
    flatten({"a": {"b": 1, "c": [1, 2]}, "d": "x"})
        → {"a.b": 1, "a.c": [1, 2], "d": "x"}
    expand({"a.b": 1, "d": "x"})
        → {"a": {"b": 1}, "d": "x"}
"""

import copy
from typing import Any, Dict, Mapping

PATH_SEPARATOR = "."


def _is_record(value: Any) -> bool:
    # Only plain mappings recurse; lists, scalars and None are leaves
    return isinstance(value, Mapping)


def _join(prefix: str, key: Any) -> str:
    return f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)


def flatten(obj: Mapping[str, Any], path: str = "") -> Dict[str, Any]:
    """
    Compile a nested mapping into a flat dot-path mapping.

    Every leaf produces exactly one entry keyed by the dot-joined path from
    the root. An empty nested mapping has no leaves and contributes nothing.
    The input is not modified; leaf values are placed in the output as-is.

    Args:
        obj:  Nested mapping (e.g., a validated PATCH body)
        path: Prefix accumulated by recursion; empty at the root

    Returns:
        Flat dict from "a.b.c" style paths to leaf values
    """
    output: Dict[str, Any] = {}
    for key, value in obj.items():
        key_path = _join(path, key)
        if _is_record(value):
            output.update(flatten(value, key_path))
        else:
            output[key_path] = value
    return output


def expand(flat: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Inverse of `flatten` for array-free input: rebuild the nested structure
    by splitting each key on the path separator.
    """
    return apply_update({}, flat)


def apply_update(document: Mapping[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a deep copy of `document` with every dot-path in `update` set.

    Intermediate records missing from the document are created. A path whose
    intermediate segment holds a non-record value replaces that value with a
    record. Fields not named in `update` are left untouched; nothing is ever
    removed.
    """
    result = copy.deepcopy(dict(document))
    for path, value in update.items():
        *parents, leaf = path.split(PATH_SEPARATOR)
        node = result
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = copy.deepcopy(value)
    return result
