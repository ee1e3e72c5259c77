# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/engine/values.py

from __future__ import annotations

from typing import Any


def deep_merge(a: dict, b: dict) -> dict:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def compact(tree: Any) -> Any:
    """
    Drop None entries from a values tree, recursively.

    Helm reads a null value as "remove this key from the chart defaults",
    so an unset input must disappear from the tree instead of being sent
    as null. Empty dicts and lists are kept as they are.
    """
    if isinstance(tree, dict):
        return {k: compact(v) for k, v in tree.items() if v is not None}
    if isinstance(tree, list):
        return [compact(v) for v in tree if v is not None]
    return tree
