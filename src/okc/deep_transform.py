"""
Deep Transform Engine: shape-preserving deep map with export mirroring.

Walks an arbitrarily nested structure, applies a leaf transform to every
scalar, and rebuilds the structure around the transformed leaves.
Optionally, every transformed leaf is ALSO written into one caller-owned
export structure under its own key. The same export structure receives
the leaves of every nesting level, so nested leaves land flat in it.

Node classification happens in exactly one place (classify_node):
    - dict / list / tuple           PLAIN composite
    - anything exposing items()     IDENTITY_PRESERVING composite
    - everything else               LEAF

Output container kind for a composite:
    - force_generic                 Collection
    - PLAIN                         Collection
    - IDENTITY_PRESERVING           value.create_empty_like(), when the value
                                    provides it and accepts keyed writes;
                                    otherwise Collection

Export mirroring degrades silently: an export that is not writable by key
disables mirroring, and a key the export cannot take is skipped.
It never raises.

IMPORTANT:
    No cycle detection. Acyclic input is the caller's responsibility.
    The walk uses an explicit stack, so depth is not bounded by the
    interpreter recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional, Tuple

from okc.errors import InvalidArgument
from okc.model import Key

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    LEAF = "leaf"
    PLAIN = "plain"
    IDENTITY_PRESERVING = "identity_preserving"


@dataclass(frozen=True)
class Node:
    """
    Tagged view of a value inside the walk.

    Properties:
        kind: NodeKind
        value: The wrapped input value (unchanged)
    """

    kind: NodeKind
    value: Any

    @property
    def is_composite(self) -> bool:
        return self.kind is not NodeKind.LEAF

    def entries(self) -> Iterator[Tuple[Key, Any]]:
        """Ordered (key, child) pairs; empty for leaves."""
        if self.kind is NodeKind.LEAF:
            return iter(())
        if isinstance(self.value, (list, tuple)):
            return enumerate(self.value)
        return iter(list(self.value.items()))


def classify_node(value: Any) -> Node:
    if isinstance(value, (dict, list, tuple)):
        return Node(NodeKind.PLAIN, value)
    if isinstance(value, (str, bytes, bytearray)):
        return Node(NodeKind.LEAF, value)
    if callable(getattr(value, "items", None)):
        return Node(NodeKind.IDENTITY_PRESERVING, value)
    return Node(NodeKind.LEAF, value)


def supports_keyed_write(value: Any) -> bool:
    """Value accepts ``value[key] = x`` and can be read back by key."""
    if isinstance(value, (dict, list, MutableMapping)):
        return True
    return callable(getattr(value, "__setitem__", None)) and callable(
        getattr(value, "items", None)
    )


def _write_slot(container: Any, key: Key, value: Any) -> bool:
    """Write container[key] = value; False when the slot cannot take it."""
    if isinstance(container, list):
        if isinstance(key, bool) or not isinstance(key, int):
            return False
        if 0 <= key < len(container):
            container[key] = value
            return True
        if key == len(container):
            container.append(value)
            return True
        return False
    try:
        container[key] = value
    except (TypeError, KeyError, ValueError):
        return False
    return True


def _new_output(node: Node, force_generic: bool, strict_types: bool) -> Any:
    from okc.collection import Collection

    if force_generic or node.kind is NodeKind.PLAIN:
        return Collection()

    create = getattr(node.value, "create_empty_like", None)
    if callable(create):
        out = create()
        if supports_keyed_write(out):
            return out

    if strict_types:
        raise InvalidArgument(
            f"Cannot rebuild an instance of {type(node.value).__name__}: "
            "no create_empty_like() accepting keyed writes"
        )
    logger.debug(
        "No create_empty_like() on %s, using Collection", type(node.value).__name__
    )
    return Collection()


@dataclass
class _Frame:
    entries: Iterator[Tuple[Key, Any]]
    output: Any


def deep_map(
    value: Any,
    fn: Callable[[Any], Any],
    force_generic: bool = False,
    export: Optional[Any] = None,
    *,
    strict_types: bool = False,
) -> Any:
    """
    Deep-map every leaf of a nested structure.

    Args:
        value: Root composite (dict, list, tuple, Collection, mapping-like)
        fn: Leaf transform; receives only the leaf value
        force_generic: Build every output container as a plain Collection
        export: Optional caller-owned structure that receives a copy of
            every transformed leaf under the leaf's own key, whatever
            its nesting level
        strict_types: Raise instead of falling back to Collection when a
            custom composite cannot be rebuilt as its own type

    Returns:
        The rebuilt output structure

    Raises:
        InvalidArgument: If value is not a composite, or strict_types is
            set and a custom composite cannot be rebuilt

    Examples:
        deep_map({"a": {"b": 1, "c": 2}, "d": 3}, lambda x: x * 10)
        -> {"a": {"b": 10, "c": 20}, "d": 30}

        export = {}
        deep_map({"a": {"b": 1}, "d": 3}, lambda x: x * 10, export=export)
        export -> {"b": 10, "d": 30}
    """
    root = classify_node(value)
    if not root.is_composite:
        raise InvalidArgument("First argument must be iterable")

    if export is not None and not supports_keyed_write(export):
        logger.debug("Export %s is not writable by key, mirroring disabled", type(export).__name__)
        export = None

    result = _new_output(root, force_generic, strict_types)
    stack: List[_Frame] = [_Frame(root.entries(), result)]

    while stack:
        frame = stack[-1]
        try:
            key, child = next(frame.entries)
        except StopIteration:
            stack.pop()
            continue

        node = classify_node(child)
        if node.is_composite:
            child_output = _new_output(node, force_generic, strict_types)
            frame.output[key] = child_output
            stack.append(_Frame(node.entries(), child_output))
            continue

        transformed = fn(child)
        frame.output[key] = transformed
        if export is not None and not _write_slot(export, key, transformed):
            logger.debug("Export mirroring skipped key %r: slot not writable", key)

    return result
