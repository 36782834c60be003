"""
Collection: ordered keyed container.

Stores an ordered mapping Key -> Value (Key is str or int) and exposes:
    - CRUD (add, set, get, remove, remove_element, clear, ...)
    - snapshot views (to_array, keys, values, items, slice)
    - functional combinators (see okc.combinators)
    - an explicit cursor (first, last, key, current, next)
    - key-shape classification (classify, sequential, associative)
    - deep transform (map_in_depth)
    - JSON bridge (to_array_from_json, reconstruct_from_json, to_json)

INVARIANTS:
    - Iteration order is insertion order
    - set() on an existing key keeps its position
    - add() always appends at a fresh integer key past every integer key
      used so far (removed keys are not reused until clear())
    - get()/remove() on an absent key return NOT_FOUND, never raise;
      the [] protocol (c[k], del c[k]) raises KeyError instead
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from okc import classifier, json_adapter
from okc.combinators import CombinatorsMixin
from okc.cursor import Cursor
from okc.deep_transform import deep_map
from okc.errors import InvalidArgument
from okc.model import (
    Entry,
    Key,
    KeyShape,
    Lookup,
    NOT_FOUND,
    is_int_key,
    is_key,
    strict_equals,
)


def _check_key(key: Any) -> Key:
    if not is_key(key):
        raise InvalidArgument(f"Invalid collection key: {key!r} (expected str or int)")
    return key


class Collection(CombinatorsMixin):
    """
    Ordered keyed container.

    Examples:
        Collection()                          # empty
        Collection(["a", "b"])                # {0: "a", 1: "b"}
        Collection({"x": 1, 5: "y"})          # heterogeneous keys
    """

    __hash__ = None

    def __init__(self, elements: Any = None):
        self._elements: Dict[Key, Any] = {}
        self._next_index = 0
        self._version = 0
        self._cursor = Cursor(self)
        if elements is not None:
            self._replace(elements)

    # ------------------------------------------------------------------
    # construction helpers
    # ------------------------------------------------------------------

    def _replace(self, elements: Any) -> None:
        if isinstance(elements, Collection):
            pairs = elements.items()
        elif isinstance(elements, (list, tuple)):
            pairs = list(enumerate(elements))
        elif callable(getattr(elements, "items", None)):
            pairs = list(elements.items())
        else:
            raise InvalidArgument(
                f"Cannot build a collection from {type(elements).__name__}"
            )
        self._elements = {}
        self._next_index = 0
        for key, value in pairs:
            self._store(_check_key(key), value)
        self._touch()

    def _store(self, key: Key, value: Any) -> None:
        self._elements[key] = value
        if is_int_key(key) and key >= self._next_index:
            self._next_index = key + 1

    def _touch(self) -> None:
        self._version += 1

    def _create_from(self, elements: Dict[Key, Any]) -> "Collection":
        """Same-kind instance; subclasses with other constructors override this."""
        return type(self)(elements)

    def create_empty_like(self) -> "Collection":
        return type(self)()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add(self, element: Any) -> "Collection":
        self._store(self._next_index, element)
        self._touch()
        return self

    def set(self, key: Key, element: Any) -> "Collection":
        self._store(_check_key(key), element)
        self._touch()
        return self

    def get(self, key: Key) -> Lookup:
        if key in self._elements:
            return Lookup(found=True, value=self._elements[key])
        return NOT_FOUND

    def remove(self, key: Key) -> Lookup:
        """Remove the entry at key and return its value, or NOT_FOUND."""
        if key not in self._elements:
            return NOT_FOUND
        removed = self._elements.pop(key)
        self._touch()
        return Lookup(found=True, value=removed)

    def remove_element(self, element: Any) -> bool:
        """Remove the first entry strictly equal to element."""
        hit = self.index_of(element)
        if not hit:
            return False
        del self._elements[hit.value]
        self._touch()
        return True

    def contains_key(self, key: Key) -> bool:
        return key in self._elements

    def contains(self, element: Any) -> bool:
        """O(n) strict-equality scan over values."""
        return any(strict_equals(value, element) for value in self._elements.values())

    def clear(self) -> "Collection":
        self._elements = {}
        self._next_index = 0
        self._touch()
        return self

    def is_empty(self) -> bool:
        return not self._elements

    def is_loaded(self) -> bool:
        return bool(self._elements)

    def count(self) -> int:
        return len(self._elements)

    def uniquify(self) -> "Collection":
        """Drop entries whose value strictly equals an earlier value."""
        kept: List[Any] = []
        duplicates: List[Key] = []
        for key, value in self._elements.items():
            if any(strict_equals(value, seen) for seen in kept):
                duplicates.append(key)
            else:
                kept.append(value)
        for key in duplicates:
            del self._elements[key]
        if duplicates:
            self._touch()
        return self

    # ------------------------------------------------------------------
    # snapshot views
    # ------------------------------------------------------------------

    def to_array(self) -> Dict[Key, Any]:
        return dict(self._elements)

    def keys(self) -> List[Key]:
        return list(self._elements.keys())

    def values(self) -> List[Any]:
        return list(self._elements.values())

    def items(self) -> List[Tuple[Key, Any]]:
        return list(self._elements.items())

    def slice(self, offset: int, length: Optional[int] = None) -> Dict[Key, Any]:
        """
        Key-preserving snapshot of part of the collection.

        Args:
            offset: Start position; negative counts from the end
            length: Number of entries; None means "to the end", negative
                means "stop that many entries before the end"

        Example:
            Collection(["a", "b", "c", "d"]).slice(-2) -> {2: "c", 3: "d"}
        """
        pairs = self.items()
        start = offset if offset >= 0 else max(len(pairs) + offset, 0)
        if length is None:
            selected = pairs[start:]
        elif length < 0:
            selected = pairs[start:length]
        else:
            selected = pairs[start:start + length]
        return dict(selected)

    # ------------------------------------------------------------------
    # cursor
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    def first(self) -> Any:
        return self._cursor.first()

    def last(self) -> Any:
        return self._cursor.last()

    def key(self) -> Optional[Key]:
        return self._cursor.key()

    def current(self) -> Any:
        return self._cursor.current()

    def next(self) -> Any:
        return self._cursor.next()

    # ------------------------------------------------------------------
    # classification
    # ------------------------------------------------------------------

    # Static forms, usable on any list, mapping or to_array() object
    classify_elements = staticmethod(classifier.classify_elements)
    is_sequential = staticmethod(classifier.is_sequential)
    is_associative = staticmethod(classifier.is_associative)
    first_entry_of = staticmethod(classifier.first_entry_of)
    last_entry_of = staticmethod(classifier.last_entry_of)

    def classify(self) -> KeyShape:
        return classifier.classify(self._elements.keys())

    def sequential(self) -> bool:
        return self.classify() is KeyShape.SEQUENTIAL

    def associative(self) -> bool:
        return self.classify() is KeyShape.ASSOCIATIVE

    def first_entry(self) -> Entry:
        return classifier.first_entry_of(self._elements)

    def last_entry(self) -> Entry:
        return classifier.last_entry_of(self._elements)

    # ------------------------------------------------------------------
    # deep transform
    # ------------------------------------------------------------------

    def map_in_depth(
        self,
        fn: Callable[[Any], Any],
        force_generic: bool = False,
        export: Optional[Any] = None,
    ) -> "Collection":
        """
        Deep-map every leaf below this collection.

        Two distinct modes:
            export given:  transformed leaves are written into ``export`` in
                           place; returns self, untouched
            no export:     returns a NEW generic Collection tree holding the
                           transformed leaves (generic output is forced)
        """
        if export is not None:
            deep_map(self, fn, force_generic, export)
            return self
        return deep_map(self, fn, True)

    # ------------------------------------------------------------------
    # JSON bridge
    # ------------------------------------------------------------------

    @staticmethod
    def to_array_from_json(text: Any) -> Any:
        return json_adapter.decode(text)

    def reconstruct_from_json(self, text: Any, as_list: bool = True) -> "Collection":
        """
        Replace the contents with a decoded JSON document.

        A decoded object or array replaces the elements; any other decoded
        value (null, number, string) leaves the collection empty.

        Raises:
            InvalidArgument: If the text cannot be decoded
            NotImplementedError: If as_list is False
        """
        if not as_list:
            raise NotImplementedError("reconstruct_from_json only supports as_list=True")
        decoded = json_adapter.decode(text)
        if isinstance(decoded, (dict, list)):
            self._replace(decoded)
        else:
            self.clear()
        return self

    def to_json(self) -> str:
        return json_adapter.encode(self)

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: Key) -> Any:
        return self._elements[key]

    def __setitem__(self, key: Optional[Key], element: Any) -> None:
        if key is None:
            self.add(element)
        else:
            self.set(key, element)

    def __delitem__(self, key: Key) -> None:
        if not self.remove(key):
            raise KeyError(key)

    def __contains__(self, key: Any) -> bool:
        try:
            return key in self._elements
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Key]:
        return iter(list(self._elements))

    def __len__(self) -> int:
        return len(self._elements)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Collection):
            return self._elements == other._elements
        if isinstance(other, list):
            return self.keys() == list(range(len(other))) and self.values() == other
        if callable(getattr(other, "items", None)):
            return self._elements == dict(other.items())
        return NotImplemented

    def __str__(self) -> str:
        return f"{type(self).__name__}@{id(self):x}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._elements!r})"
