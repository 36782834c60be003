"""
Key Classifier: sequential vs. associative key sets.

Classification looks at key TYPES only:
    - EMPTY        no keys at all
    - SEQUENTIAL   every key is an integer (gaps are allowed)
    - ASSOCIATIVE  at least one key is not an integer

Also provides first/last entry extraction over the same kinds of input.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from okc.errors import InvalidArgument
from okc.model import Entry, KeyShape, NO_ENTRY, is_int_key


def classify(keys: Iterable[Any]) -> KeyShape:
    """Classify a set of keys."""
    seen = False
    for key in keys:
        seen = True
        if not is_int_key(key):
            return KeyShape.ASSOCIATIVE
    return KeyShape.SEQUENTIAL if seen else KeyShape.EMPTY


def _pairs_of(elements: Any) -> List[Tuple[Any, Any]]:
    """
    Normalize a supported input into ordered (key, value) pairs.

    Accepts:
        - objects exposing to_array() (e.g. Collection)
        - mappings (dict and friends)
        - lists and tuples (positional keys)

    Raises:
        InvalidArgument: for anything else
    """
    to_array = getattr(elements, "to_array", None)
    if callable(to_array):
        elements = to_array()

    if isinstance(elements, (list, tuple)):
        return list(enumerate(elements))

    items = getattr(elements, "items", None)
    if callable(items):
        return list(items())

    raise InvalidArgument("The argument must be an iterable object or a list")


def classify_elements(elements: Any) -> KeyShape:
    """Classify the keys of an arbitrary list-like or mapping-like value."""
    return classify(key for key, _ in _pairs_of(elements))


def is_sequential(elements: Any) -> bool:
    return classify_elements(elements) is KeyShape.SEQUENTIAL


def is_associative(elements: Any) -> bool:
    return classify_elements(elements) is KeyShape.ASSOCIATIVE


def first_entry_of(elements: Any) -> Entry:
    """Return the first (key, value) of the input, or NO_ENTRY if it is empty."""
    pairs = _pairs_of(elements)
    if not pairs:
        return NO_ENTRY
    key, value = pairs[0]
    return Entry(key=key, value=value, found=True)


def last_entry_of(elements: Any) -> Entry:
    """Return the last (key, value) of the input, or NO_ENTRY if it is empty."""
    pairs = _pairs_of(elements)
    if not pairs:
        return NO_ENTRY
    key, value = pairs[-1]
    return Entry(key=key, value=value, found=True)
