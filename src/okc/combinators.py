"""
Functional combinators for keyed collections.

Callback contracts are intentionally asymmetric:
    - map(fn)            fn(value)
    - filter(pred)       pred(key, value)
    - for_all(pred)      pred(key, value)
    - exists(pred)       pred(key, value)
    - partition(pred)    pred(key, value)

Every combinator that returns a collection returns FRESH storage of the
same concrete type as the receiver, with keys preserved.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

from okc.model import Key, Lookup, NOT_FOUND, strict_equals


Predicate = Callable[[Key, Any], Any]


class CombinatorsMixin:
    """
    Combinators built on two hooks the host class provides:

        items()                      ordered (key, value) pairs
        _create_from(elements)       same-kind instance from a dict
    """

    def items(self) -> List[Tuple[Key, Any]]:
        raise NotImplementedError

    def _create_from(self, elements: Dict[Key, Any]):
        raise NotImplementedError

    def map(self, fn: Callable[[Any], Any]):
        """Apply fn to every value; keys are kept."""
        return self._create_from({key: fn(value) for key, value in self.items()})

    def filter(self, predicate: Predicate):
        """Keep the entries for which predicate(key, value) is truthy."""
        return self._create_from(
            {key: value for key, value in self.items() if predicate(key, value)}
        )

    def for_all(self, predicate: Predicate) -> bool:
        for key, value in self.items():
            if not predicate(key, value):
                return False
        return True

    def exists(self, predicate: Predicate) -> bool:
        for key, value in self.items():
            if predicate(key, value):
                return True
        return False

    def partition(self, predicate: Predicate) -> Tuple[Any, Any]:
        """
        Split into (non_matches, matches).

        Both halves keep the original keys and relative order.
        """
        matches: Dict[Key, Any] = {}
        non_matches: Dict[Key, Any] = {}
        for key, value in self.items():
            if predicate(key, value):
                matches[key] = value
            else:
                non_matches[key] = value
        return self._create_from(non_matches), self._create_from(matches)

    def index_of(self, element: Any) -> Lookup:
        """
        Find the key of the first value strictly equal to element.

        Returns Lookup(found=True, value=<key>) or NOT_FOUND. Key 0 is a
        normal hit, never a miss.
        """
        for key, value in self.items():
            if strict_equals(value, element):
                return Lookup(found=True, value=key)
        return NOT_FOUND
