"""
Core Result Objects

Defines the small value types shared by every OKC component:
    - Lookup (explicit "found / not found" result)
    - Entry (key, value, found) for first/last extraction
    - KeyShape (sequential / associative / empty)

ARCHITECTURAL RULE:
    No operation signals "absent" with None, False or 0.
    A stored None and a missing key must never look the same.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


Key = Union[int, str]


class KeyShape(Enum):
    """
    Shape of a key set.

    SEQUENTIAL only means "every key is an integer".
    {0, 5, 10} is SEQUENTIAL; contiguity is never checked.
    """

    SEQUENTIAL = "sequential"
    ASSOCIATIVE = "associative"
    EMPTY = "empty"


@dataclass(frozen=True)
class Lookup:
    """
    Result of a keyed read (get, remove, index_of).

    Properties:
        found: Whether the key (or value) was present
        value: The stored value, or the matching key for index_of

    Examples:
        Lookup(found=True, value=None)   # key present, stored None
        NOT_FOUND                        # key absent
    """

    found: bool
    value: Any = None

    def __bool__(self) -> bool:
        return self.found

    def unwrap(self) -> Any:
        """Return the value, raising KeyError when nothing was found."""
        if not self.found:
            raise KeyError("lookup found nothing")
        return self.value

    def value_or(self, default: Any = None) -> Any:
        return self.value if self.found else default


NOT_FOUND = Lookup(found=False)


@dataclass(frozen=True)
class Entry:
    """
    A single (key, value) pair taken from the front or back of a list.

    found is False for empty input; key and value are then None.
    """

    key: Optional[Key] = None
    value: Any = None
    found: bool = False


NO_ENTRY = Entry()


def is_key(value: Any) -> bool:
    "Value can be used as a collection key (str or non-bool int)."
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, str))


def is_int_key(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def strict_equals(a: Any, b: Any) -> bool:
    """
    Strict comparison: same object, or same concrete type and equal value.

    1 and 1.0 are different; 1 and True are different; "1" and 1 are different.
    """
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    return a == b
