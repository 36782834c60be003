"""
Cursor: explicit forward/reset pointer over a collection.

The cursor is an index into a snapshot of the owner's keys. Python
iteration (``for key in collection``) never touches it.

The snapshot is refreshed whenever the owner reports a new mutation
version, so the cursor sees keys added or removed after it was created.
Interleaving two consumers on one cursor is undefined.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

from okc.model import Key

if TYPE_CHECKING:
    from okc.collection import Collection


class Cursor:
    """Index-based pointer over the entries of one Collection."""

    def __init__(self, owner: "Collection"):
        self._owner = owner
        self._position = 0
        self._keys: List[Key] = []
        self._version = -1

    def _snapshot(self) -> List[Key]:
        if self._version != self._owner._version:
            self._keys = self._owner.keys()
            self._version = self._owner._version
        return self._keys

    def valid(self) -> bool:
        """Whether the pointer addresses an existing entry."""
        return 0 <= self._position < len(self._snapshot())

    def first(self) -> Any:
        self._position = 0
        return self.current()

    def last(self) -> Any:
        self._position = max(len(self._snapshot()) - 1, 0)
        return self.current()

    def key(self) -> Optional[Key]:
        if not self.valid():
            return None
        return self._keys[self._position]

    def current(self) -> Any:
        key = self.key()
        if key is None:
            return None
        return self._owner.get(key).value

    def next(self) -> Any:
        # Stop one past the end so repeated calls stay exhausted.
        if self._position < len(self._snapshot()):
            self._position += 1
        return self.current()
