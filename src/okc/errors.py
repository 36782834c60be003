"""
Errors raised by the OKC package.

There is exactly one error type. Absent keys and export-sink mismatches
are NOT errors; they are reported through Lookup results or skipped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from okc.json_adapter import JsonErrorCategory


class InvalidArgument(ValueError):
    """
    Raised when an argument cannot be processed.

    Covers:
        - malformed JSON text (``category`` tells which kind)
        - non-iterable input to the static classification helpers
        - custom composites that cannot be rebuilt when strict type
          preservation was requested
    """

    def __init__(self, message: str, category: Optional["JsonErrorCategory"] = None):
        super().__init__(message)
        self.category = category
