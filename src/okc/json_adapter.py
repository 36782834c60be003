"""
JSON bridge for OKC collections.

Thin layer over the standard ``json`` module that turns every failure
into an InvalidArgument tagged with a JsonErrorCategory.

IMPORTANT:
    decode("null") is a SUCCESS that returns None.
    Only failures raise.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, NoReturn, Tuple

from okc.errors import InvalidArgument
from okc.model import is_int_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 512


class JsonErrorCategory(Enum):
    """Failure categories, valued by their human-readable message."""

    DEPTH = "The maximum stack depth has been exceeded"
    STATE_MISMATCH = "Invalid or malformed JSON"
    CTRL_CHAR = "Control character error, possibly incorrectly encoded"
    SYNTAX = "Syntax error"
    UTF8 = "Malformed UTF-8 characters, possibly incorrectly encoded"
    RECURSION = "One or more recursive references in the value to be encoded"
    INF_OR_NAN = "One or more NAN or INF values in the value to be encoded"
    UNSUPPORTED_TYPE = "A value of a type that cannot be encoded was given"
    INVALID_PROPERTY_NAME = "A property name that cannot be encoded was given"
    UTF16 = "Malformed UTF-16 characters, possibly incorrectly encoded"
    UNKNOWN = "Unknown JSON error"


class _RejectedConstant(Exception):
    pass


def _fail(category: JsonErrorCategory, detail: str = "") -> NoReturn:
    logger.debug("JSON error (%s): %s", category.name, detail or category.value)
    message = category.value
    if detail:
        message = f"{message}: {detail}"
    raise InvalidArgument(message, category=category)


def _reject_constant(token: str) -> Any:
    raise _RejectedConstant(token)


def _is_lone_surrogate(s: str) -> bool:
    return any("\ud800" <= ch <= "\udfff" for ch in s)


def _inspect(value: Any) -> Tuple[int, bool]:
    """Return (container nesting depth, contains a lone surrogate)."""
    max_depth = 0
    bad_surrogate = False
    stack = [(value, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            max_depth = max(max_depth, depth)
            for key, child in node.items():
                if _is_lone_surrogate(key):
                    bad_surrogate = True
                stack.append((child, depth + 1))
        elif isinstance(node, list):
            max_depth = max(max_depth, depth)
            stack.extend((child, depth + 1) for child in node)
        elif isinstance(node, str) and _is_lone_surrogate(node):
            bad_surrogate = True
    return max_depth, bad_surrogate


def _category_of(error: json.JSONDecodeError) -> JsonErrorCategory:
    if error.msg.startswith("Invalid control character"):
        return JsonErrorCategory.CTRL_CHAR
    # A closing bracket of the wrong kind: "[1}" or '{"a": 1]'
    if (
        error.msg == "Expecting ',' delimiter"
        and error.pos < len(error.doc)
        and error.doc[error.pos] in "]}"
    ):
        return JsonErrorCategory.STATE_MISMATCH
    return JsonErrorCategory.SYNTAX


def decode(text: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """
    Decode a JSON document.

    Args:
        text: JSON document as str or UTF-8 bytes
        max_depth: Maximum container nesting accepted

    Returns:
        The decoded value (dict, list, scalar) or None for the literal null

    Raises:
        InvalidArgument: If text is not a string, or cannot be decoded
            (see JsonErrorCategory for the possible categories)
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            _fail(JsonErrorCategory.UTF8, str(e))

    if not isinstance(text, str):
        raise InvalidArgument("The argument must be a valid JSON string")

    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        _fail(_category_of(e), str(e))
    except _RejectedConstant as e:
        _fail(JsonErrorCategory.SYNTAX, f"unexpected token {e}")
    except RecursionError:
        _fail(JsonErrorCategory.DEPTH)
    except ValueError as e:
        _fail(JsonErrorCategory.UNKNOWN, str(e))

    depth, bad_surrogate = _inspect(value)
    if depth > max_depth:
        _fail(JsonErrorCategory.DEPTH, f"depth {depth} > {max_depth}")
    if bad_surrogate:
        _fail(JsonErrorCategory.UTF16)

    return value


def _encodable(value: Any) -> Any:
    """json.dumps ``default`` hook: collections become objects or arrays."""
    to_array = getattr(value, "to_array", None)
    if not callable(to_array):
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    elements = to_array()
    keys = list(elements.keys())
    if all(is_int_key(k) for k in keys) and keys == list(range(len(keys))):
        return list(elements.values())
    return elements


def encode(value: Any) -> str:
    """
    Encode a value (collections included) as JSON text.

    Raises:
        InvalidArgument: RECURSION (cycles), DEPTH (nesting too deep for
            the encoder), INF_OR_NAN, UNSUPPORTED_TYPE or INVALID_PROPERTY_NAME
    """
    try:
        return json.dumps(value, default=_encodable, allow_nan=False)
    except RecursionError:
        _fail(JsonErrorCategory.DEPTH)
    except TypeError as e:
        if str(e).startswith("keys must be"):
            _fail(JsonErrorCategory.INVALID_PROPERTY_NAME, str(e))
        _fail(JsonErrorCategory.UNSUPPORTED_TYPE, str(e))
    except ValueError as e:
        if "Circular reference" in str(e):
            _fail(JsonErrorCategory.RECURSION, str(e))
        if "Out of range float" in str(e):
            _fail(JsonErrorCategory.INF_OR_NAN, str(e))
        _fail(JsonErrorCategory.UNKNOWN, str(e))
