"""
values.py — The JSON value model.

A JSON value is exactly one of six kinds. ``kind_of`` is the single point
where Python objects are classified; anything else is rejected with
``UnsupportedTypeError`` instead of being coerced.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple, Union

from .errors import UnsupportedTypeError

JsonValue = Union[None, bool, int, float, str, Dict[str, Any], List[Any]]
Json = Dict[str, JsonValue]
JsonArray = List[JsonValue]

HASH_KEY = "_hash"


class JsonKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


_BASIC_KINDS = frozenset({JsonKind.BOOLEAN, JsonKind.NUMBER, JsonKind.STRING})


def kind_of(value: Any) -> JsonKind:
    """Classify ``value`` or raise ``UnsupportedTypeError``."""
    if value is None:
        return JsonKind.NULL
    # bool is a subclass of int and must be tested first
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    raise UnsupportedTypeError(value)


def is_basic_type(value: Any) -> bool:
    """True for strings, numbers and booleans."""
    try:
        return kind_of(value) in _BASIC_KINDS
    except UnsupportedTypeError:
        return False


def circular_reference(value: Any) -> UnsupportedTypeError:
    return UnsupportedTypeError(value, "circular reference")


def _items(container: Union[Json, JsonArray]) -> Iterator[Tuple[Any, Any]]:
    return iter(container.items()) if isinstance(container, dict) else enumerate(container)


def _copy_container(source: Union[Json, JsonArray]) -> Union[Json, JsonArray]:
    root: Union[Json, JsonArray] = {} if isinstance(source, dict) else []
    # the stack is the current path from the root; on_path holds its ids
    stack: List[Tuple[Any, Iterator[Tuple[Any, Any]], Any]] = [(source, _items(source), root)]
    on_path = {id(source)}

    while stack:
        src, items, dst = stack[-1]
        for key, value in items:
            kind = kind_of(value)
            if kind is JsonKind.OBJECT or kind is JsonKind.ARRAY:
                if id(value) in on_path:
                    raise circular_reference(value)
                child: Any = {} if kind is JsonKind.OBJECT else []
            else:
                child = value

            if isinstance(dst, dict):
                dst[key] = child
            else:
                dst.append(child)

            if child is not value:
                on_path.add(id(value))
                stack.append((value, _items(value), child))
                break
        else:
            stack.pop()
            on_path.discard(id(src))

    return root


def copy_json(json_obj: Json) -> Json:
    """Deep copy a JSON object, keeping key order.

    Raises:
        UnsupportedTypeError: If any nested value is not a JSON value.
    """
    if kind_of(json_obj) is not JsonKind.OBJECT:
        raise UnsupportedTypeError(json_obj)
    return _copy_container(json_obj)  # type: ignore[return-value]


def copy_list(list_value: JsonArray) -> JsonArray:
    """Deep copy a JSON array."""
    if kind_of(list_value) is not JsonKind.ARRAY:
        raise UnsupportedTypeError(list_value)
    return _copy_container(list_value)  # type: ignore[return-value]
