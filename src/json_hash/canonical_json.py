"""
canonical_json.py — Deterministic string form used as digest input.

- Object keys sorted by Unicode code point
- No whitespace
- Numbers printed by ``format_number`` (``1.0`` -> ``1``)
- Strings wrapped in double quotes; only ``"`` is escaped (backslash)

The escaping is intentionally minimal and NOT full JSON escaping: the
output is digest input, not JSON meant to be parsed again. Changing it
changes every hash.
"""

from __future__ import annotations

from typing import Any, Dict, List, Set, Tuple

from .errors import UnsupportedTypeError
from .number_policy import format_number
from .values import JsonKind, circular_reference, kind_of


def _encode_string(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def _scalar_text(value: Any, kind: JsonKind) -> str:
    if kind is JsonKind.NULL:
        return "null"
    if kind is JsonKind.STRING:
        return _encode_string(value)
    if kind is JsonKind.BOOLEAN:
        return "true" if value else "false"
    return format_number(value)


def _container_items(value: Any, kind: JsonKind) -> List[Tuple[str, Any]]:
    """Work items for a container, in output order."""
    if kind is JsonKind.ARRAY:
        items: List[Tuple[str, Any]] = [("text", "[")]
        for index, element in enumerate(value):
            if index:
                items.append(("text", ","))
            items.append(("value", element))
        items.append(("text", "]"))
        return items

    for key in value:
        if not isinstance(key, str):
            raise UnsupportedTypeError(key)
    items = [("text", "{")]
    for index, key in enumerate(sorted(value)):
        items.append(("text", f'{"," if index else ""}"{key}":'))
        items.append(("value", value[key]))
    items.append(("text", "}"))
    return items


def _encode(root: Any) -> str:
    parts: List[str] = []
    stack: List[Tuple[str, Any]] = [("value", root)]
    on_path: Set[int] = set()

    while stack:
        tag, item = stack.pop()
        if tag == "text":
            parts.append(item)
            continue
        if tag == "leave":
            on_path.discard(item)
            continue

        kind = kind_of(item)
        if kind is JsonKind.ARRAY or kind is JsonKind.OBJECT:
            if id(item) in on_path:
                raise circular_reference(item)
            on_path.add(id(item))
            stack.append(("leave", id(item)))
            stack.extend(reversed(_container_items(item, kind)))
        else:
            parts.append(_scalar_text(item, kind))

    return "".join(parts)


def canonical_dumps(obj: Dict[str, Any]) -> str:
    """Return the canonical string of a mapping.

    Raises:
        UnsupportedTypeError: If ``obj`` or any nested value is not a JSON
            value, a key is not a string, or the mapping contains itself.
            Nothing is returned partially.
    """
    if not isinstance(obj, dict):
        raise UnsupportedTypeError(obj)
    return _encode(obj)


def canonical_bytes(obj: Dict[str, Any]) -> bytes:
    """Return the canonical string as UTF-8 bytes."""
    return canonical_dumps(obj).encode("utf-8")
