"""
hasher.py — Writes content hashes into nested JSON objects.

Every object in a tree gets a ``_hash`` field. An object's hash is the
digest of its canonical string after each nested object has been replaced
by that object's ``_hash`` and each array by its flattened form, so a
parent's hash covers its whole subtree (a Merkle tree over JSON).

Digests are SHA-256 (configurable), URL-safe base64 without padding,
truncated to ``HashConfig.hash_length`` characters (22 by default). The
truncation trades collision resistance for short identifiers; use a longer
``hash_length`` where full strength is needed.

With ``ApplyConfig.in_place`` the given tree is modified directly. An error
in the middle of the walk then leaves it partially hashed; use the default
copy mode where the input must stay intact.
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional, Tuple, TypeVar, Union

from .canonical_json import canonical_dumps
from .config import ApplyConfig, HashConfig, default_apply_config, default_hash_config
from .errors import HashMismatchError, UnsupportedTypeError
from .number_policy import check_number
from .validator import validate_hashes
from .values import (
    HASH_KEY,
    Json,
    JsonArray,
    JsonKind,
    JsonValue,
    circular_reference,
    copy_json,
    copy_list,
    is_basic_type,
    kind_of,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Dict[str, Any])


def _objects_in(value: JsonArray) -> Iterator[Json]:
    """Yield the objects of an array in order, descending into nested arrays."""
    stack: List[Tuple[JsonArray, Iterator[Any]]] = [(value, iter(value))]
    on_path = {id(value)}
    while stack:
        array, elements = stack[-1]
        for element in elements:
            kind = kind_of(element)
            if kind is JsonKind.OBJECT:
                yield element
            elif kind is JsonKind.ARRAY:
                if id(element) in on_path:
                    raise circular_reference(element)
                on_path.add(id(element))
                stack.append((element, iter(element)))
                break
        else:
            stack.pop()
            on_path.discard(id(array))


def _child_objects(obj: Json) -> Iterator[Json]:
    for key, value in obj.items():
        if key == HASH_KEY:
            continue
        kind = kind_of(value)
        if kind is JsonKind.OBJECT:
            yield value
        elif kind is JsonKind.ARRAY:
            yield from _objects_in(value)


# above this magnitude integral floats print in exponent form
_MAX_PLAIN_INTEGRAL = 1e21


def _integral_floats_to_ints(root: Json) -> None:
    """Replace integral floats in a parsed tree with ints, in place."""
    stack: List[Union[Json, JsonArray]] = [root]
    while stack:
        container = stack.pop()
        items = container.items() if isinstance(container, dict) else enumerate(container)
        for key, value in items:
            if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_PLAIN_INTEGRAL:
                container[key] = int(value)  # type: ignore[index]
            elif isinstance(value, (dict, list)):
                stack.append(value)


class Hash:
    """Adds hashes to JSON objects and validates them."""

    def __init__(self, config: Optional[HashConfig] = None):
        self.config = config or default_hash_config()

    @classmethod
    def default(cls) -> "Hash":
        """Return a new instance with the default configuration."""
        return cls()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def apply(self, json_obj: T, apply_config: Optional[ApplyConfig] = None) -> T:
        """Write hashes into ``json_obj`` or into a copy of it.

        Args:
            json_obj: The JSON object to hash.
            apply_config: Copy/in-place, overwrite and mismatch behaviour.
                Defaults to ``default_apply_config()``.

        Returns:
            The hashed object: ``json_obj`` itself when ``in_place`` is set,
            otherwise an independent deep copy.

        Raises:
            UnsupportedTypeError: If the tree contains a non-JSON value.
            NumberPolicyError: If a number cannot be hashed reproducibly.
            HashMismatchError: If a stored hash differs from the recomputed
                one and ``throw_on_wrong_hashes`` is set.
            HashValidationError: If the final consistency check fails.
        """
        apply_config = apply_config or default_apply_config()
        target = json_obj if apply_config.in_place else copy_json(json_obj)
        if kind_of(target) is not JsonKind.OBJECT:
            raise UnsupportedTypeError(target)

        self._add_hashes(target, apply_config)

        if apply_config.throw_on_wrong_hashes:
            self.validate(target)
        return target  # type: ignore[return-value]

    def apply_in_place(
        self,
        json_obj: T,
        update_existing_hashes: bool = False,
        throw_on_wrong_hashes: bool = True,
    ) -> T:
        """Write hashes directly into ``json_obj`` and return it."""
        apply_config = ApplyConfig(
            in_place=True,
            update_existing_hashes=update_existing_hashes,
            throw_on_wrong_hashes=throw_on_wrong_hashes,
        )
        return self.apply(json_obj, apply_config)

    def apply_to_json_string(self, json_string: str) -> str:
        """Parse JSON text, add hashes and serialize it compactly again.

        Integral floats are written as integers (``1.0`` -> ``1``), the way
        they enter the hash.
        """
        parsed = json.loads(json_string)
        apply_config = replace(default_apply_config(), in_place=True)
        hashed = self.apply(parsed, apply_config)
        _integral_floats_to_ints(hashed)
        return json.dumps(hashed, separators=(",", ":"), ensure_ascii=False)

    def calc_hash(self, value: Union[str, JsonArray, Json]) -> str:
        """Hash a string, an array or an object.

        Strings are digested directly. Arrays are hashed as the object
        ``{"array": value}``. Objects are hashed on a copy.
        """
        kind = kind_of(value)
        if kind is JsonKind.STRING:
            return self.calc_string_hash(value)  # type: ignore[arg-type]
        if kind is JsonKind.ARRAY:
            return self._calc_array_hash(value)  # type: ignore[arg-type]
        if kind is JsonKind.OBJECT:
            return self.apply(value)[HASH_KEY]  # type: ignore[type-var]
        raise UnsupportedTypeError(value)

    def calc_string_hash(self, value: str) -> str:
        """Digest the UTF-8 bytes of ``value`` into a hash string."""
        digest = self.config.new_digest()
        digest.update(value.encode("utf-8"))
        encoded = base64.urlsafe_b64encode(digest.finalize()).rstrip(b"=").decode("ascii")
        return encoded[: self.config.hash_length]

    def validate(self, json_obj: T, ignore_missing_hashes: bool = False) -> T:
        """Raise if a ``_hash`` in ``json_obj`` is missing or wrong.

        Returns:
            ``json_obj`` unchanged.

        Raises:
            HashMissingError: If a hash is absent or empty and
                ``ignore_missing_hashes`` is False.
            HashWrongError: If a hash differs from the recomputed one.
        """
        expected = self.apply(
            json_obj,
            ApplyConfig(in_place=False, update_existing_hashes=True, throw_on_wrong_hashes=False),
        )
        validate_hashes(json_obj, expected, ignore_missing_hashes=ignore_missing_hashes)
        return json_obj

    def check_basic_type(self, value: JsonValue) -> JsonValue:
        """Return a string, boolean or policy-checked number unchanged."""
        kind = kind_of(value)
        if kind is JsonKind.NUMBER:
            return check_number(value, self.config.number_config)  # type: ignore[arg-type]
        if kind in (JsonKind.STRING, JsonKind.BOOLEAN):
            return value
        raise UnsupportedTypeError(value)

    copy_json = staticmethod(copy_json)
    copy_list = staticmethod(copy_list)
    is_basic_type = staticmethod(is_basic_type)
    json_string = staticmethod(canonical_dumps)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _calc_array_hash(self, array: JsonArray) -> str:
        obj: Json = {"array": array, HASH_KEY: ""}
        self.apply_in_place(obj)
        return obj[HASH_KEY]  # type: ignore[return-value]

    def _add_hashes(self, root: Json, apply_config: ApplyConfig) -> None:
        """Hash every reachable object, children before parents."""
        stack: List[Tuple[Json, bool]] = [(root, False)]
        # ids of the objects whose children are still pending
        on_path = set()

        while stack:
            obj, children_done = stack.pop()
            if children_done:
                on_path.discard(id(obj))
                self._hash_object(obj, apply_config)
                continue

            if obj.get(HASH_KEY) and not apply_config.update_existing_hashes:
                logger.debug("Keeping existing hash %s and its subtree", obj[HASH_KEY])
                continue
            if id(obj) in on_path:
                raise circular_reference(obj)

            on_path.add(id(obj))
            stack.append((obj, True))
            stack.extend((child, False) for child in reversed(list(_child_objects(obj))))

    def _hash_object(self, obj: Json, apply_config: ApplyConfig) -> None:
        snapshot: Dict[str, Any] = {}
        for key, value in obj.items():
            if key == HASH_KEY:
                continue
            kind = kind_of(value)
            if kind is JsonKind.NULL:
                snapshot[key] = None
            elif kind is JsonKind.OBJECT:
                snapshot[key] = value.get(HASH_KEY)
            elif kind is JsonKind.ARRAY:
                snapshot[key] = self._flatten_list(value)
            else:
                snapshot[key] = self.check_basic_type(value)

        new_hash = self.calc_string_hash(canonical_dumps(snapshot))

        old_hash = obj.get(HASH_KEY)
        if apply_config.throw_on_wrong_hashes and old_hash and old_hash != new_hash:
            raise HashMismatchError(old_hash, new_hash)  # type: ignore[arg-type]

        obj[HASH_KEY] = new_hash

    def _flatten_list(self, list_value: JsonArray) -> JsonArray:
        flattened: JsonArray = []
        stack: List[Tuple[JsonArray, Iterator[Any], JsonArray]] = [
            (list_value, iter(list_value), flattened)
        ]
        on_path = {id(list_value)}

        while stack:
            source, elements, target = stack[-1]
            for element in elements:
                kind = kind_of(element)
                if kind is JsonKind.NULL:
                    target.append(None)
                elif kind is JsonKind.OBJECT:
                    target.append(element.get(HASH_KEY))
                elif kind is JsonKind.ARRAY:
                    if id(element) in on_path:
                        raise circular_reference(element)
                    nested: JsonArray = []
                    target.append(nested)
                    on_path.add(id(element))
                    stack.append((element, iter(element), nested))
                    break
                else:
                    target.append(self.check_basic_type(element))
            else:
                stack.pop()
                on_path.discard(id(source))

        return flattened


def hsh(json_obj: T, config: Optional[HashConfig] = None) -> T:
    """Return a hashed copy of ``json_obj``."""
    return Hash(config).apply(json_obj)


def hip(json_obj: T, config: Optional[HashConfig] = None) -> T:
    """Hash ``json_obj`` in place and return it."""
    return Hash(config).apply(json_obj, replace(default_apply_config(), in_place=True))
