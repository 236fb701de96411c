"""
validator.py — Compares stored hashes against recomputed ones.

Nodes are visited depth-first, parent before children, fields in the
insertion order of the tree under test. The first problem found is raised
and the walk stops. Paths look like ``/parent/0/child``; the root is ``""``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from .errors import HashMissingError, HashWrongError
from .values import HASH_KEY, Json

logger = logging.getLogger(__name__)


def validate_hashes(actual: Json, expected: Json, ignore_missing_hashes: bool = False) -> None:
    """Raise on the first missing or wrong ``_hash`` in ``actual``.

    Args:
        actual: The tree under test.
        expected: The same tree with freshly computed hashes.
        ignore_missing_hashes: Skip nodes without a hash instead of failing.
            Their children are still checked.

    Raises:
        HashMissingError: If a node has no (or an empty) ``_hash``.
        HashWrongError: If a node's ``_hash`` differs from ``expected``.
    """
    stack: List[Tuple[Json, Json, str]] = [(actual, expected, "")]
    checked = 0

    while stack:
        node_is, node_should, path = stack.pop()

        actual_hash = node_is.get(HASH_KEY)
        if actual_hash:
            if actual_hash != node_should.get(HASH_KEY):
                raise HashWrongError(path, actual_hash, node_should.get(HASH_KEY))
            checked += 1
        elif not ignore_missing_hashes:
            raise HashMissingError(path)

        children: List[Tuple[Json, Json, str]] = []
        for key, value in node_is.items():
            if key == HASH_KEY:
                continue
            if isinstance(value, dict):
                children.append((value, node_should[key], f"{path}/{key}"))
            elif isinstance(value, list):
                array_should: List[Any] = node_should[key]
                for index, item in enumerate(value):
                    if isinstance(item, dict):
                        children.append((item, array_should[index], f"{path}/{key}/{index}"))

        stack.extend(reversed(children))

    logger.debug("Validated %d hashed objects", checked)
