"""
config.py — Settings for hashing and for writing hashes into JSON.

All settings are frozen value objects. Use the ``default_*`` factories to
obtain a fresh default and ``dataclasses.replace`` to derive variants:

    ac = replace(default_apply_config(), in_place=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict

from cryptography.hazmat.primitives import hashes

__all__ = [
    "HASH_ALGORITHMS",
    "NumberHashingConfig",
    "HashConfig",
    "ApplyConfig",
    "default_number_config",
    "default_hash_config",
    "default_apply_config",
]

HASH_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
    "SHA3-256": hashes.SHA3_256,
    "SHA3-512": hashes.SHA3_512,
    "BLAKE2b": lambda: hashes.BLAKE2b(64),
}


@dataclass(frozen=True)
class NumberHashingConfig:
    """Rules that make numbers hash identically across platforms.

    Rounding errors can make numbers that are considered equal print
    differently. Fractional numbers finer than ``precision`` or outside
    ``[min_num, max_num]`` are therefore rejected.
    """

    precision: float = 0.001
    max_num: float = 1000 * 1000 * 1000
    min_num: float = -1000 * 1000 * 1000
    throw_on_range_error: bool = True

    def __post_init__(self) -> None:
        if self.precision <= 0:
            raise ValueError(f"precision must be positive, got {self.precision!r}")
        if self.min_num > self.max_num:
            raise ValueError(
                f"min_num ({self.min_num!r}) must not be greater than max_num ({self.max_num!r})"
            )


@dataclass(frozen=True)
class HashConfig:
    """Digest algorithm, output length and number rules."""

    hash_length: int = 22
    hash_algorithm: str = "SHA-256"
    number_config: NumberHashingConfig = field(default_factory=NumberHashingConfig)

    def __post_init__(self) -> None:
        if self.hash_length <= 0:
            raise ValueError(f"hash_length must be positive, got {self.hash_length!r}")
        if self.hash_algorithm not in HASH_ALGORITHMS:
            supported = ", ".join(sorted(HASH_ALGORITHMS))
            raise ValueError(
                f"Unsupported hash algorithm {self.hash_algorithm!r}. Supported: {supported}"
            )

    def new_digest(self) -> hashes.Hash:
        """Return a fresh digest context for ``hash_algorithm``."""
        return hashes.Hash(HASH_ALGORITHMS[self.hash_algorithm]())


@dataclass(frozen=True)
class ApplyConfig:
    """Options for writing hashes into a JSON object.

    Attributes:
        in_place: Write into the given object instead of a copy.
        update_existing_hashes: Recompute objects that already carry a
            ``_hash``. When False such objects and everything below them
            are left untouched.
        throw_on_wrong_hashes: Raise when a stored hash differs from the
            recomputed one instead of overwriting it.
    """

    in_place: bool = False
    update_existing_hashes: bool = True
    throw_on_wrong_hashes: bool = True


def default_number_config() -> NumberHashingConfig:
    return NumberHashingConfig()


def default_hash_config() -> HashConfig:
    return HashConfig()


def default_apply_config() -> ApplyConfig:
    return ApplyConfig()
