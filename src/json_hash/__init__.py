"""json-hash public API.

Deterministic content hashes for nested JSON objects. Every object gets a
``_hash`` field computed from its own fields, with nested objects
represented by their hashes.

Example:
    from json_hash import Hash, hsh

    hashed = hsh({"key": "value"})
    print(hashed["_hash"])  # 5Dq88zdSRIOcAS-WM_lYYt
    Hash.default().validate(hashed)
"""

__version__ = "1.0.0"

from .canonical_json import canonical_bytes, canonical_dumps
from .config import (
    HASH_ALGORITHMS,
    ApplyConfig,
    HashConfig,
    NumberHashingConfig,
    default_apply_config,
    default_hash_config,
    default_number_config,
)
from .errors import (
    AboveRangeError,
    BelowRangeError,
    HashMismatchError,
    HashMissingError,
    HashValidationError,
    HashWrongError,
    JsonHashError,
    NotFiniteError,
    NumberPolicyError,
    PrecisionExceededError,
    UnsupportedTypeError,
)
from .hasher import Hash, hip, hsh
from .number_policy import check_number, format_number
from .validator import validate_hashes
from .values import HASH_KEY, JsonKind, copy_json, copy_list, is_basic_type, kind_of

__all__ = [
    "__version__",
    "Hash",
    "hip",
    "hsh",
    "ApplyConfig",
    "HashConfig",
    "NumberHashingConfig",
    "HASH_ALGORITHMS",
    "default_apply_config",
    "default_hash_config",
    "default_number_config",
    "canonical_dumps",
    "canonical_bytes",
    "check_number",
    "format_number",
    "validate_hashes",
    "HASH_KEY",
    "JsonKind",
    "kind_of",
    "copy_json",
    "copy_list",
    "is_basic_type",
    "JsonHashError",
    "NumberPolicyError",
    "NotFiniteError",
    "PrecisionExceededError",
    "AboveRangeError",
    "BelowRangeError",
    "UnsupportedTypeError",
    "HashMismatchError",
    "HashValidationError",
    "HashMissingError",
    "HashWrongError",
]
