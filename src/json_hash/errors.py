"""
errors.py — json-hash error taxonomy

Every failure raised by the hasher carries a stable code, a human readable
message and the data needed to locate the offending node (value, threshold,
path or the disagreeing hashes).
"""

from typing import Any, Optional

__all__ = [
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


class JsonHashError(Exception):
    """Base class for all json-hash errors."""
    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.context = context

        full_msg = f"[{code}] {message}"
        if context:
            full_msg += f" Context: {context}"

        super().__init__(full_msg)


def _path_hint(path: str) -> str:
    return f" at {path}" if path else ""


# Number policy errors (E1xx)
class NumberPolicyError(JsonHashError):
    """A number cannot be hashed reproducibly."""


class NotFiniteError(NumberPolicyError):
    def __init__(self, value: float, context: Optional[str] = None):
        from .number_policy import format_number

        self.value = value
        super().__init__("JSONHASH_E100", f"{format_number(value)} is not supported.", context)


class PrecisionExceededError(NumberPolicyError):
    def __init__(self, value: float, precision: float, context: Optional[str] = None):
        from .number_policy import format_number

        self.value = value
        self.precision = precision
        super().__init__(
            "JSONHASH_E101",
            f"Number {format_number(value)} has a higher precision than "
            f"{format_number(precision)}.",
            context,
        )


class AboveRangeError(NumberPolicyError):
    def __init__(self, value: float, max_num: float, context: Optional[str] = None):
        from .number_policy import format_number

        self.value = value
        self.max_num = max_num
        super().__init__(
            "JSONHASH_E102",
            f"Number {format_number(value)} exceeds NumberHashingConfig.max_num.",
            context,
        )


class BelowRangeError(NumberPolicyError):
    def __init__(self, value: float, min_num: float, context: Optional[str] = None):
        from .number_policy import format_number

        self.value = value
        self.min_num = min_num
        super().__init__(
            "JSONHASH_E103",
            f"Number {format_number(value)} is smaller than NumberHashingConfig.min_num.",
            context,
        )


# Structural errors (E2xx)
class UnsupportedTypeError(JsonHashError):
    def __init__(self, value: Any, context: Optional[str] = None):
        self.value = value
        self.type_name = type(value).__name__
        super().__init__("JSONHASH_E200", f"Unsupported type: {self.type_name}.", context)


# Hash integrity errors (E3xx)
class HashMismatchError(JsonHashError):
    def __init__(self, old_hash: str, new_hash: str, context: Optional[str] = None):
        self.old_hash = old_hash
        self.new_hash = new_hash
        super().__init__(
            "JSONHASH_E300",
            f'Hash "{old_hash}" does not match the newly calculated one "{new_hash}". '
            "Please make sure that all systems are producing the same hashes.",
            context,
        )


class HashValidationError(JsonHashError):
    """A stored ``_hash`` does not hold up against recomputation."""


class HashMissingError(HashValidationError):
    def __init__(self, path: str, context: Optional[str] = None):
        self.path = path
        super().__init__("JSONHASH_E301", f"Hash{_path_hint(path)} is missing.", context)


class HashWrongError(HashValidationError):
    def __init__(self, path: str, actual: str, expected: str, context: Optional[str] = None):
        self.path = path
        self.actual = actual
        self.expected = expected
        super().__init__(
            "JSONHASH_E302",
            f'Hash{_path_hint(path)} "{actual}" is wrong. Should be "{expected}".',
            context,
        )
