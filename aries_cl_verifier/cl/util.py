"""Parsing helpers for the numbers carried by keys and proofs."""

from typing import Any

from ..core.error import InvalidStructure

# Widest integer accepted from keys or proofs; caps modular exponent sizes
MAX_INT_BITS = 8192
MAX_DECIMAL_DIGITS = 2467


def decimal_int(value: Any, label: str, signed: bool = False) -> int:
    """
    Parse a decimal string (or int) into a Python integer.

    Args:
        value: decimal string, or an int already parsed
        label: name of the value for error messages
        signed: whether a leading minus sign is acceptable

    Raises:
        InvalidStructure: if the value is not a (suitably signed) integer, or
            is wider than `MAX_INT_BITS`

    """
    if isinstance(value, bool):
        raise InvalidStructure(f"{label} must be an integer, got a boolean")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        digits = value[1:] if signed and value.startswith("-") else value
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidStructure(f"{label} is not a decimal integer: {value!r}")
        if len(digits) > MAX_DECIMAL_DIGITS:
            raise InvalidStructure(f"{label} exceeds {MAX_DECIMAL_DIGITS} digits")
        parsed = int(value)
    else:
        raise InvalidStructure(f"{label} must be a decimal string, got {type(value)}")
    if parsed < 0 and not signed:
        raise InvalidStructure(f"{label} must be non-negative")
    if parsed.bit_length() > MAX_INT_BITS:
        raise InvalidStructure(f"{label} exceeds {MAX_INT_BITS} bits")
    return parsed


def bounded_int(value: Any, label: str, max_bits: int) -> int:
    """Parse a non-negative integer no wider than `max_bits` bits."""
    parsed = decimal_int(value, label)
    if parsed.bit_length() > max_bits:
        raise InvalidStructure(f"{label} exceeds {max_bits} bits")
    return parsed


def group_element(value: Any, label: str, n: int) -> int:
    """Parse an element of the multiplicative group modulo `n`."""
    parsed = decimal_int(value, label)
    if not 1 <= parsed < n:
        raise InvalidStructure(f"{label} must lie in [1, n)")
    try:
        pow(parsed, -1, n)
    except ValueError as err:
        raise InvalidStructure(f"{label} is not invertible modulo n") from err
    return parsed


def mod_inverse(value: int, n: int, label: str) -> int:
    """
    Invert a value modulo `n`.

    Raises:
        InvalidStructure: if the value shares a factor with `n`

    """
    try:
        return pow(value, -1, n)
    except ValueError as err:
        raise InvalidStructure(f"{label} is not invertible modulo n") from err
