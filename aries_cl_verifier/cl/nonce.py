"""Single-use verifier nonce bound into the proof challenge."""

import json
import secrets

from ..core.error import InvalidStructure
from .constants import LARGE_NONCE
from .util import decimal_int

NONCE_BYTES = (LARGE_NONCE + 7) // 8


class Nonce:
    """Random value of fixed width, compared by value."""

    __slots__ = ("_value",)

    def __init__(self, value: int):
        """
        Initialize a nonce from its integer value.

        Args:
            value: non-negative integer of at most `LARGE_NONCE` bits

        Raises:
            InvalidStructure: if the value is not a suitable integer

        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidStructure(f"Nonce must be an integer, got {type(value)}")
        if value < 0 or value.bit_length() > LARGE_NONCE:
            raise InvalidStructure(f"Nonce must fit in {LARGE_NONCE} unsigned bits")
        object.__setattr__(self, "_value", value)

    @classmethod
    def new(cls) -> "Nonce":
        """Draw a fresh nonce from the system's secure random source."""
        return cls(secrets.randbits(LARGE_NONCE))

    @property
    def value(self) -> int:
        """Accessor for the integer value."""
        return self._value

    def to_bytes(self) -> bytes:
        """Fixed-width big-endian encoding used in the challenge transcript."""
        return self._value.to_bytes(NONCE_BYTES, "big")

    def to_json(self) -> str:
        """Serialize as a JSON string holding the decimal value."""
        return json.dumps(str(self._value))

    @classmethod
    def from_json(cls, nonce_json: str) -> "Nonce":
        """
        Parse a nonce from its JSON form.

        Raises:
            InvalidStructure: on malformed JSON or an out-of-range value

        """
        try:
            parsed = json.loads(nonce_json)
        except (TypeError, ValueError) as err:
            raise InvalidStructure("Nonce JSON parsing failed") from err
        if not isinstance(parsed, str):
            raise InvalidStructure(f"Nonce must be a decimal string: {parsed!r}")
        return cls(decimal_int(parsed, "Nonce"))

    def __setattr__(self, name, value):
        """Nonces are immutable."""
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other) -> bool:
        """Compare by value."""
        if not isinstance(other, Nonce):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        """Hash by value."""
        return hash((Nonce, self._value))

    def __repr__(self) -> str:
        """Return a human readable representation of this nonce."""
        return f"<Nonce({self._value})>"
