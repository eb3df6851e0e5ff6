"""Fiat-Shamir transcript binding commitments and nonce into one challenge."""

import logging
from hashlib import sha256
from typing import Iterable, Sequence, Tuple

from ..core.error import InvalidStructure
from . import pairing
from .nonce import Nonce

LOGGER = logging.getLogger(__name__)


class CommitmentValue:
    """Canonical fixed-width encoding of one commitment."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        """Wrap already-encoded bytes."""
        if not isinstance(data, bytes):
            raise TypeError("Commitment encoding must be bytes")
        object.__setattr__(self, "_data", data)

    @classmethod
    def from_int(cls, value: int, width: int) -> "CommitmentValue":
        """
        Encode a non-negative integer big-endian in `width` bytes.

        Raises:
            InvalidStructure: if the value does not fit

        """
        if value < 0 or value.bit_length() > 8 * width:
            raise InvalidStructure(f"Commitment does not fit in {width} bytes")
        return cls(value.to_bytes(width, "big"))

    @classmethod
    def from_g1(cls, pt) -> "CommitmentValue":
        """Encode a G1 point."""
        return cls(pairing.g1_to_bytes(pt))

    @classmethod
    def from_g2(cls, pt) -> "CommitmentValue":
        """Encode a G2 point."""
        return cls(pairing.g2_to_bytes(pt))

    @classmethod
    def from_gt(cls, x) -> "CommitmentValue":
        """Encode a target group element."""
        return cls(pairing.gt_to_bytes(x))

    def to_bytes(self) -> bytes:
        """Accessor for the encoding."""
        return self._data

    def __setattr__(self, name, value):
        """Commitment values are immutable."""
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other) -> bool:
        """Compare encodings."""
        if not isinstance(other, CommitmentValue):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        """Hash the encoding."""
        return hash(self._data)

    def __repr__(self) -> str:
        """Return a short human readable representation."""
        return f"<CommitmentValue({len(self._data)} bytes: {self._data[:8].hex()}...)>"


def modulus_width(n: int) -> int:
    """Byte width of integers modulo `n`."""
    return (n.bit_length() + 7) // 8


class ChallengeTranscriptBuilder:
    """
    Accumulate commitments in transcript order and hash them into a challenge.

    Taus of every sub-proof come first, then the c-lists of every sub-proof
    in the same order, then the nonce.
    """

    def __init__(self):
        """Initialize an empty transcript."""
        self._taus = []
        self._c_list = []

    def add_taus(
        self, values: Iterable[CommitmentValue]
    ) -> "ChallengeTranscriptBuilder":
        """Append recomputed commitments of one sub-proof."""
        self._taus.extend(values)
        return self

    def add_c_list(
        self, values: Iterable[CommitmentValue]
    ) -> "ChallengeTranscriptBuilder":
        """Append the proof-carried commitments of one sub-proof."""
        self._c_list.extend(values)
        return self

    @property
    def ordered(self) -> Tuple[CommitmentValue, ...]:
        """All commitments in transcript order."""
        return tuple(self._taus) + tuple(self._c_list)

    def challenge(self, nonce: Nonce) -> int:
        """Hash the accumulated transcript with the nonce."""
        return self.build(self.ordered, nonce)

    @staticmethod
    def build(ordered_commitments: Sequence[CommitmentValue], nonce: Nonce) -> int:
        """
        Hash an ordered commitment sequence and a nonce into a challenge.

        Args:
            ordered_commitments: commitments in transcript order
            nonce: the verifier's nonce, appended last

        Returns:
            SHA-256 digest of the concatenated encodings as an unsigned integer

        """
        digest = sha256()
        for value in ordered_commitments:
            digest.update(value.to_bytes())
        digest.update(nonce.to_bytes())
        challenge = int.from_bytes(digest.digest(), "big")
        LOGGER.debug(
            "Challenge over %d commitment(s): %d", len(ordered_commitments), challenge
        )
        return challenge
