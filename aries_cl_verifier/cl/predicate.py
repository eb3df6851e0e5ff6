"""Predicate relations supported by range proofs."""

from collections import namedtuple
from enum import Enum
from typing import Any, Optional

Relation = namedtuple("Relation", "fortran math is_less offset")


class Predicate(Enum):
    """Relation between a hidden attribute value and a public threshold."""

    LT = Relation("LT", "<", True, -1)
    LE = Relation("LE", "<=", True, 0)
    GE = Relation("GE", ">=", False, 0)
    GT = Relation("GT", ">", False, 1)

    @property
    def fortran(self) -> str:
        """Wire name, as carried in proofs and requests."""
        return self.value.fortran

    @property
    def math(self) -> str:
        """Mathematical symbol."""
        return self.value.math

    @property
    def is_less(self) -> bool:
        """Whether the hidden value is bounded from above."""
        return self.value.is_less

    def delta_prime(self, value: Any) -> int:
        """
        Inclusive bound the range proof works against.

        A strict predicate shifts its threshold by one so that every
        predicate reduces to `m >= delta_prime` or `m <= delta_prime`.
        """
        return Predicate.to_int(value) + self.value.offset

    def delta(self, attr_value: Any, value: Any) -> int:
        """Difference a satisfied predicate decomposes into four squares."""
        bound = self.delta_prime(value)
        attr_value = Predicate.to_int(attr_value)
        return bound - attr_value if self.is_less else attr_value - bound

    def holds(self, attr_value: Any, value: Any) -> bool:
        """Whether the predicate is satisfied by a raw attribute value."""
        return self.delta(attr_value, value) >= 0

    @staticmethod
    def get(relation: str) -> Optional["Predicate"]:
        """Look up a predicate by wire name, in any case, or by symbol."""
        for pred in Predicate:
            if relation.upper() in (pred.fortran, pred.math):
                return pred
        return None

    @staticmethod
    def to_int(value: Any) -> int:
        """
        Read a predicate operand as an int.

        Raises:
            ValueError: for anything but an int, a bool or an int string

        """
        if isinstance(value, int):
            return int(value)
        return int(str(value))
