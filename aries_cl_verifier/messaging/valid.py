"""Validators for schema fields."""

from marshmallow.validate import Regexp


class NumericStrWhole(Regexp):
    """Validate value against whole number numeric string."""

    EXAMPLE = "0"
    PATTERN = r"^[0-9]+$"

    def __init__(self):
        """Initialize the instance."""

        super().__init__(
            NumericStrWhole.PATTERN,
            error="Value {input} is not a non-negative numeric string",
        )


class NumericStrAny(Regexp):
    """Validate value against any number numeric string."""

    EXAMPLE = "-1"
    PATTERN = r"^-?[0-9]+$"

    def __init__(self):
        """Initialize the instance."""

        super().__init__(
            NumericStrAny.PATTERN,
            error="Value {input} is not a numeric string",
        )


class HexCoordinates(Regexp):
    """Validate value against a fixed count of space-separated hex coordinates."""

    def __init__(self, count: int):
        """Initialize the instance."""

        super().__init__(
            r"^[0-9A-F]{1,64}( [0-9A-F]{1,64}){%d}$" % (count - 1),
            error=f"Value {{input}} is not {count} space-separated hex coordinates",
        )


class G1Point(HexCoordinates):
    """Validate value against an affine G1 point encoding."""

    EXAMPLE = "1 2"

    def __init__(self):
        """Initialize the instance."""

        super().__init__(2)


class G2Point(HexCoordinates):
    """Validate value against an affine G2 point encoding."""

    EXAMPLE = "1 0 2 0"

    def __init__(self):
        """Initialize the instance."""

        super().__init__(4)


class GTElement(HexCoordinates):
    """Validate value against a target group element encoding."""

    EXAMPLE = " ".join(["1"] + ["0"] * 11)

    def __init__(self):
        """Initialize the instance."""

        super().__init__(12)


NUM_STR_WHOLE_VALIDATE = NumericStrWhole()
NUM_STR_WHOLE_EXAMPLE = NumericStrWhole.EXAMPLE

NUM_STR_ANY_VALIDATE = NumericStrAny()
NUM_STR_ANY_EXAMPLE = NumericStrAny.EXAMPLE

G1_POINT_VALIDATE = G1Point()
G1_POINT_EXAMPLE = G1Point.EXAMPLE

G2_POINT_VALIDATE = G2Point()
G2_POINT_EXAMPLE = G2Point.EXAMPLE

GT_ELEMENT_VALIDATE = GTElement()
GT_ELEMENT_EXAMPLE = GTElement.EXAMPLE
