from unittest import TestCase

from ...core.error import InvalidStructure
from ..util import (
    MAX_DECIMAL_DIGITS,
    MAX_INT_BITS,
    bounded_int,
    decimal_int,
    group_element,
    mod_inverse,
)


class TestUtil(TestCase):
    def test_decimal_int(self):
        assert decimal_int("0", "x") == 0
        assert decimal_int("00123", "x") == 123
        assert decimal_int(123, "x") == 123
        assert decimal_int("-5", "x", signed=True) == -5
        assert decimal_int(-5, "x", signed=True) == -5

    def test_decimal_int_x(self):
        for value in ("", "-", "-5", "+5", " 5", "5.0", "0x10", "٣", True, 1.0, None):
            with self.assertRaises(InvalidStructure):
                decimal_int(value, "x")
        with self.assertRaises(InvalidStructure):
            decimal_int("--5", "x", signed=True)

    def test_decimal_int_too_wide(self):
        widest = 2**MAX_INT_BITS - 1
        assert len(str(widest)) <= MAX_DECIMAL_DIGITS
        assert decimal_int(str(widest), "x") == widest
        for value in (
            "7" * 5000,
            "-" + "7" * 5000,
            2**MAX_INT_BITS,
            -(2**MAX_INT_BITS),
        ):
            with self.assertRaises(InvalidStructure) as context:
                decimal_int(value, "v", signed=True)
            assert "v exceeds" in str(context.exception)

    def test_bounded_int(self):
        assert bounded_int("255", "x", 8) == 255
        with self.assertRaises(InvalidStructure) as context:
            bounded_int("256", "x", 8)
        assert "x exceeds 8 bits" in str(context.exception)

    def test_group_element(self):
        assert group_element("2", "x", 15) == 2
        for value in ("0", "15", "16", "3", "5"):
            with self.assertRaises(InvalidStructure):
                group_element(value, "x", 15)

    def test_mod_inverse(self):
        assert mod_inverse(2, 15, "x") * 2 % 15 == 1
        with self.assertRaises(InvalidStructure):
            mod_inverse(6, 15, "x")
