from unittest import TestCase

from ..predicate import Predicate


class TestPredicate(TestCase):
    """Predicate tests for coverage"""

    def test_get_monikers(self):
        """Get all monikers."""
        for pred in Predicate:
            assert Predicate.get(pred.fortran) is pred
            assert Predicate.get(pred.fortran.lower()) is pred
            assert Predicate.get(pred.math) is pred
        assert Predicate.get("ge") is Predicate.GE
        assert Predicate.get("EQ") is None

    def test_to_int(self):
        assert Predicate.to_int(True) == 1
        assert Predicate.to_int("18") == 18
        with self.assertRaises(ValueError):
            Predicate.to_int(18.5)
        with self.assertRaises(ValueError):
            Predicate.to_int("eighteen")

    def test_delta_prime(self):
        assert Predicate.GE.delta_prime(18) == 18
        assert Predicate.GT.delta_prime(18) == 19
        assert Predicate.LE.delta_prime(18) == 18
        assert Predicate.LT.delta_prime("18") == 17

        assert not Predicate.GE.is_less
        assert not Predicate.GT.is_less
        assert Predicate.LE.is_less
        assert Predicate.LT.is_less

    def test_delta(self):
        assert Predicate.GE.delta(25, 18) == 7
        assert Predicate.GT.delta(25, 18) == 6
        assert Predicate.LE.delta(25, 30) == 5
        assert Predicate.LT.delta(25, 30) == 4
        assert Predicate.GE.delta(17, 18) < 0

    def test_holds(self):
        assert Predicate.GE.holds(25, 18)
        assert not Predicate.LT.holds(25, 18)
        assert Predicate.LE.holds("18", 18)
        assert not Predicate.GT.holds(18, "18")
        assert Predicate.LT.holds(-5, "-4")
