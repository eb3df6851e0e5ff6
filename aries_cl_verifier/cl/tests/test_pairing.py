from unittest import TestCase, mock

from py_ecc.optimized_bn128 import G1, G2, FQ12, field_modulus

from ...core.error import InvalidStructure
from .. import pairing as test_module


class TestPairing(TestCase):
    def test_point_arithmetic(self):
        two_g = test_module.point_mul(G1, 2)
        assert test_module.point_eq(two_g, test_module.point_add(G1, G1))
        assert test_module.point_eq(
            test_module.point_mul(G1, -1), test_module.point_neg(G1)
        )
        assert test_module.point_eq(
            test_module.point_mul(G1, test_module.GROUP_ORDER + 3),
            test_module.point_mul(G1, 3),
        )
        assert test_module.point_eq(
            test_module.point_sum((G1, 5), (G1, -2)), test_module.point_mul(G1, 3)
        )

    def test_pairing_bilinear(self):
        e = test_module.pair(G1, G2)
        assert e != test_module.gt_one()
        assert test_module.pair(test_module.point_mul(G1, 2), G2) == e * e
        assert test_module.gt_pow(e, 2) == e * e
        assert test_module.gt_pow(e, test_module.GROUP_ORDER) == test_module.gt_one()
        assert e * test_module.gt_inv(e) == test_module.gt_one()
        assert test_module.gt_prod((e, 3), (e, -1)) == e * e

        assert test_module.decode_gt(test_module.encode_gt(e)) == e

    def test_g1_round_trip(self):
        pt = test_module.point_mul(G1, 12345)
        text = test_module.encode_g1(pt)
        assert text == text.upper()
        assert len(text.split(" ")) == 2
        assert test_module.point_eq(test_module.decode_g1(text), pt)

    def test_g2_round_trip(self):
        pt = test_module.point_mul(G2, 67890)
        text = test_module.encode_g2(pt)
        assert len(text.split(" ")) == 4
        assert test_module.point_eq(test_module.decode_g2(text), pt)

    def test_encode_infinity_x(self):
        with self.assertRaises(ValueError):
            test_module.encode_g1(test_module.G1_INFINITY)
        with self.assertRaises(ValueError):
            test_module.encode_g2(test_module.G2_INFINITY)

    def test_decode_g1_x(self):
        x, y = test_module.encode_g1(G1).split(" ")
        for text in (
            None,
            "",
            x,
            f"{x} {y} 1",
            f"{x} XYZ",
            f"{x} {int(y, 16) + 1:X}",
            f"{x} {field_modulus + int(y, 16):X}",
            f"{x} -{y}",
        ):
            with self.assertRaises(InvalidStructure):
                test_module.decode_g1(text)

    def test_decode_g2_x(self):
        coords = test_module.encode_g2(G2).split(" ")
        coords[3] = f"{int(coords[3], 16) ^ 1:X}"
        with self.assertRaises(InvalidStructure):
            test_module.decode_g2(" ".join(coords))
        with self.assertRaises(InvalidStructure):
            test_module.decode_g2(test_module.encode_g1(G1))

        with mock.patch.object(test_module, "multiply", return_value=G2):
            with self.assertRaises(InvalidStructure) as context:
                test_module.decode_g2(test_module.encode_g2(G2))
        assert "subgroup" in str(context.exception)

    def test_decode_gt_x(self):
        with self.assertRaises(InvalidStructure):
            test_module.decode_gt(" ".join(["2"] + ["0"] * 11))
        with self.assertRaises(InvalidStructure):
            test_module.decode_gt(" ".join(["0"] * 12))
        with self.assertRaises(InvalidStructure):
            test_module.decode_gt(" ".join(["1"] * 11))

        assert test_module.decode_gt(" ".join(["1"] + ["0"] * 11)) == FQ12.one()

    def test_to_bytes(self):
        assert test_module.g1_to_bytes(test_module.G1_INFINITY) == bytes(64)
        assert test_module.g2_to_bytes(test_module.G2_INFINITY) == bytes(128)

        g1_bytes = test_module.g1_to_bytes(G1)
        assert len(g1_bytes) == test_module.G1_BYTES
        assert g1_bytes == (1).to_bytes(32, "big") + (2).to_bytes(32, "big")

        # projective coordinates do not leak into the encoding
        scaled = tuple(c * 7 for c in G1)
        assert test_module.g1_to_bytes(scaled) == g1_bytes

        assert len(test_module.g2_to_bytes(G2)) == test_module.G2_BYTES
        assert len(test_module.gt_to_bytes(FQ12.one())) == test_module.GT_BYTES
