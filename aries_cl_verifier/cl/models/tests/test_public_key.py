from unittest import TestCase

from py_ecc.optimized_bn128 import G1, G2

from ....core.error import InvalidStructure
from ....messaging.models.base import BaseModelError
from ... import pairing
from ..public_key import (
    CredentialPrimaryPublicKey,
    CredentialPublicKey,
    CredentialRevocationPublicKey,
    PrimaryKeyValues,
)
from ..revocation import RevocationKeyPublic, RevocationRegistry

N = 3233  # 61 * 53

P_KEY = {
    "n": str(N),
    "s": "2",
    "z": "3",
    "rctxt": "5",
    "r": {"Master Secret": "7", "age": "11"},
}


def r_key() -> dict:
    g1 = pairing.encode_g1(G1)
    g2 = pairing.encode_g2(G2)
    return {
        **{name: g1 for name in ("g", "h", "h0", "h1", "h2", "htilde", "pk")},
        **{name: g2 for name in ("g_dash", "h_cap", "u", "y")},
    }


class TestCredentialPrimaryPublicKey(TestCase):
    def test_values(self):
        key = CredentialPrimaryPublicKey.deserialize(P_KEY)
        values = key.values()
        assert isinstance(values, PrimaryKeyValues)
        assert values.n == N
        assert (values.s, values.z, values.rctxt) == (2, 3, 5)
        assert values.r == {"mastersecret": 7, "age": 11}
        assert str(N) not in repr(key)

    def test_values_x(self):
        for update in (
            {"n": "2"},
            {"n": "abc"},
            {"s": "0"},
            {"z": str(N)},
            {"rctxt": "61"},
            {"r": {"age": "53"}},
            {"r": None},
        ):
            key = CredentialPrimaryPublicKey(**{**P_KEY, **update})
            with self.assertRaises(InvalidStructure):
                key.values()

    def test_deserialize_x(self):
        with self.assertRaises(BaseModelError):
            CredentialPrimaryPublicKey.deserialize({**P_KEY, "s": "-2"})
        with self.assertRaises(BaseModelError):
            CredentialPrimaryPublicKey.deserialize(
                {k: v for k, v in P_KEY.items() if k != "z"}
            )


class TestCredentialRevocationPublicKey(TestCase):
    def test_values(self):
        key = CredentialRevocationPublicKey.deserialize(r_key())
        values = key.values()
        assert pairing.point_eq(values.g, G1)
        assert pairing.point_eq(values.y, G2)

    def test_values_x(self):
        x, y = pairing.encode_g1(G1).split(" ")
        key = CredentialRevocationPublicKey(**{**r_key(), "h": f"{x} {y}0"})
        with self.assertRaises(InvalidStructure):
            key.values()

    def test_deserialize_x(self):
        with self.assertRaises(BaseModelError):
            CredentialRevocationPublicKey.deserialize(
                {**r_key(), "g_dash": pairing.encode_g1(G1)}
            )
        with self.assertRaises(BaseModelError):
            CredentialRevocationPublicKey.deserialize({**r_key(), "g": "1 2 3"})


class TestCredentialPublicKey(TestCase):
    def test_serde(self):
        key = CredentialPublicKey.deserialize({"p_key": P_KEY})
        assert key.r_key is None
        assert key.p_key.values().n == N
        assert CredentialPublicKey.from_json(key.to_json()).p_key.r == P_KEY["r"]

        key = CredentialPublicKey.deserialize({"p_key": P_KEY, "r_key": r_key()})
        assert isinstance(key.r_key, CredentialRevocationPublicKey)

    def test_deserialize_x(self):
        with self.assertRaises(BaseModelError):
            CredentialPublicKey.deserialize({"r_key": r_key()})


class TestRevocationArtifacts(TestCase):
    def test_registry(self):
        accum = pairing.encode_g2(pairing.point_mul(G2, 5))
        registry = RevocationRegistry.deserialize({"accum": accum})
        assert pairing.point_eq(registry.value(), pairing.point_mul(G2, 5))
        with self.assertRaises(BaseModelError):
            RevocationRegistry.deserialize({"accum": "1 2"})
        with self.assertRaises(InvalidStructure):
            RevocationRegistry(accum="1 2 3 4").value()

    def test_key_public(self):
        one = " ".join(["1"] + ["0"] * 11)
        assert RevocationKeyPublic.deserialize({"z": one}).value() == (
            pairing.gt_one()
        )
        with self.assertRaises(BaseModelError):
            RevocationKeyPublic.deserialize({"z": "1 0"})
        with self.assertRaises(InvalidStructure):
            RevocationKeyPublic(z=" ".join(["2"] * 12)).value()
