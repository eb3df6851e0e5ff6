from hashlib import sha256
from unittest import TestCase

from py_ecc.optimized_bn128 import G1, G2

from ...core.error import InvalidStructure
from ..nonce import Nonce
from ..transcript import ChallengeTranscriptBuilder, CommitmentValue, modulus_width


class TestCommitmentValue(TestCase):
    def test_from_int(self):
        value = CommitmentValue.from_int(0x0102, 4)
        assert value.to_bytes() == b"\x00\x00\x01\x02"
        assert value == CommitmentValue(b"\x00\x00\x01\x02")
        assert hash(value) == hash(CommitmentValue(b"\x00\x00\x01\x02"))
        assert value != CommitmentValue.from_int(0x0102, 3)
        assert "4 bytes" in repr(value)

    def test_from_int_x(self):
        with self.assertRaises(InvalidStructure):
            CommitmentValue.from_int(1 << 32, 4)
        with self.assertRaises(InvalidStructure):
            CommitmentValue.from_int(-1, 4)
        with self.assertRaises(TypeError):
            CommitmentValue("00")

    def test_immutable(self):
        value = CommitmentValue(b"\x01")
        with self.assertRaises(AttributeError):
            value._data = b"\x02"

    def test_group_elements(self):
        assert len(CommitmentValue.from_g1(G1).to_bytes()) == 64
        assert len(CommitmentValue.from_g2(G2).to_bytes()) == 128

    def test_modulus_width(self):
        assert modulus_width(255) == 1
        assert modulus_width(256) == 2
        assert modulus_width((1 << 2048) - 1) == 256


class TestChallengeTranscriptBuilder(TestCase):
    def setUp(self):
        self.nonce = Nonce(1234567890)
        self.values = [CommitmentValue.from_int(i, 8) for i in range(1, 5)]

    def test_known_answer(self):
        expect = sha256(b"".join(v.to_bytes() for v in self.values))
        expect.update(self.nonce.to_bytes())
        assert ChallengeTranscriptBuilder.build(self.values, self.nonce) == int(
            expect.hexdigest(), 16
        )

        empty = int(sha256(Nonce(0).to_bytes()).hexdigest(), 16)
        assert ChallengeTranscriptBuilder.build([], Nonce(0)) == empty

    def test_deterministic(self):
        one = ChallengeTranscriptBuilder.build(self.values, self.nonce)
        two = ChallengeTranscriptBuilder.build(list(self.values), Nonce(1234567890))
        assert one == two
        assert 0 <= one < 1 << 256

    def test_order_sensitive(self):
        swapped = [self.values[1], self.values[0]] + self.values[2:]
        assert ChallengeTranscriptBuilder.build(
            swapped, self.nonce
        ) != ChallengeTranscriptBuilder.build(self.values, self.nonce)

    def test_nonce_sensitive(self):
        assert ChallengeTranscriptBuilder.build(
            self.values, Nonce(1)
        ) != ChallengeTranscriptBuilder.build(self.values, Nonce(2))

    def test_taus_before_c_list(self):
        taus, c_list = self.values[:2], self.values[2:]
        builder = ChallengeTranscriptBuilder().add_c_list(c_list[:1])
        builder.add_taus(taus[:1]).add_c_list(c_list[1:]).add_taus(taus[1:])
        assert builder.ordered == tuple(self.values)
        assert builder.challenge(self.nonce) == ChallengeTranscriptBuilder.build(
            self.values, self.nonce
        )
