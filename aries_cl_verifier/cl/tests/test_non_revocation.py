import secrets
from unittest import TestCase, mock

import pytest

from ...core.error import InvalidStructure, ProofRejected
from ..constants import LARGE_MASTER_SECRET
from ..equations import VerificationEquationEngine
from ..models.proof import NonRevocProof, Proof
from ..nonce import Nonce
from ..pairing import GROUP_ORDER
from ..sub_proof_request import SubProofRequestBuilder
from ..verifier import ProofVerifier
from .prover import Issuer, Prover


@pytest.mark.slow
class TestNonRevocation(TestCase):
    """Pairing arithmetic is slow: build one proof and verify it a few ways."""

    @classmethod
    def setUpClass(cls):
        master_secret = secrets.randbits(LARGE_MASTER_SECRET)
        cls.issuer = Issuer(["name", "age"], revocation_size=5)
        cls.credential = cls.issuer.issue(
            {"name": "Alice", "age": 25}, master_secret, rev_index=2
        )
        cls.issuer.issue({"name": "Bob", "age": 40}, master_secret, rev_index=4)
        cls.plain_issuer = Issuer(["degree"])
        cls.plain = cls.plain_issuer.issue({"degree": "BSc"}, master_secret)

        cls.request = (
            SubProofRequestBuilder()
            .add_revealed_attr("name")
            .add_predicate("age", "GE", 18)
            .finalize()
        )
        cls.plain_request = SubProofRequestBuilder().finalize()
        cls.nonce = Nonce.new()
        cls.proof = (
            Prover()
            .add_sub_proof(cls.request, cls.credential)
            .add_sub_proof(cls.plain_request, cls.plain)
            .build(cls.nonce)
        )
        cls.rev_key_pub = cls.issuer.registry.revocation_key_public()
        cls.rev_reg = cls.issuer.registry.registry()

    def verifier(self, rev_reg=None, revocation=True) -> ProofVerifier:
        verifier = ProofVerifier()
        kwargs = {}
        if revocation:
            kwargs = {
                "rev_key_pub": self.rev_key_pub,
                "rev_reg": rev_reg or self.rev_reg,
            }
        verifier.add_sub_proof_request(
            "cred1",
            self.request,
            self.issuer.schema,
            self.issuer.public_key(),
            **kwargs,
        )
        verifier.add_sub_proof_request(
            "cred2",
            self.plain_request,
            self.plain_issuer.schema,
            self.plain_issuer.public_key(),
        )
        return verifier

    def copy(self) -> Proof:
        return Proof.deserialize(self.proof.serialize())

    def test_verify(self):
        assert self.proof.proofs[0].non_revoc_proof is not None
        assert self.proof.proofs[1].non_revoc_proof is None
        assert self.verifier().verify(self.proof, self.nonce)

    def test_verify_parses_each_sub_proof_once(self):
        engine_cls = VerificationEquationEngine
        with mock.patch.object(
            engine_cls,
            "check_non_revocation_structure",
            autospec=True,
            side_effect=engine_cls.check_non_revocation_structure,
        ) as mock_non_revoc, mock.patch.object(
            engine_cls,
            "check_primary_structure",
            autospec=True,
            side_effect=engine_cls.check_primary_structure,
        ) as mock_primary:
            assert self.verifier().verify(self.proof, self.nonce)
        assert mock_non_revoc.call_count == 1
        assert mock_primary.call_count == 2

    def test_tampered_response(self):
        proof = self.copy()
        x_list = proof.proofs[0].non_revoc_proof.x_list
        x_list["rho"] = str((int(x_list["rho"]) + 1) % GROUP_ORDER)
        assert not self.verifier().verify(proof, self.nonce)

    def test_revoked(self):
        registry = self.issuer.registry
        registry.revoke(2)
        try:
            rev_reg = registry.registry()
        finally:
            registry.issued.add(2)
        assert rev_reg.accum != self.rev_reg.accum
        assert not self.verifier(rev_reg=rev_reg).verify(self.proof, self.nonce)

    def test_revocation_presence_mismatch(self):
        with self.assertRaises(ProofRejected):
            self.verifier(revocation=False).verify(self.proof, self.nonce)

        proof = self.copy()
        proof.proofs[0].non_revoc_proof = None
        with self.assertRaises(ProofRejected):
            self.verifier().verify(proof, self.nonce)

    def test_check_non_revocation_structure_x(self):
        engine = VerificationEquationEngine()
        source = self.proof.proofs[0].non_revoc_proof

        def mangled(x_update=None, c_update=None, x_drop=None):
            x_list = dict(source.x_list)
            c_list = dict(source.c_list)
            x_list.update(x_update or {})
            c_list.update(c_update or {})
            if x_drop:
                del x_list[x_drop]
            return NonRevocProof(x_list=x_list, c_list=c_list)

        e_x, e_y = source.c_list["e"].split(" ")
        for proof in (
            mangled(x_update={"rho": str(GROUP_ORDER)}),
            mangled(x_update={"extra": "1"}),
            mangled(x_drop="c"),
            mangled(c_update={"e": f"{e_x} {int(e_y, 16) ^ 1:X}"}),
            mangled(c_update={"w": source.c_list["e"]}),
            None,
        ):
            with self.assertRaises(InvalidStructure):
                engine.check_non_revocation_structure(proof)

        parsed = engine.check_non_revocation_structure(source)
        assert set(parsed.x_list) == set(source.x_list)
        assert len(engine.non_revocation_c_list(source)) == 7
