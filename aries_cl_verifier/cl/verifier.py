"""Proof verifier: accumulate sub-proof requests, then verify one proof."""

import logging
from collections import OrderedDict, namedtuple
from enum import Enum
from typing import Mapping, Union

from ..config.settings import verifier_settings
from ..core.error import (
    DuplicateKeyId,
    InvalidState,
    InvalidStructure,
    ProofRejected,
)
from ..messaging.util import canon
from .equations import VerificationEquationEngine, parse_predicate
from .models.proof import Proof, SubProof
from .models.public_key import CredentialPublicKey
from .models.revocation import RevocationKeyPublic, RevocationRegistry
from .models.schema import CredentialSchema, NonCredentialSchema
from .nonce import Nonce
from .sub_proof_request import SubProofRequest, predicate_keys
from .transcript import ChallengeTranscriptBuilder
from .util import decimal_int

LOGGER = logging.getLogger(__name__)


class VerifierState(Enum):
    """Lifecycle of a proof verifier."""

    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    VERIFIED = "verified"


SubProofItem = namedtuple(
    "SubProofItem",
    (
        "sub_proof_request credential_schema non_credential_schema "
        "credential_pub_key p_key_values rev_key_pub rev_reg"
    ),
)


class ProofVerifier:
    """
    Verifier of one proof over one or more credentials.

    Sub-proof requests are added in the order the prover built its
    sub-proofs; that order is bound into the challenge. A verifier is
    single use: `verify` may be called once.
    """

    def __init__(
        self,
        settings: Mapping[str, object] = None,
        logger: logging.Logger = None,
    ):
        """
        Initialize an empty verifier.

        Args:
            settings: overrides for the `verifier.*` settings
            logger: logger to use instead of the module logger

        """
        self._settings = verifier_settings(settings)
        self._logger = logger or LOGGER
        self._engine = VerificationEquationEngine()
        self._items = OrderedDict()
        self._state = VerifierState.EMPTY

    @property
    def state(self) -> VerifierState:
        """Accessor for the lifecycle state."""
        return self._state

    @property
    def key_ids(self) -> tuple:
        """Key ids in insertion order."""
        return tuple(self._items)

    def add_sub_proof_request(
        self,
        key_id: str,
        sub_proof_request: SubProofRequest,
        credential_schema: CredentialSchema,
        credential_pub_key: CredentialPublicKey,
        rev_key_pub: RevocationKeyPublic = None,
        rev_reg: RevocationRegistry = None,
        non_credential_schema: NonCredentialSchema = None,
    ):
        """
        Append the request for one credential.

        Args:
            key_id: caller's identifier for the credential, unique per verifier
            sub_proof_request: revealed attributes and predicates requested
            credential_schema: attribute names of the credential
            credential_pub_key: issuer public key
            rev_key_pub: revocation registry public key, with `rev_reg`
            rev_reg: revocation registry, with `rev_key_pub`
            non_credential_schema: always-hidden attributes (the master secret
                by default)

        Raises:
            InvalidState: after `verify` was called
            DuplicateKeyId: if `key_id` was already added
            InvalidStructure: if the request does not fit the schema or the
                key material is incomplete

        """
        if self._state is VerifierState.VERIFIED:
            raise InvalidState("Cannot add sub-proof requests after verification")
        if not isinstance(key_id, str) or not key_id:
            raise InvalidStructure("Key id must be a non-empty string")
        if key_id in self._items:
            raise DuplicateKeyId(f"Key id {key_id} already added")
        if not isinstance(sub_proof_request, SubProofRequest):
            raise InvalidStructure("Not a sub-proof request")
        if not isinstance(credential_schema, CredentialSchema):
            raise InvalidStructure("Not a credential schema")
        if not isinstance(credential_pub_key, CredentialPublicKey):
            raise InvalidStructure("Not a credential public key")
        if credential_pub_key.p_key is None:
            raise InvalidStructure("Credential public key has no primary key")
        if non_credential_schema is None:
            non_credential_schema = NonCredentialSchema()
        overlap = set(credential_schema) & set(non_credential_schema)
        if overlap:
            raise InvalidStructure(
                f"Attributes {sorted(overlap)} are both credential and non-credential"
            )
        sub_proof_request.validate_against(credential_schema, non_credential_schema)

        if (rev_key_pub is None) != (rev_reg is None):
            raise InvalidStructure(
                "Revocation key and registry must be given together or not at all"
            )
        if rev_reg is not None and credential_pub_key.r_key is None:
            raise InvalidStructure(
                "Revocation material given for a key without revocation support"
            )

        p_key_values = credential_pub_key.p_key.values()
        for attr in list(credential_schema) + list(non_credential_schema):
            if attr not in p_key_values.r:
                raise InvalidStructure(f"Issuer key has no base for attribute {attr}")

        self._items[key_id] = SubProofItem(
            sub_proof_request=sub_proof_request,
            credential_schema=credential_schema,
            non_credential_schema=non_credential_schema,
            credential_pub_key=credential_pub_key,
            p_key_values=p_key_values,
            rev_key_pub=rev_key_pub,
            rev_reg=rev_reg,
        )
        self._state = VerifierState.ACCUMULATING
        self._logger.debug(
            "Added sub-proof request %s (revocation: %s)", key_id, rev_reg is not None
        )

    @staticmethod
    def _load_proof(proof: Union[Proof, Mapping, str, bytes]) -> Proof:
        if isinstance(proof, Proof):
            return proof
        if isinstance(proof, (str, bytes)):
            return Proof.from_json(proof)
        if isinstance(proof, Mapping):
            return Proof.deserialize(proof)
        raise InvalidStructure(f"Cannot interpret {type(proof)} as a proof")

    @staticmethod
    def _hidden_attrs(item: SubProofItem) -> set:
        attrs = set(item.credential_schema) | set(item.non_credential_schema)
        return attrs - set(item.sub_proof_request.revealed_attrs)

    def _check_shape(self, proof: Proof):
        """Match the proof's shape against the accumulated requests."""
        if not isinstance(proof.proofs, (list, tuple)):
            raise InvalidStructure("Proof has no sub-proof list")
        if proof.aggregated_proof is None:
            raise InvalidStructure("Proof has no aggregated proof")
        if len(proof.proofs) != len(self._items):
            raise ProofRejected(
                f"Proof has {len(proof.proofs)} sub-proof(s), "
                f"{len(self._items)} requested"
            )
        for (key_id, item), sub_proof in zip(self._items.items(), proof.proofs):
            if not isinstance(sub_proof, SubProof) or sub_proof.primary_proof is None:
                raise InvalidStructure(f"Sub-proof for {key_id} has no primary proof")
            primary = sub_proof.primary_proof
            if primary.eq_proof is None:
                raise InvalidStructure(f"Sub-proof for {key_id} has no equality proof")

            if (sub_proof.non_revoc_proof is None) != (item.rev_reg is None):
                raise ProofRejected(f"Revocation proof presence mismatch for {key_id}")

            revealed = primary.eq_proof.revealed_attrs
            if not isinstance(revealed, Mapping):
                raise InvalidStructure(f"Sub-proof for {key_id} has no revealed attrs")
            revealed_names = {canon(attr) for attr in revealed}
            if len(revealed_names) != len(revealed):
                raise InvalidStructure(
                    f"Sub-proof for {key_id} repeats a revealed attribute name"
                )
            if revealed_names != set(item.sub_proof_request.revealed_attrs):
                raise ProofRejected(f"Revealed attributes mismatch for {key_id}")

            ge_proofs = primary.ge_proofs or []
            proved = {parse_predicate(ge.predicate) for ge in ge_proofs}
            proved = {(attr, pred.fortran, value) for (attr, pred, value) in proved}
            requested = predicate_keys(item.sub_proof_request.predicates)
            if len(ge_proofs) != len(requested) or proved != requested:
                raise ProofRejected(f"Predicates mismatch for {key_id}")

    def verify(self, proof: Union[Proof, Mapping, str], nonce: Nonce) -> bool:
        """
        Verify a proof against the accumulated requests and a nonce.

        Args:
            proof: the proof, as a model, a dict or JSON
            nonce: the nonce issued for this presentation

        Returns:
            whether the proof is cryptographically valid

        Raises:
            InvalidState: if called twice or before any request was added
            ProofRejected: if the proof's shape does not match the requests
            InvalidStructure: for malformed values in the proof

        """
        if self._state is VerifierState.VERIFIED:
            raise InvalidState("Proof verifier has already been used")
        if self._state is VerifierState.EMPTY:
            raise InvalidState("No sub-proof requests to verify against")
        self._state = VerifierState.VERIFIED

        if not isinstance(nonce, Nonce):
            raise InvalidStructure("Nonce required")
        proof = self._load_proof(proof)
        self._check_shape(proof)
        c_hash = decimal_int(proof.aggregated_proof.c_hash, "c_hash")

        engine = self._engine
        parsed = []
        for item, sub_proof in zip(self._items.values(), proof.proofs):
            primary = engine.check_primary_structure(
                item.p_key_values, sub_proof.primary_proof, self._hidden_attrs(item)
            )
            non_revoc = None
            if sub_proof.non_revoc_proof is not None:
                non_revoc = engine.check_non_revocation_structure(
                    sub_proof.non_revoc_proof
                )
            parsed.append((primary, non_revoc))

        for key_id, sub_proof in zip(self._items, proof.proofs):
            if not engine.check_predicate_links(sub_proof.primary_proof):
                self._logger.info("Proof rejected: broken predicate link in %s", key_id)
                return False

        transcript = ChallengeTranscriptBuilder()
        c_lists = []
        for item, (primary, non_revoc) in zip(self._items.values(), parsed):
            if non_revoc is not None:
                transcript.add_taus(
                    engine.recompute_non_revocation_commitment(
                        item.credential_pub_key.r_key,
                        item.rev_reg,
                        item.rev_key_pub,
                        non_revoc,
                        c_hash,
                    )
                )
                c_lists.extend(engine.non_revocation_c_list(non_revoc))
            transcript.add_taus(
                engine.recompute_primary_commitment(
                    item.p_key_values, primary, self._hidden_attrs(item), c_hash
                )
            )
            c_lists.extend(engine.primary_c_list(item.p_key_values, primary))
        transcript.add_c_list(c_lists)

        if self._settings.get_bool("verifier.trace"):
            for index, value in enumerate(transcript.ordered):
                self._logger.debug(
                    "Transcript entry %d: %s", index, value.to_bytes().hex()
                )

        challenge = transcript.challenge(nonce)
        verified = challenge == c_hash
        if self._settings.get_bool("verifier.trace"):
            self._logger.debug(
                "Rebuilt challenge %d, proof carries %d", challenge, c_hash
            )
        self._logger.info(
            "Proof over %d credential(s) %s",
            len(self._items),
            "verified" if verified else "failed verification",
        )
        return verified
