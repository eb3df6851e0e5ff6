"""Marshmallow bindings for CL proofs."""

from typing import Mapping, Sequence

from marshmallow import EXCLUDE, fields, validate

from ...messaging.models.base import BaseModel, BaseModelSchema
from ...messaging.valid import (
    NUM_STR_ANY_EXAMPLE,
    NUM_STR_ANY_VALIDATE,
    NUM_STR_WHOLE_EXAMPLE,
    NUM_STR_WHOLE_VALIDATE,
)
from ..constants import C_LIST_KEYS, X_LIST_KEYS
from ..predicate import Predicate


def _whole(**kwargs) -> fields.Str:
    """Non-negative decimal string field."""
    return fields.Str(
        required=True,
        validate=NUM_STR_WHOLE_VALIDATE,
        metadata={"example": NUM_STR_WHOLE_EXAMPLE, **kwargs},
    )


def _whole_map(key_field: fields.Str = None, **kwargs) -> fields.Dict:
    """Mapping of names to non-negative decimal strings."""
    return fields.Dict(
        keys=key_field or fields.Str(),
        values=fields.Str(
            validate=NUM_STR_WHOLE_VALIDATE, metadata={"example": NUM_STR_WHOLE_EXAMPLE}
        ),
        required=True,
        metadata=kwargs,
    )


class EqProof(BaseModel):
    """Equality proof for primary proof."""

    class Meta:
        """Equality proof metadata."""

        schema_class = "EqProofSchema"

    def __init__(
        self,
        revealed_attrs: Mapping[str, str] = None,
        a_prime: str = None,
        e: str = None,
        v: str = None,
        m: Mapping[str, str] = None,
        m2: str = None,
        **kwargs,
    ):
        """Initialize equality proof object."""
        super().__init__(**kwargs)
        self.revealed_attrs = revealed_attrs
        self.a_prime = a_prime
        self.e = e
        self.v = v
        self.m = m
        self.m2 = m2


class EqProofSchema(BaseModelSchema):
    """Equality proof schema."""

    class Meta:
        """Equality proof schema metadata."""

        model_class = EqProof
        unknown = EXCLUDE

    revealed_attrs = fields.Dict(
        keys=fields.Str(metadata={"example": "name"}),
        values=fields.Str(
            validate=NUM_STR_ANY_VALIDATE, metadata={"example": NUM_STR_ANY_EXAMPLE}
        ),
        required=True,
    )
    a_prime = _whole()
    e = _whole()
    v = _whole()
    m = _whole_map(fields.Str(metadata={"example": "master_secret"}))
    m2 = _whole()


class GEProofPred(BaseModel):
    """Predicate a range proof is made against."""

    class Meta:
        """GE proof predicate metadata."""

        schema_class = "GEProofPredSchema"

    def __init__(
        self,
        attr_name: str = None,
        p_type: str = None,
        value: int = None,
        **kwargs,
    ):
        """Initialize GE proof predicate."""
        super().__init__(**kwargs)
        self.attr_name = attr_name
        self.p_type = p_type
        self.value = value


class GEProofPredSchema(BaseModelSchema):
    """GE proof predicate schema."""

    class Meta:
        """GE proof predicate schema metadata."""

        model_class = GEProofPred
        unknown = EXCLUDE

    attr_name = fields.Str(
        required=True, metadata={"description": "Attribute name, canonicalized"}
    )
    p_type = fields.Str(
        required=True,
        validate=validate.OneOf([p.fortran for p in Predicate]),
        metadata={"description": "Predicate type"},
    )
    value = fields.Integer(
        required=True,
        strict=True,
        metadata={"description": "Predicate threshold value"},
    )


class GEProof(BaseModel):
    """Range proof for primary proof, in any of the four predicate directions."""

    class Meta:
        """GE proof metadata."""

        schema_class = "GEProofSchema"

    def __init__(
        self,
        u: Mapping[str, str] = None,
        r: Mapping[str, str] = None,
        mj: str = None,
        alpha: str = None,
        t: Mapping[str, str] = None,
        predicate: GEProofPred = None,
        **kwargs,
    ):
        """Initialize GE proof object."""
        super().__init__(**kwargs)
        self.u = u
        self.r = r
        self.mj = mj
        self.alpha = alpha
        self.t = t
        self.predicate = predicate


class GEProofSchema(BaseModelSchema):
    """GE proof schema."""

    class Meta:
        """GE proof schema metadata."""

        model_class = GEProof
        unknown = EXCLUDE

    u = _whole_map()
    r = _whole_map()
    mj = _whole()
    alpha = _whole()
    t = _whole_map()
    predicate = fields.Nested(GEProofPredSchema, required=True)


class PrimaryProof(BaseModel):
    """Primary proof: one equality proof and a range proof per predicate."""

    class Meta:
        """Primary proof metadata."""

        schema_class = "PrimaryProofSchema"

    def __init__(
        self,
        eq_proof: EqProof = None,
        ge_proofs: Sequence[GEProof] = None,
        **kwargs,
    ):
        """Initialize primary proof."""
        super().__init__(**kwargs)
        self.eq_proof = eq_proof
        self.ge_proofs = ge_proofs if ge_proofs is not None else []


class PrimaryProofSchema(BaseModelSchema):
    """Primary proof schema."""

    class Meta:
        """Primary proof schema metadata."""

        model_class = PrimaryProof
        unknown = EXCLUDE

    eq_proof = fields.Nested(
        EqProofSchema,
        required=True,
        metadata={"description": "Equality proof"},
    )
    ge_proofs = fields.Nested(
        GEProofSchema,
        many=True,
        metadata={"description": "Range proofs, one per predicate"},
    )


class NonRevocProof(BaseModel):
    """Non-revocation proof against an accumulator."""

    class Meta:
        """Non-revocation proof metadata."""

        schema_class = "NonRevocProofSchema"

    def __init__(
        self,
        x_list: Mapping[str, str] = None,
        c_list: Mapping[str, str] = None,
        **kwargs,
    ):
        """Initialize non-revocation proof."""
        super().__init__(**kwargs)
        self.x_list = x_list
        self.c_list = c_list


class NonRevocProofSchema(BaseModelSchema):
    """Non-revocation proof schema."""

    class Meta:
        """Non-revocation proof schema metadata."""

        model_class = NonRevocProof
        unknown = EXCLUDE

    x_list = _whole_map(
        fields.Str(validate=validate.OneOf(X_LIST_KEYS)), description="Scalar responses"
    )
    c_list = fields.Dict(
        keys=fields.Str(validate=validate.OneOf(C_LIST_KEYS)),
        values=fields.Str(),
        required=True,
        metadata={"description": "Commitments as curve points"},
    )


class SubProof(BaseModel):
    """Proof for one credential."""

    class Meta:
        """Sub-proof metadata."""

        schema_class = "SubProofSchema"

    def __init__(
        self,
        primary_proof: PrimaryProof = None,
        non_revoc_proof: NonRevocProof = None,
        **kwargs,
    ):
        """Initialize sub-proof."""
        super().__init__(**kwargs)
        self.primary_proof = primary_proof
        self.non_revoc_proof = non_revoc_proof


class SubProofSchema(BaseModelSchema):
    """Sub-proof schema."""

    class Meta:
        """Sub-proof schema metadata."""

        model_class = SubProof
        unknown = EXCLUDE

    primary_proof = fields.Nested(
        PrimaryProofSchema,
        required=True,
        metadata={"description": "Primary proof"},
    )
    non_revoc_proof = fields.Nested(
        NonRevocProofSchema,
        allow_none=True,
        metadata={"description": "Non-revocation proof"},
    )


class AggregatedProof(BaseModel):
    """Challenge shared by all sub-proofs."""

    class Meta:
        """Aggregated proof metadata."""

        schema_class = "AggregatedProofSchema"

    def __init__(self, c_hash: str = None, **kwargs):
        """Initialize aggregated proof."""
        super().__init__(**kwargs)
        self.c_hash = c_hash


class AggregatedProofSchema(BaseModelSchema):
    """Aggregated proof schema."""

    class Meta:
        """Aggregated proof schema metadata."""

        model_class = AggregatedProof
        unknown = EXCLUDE

    c_hash = _whole(description="Fiat-Shamir challenge")


class Proof(BaseModel):
    """Ordered sub-proofs bound together by one challenge."""

    class Meta:
        """Proof metadata."""

        schema_class = "ProofSchema"

    def __init__(
        self,
        proofs: Sequence[SubProof] = None,
        aggregated_proof: AggregatedProof = None,
        **kwargs,
    ):
        """Initialize proof."""
        super().__init__(**kwargs)
        self.proofs = proofs if proofs is not None else []
        self.aggregated_proof = aggregated_proof


class ProofSchema(BaseModelSchema):
    """Proof schema."""

    class Meta:
        """Proof schema metadata."""

        model_class = Proof
        unknown = EXCLUDE

    proofs = fields.Nested(
        SubProofSchema,
        many=True,
        required=True,
        metadata={"description": "Sub-proofs, in sub-proof request order"},
    )
    aggregated_proof = fields.Nested(
        AggregatedProofSchema,
        required=True,
        metadata={"description": "Aggregated proof"},
    )
