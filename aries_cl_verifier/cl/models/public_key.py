"""Issuer public keys: the primary (RSA-type) key and the BN254 revocation key."""

from collections import namedtuple
from typing import Mapping

from marshmallow import EXCLUDE, fields

from ...core.error import InvalidStructure
from ...messaging.models.base import BaseModel, BaseModelSchema
from ...messaging.util import canon
from ...messaging.valid import (
    G1_POINT_EXAMPLE,
    G1_POINT_VALIDATE,
    G2_POINT_EXAMPLE,
    G2_POINT_VALIDATE,
    NUM_STR_WHOLE_EXAMPLE,
    NUM_STR_WHOLE_VALIDATE,
)
from .. import pairing
from ..util import decimal_int, group_element

PrimaryKeyValues = namedtuple("PrimaryKeyValues", "n s z rctxt r")

RevocationKeyValues = namedtuple(
    "RevocationKeyValues", "g g_dash h h0 h1 h2 htilde h_cap u pk y"
)

REVOCATION_G1_FIELDS = ("g", "h", "h0", "h1", "h2", "htilde", "pk")
REVOCATION_G2_FIELDS = ("g_dash", "h_cap", "u", "y")


class CredentialPrimaryPublicKey(BaseModel):
    """Issuer primary public key over an RSA modulus."""

    class Meta:
        """Primary public key metadata."""

        schema_class = "CredentialPrimaryPublicKeySchema"
        repr_exclude = ["n"]

    def __init__(
        self,
        n: str = None,
        s: str = None,
        r: Mapping[str, str] = None,
        rctxt: str = None,
        z: str = None,
        **kwargs,
    ):
        """Initialize primary public key."""
        super().__init__(**kwargs)
        self.n = n
        self.s = s
        self.r = r
        self.rctxt = rctxt
        self.z = z

    def values(self) -> PrimaryKeyValues:
        """
        Parse the key into integers.

        Returns:
            PrimaryKeyValues with `r` mapping canonical attribute names to bases

        Raises:
            InvalidStructure: for malformed numbers or bases outside `[1, n)`

        """
        n = decimal_int(self.n, "n")
        if n < 3:
            raise InvalidStructure("Modulus n is too small")
        if not isinstance(self.r, Mapping):
            raise InvalidStructure("Primary public key has no attribute bases")
        return PrimaryKeyValues(
            n=n,
            s=group_element(self.s, "S", n),
            z=group_element(self.z, "Z", n),
            rctxt=group_element(self.rctxt, "Rctxt", n),
            r={
                canon(attr): group_element(base, f"R[{attr}]", n)
                for attr, base in self.r.items()
            },
        )


class CredentialPrimaryPublicKeySchema(BaseModelSchema):
    """Primary public key schema."""

    class Meta:
        """Primary public key schema metadata."""

        model_class = CredentialPrimaryPublicKey
        unknown = EXCLUDE

    n = fields.Str(
        required=True,
        validate=NUM_STR_WHOLE_VALIDATE,
        metadata={"example": NUM_STR_WHOLE_EXAMPLE},
    )
    s = fields.Str(
        required=True,
        validate=NUM_STR_WHOLE_VALIDATE,
        metadata={"example": NUM_STR_WHOLE_EXAMPLE},
    )
    r = fields.Dict(
        keys=fields.Str(metadata={"example": "master_secret"}),
        values=fields.Str(
            validate=NUM_STR_WHOLE_VALIDATE, metadata={"example": NUM_STR_WHOLE_EXAMPLE}
        ),
        required=True,
    )
    rctxt = fields.Str(
        required=True,
        validate=NUM_STR_WHOLE_VALIDATE,
        metadata={"example": NUM_STR_WHOLE_EXAMPLE},
    )
    z = fields.Str(
        required=True,
        validate=NUM_STR_WHOLE_VALIDATE,
        metadata={"example": NUM_STR_WHOLE_EXAMPLE},
    )


class CredentialRevocationPublicKey(BaseModel):
    """Issuer revocation public key on BN254."""

    class Meta:
        """Revocation public key metadata."""

        schema_class = "CredentialRevocationPublicKeySchema"

    def __init__(
        self,
        g: str = None,
        g_dash: str = None,
        h: str = None,
        h0: str = None,
        h1: str = None,
        h2: str = None,
        htilde: str = None,
        h_cap: str = None,
        u: str = None,
        pk: str = None,
        y: str = None,
        **kwargs,
    ):
        """Initialize revocation public key."""
        super().__init__(**kwargs)
        self.g = g
        self.g_dash = g_dash
        self.h = h
        self.h0 = h0
        self.h1 = h1
        self.h2 = h2
        self.htilde = htilde
        self.h_cap = h_cap
        self.u = u
        self.pk = pk
        self.y = y

    def values(self) -> RevocationKeyValues:
        """
        Decode every point.

        Raises:
            InvalidStructure: for malformed or off-curve points

        """
        decoded = {}
        for name in REVOCATION_G1_FIELDS:
            decoded[name] = pairing.decode_g1(getattr(self, name), name)
        for name in REVOCATION_G2_FIELDS:
            decoded[name] = pairing.decode_g2(getattr(self, name), name)
        return RevocationKeyValues(**decoded)


class CredentialRevocationPublicKeySchema(BaseModelSchema):
    """Revocation public key schema."""

    class Meta:
        """Revocation public key schema metadata."""

        model_class = CredentialRevocationPublicKey
        unknown = EXCLUDE

    g = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    g_dash = fields.Str(
        required=True,
        validate=G2_POINT_VALIDATE,
        metadata={"example": G2_POINT_EXAMPLE},
    )
    h = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    h0 = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    h1 = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    h2 = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    htilde = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    h_cap = fields.Str(
        required=True,
        validate=G2_POINT_VALIDATE,
        metadata={"example": G2_POINT_EXAMPLE},
    )
    u = fields.Str(
        required=True,
        validate=G2_POINT_VALIDATE,
        metadata={"example": G2_POINT_EXAMPLE},
    )
    pk = fields.Str(
        required=True,
        validate=G1_POINT_VALIDATE,
        metadata={"example": G1_POINT_EXAMPLE},
    )
    y = fields.Str(
        required=True,
        validate=G2_POINT_VALIDATE,
        metadata={"example": G2_POINT_EXAMPLE},
    )


class CredentialPublicKey(BaseModel):
    """Issuer public key: primary part and optional revocation part."""

    class Meta:
        """Credential public key metadata."""

        schema_class = "CredentialPublicKeySchema"

    def __init__(
        self,
        p_key: CredentialPrimaryPublicKey = None,
        r_key: CredentialRevocationPublicKey = None,
        **kwargs,
    ):
        """Initialize credential public key."""
        super().__init__(**kwargs)
        self.p_key = p_key
        self.r_key = r_key


class CredentialPublicKeySchema(BaseModelSchema):
    """Credential public key schema."""

    class Meta:
        """Credential public key schema metadata."""

        model_class = CredentialPublicKey
        unknown = EXCLUDE

    p_key = fields.Nested(
        CredentialPrimaryPublicKeySchema(),
        required=True,
        metadata={"description": "Primary public key"},
    )
    r_key = fields.Nested(
        CredentialRevocationPublicKeySchema(),
        allow_none=True,
        metadata={"description": "Revocation public key"},
    )
