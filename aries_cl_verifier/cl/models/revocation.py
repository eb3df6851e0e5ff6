"""Revocation artifacts."""

from marshmallow import EXCLUDE, fields

from ...messaging.models.base import BaseModel, BaseModelSchema
from ...messaging.valid import (
    G2_POINT_EXAMPLE,
    G2_POINT_VALIDATE,
    GT_ELEMENT_EXAMPLE,
    GT_ELEMENT_VALIDATE,
)
from .. import pairing


class RevocationKeyPublic(BaseModel):
    """Revocation registry public key."""

    class Meta:
        """Revocation registry public key metadata."""

        schema_class = "RevocationKeyPublicSchema"

    def __init__(self, z: str = None, **kwargs):
        """Initialize."""
        super().__init__(**kwargs)
        self.z = z

    def value(self):
        """Decode `z`, the pairing of the generators raised to gamma^(L+1)."""
        return pairing.decode_gt(self.z, "z")


class RevocationKeyPublicSchema(BaseModelSchema):
    """Revocation registry public key schema."""

    class Meta:
        """Schema metadata."""

        model_class = RevocationKeyPublic
        unknown = EXCLUDE

    z = fields.Str(
        required=True,
        validate=GT_ELEMENT_VALIDATE,
        metadata={"description": "Value for z", "example": GT_ELEMENT_EXAMPLE},
    )


class RevocationRegistry(BaseModel):
    """Revocation registry: the current accumulator value."""

    class Meta:
        """Model metadata."""

        schema_class = "RevocationRegistrySchema"

    def __init__(self, accum: str = None, **kwargs):
        """Initialize."""
        super().__init__(**kwargs)
        self.accum = accum

    def value(self):
        """Decode the accumulator."""
        return pairing.decode_g2(self.accum, "accum")


class RevocationRegistrySchema(BaseModelSchema):
    """Revocation registry schema."""

    class Meta:
        """Schema metadata."""

        model_class = RevocationRegistry
        unknown = EXCLUDE

    accum = fields.Str(
        required=True,
        validate=G2_POINT_VALIDATE,
        metadata={"description": "Accumulator value", "example": G2_POINT_EXAMPLE},
    )
