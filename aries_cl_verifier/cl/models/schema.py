"""Credential schema: the attribute names an issuer key signs over."""

import logging
from typing import Sequence

from marshmallow import EXCLUDE, ValidationError, fields, validates

from ...core.error import InvalidStructure
from ...messaging.models.base import BaseModel, BaseModelSchema
from ...messaging.util import canon
from ..constants import MASTER_SECRET

LOGGER = logging.getLogger(__name__)


def _canon_attrs(attrs: Sequence[str]) -> list:
    result = []
    for attr in attrs or ():
        if not isinstance(attr, str) or not canon(attr):
            raise InvalidStructure(
                f"Attribute name must be a non-empty string: {attr!r}"
            )
        name = canon(attr)
        if name not in result:
            result.append(name)
    return result


class CredentialSchema(BaseModel):
    """Ordered, duplicate-free attribute names of a credential."""

    class Meta:
        """Credential schema metadata."""

        schema_class = "CredentialSchemaSchema"

    def __init__(self, attrs: Sequence[str] = None, **kwargs):
        """Initialize credential schema."""
        super().__init__(**kwargs)
        self.attrs = _canon_attrs(attrs)

    def __contains__(self, attr_name: str) -> bool:
        """Check membership of a (canonicalized) attribute name."""
        return canon(attr_name) in self.attrs

    def __iter__(self):
        """Iterate attribute names in order."""
        return iter(self.attrs)

    def __len__(self):
        """Count attributes."""
        return len(self.attrs)

    def __eq__(self, other) -> bool:
        """Compare by attribute names."""
        if type(other) is not type(self):
            return NotImplemented
        return self.attrs == other.attrs


class CredentialSchemaSchema(BaseModelSchema):
    """Credential schema schema."""

    class Meta:
        """Credential schema schema metadata."""

        model_class = CredentialSchema
        unknown = EXCLUDE

    attrs = fields.List(
        fields.Str(metadata={"example": "age"}),
        required=True,
        metadata={"description": "Attribute names"},
    )

    @validates("attrs")
    def validate_attrs(self, value, **kwargs):
        """Reject blank attribute names."""
        if any(not canon(attr) for attr in value):
            raise ValidationError("Attribute names must be non-empty")


class NonCredentialSchema(CredentialSchema):
    """Attributes always hidden and never part of a credential schema."""

    class Meta:
        """Non-credential schema metadata."""

        schema_class = "NonCredentialSchemaSchema"

    def __init__(self, attrs: Sequence[str] = None, **kwargs):
        """Initialize non-credential schema, defaulting to the master secret."""
        super().__init__(attrs=[MASTER_SECRET] if attrs is None else attrs, **kwargs)


class NonCredentialSchemaSchema(CredentialSchemaSchema):
    """Non-credential schema schema."""

    class Meta:
        """Non-credential schema schema metadata."""

        model_class = NonCredentialSchema
        unknown = EXCLUDE


class CredentialSchemaBuilder:
    """Accumulate attribute names into a credential schema."""

    schema_class = CredentialSchema

    def __init__(self):
        """Initialize an empty builder."""
        self._attrs = []

    def add_attr(self, attr: str) -> "CredentialSchemaBuilder":
        """Add an attribute name; duplicates are ignored."""
        for name in _canon_attrs([attr]):
            if name not in self._attrs:
                self._attrs.append(name)
        return self

    def finalize(self) -> CredentialSchema:
        """
        Build the schema.

        Raises:
            InvalidStructure: if no attribute was added

        """
        if not self._attrs:
            raise InvalidStructure(f"{self.schema_class.__name__} has no attributes")
        LOGGER.debug("Built %s over %s", self.schema_class.__name__, self._attrs)
        return self.schema_class(attrs=self._attrs)


class NonCredentialSchemaBuilder(CredentialSchemaBuilder):
    """Accumulate attribute names into a non-credential schema."""

    schema_class = NonCredentialSchema
