"""What a verifier asks of one credential: revealed attributes and predicates."""

import logging
from typing import Iterable, Sequence, Tuple, Union

from marshmallow import EXCLUDE, fields, validate

from ..core.error import InvalidStructure
from ..messaging.models.base import BaseModel, BaseModelSchema
from ..messaging.util import canon
from .models.schema import CredentialSchema, NonCredentialSchema
from .predicate import Predicate

LOGGER = logging.getLogger(__name__)


def _predicate(p_type: Union[str, Predicate]) -> Predicate:
    if isinstance(p_type, Predicate):
        return p_type
    pred = Predicate.get(p_type) if isinstance(p_type, str) else None
    if not pred:
        raise InvalidStructure(f"Unknown predicate type: {p_type!r}")
    return pred


def _threshold(value) -> int:
    if isinstance(value, bool):
        raise InvalidStructure("Predicate threshold must be an integer")
    try:
        return Predicate.to_int(value)
    except ValueError as err:
        raise InvalidStructure(
            f"Predicate threshold {value!r} is not an integer"
        ) from err


class PredicateSpec(BaseModel):
    """A predicate over one attribute: attr `p_type` value."""

    class Meta:
        """Predicate spec metadata."""

        schema_class = "PredicateSpecSchema"

    def __init__(
        self,
        attr_name: str = None,
        p_type: Union[str, Predicate] = None,
        value: int = None,
        **kwargs,
    ):
        """
        Initialize predicate spec.

        Raises:
            InvalidStructure: for a blank attribute name, unknown predicate
                type or non-integer threshold

        """
        super().__init__(**kwargs)
        if not isinstance(attr_name, str) or not canon(attr_name):
            raise InvalidStructure("Predicate attribute name must be non-empty")
        object.__setattr__(self, "_attr_name", canon(attr_name))
        object.__setattr__(self, "_predicate", _predicate(p_type))
        object.__setattr__(self, "_value", _threshold(value))

    @property
    def attr_name(self) -> str:
        """Canonical attribute name."""
        return self._attr_name

    @property
    def predicate(self) -> Predicate:
        """Predicate enum member."""
        return self._predicate

    @property
    def p_type(self) -> str:
        """Predicate type by its fortran name."""
        return self._predicate.fortran

    @property
    def value(self) -> int:
        """Threshold."""
        return self._value

    def key(self) -> Tuple[str, str, int]:
        """Identity of the predicate."""
        return (self._attr_name, self.p_type, self._value)

    def __setattr__(self, name, value):
        """Predicate specs are immutable."""
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other) -> bool:
        """Compare by attribute, type and threshold."""
        if not isinstance(other, PredicateSpec):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        """Hash by attribute, type and threshold."""
        return hash(self.key())

    def __repr__(self) -> str:
        """Return a human readable representation of this predicate."""
        return f"<PredicateSpec({self._attr_name} {self.p_type} {self._value})>"


class PredicateSpecSchema(BaseModelSchema):
    """Predicate spec schema."""

    class Meta:
        """Predicate spec schema metadata."""

        model_class = PredicateSpec
        unknown = EXCLUDE

    attr_name = fields.Str(
        required=True, metadata={"description": "Attribute name", "example": "age"}
    )
    p_type = fields.Str(
        required=True,
        validate=validate.OneOf([p.fortran for p in Predicate]),
        metadata={"description": "Predicate type", "example": "GE"},
    )
    value = fields.Integer(
        required=True,
        strict=True,
        metadata={"description": "Threshold", "example": 18},
    )


class SubProofRequest(BaseModel):
    """Revealed attributes and predicates requested of one credential."""

    class Meta:
        """Sub-proof request metadata."""

        schema_class = "SubProofRequestSchema"

    def __init__(
        self,
        revealed_attrs: Iterable[str] = None,
        predicates: Iterable[PredicateSpec] = None,
        **kwargs,
    ):
        """Initialize sub-proof request."""
        super().__init__(**kwargs)
        revealed = set()
        for attr in revealed_attrs or ():
            if not isinstance(attr, str) or not canon(attr):
                raise InvalidStructure("Revealed attribute name must be non-empty")
            revealed.add(canon(attr))
        preds = []
        for pred in predicates or ():
            if not isinstance(pred, PredicateSpec):
                raise InvalidStructure(f"Not a predicate spec: {pred!r}")
            if pred not in preds:
                preds.append(pred)
        object.__setattr__(self, "_revealed_attrs", tuple(sorted(revealed)))
        object.__setattr__(self, "_predicates", tuple(preds))

    @property
    def revealed_attrs(self) -> Tuple[str, ...]:
        """Revealed attribute names, sorted."""
        return self._revealed_attrs

    @property
    def predicates(self) -> Tuple[PredicateSpec, ...]:
        """Predicates in the order added."""
        return self._predicates

    def validate_against(
        self,
        credential_schema: CredentialSchema,
        non_credential_schema: NonCredentialSchema = None,
    ):
        """
        Check the request makes sense for a credential schema.

        Raises:
            InvalidStructure: if a revealed or predicate attribute is absent
                from the schema or is a non-credential attribute, or if a
                predicate attribute is also revealed

        """
        non_schema = (
            non_credential_schema
            if non_credential_schema is not None
            else NonCredentialSchema()
        )
        for attr in self._revealed_attrs:
            if attr in non_schema:
                raise InvalidStructure(f"Cannot reveal non-credential attribute {attr}")
            if attr not in credential_schema:
                raise InvalidStructure(f"Revealed attribute {attr} not in schema")
        for pred in self._predicates:
            if pred.attr_name in non_schema:
                raise InvalidStructure(
                    f"Predicate on non-credential attribute {pred.attr_name}"
                )
            if pred.attr_name not in credential_schema:
                raise InvalidStructure(
                    f"Predicate attribute {pred.attr_name} not in schema"
                )
            if pred.attr_name in self._revealed_attrs:
                raise InvalidStructure(
                    f"Predicate attribute {pred.attr_name} is also revealed"
                )

    def __setattr__(self, name, value):
        """Sub-proof requests are immutable."""
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other) -> bool:
        """Compare revealed attributes and predicates."""
        if not isinstance(other, SubProofRequest):
            return NotImplemented
        return (
            self._revealed_attrs == other._revealed_attrs
            and set(self._predicates) == set(other._predicates)
        )

    __hash__ = None


class SubProofRequestSchema(BaseModelSchema):
    """Sub-proof request schema."""

    class Meta:
        """Sub-proof request schema metadata."""

        model_class = SubProofRequest
        unknown = EXCLUDE

    revealed_attrs = fields.List(
        fields.Str(metadata={"example": "name"}),
        metadata={"description": "Revealed attribute names"},
    )
    predicates = fields.Nested(
        PredicateSpecSchema,
        many=True,
        metadata={"description": "Predicates"},
    )


class SubProofRequestBuilder:
    """Accumulate revealed attributes and predicates into a sub-proof request."""

    def __init__(self):
        """Initialize an empty builder."""
        self._revealed_attrs = []
        self._predicates = []

    def add_revealed_attr(self, attr: str) -> "SubProofRequestBuilder":
        """Request disclosure of an attribute."""
        if not isinstance(attr, str) or not canon(attr):
            raise InvalidStructure("Revealed attribute name must be non-empty")
        self._revealed_attrs.append(canon(attr))
        return self

    def add_predicate(
        self, attr_name: str, p_type: Union[str, Predicate], value: int
    ) -> "SubProofRequestBuilder":
        """
        Request a range proof over an attribute.

        Raises:
            InvalidStructure: for an unknown predicate type or non-integer threshold

        """
        self._predicates.append(PredicateSpec(attr_name, p_type, value))
        return self

    def finalize(self) -> SubProofRequest:
        """Build the immutable request."""
        request = SubProofRequest(
            revealed_attrs=self._revealed_attrs, predicates=self._predicates
        )
        LOGGER.debug(
            "Built sub-proof request revealing %s with %d predicate(s)",
            request.revealed_attrs,
            len(request.predicates),
        )
        return request


def predicate_keys(predicates: Sequence[PredicateSpec]) -> set:
    """Identities of a collection of predicates, for set comparison."""
    return {pred.key() for pred in predicates}
