"""Base classes for the marshmallow-backed models of keys, requests and proofs."""

import json
import logging
from abc import ABC
from typing import Optional, Type, TypeVar, Union

from marshmallow import EXCLUDE, Schema, ValidationError, post_dump, post_load

from ...core.error import InvalidStructure
from ...utils.classloader import ClassLoader

LOGGER = logging.getLogger(__name__)


def resolve_class(the_cls: Union[type, str], relative_cls: type) -> type:
    """
    Resolve a class given directly or by name.

    A bare name resolves in the module defining `relative_cls`, which lets a
    model name its schema before the schema class exists.

    Raises:
        ClassNotFoundError: If the class could not be loaded

    """
    if isinstance(the_cls, type):
        return the_cls
    if isinstance(the_cls, str):
        return ClassLoader.load_class(the_cls, relative_cls.__module__)
    raise TypeError(f"Cannot resolve class from {the_cls!r}")


def resolve_meta_property(obj, prop_name: str, defval=None):
    """
    Look up a `Meta` attribute along the first-base chain of a class.

    Args:
        obj: class or instance whose `Meta` classes to search
        prop_name: the `Meta` attribute
        defval: value when no `Meta` on the chain defines it

    """
    cls = obj if isinstance(obj, type) else obj.__class__
    while cls and cls is not object:
        meta = getattr(cls, "Meta", None)
        if meta and hasattr(meta, prop_name):
            return getattr(meta, prop_name)
        cls = cls.__bases__[0]
    return defval


class BaseModelError(InvalidStructure):
    """Model (de)serialization failed: the input is structurally invalid."""


ModelType = TypeVar("ModelType", bound="BaseModel")


class BaseModel(ABC):
    """Wire model bound to a marshmallow schema through `Meta.schema_class`."""

    class Meta:
        """BaseModel meta data."""

        schema_class = None

    def __init__(self):
        """
        Initialize BaseModel.

        Raises:
            TypeError: If schema_class is not set on Meta

        """
        if not self.Meta.schema_class:
            raise TypeError(
                f"Can't instantiate abstract class {self.__class__.__name__} "
                "with no schema_class"
            )

    @classmethod
    def _get_schema_class(cls) -> Type["BaseModelSchema"]:
        resolved = resolve_class(cls.Meta.schema_class, cls)
        if not issubclass(resolved, BaseModelSchema):
            raise TypeError(f"Not a BaseModelSchema subclass: {resolved}")
        return resolved

    @classmethod
    def _schema(cls, unknown: Optional[str] = None) -> "BaseModelSchema":
        schema_cls = cls._get_schema_class()
        return schema_cls(
            unknown=unknown or resolve_meta_property(schema_cls, "unknown", EXCLUDE)
        )

    @classmethod
    def deserialize(
        cls: Type[ModelType], obj, *, unknown: Optional[str] = None
    ) -> ModelType:
        """
        Load a model instance from its dict (or JSON string) form.

        Args:
            obj: the dict or JSON string to load
            unknown: marshmallow behaviour for unknown keys, `EXCLUDE` by default

        Raises:
            BaseModelError: If the data does not match the schema

        """
        schema = cls._schema(unknown)
        try:
            return schema.loads(obj) if isinstance(obj, str) else schema.load(obj)
        except (AttributeError, TypeError, ValueError, ValidationError) as err:
            LOGGER.debug("%s validation error: %s", cls.__name__, err)
            raise BaseModelError(f"{cls.__name__} schema validation failed") from err

    def serialize(
        self, *, as_string: bool = False, unknown: Optional[str] = None
    ) -> Union[str, dict]:
        """
        Dump the model to its dict form, or compact JSON if `as_string`.

        Raises:
            BaseModelError: If an attribute cannot be dumped

        """
        schema = self._schema(unknown)
        try:
            if as_string:
                return schema.dumps(self, separators=(",", ":"))
            return schema.dump(self)
        except (AttributeError, ValidationError) as err:
            LOGGER.exception("%s serialization error:", self.__class__.__name__)
            raise BaseModelError(
                f"{self.__class__.__name__} schema validation failed"
            ) from err

    @classmethod
    def from_json(cls: Type[ModelType], json_repr: Union[str, bytes]) -> ModelType:
        """
        Parse a JSON document into a model instance.

        Raises:
            BaseModelError: for malformed JSON or a schema mismatch

        """
        try:
            parsed = json.loads(json_repr)
        except (TypeError, ValueError) as err:
            LOGGER.debug("%s parse error: %s", cls.__name__, err)
            raise BaseModelError(f"{cls.__name__} JSON parsing failed") from err
        return cls.deserialize(parsed)

    def to_json(self) -> str:
        """Dump the model as a JSON document."""
        return json.dumps(self.serialize())

    def __repr__(self) -> str:
        """Render public state, less any `Meta.repr_exclude` attributes."""
        exclude = resolve_meta_property(self, "repr_exclude", [])
        items = ", ".join(
            f"{k}={v!r}" for k, v in self.__dict__.items() if k not in exclude
        )
        return f"<{self.__class__.__name__}({items})>"


class BaseModelSchema(Schema):
    """Schema loading into, and dumping from, a `BaseModel`."""

    class Meta:
        """BaseModelSchema metadata."""

        model_class = None
        skip_values = [None]

    def __init__(self, *args, **kwargs):
        """
        Initialize BaseModelSchema.

        Raises:
            TypeError: If model_class is not set on Meta

        """
        super().__init__(*args, **kwargs)
        if not self.Meta.model_class:
            raise TypeError(
                f"Can't instantiate abstract class {self.__class__.__name__} "
                "with no model_class"
            )

    @post_load
    def make_model(self, data: dict, **kwargs):
        """Build the model instance from loaded fields."""
        return resolve_class(self.Meta.model_class, self.__class__)(**data)

    @post_dump
    def remove_skipped_values(self, data, **kwargs):
        """Drop fields whose value is one of `Meta.skip_values` (None by default)."""
        skip_vals = resolve_meta_property(self, "skip_values", [])
        return {key: value for key, value in data.items() if value not in skip_vals}
