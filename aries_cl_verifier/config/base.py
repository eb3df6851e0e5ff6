"""Configuration base classes."""

from abc import abstractmethod
from typing import Any, Iterator, Mapping, Optional

from ..core.error import BaseError

FALSE_STRINGS = ("false", "False", "0", "")


class SettingsError(BaseError):
    """The base exception raised by `BaseSettings` implementations."""


class BaseSettings(Mapping[str, Any]):
    """Read-only view of dotted configuration keys, such as `verifier.trace`."""

    @abstractmethod
    def get_value(self, *var_names, default: Optional[Any] = None) -> Any:
        """Fetch the first defined setting among `var_names`, else `default`."""

    def get_bool(self, *var_names, default: Optional[bool] = None) -> Optional[bool]:
        """
        Fetch a setting as a boolean value.

        Strings from the environment read as false when they spell `false`
        or `0`, or are empty; anything else uses Python truthiness.
        """
        value = self.get_value(*var_names, default=default)
        if value is None:
            return None
        if isinstance(value, str):
            return value.strip() not in FALSE_STRINGS
        return bool(value)

    @abstractmethod
    def __iter__(self) -> Iterator:
        """Iterate settings keys."""

    def __getitem__(self, index):
        """Fetch as an array index."""
        if not isinstance(index, str):
            raise TypeError(f"Index {index} must be a string")
        missing = object()
        result = self.get_value(index, default=missing)
        if result is missing:
            raise KeyError(f"Undefined index: {index}")
        return result

    @abstractmethod
    def __len__(self):
        """Fetch the length of the mapping."""

    def __repr__(self) -> str:
        """Provide a human readable representation of this object."""
        items = ", ".join(f"{k}={self[k]!r}" for k in self)
        return f"<{self.__class__.__name__}({items})>"
