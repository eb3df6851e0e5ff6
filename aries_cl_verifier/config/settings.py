"""Settings implementation."""

import os
from typing import Mapping

from .base import BaseSettings, SettingsError

# Settings consulted by the proof verifier, with their defaults
VERIFIER_DEFAULTS = {
    "verifier.trace": False,
}

ENV_PREFIX = "CL_VERIFIER_"


class Settings(BaseSettings):
    """Mutable settings implementation."""

    def __init__(self, values: Mapping[str, object] = None):
        """Initialize a Settings object from an optional mapping."""
        self._values = {}
        if values:
            self.update(values)

    def get_value(self, *var_names, default=None):
        """Fetch the first defined setting among `var_names`, else `default`."""
        for k in var_names:
            if k in self._values:
                return self._values[k]
        return default

    def set_value(self, var_name: str, value):
        """
        Add a setting.

        Raises:
            SettingsError: if the name is not a non-empty string

        """
        if not isinstance(var_name, str) or not var_name:
            raise SettingsError(f"Setting name must be a non-empty str: {var_name!r}")
        self._values[var_name] = value

    def update(self, other: Mapping[str, object]):
        """Update the settings in place."""
        for key, value in other.items():
            self.set_value(key, value)

    def __contains__(self, index):
        """Define 'in' operator."""
        return index in self._values

    def __iter__(self):
        """Iterate settings keys."""
        return iter(self._values)

    def __setitem__(self, index, value):
        """Implement update operator for array index."""
        self.set_value(index, value)

    def __len__(self):
        """Fetch the length of the mapping."""
        return len(self._values)


def env_key(key: str) -> str:
    """Environment variable overriding a setting, e.g. CL_VERIFIER_TRACE."""
    return ENV_PREFIX + key.split(".", 1)[1].replace(".", "_").upper()


def verifier_settings(
    values: Mapping[str, object] = None, environ: Mapping[str, str] = None
) -> Settings:
    """
    Assemble the settings for a proof verifier.

    Defaults are overridden by environment variables, which are in turn
    overridden by explicit values.

    Args:
        values: explicit settings
        environ: environment mapping, `os.environ` if not given

    """
    environ = os.environ if environ is None else environ
    settings = Settings(VERIFIER_DEFAULTS)
    for key in VERIFIER_DEFAULTS:
        if env_key(key) in environ:
            settings[key] = environ[env_key(key)]
    if values:
        settings.update(values)
    return settings
