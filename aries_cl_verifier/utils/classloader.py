"""Resolve classes named by dotted path, as model and schema metadata name them."""

from importlib import import_module
from typing import Optional

from ..core.error import BaseError


class ClassNotFoundError(BaseError):
    """Class not found error."""

    default_error_code = "ClassNotFound"


class ClassLoader:
    """Class used to load classes from modules dynamically."""

    @classmethod
    def load_class(cls, class_name: str, default_module: Optional[str] = None) -> type:
        """
        Resolve a class path (ie. `package.module.Class`) to the class itself.

        Args:
            class_name: dotted class path, or a bare name
            default_module: module holding a bare class name

        Raises:
            ClassNotFoundError: If the module or class is absent, or the name
                is bound to something other than a class

        """
        if "." in class_name:
            mod_path, class_name = class_name.rsplit(".", 1)
        elif default_module:
            mod_path = default_module
        else:
            raise ClassNotFoundError(
                f"Cannot resolve class name with no default module: {class_name}"
            )

        try:
            mod = import_module(mod_path)
        except ModuleNotFoundError as err:
            if err.name and mod_path.startswith(err.name):
                raise ClassNotFoundError(f"Module '{mod_path}' not found") from err
            raise

        resolved = getattr(mod, class_name, None)
        if resolved is None:
            raise ClassNotFoundError(
                f"Class '{class_name}' not defined in module: {mod_path}"
            )
        if not isinstance(resolved, type):
            raise ClassNotFoundError(
                f"Resolved value is not a class: {mod_path}.{class_name}"
            )
        return resolved
