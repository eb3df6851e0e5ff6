"""Common exception classes."""

import re


class BaseError(Exception):
    """Generic exception class which other exceptions should inherit from."""

    default_error_code: str = None

    def __init__(self, *args, error_code: str = None, **kwargs):
        """Initialize a BaseError instance."""
        super().__init__(*args, **kwargs)
        self.error_code = error_code or self.default_error_code

    @property
    def message(self) -> str:
        """Accessor for the error message."""
        return str(self.args[0]).strip() if self.args else ""

    @property
    def roll_up(self) -> str:
        """Messages of this error and its chained causes, on one line."""
        parts = []
        err = self
        while err is not None:
            text = str(err.args[0]).strip() if err.args else type(err).__name__
            parts.append(re.sub(r"\n\s*", ". ", text))
            err = err.__cause__
        return ". ".join(parts) + "."


class ClError(BaseError):
    """Base error for CL proof verification."""


class InvalidStructure(ClError):
    """Malformed or semantically inconsistent input."""

    default_error_code = "InvalidStructure"


class DuplicateKeyId(ClError):
    """Key id already used within one proof verifier."""

    default_error_code = "DuplicateKeyId"


class InvalidState(ClError):
    """Operation invoked outside of its allowed state."""

    default_error_code = "InvalidState"


class ProofRejected(ClError):
    """
    Proof shape does not match the accumulated sub-proof requests.

    Raised for structural mismatches only: a proof that is well formed
    but cryptographically invalid verifies to `False` instead.
    """

    default_error_code = "ProofRejected"
