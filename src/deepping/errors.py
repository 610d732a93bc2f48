"""Error taxonomy for the report core."""
from typing import Optional


class DeepPingError(Exception):
    """Base exception for the deep ping report core."""


class DecodeError(DeepPingError):
    """
    Raised when a status document is not well-formed or a required field
    cannot be parsed. The underlying failure is chained as ``__cause__``.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class RenderError(DeepPingError):
    """Raised when the structured dump cannot be serialized."""
