"""Errors raised by the probe driver."""
from deepping.model import PingResponse


class ProbeError(Exception):
    """Base exception for the probe driver."""


class FetchError(ProbeError):
    """Raised when the deep ping document cannot be fetched."""


class BodyReadError(FetchError):
    """Raised when the response arrived but its body could not be read."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class ProbeOutcomeError(ProbeError):
    """
    Carries the partially built response out of a scrape when the fetch or
    decode step fails, so the timing and the error can still be reported.
    """

    def __init__(self, response: PingResponse, cause: Exception):
        super().__init__(str(cause))
        self.response = response
        self.cause = cause
