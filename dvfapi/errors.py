from __future__ import annotations


class DvfError(Exception):
    """Base class for errors raised by dvfapi."""


class ConfigurationError(DvfError, ValueError):
    """Bad client configuration (base URL, timeout, config file)."""


class ApiError(DvfError):
    """Non-200 response from the API. The body is drained and discarded."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = int(status_code)
        self.reason = reason or ""
        status = f"{self.status_code} {self.reason}".strip()
        super().__init__(f"failed to get data. status: {status}")


class SigningError(DvfError):
    """Private key decoding, signing or signature self-verification failed."""
