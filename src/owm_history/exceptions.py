"""Library exception classes."""


class OWMError(Exception):
    """Base class for every error raised by the history client."""


class ConfigError(OWMError):
    """Raised when configuration or client options are invalid or incomplete."""


class DataUnitError(OWMError):
    """Raised when a unit-system token is not one of the recognized tokens."""


class InvalidInputError(OWMError):
    """Raised when query input is rejected before any request is made."""


class HistoryRequestError(OWMError):
    """Raised for history request failures with category/status metadata."""

    def __init__(
        self,
        message: str,
        *,
        category: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status_code = status_code


class HistoryDecodeError(OWMError):
    """Raised when a history response body cannot be decoded into typed models."""
