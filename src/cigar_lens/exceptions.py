"""Custom exceptions for cigar-lens."""

from typing import Any


class CigarLensError(Exception):
    """Base exception for cigar-lens."""

    pass


class AuthenticationError(CigarLensError):
    """Raised when API key is invalid or missing."""

    pass


class RateLimitError(CigarLensError):
    """Raised when API rate limit is exceeded."""

    pass


class ProviderError(CigarLensError):
    """Raised when the inference API fails for a transient reason."""

    pass


class ImageError(CigarLensError):
    """Raised when a screenshot cannot be read or is invalid."""

    pass


class ConfigurationError(CigarLensError):
    """Raised when configuration or vocabulary data is invalid."""

    pass


class MalformedPayload(CigarLensError):
    """Raised when the provider response is not a JSON object."""

    pass


class SchemaViolation(CigarLensError):
    """Raised when a payload does not match the extraction schema.

    Attributes:
        path: Dotted path of the first offending field, e.g.
            ``products[0].specifications.strength``.
        message: Reason the field was rejected.
        errors: Every error reported by the validator.
    """

    def __init__(self, path: str, message: str, errors: list[dict[str, Any]] | None = None):
        self.path = path
        self.message = message
        self.errors = errors or []
        super().__init__(f"{path or '<root>'}: {message}")
