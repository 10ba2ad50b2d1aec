"""Base provider interface."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from cigar_lens.content import PageContent
from cigar_lens.exceptions import ProviderError, RateLimitError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (RateLimitError, ProviderError)


class BaseProvider(ABC):
    """Abstract base class for LLM providers.

    Providers return the raw response text. Parsing, normalization and
    validation happen in `cigar_lens.core` so every provider is held to the
    same contract.
    """

    name = "base"

    def __init__(
        self,
        *,
        retries: int = 3,
        retry_min_timeout: float = 1.0,
        retry_factor: float = 2.0,
    ):
        self.retries = retries
        self.retry_min_timeout = retry_min_timeout
        self.retry_factor = retry_factor
        self.model = ""
        self._attempts = 0

    @abstractmethod
    def _generate(
        self,
        page: PageContent,
        *,
        schema: dict[str, Any],
        system_prompt: str,
        with_image: bool,
    ) -> str:
        """Run a single inference request and return the response text."""
        pass

    def generate(
        self,
        page: PageContent,
        *,
        schema: dict[str, Any],
        system_prompt: str,
        with_image: bool = True,
    ) -> str:
        """Send page content and schema to the model.

        Rate limits and transient API failures are retried with exponential
        backoff. Other errors propagate immediately.

        Raises:
            RateLimitError: If rate limiting persists after all retries.
            ProviderError: If the API keeps failing after all retries.
            AuthenticationError: If the API key is rejected.
            MalformedPayload: If the model returns no content.
        """
        for attempt in range(self.retries + 1):
            self._attempts = attempt + 1
            try:
                return self._generate(
                    page,
                    schema=schema,
                    system_prompt=system_prompt,
                    with_image=with_image,
                )
            except RETRYABLE_ERRORS as e:
                if attempt >= self.retries:
                    raise
                delay = self.retry_min_timeout * (self.retry_factor**attempt)
                logger.warning(
                    "%s request failed on attempt %d/%d: %s. Retrying in %.1fs",
                    self.name,
                    attempt + 1,
                    self.retries + 1,
                    e,
                    delay,
                )
                time.sleep(delay)
        raise ProviderError(f"{self.name} request failed")

    def get_extraction_metadata(self) -> dict[str, str]:
        """Return provider-specific extraction metadata."""
        return {"provider": self.name, "model": self.model, "attempts": str(self._attempts)}
