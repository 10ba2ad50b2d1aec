"""Gemini provider implementation."""

import logging
import os
from typing import Any

from google import genai
from google.genai import errors, types

from cigar_lens.content import PageContent, load_image
from cigar_lens.exceptions import (
    AuthenticationError,
    CigarLensError,
    MalformedPayload,
    ProviderError,
    RateLimitError,
)
from cigar_lens.prompts import build_user_prompt
from cigar_lens.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseProvider):
    """Gemini API provider."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.0-flash",
        *,
        client: Any = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        retries: int = 3,
        retry_min_timeout: float = 1.0,
        retry_factor: float = 2.0,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use.
            client: Pre-built client, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        super().__init__(retries=retries, retry_min_timeout=retry_min_timeout, retry_factor=retry_factor)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    def _generate(
        self,
        page: PageContent,
        *,
        schema: dict[str, Any],
        system_prompt: str,
        with_image: bool,
    ) -> str:
        contents: list[Any] = []
        attach_image = with_image and page.screenshot is not None
        if attach_image:
            contents.append(load_image(page.screenshot))
        contents.append(build_user_prompt(page.text, with_image=attach_image))

        logger.info("calling %s (%s) for %s", self.model, self.name, page.source_url or "<page>")
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    response_mime_type="application/json",
                    response_json_schema=schema,
                    temperature=self.temperature,
                    max_output_tokens=self.max_tokens,
                ),
            )
        except errors.ClientError as e:
            message = str(e).lower()
            if getattr(e, "code", None) == 429 or "rate" in message or "quota" in message:
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if getattr(e, "code", None) in (401, 403) or "auth" in message or "key" in message:
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise CigarLensError(f"Gemini request rejected: {e}") from e
        except errors.ServerError as e:
            raise ProviderError(f"Gemini server error: {e}") from e

        text = response.text
        if not text:
            raise MalformedPayload("No content received from Gemini")
        return text
