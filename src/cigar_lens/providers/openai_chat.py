"""OpenAI provider implementation."""

import base64
import logging
import os
from typing import Any

import openai

from cigar_lens.content import PageContent, image_to_png_bytes
from cigar_lens.exceptions import (
    AuthenticationError,
    CigarLensError,
    MalformedPayload,
    ProviderError,
    RateLimitError,
)
from cigar_lens.prompts import build_user_prompt
from cigar_lens.providers.base import BaseProvider
from cigar_lens.schema import openai_response_format

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider using structured outputs."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-2024-08-06",
        *,
        client: Any = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        retries: int = 3,
        retry_min_timeout: float = 1.0,
        retry_factor: float = 2.0,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
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

        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        # Retries are handled by BaseProvider.generate.
        self.client = openai.OpenAI(api_key=self.api_key, max_retries=0)

    def _build_messages(self, page: PageContent, *, system_prompt: str, with_image: bool) -> list[dict]:
        attach_image = with_image and page.screenshot is not None
        user_content: list[dict[str, Any]] = []
        if attach_image:
            encoded = base64.b64encode(image_to_png_bytes(page.screenshot)).decode("ascii")
            user_content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/png;base64,{encoded}", "detail": "high"},
                }
            )
        user_content.append({"type": "text", "text": build_user_prompt(page.text, with_image=attach_image)})
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]

    def _generate(
        self,
        page: PageContent,
        *,
        schema: dict[str, Any],
        system_prompt: str,
        with_image: bool,
    ) -> str:
        messages = self._build_messages(page, system_prompt=system_prompt, with_image=with_image)

        logger.info("calling %s (%s) for %s", self.model, self.name, page.source_url or "<page>")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_completion_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format=openai_response_format(schema),
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"API rate limit exceeded: {e}") from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthenticationError(f"Invalid API key: {e}") from e
        except (openai.APIConnectionError, openai.InternalServerError) as e:
            raise ProviderError(f"OpenAI request failed: {e}") from e
        except openai.APIStatusError as e:
            raise CigarLensError(f"OpenAI request rejected: {e}") from e

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                "openai usage: %s input, %s output tokens",
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
            )

        message = response.choices[0].message if response.choices else None
        content = getattr(message, "content", None)
        if not content:
            refusal = getattr(message, "refusal", None)
            if refusal:
                raise MalformedPayload(f"Model refused the request: {refusal}")
            raise MalformedPayload("No content received from OpenAI")
        return content
