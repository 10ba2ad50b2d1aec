"""Core extraction pipeline."""

import dataclasses
import logging
from typing import Any

from cigar_lens.config import ExtractionConfig
from cigar_lens.content import ImageInput, PageContent, prepare_text, uses_image
from cigar_lens.migration import migrate_legacy_payload
from cigar_lens.normalization import NormalizationEngine, NormalizationResult, PackageVocabulary
from cigar_lens.providers.base import BaseProvider
from cigar_lens.schema import CigarExtraction, extraction_json_schema
from cigar_lens.validation import parse_payload, validate_extraction

logger = logging.getLogger(__name__)

PageInput = PageContent | str


def _build_gemini_provider(api_key: str | None, config: ExtractionConfig) -> BaseProvider:
    from cigar_lens.providers.gemini import GeminiProvider

    options = _provider_options(config)
    if config.model:
        options["model"] = config.model
    return GeminiProvider(api_key=api_key, **options)


def _build_openai_provider(api_key: str | None, config: ExtractionConfig) -> BaseProvider:
    from cigar_lens.providers.openai_chat import OpenAIProvider

    options = _provider_options(config)
    if config.model:
        options["model"] = config.model
    return OpenAIProvider(api_key=api_key, **options)


def _provider_options(config: ExtractionConfig) -> dict[str, Any]:
    return {
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
        "retries": config.retries,
        "retry_min_timeout": config.retry_min_timeout,
        "retry_factor": config.retry_factor,
    }


def _select_provider(provider: str | None, api_key: str | None, config: ExtractionConfig) -> BaseProvider:
    provider_name = (provider or config.provider).strip().lower()
    if provider_name in {"gemini", "google"}:
        return _build_gemini_provider(api_key, config)
    if provider_name in {"openai", "gpt"}:
        return _build_openai_provider(api_key, config)
    raise ValueError(f"Unsupported provider: {provider_name}")


def _as_page(page: PageInput, screenshot: ImageInput | None) -> PageContent:
    if isinstance(page, PageContent):
        return page if screenshot is None else dataclasses.replace(page, screenshot=screenshot)
    return PageContent(text=page, screenshot=screenshot)


def normalize_and_validate(
    payload: Any,
    *,
    config: ExtractionConfig | None = None,
    vocabulary: PackageVocabulary | None = None,
) -> tuple[CigarExtraction, NormalizationResult]:
    """Migrate (if enabled), normalize and validate a parsed payload."""
    config = config or ExtractionConfig()
    vocabulary = vocabulary or config.load_vocabulary()

    if config.migrate_legacy:
        payload = migrate_legacy_payload(payload)

    engine = NormalizationEngine(config.normalization_config(), vocabulary=vocabulary)
    normalized = engine.normalize(payload)
    extraction = validate_extraction(normalized.payload, package_types=vocabulary.terms)
    return extraction, normalized


def parse_extraction(raw: str | bytes, *, config: ExtractionConfig | None = None) -> CigarExtraction:
    """Turn raw provider output into a validated extraction.

    Raises:
        MalformedPayload: If `raw` is not a JSON object.
        SchemaViolation: If the normalized payload fails validation.
    """
    extraction, _ = normalize_and_validate(parse_payload(raw), config=config)
    return extraction


def extract_with_metadata(
    page: PageInput,
    *,
    screenshot: ImageInput | None = None,
    api_key: str | None = None,
    provider: str | None = None,
    config: ExtractionConfig | None = None,
) -> tuple[CigarExtraction, dict[str, Any]]:
    """Extract cigar products and return provider metadata and rewrites."""

    config = config or ExtractionConfig.from_env()
    page = _as_page(page, screenshot)
    prepared = dataclasses.replace(page, text=prepare_text(page.text, config.max_content_length))
    vocabulary = config.load_vocabulary()

    engine = _select_provider(provider, api_key, config)
    raw = engine.generate(
        prepared,
        schema=extraction_json_schema(vocabulary.terms),
        system_prompt=config.system_prompt,
        with_image=uses_image(config.strategy),
    )
    extraction, normalized = normalize_and_validate(
        parse_payload(raw),
        config=config,
        vocabulary=vocabulary,
    )

    logger.info(
        "extracted %d products (%s) from %s",
        len(extraction.products),
        extraction.page_type,
        page.source_url or "<page>",
    )
    metadata: dict[str, Any] = dict(engine.get_extraction_metadata() or {})
    metadata["strategy"] = config.strategy
    metadata["vocabulary_version"] = normalized.vocabulary_version
    metadata["rewrites"] = [item.model_dump() for item in normalized.rewrites]
    return extraction, metadata


def extract(
    page: PageInput,
    *,
    screenshot: ImageInput | None = None,
    api_key: str | None = None,
    provider: str | None = None,
    config: ExtractionConfig | None = None,
) -> CigarExtraction:
    """Extract structured cigar products from one page.

    Args:
        page: Cleaned page text (markdown or HTML) or a PageContent.
        screenshot: Optional screenshot - file path, bytes, or PIL Image.
        api_key: Provider API key. Falls back to the provider's env var.
        provider: Provider name (`gemini` or `openai`). Defaults to
            `CIGAR_LENS_PROVIDER` env var, then `gemini`.
        config: Extraction settings. Defaults to `ExtractionConfig.from_env()`.

    Returns:
        CigarExtraction validated against the extraction schema.
    """
    extraction, _ = extract_with_metadata(
        page,
        screenshot=screenshot,
        api_key=api_key,
        provider=provider,
        config=config,
    )
    return extraction
