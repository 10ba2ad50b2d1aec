"""Extraction configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cigar_lens.content import DEFAULT_MAX_LENGTH, STRATEGIES
from cigar_lens.exceptions import ConfigurationError
from cigar_lens.normalization import (
    NormalizationConfig,
    PackageVocabulary,
    load_vocabulary,
    load_vocabulary_file,
)
from cigar_lens.prompts import DEFAULT_SYSTEM_PROMPT


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class ExtractionConfig:
    provider: str = "gemini"
    model: str | None = None
    strategy: str = "markdown-with-image"
    max_tokens: int = 4096
    temperature: float = 0.0
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    vocabulary_version: str = "v2"
    package_types: tuple[str, ...] | None = None
    vocabulary_path: str | None = None
    migrate_legacy: bool = False
    max_content_length: int = DEFAULT_MAX_LENGTH
    retries: int = 3
    retry_min_timeout: float = 1.0
    retry_factor: float = 2.0
    unknown_queue_path: str | None = None

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown extraction strategy '{self.strategy}'. Expected one of: {', '.join(STRATEGIES)}"
            )
        if self.retries < 0:
            raise ConfigurationError("retries must not be negative")
        if not self.system_prompt.strip():
            raise ConfigurationError("system prompt must not be empty")

    @classmethod
    def from_env(cls) -> "ExtractionConfig":
        return cls(
            provider=os.getenv("CIGAR_LENS_PROVIDER", "gemini").strip().lower() or "gemini",
            model=os.getenv("CIGAR_LENS_MODEL") or None,
            strategy=os.getenv("CIGAR_LENS_STRATEGY", "markdown-with-image"),
            max_tokens=_safe_int(os.getenv("CIGAR_LENS_MAX_TOKENS"), 4096),
            temperature=_safe_float(os.getenv("CIGAR_LENS_TEMPERATURE"), 0.0),
            vocabulary_version=os.getenv("CIGAR_LENS_VOCABULARY_VERSION", "v2"),
            vocabulary_path=os.getenv("CIGAR_LENS_VOCABULARY_PATH") or None,
            migrate_legacy=_parse_bool(os.getenv("CIGAR_LENS_MIGRATE_LEGACY"), False),
            max_content_length=_safe_int(os.getenv("CIGAR_LENS_MAX_CONTENT_LENGTH"), DEFAULT_MAX_LENGTH),
            retries=max(0, _safe_int(os.getenv("CIGAR_LENS_RETRIES"), 3)),
            unknown_queue_path=os.getenv("UNKNOWN_QUEUE_PATH") or None,
        )

    def load_vocabulary(self) -> PackageVocabulary:
        if self.vocabulary_path:
            return load_vocabulary_file(self.vocabulary_path)
        if self.package_types is not None:
            return PackageVocabulary.from_terms(self.package_types)
        return load_vocabulary(self.vocabulary_version)

    def normalization_config(self) -> NormalizationConfig:
        return NormalizationConfig(
            vocabulary_version=self.vocabulary_version,
            package_types=self.package_types,
            unknown_queue_path=self.unknown_queue_path,
        )
