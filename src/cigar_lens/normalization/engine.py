"""Normalization engine for raw extraction payloads."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cigar_lens.normalization.repository import (
    DEFAULT_FALLBACK,
    DEFAULT_VERSION,
    PackageVocabulary,
    VocabularyRepository,
)
from cigar_lens.normalization.types import NormalizationResult, Rewrite

logger = logging.getLogger(__name__)

PACKAGE_TYPE_FIELDS = frozenset({"package_type", "quantity_type"})


@dataclass(frozen=True)
class NormalizationConfig:
    vocabulary_version: str = DEFAULT_VERSION
    package_types: tuple[str, ...] | None = None
    fallback: str = DEFAULT_FALLBACK
    unknown_queue_path: str | None = None


class NormalizationEngine:
    """Repairs enum drift in provider output before validation.

    The engine walks every dict and list of a parsed JSON payload, including
    fields it does not know about, and rewrites `package_type` values (and
    the older `quantity_type` name) that are not in the vocabulary to the
    fallback term. Normalization never raises.
    """

    def __init__(
        self,
        config: NormalizationConfig | None = None,
        *,
        vocabulary: PackageVocabulary | None = None,
    ):
        self.config = config or NormalizationConfig()
        self.vocabulary = vocabulary or self._build_vocabulary()

    def normalize(self, payload: Any) -> NormalizationResult:
        rewrites: list[Rewrite] = []
        normalized = self._walk(payload, "", rewrites)
        return NormalizationResult(
            vocabulary_version=self.vocabulary.version,
            payload=normalized,
            rewrites=rewrites,
        )

    def normalize_package_type(self, raw: str) -> str:
        """Canonical package type for `raw`, or the fallback term."""
        return self.vocabulary.canonical(raw) or self.vocabulary.fallback

    def _build_vocabulary(self) -> PackageVocabulary:
        if self.config.package_types is not None:
            return PackageVocabulary.from_terms(
                self.config.package_types,
                fallback=self.config.fallback,
            )
        return VocabularyRepository(version=self.config.vocabulary_version).vocabulary

    def _walk(self, value: Any, path: str, rewrites: list[Rewrite]) -> Any:
        if isinstance(value, dict):
            result: dict[Any, Any] = {}
            for key, item in value.items():
                child_path = f"{path}.{key}" if path else str(key)
                if key in PACKAGE_TYPE_FIELDS and item is not None:
                    result[key] = self._repair(key, item, child_path, rewrites)
                else:
                    result[key] = self._walk(item, child_path, rewrites)
            return result

        if isinstance(value, list):
            return [self._walk(item, f"{path}[{index}]", rewrites) for index, item in enumerate(value)]

        return value

    def _repair(self, field: str, raw: Any, path: str, rewrites: list[Rewrite]) -> str:
        canonical = self.vocabulary.canonical(raw) if isinstance(raw, str) else None
        if canonical == raw:
            return raw

        if canonical is not None:
            logger.debug("normalized %s case at %s: %r -> %r", field, path, raw, canonical)
            rewrites.append(Rewrite(path=path, field=field, original=raw, normalized=canonical, reason="case"))
            return canonical

        fallback = self.vocabulary.fallback
        logger.warning(
            "unrecognized %s %r at %s, using %r",
            field,
            raw,
            path,
            fallback,
        )
        rewrites.append(
            Rewrite(path=path, field=field, original=raw, normalized=fallback, reason="unrecognized")
        )
        self._enqueue_unknown(field=field, raw=raw, path=path)
        return fallback

    def _enqueue_unknown(self, *, field: str, raw: Any, path: str) -> None:
        path_value = self.config.unknown_queue_path
        if not path_value:
            return

        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "field": field,
            "raw": raw,
            "path": path,
            "normalized": self.vocabulary.fallback,
            "vocabulary_version": self.vocabulary.version,
        }
        queue_path = Path(path_value)
        try:
            queue_path.parent.mkdir(parents=True, exist_ok=True)
            with queue_path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
        except OSError:
            # Unknown queue should never break extraction path.
            logger.exception("failed to append to unknown queue %s", queue_path)


def normalize_payload(
    payload: Any,
    *,
    vocabulary_version: str = DEFAULT_VERSION,
    package_types: Iterable[str] | None = None,
    fallback: str = DEFAULT_FALLBACK,
    unknown_queue_path: str | None = None,
) -> Any:
    """Normalize a parsed provider payload and return the repaired tree."""

    engine = NormalizationEngine(
        config=NormalizationConfig(
            vocabulary_version=vocabulary_version,
            package_types=tuple(package_types) if package_types is not None else None,
            fallback=fallback,
            unknown_queue_path=unknown_queue_path,
        )
    )
    return engine.normalize(payload).payload
