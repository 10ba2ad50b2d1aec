"""Package vocabulary repository for normalization."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path

from cigar_lens.exceptions import ConfigurationError

DEFAULT_VERSION = "v2"
DEFAULT_FALLBACK = "other"
DATA_ROOT = Path(__file__).resolve().parent / "data"


@dataclass(frozen=True)
class PackageVocabulary:
    """Accepted `package_type` values and the fallback for everything else."""

    terms: tuple[str, ...]
    fallback: str = DEFAULT_FALLBACK
    version: str = "custom"

    def __post_init__(self) -> None:
        if not self.terms:
            raise ConfigurationError("Package vocabulary must not be empty")
        for term in self.terms:
            if not isinstance(term, str) or term != term.strip().lower() or not term:
                raise ConfigurationError(f"Package vocabulary term must be lower-case text: {term!r}")
        if self.fallback not in self.terms:
            raise ConfigurationError(
                f"Fallback package type '{self.fallback}' is not in vocabulary {self.version}"
            )

    def __contains__(self, value: object) -> bool:
        return value in self.terms

    def canonical(self, raw: str) -> str | None:
        """Canonical form of `raw`, or None when it is not in the vocabulary."""
        candidate = raw.strip().lower()
        return candidate if candidate in self.terms else None

    @classmethod
    def from_terms(
        cls,
        terms: Iterable[str],
        *,
        fallback: str = DEFAULT_FALLBACK,
        version: str = "custom",
    ) -> "PackageVocabulary":
        ordered = tuple(dict.fromkeys(terms))
        return cls(terms=ordered, fallback=fallback, version=version)


class VocabularyRepository:
    """Loads package vocabularies from packaged data or a JSON file."""

    def __init__(self, version: str = DEFAULT_VERSION):
        self.version = version
        self.vocabulary = self._load()

    def _load(self) -> PackageVocabulary:
        try:
            module = import_module(f"cigar_lens.normalization.data.{self.version}.package_types")
            terms = module.PACKAGE_TYPES
            fallback = getattr(module, "FALLBACK", DEFAULT_FALLBACK)
        except ModuleNotFoundError:
            path = DATA_ROOT / self.version / "package_types.json"
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise ConfigurationError(f"Unknown vocabulary version: {self.version}") from exc
            terms = data["package_types"]
            fallback = data.get("fallback", DEFAULT_FALLBACK)
        return PackageVocabulary.from_terms(terms, fallback=fallback, version=self.version)


def load_vocabulary(version: str = DEFAULT_VERSION) -> PackageVocabulary:
    return VocabularyRepository(version=version).vocabulary


def load_vocabulary_file(path: str | Path) -> PackageVocabulary:
    """Load a vocabulary from a JSON file.

    The file holds ``{"package_types": [...], "fallback": "other"}``.
    """
    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Vocabulary file not found: {source}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Vocabulary file is not valid JSON: {source}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("package_types"), list):
        raise ConfigurationError(f"Vocabulary file must define a 'package_types' list: {source}")
    return PackageVocabulary.from_terms(
        data["package_types"],
        fallback=data.get("fallback", DEFAULT_FALLBACK),
        version=source.stem,
    )
