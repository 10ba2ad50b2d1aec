"""Normalization utilities for cigar-lens."""

from cigar_lens.normalization.engine import NormalizationConfig, NormalizationEngine, normalize_payload
from cigar_lens.normalization.repository import PackageVocabulary, load_vocabulary, load_vocabulary_file
from cigar_lens.normalization.types import NormalizationResult, Rewrite

__all__ = [
    "NormalizationConfig",
    "NormalizationEngine",
    "NormalizationResult",
    "PackageVocabulary",
    "Rewrite",
    "load_vocabulary",
    "load_vocabulary_file",
    "normalize_payload",
]
