"""Package vocabulary v1."""

from cigar_lens.normalization.data.v1.package_types import FALLBACK, PACKAGE_TYPES

__all__ = ["PACKAGE_TYPES", "FALLBACK"]
