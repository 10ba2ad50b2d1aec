"""Package vocabulary v2."""

from cigar_lens.normalization.data.v2.package_types import FALLBACK, PACKAGE_TYPES

__all__ = ["PACKAGE_TYPES", "FALLBACK"]
