"""cigar-lens: Extract structured cigar product data from retailer pages."""

from cigar_lens.config import ExtractionConfig
from cigar_lens.content import PageContent
from cigar_lens.core import extract, parse_extraction
from cigar_lens.normalization import normalize_payload
from cigar_lens.schema import (
    CigarExtraction,
    CigarProduct,
    Offer,
    Size,
    Specifications,
    Vitola,
    extraction_json_schema,
)
from cigar_lens.validation import validate_extraction

__version__ = "0.1.0"

__all__ = [
    "extract",
    "parse_extraction",
    "normalize_payload",
    "validate_extraction",
    "extraction_json_schema",
    "CigarExtraction",
    "CigarProduct",
    "ExtractionConfig",
    "Offer",
    "PageContent",
    "Size",
    "Specifications",
    "Vitola",
    "__version__",
]
