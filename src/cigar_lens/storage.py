"""JSON persistence for validated extractions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from cigar_lens.schema import CigarExtraction
from cigar_lens.validation import validate_extraction_json

logger = logging.getLogger(__name__)


def dump_extraction(extraction: CigarExtraction, *, indent: int | None = 2) -> str:
    """Serialize an extraction. Null fields are kept, order is preserved."""
    return extraction.model_dump_json(indent=indent)


def write_extraction(extraction: CigarExtraction, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_extraction(extraction), encoding="utf-8")
    logger.info("wrote %d products to %s", len(extraction.products), target)
    return target


def load_extraction(path: str | Path, *, package_types: Iterable[str] | None = None) -> CigarExtraction:
    """Read a stored extraction and validate it again."""
    return validate_extraction_json(Path(path).read_bytes(), package_types=package_types)
