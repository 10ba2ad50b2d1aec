"""Schema validation for normalized extraction payloads."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from cigar_lens.exceptions import MalformedPayload, SchemaViolation
from cigar_lens.schema import CigarExtraction

# Union member tags look like `list[str]` or `literal['undisclosed']`.
_UNION_TAG = re.compile(r"^[a-z][a-z0-9_-]*\[.*\]$")


def parse_payload(raw: str | bytes) -> dict[str, Any]:
    """Parse provider output into a JSON object.

    Raises:
        MalformedPayload: If the text is empty, not JSON, or not an object.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    except UnicodeDecodeError as e:
        raise MalformedPayload(f"Provider response is not UTF-8: {e}") from e
    if not text or not text.strip():
        raise MalformedPayload("Provider returned no content")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedPayload(f"Provider response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedPayload(f"Provider response must be a JSON object, got {type(data).__name__}")
    return data


def validate_extraction(
    payload: Any,
    *,
    package_types: Iterable[str] | None = None,
) -> CigarExtraction:
    """Validate a normalized payload against the extraction schema.

    Every field must be present; nullable fields may be null. Types are
    checked strictly, so numbers given as strings are rejected.

    Raises:
        SchemaViolation: Identifying the first offending field.
    """
    context = {"package_types": tuple(package_types)} if package_types is not None else None
    try:
        return CigarExtraction.model_validate(payload, strict=True, context=context)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        raise SchemaViolation(format_path(first["loc"]), first["msg"], errors) from e


def validate_extraction_json(
    raw: str | bytes,
    *,
    package_types: Iterable[str] | None = None,
) -> CigarExtraction:
    return validate_extraction(parse_payload(raw), package_types=package_types)


def format_path(loc: Iterable[int | str]) -> str:
    """Render a pydantic error location as ``products[0].vitolas[1].name``.

    Union member tags such as ``list[str]`` are dropped.
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif not _UNION_TAG.match(part):
            path = f"{path}.{part}" if path else part
    return path
