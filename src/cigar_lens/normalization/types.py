"""Data models for normalization output."""

from typing import Any, Literal

from pydantic import BaseModel, Field

Reason = Literal["unrecognized", "case"]


class Rewrite(BaseModel):
    """One value rewritten by the normalizer."""

    path: str
    field: str
    original: Any
    normalized: str
    reason: Reason


class NormalizationResult(BaseModel):
    """Normalized payload plus the rewrites applied to it."""

    vocabulary_version: str
    payload: Any = None
    rewrites: list[Rewrite] = Field(default_factory=list)

    @property
    def unrecognized(self) -> list[Rewrite]:
        return [item for item in self.rewrites if item.reason == "unrecognized"]
