"""Data models for cigar-lens.

The same models drive two things: the JSON schema sent to the inference
provider and the validation of what comes back. Keep field changes here so
the two never drift.
"""

from __future__ import annotations

import copy
from collections.abc import Collection, Iterable
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from cigar_lens.normalization.data.v2 import PACKAGE_TYPES

PageType = Literal[
    "blend_page",
    "brand_page",
    "search_page",
    "single_vitola_page",
    "collection_page",
    "unknown",
]
Strength = Literal["Mild", "Mild to Medium", "Medium", "Medium to Full", "Full", "Full+"]
Shape = Literal[
    "parejo",
    "figurado",
    "perfecto",
    "pyramid",
    "torpedo",
    "belicoso",
    "culebra",
    "diadema",
    "presidente",
    "other",
]
LengthUnit = Literal["inches", "mm"]
Undisclosed = Literal["undisclosed"]

PAGE_TYPES: tuple[str, ...] = get_args(PageType)
STRENGTH_SCALE: tuple[str, ...] = get_args(Strength)
SHAPES: tuple[str, ...] = get_args(Shape)
UNDISCLOSED = "undisclosed"
DEFAULT_LENGTH_UNIT = "inches"
DEFAULT_PACKAGE_TYPES: tuple[str, ...] = tuple(PACKAGE_TYPES)


def strength_rank(strength: str | None) -> int | None:
    """Position of a strength on the mild-to-full scale.

    Returns None for None and for strings that are not on the scale.
    """
    if strength not in STRENGTH_SCALE:
        return None
    return STRENGTH_SCALE.index(strength)


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Size(_Model):
    """Physical dimensions of a vitola."""

    length: float | None = Field(
        ge=0,
        description="Length as a decimal number (5.5, not \"5 1/2 inches\"). Null if not stated.",
    )
    length_unit: LengthUnit | None = Field(
        description=(
            "Unit of the length exactly as the page states it: \"inches\" or \"mm\". "
            "Null if the page does not say. Never guess."
        ),
    )
    ring_gauge: float | None = Field(
        ge=0,
        description="Ring gauge as a whole number (52, not \"52 gauge\"). Null if not stated.",
    )
    display: str | None = Field(
        description="Size exactly as displayed on the page, e.g. '6 x 52' or '5\"1/2 x 50'.",
    )

    @field_validator("ring_gauge")
    @classmethod
    def _ring_gauge_is_whole(cls, value: float | None) -> float | None:
        if value is not None and not float(value).is_integer():
            raise ValueError(f"ring gauge must be a whole number, got {value}")
        return value

    @property
    def effective_length_unit(self) -> str | None:
        """Length unit to assume when reading `length`."""
        if self.length is None:
            return self.length_unit
        return self.length_unit or DEFAULT_LENGTH_UNIT


class Offer(_Model):
    """One purchasable packaging and pricing option for a vitola."""

    current_price: float | None = Field(
        ge=0,
        description="Current selling price as a number without currency symbols (12.95, not \"$12.95\").",
    )
    msrp: float | None = Field(
        ge=0,
        description="List price / MSRP as a number without currency symbols. Null if not shown.",
    )
    savings: float | None = Field(
        ge=0,
        description="Savings amount only if the page states it explicitly. Do not calculate it.",
    )
    currency: str | None = Field(
        pattern=r"^[A-Z]{3}$",
        description="Upper-case ISO 4217 currency code such as USD, EUR or GBP.",
    )
    package_quantity: int | None = Field(
        ge=0,
        description="Number of packaging units in this offer (2 for 'two 5-packs').",
    )
    package_type: str | None = Field(
        description=(
            "How the cigars are packaged. Use \"other\" for packaging that fits none of the "
            "listed values and \"unspecified\" when the page does not say."
        ),
    )
    cigars_per_package: int | None = Field(
        ge=0,
        description="Cigars in one package (20 for a box of 20, 1 for a single).",
    )
    total_cigars: int | None = Field(
        ge=0,
        description="Total cigars bought with this offer.",
    )
    availability: bool | None = Field(
        description=(
            "True if the offer can be bought (enabled 'Add to Cart', 'In Stock'). False for "
            "'Out of Stock', 'Sold Out', 'Backorder', 'Notify Me' or disabled buttons. "
            "Null only when availability cannot be determined."
        ),
    )

    @field_validator("package_type")
    @classmethod
    def _package_type_in_vocabulary(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None:
            return value
        accepted = _accepted_package_types(info)
        if value not in accepted:
            raise ValueError(f"'{value}' is not an accepted package type")
        return value

    def stated_savings_consistent(self) -> bool | None:
        """Whether stated savings equal msrp - current_price, to the cent.

        Returns None when any of the three values is missing.
        """
        if self.savings is None or self.msrp is None or self.current_price is None:
            return None
        return round(self.msrp - self.current_price, 2) == round(self.savings, 2)


class Vitola(_Model):
    """One size/shape variant of a blend."""

    name: str | None = Field(
        description="Vitola name such as Robusto, Toro or Churchill, without the blend name.",
    )
    shape: Shape | None = Field(
        description=(
            "Shape of the cigar. Use \"figurado\" for evidently tapered cigars whose specific "
            "shape term is not given. Null if unknown."
        ),
    )
    size: Size
    offers: list[Offer] = Field(
        description="Every packaging/price option listed for this vitola, in page order.",
    )

    @property
    def is_complete(self) -> bool:
        return bool(self.offers)


class Specifications(_Model):
    """Tobacco and provenance attributes of a blend."""

    strength: Strength | None = Field(description="Strength on the page's scale. Null if not stated.")
    wrapper: list[str] | Undisclosed | None = Field(
        description=(
            "Wrapper tobaccos, one entry per leaf (e.g. [\"Ecuadorian Habano\"]). Use "
            "\"undisclosed\" only when the page says the wrapper is not disclosed."
        ),
    )
    binder: list[str] | Undisclosed | None = Field(
        description="Binder tobaccos, one entry per leaf, or \"undisclosed\" as for wrapper.",
    )
    filler: list[str] | Undisclosed | None = Field(
        description="Filler tobaccos, one entry per leaf, or \"undisclosed\" as for wrapper.",
    )
    origin: str | None = Field(description="Country where the cigar is made.")
    factory: str | None = Field(description="Factory or manufacturer that rolls the cigar.")
    blender: list[str] = Field(description="Names of the blenders. Empty list if none are named.")

    def is_undisclosed(self, field_name: str) -> bool:
        return getattr(self, field_name) == UNDISCLOSED


class CigarProduct(_Model):
    """One blend with all of its vitolas."""

    product_name: str | None = Field(
        description="Blend or line name without any size qualifier (\"Padron 1964 Anniversary\", not \"... Torpedo\").",
    )
    brand: str | None = Field(description="Brand name as marketed.")
    company: str | None = Field(
        description="Company or importer that owns the brand, if different information is given.",
    )
    description: str | None = Field(description="Product description text from the page.")
    specifications: Specifications
    vitolas: list[Vitola] = Field(
        description=(
            "All sizes of this blend. Never create a second product that differs only by vitola."
        ),
    )

    def find_vitola(self, name: str) -> Vitola | None:
        wanted = name.strip().lower()
        for vitola in self.vitolas:
            if vitola.name and vitola.name.strip().lower() == wanted:
                return vitola
        return None


class CigarExtraction(_Model):
    """Everything extracted from one page."""

    page_type: PageType = Field(
        description=(
            "blend_page: one blend in several sizes. brand_page: several blends of one brand. "
            "search_page: search or listing results. single_vitola_page: one blend in one size. "
            "collection_page: curated collection or sampler. unknown: none of these."
        ),
    )
    products: list[CigarProduct] = Field(description="Cigar products on the page, in page order.")

    @property
    def is_unknown_page(self) -> bool:
        return self.page_type == "unknown"


def _accepted_package_types(info: ValidationInfo) -> Collection[str]:
    context = info.context or {}
    package_types = context.get("package_types")
    if package_types is None:
        return DEFAULT_PACKAGE_TYPES
    return package_types


def extraction_json_schema(package_types: Iterable[str] | None = None) -> dict[str, Any]:
    """JSON schema of `CigarExtraction` with the package vocabulary inlined."""
    terms = list(package_types if package_types is not None else DEFAULT_PACKAGE_TYPES)
    schema = copy.deepcopy(CigarExtraction.model_json_schema())
    offer = schema["$defs"]["Offer"]["properties"]["package_type"]
    offer["anyOf"] = [{"type": "string", "enum": terms}, {"type": "null"}]
    return schema


def openai_response_format(schema: dict[str, Any] | None = None) -> dict[str, Any]:
    """`response_format` payload for OpenAI structured outputs."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "cigar_extraction",
            "description": "Structured cigar product information from one retailer page",
            "schema": schema if schema is not None else extraction_json_schema(),
            "strict": True,
        },
    }
