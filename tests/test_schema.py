"""Tests for schema models."""

import pytest
from pydantic import ValidationError

from cigar_lens import CigarExtraction, Offer, Size, Specifications, extraction_json_schema
from cigar_lens.schema import (
    DEFAULT_PACKAGE_TYPES,
    PAGE_TYPES,
    STRENGTH_SCALE,
    openai_response_format,
    strength_rank,
)


def _offer(**overrides):
    values = dict(
        current_price=349.99,
        msrp=437.5,
        savings=87.51,
        currency="USD",
        package_quantity=1,
        package_type="box",
        cigars_per_package=20,
        total_cigars=20,
        availability=True,
    )
    values.update(overrides)
    return Offer(**values)


def test_size_length_without_unit_assumes_inches():
    size = Size(length=6.0, length_unit=None, ring_gauge=52, display="6 x 52")

    assert size.length_unit is None
    assert size.effective_length_unit == "inches"


def test_size_keeps_stated_unit():
    size = Size(length=152, length_unit="mm", ring_gauge=52, display="152 x 52")
    assert size.effective_length_unit == "mm"


def test_size_without_length_has_no_unit():
    size = Size(length=None, length_unit=None, ring_gauge=None, display=None)
    assert size.effective_length_unit is None


def test_size_rejects_fractional_ring_gauge():
    with pytest.raises(ValidationError):
        Size(length=5.0, length_unit="inches", ring_gauge=50.5, display=None)


def test_size_fields_are_required():
    """Nullable fields may be null but not absent."""
    with pytest.raises(ValidationError):
        Size(length=5.0, length_unit="inches", ring_gauge=50)


def test_offer_stated_savings_consistent():
    assert _offer().stated_savings_consistent() is True
    assert _offer(savings=50.0).stated_savings_consistent() is False
    assert _offer(msrp=None).stated_savings_consistent() is None


def test_offer_rejects_unknown_package_type():
    with pytest.raises(ValidationError):
        _offer(package_type="humidor")


def test_offer_accepts_package_type_from_context():
    data = _offer().model_dump() | {"package_type": "humidor"}

    offer = Offer.model_validate(data, context={"package_types": ("humidor", "other")})

    assert offer.package_type == "humidor"


def test_offer_rejects_lowercase_currency():
    with pytest.raises(ValidationError):
        _offer(currency="usd")


def test_specifications_undisclosed_is_distinct_from_null():
    specs = Specifications(
        strength="Full",
        wrapper="undisclosed",
        binder=None,
        filler=["Dominican", "Nicaraguan"],
        origin="Dominican Republic",
        factory=None,
        blender=[],
    )

    assert specs.is_undisclosed("wrapper")
    assert not specs.is_undisclosed("binder")
    assert specs.binder is None


def test_specifications_rejects_other_sentinels():
    with pytest.raises(ValidationError):
        Specifications(
            strength=None,
            wrapper="unknown",
            binder=None,
            filler=None,
            origin=None,
            factory=None,
            blender=[],
        )


def test_strength_rank_follows_scale():
    assert STRENGTH_SCALE[0] == "Mild"
    assert strength_rank("Mild") < strength_rank("Medium") < strength_rank("Full+")
    assert strength_rank(None) is None


@pytest.mark.parametrize("strength", ["Very Strong", "medium", ""])
def test_strength_rank_off_scale_is_none(strength):
    assert strength_rank(strength) is None


def test_models_are_frozen(robusto_toro_payload):
    extraction = CigarExtraction.model_validate(robusto_toro_payload)

    with pytest.raises(ValidationError):
        extraction.page_type = "unknown"


def test_find_vitola_is_case_insensitive(robusto_toro_payload):
    product = CigarExtraction.model_validate(robusto_toro_payload).products[0]

    toro = product.find_vitola(" toro ")

    assert toro is not None
    assert len(toro.offers) == 2
    assert product.find_vitola("Churchill") is None


def test_vitola_without_offers_is_incomplete(robusto_toro_payload):
    robusto_toro_payload["products"][0]["vitolas"][0]["offers"] = []

    extraction = CigarExtraction.model_validate(robusto_toro_payload)

    assert extraction.products[0].vitolas[0].is_complete is False
    assert extraction.products[0].vitolas[1].is_complete is True


def test_json_schema_lists_package_vocabulary():
    schema = extraction_json_schema()

    package_type = schema["$defs"]["Offer"]["properties"]["package_type"]
    assert package_type["anyOf"][0]["enum"] == list(DEFAULT_PACKAGE_TYPES)
    assert package_type["anyOf"][1] == {"type": "null"}
    assert "description" in package_type


def test_json_schema_uses_custom_vocabulary():
    schema = extraction_json_schema(["single", "box", "other"])

    package_type = schema["$defs"]["Offer"]["properties"]["package_type"]
    assert package_type["anyOf"][0]["enum"] == ["single", "box", "other"]


def test_json_schema_requires_every_field():
    schema = extraction_json_schema()

    assert set(schema["required"]) == {"page_type", "products"}
    assert schema["properties"]["page_type"]["enum"] == list(PAGE_TYPES)
    for name, definition in schema["$defs"].items():
        assert definition["additionalProperties"] is False, name
        assert set(definition["required"]) == set(definition["properties"]), name


def test_json_schema_has_no_flat_size_fields():
    product = extraction_json_schema()["$defs"]["CigarProduct"]["properties"]

    assert "vitolas" in product
    assert not {"single_size", "single_price", "multiple_sizes"} & product.keys()


def test_json_schema_does_not_leak_between_calls():
    extraction_json_schema(["box", "other"])
    schema = extraction_json_schema()

    enum = schema["$defs"]["Offer"]["properties"]["package_type"]["anyOf"][0]["enum"]
    assert "tin" in enum


def test_openai_response_format_wraps_schema():
    response_format = openai_response_format()

    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["name"] == "cigar_extraction"
    assert response_format["json_schema"]["strict"] is True
    assert response_format["json_schema"]["schema"]["title"] == "CigarExtraction"
