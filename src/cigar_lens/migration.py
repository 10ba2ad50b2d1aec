"""Upgrade payloads from earlier schema iterations to the vitola/offer shape.

Two older shapes exist in stored extractions:

* flat products with ``single_size``, ``single_price``, ``single_availability``
  and ``multiple_sizes``;
* products with a ``size_options`` list whose entries hold a ``size``, a
  ``price`` (with ``quantity``/``quantity_type``) and a free-text
  ``availability``.

Both become ``vitolas`` holding ``offers``. Migration runs before
normalization, so packaging terms are repaired by the normalizer afterwards.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cigar_lens.schema import PAGE_TYPES, UNDISCLOSED

logger = logging.getLogger(__name__)

LEGACY_PAGE_TYPES = {
    "single_product_single_size": "single_vitola_page",
    "single_product": "single_vitola_page",
    "single_product_multiple_sizes": "blend_page",
    "multiple_products": "brand_page",
    "search_results": "search_page",
}
LEGACY_PRODUCT_KEYS = frozenset(
    {"single_size", "single_price", "single_availability", "multiple_sizes", "size_options"}
)
SIZE_FIELDS = ("length", "length_unit", "ring_gauge", "display")
PRICE_FIELDS = ("current_price", "msrp", "savings", "currency")
TOBACCO_FIELDS = ("wrapper", "binder", "filler")

_OUT_OF_STOCK = (
    "out of stock",
    "sold out",
    "unavailable",
    "not available",
    "discontinued",
    "backorder",
    "back order",
    "notify",
    "email when",
)
_IN_STOCK = ("in stock", "available", "add to cart", "buy now", "limited", "ships")


def is_legacy_payload(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    if payload.get("page_type") in LEGACY_PAGE_TYPES:
        return True
    products = payload.get("products")
    if not isinstance(products, list):
        return False
    return any(isinstance(p, dict) and LEGACY_PRODUCT_KEYS & p.keys() for p in products)


def migrate_legacy_payload(payload: Any) -> Any:
    """Return `payload` upgraded to the current shape.

    Payloads that are not recognisably legacy are returned unchanged.
    """
    if not is_legacy_payload(payload):
        return payload

    page_type = payload.get("page_type")
    if page_type in LEGACY_PAGE_TYPES:
        page_type = LEGACY_PAGE_TYPES[page_type]
    elif page_type not in PAGE_TYPES:
        page_type = "unknown"

    products = payload.get("products")
    if isinstance(products, list):
        products = [migrate_product(p) if isinstance(p, dict) else p for p in products]
        logger.info("migrated legacy payload with %d products", len(products))

    migrated = {key: value for key, value in payload.items() if key not in ("page_type", "products")}
    migrated["page_type"] = page_type
    migrated["products"] = products
    return migrated


def migrate_product(product: dict[str, Any]) -> dict[str, Any]:
    """Rebuild one legacy product around vitolas.

    Entries that are not objects are carried into ``vitolas`` or ``offers``
    untouched so the validator reports them at their new location.
    """
    if "vitolas" in product and not LEGACY_PRODUCT_KEYS & product.keys():
        return product

    entries: list[tuple[Any, Any, Any]] = []
    passthrough: list[Any] = []
    if product.get("single_size") is not None or product.get("single_price") is not None:
        entries.append(
            (product.get("single_size"), product.get("single_price"), product.get("single_availability"))
        )
    for key in ("multiple_sizes", "size_options"):
        for option in _as_options(product.get(key)):
            if isinstance(option, dict):
                entries.append((option.get("size"), option.get("price"), option.get("availability")))
            else:
                passthrough.append(option)

    vitolas = _group_vitolas(entries) + passthrough
    existing = product.get("vitolas")
    if existing is not None:
        logger.warning(
            "product %r has vitolas and legacy size fields, keeping both",
            product.get("product_name"),
        )
        vitolas = (existing if isinstance(existing, list) else [existing]) + vitolas

    return {
        "product_name": product.get("product_name"),
        "brand": product.get("brand"),
        "company": product.get("company"),
        "description": product.get("description"),
        "specifications": migrate_specifications(product.get("specifications")),
        "vitolas": vitolas,
    }


def migrate_specifications(specs: Any) -> Any:
    if specs is None:
        specs = {}
    elif not isinstance(specs, dict):
        return specs
    migrated: dict[str, Any] = {"strength": specs.get("strength")}
    for field in TOBACCO_FIELDS:
        migrated[field] = _tobacco_value(specs.get(field))
    migrated["origin"] = specs.get("origin")
    migrated["factory"] = specs.get("factory", specs.get("manufacturer"))
    migrated["blender"] = _as_list(specs.get("blender"))
    return migrated


def parse_availability(value: Any) -> bool | None:
    """Map a free-text stock status to True, False or None."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if any(phrase in text for phrase in _OUT_OF_STOCK):
        return False
    if any(phrase in text for phrase in _IN_STOCK):
        return True
    return None


def _group_vitolas(entries: list[tuple[Any, Any, Any]]) -> list[dict[str, Any]]:
    vitolas: dict[str, dict[str, Any]] = {}
    for raw_size, price, availability in entries:
        size = _size(raw_size)
        key = json.dumps(size, sort_keys=True, default=str)
        vitola = vitolas.setdefault(key, {"name": None, "shape": None, "size": size, "offers": []})
        if isinstance(price, dict):
            vitola["offers"].append(_offer(price, availability))
        elif price is not None:
            vitola["offers"].append(price)
    return list(vitolas.values())


def _as_options(value: Any) -> list[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _size(raw: Any) -> Any:
    if raw is None:
        raw = {}
    elif not isinstance(raw, dict):
        return raw
    return {field: raw.get(field) for field in SIZE_FIELDS}


def _offer(price: dict[str, Any], availability: Any) -> dict[str, Any]:
    offer = {field: price.get(field) for field in PRICE_FIELDS}
    # Legacy `quantity` counted cigars, not packages.
    offer.update(
        {
            "package_quantity": price.get("package_quantity"),
            "package_type": price.get("package_type", price.get("quantity_type")),
            "cigars_per_package": price.get("cigars_per_package"),
            "total_cigars": price.get("total_cigars", price.get("quantity")),
            "availability": parse_availability(availability),
        }
    )
    return offer


def _tobacco_value(value: Any) -> Any:
    if isinstance(value, str):
        if value.strip().lower() == UNDISCLOSED:
            return UNDISCLOSED
        return [value.strip()] if value.strip() else None
    return value


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return value
