import copy

import pytest


def make_offer(**overrides):
    offer = {
        "current_price": 12.5,
        "msrp": None,
        "savings": None,
        "currency": "USD",
        "package_quantity": 1,
        "package_type": "single",
        "cigars_per_package": 1,
        "total_cigars": 1,
        "availability": True,
    }
    offer.update(overrides)
    return offer


def make_vitola(name, offers, **overrides):
    vitola = {
        "name": name,
        "shape": "parejo",
        "size": {"length": 5.0, "length_unit": "inches", "ring_gauge": 50, "display": "5 x 50"},
        "offers": offers,
    }
    vitola.update(overrides)
    return vitola


def make_product(vitolas, **overrides):
    product = {
        "product_name": "Padron 1964 Anniversary Maduro",
        "brand": "Padron",
        "company": "Padron Cigars Inc.",
        "description": "Box-pressed Nicaraguan puro.",
        "specifications": {
            "strength": "Medium to Full",
            "wrapper": ["Nicaraguan Maduro"],
            "binder": ["Nicaraguan"],
            "filler": ["Nicaraguan"],
            "origin": "Nicaragua",
            "factory": "Tabacos Cubanica",
            "blender": ["Jorge Padron"],
        },
        "vitolas": vitolas,
    }
    product.update(overrides)
    return product


@pytest.fixture
def robusto_toro_payload():
    """Blend page with a Robusto (one offer) and a Toro (single + box of 20)."""
    return {
        "page_type": "blend_page",
        "products": [
            make_product(
                [
                    make_vitola("Robusto", [make_offer(current_price=15.25)]),
                    make_vitola(
                        "Toro",
                        [
                            make_offer(current_price=18.95),
                            make_offer(
                                current_price=349.99,
                                msrp=437.50,
                                savings=87.51,
                                package_quantity=1,
                                package_type="box",
                                cigars_per_package=20,
                                total_cigars=20,
                            ),
                        ],
                        size={"length": 6.0, "length_unit": "inches", "ring_gauge": 52, "display": "6 x 52"},
                    ),
                ]
            )
        ],
    }


@pytest.fixture
def payload_factory(robusto_toro_payload):
    def factory():
        return copy.deepcopy(robusto_toro_payload)

    return factory


@pytest.fixture
def offer():
    return make_offer


@pytest.fixture
def vitola():
    return make_vitola


@pytest.fixture
def product():
    return make_product
