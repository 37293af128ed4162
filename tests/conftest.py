# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Shared test fixtures for the CEE valorisation test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from cee_valorisation.config import EngineConfig
from cee_valorisation.data.models import Delegate, Product, Project, ProjectProduct

FIXTURES = Path(__file__).parent / "fixtures"


def make_product(**overrides) -> Product:
    defaults = {
        "id": "prod-1",
        "code": "BAT-EN-101",
        "name": "Isolation Façade",
        "category": "Isolation",
        "params_schema": [
            {"name": "surface_facturee", "label": "Surface facturée", "unit": "m²"},
        ],
        "kwh_cumac_values": [{"building_type": "Bureaux", "kwh_cumac": 1000}],
    }
    defaults.update(overrides)
    return Product(**defaults)


def make_line(product: Product | None = None, **overrides) -> ProjectProduct:
    defaults = {"id": "pp-1", "product_id": product.id if product else None, "product": product}
    defaults.update(overrides)
    return ProjectProduct(**defaults)


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture()
def flat_config() -> EngineConfig:
    """Flat lookup, bonification 2, prime fallback chain."""
    return EngineConfig(bonification=2, lookup="flat")


@pytest.fixture()
def banded_config() -> EngineConfig:
    """Surface-banded lookup defaulting to the below-400 band."""
    return EngineConfig(
        bonification=2,
        lookup="surface_banded",
        unknown_surface_band="lt_400",
        multiplier_profile="valorisation",
    )


@pytest.fixture()
def delegate() -> Delegate:
    return Delegate(name="Delegataire", price_eur_per_mwh=100)


@pytest.fixture()
def insulation() -> Product:
    return make_product()


@pytest.fixture()
def lighting() -> Product:
    return make_product(
        id="led-1",
        code="BAT-EQ-127",
        name="Luminaire LED",
        category="Eclairage",
        params_schema=[{"name": "nb_lum", "label": "Nombre de luminaire", "unit": "u"}],
        kwh_cumac_values=[{"building_type": "Bureaux", "kwh_cumac": 500}],
    )


@pytest.fixture()
def furniture() -> Product:
    return make_product(
        id="furn-1",
        code="FURN",
        name="Fourniture",
        category="ECO-FURN",
        params_schema=[],
        kwh_cumac_values=[{"building_type": "Bureaux", "kwh_cumac": 9999}],
    )


@pytest.fixture()
def office_project(insulation: Product, lighting: Product, furniture: Product) -> Project:
    return Project(
        id="prj-1",
        status="ACCEPTE",
        building_type="Bureaux",
        project_products=[
            make_line(insulation, id="pp-1", dynamic_params={"surface_facturee": 120}),
            make_line(lighting, id="pp-2", dynamic_params={"nb_lum": "10"}),
            make_line(furniture, id="pp-3", quantity=3),
        ],
    )
