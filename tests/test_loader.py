# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for portfolio loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cee_valorisation.config import load_config
from cee_valorisation.data.loader import Portfolio, load_portfolio
from cee_valorisation.engine.energy import aggregate_energy_by_category
from cee_valorisation.engine.prime import PrimeEngine


class TestLoadPortfolio:
    def test_yaml_portfolio(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")

        assert portfolio.delegate.price_eur_per_mwh == 10
        assert [p.id for p in portfolio.products] == ["iso-1", "led-1", "furn-1"]
        assert [p.id for p in portfolio.projects] == ["prj-1", "prj-2"]

    def test_products_are_linked(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")

        lines = portfolio.get_project("prj-1").project_products
        assert [line.product.id for line in lines] == ["iso-1", "led-1", "furn-1"]

    def test_json_portfolio_with_wrapped_schema(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.json")

        [product] = portfolio.products
        assert [field.name for field in product.params_schema] == ["surface_facturee"]
        unknown = portfolio.projects[0].project_products[1]
        assert unknown.product is None

    def test_get_project_missing(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")
        assert portfolio.get_project("nope") is None

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Portfolio file not found"):
            load_portfolio(tmp_path / "portfolio.yaml")

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "portfolio.csv"
        path.write_text("id,name\n")
        with pytest.raises(ValueError, match="Unsupported file type"):
            load_portfolio(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "portfolio.json"
        path.write_text("[]")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_portfolio(path)

    def test_duplicate_building_type_rejected(self):
        with pytest.raises(ValidationError, match="Bureaux"):
            Portfolio.model_validate({
                "products": [{
                    "id": "p",
                    "kwh_cumac_values": [
                        {"building_type": "Bureaux", "kwh_cumac": 1},
                        {"building_type": "Bureaux", "kwh_cumac": 2},
                    ],
                }],
            })


class TestEndToEnd:
    def test_banded_prime(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")
        config = load_config(fixtures_dir / "engine.yaml")

        results = PrimeEngine(config, portfolio.catalog()).compute_all(
            portfolio.projects, portfolio.delegate
        )

        first, second = results
        # 1000 x 2 x 10 / 1000 = 20 €/m² x 120; 500 x 2 x 10 / 1000 = 10 € x 10
        assert first.total_prime == 2500.0
        assert [line.total for line in first.products] == [2400.0, 100.0]
        assert second.total_prime is None
        assert second.skipped[0].status.value == "missing_lookup"

    def test_flat_prime(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")
        config = load_config(fixtures_dir / "engine_flat.yaml")

        result = PrimeEngine(config).compute(portfolio.projects[0], portfolio.delegate)

        assert result.total_prime == 1250.0

    def test_json_prime(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.json")
        config = load_config(fixtures_dir / "engine_flat.yaml")

        result = PrimeEngine(config, portfolio.catalog()).compute(
            portfolio.projects[0], portfolio.delegate
        )

        assert result.total_prime == 500.0
        assert [line.status.value for line in result.skipped] == ["unknown_product"]

    def test_energy(self, fixtures_dir: Path):
        portfolio = load_portfolio(fixtures_dir / "portfolio.yaml")
        config = load_config(fixtures_dir / "engine.yaml")

        result = aggregate_energy_by_category(
            portfolio.projects, config=config, catalog=portfolio.catalog()
        )

        assert [(e.category, e.mwh) for e in result.breakdown] == [
            ("Isolation", 120.0),
            ("Eclairage", 5.0),
        ]
        assert result.total_mwh == 125.0
