# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""JSON and YAML portfolio import.

Reads a catalog/projects export produced by the back-office and links
every project product to its catalog entry.  A portfolio document looks
like::

    delegate:
      name: Delegataire A
      price_eur_per_mwh: 7.5
    products:
      - id: prod-1
        code: BAR-EN-101
        category: Isolation
        params_schema: [{name: surface_facturee, label: Surface facturée, unit: m²}]
        kwh_cumac_values: [{building_type: Bureaux, kwh_cumac: 1600}]
    projects:
      - id: prj-1
        building_type: Bureaux
        project_products: [{product_id: prod-1, dynamic_params: {surface_facturee: 120}}]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from cee_valorisation.data.models import Delegate, Product, Project

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


class Portfolio(BaseModel):
    """A catalog, a set of projects and the delegate pricing them."""

    delegate: Optional[Delegate] = None
    products: list[Product] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def _link_products(self) -> Portfolio:
        catalog = self.catalog()
        for project in self.projects:
            for project_product in project.project_products:
                if project_product.product is not None or not project_product.product_id:
                    continue
                product = catalog.get(project_product.product_id)
                if product is None:
                    logger.warning(
                        "Project %s references unknown product %s",
                        project.id,
                        project_product.product_id,
                    )
                    continue
                project_product.product = product
        return self

    def catalog(self) -> dict[str, Product]:
        return {product.id: product for product in self.products}

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None


def read_document(path: Path) -> Any:
    """Parse a JSON or YAML file based on its suffix."""
    suffix = path.suffix.lower()
    if suffix != ".json" and suffix not in _YAML_SUFFIXES:
        raise ValueError(f"Unsupported file type: {path.suffix}")

    with open(path, encoding="utf-8") as f:
        if suffix == ".json":
            return json.load(f)
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc


def load_portfolio(path: str | Path) -> Portfolio:
    """Load a :class:`Portfolio` from a JSON or YAML file."""
    portfolio_path = Path(path).expanduser()
    if not portfolio_path.exists():
        raise FileNotFoundError(f"Portfolio file not found: {portfolio_path}")

    raw = read_document(portfolio_path)
    if not isinstance(raw, dict):
        raise ValueError(f"Portfolio file {portfolio_path} must contain a mapping")

    portfolio = Portfolio.model_validate(raw)
    logger.info(
        "Loaded %d products and %d projects from %s",
        len(portfolio.products),
        len(portfolio.projects),
        portfolio_path,
    )
    return portfolio
