# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Core Pydantic v2 data models for the CEE valorisation engine.

This module defines the complete data contract shared by the multiplier
resolver, the valorisation calculator, the aggregators, the loaders and
the CLI layer.  Input models mirror the rows supplied by the backend
(catalog products, projects, project products, delegates); result models
are built fresh by every computation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class LineStatus(str, Enum):
    """Outcome of one project-product line."""

    included = "included"
    excluded_category = "excluded_category"
    unknown_product = "unknown_product"
    missing_lookup = "missing_lookup"
    unresolved_multiplier = "unresolved_multiplier"
    non_positive_value = "non_positive_value"

    @property
    def label(self) -> str:
        """Short human-readable reason used by the terminal report."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    LineStatus.included: "included",
    LineStatus.excluded_category: "category excluded",
    LineStatus.unknown_product: "product not in catalog",
    LineStatus.missing_lookup: "no kWh cumac for building type",
    LineStatus.unresolved_multiplier: "no positive multiplier",
    LineStatus.non_positive_value: "valorisation not positive",
}


class SurfaceBand(str, Enum):
    """Building-surface band of a size-banded kWh cumac entry."""

    lt_400 = "lt_400"
    gte_400 = "gte_400"


# ---------------------------------------------------------------------------
# Catalog models
# ---------------------------------------------------------------------------

class ParamField(BaseModel):
    """One descriptor of a product's dynamic parameter schema."""

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    name: Optional[str] = Field(default=None, description="Key used in dynamic_params")
    label: Optional[str] = Field(default=None, description="Display label")
    unit: Optional[str] = Field(default=None, description="Display unit (m², u, ...)")

    @field_validator("name", "label", "unit", mode="before")
    @classmethod
    def _keep_strings_only(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class KwhCumacEntry(BaseModel):
    """kWh cumac value(s) of a product for one building type.

    Either a flat ``kwh_cumac`` or a size-banded pair depending on the
    catalog generation; the lookup strategy decides which one is read.
    """

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    building_type: str = Field(..., description="Building type key, matched exactly")
    kwh_cumac: Optional[float] = Field(default=None, description="Flat kWh cumac value")
    kwh_cumac_lt_400: Optional[float] = Field(
        default=None, description="kWh cumac for buildings below 400 m²"
    )
    kwh_cumac_gte_400: Optional[float] = Field(
        default=None, description="kWh cumac for buildings of 400 m² or more"
    )

    def value_for_band(self, band: SurfaceBand) -> Optional[float]:
        if band is SurfaceBand.lt_400:
            return self.kwh_cumac_lt_400
        return self.kwh_cumac_gte_400


class Product(BaseModel):
    """A catalog product with its parameter schema and kWh cumac table."""

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    id: str = Field(..., description="Catalog identifier")
    code: Optional[str] = Field(default=None, description="Product code, e.g. BAT-EN-101")
    name: Optional[str] = Field(default=None, description="Display name")
    category: Optional[str] = Field(default=None, description="Free-text category")
    is_active: bool = Field(default=True)
    params_schema: list[ParamField] = Field(
        default_factory=list, description="Ordered dynamic parameter descriptors"
    )
    kwh_cumac_values: list[KwhCumacEntry] = Field(
        default_factory=list, description="Per-building-type kWh cumac table"
    )

    @field_validator("params_schema", mode="before")
    @classmethod
    def _unwrap_schema(cls, value: Any) -> list[Any]:
        """Accept a bare list of fields or a ``{"fields": [...]}`` wrapper."""
        if isinstance(value, dict):
            value = value.get("fields")
        if not isinstance(value, list):
            return []
        return [field for field in value if isinstance(field, (dict, ParamField))]

    @field_validator("kwh_cumac_values", mode="before")
    @classmethod
    def _drop_null_entries(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [entry for entry in value if entry is not None]

    @model_validator(mode="after")
    def _one_entry_per_building_type(self) -> Product:
        seen: set[str] = set()
        for entry in self.kwh_cumac_values:
            if entry.building_type in seen:
                raise ValueError(
                    f"Product {self.id!r} has several kWh cumac entries for "
                    f"building type {entry.building_type!r}"
                )
            seen.add(entry.building_type)
        return self

    def find_param_field(self, name: str) -> Optional[ParamField]:
        """Return the schema field declared under *name*, if any."""
        for field in self.params_schema:
            if field.name == name:
                return field
        return None

    def kwh_entry_for(self, building_type: Optional[str]) -> Optional[KwhCumacEntry]:
        """Return the lookup entry whose building type equals *building_type*."""
        if not building_type:
            return None
        for entry in self.kwh_cumac_values:
            if entry.building_type == building_type:
                return entry
        return None


# ---------------------------------------------------------------------------
# Project models
# ---------------------------------------------------------------------------

class ProjectProduct(BaseModel):
    """Association of a project with a catalog product."""

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    id: Optional[str] = Field(default=None, description="Association identifier")
    product_id: Optional[str] = Field(default=None, description="Catalog product id")
    quantity: Optional[float] = Field(default=None, description="Plain numeric fallback")
    dynamic_params: Optional[dict[str, Any]] = Field(
        default=None, description="Untrusted user-entered parameter values"
    )
    product: Optional[Product] = Field(
        default=None, description="Embedded catalog product, when joined upstream"
    )

    @field_validator("id", "product_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("dynamic_params", mode="before")
    @classmethod
    def _mapping_or_none(cls, value: Any) -> Optional[dict[str, Any]]:
        return value if isinstance(value, dict) else None


class Project(BaseModel):
    """A renovation project and its product lines."""

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    id: str = Field(..., description="Project identifier")
    status: Optional[str] = Field(default=None, description="Workflow status")
    client_name: Optional[str] = Field(default=None)
    building_type: Optional[str] = Field(
        default=None, description="Must equal a lookup-table key to contribute"
    )
    surface_batiment_m2: Optional[float] = Field(
        default=None, description="Building floor area in m²"
    )
    project_products: list[ProjectProduct] = Field(default_factory=list)

    @field_validator("project_products", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Delegate(BaseModel):
    """Certificate buyer supplying the market price per MWh."""

    model_config = {"frozen": False, "populate_by_name": True, "extra": "ignore"}

    name: Optional[str] = Field(default=None)
    price_eur_per_mwh: Optional[float] = Field(
        default=None, description="Market price in EUR per MWh cumac"
    )


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------

class MultiplierResolution(BaseModel):
    """The quantity driving a line's computation, with its provenance."""

    value: float = Field(..., gt=0)
    field_name: Optional[str] = Field(default=None)
    label: str
    unit: Optional[str] = Field(default=None)


class LineResult(BaseModel):
    """Valorisation of one project-product line."""

    project_product_id: Optional[str] = None
    product_id: Optional[str] = None
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    status: LineStatus

    multiplier_value: Optional[float] = Field(
        default=None, description="Resolved multiplier, rounded to 2 decimals"
    )
    multiplier_field_name: Optional[str] = None
    multiplier_label: Optional[str] = None
    multiplier_unit: Optional[str] = None

    kwh_cumac_base: Optional[float] = Field(
        default=None, description="kWh cumac read from the lookup table"
    )
    valorisation_base: Optional[float] = Field(
        default=None, description="EUR per multiplier unit, rounded to 2 decimals"
    )
    total: Optional[float] = Field(
        default=None, description="Line prime in EUR, rounded to 2 decimals"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_included(self) -> bool:
        return self.status is LineStatus.included


class ProjectPrimeResult(BaseModel):
    """Prime of a single project.

    ``total_prime`` is ``None`` when no line could be valorised, which is
    distinct from a legitimate total of zero.
    """

    project_id: Optional[str] = None
    total_prime: Optional[float] = None
    products: list[LineResult] = Field(default_factory=list)
    skipped: list[LineResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_applicable(self) -> bool:
        return self.total_prime is not None


class EnergyBreakdownEntry(BaseModel):
    """Energy savings of one category."""

    category: str
    mwh: float


class EnergyAggregationResult(BaseModel):
    """Portfolio energy savings grouped by category."""

    total_mwh: float = 0.0
    breakdown: list[EnergyBreakdownEntry] = Field(default_factory=list)
