# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Standalone valorisation calculator for a single configured line.

Used by quote and site screens where the kWh cumac, multiplier and price
are already known (possibly overridden by hand) and no catalog lookup is
involved.  Every value goes through an override → direct value → default
chain; the results are expressed both in MWh cumac and in euros.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from cee_valorisation.engine.constants import KWH_PER_MWH
from cee_valorisation.engine.numeric import round_half_up, to_number, to_positive_number

DEFAULT_BONIFICATION = 2
DEFAULT_COEFFICIENT = 1
LED_REFERENCE_WATT = 250

QUANTITY_KEYS = ("quantity", "quantite", "Quantite", "Quantité", "QUANTITY")
LED_WATT_KEYS = ("led_watt", "ledWatt", "LED_WATT")
LED_COUNT_KEYS = (
    "nombre_led",
    "nombreLed",
    "NOMBRE_LED",
    "Nombre Led",
    "nombre_de_led",
    "nombreDeLed",
    "NOMBRE_DE_LED",
)


class FormulaTemplate(str, Enum):
    """Built-in valorisation formulas.

    ``standard`` is ``kWh x bonification x coefficient / 1000``.
    ``lighting_led`` reads kWh cumac per luminaire of the reference
    wattage, scales it by ``led_watt / 250`` and counts luminaires from
    the ``nombre_led`` family of keys.
    """

    standard = "standard"
    lighting_led = "lighting_led"


class ValorisationOverrides(BaseModel):
    """Hand-entered values that win over the configured ones."""

    kwh_cumac: Optional[float] = None
    bonification: Optional[float] = None
    coefficient: Optional[float] = None
    multiplier: Optional[float] = None
    delegate_price_eur_per_mwh: Optional[float] = None
    valorisation_tarif: Optional[float] = None
    led_watt: Optional[float] = None
    mwh_divisor: Optional[float] = None


class ValorisationInput(BaseModel):
    kwh_cumac: Optional[float] = None
    bonification: Optional[float] = None
    coefficient: Optional[float] = None
    multiplier: Optional[float] = None
    quantity: Optional[float] = None
    delegate_price_eur_per_mwh: Optional[float] = None
    dynamic_params: dict[str, Any] = Field(default_factory=dict)
    formula: FormulaTemplate = FormulaTemplate.standard
    overrides: ValorisationOverrides = Field(default_factory=ValorisationOverrides)


class ValorisationMwhResult(BaseModel):
    multiplier: float
    valorisation_per_unit_mwh: float
    valorisation_total_mwh: float


class ValorisationEurResult(ValorisationMwhResult):
    delegate_price: float
    valorisation_per_unit_eur: float
    valorisation_total_eur: float


class PrimeCeeResult(ValorisationEurResult):
    total_prime: float


class ProjectCeeTotals(BaseModel):
    total_prime: float = 0.0
    total_valorisation_eur: float = 0.0
    total_valorisation_mwh: float = 0.0


# ---------------------------------------------------------------------------
# Resolution chains
# ---------------------------------------------------------------------------

def _first_positive(*candidates: Any) -> Optional[float]:
    for candidate in candidates:
        value = to_positive_number(candidate)
        if value is not None:
            return value
    return None


def _positive_from_params(params: dict[str, Any], keys: Iterable[str]) -> Optional[float]:
    for key in keys:
        if key in params:
            value = to_positive_number(params[key])
            if value is not None:
                return value
    return None


def _resolve_kwh(data: ValorisationInput) -> float:
    return _first_positive(data.overrides.kwh_cumac, data.kwh_cumac) or 0.0


def _resolve_bonification(data: ValorisationInput) -> float:
    return _first_positive(data.overrides.bonification, data.bonification) or DEFAULT_BONIFICATION


def _resolve_coefficient(data: ValorisationInput) -> float:
    return _first_positive(data.overrides.coefficient, data.coefficient) or DEFAULT_COEFFICIENT


def _resolve_multiplier(data: ValorisationInput) -> float:
    direct = _first_positive(data.overrides.multiplier, data.multiplier, data.quantity)
    if direct is not None:
        return direct
    keys = LED_COUNT_KEYS if data.formula is FormulaTemplate.lighting_led else QUANTITY_KEYS
    return _positive_from_params(data.dynamic_params, keys) or 0.0


def _resolve_divisor(data: ValorisationInput) -> float:
    return _first_positive(data.overrides.mwh_divisor) or KWH_PER_MWH


def _resolve_led_watt(data: ValorisationInput) -> float:
    return (
        _first_positive(data.overrides.led_watt)
        or _positive_from_params(data.dynamic_params, LED_WATT_KEYS)
        or LED_REFERENCE_WATT
    )


def _resolve_delegate_price(data: ValorisationInput) -> float:
    for candidate in (
        data.overrides.valorisation_tarif,
        data.overrides.delegate_price_eur_per_mwh,
        data.delegate_price_eur_per_mwh,
    ):
        value = to_number(candidate)
        if value is not None and value >= 0:
            return value
    return 0.0


def _per_unit_mwh(data: ValorisationInput, kwh: float) -> float:
    bonification = _resolve_bonification(data)
    divisor = _resolve_divisor(data)
    coefficient = _resolve_coefficient(data)
    if data.formula is FormulaTemplate.lighting_led:
        # kWh cumac is given per luminaire of the reference wattage
        adjusted = kwh * bonification * _resolve_led_watt(data) / LED_REFERENCE_WATT
        return adjusted * coefficient / divisor
    return kwh * bonification * coefficient / divisor


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_valorisation_mwh(data: ValorisationInput) -> ValorisationMwhResult:
    """Valorisation of the line in MWh cumac, per unit and in total."""
    kwh = _resolve_kwh(data)
    multiplier = _resolve_multiplier(data)
    empty = ValorisationMwhResult(
        multiplier=round_half_up(multiplier),
        valorisation_per_unit_mwh=0.0,
        valorisation_total_mwh=0.0,
    )
    if kwh <= 0 or multiplier <= 0:
        return empty

    per_unit = _per_unit_mwh(data, kwh)
    if not math.isfinite(per_unit) or per_unit <= 0:
        return empty

    return ValorisationMwhResult(
        multiplier=round_half_up(multiplier),
        valorisation_per_unit_mwh=round_half_up(per_unit),
        valorisation_total_mwh=round_half_up(per_unit * multiplier),
    )


def compute_valorisation_eur(data: ValorisationInput) -> ValorisationEurResult:
    """MWh valorisation priced at the delegate (or overridden) tariff."""
    mwh = compute_valorisation_mwh(data)
    price = _resolve_delegate_price(data)
    return ValorisationEurResult(
        **mwh.model_dump(),
        delegate_price=round_half_up(price),
        valorisation_per_unit_eur=round_half_up(mwh.valorisation_per_unit_mwh * price),
        valorisation_total_eur=round_half_up(mwh.valorisation_total_mwh * price),
    )


def compute_prime_cee_eur(data: ValorisationInput) -> PrimeCeeResult:
    valorisation = compute_valorisation_eur(data)
    return PrimeCeeResult(
        **valorisation.model_dump(),
        total_prime=valorisation.valorisation_total_eur,
    )


def compute_project_cee_totals(
    computations: Iterable[Optional[PrimeCeeResult]],
) -> ProjectCeeTotals:
    """Sum line results, rounding the running totals at each step."""
    totals = ProjectCeeTotals()
    for item in computations:
        if item is None:
            continue
        totals = ProjectCeeTotals(
            total_prime=round_half_up(totals.total_prime + item.total_prime),
            total_valorisation_eur=round_half_up(
                totals.total_valorisation_eur + item.valorisation_total_eur
            ),
            total_valorisation_mwh=round_half_up(
                totals.total_valorisation_mwh + item.valorisation_total_mwh
            ),
        )
    return totals
