# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Per-line valorisation.

Valorisation CEE per unit = kWh cumac × bonification × delegate price / 1000
Prime of a line          = valorisation per unit × multiplier

A line that cannot be valorised is never an error: it is tagged with the
:class:`~cee_valorisation.data.models.LineStatus` explaining why it was
dropped, and the rest of the project is computed normally.
"""

from __future__ import annotations

import math
from typing import Mapping, NamedTuple, Optional

from cee_valorisation.config import EngineConfig
from cee_valorisation.data.models import (
    LineResult,
    LineStatus,
    MultiplierResolution,
    Product,
    ProjectProduct,
)
from cee_valorisation.engine.constants import KWH_PER_MWH
from cee_valorisation.engine.lookup import KwhLookup
from cee_valorisation.engine.multiplier import resolve_multiplier
from cee_valorisation.engine.numeric import is_finite, round_half_up


class LineEvaluation(NamedTuple):
    """Everything known about a line before money is involved."""

    status: LineStatus
    project_product: ProjectProduct
    product: Optional[Product] = None
    kwh_cumac_base: Optional[float] = None
    multiplier: Optional[MultiplierResolution] = None


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

def compute_valorisation_base(
    kwh_cumac_base: float, bonification: float, price_per_mwh: float
) -> Optional[float]:
    """EUR value of one multiplier unit, or ``None`` if not strictly positive."""
    if not (is_finite(kwh_cumac_base) and is_finite(bonification) and is_finite(price_per_mwh)):
        return None
    base = (kwh_cumac_base * bonification * price_per_mwh) / KWH_PER_MWH
    if not math.isfinite(base) or base <= 0:
        return None
    return base


def compute_line_value(
    kwh_cumac_base: float,
    bonification: float,
    price_per_mwh: float,
    multiplier_value: float,
) -> Optional[float]:
    """Unrounded prime of one line, or ``None`` when the line contributes nothing."""
    base = compute_valorisation_base(kwh_cumac_base, bonification, price_per_mwh)
    if base is None or not is_finite(multiplier_value):
        return None
    total = base * multiplier_value
    if not math.isfinite(total) or total <= 0:
        return None
    return total


def compute_line_mwh(kwh_cumac_base: float, multiplier_value: float) -> Optional[float]:
    """Energy savings of one line in MWh cumac, or ``None`` if not positive."""
    if not (is_finite(kwh_cumac_base) and is_finite(multiplier_value)):
        return None
    mwh = (kwh_cumac_base / KWH_PER_MWH) * multiplier_value
    if not math.isfinite(mwh) or mwh <= 0:
        return None
    return mwh


def resolve_price(price_per_mwh: Optional[float]) -> float:
    """Delegate prices that are missing, non-finite or non-positive count as 0."""
    if not is_finite(price_per_mwh) or price_per_mwh <= 0:
        return 0.0
    return float(price_per_mwh)


# ---------------------------------------------------------------------------
# Line evaluation
# ---------------------------------------------------------------------------

def find_product(
    project_product: ProjectProduct,
    catalog: Optional[Mapping[str, Product]] = None,
) -> Optional[Product]:
    """Return the embedded product, else the catalog entry for ``product_id``."""
    if project_product.product is not None:
        return project_product.product
    if catalog and project_product.product_id:
        return catalog.get(project_product.product_id)
    return None


def evaluate_line(
    project_product: ProjectProduct,
    building_type: Optional[str],
    config: EngineConfig,
    lookup: KwhLookup,
    *,
    surface_m2: Optional[float] = None,
    catalog: Optional[Mapping[str, Product]] = None,
) -> LineEvaluation:
    """Run the exclusion, lookup and multiplier steps for one line."""
    product = find_product(project_product, catalog)
    if product is None:
        return LineEvaluation(LineStatus.unknown_product, project_product)

    if config.is_excluded(product.category):
        return LineEvaluation(LineStatus.excluded_category, project_product, product)

    kwh = lookup.lookup(product, building_type, surface_m2)
    if kwh is None:
        return LineEvaluation(LineStatus.missing_lookup, project_product, product)

    multiplier = resolve_multiplier(product, project_product, config.multiplier_profile)
    if multiplier is None:
        return LineEvaluation(LineStatus.unresolved_multiplier, project_product, product, kwh)

    return LineEvaluation(LineStatus.included, project_product, product, kwh, multiplier)


def to_line_result(
    evaluation: LineEvaluation,
    status: Optional[LineStatus] = None,
    valorisation_base: Optional[float] = None,
    total: Optional[float] = None,
) -> LineResult:
    """Build the public result of a line, rounding monetary values."""
    product = evaluation.product
    multiplier = evaluation.multiplier
    pp = evaluation.project_product
    return LineResult(
        project_product_id=pp.id,
        product_id=product.id if product is not None else pp.product_id,
        product_code=product.code if product is not None else None,
        product_name=product.name if product is not None else None,
        category=product.category if product is not None else None,
        status=status or evaluation.status,
        multiplier_value=round_half_up(multiplier.value) if multiplier else None,
        multiplier_field_name=multiplier.field_name if multiplier else None,
        multiplier_label=multiplier.label if multiplier else None,
        multiplier_unit=multiplier.unit if multiplier else None,
        kwh_cumac_base=evaluation.kwh_cumac_base,
        valorisation_base=(
            round_half_up(valorisation_base) if valorisation_base is not None else None
        ),
        total=round_half_up(total) if total is not None else None,
    )
