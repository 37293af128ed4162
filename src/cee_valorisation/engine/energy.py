# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Portfolio energy aggregation.

Sums the certified energy savings (MWh cumac) of many projects and groups
them by product category for dashboard reporting.  Line MWh is
``kWh cumac / 1000 × multiplier``; prices and bonification play no part.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Optional

from cee_valorisation.config import EngineConfig
from cee_valorisation.data.models import (
    EnergyAggregationResult,
    EnergyBreakdownEntry,
    LineStatus,
    Product,
    Project,
)
from cee_valorisation.engine.constants import DEFAULT_CATEGORY
from cee_valorisation.engine.lookup import KwhLookup
from cee_valorisation.engine.numeric import round_half_up
from cee_valorisation.engine.valorisation import compute_line_mwh, evaluate_line

logger = logging.getLogger(__name__)

ProjectPredicate = Callable[[Project], bool]


def normalize_category(category: Optional[str]) -> str:
    """Trimmed category, or the ``"Autres"`` bucket when blank."""
    trimmed = category.strip() if category else ""
    return trimmed or DEFAULT_CATEGORY


def project_energy_by_category(
    project: Project,
    config: EngineConfig,
    lookup: KwhLookup,
    catalog: Optional[Mapping[str, Product]] = None,
) -> dict[str, float]:
    """Unrounded MWh per category for a single project."""
    totals: dict[str, float] = {}
    if not project.building_type:
        return totals

    for project_product in project.project_products:
        evaluation = evaluate_line(
            project_product,
            project.building_type,
            config,
            lookup,
            surface_m2=project.surface_batiment_m2,
            catalog=catalog,
        )
        if evaluation.status is not LineStatus.included:
            continue
        mwh = compute_line_mwh(evaluation.kwh_cumac_base, evaluation.multiplier.value)
        if mwh is None:
            continue
        category = normalize_category(evaluation.product.category)
        totals[category] = totals.get(category, 0.0) + mwh
    return totals


def aggregate_energy_by_category(
    projects: Iterable[Project],
    *,
    config: EngineConfig,
    should_include_project: Optional[ProjectPredicate] = None,
    catalog: Optional[Mapping[str, Product]] = None,
) -> EnergyAggregationResult:
    """Aggregate energy savings across *projects*, grouped by category.

    Args:
        projects: Projects with their product lines.
        config: Exclusions, lookup strategy and multiplier profile.
        should_include_project: Optional filter, e.g. accepted projects only.
        catalog: Products by id, for lines that do not embed their product.

    Returns:
        The total MWh and a breakdown sorted by MWh descending, holding
        only strictly positive categories.  Each figure is rounded to two
        decimals from its own unrounded sum.
    """
    lookup = config.build_lookup()
    category_totals: dict[str, float] = {}

    for project in projects:
        if should_include_project is not None and not should_include_project(project):
            continue
        if not project.building_type:
            logger.debug("Project %s has no building type, skipped", project.id)
            continue

        per_category = project_energy_by_category(project, config, lookup, catalog)
        if sum(per_category.values()) <= 0:
            continue

        for category, mwh in per_category.items():
            category_totals[category] = category_totals.get(category, 0.0) + mwh

    breakdown = [
        EnergyBreakdownEntry(category=category, mwh=round_half_up(value))
        for category, value in category_totals.items()
    ]
    breakdown = sorted(
        (entry for entry in breakdown if entry.mwh > 0),
        key=lambda entry: entry.mwh,
        reverse=True,
    )

    return EnergyAggregationResult(
        total_mwh=round_half_up(sum(category_totals.values())),
        breakdown=breakdown,
    )
