# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Project prime computation.

Folds the line valorisations of one project into its total prime CEE.
Line totals are rounded to the cent first; the project total is the sum of
those rounded totals, rounded once more to absorb float noise.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from cee_valorisation.config import EngineConfig
from cee_valorisation.data.models import (
    Delegate,
    LineResult,
    LineStatus,
    Product,
    Project,
    ProjectPrimeResult,
    ProjectProduct,
)
from cee_valorisation.engine.lookup import KwhLookup
from cee_valorisation.engine.numeric import round_half_up
from cee_valorisation.engine.valorisation import (
    compute_line_value,
    compute_valorisation_base,
    evaluate_line,
    resolve_price,
    to_line_result,
)

logger = logging.getLogger(__name__)


def compute_project_prime(
    project_products: Optional[Iterable[ProjectProduct]],
    building_type: Optional[str],
    delegate: Optional[Delegate],
    bonification: float,
    *,
    config: EngineConfig,
    catalog: Optional[Mapping[str, Product]] = None,
    surface_m2: Optional[float] = None,
    lookup: Optional[KwhLookup] = None,
) -> ProjectPrimeResult:
    """Compute the prime CEE of one project.

    Args:
        project_products: The project's product lines.
        building_type: Key matched against each product's kWh cumac table.
        delegate: Certificate buyer; a missing or non-positive price makes
            every line non-positive.
        bonification: Uplift factor applied to every line.
        config: Exclusions, lookup strategy and multiplier profile.
        catalog: Products by id, for lines that do not embed their product.
        surface_m2: Building surface, read by size-banded lookups.
        lookup: Prebuilt lookup strategy; built from *config* when omitted.

    Returns:
        A :class:`ProjectPrimeResult`.  ``total_prime`` is ``None`` when no
        line survived, so callers can tell "not applicable" from a real 0.
    """
    lookup = lookup or config.build_lookup()
    price = resolve_price(delegate.price_eur_per_mwh if delegate is not None else None)

    included: list[LineResult] = []
    skipped: list[LineResult] = []
    running_total = 0.0

    for project_product in project_products or ():
        evaluation = evaluate_line(
            project_product,
            building_type,
            config,
            lookup,
            surface_m2=surface_m2,
            catalog=catalog,
        )
        if evaluation.status is not LineStatus.included:
            logger.debug(
                "Skipping line %s (product %s): %s",
                project_product.id,
                project_product.product_id,
                evaluation.status.value,
            )
            skipped.append(to_line_result(evaluation))
            continue

        base = compute_valorisation_base(evaluation.kwh_cumac_base, bonification, price)
        total = compute_line_value(
            evaluation.kwh_cumac_base, bonification, price, evaluation.multiplier.value
        )
        if base is None or total is None:
            logger.debug(
                "Skipping line %s (product %s): non-positive valorisation",
                project_product.id,
                evaluation.product.id,
            )
            skipped.append(to_line_result(evaluation, status=LineStatus.non_positive_value))
            continue

        line = to_line_result(evaluation, valorisation_base=base, total=total)
        running_total += line.total
        included.append(line)

    if not included:
        return ProjectPrimeResult(total_prime=None, products=[], skipped=skipped)

    return ProjectPrimeResult(
        total_prime=round_half_up(running_total),
        products=included,
        skipped=skipped,
    )


class PrimeEngine:
    """Computes primes for whole projects with one configuration.

    Usage::

        engine = PrimeEngine(config)
        result = engine.compute(project, delegate)
    """

    def __init__(
        self,
        config: EngineConfig,
        catalog: Optional[Mapping[str, Product]] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.lookup = config.build_lookup()

    def compute(self, project: Project, delegate: Optional[Delegate]) -> ProjectPrimeResult:
        """Compute the prime of *project* priced by *delegate*."""
        result = compute_project_prime(
            project.project_products,
            project.building_type,
            delegate,
            self.config.bonification,
            config=self.config,
            catalog=self.catalog,
            surface_m2=project.surface_batiment_m2,
            lookup=self.lookup,
        )
        return result.model_copy(update={"project_id": project.id})

    def compute_all(
        self, projects: Iterable[Project], delegate: Optional[Delegate]
    ) -> list[ProjectPrimeResult]:
        return [self.compute(project, delegate) for project in projects]
