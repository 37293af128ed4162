# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""CEE Valorisation - prime CEE and energy savings engine."""

__version__ = "0.1.0"

from cee_valorisation.data.models import (
    Delegate,
    EnergyAggregationResult,
    EnergyBreakdownEntry,
    LineResult,
    LineStatus,
    MultiplierResolution,
    Product,
    Project,
    ProjectPrimeResult,
    ProjectProduct,
)
from cee_valorisation.config import EngineConfig, LookupKind, load_config
from cee_valorisation.engine.energy import aggregate_energy_by_category
from cee_valorisation.engine.multiplier import MultiplierProfile, resolve_multiplier
from cee_valorisation.engine.prime import PrimeEngine, compute_project_prime
from cee_valorisation.data.loader import Portfolio, load_portfolio

__all__ = [
    "Delegate",
    "EnergyAggregationResult",
    "EnergyBreakdownEntry",
    "EngineConfig",
    "LineResult",
    "LineStatus",
    "LookupKind",
    "MultiplierProfile",
    "MultiplierResolution",
    "Portfolio",
    "PrimeEngine",
    "Product",
    "Project",
    "ProjectPrimeResult",
    "ProjectProduct",
    "aggregate_energy_by_category",
    "compute_project_prime",
    "load_config",
    "load_portfolio",
    "resolve_multiplier",
]
