# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Multiplier resolution, kWh cumac lookups and valorisation."""

from cee_valorisation.engine.lookup import FlatLookup, SurfaceBandedLookup, get_lookup
from cee_valorisation.engine.multiplier import MultiplierProfile, resolve_multiplier

__all__ = [
    "FlatLookup",
    "MultiplierProfile",
    "SurfaceBandedLookup",
    "get_lookup",
    "resolve_multiplier",
]
