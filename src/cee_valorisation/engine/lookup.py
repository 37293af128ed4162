# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""kWh cumac lookup strategies.

The catalog stores kWh cumac values per building type, either as a single
flat value or as a pair banded on the building surface (below 400 m² /
400 m² and above).  A lookup strategy turns a product, a building type and
an optional surface into the kWh cumac base of one line.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from cee_valorisation.data.models import KwhCumacEntry, Product, SurfaceBand
from cee_valorisation.engine.constants import SURFACE_BAND_THRESHOLD_M2
from cee_valorisation.engine.numeric import is_finite


@runtime_checkable
class KwhLookup(Protocol):
    """Protocol that all lookup strategies must satisfy."""

    def lookup(
        self,
        product: Product,
        building_type: Optional[str],
        surface_m2: Optional[float] = None,
    ) -> Optional[float]:
        """Return the kWh cumac base, or ``None`` when nothing applies."""
        ...


class FlatLookup:
    """Exact building-type match on the flat ``kwh_cumac`` column."""

    def lookup(
        self,
        product: Product,
        building_type: Optional[str],
        surface_m2: Optional[float] = None,
    ) -> Optional[float]:
        entry = product.kwh_entry_for(building_type)
        if entry is None or not is_finite(entry.kwh_cumac):
            return None
        return entry.kwh_cumac


class SurfaceBandedLookup:
    """Exact building-type match, value picked by building-surface band.

    When the surface is unknown the configured *unknown_band* is used.
    When the selected band holds no value the flat column is read; the
    other band never stands in for it.
    """

    def __init__(self, unknown_band: SurfaceBand) -> None:
        self.unknown_band = SurfaceBand(unknown_band)

    def band_for(self, surface_m2: Optional[float]) -> SurfaceBand:
        if not is_finite(surface_m2) or surface_m2 <= 0:
            return self.unknown_band
        if surface_m2 < SURFACE_BAND_THRESHOLD_M2:
            return SurfaceBand.lt_400
        return SurfaceBand.gte_400

    def lookup(
        self,
        product: Product,
        building_type: Optional[str],
        surface_m2: Optional[float] = None,
    ) -> Optional[float]:
        entry = product.kwh_entry_for(building_type)
        if entry is None:
            return None
        band = self.band_for(surface_m2)
        for candidate in self._candidates(entry, band):
            if is_finite(candidate):
                return candidate
        return None

    @staticmethod
    def _candidates(entry: KwhCumacEntry, band: SurfaceBand) -> tuple[Optional[float], ...]:
        return (entry.value_for_band(band), entry.kwh_cumac)


LOOKUP_REGISTRY: dict[str, type] = {
    "flat": FlatLookup,
    "surface_banded": SurfaceBandedLookup,
}


def get_lookup(name: str, unknown_band: Optional[SurfaceBand] = None) -> KwhLookup:
    """Build a registered lookup strategy by name."""
    if name not in LOOKUP_REGISTRY:
        available = ", ".join(sorted(LOOKUP_REGISTRY.keys()))
        raise KeyError(f"Unknown lookup strategy '{name}'. Available: {available}")
    if name == "surface_banded":
        if unknown_band is None:
            raise ValueError("surface_banded lookup requires an unknown_surface_band")
        return SurfaceBandedLookup(unknown_band)
    return LOOKUP_REGISTRY[name]()
