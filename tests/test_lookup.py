# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for kWh cumac lookup strategies."""

from __future__ import annotations

import pytest

from cee_valorisation.data.models import SurfaceBand
from cee_valorisation.engine.lookup import (
    LOOKUP_REGISTRY,
    FlatLookup,
    KwhLookup,
    SurfaceBandedLookup,
    get_lookup,
)

from conftest import make_product


def banded_product(lt: float | None, gte: float | None, flat: float | None = None):
    return make_product(
        kwh_cumac_values=[
            {
                "building_type": "Bureaux",
                "kwh_cumac": flat,
                "kwh_cumac_lt_400": lt,
                "kwh_cumac_gte_400": gte,
            }
        ]
    )


class TestFlatLookup:
    def test_exact_match(self):
        product = make_product()
        assert FlatLookup().lookup(product, "Bureaux") == 1000

    def test_building_type_is_case_sensitive(self):
        product = make_product()
        assert FlatLookup().lookup(product, "bureaux") is None

    def test_missing_building_type(self):
        product = make_product()
        assert FlatLookup().lookup(product, None) is None
        assert FlatLookup().lookup(product, "Entrepot") is None

    def test_banded_only_entry_has_no_flat_value(self):
        product = banded_product(lt=900, gte=1200)
        assert FlatLookup().lookup(product, "Bureaux") is None


class TestSurfaceBandedLookup:
    def test_below_threshold(self):
        lookup = SurfaceBandedLookup(SurfaceBand.gte_400)
        assert lookup.lookup(banded_product(900, 1200), "Bureaux", 350) == 900

    def test_at_threshold_uses_upper_band(self):
        lookup = SurfaceBandedLookup(SurfaceBand.lt_400)
        assert lookup.lookup(banded_product(900, 1200), "Bureaux", 400) == 1200

    @pytest.mark.parametrize("surface", [None, 0, -10, float("nan")])
    def test_unknown_surface_uses_configured_band(self, surface):
        product = banded_product(900, 1200)
        assert SurfaceBandedLookup(SurfaceBand.lt_400).lookup(product, "Bureaux", surface) == 900
        assert SurfaceBandedLookup(SurfaceBand.gte_400).lookup(product, "Bureaux", surface) == 1200

    def test_other_band_never_used(self):
        lookup = SurfaceBandedLookup(SurfaceBand.lt_400)
        assert lookup.lookup(banded_product(None, 1100), "Bureaux", 200) is None
        assert lookup.lookup(banded_product(900, None), "Bureaux", 500) is None

    def test_falls_back_to_flat_value(self):
        lookup = SurfaceBandedLookup(SurfaceBand.lt_400)
        assert lookup.lookup(banded_product(None, None, flat=700), "Bureaux", 200) == 700
        assert lookup.lookup(banded_product(None, 1100, flat=700), "Bureaux", 200) == 700

    def test_no_value_at_all(self):
        lookup = SurfaceBandedLookup(SurfaceBand.lt_400)
        assert lookup.lookup(banded_product(None, None), "Bureaux", 200) is None


class TestRegistry:
    def test_registered_names(self):
        assert set(LOOKUP_REGISTRY) == {"flat", "surface_banded"}

    def test_get_flat(self):
        assert isinstance(get_lookup("flat"), FlatLookup)

    def test_get_banded(self):
        lookup = get_lookup("surface_banded", SurfaceBand.gte_400)
        assert isinstance(lookup, SurfaceBandedLookup)
        assert lookup.unknown_band is SurfaceBand.gte_400

    def test_banded_requires_band(self):
        with pytest.raises(ValueError, match="unknown_surface_band"):
            get_lookup("surface_banded")

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Unknown lookup strategy"):
            get_lookup("typology")

    def test_strategies_satisfy_protocol(self):
        assert isinstance(FlatLookup(), KwhLookup)
        assert isinstance(SurfaceBandedLookup(SurfaceBand.lt_400), KwhLookup)
