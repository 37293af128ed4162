"""Tests for core Pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cee_valorisation.data.models import (
    KwhCumacEntry,
    LineResult,
    LineStatus,
    Product,
    Project,
    ProjectPrimeResult,
    ProjectProduct,
    SurfaceBand,
)


class TestProduct:
    """Tests for catalog product parsing."""

    def test_schema_list(self):
        product = Product(
            id="p",
            params_schema=[{"name": "surface_facturee", "label": "Surface facturée", "unit": "m²"}],
        )
        field = product.find_param_field("surface_facturee")
        assert field.label == "Surface facturée"
        assert field.unit == "m²"

    def test_schema_wrapped_in_fields(self):
        product = Product(id="p", params_schema={"fields": [{"name": "nb"}]})
        assert [f.name for f in product.params_schema] == ["nb"]

    @pytest.mark.parametrize("schema", [None, "garbage", {"other": []}, 3])
    def test_unusable_schema_is_empty(self, schema):
        assert Product(id="p", params_schema=schema).params_schema == []

    def test_non_dict_schema_entries_dropped(self):
        product = Product(id="p", params_schema=[{"name": "a"}, "b", None, 4])
        assert [f.name for f in product.params_schema] == ["a"]

    def test_non_string_label_ignored(self):
        product = Product(id="p", params_schema=[{"name": "a", "label": 12}])
        assert product.params_schema[0].label is None

    def test_null_lookup_entries_dropped(self):
        product = Product(
            id="p", kwh_cumac_values=[None, {"building_type": "Bureaux", "kwh_cumac": 10}]
        )
        assert len(product.kwh_cumac_values) == 1

    def test_kwh_entry_exact_match(self):
        product = Product(
            id="p", kwh_cumac_values=[{"building_type": "Bureaux", "kwh_cumac": 10}]
        )
        assert product.kwh_entry_for("Bureaux").kwh_cumac == 10
        assert product.kwh_entry_for("bureaux") is None
        assert product.kwh_entry_for(None) is None

    def test_duplicate_building_type(self):
        with pytest.raises(ValidationError):
            Product(
                id="p",
                kwh_cumac_values=[
                    {"building_type": "Bureaux", "kwh_cumac": 1},
                    {"building_type": "Bureaux", "kwh_cumac": 2},
                ],
            )


class TestKwhCumacEntry:
    def test_value_for_band(self):
        entry = KwhCumacEntry(building_type="B", kwh_cumac_lt_400=1, kwh_cumac_gte_400=2)
        assert entry.value_for_band(SurfaceBand.lt_400) == 1
        assert entry.value_for_band(SurfaceBand.gte_400) == 2


class TestProjectProduct:
    def test_integer_ids_become_strings(self):
        line = ProjectProduct(id=7, product_id=42)
        assert line.id == "7"
        assert line.product_id == "42"

    def test_non_mapping_params_become_none(self):
        assert ProjectProduct(dynamic_params=["a"]).dynamic_params is None


class TestProject:
    def test_null_lines_become_empty(self):
        assert Project(id="x", project_products=None).project_products == []


class TestResults:
    def test_line_status_labels(self):
        assert LineStatus.excluded_category.label == "category excluded"
        assert all(status.label for status in LineStatus)

    def test_line_is_included(self):
        assert LineResult(status=LineStatus.included).is_included
        assert not LineResult(status=LineStatus.missing_lookup).is_included

    def test_prime_result_applicability(self):
        assert not ProjectPrimeResult().is_applicable
        assert ProjectPrimeResult(total_prime=0.0).is_applicable

    def test_serialisation_keeps_null_total(self):
        dumped = ProjectPrimeResult(project_id="p").model_dump()
        assert dumped["total_prime"] is None
        assert dumped["is_applicable"] is False
