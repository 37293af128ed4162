# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Multiplier resolution.

Reduces a project-product's dynamic parameters (plus its plain quantity)
to the single positive number that scales a product's per-unit
valorisation, e.g. the billed surface of an insulation job or the number
of luminaires of a lighting retrofit.

Resolution order, first positive value wins:

1. schema targets (:data:`SCHEMA_TARGETS`), matched on the normalised name
   or label of the product's parameter schema fields;
2. the fallback keys of the selected :class:`MultiplierProfile`;
3. remaining dynamic params, for profiles that scan them;
4. the plain ``quantity`` of the association.

Only the ``valorisation`` profile reports a unit, read from the schema
field of the key it resolved.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple, Optional

from cee_valorisation.data.models import (
    MultiplierResolution,
    ParamField,
    Product,
    ProjectProduct,
)
from cee_valorisation.engine.constants import (
    PRIME_FALLBACK_KEYS,
    QUANTITY_FIELD,
    QUANTITY_LABEL,
    SCHEMA_TARGETS,
    VALORISATION_FALLBACK_KEYS,
    FallbackKey,
    SchemaTarget,
)
from cee_valorisation.engine.numeric import (
    label_from_key,
    normalize_text,
    to_positive_number,
)


class MultiplierProfile(str, Enum):
    """Which fallback chain the resolver walks after the schema targets."""

    prime = "prime"
    valorisation = "valorisation"


class FallbackChain(NamedTuple):
    keys: tuple[FallbackKey, ...]
    scan_remaining: bool
    schema_units: bool


FALLBACK_CHAINS: dict[MultiplierProfile, FallbackChain] = {
    MultiplierProfile.prime: FallbackChain(
        PRIME_FALLBACK_KEYS, scan_remaining=False, schema_units=False
    ),
    MultiplierProfile.valorisation: FallbackChain(
        VALORISATION_FALLBACK_KEYS, scan_remaining=True, schema_units=True
    ),
}


def _matches_target(field: ParamField, target: SchemaTarget) -> bool:
    name = normalize_text(field.name) if field.name else ""
    label = normalize_text(field.label) if field.label else ""
    for alias in target.aliases:
        normalized = normalize_text(alias)
        if name == normalized or label == normalized:
            return True
    return False


def _find_schema_field(product: Product, target: SchemaTarget) -> Optional[ParamField]:
    for field in product.params_schema:
        if _matches_target(field, target):
            return field
    return None


def _from_schema_targets(
    product: Product, params: dict[str, Any]
) -> Optional[MultiplierResolution]:
    for target in SCHEMA_TARGETS:
        field = _find_schema_field(product, target)
        if field is None or not field.name:
            continue
        value = to_positive_number(params.get(field.name))
        if value is None:
            continue
        return MultiplierResolution(
            value=value,
            field_name=field.name,
            label=field.label or target.fallback_label,
        )
    return None


def _labelled(
    product: Product,
    key: str,
    value: float,
    label: Optional[str],
    with_unit: bool,
) -> MultiplierResolution:
    field = product.find_param_field(key)
    if label is None:
        label = field.label if field is not None and field.label else label_from_key(key)
    return MultiplierResolution(
        value=value,
        field_name=key,
        label=label,
        unit=field.unit if with_unit and field is not None else None,
    )


def _from_fallback_keys(
    product: Product, params: dict[str, Any], chain: FallbackChain
) -> Optional[MultiplierResolution]:
    for fallback in chain.keys:
        if fallback.key not in params:
            continue
        value = to_positive_number(params[fallback.key])
        if value is not None:
            return _labelled(
                product, fallback.key, value, fallback.label, chain.schema_units
            )

    if chain.scan_remaining:
        for key, raw in params.items():
            value = to_positive_number(raw)
            if value is not None:
                return _labelled(product, key, value, None, chain.schema_units)
    return None


def resolve_multiplier(
    product: Product,
    project_product: ProjectProduct,
    profile: MultiplierProfile = MultiplierProfile.prime,
) -> Optional[MultiplierResolution]:
    """Resolve the multiplier of one project-product line.

    Args:
        product: Catalog entry providing the parameter schema.
        project_product: Association carrying ``dynamic_params`` and
            ``quantity``.
        profile: Fallback chain to walk once no schema target matched.

    Returns:
        The resolved multiplier, or ``None`` when no positive value exists
        anywhere, in which case the line is dropped from totals.
    """
    params = project_product.dynamic_params
    if params:
        resolved = _from_schema_targets(product, params)
        if resolved is None:
            resolved = _from_fallback_keys(product, params, FALLBACK_CHAINS[profile])
        if resolved is not None:
            return resolved

    quantity = to_positive_number(project_product.quantity)
    if quantity is not None:
        return MultiplierResolution(
            value=quantity, field_name=QUANTITY_FIELD, label=QUANTITY_LABEL
        )
    return None
