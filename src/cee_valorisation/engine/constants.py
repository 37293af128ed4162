"""Business constants for the CEE valorisation engine.

Every ordered sequence below is a priority list: the resolver walks it
front to back and stops at the first positive value, so the order is part
of the business rule and is enumerated as-is by the tests.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

# ---------------------------------------------------------------------------
# Category exclusions
# ---------------------------------------------------------------------------
# Furniture, logistics and administrative lines never generate certifiable savings.
EXCLUDED_CATEGORIES = frozenset({"ECO-FURN", "ECO-LOG", "ECO-ADMN"})

# Bucket used by the energy breakdown for blank categories.
DEFAULT_CATEGORY = "Autres"

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------
KWH_PER_MWH = 1000
SURFACE_BAND_THRESHOLD_M2 = 400  # below = lt_400, at or above = gte_400

# ---------------------------------------------------------------------------
# Schema-driven multiplier targets
# ---------------------------------------------------------------------------


class SchemaTarget(NamedTuple):
    """A canonical concept looked up in a product's parameter schema."""

    aliases: tuple[str, ...]
    fallback_label: str


SCHEMA_TARGETS: tuple[SchemaTarget, ...] = (
    SchemaTarget(("surface_facturee", "surface facturée"), "Surface facturée"),
    SchemaTarget(
        ("nombre_de_luminaire", "nombre de luminaire", "nombre_luminaire"),
        "Nombre de luminaire",
    ),
)

# ---------------------------------------------------------------------------
# Dynamic-parameter fallback keys
# ---------------------------------------------------------------------------


class FallbackKey(NamedTuple):
    """A dynamic-parameter key tried after the schema targets.

    ``label=None`` means the label is taken from the schema field of the
    same name, or derived from the key itself.
    """

    key: str
    label: Optional[str] = None


PRIME_FALLBACK_KEYS: tuple[FallbackKey, ...] = (
    FallbackKey("quantity", "Quantité (champ dynamique)"),
    FallbackKey("surface_isolee", "Surface isolée"),
    FallbackKey("nombre_led", "Nombre de LED"),
    FallbackKey("surface", "Surface"),
)

VALORISATION_FALLBACK_KEYS: tuple[FallbackKey, ...] = (
    FallbackKey("surface_facturee"),
    FallbackKey("surface_isolee"),
    FallbackKey("surface"),
    FallbackKey("surface_isolee_m2"),
    FallbackKey("surface_facturee_m2"),
    FallbackKey("nombre_led"),
    FallbackKey("nombre_appareils"),
    FallbackKey("nombre_points_lumineux"),
    FallbackKey("quantity"),
)

QUANTITY_FIELD = "quantity"
QUANTITY_LABEL = "Quantité"
UNNAMED_LABEL = "Unité"
