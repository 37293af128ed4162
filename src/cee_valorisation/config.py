# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Engine configuration model and YAML loader."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from cee_valorisation.data.models import SurfaceBand
from cee_valorisation.engine.constants import EXCLUDED_CATEGORIES
from cee_valorisation.engine.lookup import KwhLookup, get_lookup
from cee_valorisation.engine.multiplier import MultiplierProfile


class LookupKind(str, Enum):
    """How kWh cumac values are read from the catalog."""

    flat = "flat"
    surface_banded = "surface_banded"


class EngineConfig(BaseModel):
    """Business parameters of a valorisation run.

    ``bonification`` has no default: the two historical engines disagreed
    on it (1 vs 2), so every deployment states its own.  The same goes for
    the band used when a project's building surface is unknown.
    """

    model_config = {"frozen": True}

    bonification: float = Field(..., gt=0, description="Regulatory uplift multiplier")
    lookup: LookupKind = Field(default=LookupKind.flat)
    unknown_surface_band: Optional[SurfaceBand] = Field(
        default=None, description="Band used when the building surface is unknown"
    )
    multiplier_profile: MultiplierProfile = Field(default=MultiplierProfile.prime)
    excluded_categories: frozenset[str] = Field(default=EXCLUDED_CATEGORIES)

    @field_validator("excluded_categories", mode="before")
    @classmethod
    def _strip_categories(cls, value: object) -> object:
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(item).strip() for item in value if str(item).strip())
        return value

    @model_validator(mode="after")
    def _banding_is_explicit(self) -> EngineConfig:
        if self.lookup is LookupKind.surface_banded and self.unknown_surface_band is None:
            raise ValueError(
                "lookup 'surface_banded' requires unknown_surface_band (lt_400 or gte_400)"
            )
        return self

    def build_lookup(self) -> KwhLookup:
        return get_lookup(self.lookup.value, self.unknown_surface_band)

    def is_excluded(self, category: Optional[str]) -> bool:
        """True when *category* never generates certifiable savings."""
        if not category:
            return False
        return category.strip() in self.excluded_categories


def load_config(path: str | Path) -> EngineConfig:
    """Load an :class:`EngineConfig` from a YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return EngineConfig.model_validate(raw)
