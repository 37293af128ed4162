# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Data models and portfolio loaders."""

from cee_valorisation.data.models import (
    Delegate,
    KwhCumacEntry,
    LineResult,
    LineStatus,
    ParamField,
    Product,
    Project,
    ProjectPrimeResult,
    ProjectProduct,
)

__all__ = [
    "Delegate",
    "KwhCumacEntry",
    "LineResult",
    "LineStatus",
    "ParamField",
    "Product",
    "Project",
    "ProjectPrimeResult",
    "ProjectProduct",
]
