# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Numeric parsing, rounding and text normalisation helpers.

Dynamic parameters are typed by hand in the back-office, so values reach
the engine as native numbers, French-formatted strings (``"12,5"``,
``" 1 200 "``) or garbage.  Nothing here raises on bad input: unusable
values come back as ``None``.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any, Optional

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[_\s]+")


def to_number(value: Any) -> Optional[float]:
    """Parse *value* into a finite float, or return ``None``.

    Native ints and floats are accepted as-is (booleans are not numbers
    here).  Strings are stripped of every whitespace character and their
    first comma is read as the decimal separator.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        text = _WHITESPACE.sub("", value).replace(",", ".", 1)
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def to_positive_number(value: Any) -> Optional[float]:
    """Like :func:`to_number`, but zero and negatives are absent too."""
    number = to_number(value)
    if number is None or number <= 0:
        return None
    return number


def is_finite(value: Any) -> bool:
    """True for a real number (not a bool) that fits a finite float."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to *digits* decimals, halves going up (towards +inf).

    Applied to ``value * 10**digits`` so that currency amounts display the
    way accounting expects, not with round-half-to-even.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def normalize_text(value: str) -> str:
    """NFD-decompose, drop combining marks and lowercase."""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


def label_from_key(name: Optional[str], default: str = "Unité") -> str:
    """Turn ``surface_isolee_m2`` into ``Surface Isolee M2``."""
    if not name:
        return default
    segments = [segment for segment in _SEPARATORS.split(name) if segment]
    if not segments:
        return default
    return " ".join(segment[:1].upper() + segment[1:] for segment in segments)
