"""Display formatting for voting-power magnitudes."""

from __future__ import annotations

import math

SI_SYMBOLS = ["", "k", "M", "G", "T", "P", "E"]


def abbreviate_number(value: float | int) -> float | int | str:
    """Abbreviate a magnitude with an SI suffix, e.g. 1500 → "1.5k".

    Values below 1000 in magnitude (including fractions) are returned
    unchanged. Magnitudes beyond the exa tier stay in E ("1000.0E").
    Non-finite input is treated as 0.
    """
    if not math.isfinite(value):
        return 0
    if value == 0:
        return value

    tier = int(math.log10(abs(value)) / 3)
    tier = min(max(tier, 0), len(SI_SYMBOLS) - 1)
    if tier == 0:
        return value

    scaled = value / 10 ** (tier * 3)
    return f"{scaled:.1f}{SI_SYMBOLS[tier]}"
