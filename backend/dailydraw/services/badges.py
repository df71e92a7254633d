from __future__ import annotations
from typing import Literal

BadgeTier = Literal["none", "bronze", "silver", "gold"]

# (minimum wins, tier), highest first
_TIERS: list[tuple[int, BadgeTier]] = [(5, "gold"), (3, "silver"), (1, "bronze")]


def badge_for_win_count(win_count: int) -> BadgeTier:
    for threshold, tier in _TIERS:
        if win_count >= threshold:
            return tier
    return "none"
