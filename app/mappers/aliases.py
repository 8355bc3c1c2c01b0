"""
app/mappers/aliases.py

Header aliases shared by more than one upload kind, in priority order.
"""

from __future__ import annotations

CALL_POINT_ALIASES: tuple[str, ...] = ("Call Point", "Callpoint", "Account", "Customer")

TR_SHARE_ALIASES: tuple[str, ...] = (
    "TR Share of Discount",
    "DA",
    "Depletion Allowance",
    "TR Share",
)
