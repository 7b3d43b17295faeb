"""Colour tokens the analytics views attach to categories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .models import Category


@dataclass(frozen=True)
class Palette:
    name: str
    categories: Dict[Category, str]
    fallback: str

    def color_for(self, category: object) -> str:
        member = Category.parse(category)
        if member is None:
            return self.fallback
        return self.categories.get(member, self.fallback)


LIGHT = Palette(
    name="light",
    categories={
        Category.FOOD: "#ef4444",
        Category.TRANSPORT: "#3b82f6",
        Category.SHOPPING: "#8b5cf6",
        Category.OTHERS: "#6b7280",
    },
    fallback="#9ca3af",
)

DARK = Palette(
    name="dark",
    categories={
        Category.FOOD: "#f87171",
        Category.TRANSPORT: "#60a5fa",
        Category.SHOPPING: "#a78bfa",
        Category.OTHERS: "#9ca3af",
    },
    fallback="#9ca3af",
)

PALETTES = {LIGHT.name: LIGHT, DARK.name: DARK}


def palette_for(mode: Optional[str]) -> Palette:
    """Return the palette for ``mode``; anything unrecognised gets the light one."""
    return PALETTES.get((mode or "").strip().lower(), LIGHT)
