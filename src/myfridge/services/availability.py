"""Ingredient availability index built from fridge contents."""

from collections.abc import Iterable
from dataclasses import dataclass

from myfridge.domain.fridge import FridgeItem
from myfridge.domain.recipes import IngredientAvailability


def normalize_ingredient_name(name: str) -> str:
    """Normalize an ingredient name for matching."""
    return name.strip().lower()


@dataclass(frozen=True)
class AvailabilityIndex:
    """Case-insensitive set of ingredient names the user owns."""

    names: frozenset[str] = frozenset()

    @classmethod
    def build(cls, names: Iterable[str | None]) -> "AvailabilityIndex":
        """Build an index from raw ingredient names, skipping blanks."""
        normalized = {
            normalize_ingredient_name(name) for name in names if name and name.strip()
        }
        return cls(frozenset(normalized))

    @classmethod
    def from_items(cls, items: Iterable[FridgeItem]) -> "AvailabilityIndex":
        """Build an index from fridge items with resolved ingredient names."""
        return cls.build(item.ingredient_name for item in items)

    def __len__(self) -> int:
        return len(self.names)

    def contains(self, name: str | None) -> bool:
        """Return True when the ingredient is in the fridge."""
        if not name:
            return False
        return normalize_ingredient_name(name) in self.names

    def count_available(self, names: Iterable[str]) -> int:
        """Count how many of the given ingredient names are available."""
        return sum(1 for name in names if self.contains(name))

    def availability(self, names: Iterable[str]) -> list[IngredientAvailability]:
        """Return per-ingredient availability, keeping the given order."""
        return [
            IngredientAvailability(name=name, available=self.contains(name))
            for name in names
        ]
