"""Domain models for fridge inventory."""

from dataclasses import dataclass
from enum import StrEnum


class ExpiryStatus(StrEnum):
    """Freshness classification for a fridge item."""

    FRESH = "fresh"
    SOON = "soon"
    EXPIRED = "expired"
    UNKNOWN = "unknown"


class EditSource(StrEnum):
    """Origin of the last edit to a fridge item."""

    USER = "user"
    DEVICE = "device"
    IMPORT = "import"


@dataclass(frozen=True)
class Ingredient:
    """Catalog or user-created ingredient."""

    id: int
    name: str | None
    is_custom: bool = False


@dataclass(frozen=True)
class FridgeItem:
    """Tracked item in a fridge."""

    id: int
    fridge_id: int | None
    ingredient_id: int | None
    ingredient_name: str | None = None
    quantity: float | None = None
    quantity_unit: str | None = None
    expired_date: str | None = None
    add_on: str | None = None
    image_path: str | None = None
    image_url: str | None = None
    is_bookmarked: bool = False
    updated_by: str | None = None
    updated_source: EditSource | None = None

    @property
    def display_name(self) -> str:
        return self.ingredient_name or "Unknown"


@dataclass(frozen=True)
class Fridge:
    """Named fridge shared by its members."""

    id: int
    name: str | None

    @property
    def display_name(self) -> str:
        return self.name or f"Fridge #{self.id}"


@dataclass(frozen=True)
class ExpirySummary:
    """Items expiring within the alert window."""

    soon_count: int
    preview: list[FridgeItem]
    message: str
