"""Fridge inventory listing, expiry classification and item edits."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol

from myfridge.domain.errors import FridgeError, ParseFailure, RemoteWriteFailure
from myfridge.domain.fridge import (
    EditSource,
    ExpiryStatus,
    ExpirySummary,
    Fridge,
    FridgeItem,
)
from myfridge.services.availability import AvailabilityIndex
from myfridge.services.images import ImageUrlResolver
from myfridge.services.ingredients import IngredientCatalogService

_logger = logging.getLogger(__name__)

EXPIRY_SOON_DAYS = 7
EXPIRY_PREVIEW_SIZE = 3


class InventoryRepository(Protocol):
    """Persistence interface for fridge items."""

    def list_items(self, fridge_id: int) -> list[FridgeItem]:
        """Return the items in a fridge without resolved names."""

    def get_item(self, fridge_id: int, item_id: int) -> FridgeItem | None:
        """Return an item scoped to a fridge, if present."""

    def create_item(self, fridge_id: int, payload: dict[str, object]) -> FridgeItem:
        """Insert an item into a fridge and return it."""

    def update_item(
        self, fridge_id: int, item_id: int, payload: dict[str, object]
    ) -> None:
        """Patch an item scoped to a fridge."""

    def delete_item(self, fridge_id: int, item_id: int) -> None:
        """Delete an item scoped to a fridge."""

    def get_fridge(self, fridge_id: int) -> Fridge | None:
        """Return fridge metadata, if present."""


def parse_expiry_date(value: str) -> date:
    """Parse a stored ``YYYY-MM-DD`` date, ignoring any time suffix."""
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise ParseFailure(f"Invalid expiry date: {value!r}") from exc


def days_until_expiry(expired_date: str | None, today: date) -> int | None:
    """Return whole days until expiry, or None when unknown."""
    if not expired_date or not expired_date.strip():
        return None
    try:
        expiry = parse_expiry_date(expired_date)
    except ParseFailure:
        return None
    return (expiry - today).days


def classify_expiry(
    expired_date: str | None, today: date, soon_days: int = EXPIRY_SOON_DAYS
) -> ExpiryStatus:
    """Classify an expiry date relative to today."""
    days = days_until_expiry(expired_date, today)
    if days is None:
        return ExpiryStatus.UNKNOWN
    if days < 0:
        return ExpiryStatus.EXPIRED
    if days <= soon_days:
        return ExpiryStatus.SOON
    return ExpiryStatus.FRESH


def classify_item(
    item: FridgeItem, today: date, soon_days: int = EXPIRY_SOON_DAYS
) -> ExpiryStatus:
    """Classify a fridge item by its expiry date."""
    return classify_expiry(item.expired_date, today, soon_days)


def search_items(items: list[FridgeItem], query: str) -> list[FridgeItem]:
    """Filter items by case-insensitive substring match on the name."""
    needle = query.strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.display_name.lower()]


def sort_by_expiry(
    items: list[FridgeItem], *, ascending: bool = True
) -> list[FridgeItem]:
    """Sort items by expiry date; missing dates sort as the latest date."""

    def _key(item: FridgeItem) -> date:
        if not item.expired_date:
            return date.max
        try:
            return parse_expiry_date(item.expired_date)
        except ParseFailure:
            return date.max

    return sorted(items, key=_key, reverse=not ascending)


def summarize_expiring(
    items: list[FridgeItem], today: date, soon_days: int = EXPIRY_SOON_DAYS
) -> ExpirySummary:
    """Summarize items expiring within the alert window."""
    soon = [
        item
        for item in items
        if classify_item(item, today, soon_days) is ExpiryStatus.SOON
    ]
    count = len(soon)
    if count == 0:
        message = f"No items expiring within {soon_days} days"
    else:
        noun = "item" if count == 1 else "items"
        message = f"{count} {noun} expiring within {soon_days} days"
    return ExpirySummary(
        soon_count=count, preview=soon[:EXPIRY_PREVIEW_SIZE], message=message
    )


@dataclass
class InventoryService:
    """Application service for fridge inventory."""

    repository: InventoryRepository
    catalog: IngredientCatalogService
    image_resolver: ImageUrlResolver
    soon_days: int = EXPIRY_SOON_DAYS

    def list_items(self, fridge_id: int) -> list[FridgeItem]:
        """Return fridge items with ingredient names and image URLs resolved."""
        items = self.repository.list_items(fridge_id)
        ingredient_ids = [
            item.ingredient_id for item in items if item.ingredient_id is not None
        ]
        try:
            names = self.catalog.names_by_id(ingredient_ids)
        except FridgeError:
            _logger.warning(
                "Failed to resolve ingredient names for fridge_id=%s",
                fridge_id,
                exc_info=True,
            )
            names = {}
        return [
            replace(
                item,
                ingredient_name=names.get(item.ingredient_id)
                if item.ingredient_id is not None
                else None,
                image_url=self.image_resolver.resolve(item.image_path),
            )
            for item in items
        ]

    def fridge_name(self, fridge_id: int) -> str:
        """Return the fridge display name, falling back to its id."""
        try:
            fridge = self.repository.get_fridge(fridge_id)
        except FridgeError:
            _logger.warning("Failed to fetch fridge name for fridge_id=%s", fridge_id)
            fridge = None
        return fridge.display_name if fridge else f"Fridge #{fridge_id}"

    def availability_index(self, fridge_id: int | None) -> AvailabilityIndex:
        """Build the availability index for a fridge; empty on any failure."""
        if fridge_id is None:
            return AvailabilityIndex()
        try:
            return AvailabilityIndex.from_items(self.list_items(fridge_id))
        except FridgeError:
            _logger.warning(
                "Failed to load fridge ingredients for fridge_id=%s",
                fridge_id,
                exc_info=True,
            )
            return AvailabilityIndex()

    def classify(self, item: FridgeItem, today: date) -> ExpiryStatus:
        """Classify an item using the configured alert window."""
        return classify_item(item, today, self.soon_days)

    def expiry_summary(self, items: list[FridgeItem], today: date) -> ExpirySummary:
        """Summarize items expiring soon."""
        return summarize_expiring(items, today, self.soon_days)

    def set_bookmark(
        self, fridge_id: int, item_id: int, *, bookmarked: bool, user_id: str
    ) -> None:
        """Persist a bookmark flag with audit fields."""
        self.repository.update_item(
            fridge_id,
            item_id,
            {
                "is_bookmarked": bookmarked,
                "updated_by": user_id,
                "updated_source": EditSource.USER.value,
            },
        )

    def add_item(  # noqa: PLR0913
        self,
        fridge_id: int,
        user_id: str,
        name: str,
        *,
        quantity: float | None = None,
        quantity_unit: str | None = None,
        expired_date: str | None = None,
        add_on: str | None = None,
        image_path: str | None = None,
    ) -> FridgeItem:
        """Add an item, creating a custom ingredient for unknown names."""
        ingredient_id = self.catalog.resolve_or_create(name)
        payload: dict[str, object] = {
            "ingredient_id": ingredient_id,
            "updated_by": user_id,
            "updated_source": EditSource.USER.value,
        }
        optional = {
            "quantity": quantity,
            "quantity_unit": quantity_unit,
            "expired_date": expired_date,
            "add_on": add_on,
            "image_path": image_path,
        }
        payload.update(
            {key: value for key, value in optional.items() if value is not None}
        )
        created = self.repository.create_item(fridge_id, payload)
        return replace(
            created,
            ingredient_name=name.strip(),
            image_url=self.image_resolver.resolve(created.image_path),
        )

    def update_item(  # noqa: PLR0913
        self,
        fridge_id: int,
        item_id: int,
        user_id: str,
        name: str,
        *,
        quantity: float | None = None,
        quantity_unit: str | None = None,
        expired_date: str | None = None,
        add_on: str | None = None,
        image_path: str | None = None,
    ) -> None:
        """Replace an item's details; unset optional fields are cleared."""
        ingredient_id = self.catalog.resolve_or_create(name)
        payload: dict[str, object] = {
            "ingredient_id": ingredient_id,
            "quantity": quantity,
            "quantity_unit": quantity_unit,
            "expired_date": expired_date,
            "add_on": add_on,
            "updated_by": user_id,
            "updated_source": EditSource.USER.value,
        }
        if image_path is not None:
            payload["image_path"] = image_path
        self.repository.update_item(fridge_id, item_id, payload)

    def delete_item(self, fridge_id: int, item_id: int) -> bool:
        """Delete an item from a fridge, returning False when it is missing."""
        if self.repository.get_item(fridge_id, item_id) is None:
            _logger.warning(
                "Delete skipped, item_id=%s not in fridge_id=%s", item_id, fridge_id
            )
            return False
        self.repository.delete_item(fridge_id, item_id)
        if self.repository.get_item(fridge_id, item_id) is not None:
            raise RemoteWriteFailure(
                "Delete operation may have failed - item still exists"
            )
        return True
