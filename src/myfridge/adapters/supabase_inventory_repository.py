"""Supabase implementation for fridge items."""

from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read, remote_write
from myfridge.adapters.supabase_rows import (
    lenient,
    optional_float,
    optional_int,
    optional_str,
    parse_rows,
    require_int,
)
from myfridge.domain.errors import RemoteWriteFailure
from myfridge.domain.fridge import EditSource, Fridge, FridgeItem
from myfridge.services.inventory import InventoryRepository

_ITEM_COLUMNS = (
    "id, fridge_id, ingredient_id, quantity, quantity_unit, expired_date, add_on, "
    "image_path, is_bookmarked, updated_by, updated_source"
)


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase-backed repository for fridge items."""

    client: Client

    def list_items(self, fridge_id: int) -> list[FridgeItem]:
        """Return every item in a fridge."""
        with remote_read("load fridge items"):
            response = (
                self.client.table("fridge_items")
                .select(_ITEM_COLUMNS)
                .eq("fridge_id", fridge_id)
                .execute()
            )
        return parse_rows(response.data, _parse_item, "fridge_items")

    def get_item(self, fridge_id: int, item_id: int) -> FridgeItem | None:
        """Return an item if it belongs to the fridge."""
        with remote_read("load fridge item"):
            response = (
                self.client.table("fridge_items")
                .select(_ITEM_COLUMNS)
                .eq("id", item_id)
                .eq("fridge_id", fridge_id)
                .limit(1)
                .execute()
            )
        found = parse_rows(response.data, _parse_item, "fridge_items")
        return found[0] if found else None

    def create_item(self, fridge_id: int, payload: dict[str, object]) -> FridgeItem:
        """Insert an item and return the stored row."""
        with remote_write("add fridge item"):
            response = (
                self.client.table("fridge_items")
                .insert({"fridge_id": fridge_id, **payload})
                .execute()
            )
        created = parse_rows(response.data, _parse_item, "fridge_items")
        if not created:
            raise RemoteWriteFailure("Failed to add fridge item")
        return created[0]

    def update_item(
        self, fridge_id: int, item_id: int, payload: dict[str, object]
    ) -> None:
        """Patch an item scoped to its fridge."""
        with remote_write("update fridge item"):
            self.client.table("fridge_items").update(payload).eq("id", item_id).eq(
                "fridge_id", fridge_id
            ).execute()

    def delete_item(self, fridge_id: int, item_id: int) -> None:
        """Delete an item scoped to its fridge."""
        with remote_write("delete fridge item"):
            self.client.table("fridge_items").delete().eq("id", item_id).eq(
                "fridge_id", fridge_id
            ).execute()

    def get_fridge(self, fridge_id: int) -> Fridge | None:
        """Return fridge metadata, if present."""
        with remote_read("load fridge"):
            response = (
                self.client.table("fridge")
                .select("id, name")
                .eq("id", fridge_id)
                .limit(1)
                .execute()
            )
        found = parse_rows(response.data, _parse_fridge, "fridge")
        return found[0] if found else None


def _parse_fridge(row: dict[str, object]) -> Fridge:
    name = row.get("name")
    return Fridge(id=require_int(row, "id"), name=str(name) if name else None)


def _parse_source(value: object) -> EditSource | None:
    if not isinstance(value, str):
        return None
    try:
        return EditSource(value)
    except ValueError:
        return None


def _parse_item(row: dict[str, object]) -> FridgeItem:
    """Parse a fridge item row into a domain model."""
    return FridgeItem(
        id=require_int(row, "id"),
        fridge_id=lenient(optional_int, row, "fridge_id"),
        ingredient_id=lenient(optional_int, row, "ingredient_id"),
        quantity=lenient(optional_float, row, "quantity"),
        quantity_unit=optional_str(row.get("quantity_unit")),
        expired_date=optional_str(row.get("expired_date")),
        add_on=optional_str(row.get("add_on")),
        image_path=optional_str(row.get("image_path")),
        is_bookmarked=bool(row.get("is_bookmarked") or False),
        updated_by=optional_str(row.get("updated_by")),
        updated_source=_parse_source(row.get("updated_source")),
    )
