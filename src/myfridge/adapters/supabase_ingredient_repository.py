"""Supabase implementation for the ingredient catalog."""

from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read, remote_write
from myfridge.adapters.supabase_rows import optional_str, parse_rows, require_int
from myfridge.domain.errors import RemoteWriteFailure
from myfridge.domain.fridge import Ingredient
from myfridge.services.ingredients import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed ingredient catalog."""

    client: Client

    def list_ingredients(self) -> list[Ingredient]:
        """Return all ingredients ordered by name."""
        with remote_read("load ingredients"):
            response = (
                self.client.table("ingredients")
                .select("id, ingredient_name, is_custom")
                .order("ingredient_name")
                .execute()
            )
        return parse_rows(response.data, _parse_ingredient, "ingredients")

    def get_ingredients(self, ingredient_ids: list[int]) -> list[Ingredient]:
        """Return ingredients for the given ids in one request."""
        if not ingredient_ids:
            return []
        with remote_read("load ingredient names"):
            response = (
                self.client.table("ingredients")
                .select("id, ingredient_name, is_custom")
                .in_("id", ingredient_ids)
                .execute()
            )
        return parse_rows(response.data, _parse_ingredient, "ingredients")

    def create_custom_ingredient(self, name: str) -> Ingredient:
        """Insert a user-defined ingredient."""
        with remote_write("create ingredient"):
            response = (
                self.client.table("ingredients")
                .insert({"ingredient_name": name, "is_custom": True})
                .execute()
            )
        created = parse_rows(response.data, _parse_ingredient, "ingredients")
        if not created:
            raise RemoteWriteFailure(f"Failed to create ingredient {name!r}")
        return created[0]


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    return Ingredient(
        id=require_int(row, "id"),
        name=optional_str(row.get("ingredient_name")),
        is_custom=bool(row.get("is_custom") or False),
    )
