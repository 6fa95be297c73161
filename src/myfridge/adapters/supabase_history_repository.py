"""Supabase implementation for per-user recipe history."""

from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read, remote_write
from myfridge.adapters.supabase_rows import int_column
from myfridge.services.recipe_pool import HistoryRepository

_CONFLICT_KEY = "user_id,recipe_id"


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase-backed ``user_recipe_history`` access."""

    client: Client

    def list_favorite_ids(self, user_id: str) -> set[int]:
        """Return ids of the user's favorite recipes."""
        with remote_read("load favorites"):
            response = (
                self.client.table("user_recipe_history")
                .select("recipe_id")
                .eq("user_id", user_id)
                .eq("is_favorite", True)
                .execute()
            )
        return set(int_column(response.data, "recipe_id"))

    def mark_favorite(self, user_id: str, recipe_id: int) -> None:
        """Upsert the history row with the favorite flag set."""
        with remote_write("add favorite"):
            self.client.table("user_recipe_history").upsert(
                {"user_id": user_id, "recipe_id": recipe_id, "is_favorite": True},
                on_conflict=_CONFLICT_KEY,
            ).execute()

    def unmark_favorite(self, user_id: str, recipe_id: int) -> None:
        """Clear the favorite flag on the existing history row."""
        with remote_write("remove favorite"):
            self.client.table("user_recipe_history").update(
                {"is_favorite": False}
            ).eq("user_id", user_id).eq("recipe_id", recipe_id).execute()

    def record_view(self, user_id: str, recipe_id: int) -> None:
        """Upsert the history row, leaving the favorite flag untouched."""
        with remote_write("record recipe view"):
            self.client.table("user_recipe_history").upsert(
                {"user_id": user_id, "recipe_id": recipe_id},
                on_conflict=_CONFLICT_KEY,
            ).execute()
