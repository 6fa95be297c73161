"""Supabase implementation for recipes and their ingredient joins."""

from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read
from myfridge.adapters.supabase_rows import (
    int_column,
    lenient,
    optional_float,
    optional_str,
    parse_rows,
    require_int,
    str_tuple,
)
from myfridge.domain.recipes import Recipe
from myfridge.services.recipe_pool import RecipeRepository

_RECIPE_COLUMNS = (
    "id, recipe_name, total_time, rating, url, img_src, tags, steps, "
    "display_ingredients, clean_ingredients"
)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed read-only recipe repository."""

    client: Client

    def list_top_rated(self, limit: int) -> list[Recipe]:
        """Return up to ``limit`` recipes by rating descending."""
        with remote_read("load recipes"):
            response = (
                self.client.table("recipes")
                .select(_RECIPE_COLUMNS)
                .order("rating", desc=True)
                .limit(limit)
                .execute()
            )
        return parse_rows(response.data, _parse_recipe, "recipes")

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by id, if present."""
        with remote_read("load recipe"):
            response = (
                self.client.table("recipes")
                .select(_RECIPE_COLUMNS)
                .eq("id", recipe_id)
                .limit(1)
                .execute()
            )
        found = parse_rows(response.data, _parse_recipe, "recipes")
        return found[0] if found else None

    def get_recipes(self, recipe_ids: list[int]) -> list[Recipe]:
        """Return recipes for the given ids."""
        if not recipe_ids:
            return []
        with remote_read("load recipes by id"):
            response = (
                self.client.table("recipes")
                .select(_RECIPE_COLUMNS)
                .in_("id", recipe_ids)
                .execute()
            )
        return parse_rows(response.data, _parse_recipe, "recipes")

    def list_ingredient_ids(self, recipe_id: int) -> list[int]:
        """Return ingredient ids joined to a recipe."""
        with remote_read("load recipe ingredients"):
            response = (
                self.client.table("recipe_ingredients")
                .select("ingredient_id")
                .eq("recipe_id", recipe_id)
                .execute()
            )
        return int_column(response.data, "ingredient_id")

    def list_recipe_ids_with_ingredients(self, ingredient_ids: list[int]) -> list[int]:
        """Return ids of recipes referencing any of the ingredients."""
        if not ingredient_ids:
            return []
        with remote_read("load recipes for ingredients"):
            response = (
                self.client.table("recipe_ingredients")
                .select("recipe_id")
                .in_("ingredient_id", ingredient_ids)
                .execute()
            )
        return list(dict.fromkeys(int_column(response.data, "recipe_id")))

    def search_recipes(
        self, name_query: str | None, recipe_ids: list[int] | None, limit: int
    ) -> list[Recipe]:
        """Search by name substring within an optional id set."""
        if recipe_ids is not None and not recipe_ids:
            return []
        with remote_read("search recipes"):
            query = self.client.table("recipes").select(_RECIPE_COLUMNS)
            if name_query:
                query = query.ilike("recipe_name", f"%{escape_like(name_query)}%")
            if recipe_ids is not None:
                query = query.in_("id", recipe_ids)
            response = query.order("rating", desc=True).limit(limit).execute()
        return parse_rows(response.data, _parse_recipe, "recipes")


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    return Recipe(
        id=require_int(row, "id"),
        name=str(row.get("recipe_name") or ""),
        total_time=optional_str(row.get("total_time")),
        rating=lenient(optional_float, row, "rating"),
        url=optional_str(row.get("url")),
        img_src=optional_str(row.get("img_src")),
        tags=lenient(str_tuple, row, "tags") or (),
        steps=lenient(str_tuple, row, "steps") or (),
        display_ingredients=lenient(str_tuple, row, "display_ingredients") or (),
        clean_ingredients=lenient(str_tuple, row, "clean_ingredients") or (),
    )
