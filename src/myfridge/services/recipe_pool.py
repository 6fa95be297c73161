"""Candidate recipe pool and anchor selection."""

import random
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Protocol

from myfridge.domain.recipes import Recipe
from myfridge.services.recipe_view import SortKey, sort_recipes

POOL_LIMIT = 100


class RecipeRepository(Protocol):
    """Persistence interface for read-only recipe data."""

    def list_top_rated(self, limit: int) -> list[Recipe]:
        """Return up to ``limit`` recipes ordered by rating descending."""

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by id, if present."""

    def get_recipes(self, recipe_ids: list[int]) -> list[Recipe]:
        """Return recipes for the given ids in any order."""

    def list_ingredient_ids(self, recipe_id: int) -> list[int]:
        """Return ingredient ids joined to a recipe."""

    def list_recipe_ids_with_ingredients(self, ingredient_ids: list[int]) -> list[int]:
        """Return ids of recipes referencing any of the ingredient ids."""

    def search_recipes(
        self, name_query: str | None, recipe_ids: list[int] | None, limit: int
    ) -> list[Recipe]:
        """Return recipes by name substring and id set, rating descending."""


class HistoryRepository(Protocol):
    """Persistence interface for per-user recipe history."""

    def list_favorite_ids(self, user_id: str) -> set[int]:
        """Return ids of recipes the user marked as favorite."""

    def mark_favorite(self, user_id: str, recipe_id: int) -> None:
        """Insert or update the history row with ``is_favorite`` set."""

    def unmark_favorite(self, user_id: str, recipe_id: int) -> None:
        """Clear the favorite flag on an existing history row."""

    def record_view(self, user_id: str, recipe_id: int) -> None:
        """Insert or update the history row without touching the favorite flag."""


@dataclass
class RecipePoolFetcher:
    """Fetch the bounded candidate pool and favorite ids."""

    repository: RecipeRepository
    history: HistoryRepository
    limit: int = POOL_LIMIT

    def fetch_pool(self, limit: int | None = None) -> list[Recipe]:
        """Return the highest-rated recipes, missing ratings last."""
        cap = self.limit if limit is None else limit
        rows = self.repository.list_top_rated(cap)
        return sort_recipes(rows, SortKey.RATING, ascending=False)[:cap]

    def favorite_ids(self, user_id: str | None) -> set[int]:
        """Return the user's favorite recipe ids."""
        if user_id is None:
            return set()
        return self.history.list_favorite_ids(user_id)


def resolve_anchor(
    favorite_ids: Collection[int],
    previous: Sequence[Recipe],
    pool: Sequence[Recipe],
    rng: random.Random,
) -> Recipe:
    """Pick the similarity seed for one composition.

    Priority: the first pool member that is a favorite, then the first
    recipe of the previous result, then a uniformly random pool member.
    """
    if not pool:
        raise ValueError("Cannot resolve an anchor from an empty pool")
    for recipe in pool:
        if recipe.id in favorite_ids:
            return recipe
    if previous:
        return previous[0]
    return rng.choice(list(pool))
