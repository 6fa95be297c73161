"""Favorite recipes and recipe view history."""

import logging
from dataclasses import dataclass

from myfridge.domain.recipes import Recipe
from myfridge.services.availability import AvailabilityIndex
from myfridge.services.recipe_pool import HistoryRepository, RecipeRepository
from myfridge.services.recipe_search import SEARCH_PAGE_SIZE
from myfridge.services.recipe_view import filter_recipes
from myfridge.services.recommendations import annotate_recipes

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesService:
    """Application service for favorites and history writes."""

    history: HistoryRepository
    recipes: RecipeRepository

    def favorite_ids(self, user_id: str) -> set[int]:
        """Return the user's favorite recipe ids."""
        return self.history.list_favorite_ids(user_id)

    def list_favorites(self, user_id: str, index: AvailabilityIndex) -> list[Recipe]:
        """Return favorite recipes annotated with availability counts."""
        favorite_ids = self.history.list_favorite_ids(user_id)
        if not favorite_ids:
            return []
        rows = self.recipes.get_recipes(sorted(favorite_ids))
        _logger.debug(
            "Loaded %s favorite recipes for user_id=%s", len(rows), user_id
        )
        return annotate_recipes(rows, favorite_ids, index)

    def search_favorites(
        self,
        user_id: str,
        free_text: str,
        index: AvailabilityIndex,
        limit: int = SEARCH_PAGE_SIZE,
    ) -> list[Recipe]:
        """Search favorites by rating page, then filter locally on every term."""
        favorite_ids = self.history.list_favorite_ids(user_id)
        if not favorite_ids:
            return []
        candidates = self.recipes.search_recipes(
            name_query=None, recipe_ids=sorted(favorite_ids), limit=limit
        )
        matched = filter_recipes(candidates, free_text)
        return annotate_recipes(matched, favorite_ids, index)

    def set_favorite(self, user_id: str, recipe_id: int, *, favorite: bool) -> None:
        """Persist the favorite flag with insert-or-update semantics."""
        if favorite:
            self.history.mark_favorite(user_id, recipe_id)
        else:
            self.history.unmark_favorite(user_id, recipe_id)
        _logger.info(
            "Set favorite=%s for recipe_id=%s user_id=%s", favorite, recipe_id, user_id
        )

    def record_view(self, user_id: str, recipe_id: int) -> None:
        """Track that the user opened a recipe."""
        self.history.record_view(user_id, recipe_id)
