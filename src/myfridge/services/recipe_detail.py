"""Single recipe lookup with favorite flag and ingredient availability."""

import logging
from dataclasses import dataclass, replace

from myfridge.domain.errors import FridgeError
from myfridge.domain.recipes import IngredientAvailability, Recipe
from myfridge.services.availability import AvailabilityIndex
from myfridge.services.ingredients import IngredientCatalogService
from myfridge.services.recipe_pool import HistoryRepository, RecipeRepository

_logger = logging.getLogger(__name__)


@dataclass
class RecipeDetailService:
    """Load one recipe for the detail screen."""

    recipes: RecipeRepository
    history: HistoryRepository
    catalog: IngredientCatalogService

    def get_recipe(self, recipe_id: int, user_id: str | None = None) -> Recipe | None:
        """Return a recipe with its favorite flag set for the user."""
        recipe = self.recipes.get_recipe(recipe_id)
        if recipe is None or user_id is None:
            return recipe
        try:
            favorite_ids = self.history.list_favorite_ids(user_id)
        except FridgeError:
            _logger.warning(
                "Could not mark favorite state for recipe_id=%s",
                recipe_id,
                exc_info=True,
            )
            return recipe
        return replace(recipe, is_favorite=recipe.id in favorite_ids)

    def ingredient_names(self, recipe: Recipe) -> list[str]:
        """Return the recipe's ingredient names.

        Catalog names joined through ``recipe_ingredients`` are preferred;
        the recipe's clean ingredient list is used when the join is empty
        or cannot be read.
        """
        try:
            ingredient_ids = self.recipes.list_ingredient_ids(recipe.id)
            names_by_id = self.catalog.names_by_id(ingredient_ids)
        except FridgeError:
            _logger.warning(
                "Failed to load recipe ingredients for recipe_id=%s",
                recipe.id,
                exc_info=True,
            )
            return list(recipe.clean_ingredients)
        names = [
            names_by_id[ingredient_id]
            for ingredient_id in dict.fromkeys(ingredient_ids)
            if ingredient_id in names_by_id
        ]
        return names or list(recipe.clean_ingredients)

    def ingredient_availability(
        self, recipe: Recipe, index: AvailabilityIndex
    ) -> list[IngredientAvailability]:
        """Return per-ingredient availability for a recipe."""
        return index.availability(self.ingredient_names(recipe))
