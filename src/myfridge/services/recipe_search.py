"""Server-side recipe search by name and selected ingredient tags."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from myfridge.domain.recipes import Recipe
from myfridge.services.availability import normalize_ingredient_name
from myfridge.services.ingredients import IngredientCatalogService
from myfridge.services.recipe_pool import RecipeRepository

_logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 20


@dataclass
class RemoteRecipeSearch:
    """Delegate recipe search to the data service.

    Selected tags match recipes referencing any of the tagged ingredients,
    and free text is a substring match on the recipe name only. This is
    broader than local filtering, which requires every term to match.
    """

    repository: RecipeRepository
    catalog: IngredientCatalogService
    page_size: int = SEARCH_PAGE_SIZE

    def search(
        self,
        free_text: str,
        selected_tags: Sequence[str] = (),
        limit: int | None = None,
    ) -> list[Recipe]:
        """Return matching recipes ordered by rating descending."""
        recipe_ids = self._recipe_ids_for_tags(selected_tags)
        if recipe_ids == []:
            return []
        name_query = free_text.strip() or None
        return self.repository.search_recipes(
            name_query=name_query,
            recipe_ids=recipe_ids,
            limit=limit or self.page_size,
        )

    def _recipe_ids_for_tags(self, selected_tags: Sequence[str]) -> list[int] | None:
        if not selected_tags:
            return None
        name_to_id = self.catalog.name_to_id()
        ingredient_ids = [
            name_to_id[key]
            for key in (normalize_ingredient_name(tag) for tag in selected_tags)
            if key in name_to_id
        ]
        if not ingredient_ids:
            _logger.info(
                "No catalog ingredients for tags %s, ignoring tags", selected_tags
            )
            return None
        recipe_ids = self.repository.list_recipe_ids_with_ingredients(ingredient_ids)
        return list(dict.fromkeys(recipe_ids))
