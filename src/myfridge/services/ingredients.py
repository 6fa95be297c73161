"""Ingredient catalog service."""

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from myfridge.domain.errors import FridgeError
from myfridge.domain.fridge import Ingredient
from myfridge.services.availability import normalize_ingredient_name

_logger = logging.getLogger(__name__)

SUGGESTED_TAG_COUNT = 3


class IngredientRepository(Protocol):
    """Persistence interface for the ingredient catalog."""

    def list_ingredients(self) -> list[Ingredient]:
        """Return all ingredients ordered by name."""

    def get_ingredients(self, ingredient_ids: list[int]) -> list[Ingredient]:
        """Return ingredients for the given ids in one batch."""

    def create_custom_ingredient(self, name: str) -> Ingredient:
        """Create a user-defined ingredient and return it."""


@dataclass
class IngredientCatalogService:
    """Lookups over the shared ingredient catalog."""

    repository: IngredientRepository
    rng: random.Random = field(default_factory=random.Random)

    def list_ingredients(self) -> list[Ingredient]:
        """Return the catalog, or an empty list when it cannot be read."""
        try:
            return self.repository.list_ingredients()
        except FridgeError:
            _logger.warning("Failed to load ingredients", exc_info=True)
            return []

    def names_by_id(self, ingredient_ids: list[int]) -> dict[int, str]:
        """Resolve ingredient ids to names with a single batch lookup."""
        distinct_ids = list(dict.fromkeys(ingredient_ids))
        if not distinct_ids:
            return {}
        return {
            ingredient.id: ingredient.name
            for ingredient in self.repository.get_ingredients(distinct_ids)
            if ingredient.name
        }

    def name_to_id(self) -> dict[str, int]:
        """Return a lower-cased name to id map for the catalog."""
        mapping: dict[str, int] = {}
        for ingredient in self.list_ingredients():
            if ingredient.name:
                key = normalize_ingredient_name(ingredient.name)
                mapping.setdefault(key, ingredient.id)
        return mapping

    def resolve_or_create(self, name: str) -> int:
        """Return the id for a name, creating a custom ingredient if needed."""
        match = self.name_to_id().get(normalize_ingredient_name(name))
        if match is not None:
            return match
        created = self.repository.create_custom_ingredient(name.strip())
        _logger.info(
            "Created custom ingredient id=%s name=%s", created.id, created.name
        )
        return created.id

    def suggest_tags(self, count: int = SUGGESTED_TAG_COUNT) -> list[str]:
        """Return a small random sample of ingredient names for tag chips."""
        names = [
            ingredient.name for ingredient in self.list_ingredients() if ingredient.name
        ]
        if len(names) <= count:
            return names
        return self.rng.sample(names, count)
