"""Recommendation composition from random exploration and similarity."""

import logging
import random
from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass, field, replace

from myfridge.domain.errors import FridgeError
from myfridge.domain.recipes import Recipe
from myfridge.services.availability import AvailabilityIndex
from myfridge.services.recipe_pool import RecipePoolFetcher, resolve_anchor
from myfridge.services.similarity import SimilarityProvider

_logger = logging.getLogger(__name__)

DEFAULT_TOTAL_COUNT = 20


@dataclass(frozen=True)
class RecommendationResult:
    """Composed recipes plus a non-fatal error message."""

    recipes: list[Recipe]
    error_message: str | None = None


def dedupe_by_id(recipes: Iterable[Recipe]) -> list[Recipe]:
    """Drop repeated recipe ids, keeping the first occurrence."""
    seen: set[int] = set()
    unique = []
    for recipe in recipes:
        if recipe.id in seen:
            continue
        seen.add(recipe.id)
        unique.append(recipe)
    return unique


def annotate_recipes(
    recipes: Iterable[Recipe],
    favorite_ids: Collection[int],
    index: AvailabilityIndex,
) -> list[Recipe]:
    """Set favorite status and availability counters on each recipe."""
    return [
        replace(
            recipe,
            is_favorite=recipe.id in favorite_ids,
            total_count=len(recipe.clean_ingredients),
            available_count=index.count_available(recipe.clean_ingredients),
        )
        for recipe in recipes
    ]


@dataclass
class RecommendationComposer:
    """Combine a random half and a similarity half into one list."""

    pool_fetcher: RecipePoolFetcher
    similarity_provider: SimilarityProvider
    availability_loader: Callable[[int | None], AvailabilityIndex]
    rng: random.Random = field(default_factory=random.Random)

    def compose(
        self,
        total_count: int = DEFAULT_TOTAL_COUNT,
        *,
        user_id: str | None = None,
        fridge_id: int | None = None,
        previous: Sequence[Recipe] = (),
    ) -> RecommendationResult:
        """Compose up to ``total_count`` recommendations without duplicates."""
        half = max(1, total_count // 2)
        try:
            pool = self.pool_fetcher.fetch_pool()
        except FridgeError as exc:
            _logger.warning("Failed to fetch recipe pool", exc_info=True)
            return RecommendationResult(
                recipes=[], error_message=f"Failed to refresh recommendations: {exc}"
            )
        if not pool:
            _logger.info("Recipe pool is empty")
            return RecommendationResult(recipes=[])

        favorite_ids = self._favorite_ids(user_id)
        anchor = resolve_anchor(favorite_ids, previous, pool, self.rng)
        _logger.debug(
            "Anchor recipe id=%s favorite=%s", anchor.id, anchor.id in favorite_ids
        )

        similar_ids = self._similar_ids(anchor.id, half)
        similar_recipes = self._similar_recipes(similar_ids, half)

        excluded = {anchor.id, *similar_ids}
        shuffled = self.rng.sample(pool, len(pool))
        random_half = [
            recipe for recipe in shuffled if recipe.id not in excluded
        ][:half]

        combined = dedupe_by_id([*random_half, *similar_recipes])[:total_count]
        index = self.availability_loader(fridge_id)
        _logger.info(
            "Composed recommendations: combined=%s pool=%s random=%s similar=%s",
            len(combined),
            len(pool),
            len(random_half),
            len(similar_recipes),
        )
        return RecommendationResult(
            recipes=annotate_recipes(combined, favorite_ids, index)
        )

    def _favorite_ids(self, user_id: str | None) -> set[int]:
        try:
            return self.pool_fetcher.favorite_ids(user_id)
        except FridgeError:
            _logger.warning(
                "Could not load favorites for anchor selection", exc_info=True
            )
            return set()

    def _similar_ids(self, anchor_id: int, count: int) -> list[int]:
        try:
            ranked = self.similarity_provider.similar_to(anchor_id, count)
        except FridgeError:
            _logger.warning(
                "Similarity ranking failed for anchor=%s, using empty list",
                anchor_id,
                exc_info=True,
            )
            return []
        return list(dict.fromkeys(ranked))

    def _similar_recipes(self, similar_ids: list[int], count: int) -> list[Recipe]:
        if not similar_ids:
            return []
        try:
            rows = self.pool_fetcher.repository.get_recipes(similar_ids)
        except FridgeError:
            _logger.warning("Failed to fetch similar recipes by ids", exc_info=True)
            return []
        by_id = {recipe.id: recipe for recipe in rows}
        ranked = [by_id[recipe_id] for recipe_id in similar_ids if recipe_id in by_id]
        return ranked[:count]
