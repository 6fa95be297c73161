"""Domain models for recipes and recipe history."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipe:
    """Read-only recipe with derived availability counters."""

    id: int
    name: str
    total_time: str | None = None
    rating: float | None = None
    url: str | None = None
    img_src: str | None = None
    tags: tuple[str, ...] = ()
    steps: tuple[str, ...] = ()
    display_ingredients: tuple[str, ...] = ()
    clean_ingredients: tuple[str, ...] = ()
    is_favorite: bool = False
    available_count: int | None = None
    total_count: int | None = None


@dataclass(frozen=True)
class UserRecipeHistory:
    """Per-user recipe interaction row keyed by (user_id, recipe_id)."""

    user_id: str
    recipe_id: int
    is_favorite: bool | None = None


@dataclass(frozen=True)
class SimilarRecipe:
    """Row returned by the similarity ranking function."""

    recipe_id: int
    score: float


@dataclass(frozen=True)
class IngredientAvailability:
    """Whether a recipe ingredient is present in the fridge."""

    name: str
    available: bool
