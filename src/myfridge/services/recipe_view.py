"""Client-side sorting and filtering of recipe lists."""

import re
from collections.abc import Iterable, Sequence
from enum import StrEnum

from myfridge.domain.recipes import Recipe

_TERM_SEPARATORS = re.compile(r"[,\s]+")


class SortKey(StrEnum):
    """Keys a recipe list can be ordered by."""

    RATING = "rating"
    INGREDIENT_COUNT = "ingredient_count"


def _rating_key(recipe: Recipe) -> float:
    return recipe.rating if recipe.rating is not None else float("-inf")


def ingredient_count(recipe: Recipe) -> int:
    """Return the total ingredient count, derived when not annotated."""
    if recipe.total_count is not None:
        return recipe.total_count
    return len(recipe.clean_ingredients)


def sort_recipes(
    recipes: Sequence[Recipe], key: SortKey, *, ascending: bool = True
) -> list[Recipe]:
    """Stable sort by rating or ingredient count.

    Equal keys keep their prior relative order in both directions. A
    missing rating is the minimum value.
    """
    key_func = _rating_key if key is SortKey.RATING else ingredient_count
    return sorted(recipes, key=key_func, reverse=not ascending)


def split_search_terms(free_text: str) -> list[str]:
    """Split free text on commas and whitespace into lower-cased terms."""
    return [term.lower() for term in _TERM_SEPARATORS.split(free_text) if term.strip()]


def build_terms(free_text: str, selected_tags: Iterable[str]) -> list[str]:
    """Combine free-text terms and selected tags into one term list."""
    terms = split_search_terms(free_text)
    for tag in selected_tags:
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in terms:
            terms.append(cleaned)
    return terms


def matches_terms(recipe: Recipe, terms: Sequence[str]) -> bool:
    """Return True when every term appears in the name, a tag or an ingredient."""
    name = recipe.name.lower()
    tags = [tag.lower() for tag in recipe.tags]
    ingredients = [ingredient.lower() for ingredient in recipe.clean_ingredients]
    return all(
        term in name
        or any(term in tag for tag in tags)
        or any(term in ingredient for ingredient in ingredients)
        for term in terms
    )


def filter_recipes(
    recipes: Sequence[Recipe], free_text: str = "", selected_tags: Sequence[str] = ()
) -> list[Recipe]:
    """Filter recipes with AND semantics across terms, OR across fields."""
    if not free_text.strip() and not selected_tags:
        return list(recipes)
    terms = build_terms(free_text, selected_tags)
    if not terms:
        return list(recipes)
    return [recipe for recipe in recipes if matches_terms(recipe, terms)]
