"""Tests for remote recipe search."""

import pytest

from myfridge.services.ingredients import IngredientCatalogService
from myfridge.services.recipe_search import RemoteRecipeSearch
from tests.conftest import (
    InMemoryIngredientRepository,
    InMemoryRecipeRepository,
    make_recipe,
)


@pytest.fixture
def search(
    recipe_repository: InMemoryRecipeRepository,
    ingredient_repository: InMemoryIngredientRepository,
    catalog: IngredientCatalogService,
) -> RemoteRecipeSearch:
    ingredient_repository.add(1, "Tomato")
    ingredient_repository.add(2, "Basil")
    recipe_repository.add(
        make_recipe(10, "Tomato Soup", rating=4.0),
        make_recipe(11, "Pesto", rating=4.8),
        make_recipe(12, "Plain Rice", rating=3.0),
    )
    recipe_repository.recipe_ingredients = {10: [1], 11: [2], 12: []}
    return RemoteRecipeSearch(recipe_repository, catalog)


def test_tags_match_any_ingredient(search: RemoteRecipeSearch) -> None:
    results = search.search("", ["tomato", "BASIL"])
    assert [recipe.id for recipe in results] == [11, 10]


def test_free_text_matches_name(search: RemoteRecipeSearch) -> None:
    assert [recipe.id for recipe in search.search("rice")] == [12]


def test_unresolved_tags_are_ignored(
    search: RemoteRecipeSearch, recipe_repository: InMemoryRecipeRepository
) -> None:
    results = search.search("", ["unobtainium"])
    assert len(results) == 3
    assert recipe_repository.search_calls[-1] == (None, None, 20)


def test_tags_without_recipes_return_nothing(
    search: RemoteRecipeSearch,
    ingredient_repository: InMemoryIngredientRepository,
    recipe_repository: InMemoryRecipeRepository,
) -> None:
    ingredient_repository.add(3, "Saffron")
    assert search.search("", ["saffron"]) == []
    assert recipe_repository.search_calls == []


def test_limit_is_passed_through(
    search: RemoteRecipeSearch, recipe_repository: InMemoryRecipeRepository
) -> None:
    search.search("  soup ", limit=40)
    assert recipe_repository.search_calls[-1] == ("soup", None, 40)

