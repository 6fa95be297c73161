"""Shared test fixtures."""

import random
from dataclasses import dataclass, field, replace

import pytest

from myfridge.config import Settings
from myfridge.containers import AppContainer, build_browser_registry
from myfridge.domain.errors import RemoteReadFailure, RemoteWriteFailure
from myfridge.domain.fridge import EditSource, Fridge, FridgeItem, Ingredient
from myfridge.domain.recipes import Recipe, UserRecipeHistory
from myfridge.domain.users import UserIdentity
from myfridge.services.favorites import FavoritesService
from myfridge.services.images import ImageUrlResolver
from myfridge.services.ingredients import IngredientCatalogService, IngredientRepository
from myfridge.services.inventory import InventoryRepository, InventoryService
from myfridge.services.recipe_detail import RecipeDetailService
from myfridge.services.recipe_pool import (
    HistoryRepository,
    RecipePoolFetcher,
    RecipeRepository,
)
from myfridge.services.recipe_search import RemoteRecipeSearch
from myfridge.services.recommendations import RecommendationComposer
from myfridge.services.similarity import SimilarityProvider
from myfridge.services.users import (
    AuthGateway,
    MembershipRepository,
    UserContextService,
)

SUPABASE_URL = "https://example.supabase.co"
USER_ID = "user-1"
FRIDGE_ID = 10
TOKEN = "valid-token"


def make_recipe(  # noqa: PLR0913
    recipe_id: int,
    name: str | None = None,
    *,
    rating: float | None = 4.0,
    tags: tuple[str, ...] = (),
    clean: tuple[str, ...] = (),
    total_count: int | None = None,
) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name or f"Recipe {recipe_id}",
        rating=rating,
        tags=tags,
        clean_ingredients=clean,
        total_count=total_count,
    )


def make_item(  # noqa: PLR0913
    item_id: int,
    ingredient_id: int | None,
    *,
    fridge_id: int = FRIDGE_ID,
    name: str | None = None,
    expired_date: str | None = None,
    is_bookmarked: bool = False,
) -> FridgeItem:
    return FridgeItem(
        id=item_id,
        fridge_id=fridge_id,
        ingredient_id=ingredient_id,
        ingredient_name=name,
        expired_date=expired_date,
        is_bookmarked=is_bookmarked,
    )


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory fridge items for tests."""

    items: dict[int, FridgeItem] = field(default_factory=dict)
    fridges: dict[int, Fridge] = field(default_factory=dict)
    updates: list[tuple[int, int, dict[str, object]]] = field(default_factory=list)
    fail_reads: bool = False
    fail_writes: bool = False
    ignore_deletes: bool = False
    next_id: int = 1000

    def add(self, item: FridgeItem) -> FridgeItem:
        self.items[item.id] = item
        return item

    def list_items(self, fridge_id: int) -> list[FridgeItem]:
        if self.fail_reads:
            raise RemoteReadFailure("items unavailable")
        return [item for item in self.items.values() if item.fridge_id == fridge_id]

    def get_item(self, fridge_id: int, item_id: int) -> FridgeItem | None:
        item = self.items.get(item_id)
        if item is None or item.fridge_id != fridge_id:
            return None
        return item

    def create_item(self, fridge_id: int, payload: dict[str, object]) -> FridgeItem:
        if self.fail_writes:
            raise RemoteWriteFailure("insert rejected")
        self.next_id += 1
        item = _apply_payload(
            FridgeItem(id=self.next_id, fridge_id=fridge_id, ingredient_id=None),
            payload,
        )
        self.items[item.id] = item
        return item

    def update_item(
        self, fridge_id: int, item_id: int, payload: dict[str, object]
    ) -> None:
        if self.fail_writes:
            raise RemoteWriteFailure("update rejected")
        self.updates.append((fridge_id, item_id, payload))
        item = self.get_item(fridge_id, item_id)
        if item is not None:
            self.items[item_id] = _apply_payload(item, payload)

    def delete_item(self, fridge_id: int, item_id: int) -> None:
        if self.fail_writes:
            raise RemoteWriteFailure("delete rejected")
        if self.ignore_deletes:
            return
        if self.get_item(fridge_id, item_id) is not None:
            del self.items[item_id]

    def get_fridge(self, fridge_id: int) -> Fridge | None:
        return self.fridges.get(fridge_id)


def _apply_payload(item: FridgeItem, payload: dict[str, object]) -> FridgeItem:
    changes = dict(payload)
    source = changes.get("updated_source")
    if isinstance(source, str):
        changes["updated_source"] = EditSource(source)
    return replace(item, **changes)


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient catalog for tests."""

    ingredients: dict[int, Ingredient] = field(default_factory=dict)
    batch_calls: list[list[int]] = field(default_factory=list)
    fail_reads: bool = False
    next_id: int = 500

    def add(self, ingredient_id: int, name: str) -> Ingredient:
        ingredient = Ingredient(id=ingredient_id, name=name)
        self.ingredients[ingredient_id] = ingredient
        return ingredient

    def list_ingredients(self) -> list[Ingredient]:
        if self.fail_reads:
            raise RemoteReadFailure("catalog unavailable")
        return sorted(self.ingredients.values(), key=lambda item: item.name or "")

    def get_ingredients(self, ingredient_ids: list[int]) -> list[Ingredient]:
        if self.fail_reads:
            raise RemoteReadFailure("catalog unavailable")
        self.batch_calls.append(list(ingredient_ids))
        return [
            self.ingredients[ingredient_id]
            for ingredient_id in ingredient_ids
            if ingredient_id in self.ingredients
        ]

    def create_custom_ingredient(self, name: str) -> Ingredient:
        self.next_id += 1
        ingredient = Ingredient(id=self.next_id, name=name, is_custom=True)
        self.ingredients[ingredient.id] = ingredient
        return ingredient


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipes; top-rated reads put missing ratings first like Postgres."""

    recipes: dict[int, Recipe] = field(default_factory=dict)
    recipe_ingredients: dict[int, list[int]] = field(default_factory=dict)
    search_calls: list[tuple[str | None, list[int] | None, int]] = field(
        default_factory=list
    )
    fail_reads: bool = False

    def add(self, *recipes: Recipe) -> None:
        for recipe in recipes:
            self.recipes[recipe.id] = recipe

    def _check(self) -> None:
        if self.fail_reads:
            raise RemoteReadFailure("recipes unavailable")

    def list_top_rated(self, limit: int) -> list[Recipe]:
        self._check()
        missing = [r for r in self.recipes.values() if r.rating is None]
        rated = sorted(
            (r for r in self.recipes.values() if r.rating is not None),
            key=lambda recipe: recipe.rating or 0.0,
            reverse=True,
        )
        return [*missing, *rated][:limit]

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        self._check()
        return self.recipes.get(recipe_id)

    def get_recipes(self, recipe_ids: list[int]) -> list[Recipe]:
        self._check()
        return [self.recipes[i] for i in sorted(recipe_ids) if i in self.recipes]

    def list_ingredient_ids(self, recipe_id: int) -> list[int]:
        self._check()
        return list(self.recipe_ingredients.get(recipe_id, []))

    def list_recipe_ids_with_ingredients(self, ingredient_ids: list[int]) -> list[int]:
        self._check()
        wanted = set(ingredient_ids)
        return [
            recipe_id
            for recipe_id, ids in self.recipe_ingredients.items()
            if wanted.intersection(ids)
        ]

    def search_recipes(
        self, name_query: str | None, recipe_ids: list[int] | None, limit: int
    ) -> list[Recipe]:
        self._check()
        self.search_calls.append((name_query, recipe_ids, limit))
        found = [
            recipe
            for recipe in self.recipes.values()
            if (name_query is None or name_query.lower() in recipe.name.lower())
            and (recipe_ids is None or recipe.id in recipe_ids)
        ]
        found.sort(key=lambda recipe: recipe.rating or 0.0, reverse=True)
        return found[:limit]


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """In-memory ``user_recipe_history`` rows for tests."""

    rows: dict[tuple[str, int], UserRecipeHistory] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False

    def list_favorite_ids(self, user_id: str) -> set[int]:
        if self.fail_reads:
            raise RemoteReadFailure("history unavailable")
        return {
            row.recipe_id
            for row in self.rows.values()
            if row.user_id == user_id and row.is_favorite
        }

    def mark_favorite(self, user_id: str, recipe_id: int) -> None:
        if self.fail_writes:
            raise RemoteWriteFailure("upsert rejected")
        self.rows[(user_id, recipe_id)] = UserRecipeHistory(user_id, recipe_id, True)

    def unmark_favorite(self, user_id: str, recipe_id: int) -> None:
        if self.fail_writes:
            raise RemoteWriteFailure("update rejected")
        key = (user_id, recipe_id)
        if key in self.rows:
            self.rows[key] = replace(self.rows[key], is_favorite=False)

    def record_view(self, user_id: str, recipe_id: int) -> None:
        if self.fail_writes:
            raise RemoteWriteFailure("upsert rejected")
        key = (user_id, recipe_id)
        self.rows.setdefault(key, UserRecipeHistory(user_id, recipe_id))


@dataclass
class InMemoryMembershipRepository(MembershipRepository):
    memberships: dict[str, list[int]] = field(default_factory=dict)
    fail_reads: bool = False

    def first_fridge_id(self, user_id: str) -> int | None:
        if self.fail_reads:
            raise RemoteReadFailure("membership unavailable")
        fridges = self.memberships.get(user_id, [])
        return fridges[0] if fridges else None


@dataclass
class FakeAuthGateway(AuthGateway):
    users: dict[str, UserIdentity] = field(default_factory=dict)

    def get_user(self, access_token: str) -> UserIdentity | None:
        return self.users.get(access_token)


@dataclass
class FakeSimilarityProvider(SimilarityProvider):
    ranking: dict[int, list[int]] = field(default_factory=dict)
    calls: list[tuple[int, int]] = field(default_factory=list)
    error: Exception | None = None

    def similar_to(self, anchor_id: int, count: int) -> list[int]:
        self.calls.append((anchor_id, count))
        if self.error is not None:
            raise self.error
        return self.ranking.get(anchor_id, [])[:count]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=SUPABASE_URL,
        supabase_key="header.payload.signature",
    )


@pytest.fixture
def inventory_repository() -> InMemoryInventoryRepository:
    return InMemoryInventoryRepository(
        fridges={FRIDGE_ID: Fridge(id=FRIDGE_ID, name="Home")}
    )


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    return InMemoryIngredientRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def membership_repository() -> InMemoryMembershipRepository:
    return InMemoryMembershipRepository(memberships={USER_ID: [FRIDGE_ID]})


@pytest.fixture
def similarity_provider() -> FakeSimilarityProvider:
    return FakeSimilarityProvider()


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway(
        users={TOKEN: UserIdentity(id=USER_ID, email="cook@example.com")}
    )


@pytest.fixture
def catalog(
    ingredient_repository: InMemoryIngredientRepository,
) -> IngredientCatalogService:
    return IngredientCatalogService(ingredient_repository, rng=random.Random(3))


@pytest.fixture
def inventory_service(
    inventory_repository: InMemoryInventoryRepository,
    catalog: IngredientCatalogService,
) -> InventoryService:
    return InventoryService(
        repository=inventory_repository,
        catalog=catalog,
        image_resolver=ImageUrlResolver(base_url=SUPABASE_URL),
    )


@pytest.fixture
def composer(
    recipe_repository: InMemoryRecipeRepository,
    history_repository: InMemoryHistoryRepository,
    similarity_provider: FakeSimilarityProvider,
    inventory_service: InventoryService,
) -> RecommendationComposer:
    return RecommendationComposer(
        pool_fetcher=RecipePoolFetcher(recipe_repository, history_repository),
        similarity_provider=similarity_provider,
        availability_loader=inventory_service.availability_index,
        rng=random.Random(11),
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    membership_repository: InMemoryMembershipRepository,
    recipe_repository: InMemoryRecipeRepository,
    history_repository: InMemoryHistoryRepository,
    catalog: IngredientCatalogService,
    inventory_service: InventoryService,
    composer: RecommendationComposer,
) -> AppContainer:
    recipe_search = RemoteRecipeSearch(recipe_repository, catalog)
    favorites_service = FavoritesService(history_repository, recipe_repository)
    recipe_detail_service = RecipeDetailService(
        recipe_repository, history_repository, catalog
    )
    browser_registry = build_browser_registry(
        settings,
        composer=composer,
        recipe_search=recipe_search,
        favorites_service=favorites_service,
        recipe_detail_service=recipe_detail_service,
        inventory_service=inventory_service,
    )

    async def close_resources() -> None:
        browser_registry.close_all()

    return AppContainer(
        settings=settings,
        user_context_service=UserContextService(auth_gateway, membership_repository),
        ingredient_catalog=catalog,
        inventory_service=inventory_service,
        recommendation_composer=composer,
        recipe_search=recipe_search,
        favorites_service=favorites_service,
        recipe_detail_service=recipe_detail_service,
        browser_registry=browser_registry,
        close_resources=close_resources,
    )
