"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from myfridge.adapters.supabase_auth_gateway import SupabaseAuthGateway
from myfridge.adapters.supabase_history_repository import SupabaseHistoryRepository
from myfridge.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from myfridge.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from myfridge.adapters.supabase_membership_repository import (
    SupabaseMembershipRepository,
)
from myfridge.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from myfridge.adapters.supabase_similarity_provider import SupabaseSimilarityProvider
from myfridge.config import Settings, parse_bucket_list
from myfridge.services.favorites import FavoritesService
from myfridge.services.fridge_browser import FridgeBrowser
from myfridge.services.images import ImageUrlResolver
from myfridge.services.ingredients import IngredientCatalogService
from myfridge.services.inventory import InventoryService
from myfridge.services.recipe_browser import RecipeBrowser
from myfridge.services.recipe_detail import RecipeDetailService
from myfridge.services.recipe_pool import RecipePoolFetcher
from myfridge.services.recipe_search import RemoteRecipeSearch
from myfridge.services.recommendations import RecommendationComposer
from myfridge.services.registry import BrowserRegistry
from myfridge.services.users import UserContextService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_context_service: UserContextService
    ingredient_catalog: IngredientCatalogService
    inventory_service: InventoryService
    recommendation_composer: RecommendationComposer
    recipe_search: RemoteRecipeSearch
    favorites_service: FavoritesService
    recipe_detail_service: RecipeDetailService
    browser_registry: BrowserRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_browser_registry(  # noqa: PLR0913
    settings: Settings,
    *,
    composer: RecommendationComposer,
    recipe_search: RemoteRecipeSearch,
    favorites_service: FavoritesService,
    recipe_detail_service: RecipeDetailService,
    inventory_service: InventoryService,
) -> BrowserRegistry:
    """Create the registry that hands out per-user browsers."""

    def recipe_factory(user_id: str, fridge_id: int | None) -> RecipeBrowser:
        return RecipeBrowser(
            user_id=user_id,
            fridge_id=fridge_id,
            composer=composer,
            remote_search=recipe_search,
            favorites=favorites_service,
            detail=recipe_detail_service,
            inventory=inventory_service,
            total_count=settings.recommendation_count,
            page_size=settings.search_page_size,
        )

    def fridge_factory(user_id: str, fridge_id: int) -> FridgeBrowser:
        return FridgeBrowser(
            user_id=user_id, fridge_id=fridge_id, inventory=inventory_service
        )

    return BrowserRegistry(recipe_factory, fridge_factory)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    history_repository = SupabaseHistoryRepository(supabase_client)
    rng = random.Random()

    user_context_service = UserContextService(
        auth_gateway=SupabaseAuthGateway(supabase_client),
        membership_repository=SupabaseMembershipRepository(supabase_client),
    )
    ingredient_catalog = IngredientCatalogService(
        SupabaseIngredientRepository(supabase_client), rng=rng
    )
    image_resolver = ImageUrlResolver(
        base_url=resolved_settings.supabase_url,
        default_bucket=resolved_settings.storage_default_bucket,
        allowed_buckets=parse_bucket_list(
            resolved_settings.storage_buckets,
            resolved_settings.storage_default_bucket,
        ),
    )
    inventory_service = InventoryService(
        repository=SupabaseInventoryRepository(supabase_client),
        catalog=ingredient_catalog,
        image_resolver=image_resolver,
        soon_days=resolved_settings.expiry_soon_days,
    )
    composer = RecommendationComposer(
        pool_fetcher=RecipePoolFetcher(
            recipe_repository,
            history_repository,
            limit=resolved_settings.recipe_pool_limit,
        ),
        similarity_provider=SupabaseSimilarityProvider(supabase_client),
        availability_loader=inventory_service.availability_index,
        rng=rng,
    )
    recipe_search = RemoteRecipeSearch(
        recipe_repository,
        ingredient_catalog,
        page_size=resolved_settings.search_page_size,
    )
    favorites_service = FavoritesService(history_repository, recipe_repository)
    recipe_detail_service = RecipeDetailService(
        recipe_repository, history_repository, ingredient_catalog
    )
    browser_registry = build_browser_registry(
        resolved_settings,
        composer=composer,
        recipe_search=recipe_search,
        favorites_service=favorites_service,
        recipe_detail_service=recipe_detail_service,
        inventory_service=inventory_service,
    )

    async def close_resources() -> None:
        browser_registry.close_all()

    return AppContainer(
        settings=resolved_settings,
        user_context_service=user_context_service,
        ingredient_catalog=ingredient_catalog,
        inventory_service=inventory_service,
        recommendation_composer=composer,
        recipe_search=recipe_search,
        favorites_service=favorites_service,
        recipe_detail_service=recipe_detail_service,
        browser_registry=browser_registry,
        close_resources=close_resources,
    )
