"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from myfridge.api.models import (
    ExpirySummaryOut,
    FridgeItemOut,
    FridgeItemRequest,
    FridgeViewOut,
    RecipeDetailOut,
    RecipeViewOut,
    SuggestedTagsOut,
    availability_out,
    fridge_view_out,
    recipe_out,
    recipe_view_out,
)
from myfridge.app_logging import configure_logging
from myfridge.containers import AppContainer
from myfridge.domain.errors import (
    NoFridgeJoined,
    NotAuthenticated,
    ParseFailure,
    RemoteReadFailure,
    RemoteWriteFailure,
)
from myfridge.domain.users import UserIdentity
from myfridge.services.fridge_browser import FridgeBrowser
from myfridge.services.recipe_browser import RecipeBrowser
from myfridge.services.recipe_view import SortKey

_BEARER_PREFIX = "bearer "


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    if not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX) :].strip() or None


def current_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UserIdentity:
    """Resolve the signed-in user from the bearer token."""
    container = _container(request)
    return container.user_context_service.require_user(_bearer_token(authorization))


def current_fridge_id(
    request: Request, user: UserIdentity = Depends(current_user)
) -> int:
    """Resolve the user's current fridge."""
    return _container(request).user_context_service.require_fridge_id(user)


def recipe_browser(
    request: Request, user: UserIdentity = Depends(current_user)
) -> RecipeBrowser:
    """Return the user's recipe browser; a missing fridge only hides availability."""
    container = _container(request)
    fridge_id = container.user_context_service.resolve_fridge_id(user)
    return container.browser_registry.recipe_browser(user.id, fridge_id)


def fridge_browser(
    request: Request,
    user: UserIdentity = Depends(current_user),
    fridge_id: int = Depends(current_fridge_id),
) -> FridgeBrowser:
    """Return the user's fridge browser."""
    return _container(request).browser_registry.fridge_browser(user.id, fridge_id)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NotAuthenticated)
    async def not_authenticated(_: Request, exc: NotAuthenticated) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)}
        )

    @app.exception_handler(NoFridgeJoined)
    async def no_fridge(_: Request, exc: NoFridgeJoined) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(RemoteReadFailure)
    @app.exception_handler(RemoteWriteFailure)
    @app.exception_handler(ParseFailure)
    async def remote_failure(_: Request, exc: Exception) -> JSONResponse:
        logger.warning("Data service failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/fridge")
    def get_fridge(
        q: str | None = None,
        ascending: bool | None = None,
        browser: FridgeBrowser = Depends(fridge_browser),
    ) -> FridgeViewOut:
        """Return the fridge items, optionally filtered and sorted by expiry."""
        browser.load()
        if q is not None:
            browser.search(q)
        if ascending is not None:
            browser.sort(ascending=ascending)
        return _fridge_view(browser)

    @app.get("/fridge/expiring")
    def get_expiring(
        request: Request, fridge_id: int = Depends(current_fridge_id)
    ) -> ExpirySummaryOut:
        """Summarize items expiring within the alert window."""
        inventory = _container(request).inventory_service
        items = inventory.list_items(fridge_id)
        return ExpirySummaryOut.from_summary(
            inventory.expiry_summary(items, date.today())
        )

    @app.post("/fridge/items", status_code=status.HTTP_201_CREATED)
    def add_item(
        payload: FridgeItemRequest,
        request: Request,
        user: UserIdentity = Depends(current_user),
        fridge_id: int = Depends(current_fridge_id),
    ) -> FridgeItemOut:
        """Add an item, creating a custom ingredient for unknown names."""
        inventory = _container(request).inventory_service
        item = inventory.add_item(
            fridge_id,
            user.id,
            payload.name,
            quantity=payload.quantity,
            quantity_unit=payload.quantity_unit,
            expired_date=payload.expired_date,
            add_on=payload.add_on,
            image_path=payload.image_path,
        )
        logger.info("Added item_id=%s to fridge_id=%s", item.id, fridge_id)
        return FridgeItemOut.from_item(item, inventory.classify(item, date.today()))

    @app.put("/fridge/items/{item_id}")
    def update_item(
        item_id: int,
        payload: FridgeItemRequest,
        request: Request,
        user: UserIdentity = Depends(current_user),
        fridge_id: int = Depends(current_fridge_id),
    ) -> dict[str, str]:
        """Replace an item's details."""
        _container(request).inventory_service.update_item(
            fridge_id,
            item_id,
            user.id,
            payload.name,
            quantity=payload.quantity,
            quantity_unit=payload.quantity_unit,
            expired_date=payload.expired_date,
            add_on=payload.add_on,
            image_path=payload.image_path,
        )
        return {"status": "ok"}

    @app.post("/fridge/items/{item_id}/bookmark")
    def toggle_bookmark(
        item_id: int, browser: FridgeBrowser = Depends(fridge_browser)
    ) -> FridgeViewOut:
        """Flip an item's bookmark flag."""
        browser.toggle_bookmark(item_id)
        return _fridge_view(browser)

    @app.delete("/fridge/items/{item_id}")
    def delete_item(
        item_id: int,
        request: Request,
        fridge_id: int = Depends(current_fridge_id),
    ) -> dict[str, str]:
        """Delete an item from the current fridge."""
        deleted = _container(request).inventory_service.delete_item(fridge_id, item_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in this fridge",
            )
        return {"status": "deleted"}

    @app.get("/recipes/recommended")
    def recommended(
        count: int | None = Query(default=None, ge=1),
        browser: RecipeBrowser = Depends(recipe_browser),
    ) -> RecipeViewOut:
        """Compose a fresh recommendation list."""
        state = browser.refresh_recommendations(count)
        return recipe_view_out(state, state.recommended)

    @app.get("/recipes/view")
    def recipe_view(
        sort: SortKey | None = None,
        ascending: bool = True,
        q: str | None = None,
        tags: list[str] | None = Query(default=None),
        browser: RecipeBrowser = Depends(recipe_browser),
    ) -> RecipeViewOut:
        """Filter and sort the last recommendations locally."""
        state = browser.apply_view(
            sort, ascending=ascending, free_text=q, selected_tags=tags
        )
        return recipe_view_out(state, state.filtered)

    @app.get("/recipes/search")
    def search_recipes(
        q: str = "",
        tags: list[str] | None = Query(default=None),
        more: bool = False,
        browser: RecipeBrowser = Depends(recipe_browser),
    ) -> RecipeViewOut:
        """Search recipes remotely; ``more`` extends the previous search."""
        state = browser.load_more() if more else browser.search(q, tags)
        return recipe_view_out(state, state.filtered)

    @app.get("/recipes/favorites")
    def favorites(
        q: str | None = None,
        more: bool = False,
        browser: RecipeBrowser = Depends(recipe_browser),
    ) -> RecipeViewOut:
        """List or search the user's favorites."""
        if more:
            state = browser.load_more_favorites()
        elif q is not None:
            state = browser.search_favorites(q)
        else:
            state = browser.load_favorites()
        return recipe_view_out(state, state.favorites)

    @app.get("/recipes/{recipe_id}")
    def recipe_detail(
        recipe_id: int, browser: RecipeBrowser = Depends(recipe_browser)
    ) -> RecipeDetailOut:
        """Return a recipe with per-ingredient availability."""
        state = browser.select_recipe(recipe_id)
        if state.selected_recipe is None or state.selected_recipe.id != recipe_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=state.error_message or "Recipe not found",
            )
        return RecipeDetailOut(
            recipe=recipe_out(state.selected_recipe),
            ingredients=[
                availability_out(entry) for entry in state.ingredient_availability
            ],
        )

    @app.post("/recipes/{recipe_id}/favorite")
    def toggle_favorite(
        recipe_id: int, browser: RecipeBrowser = Depends(recipe_browser)
    ) -> RecipeViewOut:
        """Flip a recipe's favorite status."""
        if not browser.state.favorites:
            browser.load_favorites()
        state = browser.toggle_favorite(recipe_id)
        return recipe_view_out(state, state.favorites)

    @app.get("/ingredients/suggested", dependencies=[Depends(current_user)])
    def suggested_tags(
        request: Request, count: int = Query(default=3, ge=1, le=20)
    ) -> SuggestedTagsOut:
        """Return a few random ingredient names for tag chips."""
        return SuggestedTagsOut(
            tags=_container(request).ingredient_catalog.suggest_tags(count)
        )

    return app


def _fridge_view(browser: FridgeBrowser) -> FridgeViewOut:
    today = date.today()
    statuses = {
        item.id: browser.inventory.classify(item, today)
        for item in browser.state.visible
    }
    return fridge_view_out(browser.state, statuses)
