"""Per-user recipe screens: recommendations, search, favorites and detail."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from myfridge.domain.errors import FridgeError
from myfridge.domain.recipes import Recipe
from myfridge.services.availability import AvailabilityIndex
from myfridge.services.favorites import FavoritesService
from myfridge.services.inventory import InventoryService
from myfridge.services.recipe_detail import RecipeDetailService
from myfridge.services.recipe_search import SEARCH_PAGE_SIZE, RemoteRecipeSearch
from myfridge.services.recipe_view import SortKey, filter_recipes, sort_recipes
from myfridge.services.recommendations import (
    DEFAULT_TOTAL_COUNT,
    RecommendationComposer,
    annotate_recipes,
)
from myfridge.services.state import RecipeViewState, StateStore

_logger = logging.getLogger(__name__)


def _set_favorite_flag(
    recipes: Sequence[Recipe], recipe_id: int, favorite: bool
) -> tuple[Recipe, ...]:
    return tuple(
        replace(recipe, is_favorite=favorite) if recipe.id == recipe_id else recipe
        for recipe in recipes
    )


def _sync_favorite_flags(
    recipes: Sequence[Recipe], favorite_ids: set[int]
) -> tuple[Recipe, ...]:
    return tuple(
        replace(recipe, is_favorite=recipe.id in favorite_ids) for recipe in recipes
    )


def _find_recipe(recipe_id: int, *lists: Sequence[Recipe]) -> Recipe | None:
    for recipes in lists:
        for recipe in recipes:
            if recipe.id == recipe_id:
                return recipe
    return None


@dataclass
class RecipeBrowser:
    """Recipe view state for one user and the operations that change it.

    Every operation returns the resulting state. Expected failures are
    reported through ``error_message`` instead of being raised. After
    ``close()`` the state is frozen.
    """

    user_id: str
    fridge_id: int | None
    composer: RecommendationComposer
    remote_search: RemoteRecipeSearch
    favorites: FavoritesService
    detail: RecipeDetailService
    inventory: InventoryService
    total_count: int = DEFAULT_TOTAL_COUNT
    page_size: int = SEARCH_PAGE_SIZE
    store: StateStore[RecipeViewState] = field(
        default_factory=lambda: StateStore(RecipeViewState())
    )
    search_limit: int = 0
    favorite_search_limit: int = 0

    def __post_init__(self) -> None:
        self.search_limit = self.search_limit or self.page_size
        self.favorite_search_limit = self.favorite_search_limit or self.page_size

    @property
    def state(self) -> RecipeViewState:
        return self.store.get()

    @property
    def closed(self) -> bool:
        return self.store.closed

    def close(self) -> None:
        """Stop accepting state writes."""
        self.store.close()
        _logger.debug("Closed recipe browser for user_id=%s", self.user_id)

    def refresh_recommendations(
        self, total_count: int | None = None
    ) -> RecipeViewState:
        """Compose a fresh recommendation list."""
        if self.closed:
            return self.state
        self.store.update(is_loading=True)
        result = self.composer.compose(
            total_count or self.total_count,
            user_id=self.user_id,
            fridge_id=self.fridge_id,
            previous=self.state.recommended,
        )
        recommended = tuple(result.recipes)
        return self.store.update(
            is_loading=False,
            recommended=recommended,
            filtered=recommended,
            error_message=result.error_message,
        )

    def apply_view(
        self,
        sort_key: SortKey | None = None,
        *,
        ascending: bool = True,
        free_text: str | None = None,
        selected_tags: Sequence[str] | None = None,
    ) -> RecipeViewState:
        """Filter and sort the recommended list locally."""
        if self.closed:
            return self.state
        query = self.state.search_query if free_text is None else free_text
        tags = (
            self.state.selected_tags if selected_tags is None else tuple(selected_tags)
        )
        filtered = filter_recipes(self.state.recommended, query, tags)
        if sort_key is not None:
            filtered = sort_recipes(filtered, sort_key, ascending=ascending)
        return self.store.update(
            search_query=query, selected_tags=tags, filtered=tuple(filtered)
        )

    def search(
        self, free_text: str, selected_tags: Sequence[str] | None = None
    ) -> RecipeViewState:
        """Run a new remote search, resetting pagination."""
        if self.closed:
            return self.state
        self.search_limit = self.page_size
        tags = (
            self.state.selected_tags if selected_tags is None else tuple(selected_tags)
        )
        self.store.update(search_query=free_text, selected_tags=tags)
        return self._run_remote_search()

    def load_more(self) -> RecipeViewState:
        """Extend the current remote search by one page."""
        if self.closed:
            return self.state
        self.search_limit += self.page_size
        return self._run_remote_search()

    def add_tag(self, tag: str) -> RecipeViewState:
        """Select an ingredient tag and refresh the remote search."""
        if self.closed or tag in self.state.selected_tags:
            return self.state
        self.store.update(selected_tags=(*self.state.selected_tags, tag))
        return self._run_remote_search()

    def remove_tag(self, tag: str) -> RecipeViewState:
        """Deselect an ingredient tag and refresh the remote search."""
        if self.closed or tag not in self.state.selected_tags:
            return self.state
        remaining = tuple(item for item in self.state.selected_tags if item != tag)
        self.store.update(selected_tags=remaining)
        return self._run_remote_search()

    def load_favorites(self) -> RecipeViewState:
        """Load the user's favorites with availability counts."""
        if self.closed:
            return self.state
        self.store.update(is_loading=True)
        try:
            favorites = self.favorites.list_favorites(
                self.user_id, self._availability_index()
            )
        except FridgeError as exc:
            _logger.warning("Failed to load favorites", exc_info=True)
            return self.store.update(
                is_loading=False, error_message=f"Failed to load favorites: {exc}"
            )
        return self.store.update(
            is_loading=False, favorites=tuple(favorites), error_message=None
        )

    def search_favorites(self, free_text: str) -> RecipeViewState:
        """Filter favorites on every term; a blank query reloads them all."""
        if self.closed:
            return self.state
        self.favorite_search_limit = self.page_size
        self.store.update(search_query=free_text)
        if not free_text.strip():
            return self.load_favorites()
        return self._run_favorite_search()

    def load_more_favorites(self) -> RecipeViewState:
        """Extend the current favorites search by one page."""
        if self.closed:
            return self.state
        self.favorite_search_limit += self.page_size
        return self._run_favorite_search()

    def toggle_favorite(self, recipe_id: int) -> RecipeViewState:
        """Flip a recipe's favorite status locally, persist it, then resync.

        The recipe counts as a favorite when it is in the favorites list or
        flagged in the recommended list or the selected recipe. A failed
        write reverts the local flip; a successful one reloads favorites
        from the server.
        """
        if self.closed:
            return self.state
        before = self.state
        selected = before.selected_recipe
        was_favorite = (
            any(recipe.id == recipe_id for recipe in before.favorites)
            or any(
                recipe.id == recipe_id and recipe.is_favorite
                for recipe in before.recommended
            )
            or (
                selected is not None
                and selected.id == recipe_id
                and selected.is_favorite
            )
        )
        favorite = not was_favorite
        if favorite:
            source = _find_recipe(
                recipe_id,
                before.recommended,
                before.filtered,
                (selected,) if selected is not None else (),
            )
            favorites = before.favorites
            if source is not None:
                favorites = (*favorites, replace(source, is_favorite=True))
        else:
            favorites = tuple(
                recipe for recipe in before.favorites if recipe.id != recipe_id
            )
        self.store.update(
            favorites=favorites,
            **self._favorite_flags(recipe_id, favorite),
        )
        try:
            self.favorites.set_favorite(self.user_id, recipe_id, favorite=favorite)
        except FridgeError as exc:
            _logger.warning(
                "Failed to persist favorite for recipe_id=%s, reverting",
                recipe_id,
                exc_info=True,
            )
            return self.store.update(
                favorites=before.favorites,
                error_message=f"Failed to update favorite: {exc}",
                **self._favorite_flags(recipe_id, was_favorite),
            )
        return self._resync_favorites()

    def select_recipe(self, recipe_id: int) -> RecipeViewState:
        """Load a recipe with its ingredient availability and record the view."""
        if self.closed:
            return self.state
        self.store.update(is_loading=True)
        try:
            recipe = self.detail.get_recipe(recipe_id, self.user_id)
        except FridgeError as exc:
            _logger.warning("Failed to load recipe_id=%s", recipe_id, exc_info=True)
            return self.store.update(
                is_loading=False, error_message=f"Failed to load recipe: {exc}"
            )
        if recipe is None:
            return self.store.update(
                is_loading=False,
                selected_recipe=None,
                ingredient_availability=(),
                error_message="Recipe not found",
            )
        availability = self.detail.ingredient_availability(
            recipe, self._availability_index()
        )
        annotated = replace(
            recipe,
            total_count=len(availability),
            available_count=sum(1 for entry in availability if entry.available),
        )
        state = self.store.update(
            is_loading=False,
            selected_recipe=annotated,
            ingredient_availability=tuple(availability),
            error_message=None,
        )
        try:
            self.favorites.record_view(self.user_id, recipe_id)
        except FridgeError:
            _logger.warning(
                "Failed to record view for recipe_id=%s", recipe_id, exc_info=True
            )
        return state

    def _favorite_flags(self, recipe_id: int, favorite: bool) -> dict[str, object]:
        state = self.state
        selected = state.selected_recipe
        if selected is not None and selected.id == recipe_id:
            selected = replace(selected, is_favorite=favorite)
        return {
            "recommended": _set_favorite_flag(state.recommended, recipe_id, favorite),
            "filtered": _set_favorite_flag(state.filtered, recipe_id, favorite),
            "selected_recipe": selected,
        }

    def _resync_favorites(self) -> RecipeViewState:
        """Reload favorites and align every favorite flag with the server."""
        try:
            favorites = self.favorites.list_favorites(
                self.user_id, self._availability_index()
            )
        except FridgeError:
            _logger.warning("Failed to reload favorites after toggle", exc_info=True)
            return self.store.update(error_message=None)
        favorite_ids = {recipe.id for recipe in favorites}
        state = self.state
        selected = state.selected_recipe
        if selected is not None:
            selected = replace(selected, is_favorite=selected.id in favorite_ids)
        return self.store.update(
            favorites=tuple(favorites),
            recommended=_sync_favorite_flags(state.recommended, favorite_ids),
            filtered=_sync_favorite_flags(state.filtered, favorite_ids),
            selected_recipe=selected,
            error_message=None,
        )

    def _availability_index(self) -> AvailabilityIndex:
        return self.inventory.availability_index(self.fridge_id)

    def _favorite_ids(self) -> set[int]:
        try:
            return self.favorites.favorite_ids(self.user_id)
        except FridgeError:
            _logger.warning("Could not load favorite ids", exc_info=True)
            return set()

    def _run_remote_search(self) -> RecipeViewState:
        self.store.update(is_loading=True)
        try:
            rows = self.remote_search.search(
                self.state.search_query,
                self.state.selected_tags,
                limit=self.search_limit,
            )
        except FridgeError as exc:
            _logger.warning("Remote recipe search failed", exc_info=True)
            return self.store.update(
                is_loading=False, error_message=f"Failed to fetch search recipes: {exc}"
            )
        annotated = annotate_recipes(
            rows, self._favorite_ids(), self._availability_index()
        )
        _logger.debug(
            "Remote search query=%r tags=%s limit=%s returned %s recipes",
            self.state.search_query,
            self.state.selected_tags,
            self.search_limit,
            len(annotated),
        )
        return self.store.update(
            is_loading=False, filtered=tuple(annotated), error_message=None
        )

    def _run_favorite_search(self) -> RecipeViewState:
        self.store.update(is_loading=True)
        try:
            favorites = self.favorites.search_favorites(
                self.user_id,
                self.state.search_query,
                self._availability_index(),
                limit=self.favorite_search_limit,
            )
        except FridgeError as exc:
            _logger.warning("Favorite search failed", exc_info=True)
            return self.store.update(
                is_loading=False,
                error_message=f"Failed to fetch favorite search recipes: {exc}",
            )
        return self.store.update(
            is_loading=False, favorites=tuple(favorites), error_message=None
        )
