"""Immutable view state values and their holder."""

from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from myfridge.domain.fridge import ExpirySummary, FridgeItem
from myfridge.domain.recipes import IngredientAvailability, Recipe

StateT = TypeVar("StateT")


@dataclass(frozen=True)
class RecipeViewState:
    """Snapshot of the recipe screens for one user."""

    is_loading: bool = False
    recommended: tuple[Recipe, ...] = ()
    favorites: tuple[Recipe, ...] = ()
    filtered: tuple[Recipe, ...] = ()
    search_query: str = ""
    selected_tags: tuple[str, ...] = ()
    selected_recipe: Recipe | None = None
    ingredient_availability: tuple[IngredientAvailability, ...] = ()
    error_message: str | None = None


@dataclass(frozen=True)
class FridgeViewState:
    """Snapshot of the fridge screen for one user."""

    is_loading: bool = False
    fridge_name: str | None = None
    items: tuple[FridgeItem, ...] = ()
    visible: tuple[FridgeItem, ...] = ()
    search_query: str = ""
    sort_ascending: bool | None = None
    expiry: ExpirySummary | None = None
    error_message: str | None = None


@dataclass
class StateStore(Generic[StateT]):
    """Hold one state value that is replaced atomically on each update.

    Once closed, updates are dropped so late results from a finished
    owner never reach the shared state.
    """

    value: StateT
    closed: bool = False

    def get(self) -> StateT:
        return self.value

    def set(self, value: StateT) -> StateT:
        """Replace the state, unless the store is closed."""
        if self.closed:
            return self.value
        self.value = value
        return value

    def update(self, **changes: object) -> StateT:
        """Replace the state with a copy carrying the given changes."""
        return self.set(replace(self.value, **changes))

    def close(self) -> None:
        self.closed = True
