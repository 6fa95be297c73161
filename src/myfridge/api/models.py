"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from myfridge.domain.fridge import ExpiryStatus, ExpirySummary, FridgeItem
from myfridge.domain.recipes import IngredientAvailability, Recipe
from myfridge.services.state import FridgeViewState, RecipeViewState


class FridgeItemRequest(BaseModel):
    """Payload for adding or updating a fridge item."""

    name: str = Field(min_length=1)
    quantity: float | None = None
    quantity_unit: str | None = None
    expired_date: str | None = None
    add_on: str | None = None
    image_path: str | None = None


class FridgeItemOut(BaseModel):
    """Fridge item with resolved name and expiry status."""

    id: int
    fridge_id: int | None
    ingredient_id: int | None
    name: str
    quantity: float | None
    quantity_unit: str | None
    expired_date: str | None
    add_on: str | None
    image_url: str | None
    is_bookmarked: bool
    status: ExpiryStatus | None = None

    @classmethod
    def from_item(
        cls, item: FridgeItem, status: ExpiryStatus | None = None
    ) -> "FridgeItemOut":
        return cls(
            id=item.id,
            fridge_id=item.fridge_id,
            ingredient_id=item.ingredient_id,
            name=item.display_name,
            quantity=item.quantity,
            quantity_unit=item.quantity_unit,
            expired_date=item.expired_date,
            add_on=item.add_on,
            image_url=item.image_url,
            is_bookmarked=item.is_bookmarked,
            status=status,
        )


class ExpirySummaryOut(BaseModel):
    """Items expiring soon with a display message."""

    soon_count: int
    message: str
    preview: list[FridgeItemOut]

    @classmethod
    def from_summary(cls, summary: ExpirySummary) -> "ExpirySummaryOut":
        return cls(
            soon_count=summary.soon_count,
            message=summary.message,
            preview=[FridgeItemOut.from_item(item) for item in summary.preview],
        )


class FridgeViewOut(BaseModel):
    """Fridge screen state."""

    fridge_name: str | None
    items: list[FridgeItemOut]
    search_query: str
    sort_ascending: bool | None
    expiry: ExpirySummaryOut | None
    error_message: str | None


class RecipeOut(BaseModel):
    """Recipe with favorite flag and availability counters."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    total_time: str | None
    rating: float | None
    url: str | None
    img_src: str | None
    tags: list[str]
    steps: list[str]
    display_ingredients: list[str]
    clean_ingredients: list[str]
    is_favorite: bool
    available_count: int | None
    total_count: int | None


class IngredientAvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    available: bool


class RecipeViewOut(BaseModel):
    """Recipe screen state."""

    recipes: list[RecipeOut]
    search_query: str
    selected_tags: list[str]
    error_message: str | None


class RecipeDetailOut(BaseModel):
    """Selected recipe with per-ingredient availability."""

    recipe: RecipeOut
    ingredients: list[IngredientAvailabilityOut]


class SuggestedTagsOut(BaseModel):
    tags: list[str]


def recipe_out(recipe: Recipe) -> RecipeOut:
    return RecipeOut.model_validate(recipe)


def availability_out(entry: IngredientAvailability) -> IngredientAvailabilityOut:
    return IngredientAvailabilityOut.model_validate(entry)


def fridge_view_out(
    state: FridgeViewState, statuses: dict[int, ExpiryStatus]
) -> FridgeViewOut:
    """Render the visible fridge items of a state."""
    return FridgeViewOut(
        fridge_name=state.fridge_name,
        items=[
            FridgeItemOut.from_item(item, statuses.get(item.id))
            for item in state.visible
        ],
        search_query=state.search_query,
        sort_ascending=state.sort_ascending,
        expiry=ExpirySummaryOut.from_summary(state.expiry) if state.expiry else None,
        error_message=state.error_message,
    )


def recipe_view_out(
    state: RecipeViewState, recipes: tuple[Recipe, ...]
) -> RecipeViewOut:
    """Render one recipe list of a state."""
    return RecipeViewOut(
        recipes=[recipe_out(recipe) for recipe in recipes],
        search_query=state.search_query,
        selected_tags=list(state.selected_tags),
        error_message=state.error_message,
    )
