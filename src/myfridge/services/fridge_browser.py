"""Per-user fridge screen state and item operations."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date

from myfridge.domain.errors import FridgeError
from myfridge.domain.fridge import FridgeItem
from myfridge.services.inventory import InventoryService, search_items, sort_by_expiry
from myfridge.services.state import FridgeViewState, StateStore

_logger = logging.getLogger(__name__)


def _visible_items(
    items: Sequence[FridgeItem], query: str, ascending: bool | None
) -> tuple[FridgeItem, ...]:
    filtered = search_items(list(items), query)
    if ascending is None:
        return tuple(filtered)
    return tuple(sort_by_expiry(filtered, ascending=ascending))


def _set_bookmark_flag(
    items: Sequence[FridgeItem], item_id: int, bookmarked: bool
) -> tuple[FridgeItem, ...]:
    return tuple(
        replace(item, is_bookmarked=bookmarked) if item.id == item_id else item
        for item in items
    )


@dataclass
class FridgeBrowser:
    """Fridge view state for one user and fridge."""

    user_id: str
    fridge_id: int
    inventory: InventoryService
    today: Callable[[], date] = date.today
    store: StateStore[FridgeViewState] = field(
        default_factory=lambda: StateStore(FridgeViewState())
    )

    @property
    def state(self) -> FridgeViewState:
        return self.store.get()

    @property
    def closed(self) -> bool:
        return self.store.closed

    def close(self) -> None:
        self.store.close()

    def load(self) -> FridgeViewState:
        """Reload the fridge name and items."""
        if self.closed:
            return self.state
        self.store.update(is_loading=True, error_message=None)
        try:
            items = tuple(self.inventory.list_items(self.fridge_id))
        except FridgeError as exc:
            _logger.warning(
                "Failed to load items for fridge_id=%s", self.fridge_id, exc_info=True
            )
            return self.store.update(
                is_loading=False, error_message=f"Failed to load items: {exc}"
            )
        fridge_name = self.inventory.fridge_name(self.fridge_id)
        _logger.debug("Loaded %s items for fridge_id=%s", len(items), self.fridge_id)
        return self._publish(items, is_loading=False, fridge_name=fridge_name)

    def search(self, query: str) -> FridgeViewState:
        """Filter visible items by name."""
        if self.closed:
            return self.state
        return self._publish(self.state.items, search_query=query)

    def sort(self, *, ascending: bool) -> FridgeViewState:
        """Order visible items by expiry date."""
        if self.closed:
            return self.state
        return self._publish(self.state.items, sort_ascending=ascending)

    def toggle_sort(self) -> FridgeViewState:
        """Switch to ascending order, or to descending when already ascending."""
        return self.sort(ascending=self.state.sort_ascending is not True)

    def toggle_bookmark(self, item_id: int) -> FridgeViewState:
        """Flip an item's bookmark locally, then persist it."""
        if self.closed:
            return self.state
        current = self._find_item(item_id)
        if current is None:
            # Items added or changed elsewhere since the last load.
            reloaded = self.load()
            if reloaded.error_message is not None:
                return reloaded
            current = self._find_item(item_id)
        if current is None:
            return self.store.update(error_message="Item not found.")
        bookmarked = not current.is_bookmarked
        self._publish(_set_bookmark_flag(self.state.items, item_id, bookmarked))
        try:
            self.inventory.set_bookmark(
                self.fridge_id, item_id, bookmarked=bookmarked, user_id=self.user_id
            )
        except FridgeError as exc:
            _logger.warning(
                "Failed to toggle bookmark for item_id=%s, reverting",
                item_id,
                exc_info=True,
            )
            return self._publish(
                _set_bookmark_flag(self.state.items, item_id, current.is_bookmarked),
                error_message=f"Failed to toggle bookmark: {exc}",
            )
        return self.store.update(error_message=None)

    def _find_item(self, item_id: int) -> FridgeItem | None:
        return next((item for item in self.state.items if item.id == item_id), None)

    def _publish(
        self, items: Sequence[FridgeItem], **changes: object
    ) -> FridgeViewState:
        query = changes.get("search_query", self.state.search_query)
        ascending = changes.get("sort_ascending", self.state.sort_ascending)
        return self.store.update(
            items=tuple(items),
            visible=_visible_items(items, query, ascending),
            expiry=self.inventory.expiry_summary(list(items), self.today()),
            **changes,
        )
