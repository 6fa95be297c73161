"""Tests for the per-user fridge browser."""

from datetime import date

import pytest

from myfridge.services.fridge_browser import FridgeBrowser
from myfridge.services.inventory import InventoryService
from tests.conftest import (
    FRIDGE_ID,
    USER_ID,
    InMemoryIngredientRepository,
    InMemoryInventoryRepository,
    make_item,
)


@pytest.fixture
def browser(
    inventory_repository: InMemoryInventoryRepository,
    ingredient_repository: InMemoryIngredientRepository,
    inventory_service: InventoryService,
) -> FridgeBrowser:
    ingredient_repository.add(1, "Milk")
    ingredient_repository.add(2, "Eggs")
    ingredient_repository.add(3, "Butter")
    inventory_repository.add(make_item(1, 1, expired_date="2024-05-03"))
    inventory_repository.add(make_item(2, 2, expired_date=None))
    inventory_repository.add(make_item(3, 3, expired_date="2024-04-20"))
    return FridgeBrowser(
        user_id=USER_ID,
        fridge_id=FRIDGE_ID,
        inventory=inventory_service,
        today=lambda: date(2024, 5, 1),
    )


def _ids(items) -> list[int]:  # type: ignore[no-untyped-def]
    return [item.id for item in items]


def test_load_populates_state(browser: FridgeBrowser) -> None:
    state = browser.load()

    assert state.fridge_name == "Home"
    assert _ids(state.items) == [1, 2, 3]
    assert _ids(state.visible) == [1, 2, 3]
    assert state.expiry is not None
    assert state.expiry.soon_count == 1
    assert state.expiry.message == "1 item expiring within 7 days"
    assert not state.is_loading


def test_load_failure_sets_error(
    browser: FridgeBrowser, inventory_repository: InMemoryInventoryRepository
) -> None:
    inventory_repository.fail_reads = True

    state = browser.load()

    assert state.error_message is not None
    assert state.error_message.startswith("Failed to load items")


def test_search_and_sort_only_change_visible(browser: FridgeBrowser) -> None:
    browser.load()

    state = browser.search("E")
    assert _ids(state.visible) == [2, 3]
    assert _ids(state.items) == [1, 2, 3]

    state = browser.search("")
    state = browser.sort(ascending=True)
    assert _ids(state.visible) == [3, 1, 2]

    state = browser.toggle_sort()
    assert state.sort_ascending is False
    assert _ids(state.visible) == [2, 1, 3]


def test_toggle_sort_starts_ascending(browser: FridgeBrowser) -> None:
    browser.load()
    assert browser.toggle_sort().sort_ascending is True


def test_toggle_bookmark_persists(
    browser: FridgeBrowser, inventory_repository: InMemoryInventoryRepository
) -> None:
    browser.load()

    state = browser.toggle_bookmark(2)

    assert next(item for item in state.items if item.id == 2).is_bookmarked
    assert inventory_repository.items[2].is_bookmarked
    assert inventory_repository.items[2].updated_by == USER_ID
    assert state.error_message is None


def test_toggle_bookmark_reverts_on_failure(
    browser: FridgeBrowser, inventory_repository: InMemoryInventoryRepository
) -> None:
    browser.load()
    inventory_repository.fail_writes = True

    state = browser.toggle_bookmark(2)

    assert not any(item.is_bookmarked for item in state.items)
    assert not any(item.is_bookmarked for item in state.visible)
    assert state.error_message is not None
    assert state.error_message.startswith("Failed to toggle bookmark")


def test_toggle_bookmark_unknown_item(browser: FridgeBrowser) -> None:
    browser.load()
    assert browser.toggle_bookmark(404).error_message == "Item not found."


def test_toggle_bookmark_reloads_items_added_elsewhere(
    browser: FridgeBrowser,
    inventory_service: InventoryService,
    inventory_repository: InMemoryInventoryRepository,
) -> None:
    browser.load()
    added = inventory_service.add_item(FRIDGE_ID, USER_ID, "Jam")

    state = browser.toggle_bookmark(added.id)

    assert state.error_message is None
    assert len(state.items) == 4
    assert next(item for item in state.items if item.id == added.id).is_bookmarked
    assert inventory_repository.items[added.id].is_bookmarked


def test_toggle_bookmark_before_first_load(browser: FridgeBrowser) -> None:
    state = browser.toggle_bookmark(3)

    assert state.error_message is None
    assert _ids(state.items) == [1, 2, 3]
    assert next(item for item in state.items if item.id == 3).is_bookmarked


def test_toggle_bookmark_reload_failure_keeps_load_error(
    browser: FridgeBrowser, inventory_repository: InMemoryInventoryRepository
) -> None:
    inventory_repository.fail_reads = True

    state = browser.toggle_bookmark(1)

    assert state.error_message is not None
    assert state.error_message.startswith("Failed to load items")
    assert not inventory_repository.items[1].is_bookmarked


def test_closed_browser_never_writes(browser: FridgeBrowser) -> None:
    snapshot = browser.load()
    browser.close()

    assert browser.load() is snapshot
    assert browser.toggle_bookmark(1) is snapshot
    assert browser.search("milk") is snapshot
    assert browser.state is snapshot
