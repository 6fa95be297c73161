"""Per-user browser instances kept between requests."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from myfridge.services.fridge_browser import FridgeBrowser
from myfridge.services.recipe_browser import RecipeBrowser

_logger = logging.getLogger(__name__)

RecipeBrowserFactory = Callable[[str, int | None], RecipeBrowser]
FridgeBrowserFactory = Callable[[str, int], FridgeBrowser]


@dataclass
class BrowserRegistry:
    """In-memory registry of browsers keyed by user and fridge."""

    recipe_factory: RecipeBrowserFactory
    fridge_factory: FridgeBrowserFactory
    _recipe_browsers: dict[str, RecipeBrowser]
    _fridge_browsers: dict[str, FridgeBrowser]

    def __init__(
        self,
        recipe_factory: RecipeBrowserFactory,
        fridge_factory: FridgeBrowserFactory,
    ) -> None:
        self.recipe_factory = recipe_factory
        self.fridge_factory = fridge_factory
        self._recipe_browsers = {}
        self._fridge_browsers = {}

    def recipe_browser(self, user_id: str, fridge_id: int | None) -> RecipeBrowser:
        """Return the user's recipe browser, replacing it when the fridge changed."""
        browser = self._recipe_browsers.get(user_id)
        if browser is not None and browser.fridge_id == fridge_id:
            return browser
        if browser is not None:
            browser.close()
        browser = self.recipe_factory(user_id, fridge_id)
        self._recipe_browsers[user_id] = browser
        _logger.debug("Created recipe browser for user_id=%s", user_id)
        return browser

    def fridge_browser(self, user_id: str, fridge_id: int) -> FridgeBrowser:
        """Return the user's fridge browser, replacing it when the fridge changed."""
        browser = self._fridge_browsers.get(user_id)
        if browser is not None and browser.fridge_id == fridge_id:
            return browser
        if browser is not None:
            browser.close()
        browser = self.fridge_factory(user_id, fridge_id)
        self._fridge_browsers[user_id] = browser
        _logger.debug("Created fridge browser for user_id=%s", user_id)
        return browser

    def close_all(self) -> None:
        """Close every browser and forget them."""
        for browser in [
            *self._recipe_browsers.values(),
            *self._fridge_browsers.values(),
        ]:
            browser.close()
        self._recipe_browsers.clear()
        self._fridge_browsers.clear()
