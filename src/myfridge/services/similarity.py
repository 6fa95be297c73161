"""Pluggable similarity ranking for recommendation seeding."""

from typing import Protocol


class SimilarityProvider(Protocol):
    """Strategy that ranks recipes similar to an anchor recipe.

    Scoring is opaque to the engine; only the returned order matters.
    Implementations report failures as ``FridgeError`` subclasses, which
    callers treat as an empty ranking.
    """

    def similar_to(self, anchor_id: int, count: int) -> list[int]:
        """Return up to ``count`` recipe ids ranked by similarity."""
