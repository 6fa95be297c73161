"""Similarity ranking backed by the ``similar_recipes`` database function."""

import logging
from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read
from myfridge.adapters.supabase_rows import (
    lenient,
    optional_float,
    parse_rows,
    require_int,
)
from myfridge.domain.recipes import SimilarRecipe
from myfridge.services.similarity import SimilarityProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseSimilarityProvider(SimilarityProvider):
    """Rank recipes by calling a remote procedure."""

    client: Client
    function_name: str = "similar_recipes"

    def similar_to(self, anchor_id: int, count: int) -> list[int]:
        """Return up to ``count`` recipe ids most similar to the anchor."""
        ranked = self.ranked(anchor_id, count)
        _logger.debug(
            "Similarity for anchor=%s returned %s ids", anchor_id, len(ranked)
        )
        return [entry.recipe_id for entry in ranked[:count]]

    def ranked(self, anchor_id: int, count: int) -> list[SimilarRecipe]:
        """Return the raw ranking rows in the order the function returns them."""
        with remote_read("rank similar recipes"):
            response = self.client.rpc(
                self.function_name,
                {"anchor_recipe_id": anchor_id, "limit_count": count},
            ).execute()
        return parse_rows(response.data, _parse_similar, self.function_name)


def _parse_similar(row: dict[str, object]) -> SimilarRecipe:
    return SimilarRecipe(
        recipe_id=require_int(row, "recipe_id"),
        score=lenient(optional_float, row, "score") or 0.0,
    )
