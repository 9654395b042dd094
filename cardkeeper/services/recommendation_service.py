"""
Commander deck suggestions.

Fetches a commander's EDHREC page and splits its recommended cards into
ones already in the collection and ones still to acquire. Ranking is left
to EDHREC; cards keep the order of its lists.
"""

import logging
from typing import Any

from cardkeeper.models.recommendation import DeckSuggestions, Recommendations, RecommendedCard
from cardkeeper.services.collection_service import CollectionService
from cardkeeper.services.edhrec_client import EdhrecClient

logger = logging.getLogger(__name__)

# EDHREC card list tag -> Recommendations field
CARDLIST_TAGS = {
    "highsynergycards": "high_synergy",
    "topcards": "top_cards",
    "newcards": "new_cards",
    "creatures": "creatures",
    "instants": "instants",
    "sorceries": "sorceries",
    "artifacts": "artifacts",
    "enchantments": "enchantments",
    "lands": "lands",
}

MAX_FROM_COLLECTION = 50
MAX_TO_ACQUIRE = 30


def parse_recommendations(data: dict[str, Any] | None) -> Recommendations:
    """Sort a commander page's card lists into categories. Unknown tags are ignored."""
    parsed = Recommendations()
    if not data:
        return parsed

    for cardlist in data.get("cardlists") or []:
        attr = CARDLIST_TAGS.get(cardlist.get("tag", ""))
        if attr is None:
            continue
        cards = [
            RecommendedCard.from_cardview(view)
            for view in cardlist.get("cardviews") or []
            if view.get("name")
        ]
        setattr(parsed, attr, cards)
    return parsed


def commander_name_from(data: dict[str, Any]) -> str | None:
    card = ((data.get("container") or {}).get("json_dict") or {}).get("card") or {}
    name = card.get("name")
    return str(name) if name else None


class RecommendationService:
    """Matches EDHREC recommendations against the collection."""

    def __init__(self, client: EdhrecClient, collection: CollectionService) -> None:
        self._client = client
        self._collection = collection

    async def suggest_for_commander(self, commander_name: str) -> DeckSuggestions:
        """
        Recommended cards for a commander, owned vs to acquire.

        Each card appears once, under its first category. Owned cards are
        matched by name ignoring case. At most 50 owned and 30 missing
        cards are returned.

        Raises:
            CardNotFoundError: EDHREC has no page for the commander
            CatalogUnavailableError: EDHREC could not be reached
        """
        data = await self._client.get_commander_recommendations(commander_name)
        recommendations = parse_recommendations(data)

        owned = {entry.name.lower() for entry in await self._collection.load()}
        suggestions = DeckSuggestions(
            commander=commander_name_from(data) or commander_name,
            recommendations=recommendations,
        )

        seen: set[str] = set()
        for card in recommendations.suggestion_pool():
            key = card.name.lower()
            if key in seen:
                continue
            seen.add(key)
            if key in owned:
                suggestions.from_collection.append(card)
            else:
                suggestions.to_acquire.append(card)

        suggestions.from_collection = suggestions.from_collection[:MAX_FROM_COLLECTION]
        suggestions.to_acquire = suggestions.to_acquire[:MAX_TO_ACQUIRE]
        logger.info(
            "Suggestions for %s: %d owned, %d to acquire",
            suggestions.commander,
            len(suggestions.from_collection),
            len(suggestions.to_acquire),
        )
        return suggestions
