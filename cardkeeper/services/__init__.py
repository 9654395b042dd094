"""
CardKeeper services.

Catalog lookups, name resolution, collection/deck reconciliation, and
commander recommendations.
"""

from cardkeeper.services.collection_service import (
    CollectionService,
    MergeResult,
    can_be_commander,
    compute_stats,
)
from cardkeeper.services.deck_service import DeckService, to_card_ref
from cardkeeper.services.edhrec_client import EdhrecClient
from cardkeeper.services.exporter import (
    ImportResult,
    export_collection_to_csv,
    export_collection_to_decklist,
    export_deck_to_decklist,
    export_to_json,
    import_from_json,
)
from cardkeeper.services.http_client import RateLimitedClient
from cardkeeper.services.name_resolver import NameResolver, summarize
from cardkeeper.services.rate_limiter import RateLimiter
from cardkeeper.services.recommendation_service import (
    RecommendationService,
    parse_recommendations,
)
from cardkeeper.services.scryfall_client import LANGUAGES, ScryfallClient, SearchPage
from cardkeeper.services.settings_service import clear_all_data, load_settings, save_settings

__all__ = [
    "LANGUAGES",
    "CollectionService",
    "DeckService",
    "EdhrecClient",
    "ImportResult",
    "MergeResult",
    "NameResolver",
    "RateLimitedClient",
    "RateLimiter",
    "RecommendationService",
    "ScryfallClient",
    "SearchPage",
    "can_be_commander",
    "clear_all_data",
    "compute_stats",
    "export_collection_to_csv",
    "export_collection_to_decklist",
    "export_deck_to_decklist",
    "export_to_json",
    "import_from_json",
    "load_settings",
    "parse_recommendations",
    "save_settings",
    "summarize",
    "to_card_ref",
]
