from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.collection import CollectionEntry, CollectionStats
from cardkeeper.models.deck import Deck, DeckCardRef
from cardkeeper.models.decklist import DecklistEntry, ResolutionSummary, ResolvedEntry
from cardkeeper.models.failure import (
    ApiResponse,
    CardNotFoundError,
    CatalogError,
    CatalogUnavailableError,
    DeckNotFoundError,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    StorageError,
)
from cardkeeper.models.recommendation import DeckSuggestions, Recommendations, RecommendedCard
from cardkeeper.models.settings import UserSettings

__all__ = [
    "ApiResponse",
    "CardNotFoundError",
    "CatalogError",
    "CatalogRecord",
    "CatalogUnavailableError",
    "CollectionEntry",
    "CollectionStats",
    "Deck",
    "DeckCardRef",
    "DeckNotFoundError",
    "DeckSuggestions",
    "DecklistEntry",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "OutcomeType",
    "Recommendations",
    "RecommendedCard",
    "ResolutionSummary",
    "ResolvedEntry",
    "StorageError",
    "UserSettings",
]
