from cardkeeper.api.cards import router as cards_router
from cardkeeper.api.collection import router as collection_router
from cardkeeper.api.decks import router as decks_router
from cardkeeper.api.exports import router as exports_router
from cardkeeper.api.health import router as health_router
from cardkeeper.api.imports import router as imports_router
from cardkeeper.api.recommendations import router as recommendations_router
from cardkeeper.api.settings import router as settings_router

__all__ = [
    "cards_router",
    "collection_router",
    "decks_router",
    "exports_router",
    "health_router",
    "imports_router",
    "recommendations_router",
    "settings_router",
]
