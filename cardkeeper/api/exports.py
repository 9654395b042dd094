"""
Export API endpoints.

Each endpoint returns the exported document as a plain-text download.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from cardkeeper.api.dependencies import CollectionDep, DeckDep
from cardkeeper.services.exporter import (
    export_collection_to_csv,
    export_collection_to_decklist,
    export_deck_to_decklist,
    export_to_json,
)

router = APIRouter(prefix="/exports", tags=["exports"])


def _download(content: str, filename: str, media_type: str) -> PlainTextResponse:
    return PlainTextResponse(
        content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/json", response_class=PlainTextResponse)
async def export_json(collection: CollectionDep, decks: DeckDep) -> PlainTextResponse:
    """Full backup of the collection and all decks."""
    content = export_to_json(await collection.load(), await decks.load())
    return _download(content, "cardkeeper-backup.json", "application/json")


@router.get("/collection.csv", response_class=PlainTextResponse)
async def export_csv(collection: CollectionDep) -> PlainTextResponse:
    content = export_collection_to_csv(await collection.load())
    return _download(content, "collection.csv", "text/csv")


@router.get("/collection.txt", response_class=PlainTextResponse)
async def export_collection_decklist(collection: CollectionDep) -> PlainTextResponse:
    content = export_collection_to_decklist(await collection.load())
    return _download(content, "collection.txt", "text/plain")


@router.get("/decks/{deck_id}.txt", response_class=PlainTextResponse)
async def export_deck_decklist(deck_id: str, decks: DeckDep) -> PlainTextResponse:
    """Returns 404 if the deck does not exist."""
    deck = await decks.get_deck(deck_id)
    return _download(export_deck_to_decklist(deck), f"{deck.name}.txt", "text/plain")
