"""
Import API endpoints.

Decklist text is tokenized, resolved against the catalog, and merged into
the collection or a new deck. Unresolved lines never block the import;
they are reported back with the found / not-found counts.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from cardkeeper.api.dependencies import CollectionDep, DeckDep, ResolverDep, StoreDep
from cardkeeper.api.schemas import CollectionResponse, DeckResponse, ResolvedEntryResponse
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.decklist import ResolvedEntry
from cardkeeper.models.failure import FailureKind, KnownError
from cardkeeper.services.exporter import import_from_json
from cardkeeper.services.name_resolver import NameResolver, summarize
from cardkeeper.services.settings_service import load_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["imports"])


class DecklistRequest(BaseModel):
    """Request model for a pasted or scanned decklist."""

    text: str = Field(
        ...,
        description="One card per line: '<quantity> <name>', quantity optional",
        examples=["4 Counterspell\n1x Sol Ring\nForêt"],
    )
    lang: str | None = Field(
        default=None,
        description="Language tried after the fuzzy lookup; defaults to the user setting",
    )


class DeckImportRequest(DecklistRequest):
    name: str = "Imported Deck"
    format: str | None = None
    commander: str | None = Field(default=None, description="Commander card name")


class JsonImportRequest(BaseModel):
    content: str = Field(..., description="A JSON backup produced by the JSON export")


class ResolutionResponse(BaseModel):
    """Per-line results and found / not-found counts."""

    entries: list[ResolvedEntryResponse] = Field(default_factory=list)
    found: int = 0
    not_found: int = 0
    not_found_names: list[str] = Field(default_factory=list)


class CollectionImportResponse(ResolutionResponse):
    added: int = 0
    updated: int = 0
    collection: CollectionResponse


class DeckImportResponse(ResolutionResponse):
    deck: DeckResponse


class JsonImportResponse(BaseModel):
    cards_imported: int
    decks_imported: int


def _resolution_fields(results: list[ResolvedEntry]) -> dict[str, object]:
    summary = summarize(results)
    return {
        "entries": [ResolvedEntryResponse.from_entry(r) for r in results],
        "found": summary.found,
        "not_found": summary.not_found,
        "not_found_names": list(summary.not_found_names),
    }


async def _resolve(
    request: DecklistRequest, resolver: NameResolver, store: ObjectStore
) -> list[ResolvedEntry]:
    if not request.text or not request.text.strip():
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Decklist text cannot be empty",
        )
    lang = request.lang or (await load_settings(store)).search_language
    return await resolver.resolve_text(request.text, lang)


@router.post("/resolve", response_model=ResolutionResponse)
async def resolve_decklist(
    request: DecklistRequest,
    resolver: ResolverDep,
    store: StoreDep,
) -> ResolutionResponse:
    """Tokenize and resolve a decklist without saving anything."""
    results = await _resolve(request, resolver, store)
    return ResolutionResponse(**_resolution_fields(results))


@router.post("/collection", response_model=CollectionImportResponse)
async def import_decklist_to_collection(
    request: DecklistRequest,
    resolver: ResolverDep,
    store: StoreDep,
    service: CollectionDep,
) -> CollectionImportResponse:
    """Resolve a decklist and add every found card to the collection."""
    results = await _resolve(request, resolver, store)
    merged = await service.add_resolved_entries(results)

    return CollectionImportResponse(
        **_resolution_fields(results),
        added=merged.added,
        updated=merged.updated,
        collection=CollectionResponse(
            cards=[entry.to_dict() for entry in merged.collection],
            total_cards=sum(entry.quantity for entry in merged.collection),
            unique_cards=len(merged.collection),
        ),
    )


@router.post("/deck", response_model=DeckImportResponse, status_code=status.HTTP_201_CREATED)
async def import_decklist_as_deck(
    request: DeckImportRequest,
    resolver: ResolverDep,
    store: StoreDep,
    service: DeckDep,
) -> DeckImportResponse:
    """
    Resolve a decklist and create a deck from the found cards.

    An unresolvable commander name is logged and the deck is created
    without a commander.
    """
    results = await _resolve(request, resolver, store)

    commander = None
    if request.commander:
        resolved = await resolver.resolve_name(request.commander, request.lang)
        if resolved.record is not None:
            commander = resolved.record
        else:
            logger.warning("Commander %r could not be resolved", request.commander)

    deck = await service.create_deck_from_decklist(
        request.name, request.format, results, commander=commander
    )
    return DeckImportResponse(
        **_resolution_fields(results),
        deck=DeckResponse(deck=deck.to_dict(), card_count=deck.card_count()),
    )


@router.post("/json", response_model=JsonImportResponse)
async def import_json_backup(request: JsonImportRequest, store: StoreDep) -> JsonImportResponse:
    """Restore the collection and decks from a JSON backup."""
    result = await import_from_json(store, request.content)
    return JsonImportResponse(
        cards_imported=result.cards_imported,
        decks_imported=result.decks_imported,
    )
