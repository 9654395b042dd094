"""
Deck API endpoints.

CRUD for user decks and their card lists.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from cardkeeper.api.dependencies import CatalogDep, CollectionDep, DeckDep
from cardkeeper.api.schemas import DeckResponse
from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.collection import CollectionEntry
from cardkeeper.models.deck import Deck
from cardkeeper.services.collection_service import CollectionService, find_entry
from cardkeeper.services.scryfall_client import ScryfallClient

router = APIRouter(prefix="/decks", tags=["decks"])


class DeckListResponse(BaseModel):
    decks: list[DeckResponse]
    count: int


class CreateDeckRequest(BaseModel):
    name: str | None = None
    format: str | None = None
    commander_id: str | None = Field(default=None, description="Catalog id of the commander")
    description: str = ""


class UpdateDeckRequest(BaseModel):
    name: str | None = None
    format: str | None = None
    description: str | None = None


class SetCommanderRequest(BaseModel):
    card_id: str | None = Field(default=None, description="None clears the commander")


class DeckCardRequest(BaseModel):
    card_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)


class DeckCardQuantityRequest(BaseModel):
    quantity: int = Field(..., description="0 or below removes the card")


class DeleteResponse(BaseModel):
    deck_id: str
    deleted: bool


def _to_response(deck: Deck) -> DeckResponse:
    return DeckResponse(deck=deck.to_dict(), card_count=deck.card_count())


async def _lookup_card(
    card_id: str, collection: CollectionService, client: ScryfallClient
) -> CatalogRecord | CollectionEntry:
    """Prefer the owned snapshot; fall back to the catalog."""
    owned = await collection.load()
    index = find_entry(owned, card_id)
    if index is not None:
        return owned[index]
    return await client.get_card_by_id(card_id)


@router.get("", response_model=DeckListResponse)
async def list_decks(service: DeckDep) -> DeckListResponse:
    decks = [_to_response(deck) for deck in await service.load()]
    return DeckListResponse(decks=decks, count=len(decks))


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    request: CreateDeckRequest,
    service: DeckDep,
    collection: CollectionDep,
    client: CatalogDep,
) -> DeckResponse:
    commander = None
    if request.commander_id:
        commander = await _lookup_card(request.commander_id, collection, client)

    deck = await service.create_deck(
        name=request.name,
        format_name=request.format,
        commander=commander,
        description=request.description,
    )
    return _to_response(deck)


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(deck_id: str, service: DeckDep) -> DeckResponse:
    """Returns 404 if the deck does not exist."""
    return _to_response(await service.get_deck(deck_id))


@router.patch("/{deck_id}", response_model=DeckResponse)
async def update_deck(deck_id: str, request: UpdateDeckRequest, service: DeckDep) -> DeckResponse:
    deck = await service.update_deck(
        deck_id,
        name=request.name,
        format_name=request.format,
        description=request.description,
    )
    return _to_response(deck)


@router.delete("/{deck_id}", response_model=DeleteResponse)
async def delete_deck(deck_id: str, service: DeckDep) -> DeleteResponse:
    return DeleteResponse(deck_id=deck_id, deleted=await service.delete_deck(deck_id))


@router.put("/{deck_id}/commander", response_model=DeckResponse)
async def set_commander(
    deck_id: str,
    request: SetCommanderRequest,
    service: DeckDep,
    collection: CollectionDep,
    client: CatalogDep,
) -> DeckResponse:
    """Set or clear the commander. The commander leaves the main list."""
    commander = None
    if request.card_id:
        commander = await _lookup_card(request.card_id, collection, client)
    return _to_response(await service.set_commander(deck_id, commander))


@router.post("/{deck_id}/cards", response_model=DeckResponse)
async def add_card_to_deck(
    deck_id: str,
    request: DeckCardRequest,
    service: DeckDep,
    collection: CollectionDep,
    client: CatalogDep,
) -> DeckResponse:
    """
    Add copies of a card to the deck.

    Adding a card already in the deck adds to its quantity. Adding the
    deck's commander is rejected with 400.
    """
    card = await _lookup_card(request.card_id, collection, client)
    return _to_response(await service.add_card_to_deck(deck_id, card, request.quantity))


@router.post("/{deck_id}/cards/{card_id}/remove", response_model=DeckResponse)
async def remove_card_from_deck(
    deck_id: str,
    card_id: str,
    service: DeckDep,
    quantity: int = 1,
) -> DeckResponse:
    return _to_response(await service.remove_card_from_deck(deck_id, card_id, quantity))


@router.put("/{deck_id}/cards/{card_id}", response_model=DeckResponse)
async def update_card_in_deck(
    deck_id: str,
    card_id: str,
    request: DeckCardQuantityRequest,
    service: DeckDep,
) -> DeckResponse:
    return _to_response(await service.update_card_in_deck(deck_id, card_id, request.quantity))
