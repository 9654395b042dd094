"""
Collection API endpoints.

Read, filter, and mutate the persisted collection. Cards are added by
catalog id; the record is fetched and snapshotted at add time.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from cardkeeper.api.dependencies import CatalogDep, CollectionDep
from cardkeeper.api.schemas import CollectionResponse
from cardkeeper.models.collection import CollectionEntry

router = APIRouter(prefix="/collection", tags=["collection"])


class AddCardRequest(BaseModel):
    """Request model for adding a card by catalog id."""

    card_id: str = Field(..., min_length=1, description="Catalog id of the printing")
    quantity: int = Field(default=1, ge=1)


class RemoveCardRequest(BaseModel):
    quantity: int = Field(default=1, ge=1)


class UpdateCardRequest(BaseModel):
    """Local fields of a collection entry. Omitted fields are left unchanged."""

    quantity: int | None = Field(
        default=None,
        description="New quantity; 0 or below deletes the entry",
    )
    foil: bool | None = None
    condition: str | None = None
    notes: str | None = None


class CollectionStatsResponse(BaseModel):
    """Response model for collection statistics."""

    total_cards: int = 0
    unique_cards: int = 0
    total_value: float = 0.0
    by_color: dict[str, int] = Field(default_factory=dict)
    by_rarity: dict[str, int] = Field(default_factory=dict)
    by_set: dict[str, int] = Field(default_factory=dict)


def _to_response(collection: list[CollectionEntry]) -> CollectionResponse:
    return CollectionResponse(
        cards=[entry.to_dict() for entry in collection],
        total_cards=sum(entry.quantity for entry in collection),
        unique_cards=len(collection),
    )


@router.get("", response_model=CollectionResponse)
async def get_collection(service: CollectionDep) -> CollectionResponse:
    return _to_response(await service.load())


@router.get("/stats", response_model=CollectionStatsResponse)
async def get_collection_stats(service: CollectionDep) -> CollectionStatsResponse:
    """Totals, USD value, and breakdowns by color identity, rarity, and set."""
    stats = await service.get_stats()
    return CollectionStatsResponse(
        total_cards=stats.total_cards,
        unique_cards=stats.unique_cards,
        total_value=stats.total_value,
        by_color=stats.by_color,
        by_rarity=stats.by_rarity,
        by_set=stats.by_set,
    )


@router.get("/search", response_model=CollectionResponse)
async def search_collection(
    service: CollectionDep,
    q: str | None = None,
    colors: Annotated[list[str] | None, Query()] = None,
    rarity: str | None = None,
    set_code: str | None = None,
    min_cmc: float | None = None,
    max_cmc: float | None = None,
) -> CollectionResponse:
    """Filter the collection by text, colors, rarity, set, and mana value."""
    results = await service.search(
        q,
        colors=colors,
        rarity=rarity,
        set_code=set_code,
        min_cmc=min_cmc,
        max_cmc=max_cmc,
    )
    return _to_response(results)


@router.get("/commanders", response_model=CollectionResponse)
async def get_commanders(service: CollectionDep) -> CollectionResponse:
    return _to_response(await service.get_commanders())


@router.post("/cards", response_model=CollectionResponse)
async def add_card(
    request: AddCardRequest,
    service: CollectionDep,
    client: CatalogDep,
) -> CollectionResponse:
    """
    Add copies of a card to the collection.

    Adding a card already owned adds to its quantity.
    """
    record = await client.get_card_by_id(request.card_id)
    return _to_response(await service.add_card(record, request.quantity))


@router.post("/cards/{card_id}/remove", response_model=CollectionResponse)
async def remove_card(
    card_id: str,
    request: RemoveCardRequest,
    service: CollectionDep,
) -> CollectionResponse:
    """Remove copies of a card; removing all copies deletes the entry."""
    return _to_response(await service.remove_card(card_id, request.quantity))


@router.patch("/cards/{card_id}", response_model=CollectionResponse)
async def update_card(
    card_id: str,
    request: UpdateCardRequest,
    service: CollectionDep,
) -> CollectionResponse:
    updates = request.model_dump(exclude_none=True)
    return _to_response(await service.update_card(card_id, **updates))
