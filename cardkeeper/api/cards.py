"""
Card catalog endpoints.

Thin pass-through to the Scryfall client: search, named lookup,
autocomplete, and language listing.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from cardkeeper.api.dependencies import CatalogDep
from cardkeeper.api.schemas import CardResponse
from cardkeeper.services.scryfall_client import LANGUAGES

router = APIRouter(prefix="/cards", tags=["cards"])


class SearchResponse(BaseModel):
    """One page of search results."""

    cards: list[CardResponse] = Field(default_factory=list)
    total_cards: int = 0
    has_more: bool = False


class AutocompleteResponse(BaseModel):
    suggestions: list[str] = Field(default_factory=list)


@router.get("/search", response_model=SearchResponse)
async def search_cards(
    client: CatalogDep,
    q: Annotated[str, Query(min_length=1)],
    page: Annotated[int, Query(ge=1)] = 1,
    lang: str | None = None,
    any_language: bool = False,
) -> SearchResponse:
    """
    Full-text card search.

    With any_language, every printing in every language is returned;
    otherwise results are restricted to lang when it is not English.
    """
    if any_language:
        result = await client.search_cards_any_language(q, page=page)
    else:
        result = await client.search_cards(q, page=page, lang=lang)

    return SearchResponse(
        cards=[CardResponse.from_record(r) for r in result.records],
        total_cards=result.total_cards,
        has_more=result.has_more,
    )


@router.get("/named", response_model=CardResponse)
async def get_named_card(
    client: CatalogDep,
    name: Annotated[str, Query(min_length=1)],
    exact: bool = False,
    lang: str | None = None,
) -> CardResponse:
    """Look up one card by exact or fuzzy name. Returns 404 if nothing matches."""
    if exact:
        record = await client.get_card_by_exact_name(name, lang)
    else:
        record = await client.get_card_by_fuzzy_name(name)
    return CardResponse.from_record(record)


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(client: CatalogDep, q: str = "") -> AutocompleteResponse:
    return AutocompleteResponse(suggestions=await client.autocomplete(q))


@router.get("/languages")
async def list_languages() -> dict[str, str]:
    """Language codes accepted by the lang parameters."""
    return dict(LANGUAGES)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(client: CatalogDep, card_id: str, lang: str | None = None) -> CardResponse:
    """Get a card by catalog id, optionally its printing in another language."""
    if lang:
        record = await client.get_card_in_language(card_id, lang)
    else:
        record = await client.get_card_by_id(card_id)
    return CardResponse.from_record(record)
