"""Response models shared by the API routers."""

from typing import Any

from pydantic import BaseModel, Field

from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.decklist import ResolvedEntry
from cardkeeper.models.failure import FailureKind


class CardResponse(BaseModel):
    """A catalog record."""

    id: str
    name: str
    printed_name: str | None = None
    language: str = "en"
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    rarity: str | None = None
    mana_cost: str | None = None
    cmc: float | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    color_identity: list[str] = Field(default_factory=list)
    image_url: str | None = None
    prices: dict[str, str | None] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: CatalogRecord) -> "CardResponse":
        return cls(
            id=record.id,
            name=record.name,
            printed_name=record.printed_name,
            language=record.language,
            set_code=record.set_code,
            set_name=record.set_name,
            collector_number=record.collector_number,
            rarity=record.rarity,
            mana_cost=record.mana_cost,
            cmc=record.cmc,
            type_line=record.type_line,
            oracle_text=record.oracle_text,
            color_identity=list(record.color_identity),
            image_url=record.image_url,
            prices=dict(record.prices),
        )


class ResolvedEntryResponse(BaseModel):
    """One decklist line after name resolution."""

    quantity: int
    raw_name: str
    found: bool
    card: CardResponse | None = None
    failure: FailureKind | None = None

    @classmethod
    def from_entry(cls, entry: ResolvedEntry) -> "ResolvedEntryResponse":
        return cls(
            quantity=entry.quantity,
            raw_name=entry.raw_name,
            found=entry.found,
            card=CardResponse.from_record(entry.record) if entry.record else None,
            failure=entry.failure,
        )


class CollectionResponse(BaseModel):
    """The full collection."""

    cards: list[dict[str, Any]] = Field(default_factory=list)
    total_cards: int = 0
    unique_cards: int = 0


class DeckResponse(BaseModel):
    """One deck, in its stored JSON shape."""

    deck: dict[str, Any]
    card_count: int
