from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.collection import CollectionEntry, parse_timestamp, utc_now

DEFAULT_DECK_NAME = "New Deck"
DEFAULT_FORMAT = "commander"


@dataclass
class DeckCardRef:
    """
    A card inside a deck.

    Lighter snapshot than CollectionEntry. Its quantity is tracked
    independently from the collection's count of the same card.
    """

    id: str
    name: str
    quantity: int = 1
    scryfall_id: str | None = None
    image_url: str | None = None
    mana_cost: str | None = None
    type_line: str | None = None
    cmc: float | None = None
    color_identity: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: CatalogRecord, quantity: int = 1) -> "DeckCardRef":
        return cls(
            id=record.id,
            scryfall_id=record.id,
            name=record.name,
            quantity=quantity,
            image_url=record.image_url_small,
            mana_cost=record.mana_cost,
            type_line=record.type_line,
            cmc=record.cmc,
            color_identity=list(record.color_identity),
        )

    @classmethod
    def from_collection_entry(cls, entry: CollectionEntry, quantity: int = 1) -> "DeckCardRef":
        return cls(
            id=entry.id,
            scryfall_id=entry.scryfall_id or entry.id,
            name=entry.name,
            quantity=quantity,
            image_url=entry.image_url_small or entry.image_url,
            mana_cost=entry.mana_cost,
            type_line=entry.type_line,
            cmc=entry.cmc,
            color_identity=list(entry.color_identity),
        )

    def matches(self, card_id: str | None, name: str | None = None) -> bool:
        """
        Identity check for deck cards.

        Ids (primary or legacy alias) decide when both sides have one; the
        display name is only compared when an id is missing.
        """
        if card_id and (self.id or self.scryfall_id):
            return self.id == card_id or self.scryfall_id == card_id
        return name is not None and self.name == name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "scryfallId": self.scryfall_id,
            "name": self.name,
            "imageUrl": self.image_url,
            "manaCost": self.mana_cost,
            "typeLine": self.type_line,
            "cmc": self.cmc,
            "colorIdentity": list(self.color_identity),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeckCardRef":
        card_id = data.get("id") or data.get("scryfallId") or ""
        return cls(
            id=str(card_id),
            scryfall_id=data.get("scryfallId"),
            name=data.get("name") or "",
            quantity=int(data.get("quantity") or 1),
            image_url=data.get("imageUrl"),
            mana_cost=data.get("manaCost"),
            type_line=data.get("typeLine"),
            cmc=data.get("cmc"),
            color_identity=list(data.get("colorIdentity") or []),
        )


@dataclass
class Deck:
    """
    A user-built deck.

    Attributes:
        id: Locally generated identifier
        format: Game format (commander, standard, modern, ...)
        commander: The commander, never duplicated in cards
        cards: Unique by card identity, in insertion order
        updated_at: Refreshed on every change to cards or commander
    """

    id: str
    name: str = DEFAULT_DECK_NAME
    format: str = DEFAULT_FORMAT
    commander: DeckCardRef | None = None
    cards: list[DeckCardRef] = field(default_factory=list)
    description: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def card_count(self) -> int:
        """Total cards in the main list, plus the commander."""
        total = sum(card.quantity for card in self.cards)
        return total + (1 if self.commander else 0)

    def find_card(self, card_id: str | None, name: str | None = None) -> int | None:
        """Index of the matching card in cards, or None."""
        for index, card in enumerate(self.cards):
            if card.matches(card_id, name):
                return index
        return None

    def is_commander(self, card_id: str | None, name: str | None = None) -> bool:
        return self.commander is not None and self.commander.matches(card_id, name)

    def touch(self) -> None:
        self.updated_at = utc_now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "format": self.format,
            "commander": self.commander.to_dict() if self.commander else None,
            "cards": [card.to_dict() for card in self.cards],
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Deck":
        """Deserialize from the stored JSON shape. Raises ValueError on a row without an id."""
        if not isinstance(data, dict):
            raise TypeError(f"deck row must be an object, got {type(data).__name__}")
        if not data.get("id"):
            raise ValueError("deck has no id")

        commander = data.get("commander")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or DEFAULT_DECK_NAME,
            format=data.get("format") or DEFAULT_FORMAT,
            commander=DeckCardRef.from_dict(commander) if commander else None,
            cards=[DeckCardRef.from_dict(card) for card in data.get("cards") or []],
            description=data.get("description") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )
