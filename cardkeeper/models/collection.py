from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from cardkeeper.models.card import CatalogRecord

DEFAULT_CONDITION = "NM"


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        # Older exports end in "Z"
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return utc_now()


@dataclass
class CollectionEntry:
    """
    A card owned in the collection.

    Holds a snapshot of the catalog record taken when the card was first
    added, plus local-only fields. The snapshot is never refreshed.

    Attributes:
        id: Catalog id, the identity key
        scryfall_id: Legacy alias of id written by older versions
        quantity: Copies owned (always >= 1 while stored)
        foil: Whether the copies are foil
        condition: Grading string, "NM" by default
        notes: Free text
        added_at: Set once when the entry is created
    """

    id: str
    name: str
    quantity: int = 1
    scryfall_id: str | None = None
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    rarity: str | None = None
    colors: list[str] = field(default_factory=list)
    color_identity: list[str] = field(default_factory=list)
    mana_cost: str | None = None
    cmc: float | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    image_url: str | None = None
    image_url_small: str | None = None
    prices: dict[str, str | None] = field(default_factory=dict)
    legalities: dict[str, str] = field(default_factory=dict)
    foil: bool = False
    condition: str = DEFAULT_CONDITION
    notes: str = ""
    added_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_record(cls, record: CatalogRecord, quantity: int = 1) -> "CollectionEntry":
        """Snapshot a catalog record into a new collection entry."""
        return cls(
            id=record.id,
            scryfall_id=record.id,
            name=record.name,
            quantity=quantity,
            set_code=record.set_code,
            set_name=record.set_name,
            collector_number=record.collector_number,
            rarity=record.rarity,
            colors=list(record.colors),
            color_identity=list(record.color_identity),
            mana_cost=record.mana_cost,
            cmc=record.cmc,
            type_line=record.type_line,
            oracle_text=record.oracle_text,
            image_url=record.image_url,
            image_url_small=record.image_url_small,
            prices=dict(record.prices),
            legalities=dict(record.legalities),
        )

    def matches(self, card_id: str) -> bool:
        """True if card_id is this entry's id or its legacy alias."""
        return self.id == card_id or self.scryfall_id == card_id

    @property
    def usd_price(self) -> float:
        try:
            return float(self.prices.get("usd") or 0)
        except ValueError:
            return 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored JSON shape."""
        return {
            "id": self.id,
            "scryfallId": self.scryfall_id,
            "name": self.name,
            "setCode": self.set_code,
            "setName": self.set_name,
            "collectorNumber": self.collector_number,
            "rarity": self.rarity,
            "colors": list(self.colors),
            "colorIdentity": list(self.color_identity),
            "manaCost": self.mana_cost,
            "cmc": self.cmc,
            "typeLine": self.type_line,
            "oracleText": self.oracle_text,
            "imageUrl": self.image_url,
            "imageUrlSmall": self.image_url_small,
            "prices": dict(self.prices),
            "legalities": dict(self.legalities),
            "quantity": self.quantity,
            "addedAt": self.added_at.isoformat(),
            "foil": self.foil,
            "condition": self.condition,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CollectionEntry":
        """Deserialize from the stored JSON shape, tolerating legacy rows."""
        if not isinstance(data, dict):
            raise TypeError(f"collection row must be an object, got {type(data).__name__}")
        card_id = data.get("id") or data.get("scryfallId")
        if not card_id:
            raise ValueError("collection entry has neither id nor scryfallId")

        return cls(
            id=str(card_id),
            scryfall_id=data.get("scryfallId"),
            name=data.get("name") or "",
            quantity=int(data.get("quantity") or 1),
            set_code=data.get("setCode") or data.get("set"),
            set_name=data.get("setName") or data.get("set_name"),
            collector_number=data.get("collectorNumber"),
            rarity=data.get("rarity"),
            colors=list(data.get("colors") or []),
            color_identity=list(data.get("colorIdentity") or []),
            mana_cost=data.get("manaCost"),
            cmc=data.get("cmc"),
            type_line=data.get("typeLine"),
            oracle_text=data.get("oracleText"),
            image_url=data.get("imageUrl"),
            image_url_small=data.get("imageUrlSmall"),
            prices=dict(data.get("prices") or {}),
            legalities=dict(data.get("legalities") or {}),
            foil=bool(data.get("foil", False)),
            condition=data.get("condition") or DEFAULT_CONDITION,
            notes=data.get("notes") or "",
            added_at=parse_timestamp(data.get("addedAt")),
        )


@dataclass
class CollectionStats:
    """Aggregate numbers over a collection."""

    total_cards: int = 0
    unique_cards: int = 0
    total_value: float = 0.0
    by_color: dict[str, int] = field(default_factory=dict)
    by_rarity: dict[str, int] = field(default_factory=dict)
    by_set: dict[str, int] = field(default_factory=dict)
