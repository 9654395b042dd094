"""
Deck reconciliation.

INVARIANTS:
1. A deck's cards are unique by identity (id, legacy alias, or name when
   no id is known); adding a present card adds to its quantity
2. A card whose quantity would drop to 0 or below is removed
3. The commander is never duplicated in cards
4. updated_at is refreshed on every change to cards or commander, and
   every successful mutation writes the full deck list back
"""

import logging
import uuid
from collections.abc import Sequence

from cardkeeper.config import DECKS_KEY
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.collection import CollectionEntry
from cardkeeper.models.deck import DEFAULT_DECK_NAME, DEFAULT_FORMAT, Deck, DeckCardRef
from cardkeeper.models.decklist import ResolvedEntry
from cardkeeper.models.failure import DeckNotFoundError, FailureKind, KnownError, StorageError

logger = logging.getLogger(__name__)

CardLike = CatalogRecord | CollectionEntry | DeckCardRef


def to_card_ref(card: CardLike, quantity: int = 1) -> DeckCardRef:
    """Snapshot any card representation as a DeckCardRef."""
    if isinstance(card, DeckCardRef):
        return DeckCardRef.from_dict({**card.to_dict(), "quantity": quantity})
    if isinstance(card, CollectionEntry):
        return DeckCardRef.from_collection_entry(card, quantity)
    return DeckCardRef.from_record(card, quantity)


def merge_card(deck: Deck, ref: DeckCardRef) -> None:
    """Add ref to deck.cards, merging quantities with a matching card."""
    index = deck.find_card(ref.id, ref.name)
    if index is not None:
        deck.cards[index].quantity += ref.quantity
    else:
        deck.cards.append(ref)


def _new_deck_id() -> str:
    return uuid.uuid4().hex


class DeckService:
    """Reads, reconciles, and writes back the user's decks."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    async def load(self) -> list[Deck]:
        """Read the stored decks. Raises StorageError if a stored deck cannot be read."""
        raw = await self._store.load(DECKS_KEY, default=[])
        try:
            return [Deck.from_dict(row) for row in raw]
        except (TypeError, ValueError) as e:
            logger.error("Unreadable row in stored decks: %s", e)
            raise StorageError(DECKS_KEY, detail=f"unreadable deck: {e}") from e

    async def save(self, decks: Sequence[Deck]) -> None:
        await self._store.save(DECKS_KEY, [deck.to_dict() for deck in decks])

    async def get_deck(self, deck_id: str) -> Deck:
        for deck in await self.load():
            if deck.id == deck_id:
                return deck
        raise DeckNotFoundError(deck_id)

    async def _load_with(self, deck_id: str) -> tuple[list[Deck], Deck]:
        decks = await self.load()
        for deck in decks:
            if deck.id == deck_id:
                return decks, deck
        raise DeckNotFoundError(deck_id)

    # -------------------------------------------------------------------------
    # Deck lifecycle
    # -------------------------------------------------------------------------

    async def create_deck(
        self,
        name: str | None = None,
        format_name: str | None = None,
        commander: CardLike | None = None,
        cards: Sequence[CardLike] | None = None,
        description: str = "",
    ) -> Deck:
        """
        Create and persist a deck.

        Cards are merged by identity; any card matching the commander is
        left out of the main list.
        """
        deck = Deck(
            id=_new_deck_id(),
            name=name or DEFAULT_DECK_NAME,
            format=format_name or DEFAULT_FORMAT,
            commander=to_card_ref(commander) if commander is not None else None,
            description=description,
        )
        for card in cards or []:
            quantity = card.quantity if isinstance(card, DeckCardRef | CollectionEntry) else 1
            ref = to_card_ref(card, quantity)
            if deck.is_commander(ref.id, ref.name):
                continue
            merge_card(deck, ref)

        decks = await self.load()
        decks.append(deck)
        await self.save(decks)
        logger.info(
            "Created deck %s (%s) with %d cards", deck.name, deck.format, deck.card_count()
        )
        return deck

    async def create_deck_from_decklist(
        self,
        name: str,
        format_name: str | None,
        results: Sequence[ResolvedEntry],
        commander: CardLike | None = None,
    ) -> Deck:
        """
        Create a deck from a resolved decklist.

        Only found entries are kept. Duplicate lines for one card add up.
        """
        cards = [
            DeckCardRef.from_record(r.record, r.quantity)
            for r in results
            if r.found and r.record is not None
        ]
        return await self.create_deck(
            name=name, format_name=format_name, commander=commander, cards=cards
        )

    async def update_deck(
        self,
        deck_id: str,
        *,
        name: str | None = None,
        format_name: str | None = None,
        description: str | None = None,
    ) -> Deck:
        """Rename a deck or change its format or description."""
        decks, deck = await self._load_with(deck_id)
        if name is not None:
            deck.name = name
        if format_name is not None:
            deck.format = format_name
        if description is not None:
            deck.description = description
        deck.touch()
        await self.save(decks)
        return deck

    async def set_commander(self, deck_id: str, commander: CardLike | None) -> Deck:
        """
        Set or clear the commander.

        The new commander is taken out of the main card list.
        """
        decks, deck = await self._load_with(deck_id)
        if commander is None:
            deck.commander = None
        else:
            ref = to_card_ref(commander)
            deck.commander = ref
            deck.cards = [c for c in deck.cards if not ref.matches(c.id or None, c.name)]
        deck.touch()
        await self.save(decks)
        return deck

    async def delete_deck(self, deck_id: str) -> bool:
        """
        Delete a deck.

        Returns True if deleted, False if not found.
        """
        decks = await self.load()
        remaining = [d for d in decks if d.id != deck_id]
        if len(remaining) == len(decks):
            return False
        await self.save(remaining)
        return True

    # -------------------------------------------------------------------------
    # Card mutations
    # -------------------------------------------------------------------------

    async def add_card_to_deck(self, deck_id: str, card: CardLike, quantity: int = 1) -> Deck:
        """
        Add copies of a card to a deck's main list.

        Raises:
            DeckNotFoundError: Unknown deck
            KnownError: The card is the deck's commander, or quantity < 1
        """
        if quantity < 1:
            raise KnownError(kind=FailureKind.INVALID_INPUT, message="Quantity must be positive")

        decks, deck = await self._load_with(deck_id)
        ref = to_card_ref(card, quantity)

        if deck.is_commander(ref.id, ref.name):
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=f"'{ref.name}' is this deck's commander",
                suggestion="The commander is stored separately from the main list.",
            )

        merge_card(deck, ref)
        deck.touch()
        await self.save(decks)
        return deck

    async def remove_card_from_deck(self, deck_id: str, card_id: str, quantity: int = 1) -> Deck:
        """
        Remove copies of a card from a deck.

        Removing at least as many copies as present removes the card.
        """
        if quantity < 1:
            raise KnownError(kind=FailureKind.INVALID_INPUT, message="Quantity must be positive")

        decks, deck = await self._load_with(deck_id)
        index = deck.find_card(card_id)
        if index is None:
            return deck

        if quantity >= deck.cards[index].quantity:
            del deck.cards[index]
        else:
            deck.cards[index].quantity -= quantity

        deck.touch()
        await self.save(decks)
        return deck

    async def update_card_in_deck(self, deck_id: str, card_id: str, quantity: int) -> Deck:
        """Set a card's quantity; 0 or below removes it."""
        decks, deck = await self._load_with(deck_id)
        index = deck.find_card(card_id)
        if index is None:
            return deck

        if quantity <= 0:
            del deck.cards[index]
        else:
            deck.cards[index].quantity = quantity

        deck.touch()
        await self.save(decks)
        return deck
