"""
Collection reconciliation.

Merges cards into the persisted collection by identity.

INVARIANTS:
1. At most one entry per card id; identity checks both the id and its
   legacy alias (scryfallId) so older rows are never duplicated
2. Adding an existing card adds to its quantity, never overwrites it
3. An entry whose quantity would drop to 0 or below is deleted
4. Every successful mutation writes the full collection back
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from cardkeeper.config import COLLECTION_KEY
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.collection import CollectionEntry, CollectionStats
from cardkeeper.models.decklist import ResolvedEntry
from cardkeeper.models.failure import FailureKind, KnownError, StorageError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"foil", "condition", "notes", "quantity"})


@dataclass
class MergeResult:
    """Outcome of merging resolved decklist entries into the collection."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    collection: list[CollectionEntry] = field(default_factory=list)


def find_entry(collection: Sequence[CollectionEntry], card_id: str) -> int | None:
    """Index of the entry matching card_id (id or legacy alias), or None."""
    for index, entry in enumerate(collection):
        if entry.matches(card_id):
            return index
    return None


def merge_record(collection: list[CollectionEntry], record: CatalogRecord, quantity: int) -> bool:
    """
    Merge one record into an in-memory collection.

    Returns:
        True if a new entry was appended, False if an existing one grew.
    """
    if quantity < 1:
        raise ValueError(f"quantity must be >= 1, got {quantity}")

    index = find_entry(collection, record.id)
    if index is not None:
        collection[index].quantity += quantity
        return False

    collection.append(CollectionEntry.from_record(record, quantity))
    return True


class CollectionService:
    """Reads, reconciles, and writes back the user's collection."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    async def load(self) -> list[CollectionEntry]:
        """
        Read the stored collection.

        Raises:
            StorageError: A stored row cannot be read. Rows are never dropped.
        """
        raw = await self._store.load(COLLECTION_KEY, default=[])
        try:
            return [CollectionEntry.from_dict(row) for row in raw]
        except (TypeError, ValueError) as e:
            logger.error("Unreadable row in stored collection: %s", e)
            raise StorageError(COLLECTION_KEY, detail=f"unreadable collection row: {e}") from e

    async def save(self, collection: Sequence[CollectionEntry]) -> None:
        await self._store.save(COLLECTION_KEY, [entry.to_dict() for entry in collection])

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add_card(self, record: CatalogRecord, quantity: int = 1) -> list[CollectionEntry]:
        """Add copies of a card, merging with an existing entry."""
        return await self.add_cards([(record, quantity)])

    async def add_cards(
        self, cards: Iterable[tuple[CatalogRecord, int]]
    ) -> list[CollectionEntry]:
        """Add several (record, quantity) pairs in one write."""
        collection = await self.load()
        for record, quantity in cards:
            merge_record(collection, record, quantity)
        await self.save(collection)
        return collection

    async def add_resolved_entries(self, results: Sequence[ResolvedEntry]) -> MergeResult:
        """
        Merge a resolved decklist into the collection.

        Only found entries are merged; the rest are counted as skipped.
        Duplicate lines for the same card add up.
        """
        collection = await self.load()
        outcome = MergeResult()

        for result in results:
            if not result.found or result.record is None:
                outcome.skipped += 1
                continue
            if merge_record(collection, result.record, result.quantity):
                outcome.added += 1
            else:
                outcome.updated += 1

        await self.save(collection)
        outcome.collection = collection
        logger.info(
            "Merged decklist into collection: %d added, %d updated, %d skipped",
            outcome.added,
            outcome.updated,
            outcome.skipped,
        )
        return outcome

    async def remove_card(self, card_id: str, quantity: int = 1) -> list[CollectionEntry]:
        """
        Remove copies of a card.

        Removing at least as many copies as owned deletes the entry. An
        unknown card_id leaves the collection unchanged.
        """
        if quantity < 1:
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message="Quantity to remove must be positive",
            )

        collection = await self.load()
        index = find_entry(collection, card_id)
        if index is None:
            return collection

        entry = collection[index]
        if quantity >= entry.quantity:
            del collection[index]
        else:
            entry.quantity -= quantity

        await self.save(collection)
        return collection

    async def update_card(self, card_id: str, **updates: Any) -> list[CollectionEntry]:
        """
        Update local fields of an entry (foil, condition, notes, quantity).

        Setting quantity to 0 or below deletes the entry. Identity and
        snapshot fields cannot be changed.
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise KnownError(
                kind=FailureKind.INVALID_INPUT,
                message="Only foil, condition, notes and quantity can be updated",
                detail=f"Unsupported fields: {', '.join(sorted(unknown))}",
            )

        collection = await self.load()
        index = find_entry(collection, card_id)
        if index is None:
            return collection

        entry = collection[index]
        quantity = updates.pop("quantity", None)
        for name, value in updates.items():
            setattr(entry, name, value)
        if quantity is not None:
            if quantity <= 0:
                del collection[index]
            else:
                entry.quantity = int(quantity)

        await self.save(collection)
        return collection

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_card_quantity(self, card_id: str) -> int:
        collection = await self.load()
        index = find_entry(collection, card_id)
        return collection[index].quantity if index is not None else 0

    async def is_card_in_collection(self, card_id: str) -> bool:
        return find_entry(await self.load(), card_id) is not None

    async def get_stats(self) -> CollectionStats:
        return compute_stats(await self.load())

    async def search(
        self,
        query: str | None = None,
        *,
        colors: Sequence[str] | None = None,
        rarity: str | None = None,
        set_code: str | None = None,
        min_cmc: float | None = None,
        max_cmc: float | None = None,
    ) -> list[CollectionEntry]:
        """
        Filter the collection.

        Text matches name, type line, or rules text (case-insensitive).
        Colors match when the color identity shares any of the given colors.
        """
        results = await self.load()

        if query:
            needle = query.lower()
            results = [
                e
                for e in results
                if needle in e.name.lower()
                or needle in (e.type_line or "").lower()
                or needle in (e.oracle_text or "").lower()
            ]
        if colors:
            results = [e for e in results if any(c in e.color_identity for c in colors)]
        if rarity:
            results = [e for e in results if e.rarity == rarity]
        if set_code:
            results = [e for e in results if e.set_code == set_code]
        if min_cmc is not None:
            results = [e for e in results if (e.cmc or 0) >= min_cmc]
        if max_cmc is not None:
            results = [e for e in results if (e.cmc or 0) <= max_cmc]

        return results

    async def get_commanders(self) -> list[CollectionEntry]:
        """Owned cards that can lead a commander deck, sorted by name."""
        commanders = [e for e in await self.load() if can_be_commander(e)]
        commanders.sort(key=lambda e: e.name.lower())
        return commanders


def can_be_commander(entry: CollectionEntry) -> bool:
    """Legendary creatures, and legendary planeswalkers that say so."""
    type_line = (entry.type_line or "").lower()
    if "legendary" not in type_line:
        return False
    if "creature" in type_line:
        return True
    return "planeswalker" in type_line and "can be your commander" in (
        entry.oracle_text or ""
    ).lower()


def compute_stats(collection: Sequence[CollectionEntry]) -> CollectionStats:
    """Totals, USD value, and breakdowns by color identity, rarity, and set."""
    stats = CollectionStats(unique_cards=len(collection))

    for entry in collection:
        qty = entry.quantity
        stats.total_cards += qty
        stats.total_value += entry.usd_price * qty

        colors = entry.color_identity or ["Colorless"]
        for color in colors:
            stats.by_color[color] = stats.by_color.get(color, 0) + qty

        rarity = entry.rarity or "unknown"
        stats.by_rarity[rarity] = stats.by_rarity.get(rarity, 0) + qty

        set_name = entry.set_name or "Unknown"
        stats.by_set[set_name] = stats.by_set.get(set_name, 0) + qty

    stats.total_value = round(stats.total_value, 2)
    return stats
