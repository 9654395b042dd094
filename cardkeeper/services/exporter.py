"""
Collection import and export.

Formats:
- JSON: full snapshot {version, exportDate, collection, decks}
- CSV: one row per collection entry, fixed column order
- Decklist: "<quantity> <name>" lines, readable by tokenize_decklist
"""

import csv
import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import StringIO
from typing import Any

from cardkeeper.config import COLLECTION_KEY, DECKS_KEY, EXPORT_VERSION
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.collection import CollectionEntry, utc_now
from cardkeeper.models.deck import Deck
from cardkeeper.models.failure import FailureKind, KnownError
from cardkeeper.parsers.decklist import format_decklist, format_decklist_line

CSV_HEADERS = (
    "Card Name",
    "Quantity",
    "Set",
    "Set Code",
    "Collector Number",
    "Rarity",
    "Condition",
    "Foil",
    "Price USD",
    "Notes",
)


@dataclass
class ImportResult:
    """Counts restored by a JSON import."""

    cards_imported: int
    decks_imported: int


def _price(value: str | None) -> Decimal | str:
    """USD price as a number, so the CSV writer leaves it unquoted."""
    if not value:
        return ""
    try:
        return Decimal(value)
    except InvalidOperation:
        return value


def export_to_json(
    collection: Sequence[CollectionEntry],
    decks: Sequence[Deck],
    export_date: datetime | None = None,
) -> str:
    """Full backup of the collection and decks as pretty-printed JSON."""
    payload = {
        "version": EXPORT_VERSION,
        "exportDate": (export_date or utc_now()).isoformat(),
        "collection": [entry.to_dict() for entry in collection],
        "decks": [deck.to_dict() for deck in decks],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_collection_to_csv(collection: Sequence[CollectionEntry]) -> str:
    """
    Collection as CSV.

    Every text field is double-quoted with embedded quotes doubled;
    quantity and price are written bare. The header row is unquoted.
    """
    buffer = StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)

    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for entry in collection:
        writer.writerow(
            [
                entry.name,
                entry.quantity,
                entry.set_name or "",
                entry.set_code or "",
                entry.collector_number or "",
                entry.rarity or "",
                entry.condition or "NM",
                "Yes" if entry.foil else "No",
                _price(entry.prices.get("usd")),
                entry.notes or "",
            ]
        )
    return buffer.getvalue()


def export_collection_to_decklist(collection: Sequence[CollectionEntry]) -> str:
    """Collection as decklist text, sorted by name."""
    return format_decklist((entry.quantity, entry.name) for entry in collection)


def export_deck_to_decklist(deck: Deck) -> str:
    """
    Deck as decklist text.

    Header comments carry the deck name and format, followed by a
    commander section and the main list sorted by name.
    """
    lines = [f"// {deck.name}"]
    if deck.format:
        lines.append(f"// Format: {deck.format}")
    lines.append("")

    if deck.commander:
        lines.append("// Commander")
        lines.append(format_decklist_line(1, deck.commander.name))
        lines.append("")

    main = [
        (card.quantity, card.name)
        for card in deck.cards
        if not (deck.commander and card.name == deck.commander.name)
    ]
    if main:
        lines.append("// Deck")
        lines.append(format_decklist(main))

    return "\n".join(lines)


def _parse_backup(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Import file is not valid JSON",
            detail=str(e),
        ) from e

    if not isinstance(data, dict):
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Import file must contain a JSON object",
        )
    return data


async def import_from_json(store: ObjectStore, text: str) -> ImportResult:
    """
    Restore a JSON backup.

    The collection and the decks are each replaced only if present in the
    backup. Rows are validated before anything is written.
    """
    data = _parse_backup(text)

    try:
        collection = [CollectionEntry.from_dict(row) for row in data.get("collection") or []]
        decks = [Deck.from_dict(row) for row in data.get("decks") or []]
    except (KeyError, TypeError, ValueError) as e:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Import file contains malformed entries",
            detail=str(e),
        ) from e

    if "collection" in data:
        await store.save(COLLECTION_KEY, [entry.to_dict() for entry in collection])
    if "decks" in data:
        await store.save(DECKS_KEY, [deck.to_dict() for deck in decks])

    return ImportResult(cards_imported=len(collection), decks_imported=len(decks))
