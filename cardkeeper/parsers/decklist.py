"""
Parser for plain-text decklists.

Format, one card per line:
    <quantity> <card name>

Example:
    // Commander
    1 Atraxa, Praetors' Voice
    4x Counterspell
    Sol Ring

The quantity is optional (defaults to 1) and may be followed directly by
an "x" or "X". Lines whose name starts with "//" or "#" are comments.
Blank and malformed lines are skipped silently; tokenizing never raises.
"""

import re
from collections.abc import Iterable

from cardkeeper.models.decklist import DecklistEntry

# Pattern: "4 Counterspell", "4x Counterspell", "4XCounterspell", "Counterspell"
# Groups: (quantity or None, card_name)
# The x is only part of the quantity when digits precede it, so names like
# "Xenagos, the Reveler" keep their first letter. The quantity is possessive:
# "12" and "4x" leave an empty name instead of backtracking into one.
DECKLIST_LINE_PATTERN = re.compile(r"^(?:(\d++)[xX]?+)?\s*(.*)$")

COMMENT_PREFIXES = ("//", "#")


def parse_decklist_line(line: str) -> DecklistEntry | None:
    """
    Tokenize a single decklist line.

    Returns:
        DecklistEntry, or None if the line is blank, a comment, or malformed.
    """
    line = line.strip()
    if not line:
        return None

    match = DECKLIST_LINE_PATTERN.match(line)
    if not match:
        return None

    quantity_text, name = match.groups()
    name = name.strip()

    # Comment check runs on the name portion, after the quantity is stripped
    if not name or name.startswith(COMMENT_PREFIXES):
        return None

    quantity = int(quantity_text) if quantity_text else 1
    if quantity < 1:
        return None

    return DecklistEntry(quantity=quantity, raw_name=name)


def tokenize_decklist(text: str) -> list[DecklistEntry]:
    """
    Parse decklist text into entries.

    Args:
        text: Raw multi-line decklist (pasted, typed, or OCR output)

    Returns:
        One DecklistEntry per kept line, in input order. Duplicate names
        stay separate entries; merging is left to the reconciler.
    """
    if not text or not text.strip():
        return []

    entries: list[DecklistEntry] = []
    for line in text.splitlines():
        entry = parse_decklist_line(line)
        if entry is not None:
            entries.append(entry)

    return entries


def format_decklist_line(quantity: int, name: str) -> str:
    """Render one "<quantity> <name>" line."""
    return f"{quantity} {name}"


def format_decklist(cards: Iterable[tuple[int, str]], *, sort: bool = True) -> str:
    """
    Render (quantity, name) pairs as decklist text.

    Args:
        cards: Pairs of quantity and card name
        sort: Order lines by card name (case-insensitive)

    Returns:
        Newline-joined decklist, which tokenize_decklist reads back.
    """
    pairs = list(cards)
    if sort:
        pairs.sort(key=lambda pair: pair[1].lower())
    return "\n".join(format_decklist_line(quantity, name) for quantity, name in pairs)
