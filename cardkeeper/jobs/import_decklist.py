"""
Import a decklist file.

Tokenizes the file, resolves every line against the card catalog, then
adds the found cards to the collection, or creates a deck from them when
--deck is given. Found / not-found counts are logged at the end.

Usage:
    python -m cardkeeper.jobs.import_decklist decklist.txt --lang fr
    python -m cardkeeper.jobs.import_decklist atraxa.txt --deck "Atraxa" --format commander
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardkeeper.db.database import async_session_factory, init_db
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.decklist import ResolutionSummary
from cardkeeper.models.failure import KnownError
from cardkeeper.services.collection_service import CollectionService
from cardkeeper.services.deck_service import DeckService
from cardkeeper.services.name_resolver import NameResolver, summarize
from cardkeeper.services.scryfall_client import ScryfallClient
from cardkeeper.services.settings_service import load_settings

logger = logging.getLogger(__name__)


async def run_import(
    path: Path,
    lang: str | None = None,
    deck_name: str | None = None,
    format_name: str | None = None,
) -> ResolutionSummary:
    """
    Resolve a decklist file and store the found cards.

    Args:
        path: Decklist text file
        lang: Preferred language for the fallback lookups; defaults to the
            stored search_language setting
        deck_name: Create a deck with this name instead of adding to the collection
        format_name: Format of the created deck

    Returns:
        Found / not-found counts
    """
    text = path.read_text(encoding="utf-8")
    await init_db()
    store = ObjectStore(async_session_factory)
    if lang is None:
        lang = (await load_settings(store)).search_language

    async with ScryfallClient() as client:
        results = await NameResolver(client).resolve_text(text, lang)

    summary = summarize(results)

    if deck_name:
        deck = await DeckService(store).create_deck_from_decklist(deck_name, format_name, results)
        logger.info("Created deck %s with %d cards", deck.name, deck.card_count())
    else:
        merged = await CollectionService(store).add_resolved_entries(results)
        logger.info("Collection now holds %d unique cards", len(merged.collection))

    logger.info("Import complete: %d found, %d not found", summary.found, summary.not_found)
    for name in summary.not_found_names:
        logger.warning("Not found: %s", name)

    return summary


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Import a decklist file into CardKeeper")
    parser.add_argument("file", type=Path, help="Decklist text file")
    parser.add_argument(
        "--lang",
        default=None,
        help="Preferred card language (e.g. fr); defaults to the stored setting",
    )
    parser.add_argument("--deck", default=None, help="Create a deck with this name")
    parser.add_argument("--format", dest="format_name", default=None, help="Deck format")
    args = parser.parse_args()

    try:
        asyncio.run(run_import(args.file, args.lang, args.deck, args.format_name))
    except KnownError as e:
        logger.error("Import failed: %s (%s)", e.message, e.detail)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
