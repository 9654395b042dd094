"""
Card Name Resolution Service.

Resolves typed, scanned, or pasted card names to catalog records.

INVARIANTS:
1. One ResolvedEntry per input entry, in input order
2. A failure for one entry never aborts the others
3. Lookup failures are recovered here: they fail the current tier and the
   next tier is tried; only the last tier's failure marks an entry not found
4. Fallback lookups run one at a time, never in parallel
"""

import logging
from collections.abc import Awaitable, Callable, Sequence

from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.decklist import DecklistEntry, ResolutionSummary, ResolvedEntry
from cardkeeper.models.failure import CatalogError, CatalogUnavailableError, FailureKind
from cardkeeper.parsers.decklist import tokenize_decklist
from cardkeeper.services.scryfall_client import ScryfallClient, is_foreign_language

logger = logging.getLogger(__name__)

Tier = tuple[str, Callable[[], Awaitable[CatalogRecord]]]


class NameResolver:
    """
    Tiered name resolution against the card catalog.

    Single entries go through:
        1. fuzzy lookup (default language index)
        2. search scoped to the preferred language (if not English)
        3. search across all languages
        4. not found

    Whole decklists first try one batched by-name lookup, which only
    matches canonical English names, then send the leftovers through
    tiers 2-4 one by one.
    """

    def __init__(self, client: ScryfallClient) -> None:
        self._client = client

    # -------------------------------------------------------------------------
    # Single entry
    # -------------------------------------------------------------------------

    async def resolve_name(
        self, raw_name: str, lang: str | None = None, quantity: int = 1
    ) -> ResolvedEntry:
        """
        Resolve one card name.

        Args:
            raw_name: Name as typed or recognized
            lang: Preferred language code (e.g., "fr"); None or "en" skips tier 2
            quantity: Carried through to the result

        Returns:
            ResolvedEntry, found or not
        """
        return await self.resolve_entry(DecklistEntry(quantity=quantity, raw_name=raw_name), lang)

    async def resolve_entry(self, entry: DecklistEntry, lang: str | None = None) -> ResolvedEntry:
        """Resolve a tokenized entry through every tier."""
        name = entry.raw_name
        tiers: list[Tier] = [("fuzzy", lambda: self._client.get_card_by_fuzzy_name(name))]
        tiers.extend(self._fallback_tiers(name, lang))
        return await self._run_tiers(entry, tiers)

    def _fallback_tiers(self, name: str, lang: str | None) -> list[Tier]:
        tiers: list[Tier] = []
        if lang is not None and is_foreign_language(lang):
            tiers.append(
                (f"lang:{lang}", lambda: self._client.search_card_in_language(name, lang))
            )
        tiers.append(("lang:any", lambda: self._client.search_card_in_any_language(name)))
        return tiers

    async def _run_tiers(self, entry: DecklistEntry, tiers: list[Tier]) -> ResolvedEntry:
        transport_failed = False

        for tier_name, lookup in tiers:
            try:
                record = await lookup()
            except CatalogUnavailableError as e:
                transport_failed = True
                logger.debug("Tier %s unavailable for %r: %s", tier_name, entry.raw_name, e.detail)
                continue
            except CatalogError:
                logger.debug("Tier %s found nothing for %r", tier_name, entry.raw_name)
                continue

            return ResolvedEntry.resolved(entry, record)

        failure = FailureKind.EXTERNAL_API_ERROR if transport_failed else FailureKind.NOT_FOUND
        return ResolvedEntry.unresolved(entry, failure)

    # -------------------------------------------------------------------------
    # Bulk decklists
    # -------------------------------------------------------------------------

    async def resolve_decklist(
        self, entries: Sequence[DecklistEntry], lang: str | None = None
    ) -> list[ResolvedEntry]:
        """
        Resolve a whole decklist.

        Phase 1: one batched by-name lookup for every entry; an entry matches
        a returned record when the names are equal ignoring case.
        Phase 2: each unmatched entry, in order, goes through the
        language-scoped and any-language tiers.

        If the batched call itself fails, every entry goes to phase 2.

        Args:
            entries: Tokenized decklist
            lang: Preferred language for the fallback pass

        Returns:
            Exactly len(entries) results, in the same order.
        """
        if not entries:
            return []

        batch: list[CatalogRecord] = []
        try:
            batch = await self._client.get_cards_by_names([e.raw_name for e in entries])
        except CatalogError as e:
            logger.warning(
                "Batched lookup of %d names failed, resolving one by one: %s",
                len(entries),
                e.detail or e.message,
            )

        results: list[ResolvedEntry] = []
        for entry in entries:
            record = _match_by_name(batch, entry.raw_name)
            if record is not None:
                results.append(ResolvedEntry.resolved(entry, record))
            else:
                tiers = self._fallback_tiers(entry.raw_name, lang)
                results.append(await self._run_tiers(entry, tiers))

        summary = summarize(results)
        logger.info(
            "Resolved decklist: %d found, %d not found", summary.found, summary.not_found
        )
        return results

    async def resolve_text(self, text: str, lang: str | None = None) -> list[ResolvedEntry]:
        """Tokenize decklist text and resolve it."""
        return await self.resolve_decklist(tokenize_decklist(text), lang)


def _match_by_name(records: Sequence[CatalogRecord], name: str) -> CatalogRecord | None:
    for record in records:
        if record.matches_name(name):
            return record
    return None


def summarize(results: Sequence[ResolvedEntry]) -> ResolutionSummary:
    """Count found vs not-found results."""
    missing = tuple(r.raw_name for r in results if not r.found)
    return ResolutionSummary(
        found=len(results) - len(missing),
        not_found=len(missing),
        not_found_names=missing,
    )
