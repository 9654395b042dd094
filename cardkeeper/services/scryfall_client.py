"""
Scryfall API client.

Async lookups against the card catalog. Throttling, retries, and error
mapping come from RateLimitedClient; this module adds the endpoints.

API docs: https://scryfall.com/docs/api
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from cardkeeper.config import settings
from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.failure import CardNotFoundError, CatalogError
from cardkeeper.services.http_client import RateLimitedClient

# Supported search languages (Scryfall language codes)
LANGUAGES: dict[str, str] = {
    "en": "English",
    "fr": "Français",
    "de": "Deutsch",
    "es": "Español",
    "it": "Italiano",
    "pt": "Português",
    "ja": "日本語",
}

DEFAULT_LANGUAGE = "en"
MIN_AUTOCOMPLETE_LENGTH = 2


def is_foreign_language(lang: str | None) -> bool:
    """True for a language preference that needs a scoped search."""
    return bool(lang) and lang != DEFAULT_LANGUAGE


def name_identifiers(names: Sequence[str]) -> list[dict[str, str]]:
    """Build /cards/collection identifiers that match by name."""
    return [{"name": name} for name in names]


def chunked(items: Sequence[Any], size: int) -> list[list[Any]]:
    """Split items into consecutive chunks of at most size, preserving order."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


@dataclass
class SearchPage:
    """One page of /cards/search results."""

    records: list[CatalogRecord] = field(default_factory=list)
    total_cards: int = 0
    has_more: bool = False


class ScryfallClient(RateLimitedClient):
    """
    Rate-limited client for the Scryfall REST API.

    Transport options (user_agent, rate_limiter, timeout, max_retries,
    retry_base_delay, http_client, sleep) go to RateLimitedClient.

    Usage:
        async with ScryfallClient() as client:
            card = await client.get_card_by_fuzzy_name("lightning blt")
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        chunk_size: int | None = None,
        **transport: Any,
    ) -> None:
        super().__init__(base_url=base_url or settings.scryfall_base_url, **transport)
        self.chunk_size = chunk_size or settings.batch_chunk_size

    # -------------------------------------------------------------------------
    # Search helpers
    # -------------------------------------------------------------------------

    async def _search(self, q: str, *, query: str, **params: Any) -> SearchPage:
        data = await self._request("GET", "/cards/search", query=query, params={"q": q, **params})
        return SearchPage(
            records=[CatalogRecord.from_scryfall(card) for card in data.get("data", [])],
            total_cards=int(data.get("total_cards", 0)),
            has_more=bool(data.get("has_more", False)),
        )

    async def _first_result(self, q: str, *, query: str, **params: Any) -> CatalogRecord:
        page = await self._search(q, query=query, **params)
        if not page.records:
            raise CardNotFoundError(query)
        return page.records[0]

    # -------------------------------------------------------------------------
    # Single-card lookups
    # -------------------------------------------------------------------------

    async def get_card_by_exact_name(self, name: str, lang: str | None = None) -> CatalogRecord:
        """
        Look up a card by exact name.

        For a non-English language, runs an exact-name search scoped to that
        language and returns the first printing.
        """
        if is_foreign_language(lang):
            return await self._first_result(f'!"{name}" lang:{lang}', query=name)

        data = await self._request("GET", "/cards/named", query=name, params={"exact": name})
        return CatalogRecord.from_scryfall(data)

    async def get_card_by_fuzzy_name(self, name: str) -> CatalogRecord:
        """Best single match for a possibly misspelled English name."""
        data = await self._request("GET", "/cards/named", query=name, params={"fuzzy": name})
        return CatalogRecord.from_scryfall(data)

    async def search_card_in_language(self, name: str, lang: str) -> CatalogRecord:
        """First search result for name restricted to one language."""
        return await self._first_result(f"{name} lang:{lang}", query=name)

    async def search_card_in_any_language(self, name: str) -> CatalogRecord:
        """First search result for name across all languages."""
        return await self._first_result(f"{name} lang:any", query=name)

    async def get_card_by_id(self, card_id: str) -> CatalogRecord:
        data = await self._request("GET", f"/cards/{card_id}", query=card_id)
        return CatalogRecord.from_scryfall(data)

    async def get_card_in_language(self, name_or_id: str, lang: str) -> CatalogRecord:
        """
        Get the printing of a card in a given language.

        Resolves the card in English first (by fuzzy name, then by id), then
        searches its oracle id in the target language. Falls back to the
        English printing when no localized one exists.
        """
        try:
            card = await self.get_card_by_fuzzy_name(name_or_id)
        except CardNotFoundError:
            card = await self.get_card_by_id(name_or_id)

        if not card.oracle_id or not is_foreign_language(lang):
            return card

        q = f"oracleid:{card.oracle_id} lang:{lang}"
        try:
            return await self._first_result(q, query=card.name)
        except CatalogError:
            return card

    async def get_random_card(self) -> CatalogRecord:
        data = await self._request("GET", "/cards/random", query="random")
        return CatalogRecord.from_scryfall(data)

    # -------------------------------------------------------------------------
    # Searches
    # -------------------------------------------------------------------------

    async def search_cards(self, query: str, page: int = 1, lang: str | None = None) -> SearchPage:
        """Full-text card search, optionally restricted to a language."""
        q = f"{query} lang:{lang}" if is_foreign_language(lang) else query
        return await self._search(q, query=query, page=page)

    async def search_cards_any_language(self, query: str, page: int = 1) -> SearchPage:
        """Card search across every language, one result per printing."""
        return await self._search(f"{query} lang:any", query=query, page=page, unique="prints")

    async def get_cards_from_set(self, set_code: str, page: int = 1) -> SearchPage:
        return await self._search(f"set:{set_code}", query=set_code, page=page, order="set")

    async def get_all_sets(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/sets", query="sets")
        sets: list[dict[str, Any]] = data.get("data", [])
        return sets

    async def autocomplete(self, query: str) -> list[str]:
        """
        Card name suggestions for a prefix.

        Queries shorter than two characters return no suggestions without
        a network call.
        """
        if not query or len(query) < MIN_AUTOCOMPLETE_LENGTH:
            return []
        data = await self._request("GET", "/cards/autocomplete", query=query, params={"q": query})
        return [str(name) for name in data.get("data", [])]

    # -------------------------------------------------------------------------
    # Batched lookups
    # -------------------------------------------------------------------------

    async def get_card_collection(
        self, identifiers: Sequence[dict[str, str]]
    ) -> list[CatalogRecord]:
        """
        Fetch many cards by identifier.

        Identifiers are sent in chunks of `chunk_size` (75), one call per
        chunk, in order. Results are concatenated; their order follows the
        catalog's response, not necessarily the input. A failed chunk fails
        the whole call.

        Args:
            identifiers: Scryfall card identifiers, e.g. {"name": ...} or {"id": ...}

        Returns:
            Every card the catalog matched.
        """
        records: list[CatalogRecord] = []

        for chunk in chunked(identifiers, self.chunk_size):
            data = await self._request(
                "POST",
                "/cards/collection",
                query=f"{len(chunk)} identifiers",
                json={"identifiers": chunk},
            )
            records.extend(CatalogRecord.from_scryfall(card) for card in data.get("data", []))

        return records

    async def get_cards_by_names(self, names: Sequence[str]) -> list[CatalogRecord]:
        """Batched lookup by canonical card name."""
        return await self.get_card_collection(name_identifiers(names))
