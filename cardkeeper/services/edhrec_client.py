"""
EDHREC client.

EDHREC has no public API; its website is backed by static JSON pages,
one per commander. Requests share the throttling and retry behaviour of
RateLimitedClient. A missing page raises CardNotFoundError.
"""

import re
from typing import Any

from cardkeeper.config import settings
from cardkeeper.services.http_client import RateLimitedClient

_UNSAFE_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


def format_card_name(name: str) -> str:
    """
    EDHREC page slug for a card name.

    Example:
        "Atraxa, Praetors' Voice" -> "atraxa-praetors-voice"
    """
    slug = _UNSAFE_CHARS.sub("", name.lower())
    return _WHITESPACE.sub("-", slug.strip())


class EdhrecClient(RateLimitedClient):
    """Rate-limited client for EDHREC's JSON pages."""

    def __init__(self, *, base_url: str | None = None, **transport: Any) -> None:
        super().__init__(base_url=base_url or settings.edhrec_base_url, **transport)

    async def get_commander_recommendations(self, commander_name: str) -> dict[str, Any]:
        """Raw commander page: card lists under `cardlists`, commander under `container`."""
        slug = format_card_name(commander_name)
        data: dict[str, Any] = await self._request(
            "GET", f"/pages/commanders/{slug}.json", query=commander_name
        )
        return data
