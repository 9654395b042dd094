"""Commander recommendations from EDHREC."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RecommendedCard:
    """
    One card from an EDHREC card list.

    Attributes:
        synergy: How much more often the card is played with this commander
            than in other decks with the same colors
        inclusion: Number of decks for this commander that play the card
        num_decks: Number of decks for this commander
        sanitized: EDHREC's URL slug for the card
    """

    name: str
    synergy: float | None = None
    inclusion: int | None = None
    num_decks: int | None = None
    label: str | None = None
    sanitized: str | None = None

    @classmethod
    def from_cardview(cls, cardview: dict[str, Any]) -> "RecommendedCard":
        return cls(
            name=str(cardview.get("name") or ""),
            synergy=cardview.get("synergy"),
            inclusion=cardview.get("inclusion"),
            num_decks=cardview.get("num_decks"),
            label=cardview.get("label"),
            sanitized=cardview.get("sanitized"),
        )


@dataclass
class Recommendations:
    """A commander page's card lists, by category."""

    high_synergy: list[RecommendedCard] = field(default_factory=list)
    top_cards: list[RecommendedCard] = field(default_factory=list)
    new_cards: list[RecommendedCard] = field(default_factory=list)
    creatures: list[RecommendedCard] = field(default_factory=list)
    instants: list[RecommendedCard] = field(default_factory=list)
    sorceries: list[RecommendedCard] = field(default_factory=list)
    artifacts: list[RecommendedCard] = field(default_factory=list)
    enchantments: list[RecommendedCard] = field(default_factory=list)
    lands: list[RecommendedCard] = field(default_factory=list)

    def suggestion_pool(self) -> list[RecommendedCard]:
        """Cards considered for deck suggestions, in priority order. New cards are left out."""
        return [
            *self.high_synergy,
            *self.top_cards,
            *self.creatures,
            *self.instants,
            *self.sorceries,
            *self.artifacts,
            *self.enchantments,
            *self.lands,
        ]


@dataclass
class DeckSuggestions:
    """Recommended cards for a commander, split by whether they are owned."""

    commander: str
    from_collection: list[RecommendedCard] = field(default_factory=list)
    to_acquire: list[RecommendedCard] = field(default_factory=list)
    recommendations: Recommendations = field(default_factory=Recommendations)
