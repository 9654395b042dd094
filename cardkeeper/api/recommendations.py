"""
Commander recommendation endpoints.

Suggestions come from EDHREC and are checked against the collection.
"""

from dataclasses import asdict

from fastapi import APIRouter
from pydantic import BaseModel, Field

from cardkeeper.api.dependencies import RecommendationDep
from cardkeeper.models.recommendation import RecommendedCard

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


class RecommendedCardResponse(BaseModel):
    name: str
    synergy: float | None = None
    inclusion: int | None = None
    num_decks: int | None = None
    label: str | None = None

    @classmethod
    def from_card(cls, card: RecommendedCard) -> "RecommendedCardResponse":
        return cls.model_validate(asdict(card))


class SuggestionsResponse(BaseModel):
    """Recommended cards for a commander, split by ownership."""

    commander: str
    from_collection: list[RecommendedCardResponse] = Field(default_factory=list)
    to_acquire: list[RecommendedCardResponse] = Field(default_factory=list)
    categories: dict[str, list[RecommendedCardResponse]] = Field(default_factory=dict)


@router.get("/commanders/{commander_name}", response_model=SuggestionsResponse)
async def suggest_for_commander(
    commander_name: str, service: RecommendationDep
) -> SuggestionsResponse:
    """Returns 404 if EDHREC has no page for the commander."""
    suggestions = await service.suggest_for_commander(commander_name)
    categories = {
        category: [RecommendedCardResponse.from_card(card) for card in cards]
        for category, cards in vars(suggestions.recommendations).items()
        if cards
    }
    return SuggestionsResponse(
        commander=suggestions.commander,
        from_collection=[RecommendedCardResponse.from_card(c) for c in suggestions.from_collection],
        to_acquire=[RecommendedCardResponse.from_card(c) for c in suggestions.to_acquire],
        categories=categories,
    )
