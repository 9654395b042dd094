from typing import Literal

from pydantic import BaseModel, Field


class UserSettings(BaseModel):
    """User preferences persisted under the settings key."""

    currency: Literal["usd", "eur", "tix"] = "usd"
    show_prices: bool = True
    default_format: str = "commander"
    theme: Literal["dark", "light"] = "dark"
    search_language: str = Field(
        default="fr",
        description="Language tried after the default fuzzy lookup fails",
    )
