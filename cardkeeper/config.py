from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDKEEPER_")

    app_name: str = "CardKeeper"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./cardkeeper.db"

    scryfall_base_url: str = "https://api.scryfall.com"
    edhrec_base_url: str = "https://json.edhrec.com"
    user_agent: str = "CardKeeper/1.0"

    # Scryfall asks for 50-100ms between requests
    min_request_interval: float = 0.1
    request_timeout: float = 15.0
    max_retries: int = 2
    retry_base_delay: float = 0.5

    # /cards/collection accepts at most 75 identifiers per call
    batch_chunk_size: int = 75


settings = Settings()


# =============================================================================
# PERSISTED OBJECT KEYS
# =============================================================================

COLLECTION_KEY = "collection"
DECKS_KEY = "decks"
SETTINGS_KEY = "settings"

ALL_KEYS = (COLLECTION_KEY, DECKS_KEY, SETTINGS_KEY)

EXPORT_VERSION = "1.0"
