"""User settings endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from cardkeeper.api.dependencies import StoreDep
from cardkeeper.models.settings import UserSettings
from cardkeeper.services.settings_service import clear_all_data, load_settings, save_settings

router = APIRouter(prefix="/settings", tags=["settings"])


class ClearResponse(BaseModel):
    cleared: int
    message: str


@router.get("", response_model=UserSettings)
async def get_settings(store: StoreDep) -> UserSettings:
    return await load_settings(store)


@router.put("", response_model=UserSettings)
async def update_settings(request: UserSettings, store: StoreDep) -> UserSettings:
    return await save_settings(store, request)


@router.delete("/data", response_model=ClearResponse)
async def clear_data(store: StoreDep) -> ClearResponse:
    """
    Delete the collection, all decks, and the settings.

    This is irreversible; export a JSON backup first.
    """
    cleared = await clear_all_data(store)
    return ClearResponse(cleared=cleared, message="All stored data has been deleted.")
