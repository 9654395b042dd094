from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cardkeeper.api import (
    cards_router,
    collection_router,
    decks_router,
    exports_router,
    health_router,
    imports_router,
    recommendations_router,
    settings_router,
)
from cardkeeper.config import settings
from cardkeeper.db.database import init_db
from cardkeeper.models.failure import KnownError
from cardkeeper.services.edhrec_client import EdhrecClient
from cardkeeper.services.scryfall_client import ScryfallClient


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    async with ScryfallClient() as catalog, EdhrecClient() as recommendations:
        app.state.catalog_client = catalog
        app.state.recommendation_client = recommendations
        yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardkeeper"),
    lifespan=lifespan,
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


app.include_router(cards_router)
app.include_router(collection_router)
app.include_router(decks_router)
app.include_router(exports_router)
app.include_router(health_router)
app.include_router(imports_router)
app.include_router(recommendations_router)
app.include_router(settings_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
