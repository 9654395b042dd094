"""
Shared FastAPI dependencies.

The store wraps the application session factory; the catalog and
recommendation clients are created once in the application lifespan and
kept on app.state.
"""

from typing import Annotated

from fastapi import Depends, Request

from cardkeeper.db.database import async_session_factory
from cardkeeper.db.store import ObjectStore
from cardkeeper.services.collection_service import CollectionService
from cardkeeper.services.deck_service import DeckService
from cardkeeper.services.edhrec_client import EdhrecClient
from cardkeeper.services.name_resolver import NameResolver
from cardkeeper.services.recommendation_service import RecommendationService
from cardkeeper.services.scryfall_client import ScryfallClient


def get_store() -> ObjectStore:
    return ObjectStore(async_session_factory)


def get_catalog_client(request: Request) -> ScryfallClient:
    client: ScryfallClient = request.app.state.catalog_client
    return client


def get_recommendation_client(request: Request) -> EdhrecClient:
    client: EdhrecClient = request.app.state.recommendation_client
    return client


def get_collection_service(
    store: Annotated[ObjectStore, Depends(get_store)],
) -> CollectionService:
    return CollectionService(store)


def get_deck_service(store: Annotated[ObjectStore, Depends(get_store)]) -> DeckService:
    return DeckService(store)


def get_name_resolver(
    client: Annotated[ScryfallClient, Depends(get_catalog_client)],
) -> NameResolver:
    return NameResolver(client)


def get_recommendation_service(
    client: Annotated[EdhrecClient, Depends(get_recommendation_client)],
    store: Annotated[ObjectStore, Depends(get_store)],
) -> RecommendationService:
    return RecommendationService(client, CollectionService(store))


StoreDep = Annotated[ObjectStore, Depends(get_store)]
CatalogDep = Annotated[ScryfallClient, Depends(get_catalog_client)]
CollectionDep = Annotated[CollectionService, Depends(get_collection_service)]
DeckDep = Annotated[DeckService, Depends(get_deck_service)]
ResolverDep = Annotated[NameResolver, Depends(get_name_resolver)]
RecommendationDep = Annotated[RecommendationService, Depends(get_recommendation_service)]
