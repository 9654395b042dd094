"""Tests for export endpoints."""

import json

import pytest
from httpx import AsyncClient

from cardkeeper.db.store import ObjectStore
from cardkeeper.services.collection_service import CollectionService
from cardkeeper.services.deck_service import DeckService


@pytest.fixture
async def stocked(store: ObjectStore, make_record) -> str:
    """Two owned cards and one deck; returns the deck id."""
    sol_ring = make_record("Sol Ring")
    await CollectionService(store).add_cards(
        [(sol_ring, 2), (make_record("Counterspell"), 1)]
    )
    deck = await DeckService(store).create_deck(
        name="Artifacts", format_name="commander", cards=[sol_ring]
    )
    return deck.id


class TestExports:
    async def test_json_backup(self, client: AsyncClient, stocked: str) -> None:
        response = await client.get("/exports/json")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert 'filename="cardkeeper-backup.json"' in response.headers["content-disposition"]
        backup = json.loads(response.text)
        assert backup["version"] == "1.0"
        assert len(backup["collection"]) == 2
        assert backup["decks"][0]["id"] == stocked

    async def test_csv(self, client: AsyncClient, stocked: str) -> None:
        response = await client.get("/exports/collection.csv")

        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.splitlines()
        assert lines[0].startswith("Card Name,Quantity,Set")
        assert lines[1].startswith('"Sol Ring",2,')

    async def test_collection_decklist(self, client: AsyncClient, stocked: str) -> None:
        response = await client.get("/exports/collection.txt")

        assert response.text == "1 Counterspell\n2 Sol Ring"

    async def test_deck_decklist(self, client: AsyncClient, stocked: str) -> None:
        response = await client.get(f"/exports/decks/{stocked}.txt")

        assert response.status_code == 200
        assert 'filename="Artifacts.txt"' in response.headers["content-disposition"]
        assert response.text.splitlines()[0] == "// Artifacts"
        assert "1 Sol Ring" in response.text.splitlines()

    async def test_unknown_deck(self, client: AsyncClient) -> None:
        response = await client.get("/exports/decks/missing.txt")

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    async def test_empty_collection_csv_is_header_only(self, client: AsyncClient) -> None:
        response = await client.get("/exports/collection.csv")

        assert len(response.text.splitlines()) == 1
