"""Tests for settings endpoints."""

from httpx import AsyncClient

from cardkeeper.db.store import ObjectStore
from cardkeeper.services.collection_service import CollectionService


class TestSettings:
    async def test_defaults(self, client: AsyncClient) -> None:
        response = await client.get("/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["search_language"] == "fr"
        assert data["currency"] == "usd"
        assert data["default_format"] == "commander"

    async def test_update_persists(self, client: AsyncClient) -> None:
        body = (await client.get("/settings")).json()
        body.update(search_language="de", theme="light")

        await client.put("/settings", json=body)
        response = await client.get("/settings")

        assert response.json()["search_language"] == "de"
        assert response.json()["theme"] == "light"

    async def test_rejects_unknown_currency(self, client: AsyncClient) -> None:
        response = await client.put("/settings", json={"currency": "gold"})

        assert response.status_code == 422


class TestClearData:
    async def test_clears_everything(
        self, client: AsyncClient, store: ObjectStore, make_record
    ) -> None:
        await CollectionService(store).add_card(make_record("Sol Ring"))
        await client.put("/settings", json={"search_language": "de"})

        response = await client.delete("/settings/data")

        assert response.status_code == 200
        assert response.json()["cleared"] == 2
        assert (await client.get("/collection")).json()["cards"] == []
        assert (await client.get("/settings")).json()["search_language"] == "fr"
