"""Tests for commander recommendation endpoints."""

import httpx
import respx
from httpx import AsyncClient

from cardkeeper.db.store import ObjectStore
from cardkeeper.services.collection_service import CollectionService

EDHREC = "https://json.edhrec.com"

ATRAXA_PAGE = {
    "container": {"json_dict": {"card": {"name": "Atraxa, Praetors' Voice"}}},
    "cardlists": [
        {
            "tag": "highsynergycards",
            "cardviews": [
                {"name": "Doubling Season", "synergy": 0.42, "inclusion": 5000, "num_decks": 9000},
                {"name": "Deepglow Skate", "synergy": 0.51},
            ],
        },
        {"tag": "lands", "cardviews": [{"name": "Command Tower", "synergy": 0.0}]},
    ],
}


class TestCommanderSuggestions:
    @respx.mock
    async def test_suggestions(self, client: AsyncClient, store: ObjectStore, make_record) -> None:
        await CollectionService(store).add_card(make_record("Doubling Season"))
        respx.get(f"{EDHREC}/pages/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, json=ATRAXA_PAGE)
        )

        response = await client.get("/recommendations/commanders/Atraxa, Praetors' Voice")

        assert response.status_code == 200
        data = response.json()
        assert data["commander"] == "Atraxa, Praetors' Voice"
        assert data["from_collection"] == [
            {
                "name": "Doubling Season",
                "synergy": 0.42,
                "inclusion": 5000,
                "num_decks": 9000,
                "label": None,
            }
        ]
        assert [c["name"] for c in data["to_acquire"]] == ["Deepglow Skate", "Command Tower"]
        assert set(data["categories"]) == {"high_synergy", "lands"}

    @respx.mock
    async def test_unknown_commander(self, client: AsyncClient) -> None:
        respx.get(f"{EDHREC}/pages/commanders/nobody.json").mock(
            return_value=httpx.Response(404)
        )

        response = await client.get("/recommendations/commanders/Nobody")

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    @respx.mock
    async def test_edhrec_down(self, client: AsyncClient) -> None:
        respx.get(f"{EDHREC}/pages/commanders/nobody.json").mock(
            return_value=httpx.Response(403)
        )

        response = await client.get("/recommendations/commanders/Nobody")

        assert response.status_code == 502
