"""Tests for collection import and export."""

import csv
import json
from datetime import UTC, datetime
from io import StringIO

import pytest

from cardkeeper.db.store import ObjectStore
from cardkeeper.models.collection import CollectionEntry
from cardkeeper.models.deck import Deck, DeckCardRef
from cardkeeper.models.failure import FailureKind, KnownError
from cardkeeper.parsers.decklist import tokenize_decklist
from cardkeeper.services.collection_service import CollectionService
from cardkeeper.services.deck_service import DeckService
from cardkeeper.services.exporter import (
    CSV_HEADERS,
    export_collection_to_csv,
    export_collection_to_decklist,
    export_deck_to_decklist,
    export_to_json,
    import_from_json,
)


@pytest.fixture
def collection(make_record) -> list[CollectionEntry]:
    sol_ring = CollectionEntry.from_record(make_record("Sol Ring", rarity="uncommon"), 2)
    sol_ring.foil = True
    sol_ring.notes = 'the "good" one'
    counterspell = CollectionEntry.from_record(
        make_record("Counterspell", prices={"usd": None}), 4
    )
    return [sol_ring, counterspell]


@pytest.fixture
def deck() -> Deck:
    return Deck(
        id="d1",
        name="Atraxa Superfriends",
        format="commander",
        commander=DeckCardRef(id="c", name="Atraxa, Praetors' Voice"),
        cards=[
            DeckCardRef(id="b", name="Sol Ring"),
            DeckCardRef(id="a", name="Arcane Signet"),
            DeckCardRef(id="i", name="Island", quantity=10),
        ],
    )


class TestJsonExport:
    def test_envelope(self, collection: list[CollectionEntry], deck: Deck) -> None:
        exported = json.loads(
            export_to_json(collection, [deck], export_date=datetime(2024, 5, 1, tzinfo=UTC))
        )

        assert exported["version"] == "1.0"
        assert exported["exportDate"] == "2024-05-01T00:00:00+00:00"
        assert [c["name"] for c in exported["collection"]] == ["Sol Ring", "Counterspell"]
        assert exported["decks"][0]["commander"]["name"] == "Atraxa, Praetors' Voice"

    def test_non_ascii_is_kept(self) -> None:
        entry = CollectionEntry(id="f", name="Forêt")

        assert "Forêt" in export_to_json([entry], [])


class TestCsvExport:
    def test_header(self) -> None:
        assert export_collection_to_csv([]) == ",".join(CSV_HEADERS) + "\n"

    def test_rows(self, collection: list[CollectionEntry]) -> None:
        lines = export_collection_to_csv(collection).splitlines()

        assert lines[0] == (
            "Card Name,Quantity,Set,Set Code,Collector Number,Rarity,Condition,Foil,Price USD,Notes"
        )
        assert lines[1] == (
            '"Sol Ring",2,"Commander Masters","cmm","1","uncommon","NM","Yes",1.00,'
            '"the ""good"" one"'
        )
        assert lines[2] == (
            '"Counterspell",4,"Commander Masters","cmm","1","rare","NM","No","",""'
        )

    def test_free_text_with_commas_reads_back(self, collection: list[CollectionEntry]) -> None:
        collection[0].condition = "LP, slight crease"
        collection[0].notes = "binder 2, page 4"

        rows = list(csv.reader(StringIO(export_collection_to_csv(collection))))

        assert all(len(row) == len(CSV_HEADERS) for row in rows)
        assert rows[1][6] == "LP, slight crease"
        assert rows[1][9] == "binder 2, page 4"


class TestDecklistExport:
    def test_collection_sorted_by_name(self, collection: list[CollectionEntry]) -> None:
        assert export_collection_to_decklist(collection) == "4 Counterspell\n2 Sol Ring"

    def test_collection_export_reads_back(self, collection: list[CollectionEntry]) -> None:
        entries = tokenize_decklist(export_collection_to_decklist(collection))

        assert [(e.quantity, e.raw_name) for e in entries] == [(4, "Counterspell"), (2, "Sol Ring")]

    def test_deck_layout(self, deck: Deck) -> None:
        assert export_deck_to_decklist(deck).splitlines() == [
            "// Atraxa Superfriends",
            "// Format: commander",
            "",
            "// Commander",
            "1 Atraxa, Praetors' Voice",
            "",
            "// Deck",
            "1 Arcane Signet",
            "10 Island",
            "1 Sol Ring",
        ]

    def test_deck_without_commander(self) -> None:
        deck = Deck(
            id="d2",
            name="Burn",
            format="modern",
            cards=[DeckCardRef(id="x", name="Lava Spike", quantity=4)],
        )

        assert "// Commander" not in export_deck_to_decklist(deck)

    def test_deck_export_reads_back(self, deck: Deck) -> None:
        """Header lines are comments, so only the cards come back."""
        entries = tokenize_decklist(export_deck_to_decklist(deck))

        assert [(e.quantity, e.raw_name) for e in entries] == [
            (1, "Atraxa, Praetors' Voice"),
            (1, "Arcane Signet"),
            (10, "Island"),
            (1, "Sol Ring"),
        ]


class TestJsonImport:
    async def test_restores_backup(
        self, store: ObjectStore, collection: list[CollectionEntry], deck: Deck
    ) -> None:
        backup = export_to_json(collection, [deck])

        result = await import_from_json(store, backup)

        assert (result.cards_imported, result.decks_imported) == (2, 1)
        restored = await CollectionService(store).load()
        assert [(e.name, e.quantity, e.foil) for e in restored] == [
            ("Sol Ring", 2, True),
            ("Counterspell", 4, False),
        ]
        restored_deck = await DeckService(store).get_deck("d1")
        assert restored_deck.commander is not None
        assert len(restored_deck.cards) == 3

    async def test_missing_section_is_left_alone(
        self, store: ObjectStore, make_record
    ) -> None:
        await CollectionService(store).add_card(make_record("Sol Ring"))

        result = await import_from_json(store, json.dumps({"version": "1.0", "decks": []}))

        assert result.cards_imported == 0
        assert len(await CollectionService(store).load()) == 1

    async def test_legacy_rows(self, store: ObjectStore) -> None:
        backup = {"collection": [{"scryfallId": "old", "name": "Sol Ring", "quantity": 1}]}

        result = await import_from_json(store, json.dumps(backup))

        assert result.cards_imported == 1
        assert (await CollectionService(store).load())[0].id == "old"

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"collection": [{"name": "x"}]}'])
    async def test_rejects_bad_input(self, store: ObjectStore, text: str) -> None:
        with pytest.raises(KnownError) as exc_info:
            await import_from_json(store, text)

        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert await store.load("collection") is None
