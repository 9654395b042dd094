import pytest

from cardkeeper.models.decklist import DecklistEntry
from cardkeeper.parsers.decklist import (
    format_decklist,
    format_decklist_line,
    parse_decklist_line,
    tokenize_decklist,
)


class TestParseDecklistLine:
    def test_quantity_and_name(self) -> None:
        assert parse_decklist_line("4 Counterspell") == DecklistEntry(4, "Counterspell")

    def test_x_suffix_lowercase(self) -> None:
        assert parse_decklist_line("4x Counterspell") == DecklistEntry(4, "Counterspell")

    def test_x_suffix_uppercase_without_space(self) -> None:
        assert parse_decklist_line("4XCounterspell") == DecklistEntry(4, "Counterspell")

    def test_missing_quantity_defaults_to_one(self) -> None:
        assert parse_decklist_line("Sol Ring") == DecklistEntry(1, "Sol Ring")

    def test_multi_digit_quantity(self) -> None:
        assert parse_decklist_line("20 Mountain") == DecklistEntry(20, "Mountain")

    def test_name_starting_with_x_is_kept(self) -> None:
        """An x is only a quantity suffix when digits come before it."""
        entry = parse_decklist_line("Xenagos, the Reveler")

        assert entry == DecklistEntry(1, "Xenagos, the Reveler")

    def test_name_with_internal_punctuation(self) -> None:
        entry = parse_decklist_line("1 Fire // Ice")

        assert entry == DecklistEntry(1, "Fire // Ice")

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        assert parse_decklist_line("   2   Sol Ring   ") == DecklistEntry(2, "Sol Ring")

    def test_non_ascii_name(self) -> None:
        assert parse_decklist_line("3 Forêt") == DecklistEntry(3, "Forêt")

    @pytest.mark.parametrize("line", ["", "   ", "\t"])
    def test_blank_lines_are_skipped(self, line: str) -> None:
        assert parse_decklist_line(line) is None

    @pytest.mark.parametrize("line", ["// Commander", "# Sideboard", "  // indented"])
    def test_comment_lines_are_skipped(self, line: str) -> None:
        assert parse_decklist_line(line) is None

    def test_comment_after_quantity_is_skipped(self) -> None:
        """The comment check runs on the name after the quantity is removed."""
        assert parse_decklist_line("2 // not a card") is None

    def test_zero_quantity_is_skipped(self) -> None:
        assert parse_decklist_line("0 Island") is None

    @pytest.mark.parametrize("line", ["12", "4x", "3 ", "2X  "])
    def test_quantity_without_name_is_skipped(self, line: str) -> None:
        assert parse_decklist_line(line) is None


class TestTokenizeDecklist:
    def test_empty_input(self) -> None:
        assert tokenize_decklist("") == []
        assert tokenize_decklist("   ") == []
        assert tokenize_decklist("\n\n\n") == []

    def test_quantity_only_lines_do_not_become_cards(self) -> None:
        assert tokenize_decklist("12\n4x\n2 Negate") == [DecklistEntry(2, "Negate")]

    def test_mixed_decklist(self, sample_decklist: str) -> None:
        entries = tokenize_decklist(sample_decklist)

        assert entries == [
            DecklistEntry(1, "Atraxa, Praetors' Voice"),
            DecklistEntry(4, "Counterspell"),
            DecklistEntry(2, "Sol Ring"),
            DecklistEntry(1, "Forêt"),
        ]

    def test_preserves_input_order(self) -> None:
        entries = tokenize_decklist("Zur the Enchanter\nArcane Signet\nMox Amber")

        assert [e.raw_name for e in entries] == ["Zur the Enchanter", "Arcane Signet", "Mox Amber"]

    def test_duplicate_names_stay_separate(self) -> None:
        entries = tokenize_decklist("2 Sol Ring\n1 Sol Ring")

        assert entries == [DecklistEntry(2, "Sol Ring"), DecklistEntry(1, "Sol Ring")]

    def test_windows_line_endings(self) -> None:
        entries = tokenize_decklist("1 Sol Ring\r\n2 Counterspell\r\n")

        assert entries == [DecklistEntry(1, "Sol Ring"), DecklistEntry(2, "Counterspell")]

    def test_every_entry_is_well_formed(self, sample_decklist: str) -> None:
        for entry in tokenize_decklist(sample_decklist + "\n???\n  \n7x  Plains"):
            assert entry.quantity >= 1
            assert entry.raw_name
            assert entry.raw_name == entry.raw_name.strip()

    def test_tokenizing_is_idempotent_through_formatting(self, sample_decklist: str) -> None:
        """Formatting tokenized entries and tokenizing again gives the same entries."""
        entries = tokenize_decklist(sample_decklist)
        text = format_decklist(((e.quantity, e.raw_name) for e in entries), sort=False)

        assert tokenize_decklist(text) == entries


class TestFormatDecklist:
    def test_format_line(self) -> None:
        assert format_decklist_line(4, "Counterspell") == "4 Counterspell"

    def test_sorted_by_name_case_insensitive(self) -> None:
        text = format_decklist([(1, "sol Ring"), (4, "Counterspell"), (2, "Arcane Signet")])

        assert text.splitlines() == ["2 Arcane Signet", "4 Counterspell", "1 sol Ring"]

    def test_unsorted(self) -> None:
        text = format_decklist([(1, "Sol Ring"), (4, "Counterspell")], sort=False)

        assert text == "1 Sol Ring\n4 Counterspell"

    def test_empty(self) -> None:
        assert format_decklist([]) == ""
