"""
Decklist Models.

INVARIANTS:
- DecklistEntry is UNRESOLVED user input (quantity >= 1, non-empty name)
- ResolvedEntry.record is None iff found is False
- All models are frozen (immutable after construction)
"""

from dataclasses import dataclass

from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.failure import FailureKind


@dataclass(frozen=True, slots=True)
class DecklistEntry:
    """
    One tokenized decklist line.

    Attributes:
        quantity: Number of copies (defaults to 1 when the line has no count)
        raw_name: Card name exactly as typed, trimmed
    """

    quantity: int
    raw_name: str

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")
        if not self.raw_name:
            raise ValueError("raw_name must not be empty")


@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """
    A decklist entry after name resolution.

    Attributes:
        quantity: Copied from the DecklistEntry
        raw_name: Copied from the DecklistEntry
        found: True if a catalog record was resolved
        record: The resolved record (None when not found)
        failure: Why resolution ended without a record; NOT_FOUND when every
            tier answered "no match", EXTERNAL_API_ERROR when at least one
            tier could not reach the catalog
    """

    quantity: int
    raw_name: str
    found: bool
    record: CatalogRecord | None = None
    failure: FailureKind | None = None

    def __post_init__(self) -> None:
        if self.found != (self.record is not None):
            raise ValueError("record must be set iff found is True")
        if self.found and self.failure is not None:
            raise ValueError("found entries carry no failure")

    @classmethod
    def resolved(cls, entry: DecklistEntry, record: CatalogRecord) -> "ResolvedEntry":
        return cls(quantity=entry.quantity, raw_name=entry.raw_name, found=True, record=record)

    @classmethod
    def unresolved(
        cls, entry: DecklistEntry, failure: FailureKind = FailureKind.NOT_FOUND
    ) -> "ResolvedEntry":
        return cls(
            quantity=entry.quantity,
            raw_name=entry.raw_name,
            found=False,
            record=None,
            failure=failure,
        )


@dataclass(frozen=True, slots=True)
class ResolutionSummary:
    """Found vs not-found counts for an import."""

    found: int
    not_found: int
    not_found_names: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return self.found + self.not_found

    @property
    def all_found(self) -> bool:
        return self.not_found == 0
