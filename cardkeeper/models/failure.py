"""
Failure classification and response envelope.

Every failure that crosses a service boundary is a KnownError carrying a
FailureKind. Lookup and storage failures are distinct kinds so callers can
tell "nothing matched" apart from "the catalog was unreachable" and from
"the write did not happen".

Response types:
- Success: Operation completed successfully
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"
    STORAGE_ERROR = "storage_error"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope used for failures reported by the HTTP layer."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse[Any]":
        """Create an unknown failure response."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong and the cause is unknown.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# CATALOG FAILURES
# =============================================================================


class CatalogError(KnownError):
    """Base class for card catalog lookup failures."""


class CardNotFoundError(CatalogError):
    """The catalog answered, but nothing matched the lookup."""

    def __init__(self, query: str, detail: str | None = None):
        self.query = query
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"No card found for '{query}'",
            detail=detail,
            suggestion="Check the spelling or try another language.",
            status_code=404,
        )


class CatalogUnavailableError(CatalogError):
    """The catalog could not be reached or returned a non-success status."""

    def __init__(self, detail: str, status: int | None = None):
        self.status = status
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="The card catalog is unavailable.",
            detail=detail,
            suggestion="Try again in a moment.",
            status_code=502,
        )


# =============================================================================
# STORAGE AND DOMAIN FAILURES
# =============================================================================


class StorageError(KnownError):
    """A read or write against the persisted object store failed."""

    def __init__(self, key: str, detail: str | None = None):
        self.key = key
        super().__init__(
            kind=FailureKind.STORAGE_ERROR,
            message=f"Could not access stored data for '{key}'.",
            detail=detail,
            suggestion="No changes were saved. Try again.",
            status_code=503,
        )


class DeckNotFoundError(KnownError):
    """No deck exists with the requested id."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Deck '{deck_id}' not found",
            status_code=404,
        )
