"""
Failure classification for catalog operations.

Every user-visible failure carries a FailureKind and a plain explanation.
Domain errors subclass KnownError; the HTTP status follows from the kind,
and the API layer renders the error as a FailureEnvelope.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Request could not be served as asked
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"

    # Export selected nothing
    EMPTY_RESULT = "empty_result"

    # Catalog data breaks an ingestion rule
    VALIDATION_FAILED = "validation_failed"

    # Export pipeline
    ENCODING_FAILED = "encoding_failed"
    BUSY = "busy"


STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.INVALID_INPUT: 422,
    FailureKind.NOT_FOUND: 404,
    FailureKind.EMPTY_RESULT: 422,
    FailureKind.VALIDATION_FAILED: 500,
    FailureKind.ENCODING_FAILED: 500,
    FailureKind.BUSY: 409,
}


class FailureDetail(BaseModel):
    """What went wrong and what the user can do about it."""

    kind: FailureKind
    message: str = Field(..., description="Explanation shown to the user")
    detail: str | None = Field(default=None, description="Technical detail, if any")
    suggestion: str | None = Field(default=None, description="Suggested next step")


class FailureEnvelope(BaseModel):
    """JSON body returned for a KnownError."""

    outcome: Literal["known_failure"] = "known_failure"
    failure: FailureDetail


class KnownError(Exception):
    """
    A failure the application can explain.

    The HTTP status is derived from the kind.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_response(self) -> FailureEnvelope:
        return FailureEnvelope(
            failure=FailureDetail(
                kind=self.kind,
                message=self.message,
                detail=self.detail,
                suggestion=self.suggestion,
            )
        )


class NothingToExportError(KnownError):
    """
    Raised when an export is requested for an empty item list.

    No raster surface is allocated and nothing is encoded.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            FailureKind.EMPTY_RESULT,
            "Nothing to export.",
            detail=detail,
            suggestion="Relax the filters or mark some figures as owned or wishlisted.",
        )


class ExportEncodingError(KnownError):
    """Raised when the composed grid could not be encoded to image bytes."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            FailureKind.ENCODING_FAILED,
            "The grid image could not be encoded.",
            detail=detail,
            suggestion="Try a smaller export.",
        )


class GridTooLargeError(KnownError):
    """Raised when even the smallest cell size cannot fit the raster limit."""

    def __init__(self, count: int, columns: int, max_dimension: int):
        super().__init__(
            FailureKind.INVALID_INPUT,
            f"{count} items in {columns} columns do not fit a {max_dimension}px image.",
            suggestion="Export fewer items or use more columns.",
        )


class ExportInProgressError(KnownError):
    """Raised when an export is requested while another one is still running."""

    def __init__(self) -> None:
        super().__init__(
            FailureKind.BUSY,
            "An export is already running.",
            suggestion="Wait for the current export to finish.",
        )


class CatalogIntegrityError(KnownError):
    """
    Raised at ingestion when linked records violate the pairing invariant.

    At most one base and one DX record may share a linkedId.
    """

    def __init__(self, linked_id: str, is_dx: bool, record_ids: list[str]):
        self.linked_id = linked_id
        self.record_ids = record_ids
        variant = "DX" if is_dx else "base"
        super().__init__(
            FailureKind.VALIDATION_FAILED,
            f"Catalog has more than one {variant} record linked to '{linked_id}'.",
            detail=f"Conflicting records: {record_ids}",
            suggestion="Fix the linkedId fields in the catalog file.",
        )
