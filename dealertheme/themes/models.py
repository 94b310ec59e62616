"""Theme framework models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TokenValidationError(ValueError):
    """Raised when a token document fails validation."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        joined = "; ".join(self.problems) or "invalid token document"
        super().__init__(joined)


@dataclass(frozen=True, slots=True)
class Theme:
    """A named theme row."""

    theme_id: str
    name: str
    is_active: bool = False
    is_staging: bool = False
    created_at: str = ""


@dataclass(frozen=True, slots=True)
class TokenDocument:
    """A stored design-token document owned by one theme."""

    document_id: str
    theme_id: str
    tokens: dict[str, Any]
    updated_at: str = ""


@dataclass(frozen=True, slots=True)
class ActiveTheme:
    """The active theme with its token documents, as read from the store."""

    theme: Theme
    documents: tuple[TokenDocument, ...] = ()

    @property
    def tokens(self) -> dict[str, Any] | None:
        """Tokens of the first document, or None when the theme has none."""
        if not self.documents:
            return None
        return self.documents[0].tokens


class LoadStatus(Enum):
    """Outcome of one theme load."""

    APPLIED = "applied"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"
    INVALID = "invalid"
    SUPERSEDED = "superseded"


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Explicit result of a theme load."""

    status: LoadStatus
    message: str = ""
    theme_id: str | None = None
    generation: int = 0
    problems: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.APPLIED


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """What one store round trip returned for a given load generation."""

    generation: int
    active: ActiveTheme | None = None
    error: Exception | None = None
