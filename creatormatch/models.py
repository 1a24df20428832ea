"""
Creator Match - Data Models
Roster records, classification outputs and the match result handed to
the API and CLI. Nothing here is persisted.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from creatormatch.config import CANONICAL_CATEGORIES


# ── Enums ─────────────────────────────────────────────────────────

class MatchStatus(str, Enum):
    MATCHED = "matched"
    NO_CREATOR_FOR_CATEGORY = "no_creator_for_category"   # Soft outcome, not an error
    FAILED = "failed"


class MatchPhase(str, Enum):
    CLASSIFYING = "classifying"
    FINDING = "finding"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


# ── Roster ────────────────────────────────────────────────────────

class RosterRow(BaseModel):
    """One parsed sheet row. Category is title-cased raw text, not yet canonical."""
    name: str
    category: str
    photo_url: Optional[str] = None
    price: Optional[float] = None


class Creator(BaseModel):
    """A creator filed under a canonical category."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    category: str
    photo_url: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class Roster(BaseModel):
    """Creators grouped by canonical category, sheet order kept within each group."""
    model_config = ConfigDict(frozen=True)

    creators_by_category: dict[str, list[Creator]] = Field(default_factory=dict)
    ignored_count: int = 0

    def creators_for(self, category: str) -> list[Creator]:
        return self.creators_by_category.get(category, [])

    @property
    def categories_with_creators(self) -> list[str]:
        return [c for c in CANONICAL_CATEGORIES if self.creators_for(c)]

    @property
    def fallback_categories(self) -> list[str]:
        return self.categories_with_creators or list(CANONICAL_CATEGORIES)

    @property
    def total_creators(self) -> int:
        return sum(len(v) for v in self.creators_by_category.values())


# ── Classification ────────────────────────────────────────────────

class ClassificationResult(BaseModel):
    category: str
    confidence: float


class SiteSnippet(BaseModel):
    """Signals pulled from a website's homepage for the classifier prompt."""
    title: str = ""
    description: str = ""
    text: str = ""


class SiteClassification(BaseModel):
    """Strict JSON schema for the LLM site classifier output."""
    category: str
    confidence: float = Field(ge=0, le=1)
    reason: str


# ── Match ─────────────────────────────────────────────────────────

class MatchResult(BaseModel):
    status: MatchStatus
    url: Optional[str] = None
    category: Optional[str] = None
    confidence: Optional[float] = None
    confidence_label: Optional[str] = None
    creator: Optional[Creator] = None
    outreach: Optional[str] = None

    # Category picker offered to the user
    offer_fallback: bool = False
    fallback_categories: list[str] = Field(default_factory=list)
    preselected_category: Optional[str] = None

    # Failure details
    error: Optional[str] = None
    message: Optional[str] = None
