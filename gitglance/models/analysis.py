from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field
from gitglance.models.profile import Profile, Repository

# language name -> cumulative bytes
LanguageHistogram = Dict[str, int]

class Ok(BaseModel):
    value: Any = None

class Skipped(BaseModel):
    source: str = Field(..., description="What was being fetched, e.g. a languages URL")
    reason: str

Outcome = Union[Ok, Skipped]

class LanguageAggregation(BaseModel):
    histogram: LanguageHistogram = Field(default_factory=dict)
    sampled: int = Field(0, description="Repositories selected for language sampling")
    skipped: List[Skipped] = Field(default_factory=list)

class PushActivitySample(BaseModel):
    """
    Commits seen in push events over the trailing window. The events feed is
    capped at 100 entries, so this is a lower bound.
    """
    commits: int = 0
    events_seen: int = 0
    window_days: int = 30
    skipped: Optional[Skipped] = None

class ProfileMetrics(BaseModel):
    total_stars: int = 0
    total_forks: int = 0
    top_languages: List[Tuple[str, int]] = Field(default_factory=list)
    top_starred: List[Repository] = Field(default_factory=list)
    table_repositories: List[Repository] = Field(default_factory=list)
    stale_count: int = 0
    latest_update: Optional[datetime] = None
    missing_descriptions: int = 0

ParagraphKind = Literal[
    "summary", "recency", "documentation", "visibility",
    "bio", "no_bio", "location", "next_steps",
]

class ReviewParagraph(BaseModel):
    kind: ParagraphKind
    text: str

class ReviewReport(BaseModel):
    paragraphs: List[ReviewParagraph] = Field(default_factory=list)

    @property
    def kinds(self) -> List[str]:
        return [p.kind for p in self.paragraphs]

    @property
    def text(self) -> str:
        return "\n\n".join(p.text for p in self.paragraphs)

class AnalysisState(BaseModel):
    """Everything committed by the most recent analysis run."""
    username: str = ""
    loading: bool = False
    error: str = ""
    generated_at: Optional[datetime] = None
    profile: Optional[Profile] = None
    repositories: List[Repository] = Field(default_factory=list)
    languages: LanguageHistogram = Field(default_factory=dict)
    activity: Optional[PushActivitySample] = None
    metrics: Optional[ProfileMetrics] = None
    review: Optional[ReviewReport] = None
    skipped: List[Skipped] = Field(default_factory=list)
