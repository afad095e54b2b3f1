import math
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel, Field
from gitglance.models.analysis import AnalysisState, ProfileMetrics
from gitglance.models.profile import Profile, Repository
from gitglance.refinery.formatting import format_date, format_number

class ChartData(BaseModel):
    label: str = ""
    labels: List[str] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.labels

class ProfileCard(BaseModel):
    display_name: str
    login: str
    html_url: Optional[str] = None
    avatar_url: Optional[str] = None
    joined: str
    meta: str = Field("", description="Location and company, bullet separated")
    bio: str = ""
    public_repos: str
    followers: str
    total_stars: str
    total_forks: str

class RepoRow(BaseModel):
    name: str
    url: Optional[str] = None
    stars: str
    forks: str
    language: str = ""
    updated: str
    description: str = ""

class RenderManifest(BaseModel):
    profile: ProfileCard
    languages: ChartData
    top_starred: ChartData
    repositories: List[RepoRow] = Field(default_factory=list)
    review: List[str] = Field(default_factory=list)
    generated_at: datetime
    theme: str = "system"  # dark, light, system

    @property
    def review_text(self) -> str:
        return "\n\n".join(self.review)

def to_kib(size: int) -> int:
    # Round half up, the way chart labels are usually read
    return math.floor(size / 1024 + 0.5)

def language_chart(ranked: Sequence[Tuple[str, int]]) -> ChartData:
    return ChartData(
        label="KiB",
        labels=[name for name, _ in ranked],
        values=[to_kib(size) for _, size in ranked],
    )

def stars_chart(repos: Sequence[Repository]) -> ChartData:
    return ChartData(
        label="Stars",
        labels=[r.name for r in repos],
        values=[r.stars for r in repos],
    )

def repo_rows(repos: Sequence[Repository]) -> List[RepoRow]:
    return [
        RepoRow(
            name=r.name,
            url=r.html_url,
            stars=format_number(r.stars),
            forks=format_number(r.forks),
            language=r.language or "",
            updated=format_date(r.updated_at),
            description=r.description or "",
        )
        for r in repos
    ]

def profile_card(profile: Profile, metrics: ProfileMetrics) -> ProfileCard:
    return ProfileCard(
        display_name=profile.display_name,
        login=profile.login,
        html_url=profile.html_url,
        avatar_url=profile.avatar_url,
        joined=format_date(profile.created_at),
        meta=" • ".join(part for part in (profile.location, profile.company) if part),
        bio=profile.bio or "",
        public_repos=format_number(profile.public_repos),
        followers=format_number(profile.followers),
        total_stars=format_number(metrics.total_stars),
        total_forks=format_number(metrics.total_forks),
    )

def create_manifest(state: AnalysisState, theme: str = "system") -> RenderManifest:
    """
    Flattens an analysis into display-ready structures (charts, table, text).
    """
    if state.profile is None:
        raise ValueError("No profile to render; run an analysis first")

    metrics = state.metrics or ProfileMetrics()
    return RenderManifest(
        profile=profile_card(state.profile, metrics),
        languages=language_chart(metrics.top_languages),
        top_starred=stars_chart(metrics.top_starred),
        repositories=repo_rows(metrics.table_repositories),
        review=[p.text for p in state.review.paragraphs] if state.review else [],
        generated_at=state.generated_at or datetime.now().astimezone(),
        theme=theme,
    )
