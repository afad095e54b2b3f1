from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

def assume_utc(value: datetime) -> datetime:
    # GitHub sends UTC; a timestamp without an offset is read the same way
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value

UtcDatetime = Annotated[datetime, AfterValidator(assume_utc)]

class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    name: Optional[str] = Field(None, description="Display name; GitHub allows it to be empty")
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    created_at: UtcDatetime
    followers: int = 0
    public_repos: int = 0

    @property
    def display_name(self) -> str:
        return self.name or self.login

class Repository(BaseModel):
    # Field names follow our domain; aliases match the REST payload
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    name: str
    stars: int = Field(0, alias="stargazers_count")
    forks: int = Field(0, alias="forks_count")
    language: Optional[str] = Field(None, description="Primary language as reported by GitHub")
    size: int = Field(0, description="Size in KiB; only used to pick repos for language sampling")
    updated_at: UtcDatetime
    fork: bool = False
    description: Optional[str] = None
    html_url: Optional[str] = None
    languages_url: Optional[str] = None

class ProfileSnapshot(BaseModel):
    """A user record plus their owned (non-fork) repositories."""
    profile: Profile
    repositories: List[Repository] = Field(default_factory=list)

class ActivityEvent(BaseModel):
    type: str
    created_at: UtcDatetime
    payload: Optional[Dict[str, Any]] = None

    @property
    def commit_count(self) -> int:
        commits = (self.payload or {}).get("commits")
        return len(commits) if isinstance(commits, list) else 0
