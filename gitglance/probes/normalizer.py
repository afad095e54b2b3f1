from typing import Any, Dict, Iterable, List
from gitglance.models.profile import ActivityEvent, Profile, Repository

def normalize_profile(raw_user: Dict[str, Any]) -> Profile:
    """
    Transforms a REST `/users/{username}` payload into a Profile.
    Unknown fields are ignored.
    """
    return Profile.model_validate(raw_user)

def normalize_repositories(raw_repos: Iterable[Dict[str, Any]]) -> List[Repository]:
    # Keep fetch order (most recently updated first); later views depend on it
    return [Repository.model_validate(r) for r in raw_repos]

def own_repositories(repos: Iterable[Repository]) -> List[Repository]:
    """Drops forks. Every aggregate is computed over what this returns."""
    return [r for r in repos if not r.fork]

def normalize_events(raw_events: Iterable[Dict[str, Any]]) -> List[ActivityEvent]:
    return [ActivityEvent.model_validate(e) for e in raw_events]
