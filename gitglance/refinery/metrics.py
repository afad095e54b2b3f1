from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from gitglance.models.analysis import LanguageHistogram, ProfileMetrics
from gitglance.models.profile import Repository

STALE_AFTER_DAYS = 180
TOP_STARRED_LIMIT = 8
TABLE_LIMIT = 20
# Descriptions are sampled instead of fetching every README
DESCRIPTION_SAMPLE = 10

def total_stars(repos: Sequence[Repository]) -> int:
    return sum(r.stars for r in repos)

def total_forks(repos: Sequence[Repository]) -> int:
    return sum(r.forks for r in repos)

def rank_languages(histogram: LanguageHistogram) -> List[Tuple[str, int]]:
    # Name breaks ties so identical input always ranks the same way
    return sorted(histogram.items(), key=lambda item: (-item[1], item[0]))

def top_starred(repos: Sequence[Repository], limit: int = TOP_STARRED_LIMIT) -> List[Repository]:
    return sorted(repos, key=lambda r: r.stars, reverse=True)[:limit]

def stale_count(repos: Sequence[Repository], now: datetime, days: int = STALE_AFTER_DAYS) -> int:
    threshold = timedelta(days=days)
    return sum(1 for r in repos if now - r.updated_at > threshold)

def latest_update(repos: Sequence[Repository]) -> Optional[datetime]:
    if not repos:
        return None
    return max(r.updated_at for r in repos)

def missing_descriptions(repos: Sequence[Repository], sample: int = DESCRIPTION_SAMPLE) -> int:
    """
    Approximation: only the first `sample` repositories in fetch order are
    checked, and an empty description stands in for a missing README.
    """
    return sum(1 for r in repos[:sample] if not r.description)

def compute_metrics(repos: Sequence[Repository], histogram: LanguageHistogram, now: datetime) -> ProfileMetrics:
    """
    Derives the dashboard numbers. `repos` must already be fork-free and in
    fetch order; `now` is the single reference time for the whole run.
    """
    repos = list(repos)
    return ProfileMetrics(
        total_stars=total_stars(repos),
        total_forks=total_forks(repos),
        top_languages=rank_languages(histogram),
        top_starred=top_starred(repos),
        table_repositories=repos[:TABLE_LIMIT],
        stale_count=stale_count(repos, now),
        latest_update=latest_update(repos),
        missing_descriptions=missing_descriptions(repos),
    )
