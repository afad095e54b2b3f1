import asyncio
import logging
from typing import Iterable, List, Sequence
from gitglance.models.analysis import LanguageAggregation, LanguageHistogram, Ok, Outcome, Skipped
from gitglance.models.profile import Repository
from gitglance.probes.errors import ProbeError
from gitglance.probes.github import GithubProbe

logger = logging.getLogger(__name__)

MAX_SAMPLED_REPOS = 30
GROUP_SIZE = 5

def select_for_languages(repos: Sequence[Repository], limit: int = MAX_SAMPLED_REPOS) -> List[Repository]:
    """
    Largest repositories first. `sorted` is stable, so equal sizes keep fetch order.
    """
    return sorted(repos, key=lambda r: r.size or 0, reverse=True)[:limit]

def chunk(repos: Sequence[Repository], size: int = GROUP_SIZE) -> List[List[Repository]]:
    return [list(repos[i:i + size]) for i in range(0, len(repos), size)]

def merge_histograms(*histograms: LanguageHistogram) -> LanguageHistogram:
    merged: LanguageHistogram = {}
    for histogram in histograms:
        for language, size in histogram.items():
            merged[language] = merged.get(language, 0) + size
    return merged

async def fetch_repo_languages(probe: GithubProbe, repo: Repository) -> Outcome:
    """Never raises: a failed repository just contributes nothing."""
    if not repo.languages_url:
        return Skipped(source=repo.name, reason="repository has no languages URL")
    try:
        return Ok(value=await probe.fetch_languages(repo.languages_url))
    except ProbeError as e:
        return Skipped(source=repo.languages_url, reason=e.message)
    except Exception as e:
        logger.warning("Unexpected failure fetching languages for %s: %r", repo.name, e)
        return Skipped(source=repo.languages_url, reason=str(e) or type(e).__name__)

async def aggregate_languages(probe: GithubProbe, repos: Iterable[Repository]) -> LanguageAggregation:
    """
    Builds the language histogram from the top repositories by size.
    Groups of GROUP_SIZE are fetched concurrently; groups run one after another,
    which keeps at most GROUP_SIZE requests in flight.
    """
    selected = select_for_languages(list(repos))
    aggregation = LanguageAggregation(sampled=len(selected))

    groups = chunk(selected)
    for i, group in enumerate(groups, start=1):
        outcomes = await asyncio.gather(*(fetch_repo_languages(probe, r) for r in group))

        # gather preserves input order, so the histogram's key order is stable
        for outcome in outcomes:
            if isinstance(outcome, Ok):
                aggregation.histogram = merge_histograms(aggregation.histogram, outcome.value)
            else:
                logger.debug("Skipped languages for %s: %s", outcome.source, outcome.reason)
                aggregation.skipped.append(outcome)
        logger.info("  > Languages: group %d/%d done", i, len(groups))

    if aggregation.skipped:
        logger.info("  > %d of %d language lookups skipped", len(aggregation.skipped), len(selected))
    return aggregation
