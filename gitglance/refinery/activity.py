import logging
from datetime import datetime, timedelta
from typing import Iterable
from pydantic import ValidationError
from gitglance.models.analysis import PushActivitySample, Skipped
from gitglance.models.profile import ActivityEvent
from gitglance.probes.errors import ProbeError
from gitglance.probes.github import GithubProbe, events_path
from gitglance.probes.normalizer import normalize_events

logger = logging.getLogger(__name__)

ACTIVITY_WINDOW_DAYS = 30

def count_recent_pushes(events: Iterable[ActivityEvent], now: datetime, window_days: int = ACTIVITY_WINDOW_DAYS) -> int:
    cutoff = now - timedelta(days=window_days)
    return sum(
        e.commit_count
        for e in events
        if e.type == "PushEvent" and e.created_at >= cutoff
    )

async def estimate_push_activity(probe: GithubProbe, username: str, now: datetime) -> PushActivitySample:
    """
    Best-effort commit count from the public events feed. Failures degrade
    to zero activity with the reason recorded on the sample.
    """
    try:
        events = normalize_events(await probe.fetch_events(username))
        commits = count_recent_pushes(events, now)
    except ProbeError as e:
        reason = e.message
    except ValidationError as e:
        reason = f"unreadable events payload ({e.error_count()} invalid fields)"
    except (TypeError, ValueError) as e:
        reason = f"unreadable events payload ({e})"
    else:
        logger.info("  > %d commits in push events over the last %d days", commits, ACTIVITY_WINDOW_DAYS)
        return PushActivitySample(commits=commits, events_seen=len(events), window_days=ACTIVITY_WINDOW_DAYS)

    logger.debug("Skipped activity for %s: %s", username, reason)
    return PushActivitySample(
        window_days=ACTIVITY_WINDOW_DAYS,
        skipped=Skipped(source=events_path(username), reason=reason),
    )
