import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional
import httpx
from gitglance.config import GITHUB_API_URL, Settings
from gitglance.models.analysis import AnalysisState
from gitglance.probes.errors import ProbeError
from gitglance.probes.github import GithubProbe
from gitglance.refinery.activity import estimate_push_activity
from gitglance.refinery.engine import build_review
from gitglance.refinery.languages import aggregate_languages
from gitglance.refinery.metrics import compute_metrics

logger = logging.getLogger(__name__)

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class ProfileAnalyzer:
    """
    Runs analyses and owns the committed `state`.

    Each call to `analyze` takes a new generation number. Results are only
    committed while their generation is still the latest, so a slow run for
    a previous username can never overwrite a newer one.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: str = GITHUB_API_URL,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings
        self._transport = transport
        self._base_url = base_url
        self._clock = clock
        self._generation = 0
        self.state = AnalysisState()

    @property
    def generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _commit(self, generation: int, **fields: Any) -> bool:
        if not self._is_current(generation):
            logger.debug("Discarding results of generation %d (current is %d)", generation, self._generation)
            return False
        self.state = self.state.model_copy(update=fields)
        return True

    async def analyze(self, username: str) -> Optional[AnalysisState]:
        """
        Returns the committed state, or None when a newer analysis took over
        before this one finished.
        """
        username = username.strip()
        if not username:
            return self.state

        self._generation += 1
        generation = self._generation
        now = self._clock()

        # Previous results are cleared up front, whatever happens next
        self.state = AnalysisState(username=username, loading=True, generated_at=now)

        try:
            async with GithubProbe(self.settings, transport=self._transport, base_url=self._base_url) as probe:
                # 1. Profile + repositories (fatal on failure)
                snapshot = await probe.fetch_profile(username)
                repos = snapshot.repositories
                if not self._commit(generation, profile=snapshot.profile, repositories=repos):
                    return None

                # 2. Languages (best effort)
                aggregation = await aggregate_languages(probe, repos)
                if not self._commit(generation, languages=aggregation.histogram):
                    return None

                # 3. Push activity (best effort)
                activity = await estimate_push_activity(probe, username, now)

            # 4. Metrics + review
            metrics = compute_metrics(repos, aggregation.histogram, now)
            review = build_review(
                snapshot.profile,
                repos,
                aggregation.histogram,
                stars=metrics.total_stars,
                forks=metrics.total_forks,
                pushes_30d=activity.commits,
                now=now,
            )

            skipped = list(aggregation.skipped)
            if activity.skipped is not None:
                skipped.append(activity.skipped)

            if not self._commit(
                generation,
                activity=activity,
                metrics=metrics,
                review=review,
                skipped=skipped,
                loading=False,
            ):
                return None

        except ProbeError as e:
            if not self._is_current(generation):
                return None
            logger.info("Analysis of %s failed: %s", username, e.message)
            self.state = AnalysisState(username=username, error=e.message or "Unknown error", generated_at=now)
        except Exception as e:
            if not self._is_current(generation):
                return None
            logger.exception("Analysis of %s failed unexpectedly", username)
            self.state = AnalysisState(username=username, error=str(e) or "Unknown error", generated_at=now)
        finally:
            if self._is_current(generation) and self.state.loading:
                self.state = self.state.model_copy(update={"loading": False})

        return self.state
