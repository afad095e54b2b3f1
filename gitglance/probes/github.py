import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import httpx
from pydantic import ValidationError
from gitglance.config import GITHUB_API_URL, Settings
from gitglance.models.profile import ProfileSnapshot
from gitglance.probes.errors import NotFound, ProbeError, RateLimited, TransportError
from gitglance.probes.normalizer import normalize_profile, normalize_repositories, own_repositories

logger = logging.getLogger(__name__)

# First page only; the API caps both at 100
REPOS_PER_PAGE = 100
EVENTS_PER_PAGE = 100

def create_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: str = GITHUB_API_URL,
) -> httpx.AsyncClient:
    """
    Builds the REST client. The bearer token is attached only when configured,
    so the same factory serves authenticated and anonymous runs.
    """
    headers = {"Accept": "application/vnd.github+json"}
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    return httpx.AsyncClient(base_url=base_url, headers=headers, transport=transport)

def user_path(username: str) -> str:
    return f"/users/{quote(username, safe='')}"

def events_path(username: str) -> str:
    return f"{user_path(username)}/events"

def upstream_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None

def error_for_response(response: httpx.Response) -> ProbeError:
    status = response.status_code
    message = upstream_message(response) or f"Request failed with status code {status}"

    if status == 404:
        return NotFound(message, status)

    rate_limited = status == 429 or (
        status == 403
        and (response.headers.get("X-RateLimit-Remaining") == "0" or "rate limit" in message.lower())
    )
    if rate_limited:
        return RateLimited(message, status)

    return TransportError(message, status)

class GithubProbe:
    """
    Async REST probe. Use as `async with GithubProbe(settings) as probe:` so a
    single connection pool serves the whole analysis.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: str = GITHUB_API_URL,
    ):
        self.settings = settings
        self._transport = transport
        self._base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GithubProbe":
        self._client = create_client(self.settings, transport=self._transport, base_url=self._base_url)
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_profile(self, username: str) -> ProfileSnapshot:
        """
        Fetches the user record and their first 100 repositories (most recently
        updated first), with forks removed. Any failure here is fatal to the run.
        """
        path = user_path(username)

        logger.info("Fetching profile for %s", username)
        raw_user = await self.get_json(path)

        raw_repos = await self.get_json(
            f"{path}/repos",
            params={"per_page": REPOS_PER_PAGE, "sort": "updated"},
        )
        if not isinstance(raw_user, dict) or not isinstance(raw_repos, list):
            raise TransportError("Unexpected response shape from GitHub")

        try:
            profile = normalize_profile(raw_user)
            repos = normalize_repositories(raw_repos)
        except ValidationError as e:
            raise TransportError(f"Unexpected GitHub payload ({e.error_count()} invalid fields)") from e

        own = own_repositories(repos)
        logger.info("  > %d repositories (%d after dropping forks)", len(repos), len(own))
        return ProfileSnapshot(profile=profile, repositories=own)

    async def fetch_languages(self, languages_url: str) -> Dict[str, int]:
        data = await self.get_json(languages_url)
        if not isinstance(data, dict) or not all(isinstance(v, int) for v in data.values()):
            raise TransportError("Unexpected languages payload")
        return data

    async def fetch_events(self, username: str) -> List[Dict[str, Any]]:
        data = await self.get_json(
            events_path(username),
            params={"per_page": EVENTS_PER_PAGE},
        )
        if not isinstance(data, list):
            raise TransportError("Unexpected events payload")
        return data

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if self._client is None:
            raise RuntimeError("GithubProbe must be entered with 'async with' before use")

        try:
            response = await self._client.get(url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL is not an HTTPError; both mean the request never completed
            raise TransportError(str(e) or "Unknown error") from e

        if not response.is_success:
            raise error_for_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {response.request.url}") from e
