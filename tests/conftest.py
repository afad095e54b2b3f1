import asyncio
from datetime import datetime, timedelta, timezone
import httpx
import pytest

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
API = "https://api.github.com"

def iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")

def raw_user(login="octocat", **overrides):
    user = {
        "login": login,
        "name": "The Octocat",
        "avatar_url": f"https://avatars.example/{login}.png",
        "html_url": f"https://github.com/{login}",
        "bio": None,
        "location": None,
        "company": None,
        "created_at": "2011-01-25T18:44:36Z",
        "followers": 1200,
        "public_repos": 8,
    }
    user.update(overrides)
    return user

def raw_repo(repo_id, name, owner="octocat", updated=None, **overrides):
    repo = {
        "id": repo_id,
        "name": name,
        "stargazers_count": 0,
        "forks_count": 0,
        "language": None,
        "size": 100,
        "updated_at": iso(updated or NOW - timedelta(days=1)),
        "fork": False,
        "description": f"{name} description",
        "html_url": f"https://github.com/{owner}/{name}",
        "languages_url": f"{API}/repos/{owner}/{name}/languages",
    }
    repo.update(overrides)
    return repo

class FakeGithub:
    """
    Routes requests by URL path to canned responses, recording every request
    and the peak number of requests in flight.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.in_flight = 0
        self.peak_in_flight = 0

    def add(self, path, json=None, status=200, headers=None, delay=0.0, error=None):
        self.routes[path] = (status, json, headers or {}, delay, error)

    def add_user(self, login, user=None, repos=(), events=(), delay=0.0):
        self.add(f"/users/{login}", user or raw_user(login), delay=delay)
        self.add(f"/users/{login}/repos", list(repos))
        self.add(f"/users/{login}/events", list(events))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})

        status, body, headers, delay, error = route
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(delay)
        finally:
            self.in_flight -= 1

        if error is not None:
            raise error(request)
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self):
        return [r.url.path for r in self.requests]

@pytest.fixture
def now():
    return NOW

@pytest.fixture
def fake_github():
    return FakeGithub()
