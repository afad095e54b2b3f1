from datetime import timedelta
import pytest
from pydantic import ValidationError
from conftest import NOW, raw_repo, raw_user
from gitglance.config import Settings
from gitglance.models.analysis import ReviewParagraph, ReviewReport
from gitglance.probes.normalizer import normalize_events, normalize_profile, normalize_repositories, own_repositories

def test_normalizer_profile_structure():
    profile = normalize_profile(raw_user("testuser", name=None, bio="Test bio", extra_field="ignored"))
    assert profile.login == "testuser"
    assert profile.display_name == "testuser"
    assert profile.bio == "Test bio"
    assert profile.created_at.year == 2011

def test_normalizer_maps_rest_field_names():
    [repo] = normalize_repositories([raw_repo(1, "gitglance", stargazers_count=7, forks_count=2, language="Python")])
    assert repo.stars == 7
    assert repo.forks == 2
    assert repo.language == "Python"
    assert repo.updated_at == NOW - timedelta(days=1)

def test_normalizer_rejects_repo_without_timestamp():
    payload = raw_repo(1, "broken")
    del payload["updated_at"]
    with pytest.raises(ValidationError):
        normalize_repositories([payload])

def test_own_repositories_drops_forks_and_keeps_order():
    repos = normalize_repositories([
        raw_repo(1, "a"),
        raw_repo(2, "forked", fork=True),
        raw_repo(3, "b"),
    ])
    assert [r.name for r in own_repositories(repos)] == ["a", "b"]

def test_event_commit_count_tolerates_missing_payload():
    events = normalize_events([
        {"type": "PushEvent", "created_at": "2025-05-30T00:00:00Z", "payload": {"commits": [{}, {}]}},
        {"type": "PushEvent", "created_at": "2025-05-30T00:00:00Z", "payload": {}},
        {"type": "PushEvent", "created_at": "2025-05-30T00:00:00Z"},
    ])
    assert [e.commit_count for e in events] == [2, 0, 0]

def test_review_report_joins_paragraphs_with_blank_line():
    report = ReviewReport(paragraphs=[
        ReviewParagraph(kind="summary", text="One."),
        ReviewParagraph(kind="next_steps", text="Two."),
    ])
    assert report.text == "One.\n\nTwo."
    assert report.kinds == ["summary", "next_steps"]

def test_settings_token_precedence(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    assert Settings.from_env().github_token == "from-env"
    assert Settings.from_env(token="from-cli").github_token == "from-cli"

    monkeypatch.setenv("GITHUB_TOKEN", "")
    settings = Settings.from_env()
    assert settings.github_token is None
    assert not settings.authenticated
