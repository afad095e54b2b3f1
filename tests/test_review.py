from datetime import timedelta
import pytest
from conftest import NOW, raw_repo, raw_user
from gitglance.probes.normalizer import normalize_profile, normalize_repositories
from gitglance.refinery.engine import activity_label, build_review, needs_visibility_push

def profile(**overrides):
    return normalize_profile(raw_user("octocat", **overrides))

def some_repos(count, **overrides):
    return normalize_repositories([raw_repo(i, f"r{i}", **overrides) for i in range(count)])

def review(p=None, repos=(), languages=None, stars=0, forks=0, pushes=0):
    return build_review(p or profile(), list(repos), languages or {}, stars, forks, pushes, NOW)

@pytest.mark.parametrize("pushes,label", [
    (0, "relatively quiet"),
    (4, "relatively quiet"),
    (5, "moderately active"),
    (19, "moderately active"),
    (20, "highly active"),
    (250, "highly active"),
])
def test_activity_label_boundaries(pushes, label):
    assert activity_label(pushes) == label
    assert f"appears {label} with ~{pushes} commits" in review(pushes=pushes).paragraphs[0].text

@pytest.mark.parametrize("stars,repo_count,included", [
    (19, 5, True),
    (20, 5, False),
    (5, 4, False),
    (0, 30, True),
])
def test_visibility_gate(stars, repo_count, included):
    assert needs_visibility_push(stars, repo_count) is included
    report = review(repos=some_repos(repo_count), stars=stars)
    assert ("visibility" in report.kinds) is included

@pytest.mark.parametrize("bio", [None, "", "Building things"])
def test_bio_paragraphs_are_mutually_exclusive(bio):
    kinds = review(p=profile(bio=bio)).kinds
    assert ("bio" in kinds) != ("no_bio" in kinds)
    assert ("bio" in kinds) is bool(bio)

def test_minimal_profile_gets_summary_bio_and_next_steps():
    report = review()
    assert report.kinds == ["summary", "no_bio", "next_steps"]
    summary = report.paragraphs[0].text
    assert summary.startswith("The Octocat showcases 0 public repositories with 0 stars and 0 forks")
    assert "skew toward a diverse stack" in summary
    assert "across 0 distinct technologies" in summary

def test_summary_lists_top_three_languages_by_bytes():
    languages = {"CSS": 10, "Go": 500, "Python": 900, "Shell": 20}
    summary = review(languages=languages).paragraphs[0].text
    assert "skew toward Python, Go, Shell," in summary
    assert "across 4 distinct technologies" in summary

def test_display_name_falls_back_to_login():
    assert review(p=profile(name=None)).paragraphs[0].text.startswith("octocat showcases")

def test_recency_paragraph():
    repos = normalize_repositories([
        raw_repo(1, "fresh", updated=NOW - timedelta(days=3)),
        raw_repo(2, "legacy", updated=NOW - timedelta(days=400)),
    ])
    report = review(repos=repos)
    recency = report.paragraphs[report.kinds.index("recency")].text
    assert "updates through May 29, 2025" in recency
    assert "though 1 repos look inactive for 6+ months" in recency

def test_documentation_paragraph_counts_sampled_gaps():
    repos = normalize_repositories([raw_repo(i, f"r{i}", description=None if i < 3 else "ok") for i in range(12)])
    report = review(repos=repos, stars=100)
    documentation = report.paragraphs[report.kinds.index("documentation")].text
    assert "(3 in the recent sample)" in documentation

def test_location_paragraph():
    report = review(p=profile(location="Berlin"))
    assert "Location is set to Berlin;" in report.paragraphs[report.kinds.index("location")].text
    assert "location" not in review(p=profile(location=None)).kinds

def test_full_order_when_every_paragraph_fires():
    repos = some_repos(6, description=None)
    report = review(p=profile(bio="Hi", location="Lisbon"), repos=repos, stars=3)
    assert report.kinds == [
        "summary", "recency", "documentation", "visibility", "bio", "location", "next_steps",
    ]
    assert len(set(p.text for p in report.paragraphs)) == len(report.paragraphs)
    assert report.text.count("\n\n") == 6

def test_review_is_deterministic_for_fixed_now():
    args = dict(p=profile(bio="Hi"), repos=some_repos(7), languages={"Go": 1, "C": 1}, stars=4, pushes=6)
    assert review(**args).text == review(**args).text
