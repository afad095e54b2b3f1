from datetime import datetime
from typing import List, Sequence
from gitglance.models.analysis import LanguageHistogram, ReviewParagraph, ReviewReport
from gitglance.models.profile import Profile, Repository
from gitglance.refinery.formatting import format_date
from gitglance.refinery.metrics import latest_update, missing_descriptions, rank_languages, stale_count

# --- Thresholds ---

HIGHLY_ACTIVE_PUSHES = 20
MODERATELY_ACTIVE_PUSHES = 5
LOW_STARS = 20
VISIBILITY_MIN_REPOS = 5

# --- Paragraphs ---

SUMMARY = (
    "{name} showcases {repo_count} public repositories with {stars} stars and {forks} forks in total. "
    "Primary languages skew toward {languages}, indicating day-to-day work across {language_count} "
    "distinct technologies. Over the last 30 days the account appears {activity} with ~{pushes} "
    "commits detected via push events."
)

RECENCY = (
    "Recent activity includes updates through {latest}, though {stale} repos look inactive for 6+ months. "
    "Consider archiving or tagging legacy projects to clarify what's current."
)

DOCUMENTATION = (
    "Several repositories ({missing} in the recent sample) lack descriptions/README-style context. "
    "Adding concise READMEs with setup steps, architecture notes, and screenshots would improve "
    "discoverability and recruiter comprehension."
)

VISIBILITY = (
    "Stars are on the lower side for the portfolio size; adding demo links (GitHub Pages, Render, or "
    "Netlify), writing short blog posts, and pinning the top projects can boost engagement."
)

HAS_BIO = (
    "The profile bio communicates intent; consider elevating it with a one-line value proposition "
    "(e.g., \"Building data-driven systems with React + Python | open to SDE roles\")."
)

NO_BIO = (
    "No profile bio detected. Add a clear one-liner about your focus, stack, and role interests to "
    "make the profile skimmable for recruiters."
)

LOCATION = (
    "Location is set to {location}; ensure it aligns with your target job markets or add \"Remote-friendly\"."
)

NEXT_STEPS = (
    "Recommended next steps: pin 6 flagship repos (recent, strongly documented, with live demos), add "
    "project banners or GIFs to READMEs, and include a CONTRIBUTING.md where collaboration is welcome. "
    "Where possible, add tests and CI badges to signal engineering rigor."
)

def activity_label(pushes_30d: int) -> str:
    if pushes_30d >= HIGHLY_ACTIVE_PUSHES:
        return "highly active"
    if pushes_30d >= MODERATELY_ACTIVE_PUSHES:
        return "moderately active"
    return "relatively quiet"

def needs_visibility_push(stars: int, repo_count: int) -> bool:
    return stars < LOW_STARS and repo_count >= VISIBILITY_MIN_REPOS

def build_review(
    profile: Profile,
    repos: Sequence[Repository],
    languages: LanguageHistogram,
    stars: int,
    forks: int,
    pushes_30d: int,
    now: datetime,
) -> ReviewReport:
    """
    Heuristic profile review. Paragraphs are appended in a fixed order and each
    is gated by its own condition; the result depends only on the arguments.
    """
    ranked = [name for name, _ in rank_languages(languages)]
    paragraphs: List[ReviewParagraph] = []

    paragraphs.append(ReviewParagraph(kind="summary", text=SUMMARY.format(
        name=profile.display_name,
        repo_count=len(repos),
        stars=stars,
        forks=forks,
        languages=", ".join(ranked[:3]) or "a diverse stack",
        language_count=len(ranked),
        activity=activity_label(pushes_30d),
        pushes=pushes_30d,
    )))

    latest = latest_update(repos)
    if latest is not None:
        paragraphs.append(ReviewParagraph(kind="recency", text=RECENCY.format(
            latest=format_date(latest),
            stale=stale_count(repos, now),
        )))

    missing = missing_descriptions(repos)
    if missing > 0:
        paragraphs.append(ReviewParagraph(kind="documentation", text=DOCUMENTATION.format(missing=missing)))

    if needs_visibility_push(stars, len(repos)):
        paragraphs.append(ReviewParagraph(kind="visibility", text=VISIBILITY))

    if profile.bio:
        paragraphs.append(ReviewParagraph(kind="bio", text=HAS_BIO))
    else:
        paragraphs.append(ReviewParagraph(kind="no_bio", text=NO_BIO))

    if profile.location:
        paragraphs.append(ReviewParagraph(kind="location", text=LOCATION.format(location=profile.location)))

    paragraphs.append(ReviewParagraph(kind="next_steps", text=NEXT_STEPS))

    return ReviewReport(paragraphs=paragraphs)
