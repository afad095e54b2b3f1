import argparse
import asyncio
import logging
import sys
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from gitglance.agent.analyzer import ProfileAnalyzer
from gitglance.config import Settings
from gitglance.renderer.manifest import RenderManifest, create_manifest
from gitglance.renderer.engine import render_to_html

console = Console()

def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)

def print_profile(manifest: RenderManifest):
    p = manifest.profile
    lines = [f"[bold green]{escape(p.display_name)}[/bold green]", f"@{escape(p.login)} • Joined {p.joined}"]
    if p.meta:
        lines.append(escape(p.meta))
    if p.bio:
        lines.append(f"[italic]{escape(p.bio)}[/italic]")

    stats = Table.grid(padding=(0, 3))
    for _ in range(4):
        stats.add_column(justify="center")
    stats.add_row("Public Repos", "Followers", "Total Stars", "Total Forks")
    stats.add_row(*(f"[bold]{v}[/bold]" for v in (p.public_repos, p.followers, p.total_stars, p.total_forks)))

    console.print(Panel("\n".join(lines), title="Profile"))
    console.print(stats)

def print_charts(manifest: RenderManifest):
    if manifest.languages.is_empty:
        console.print("[dim]No language data yet.[/dim]")
    else:
        langs = Table(title="Top Languages")
        langs.add_column("Language")
        langs.add_column("KiB", justify="right")
        for label, value in zip(manifest.languages.labels, manifest.languages.values):
            langs.add_row(escape(label), f"{value:,}")
        console.print(langs)

    if manifest.top_starred.is_empty:
        console.print("[dim]No repositories found.[/dim]")
    else:
        top = Table(title="Top Repositories by Stars")
        top.add_column("Repository")
        top.add_column("Stars", justify="right")
        for label, value in zip(manifest.top_starred.labels, manifest.top_starred.values):
            top.add_row(escape(label), f"{value:,}")
        console.print(top)
    console.print("[dim]Only non-fork repos are considered for charts.[/dim]")

def print_repositories(manifest: RenderManifest):
    table = Table(title="Repositories")
    for column in ("Name", "Stars", "Forks", "Lang", "Updated", "Description"):
        table.add_column(column, overflow="fold")
    for r in manifest.repositories:
        table.add_row(escape(r.name), r.stars, r.forks, escape(r.language), r.updated, escape(r.description))
    console.print(table)
    console.print("[dim]Showing up to 20 repos.[/dim]")

def main():
    parser = argparse.ArgumentParser(description="gitglance: GitHub profile analyzer & reviewer")
    parser.add_argument("username", help="GitHub username to analyze")
    parser.add_argument("--token", help="GitHub token (optional, overrides GITHUB_TOKEN)", default=None)
    parser.add_argument("--output", help="Also write an HTML report to this path", default=None)
    parser.add_argument("--verbose", action="store_true", help="Log every fetch, including skipped ones")

    args = parser.parse_args()
    configure_logging(args.verbose)

    settings = Settings.from_env(token=args.token)
    console.print(f"[bold blue]gitglance[/bold blue] - Targeting: [cyan]{escape(args.username)}[/cyan]")
    if not settings.authenticated:
        console.print("[yellow]Tip: set GITHUB_TOKEN (or pass --token) to avoid rate limits.[/yellow]")

    analyzer = ProfileAnalyzer(settings)
    with console.status("Analyzing GitHub profile..."):
        state = asyncio.run(analyzer.analyze(args.username))

    if state is None or state.profile is None:
        message = state.error if state is not None and state.error else "Unknown error"
        console.print(f"[red]Analysis failed: {escape(message)}[/red]")
        sys.exit(1)

    if state.skipped:
        console.print(f"[dim]{len(state.skipped)} best-effort lookups were skipped (use --verbose for details).[/dim]")

    manifest = create_manifest(state)
    print_profile(manifest)
    print_charts(manifest)
    print_repositories(manifest)

    if manifest.review:
        console.print(Panel(escape(manifest.review_text), title="Automated Profile Review"))

    if args.output:
        path = render_to_html(manifest, args.output)
        console.print(f"[bold green]Report Generated: {path}[/bold green]")

if __name__ == "__main__":
    main()
