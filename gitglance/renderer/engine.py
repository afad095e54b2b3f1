import io
import os
import logging
import matplotlib.pyplot as plt
from jinja2 import Environment, FileSystemLoader, select_autoescape
from gitglance.renderer.manifest import ChartData, RenderManifest

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

def figure_to_svg(fig) -> str:
    buf = io.BytesIO()
    fig.savefig(buf, format="svg", bbox_inches="tight", pad_inches=0.05, transparent=True)
    plt.close(fig)

    svg_data = buf.getvalue().decode("utf-8")
    # Drop the XML prolog so the SVG can be inlined
    start_idx = svg_data.find("<svg")
    return svg_data[start_idx:] if start_idx != -1 else svg_data

def doughnut_svg(chart: ChartData) -> str:
    fig, ax = plt.subplots(figsize=(4.5, 4.5))
    ax.pie(
        chart.values,
        labels=chart.labels,
        startangle=90,
        counterclock=False,
        wedgeprops={"width": 0.45, "edgecolor": "white"},
        textprops={"fontsize": 8},
    )
    ax.set_aspect("equal")
    return figure_to_svg(fig)

def bar_svg(chart: ChartData) -> str:
    fig, ax = plt.subplots(figsize=(6, 3.5))
    ax.bar(chart.labels, chart.values)
    ax.set_ylabel(chart.label)
    ax.set_ylim(bottom=0)
    ax.tick_params(axis="x", labelrotation=35, labelsize=8)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)
    return figure_to_svg(fig)

def render_chart(chart: ChartData, kind: str) -> str:
    """Empty charts render as an empty string; the template shows a no-data note."""
    if chart.is_empty:
        return ""
    if kind == "doughnut":
        # Languages under 512 bytes round to 0 KiB; a pie of zeros has no wedges
        return doughnut_svg(chart) if sum(chart.values) > 0 else ""
    return bar_svg(chart)

def render_html(manifest: RenderManifest) -> str:
    env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), autoescape=select_autoescape(["html"]))
    template = env.get_template("report.html")

    return template.render(
        manifest=manifest,
        languages_svg=render_chart(manifest.languages, "doughnut"),
        stars_svg=render_chart(manifest.top_starred, "bar"),
        year=manifest.generated_at.year,
    )

def render_to_html(manifest: RenderManifest, output_path: str) -> str:
    """
    Renders the manifest to a standalone HTML report and returns its path.
    """
    html_content = render_html(manifest)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    logger.info("Report written to %s", output_path)
    return output_path
