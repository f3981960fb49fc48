"""
Rich display components — banners, tables, trees, panels.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.align import Align
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from cli.console import console
from config.settings import SOURCE_LABELS
from core.models import AggregateResult, ImageRecord, SourceOutcome, TimelinePeriod
from core.timeline import YearRange


BANNER = r"""
  _                    _   _             ____
 | |    ___   ___ __ _| |_(_) ___  _ __ / ___| _ __  _   _
 | |   / _ \ / __/ _` | __| |/ _ \| '_ \\___ \| '_ \| | | |
 | |__| (_) | (_| (_| | |_| | (_) | | | |___) | |_) | |_| |
 |_____\___/ \___\__,_|\__|_|\___/|_| |_|____/| .__/ \__, |
                                              |_|    |___/
"""


def show_banner() -> None:
    """Display the startup banner."""
    panel = Panel(
        Align.center(Text(BANNER, style="bold cyan")),
        border_style="bright_blue",
        padding=(0, 2),
    )
    console.print(panel)


def show_config_table(config: Dict[str, Any]) -> None:
    """Display configuration as a rich table."""
    table = Table(
        title="⚙️  Configuration",
        box=box.ROUNDED,
        border_style="bright_blue",
        show_header=True,
        header_style="bold white on blue",
        padding=(0, 1),
    )
    table.add_column("Setting", style="stat_key", min_width=20)
    table.add_column("Value", style="stat_val", min_width=30)

    for key, value in config.items():
        if isinstance(value, bool):
            val_str = "✅ Yes" if value else "❌ No"
            style = "success" if value else "muted"
        elif isinstance(value, (list, tuple)):
            val_str = ", ".join(str(v) for v in value)
            style = "source"
        elif isinstance(value, (int, float)):
            val_str = str(value)
            style = "stat_val"
        else:
            val_str = str(value)
            style = "stat_val"

        table.add_row(key, Text(val_str, style=style))

    console.print(table)
    console.print()


def show_sources_table(
    known: Sequence[str],
    defaults: Sequence[str],
    historical: Sequence[str],
) -> None:
    table = Table(title="🗂️  Image Sources", box=box.ROUNDED, border_style="cyan")
    table.add_column("Id", style="source")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Default", justify="center")

    for name in known:
        kind = Text("historical", style="historic") if name in historical else Text("modern", style="muted")
        table.add_row(
            name,
            SOURCE_LABELS.get(name, name),
            kind,
            "✅" if name in defaults else "",
        )

    console.print(table)
    console.print()


def _year_cell(rec: ImageRecord) -> Text:
    if rec.year is not None:
        return Text(str(rec.year), style="year")
    return Text("—", style="muted")


def show_results_table(images: Sequence[ImageRecord], limit: int = 50) -> None:
    """Flat list of aggregated images."""
    table = Table(
        title=f"🖼️  Images ({len(images)})",
        box=box.SIMPLE_HEAVY,
        border_style="bright_blue",
        show_lines=False,
    )
    table.add_column("#", style="muted", width=4)
    table.add_column("Source", style="source", width=10)
    table.add_column("Year", width=6)
    table.add_column("Title", max_width=40)
    table.add_column("URL", style="muted", overflow="fold")

    for i, rec in enumerate(images[:limit], 1):
        title = Text(rec.title[:40], style="historic" if rec.is_historical else "")
        table.add_row(str(i), rec.source, _year_cell(rec), title, rec.url)

    console.print(table)
    if len(images) > limit:
        console.print(f"[muted]… {len(images) - limit} more (use --json for everything)[/]")
    console.print()


def show_timeline(
    periods: Sequence[TimelinePeriod],
    span: Optional[YearRange] = None,
    per_period: int = 5,
) -> None:
    """Timeline view: one branch per period, most recent first."""
    header = "🕰️  Timeline"
    if span is not None:
        header += f"  {span.min} → {span.max}  ({span.span} years of history)"
    tree = Tree(header, style="bold")

    for period in periods:
        count = len(period.images)
        branch = tree.add(
            f"[period]{period.label}[/]  [muted]{count} image{'s' if count != 1 else ''}[/]"
        )
        for rec in period.images[:per_period]:
            year = f"[year]{rec.year}[/] " if rec.year is not None else ""
            branch.add(f"{year}{rec.title[:60]}  [source]({rec.source})[/]")
        if count > per_period:
            branch.add(f"[muted]… {count - per_period} more[/]")

    console.print(Panel(tree, border_style="bright_blue"))
    console.print()


def show_source_outcomes(outcomes: Sequence[SourceOutcome]) -> None:
    """Per-source result of one aggregation."""
    if not outcomes:
        return

    table = Table(title="🏥 Source Health", box=box.ROUNDED, border_style="cyan")
    table.add_column("Source", style="source")
    table.add_column("Status")
    table.add_column("Records", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("Error", style="muted", max_width=40)

    for o in outcomes:
        if not o.ok:
            status = Text("❌ failed", style="error")
        elif o.records:
            status = Text("✅ ok", style="success")
        else:
            status = Text("∅ empty", style="warning")
        table.add_row(
            o.source,
            status,
            str(len(o.records)),
            f"{o.elapsed:.2f}s",
            (o.error or "")[:40],
        )

    console.print(table)
    console.print()


def show_summary(result: AggregateResult, raw_count: Optional[int] = None) -> None:
    counts = result.source_counts
    lines: List[str] = [
        f"[stat_key]Location:[/] [query]{result.query}[/]",
        f"[stat_key]Images:[/]   [stat_val]{result.count}[/]"
        + (f" [muted](from {raw_count} before dedup)[/]" if raw_count is not None else ""),
        f"[stat_key]Sources:[/]  "
        + (", ".join(f"{name} ({counts[name]})" for name in result.sources) or "[muted]none[/]"),
        f"[stat_key]Elapsed:[/]  {result.elapsed:.2f}s",
    ]
    if result.failed_sources:
        lines.append(f"[warning]No results from: {', '.join(result.failed_sources)}[/]")

    style = "green" if result.count else "yellow"
    title = "Partial (cancelled)" if result.cancelled else "Complete"
    console.print(Panel("\n".join(lines), border_style=style, title=title))
    if not result.count:
        console.print("[muted]Try a different location or enable more sources[/]")
    console.print()
