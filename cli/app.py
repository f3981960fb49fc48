"""
Typer CLI application with Rich integration.

Commands:
    search    — Aggregate images of a location
    sources   — List known image sources
    config    — Show current configuration
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import List, Optional

import typer

from cli.callbacks import validate_location, validate_sources, validate_timeout
from cli.console import console, err_console
from cli.display import (
    show_banner,
    show_config_table,
    show_results_table,
    show_source_outcomes,
    show_sources_table,
    show_summary,
    show_timeline,
)

app = typer.Typer(
    name="locationspy",
    help="🌍 LocationSpy — every picture of a place, old and new",
    rich_markup_mode="rich",
    add_completion=True,
    no_args_is_help=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


@app.command()
def search(
    location: str = typer.Argument(
        ...,
        help="Address, city or landmark",
        callback=validate_location,
    ),
    sources: Optional[List[str]] = typer.Option(
        None,
        "--source", "-s",
        help="Source to query (repeatable, or comma separated)",
        callback=validate_sources,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout", "-t",
        help="Give up on slow sources after this many seconds",
        callback=validate_timeout,
    ),
    timeline: bool = typer.Option(
        False,
        "--timeline",
        help="Group results by period instead of a flat list",
    ),
    shuffle: bool = typer.Option(
        True,
        "--shuffle/--no-shuffle",
        help="Mix sources together",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the response as JSON",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Also write the JSON response to this file",
        dir_okay=False,
    ),
    limit: int = typer.Option(
        50,
        "--limit", "-n",
        help="Rows to show in the results table",
        min=1,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    🔎 [bold]Aggregate images[/bold] of a location from many sources.

    [dim]Examples:[/dim]
        locationspy search "Flatiron Building"
        locationspy search "Main St, Galena IL" -s loc -s archive --timeline
        locationspy search Boston --source google,bing --timeout 10 --json
    """
    from config.settings import cfg
    from core.pipeline import AggregationPipeline
    from core.timeline import year_range
    from utils.exceptions import InvalidInputError
    from utils.log_config import setup_root

    cfg.verbose = verbose
    cfg.shuffle = shuffle
    cfg.paths.ensure()
    setup_root(cfg.paths.log_file, verbose=verbose, console=not as_json)

    if not as_json:
        show_banner()

    pipeline = AggregationPipeline(cfg)
    cancel = threading.Event()

    try:
        if as_json:
            result = pipeline.run(location, sources, timeout=timeout, cancel=cancel)
        else:
            with console.status(f"Searching [query]{location}[/]…", spinner="earth"):
                result = pipeline.run(location, sources, timeout=timeout, cancel=cancel)
    except InvalidInputError as exc:
        err_console.print(f"[error]{exc}[/]")
        raise typer.Exit(code=2)
    except KeyboardInterrupt:
        cancel.set()
        err_console.print("[warning]Interrupted[/]")
        raise typer.Exit(code=130)

    periods = pipeline.timeline(result) if timeline else None
    payload = result.to_dict()
    if periods is not None:
        payload["timeline"] = [p.to_dict() for p in periods]

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    if as_json:
        console.print_json(data=payload)
        return

    if periods is not None:
        show_timeline(periods, span=year_range(result.images))
    else:
        show_results_table(result.images, limit=limit)

    if pipeline.health:
        pipeline.health.log_report()
    show_source_outcomes(result.outcomes)
    raw = pipeline.last_stats.raw if pipeline.last_stats else None
    show_summary(result, raw_count=raw)
    if output:
        console.print(f"[success]Saved:[/] {output}")


@app.command()
def sources() -> None:
    """
    🗂️  List every known image source.
    """
    from config.settings import HISTORICAL_SOURCES, KNOWN_SOURCES, cfg

    show_banner()
    show_sources_table(KNOWN_SOURCES, cfg.search.default_sources, sorted(HISTORICAL_SOURCES))


@app.command()
def config() -> None:
    """
    ⚙️  Show current configuration from settings.py.
    """
    from config.settings import cfg

    show_banner()
    timeout = cfg.search.aggregate_timeout
    show_config_table({
        "Default Sources":   list(cfg.search.default_sources),
        "Per-source Limit":  cfg.search.per_source_limit,
        "Request Timeout":   f"{cfg.search.request_timeout:g}s",
        "Overall Timeout":   f"{timeout:g}s" if timeout else "none",
        "Workers":           cfg.search.max_workers,
        "Shuffle":           cfg.shuffle,
        "Health Monitor":    cfg.enable_health,
        "Verbose":           cfg.verbose,
        "Log File":          str(cfg.paths.log_file),
    })


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """
    🌍 LocationSpy — image aggregation for a place.

    Run [bold]locationspy search "<location>"[/bold] to start.
    """
    if ctx.invoked_subcommand is None:
        show_banner()
        console.print("Available commands:\n")
        console.print("  [bold cyan]search[/]   Aggregate images of a location")
        console.print("  [bold cyan]sources[/]  List image sources")
        console.print("  [bold cyan]config[/]   Show current configuration")
        console.print()
        console.print("[muted]Run 'python main.py search --help' for detailed options[/]")
        console.print()
