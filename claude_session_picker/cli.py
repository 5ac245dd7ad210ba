#!/usr/bin/env python3
"""CLI interface for claude-session-picker.

Usage from a shell::

    selection=$(claude-session-picker "optional query") || exit
    IFS=$'\\t' read -r session_id project_path <<< "$selection"

The interactive UI is drawn on stderr; on confirmation the selected session
is written to stdout as ``<sessionId>\\t<projectPath>`` (no trailing
newline) and the exit status is 0. Cancelling, finding no sessions, or any
error exits with status 1.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .cache import (
    SESSION_CACHE_TTL_MS,
    DisabledSessionCache,
    JsonFileSessionCache,
    SessionCache,
    get_cache_path,
)
from .indexer import (
    SessionIndexer,
    get_default_history_path,
    get_default_projects_dir,
)
from .layout import RESET, YELLOW
from .models import Session
from .timings import (
    DEBUG_TIMING,
    get_timings,
    log_timing,
    report_timing_statistics,
)


def format_selection(session: Session, home: Optional[Path] = None) -> str:
    """Result line for the calling shell: ``<sessionId>\\t<projectPath>``."""
    project_path = session.project_path or str(home or Path.home())
    return f"{session.session_id}\t{project_path}"


def _has_terminal() -> bool:
    """Whether there is an interactive terminal to draw on and read keys from."""
    return sys.stdin.isatty() and sys.stderr.isatty()


def _same_path(a: Path, b: Path) -> bool:
    return a.expanduser().resolve() == b.expanduser().resolve()


def _build_cache(
    no_cache: bool, cache_ttl: float, history_path: Path, projects_dir: Path
) -> SessionCache:
    """Cache for the index of the given sources.

    The default log uses the shared cache file; any other log or transcript
    root gets a cache file of its own.
    """
    if no_cache:
        return DisabledSessionCache()
    sources: tuple[Path, ...] = ()
    if not (
        _same_path(history_path, get_default_history_path())
        and _same_path(projects_dir, get_default_projects_dir())
    ):
        sources = (history_path, projects_dir)
    return JsonFileSessionCache(
        get_cache_path(sources), ttl_ms=int(cache_ttl * 1000)
    )


@click.command()
@click.argument("query", required=False, default="")
@click.option(
    "--history-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Interaction log to index (default: ~/.claude/history.jsonl).",
)
@click.option(
    "--projects-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory holding per-project transcripts (default: ~/.claude/projects/).",
)
@click.option(
    "--cache-ttl",
    type=float,
    default=SESSION_CACHE_TTL_MS / 1000,
    show_default=True,
    help="Seconds a cached session index stays valid.",
)
@click.option(
    "--no-cache",
    is_flag=True,
    help="Neither read nor write the session index cache.",
)
@click.option(
    "--clear-cache",
    is_flag=True,
    help="Delete the session index cache before scanning.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging and show full traceback on errors.",
)
def main(
    query: str,
    history_file: Optional[Path],
    projects_dir: Optional[Path],
    cache_ttl: float,
    no_cache: bool,
    clear_cache: bool,
    debug: bool,
) -> None:
    """Pick a previous Claude Code session to resume.

    QUERY: Optional initial search text.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    t_start = time.time()
    try:
        history_path = history_file or get_default_history_path()
        projects_path = projects_dir or get_default_projects_dir()
        cache = _build_cache(no_cache, cache_ttl, history_path, projects_path)
        if clear_cache:
            cache.clear()

        indexer = SessionIndexer(history_path, projects_path, cache=cache)
        sessions: list[Session] = []
        with log_timing(lambda: f"Index ({len(sessions)} sessions)", t_start):
            sessions = indexer.index()

        if not sessions:
            click.echo(f"{YELLOW}No sessions found{RESET}", err=True)
            sys.exit(1)

        if not _has_terminal():
            click.echo("Error: session picker needs an interactive terminal", err=True)
            sys.exit(1)

        from .tui import run_session_picker

        with log_timing("Interactive session", t_start):
            selected = run_session_picker(sessions, query)
        if DEBUG_TIMING:
            report_timing_statistics([("Frame redraws", get_timings("_frame_timings"))])

        if selected is None:
            sys.exit(1)
        click.echo(format_selection(selected), nl=False)
        sys.exit(0)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
