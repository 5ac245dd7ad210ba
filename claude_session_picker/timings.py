"""Timing utilities for profiling the index scan and frame redraws.

Output always goes to stderr: stdout is reserved for the selected session.
"""

import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Tuple, Union

import click

# Enabled via CLAUDE_SESSION_PICKER_DEBUG_TIMING ("1", "true" or "yes")
DEBUG_TIMING = os.getenv("CLAUDE_SESSION_PICKER_DEBUG_TIMING", "").lower() in (
    "1",
    "true",
    "yes",
)

# Global timing data storage
_timing_data: dict[str, Any] = {}


@contextmanager
def log_timing(
    phase: Union[str, Callable[[], str]],
    t_start: Optional[float] = None,
) -> Iterator[None]:
    """Context manager for logging phase timing.

    Args:
        phase: Phase name (static string) or callable returning phase name (for dynamic names)
        t_start: Optional start time for calculating total elapsed time

    Example:
        with log_timing(lambda: f"Index ({len(sessions)} sessions)"):
            sessions = indexer.index()
    """
    if not DEBUG_TIMING:
        yield
        return

    t_phase_start = time.time()
    try:
        yield
    finally:
        t_now = time.time()
        phase_time = t_now - t_phase_start
        phase_name = phase() if callable(phase) else phase

        if t_start is not None:
            click.echo(
                f"[TIMING] {phase_name:40s} {phase_time:8.3f}s (total: {t_now - t_start:8.3f}s)",
                err=True,
            )
        else:
            click.echo(f"[TIMING] {phase_name:40s} {phase_time:8.3f}s", err=True)


@contextmanager
def timing_stat(list_name: str, label: str = "") -> Iterator[None]:
    """Record the duration of the enclosed block under ``list_name``.

    Nothing is printed here; collected durations are reported later with
    :func:`report_timing_statistics`, once the terminal is no longer in use.
    """
    if not DEBUG_TIMING:
        yield
        return

    t_start = time.time()
    try:
        yield
    finally:
        duration = time.time() - t_start
        _timing_data.setdefault(list_name, []).append((duration, label))


def get_timings(list_name: str) -> list[Tuple[float, str]]:
    return list(_timing_data.get(list_name, []))


def report_timing_statistics(
    operation_timings: list[Tuple[str, list[Tuple[float, str]]]],
) -> None:
    """Report timing statistics for repeated operations.

    Args:
        operation_timings: List of (name, timings) tuples where timings is a list of (duration, label)
    """
    for operation_name, timings in operation_timings:
        if not timings:
            continue
        sorted_ops = sorted(timings, key=lambda x: x[0], reverse=True)
        total_time = sum(t[0] for t in timings)
        click.echo(f"\n[TIMING] {operation_name}:", err=True)
        click.echo(f"[TIMING]   Total operations: {len(timings)}", err=True)
        click.echo(f"[TIMING]   Total time: {total_time:.3f}s", err=True)
        click.echo("[TIMING]   Slowest 5 operations:", err=True)
        for duration, label in sorted_ops[:5]:
            click.echo(f"[TIMING]     {label}: {duration * 1000:.1f}ms", err=True)
