"""Aggregate statistics and text rendering for the cycle time report.

This module provides utilities for:
- Averaging per-card durations over the whole card set.
- Summarising feature-level start, completion and creation dates.
- Formatting dates, day durations and percentages with fallback labels.
- Building the per-card listing and the aggregate summary text.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from .cycle_time import days_between
from .models import CardReport, Summary

NOT_STARTED = "not started"
UNCOMPLETED = "uncompleted"
UNCOMPLETED_OR_NOT_STARTED = "uncompleted or not started"
UNKNOWN = "unknown"
NOT_AVAILABLE = "n/a"


def mean_duration(values: Sequence[Optional[float]], total: int) -> Optional[float]:
    """Sum the defined durations and divide by ``total``.

    ``total`` is the number of cards in the report, not the number of defined
    values, so cards lacking the measured duration pull the mean down. This
    matches the long-standing output of the report.

    Returns:
        The mean in days, or ``None`` when ``total`` is ``0``.
    """
    if total <= 0:
        return None
    return sum(value for value in values if value is not None) / total


def compute_summary(label_name: str, reports: Sequence[CardReport]) -> Summary:
    """Compute fleet-level statistics over all reported cards."""
    total = len(reports)

    created = [report.milestones.created for report in reports if report.milestones.created is not None]
    started = [report.milestones.started for report in reports if report.milestones.started is not None]
    completed = [report.milestones.completed for report in reports if report.milestones.completed is not None]

    first_created = min(created) if created else None
    first_started = min(started) if started else None
    last_completed = max(completed) if completed else None

    start_to_complete = days_between(first_started, last_completed)
    per_completed = None
    if start_to_complete is not None and completed:
        per_completed = start_to_complete / len(completed)

    created_on_start_date = 0
    if first_created is not None:
        created_on_start_date = sum(1 for value in created if value.date() == first_created.date())

    percent = (created_on_start_date / total) * 100 if total else None

    return Summary(
        label_name=label_name,
        total=total,
        mean_create_to_complete=mean_duration([r.cycle_times.cycle_time for r in reports], total),
        mean_create_to_start=mean_duration([r.cycle_times.cycle_create_start for r in reports], total),
        mean_start_to_complete=mean_duration([r.cycle_times.cycle_start_complete for r in reports], total),
        first_created=first_created,
        first_started=first_started,
        last_completed=last_completed,
        start_to_complete=start_to_complete,
        completed_count=len(completed),
        start_to_complete_per_completed=per_completed,
        created_on_start_date=created_on_start_date,
        percent_created_on_start_date=percent,
    )


def format_date(value: Optional[datetime], fallback: str = UNKNOWN) -> str:
    """Format a timestamp as ``D.M.YYYY`` without zero padding."""
    if value is None:
        return fallback
    return f"{value.day}.{value.month}.{value.year}"


def format_timestamp(value: Optional[datetime], fallback: str = NOT_AVAILABLE) -> str:
    """Format a timestamp as ISO 8601."""
    if value is None:
        return fallback
    return value.isoformat()


def format_days(value: Optional[float], fallback: str = NOT_AVAILABLE) -> str:
    """Format a duration in days with two decimals."""
    if value is None:
        return fallback
    return f"{value:.2f}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.2f}%"


def generate_card_report(reports: Sequence[CardReport]) -> str:
    """Generate the per-card listing.

    Each card shows its name, identifier, milestone dates and cycle times,
    with a fallback label wherever a milestone or duration is missing.
    """
    lines: List[str] = []

    for report in reports:
        milestones = report.milestones
        cycle_times = report.cycle_times
        lines.extend(
            [
                report.card.name,
                report.card.id,
                f"Card created: {format_date(milestones.created)}",
                f"Card started: {format_date(milestones.started, NOT_STARTED)}",
                f"Card completed: {format_date(milestones.completed, UNCOMPLETED)}",
                f"Card cycle time (creation to completion): {format_days(cycle_times.cycle_time, UNCOMPLETED)}",
                f"Card cycle time (creation to start): {format_days(cycle_times.cycle_create_start, NOT_STARTED)}",
                "Card cycle time (start to completion): "
                f"{format_days(cycle_times.cycle_start_complete, UNCOMPLETED_OR_NOT_STARTED)}",
                "",
            ]
        )

    return "\n".join(lines)


def generate_summary_report(summary: Summary) -> str:
    """Generate the aggregate summary for the analysed label."""
    lines = [
        "SUMMARY",
        "=======",
        "",
        f"Analysed label: {summary.label_name}",
        f"Total number of tasks: {summary.total}",
        f"Mean cycle time (creation to completion): {format_days(summary.mean_create_to_complete)}",
        f"Mean cycle time (creation to start): {format_days(summary.mean_create_to_start)}",
        f"Mean cycle time (start to completion): {format_days(summary.mean_start_to_complete)}",
        f"Feature defined: {format_timestamp(summary.first_created)}",
        f"Feature started: {format_timestamp(summary.first_started)}",
        f"Feature completed: {format_timestamp(summary.last_completed)}",
        f"Feature start to completion: {format_days(summary.start_to_complete)}",
        f"Amount of completed tasks: {summary.completed_count}",
        "Feature cycle time divided by completed tasks: "
        f"{format_days(summary.start_to_complete_per_completed)}",
        f"Percent of tasks defined on start date: {format_percent(summary.percent_created_on_start_date)}",
    ]

    return "\n".join(lines)
