"""Cycle time computation for Trello cards.

Durations are reported in fractional days. A duration is ``None`` whenever
either of its milestones is missing. Negative durations caused by
inconsistent action timestamps are passed through unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .config import WorkflowConfig
from .milestones import derive_milestones
from .models import Card, CardReport, CycleTimes, Milestones

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def days_between(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    """Return ``end - start`` in fractional days, or ``None`` if either is missing."""
    if start is None or end is None:
        return None
    return (end - start).total_seconds() / SECONDS_PER_DAY


def compute_cycle_times(milestones: Milestones) -> CycleTimes:
    """Compute creation-to-completion, creation-to-start and start-to-completion days."""
    return CycleTimes(
        cycle_time=days_between(milestones.created, milestones.completed),
        cycle_create_start=days_between(milestones.created, milestones.started),
        cycle_start_complete=days_between(milestones.started, milestones.completed),
    )


def build_card_report(card: Card, workflow: WorkflowConfig) -> CardReport:
    """Enrich a card with its milestones and cycle times."""
    milestones = derive_milestones(card, workflow)
    return CardReport(card=card, milestones=milestones, cycle_times=compute_cycle_times(milestones))


def build_card_reports(cards: Sequence[Card], workflow: WorkflowConfig) -> List[CardReport]:
    """Build a report entry for every card, preserving input order."""
    reports = [build_card_report(card, workflow) for card in cards]

    logger.info(
        "Computed card cycle times",
        extra={
            "cards_total": len(reports),
            "cards_started": sum(1 for report in reports if report.milestones.started is not None),
            "cards_completed": sum(1 for report in reports if report.milestones.completed is not None),
        },
    )

    return reports
