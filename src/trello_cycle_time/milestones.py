"""Milestone derivation from card action histories.

A card's milestones are derived from list transitions recorded in its actions:

- ``created``: the earliest creation or copy action.
- ``started``: the earliest move into, or creation inside, the in-progress list.
- ``completed``: the earliest move into any completion list.

Actions are always sorted by timestamp before scanning since Trello returns
them newest first and the order is not guaranteed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .config import WorkflowConfig
from .models import Action, Card, Milestones

logger = logging.getLogger(__name__)


def _chronological(actions: Sequence[Action]) -> List[Action]:
    return sorted(actions, key=lambda action: action.date)


def derive_created(actions: Sequence[Action]) -> Optional[datetime]:
    """Return the timestamp of the earliest creation or copy action."""
    creations = [action for action in _chronological(actions) if action.is_creation]
    if not creations:
        return None
    return creations[0].date


def derive_started(actions: Sequence[Action], workflow: WorkflowConfig) -> Optional[datetime]:
    """Return when the card first entered the in-progress list.

    Candidates are update actions moving the card into the list and creation
    actions placing the card directly in it.
    """
    in_progress = workflow.in_progress_list_id
    update_starts = [
        action.date for action in actions if action.is_update and action.list_after_id == in_progress
    ]
    creation_starts = [
        action.date for action in actions if action.is_creation and action.list_id == in_progress
    ]

    starts = sorted(update_starts + creation_starts)
    if not starts:
        return None
    return starts[0]


def derive_completed(actions: Sequence[Action], workflow: WorkflowConfig) -> Optional[datetime]:
    """Return when the card was first moved into one of the completion lists."""
    completion_lists = set(workflow.completion_list_ids)
    for action in _chronological(actions):
        if action.is_update and action.list_after_id in completion_lists:
            return action.date
    return None


def derive_milestones(card: Card, workflow: WorkflowConfig) -> Milestones:
    """Derive created, started and completed timestamps for a card."""
    milestones = Milestones(
        created=derive_created(card.actions),
        started=derive_started(card.actions, workflow),
        completed=derive_completed(card.actions, workflow),
    )

    if milestones.created is None:
        logger.debug(
            "Card has no creation action",
            extra={"card_id": card.id, "actions_total": len(card.actions)},
        )

    return milestones
