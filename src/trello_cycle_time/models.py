"""Domain models for Trello card cycle time processing.

These dataclasses model only the subset of Trello payload fields that the
milestone and cycle time computations need. Derived records are frozen; each
stage of the pipeline builds a new record instead of mutating its input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

CREATE_CARD = "createCard"
COPY_CARD = "copyCard"
UPDATE_CARD = "updateCard"

CREATION_ACTION_TYPES = frozenset({CREATE_CARD, COPY_CARD})


@dataclass(slots=True, frozen=True)
class Label:
    """Represents a board label."""

    id: str
    name: str


@dataclass(slots=True, frozen=True)
class Action:
    """Represents one recorded event against a card.

    ``list_id`` is the list a card was created or copied into;
    ``list_before_id`` and ``list_after_id`` are only set on updates that moved
    the card between lists.
    """

    id: str
    type: str
    date: datetime
    list_id: Optional[str] = None
    list_before_id: Optional[str] = None
    list_after_id: Optional[str] = None

    @property
    def is_creation(self) -> bool:
        return self.type in CREATION_ACTION_TYPES

    @property
    def is_update(self) -> bool:
        return self.type == UPDATE_CARD


@dataclass(slots=True, frozen=True)
class Card:
    """Represents a board card and, once fetched, its action history."""

    id: str
    name: str
    labels: List[Label] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)

    @property
    def label_ids(self) -> List[str]:
        return [label.id for label in self.labels]


@dataclass(slots=True, frozen=True)
class Milestones:
    """Workflow timestamps derived from a card's action history."""

    created: Optional[datetime] = None
    started: Optional[datetime] = None
    completed: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class CycleTimes:
    """Durations between milestones, in fractional days."""

    cycle_time: Optional[float] = None
    cycle_create_start: Optional[float] = None
    cycle_start_complete: Optional[float] = None


@dataclass(slots=True, frozen=True)
class CardReport:
    """A card enriched with its milestones and cycle times."""

    card: Card
    milestones: Milestones
    cycle_times: CycleTimes


@dataclass(slots=True, frozen=True)
class Summary:
    """Aggregate statistics over all reported cards."""

    label_name: str
    total: int
    mean_create_to_complete: Optional[float]
    mean_create_to_start: Optional[float]
    mean_start_to_complete: Optional[float]
    first_created: Optional[datetime]
    first_started: Optional[datetime]
    last_completed: Optional[datetime]
    start_to_complete: Optional[float]
    completed_count: int
    start_to_complete_per_completed: Optional[float]
    created_on_start_date: int
    percent_created_on_start_date: Optional[float]
