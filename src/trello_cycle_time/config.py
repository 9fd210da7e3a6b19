"""Configuration parsing and validation for the Trello cycle time report."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .errors import AuthenticationError, ConfigurationError

DEFAULT_BOARD_ID = "59c20c76cc6e831df3664603"

IN_PROGRESS_LIST_ID = "59c20c847a680393ffdde8dd"
STAGING_LIST_ID = "5a717a54c4a1139fcc118c9b"
PRODUCTION_LIST_ID = "59c20c8962f975c2f205e9b1"
DONE_LIST_ID = "5a97b723aefe03c3790e729c"

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class WorkflowConfig:
    """Board lists that mark the start and the completion of work on a card."""

    in_progress_list_id: str = IN_PROGRESS_LIST_ID
    completion_list_ids: Tuple[str, ...] = (STAGING_LIST_ID, PRODUCTION_LIST_ID, DONE_LIST_ID)


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the cycle time report."""

    key: str
    token: str
    board_id: str = DEFAULT_BOARD_ID
    label_name: Optional[str] = None
    label_id: Optional[str] = None
    max_workers: int = DEFAULT_MAX_WORKERS
    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)


def load_config(
    label_name: Optional[str] = None,
    label_id: Optional[str] = None,
    board_id: Optional[str] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    in_progress_list_id: Optional[str] = None,
    completion_list_ids: Optional[Sequence[str]] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        label_name: Name of the board label whose cards are analysed.
        label_id: Label identifier, used instead of resolving ``label_name``.
        board_id: Trello board identifier. Falls back to ``TRELLO_BOARD_ID``
            and then to the default board.
        max_workers: Upper bound on concurrent action-history requests.
        in_progress_list_id: List that marks work as started.
        completion_list_ids: Lists that mark work as completed.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If no usable label is given, ``max_workers`` is not
            greater than ``0`` or a workflow list identifier is blank.
        AuthenticationError: If ``TRELLO_KEY`` or ``TRELLO_TOKEN`` is not configured.
    """
    label_name = label_name if label_name and label_name.strip() else None
    label_id = label_id.strip() if label_id else None
    if label_name is None and not label_id:
        raise ConfigurationError("Label name not provided.")

    if max_workers <= 0:
        raise ConfigurationError("Invalid value for 'max_workers': expected an integer greater than 0.")

    workflow = WorkflowConfig()
    if in_progress_list_id is not None or completion_list_ids:
        in_progress = in_progress_list_id if in_progress_list_id is not None else workflow.in_progress_list_id
        completion = tuple(completion_list_ids) if completion_list_ids else workflow.completion_list_ids
        if not in_progress.strip() or any(not list_id.strip() for list_id in completion):
            raise ConfigurationError("Workflow list identifiers must not be blank.")
        workflow = WorkflowConfig(in_progress_list_id=in_progress, completion_list_ids=completion)

    key = os.getenv("TRELLO_KEY", "").strip()
    if not key:
        raise AuthenticationError("TRELLO_KEY environment variable undefined")

    token = os.getenv("TRELLO_TOKEN", "").strip()
    if not token:
        raise AuthenticationError("TRELLO_TOKEN environment variable undefined")

    resolved_board_id = board_id or os.getenv("TRELLO_BOARD_ID", "").strip() or DEFAULT_BOARD_ID

    return Config(
        key=key,
        token=token,
        board_id=resolved_board_id,
        label_name=label_name,
        label_id=label_id,
        max_workers=max_workers,
        workflow=workflow,
    )
