"""Command-line argument parsing for the Trello cycle time report."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import DEFAULT_MAX_WORKERS


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the cycle time report.

    Exactly one of the positional label name or ``--label-id`` must be given.
    """
    parser = argparse.ArgumentParser(
        prog="trello-cycle-time",
        description=(
            "Report cycle times (creation, start and completion) for Trello "
            "cards tagged with a label."
        ),
    )

    parser.add_argument(
        "label_name",
        nargs="?",
        help="Name of the board label whose cards are analysed.",
    )
    parser.add_argument(
        "--label-id",
        help="Label identifier to filter by instead of resolving a label name.",
    )
    parser.add_argument(
        "--board-id",
        help="Trello board identifier (default: $TRELLO_BOARD_ID or the built-in board).",
    )
    parser.add_argument(
        "--in-progress-list-id",
        help="List whose entry marks a card as started.",
    )
    parser.add_argument(
        "--completion-list-id",
        action="append",
        default=[],
        help="List whose entry marks a card as completed (repeatable).",
    )
    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Maximum concurrent action-history requests (default: {DEFAULT_MAX_WORKERS}).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress information to stderr.",
    )

    args = parser.parse_args(argv)

    if not args.label_name and not args.label_id:
        parser.error("Label name not provided.")
    if args.label_name and args.label_id:
        parser.error("Provide either a label name or --label-id, not both.")

    return args
