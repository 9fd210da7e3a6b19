"""Trello card cycle time report."""

from __future__ import annotations

import logging
import sys

from .cli import parse_args
from .config import load_config
from .cycle_time import build_card_reports
from .errors import ApiError, AuthenticationError, ConfigurationError
from .filters import filter_cards_by_label
from .stats import compute_summary, generate_card_report, generate_summary_report
from .trello_client import TrelloClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_API_ERROR = 4


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_report() -> int:
    """Run the full report and map failures to process exit codes.

    Returns:
        ``0`` on success, ``2`` for configuration errors, ``3`` for
        authentication errors, ``4`` for Trello API errors (including an
        unknown label) and ``1`` for anything unexpected.
    """
    try:
        args = parse_args()
        _configure_logging(args.verbose)

        config = load_config(
            label_name=args.label_name,
            label_id=args.label_id,
            board_id=args.board_id,
            max_workers=args.max_workers,
            in_progress_list_id=args.in_progress_list_id,
            completion_list_ids=args.completion_list_id,
        )
        client = TrelloClient(config=config)

        label_id = config.label_id or client.resolve_label_id(config.board_id, config.label_name)
        cards = client.list_cards(config.board_id)
        labelled_cards = filter_cards_by_label(cards, label_id)
        logger.info(
            "Filtered cards by label",
            extra={"label_id": label_id, "cards_total": len(cards), "cards_labelled": len(labelled_cards)},
        )

        cards_with_actions = client.fetch_card_actions(labelled_cards, max_workers=config.max_workers)
        reports = build_card_reports(cards_with_actions, config.workflow)

        print(generate_card_report(reports))
        print(generate_summary_report(compute_summary(config.label_name or label_id, reports)))
        return EXIT_OK
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        print(f"Authentication error: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION_ERROR
    except ApiError as exc:
        print(f"Trello API error: {exc}", file=sys.stderr)
        return EXIT_API_ERROR
    except Exception:
        logger.exception("Unexpected error while generating the cycle time report")
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    raise SystemExit(orchestrate_report())


if __name__ == "__main__":
    main()
