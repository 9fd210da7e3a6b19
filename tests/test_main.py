"""Tests for application orchestration in the main module."""

import sys
from argparse import Namespace
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock, patch

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from trello_cycle_time.config import Config, WorkflowConfig
from trello_cycle_time.errors import ApiError, AuthenticationError, ConfigurationError, LabelNotFoundError
from trello_cycle_time.main import orchestrate_report
from trello_cycle_time.models import Action, Card, Label


def _args(**overrides) -> Namespace:
    values = {
        "label_name": "Feature X",
        "label_id": None,
        "board_id": None,
        "in_progress_list_id": None,
        "completion_list_id": [],
        "max_workers": 8,
        "verbose": False,
    }
    values.update(overrides)
    return Namespace(**values)


def _config(**overrides) -> Config:
    values = {
        "key": "key",
        "token": "token",
        "board_id": "board-1",
        "label_name": "Feature X",
        "workflow": WorkflowConfig(in_progress_list_id="doing", completion_list_ids=("done",)),
    }
    values.update(overrides)
    return Config(**values)


def _utc(day: int) -> datetime:
    return datetime(2026, 3, day, tzinfo=timezone.utc)


def test_orchestrate_report_success(capsys):
    """Verify orchestration returns 0 and wires components correctly on success."""
    feature = Label(id="l1", name="Feature X")
    labelled = Card(id="c1", name="Build it", labels=[feature])
    other = Card(id="c2", name="Unrelated")
    enriched = Card(
        id="c1",
        name="Build it",
        labels=[feature],
        actions=[
            Action(id="a1", type="createCard", date=_utc(1)),
            Action(id="a2", type="updateCard", date=_utc(2), list_after_id="doing"),
            Action(id="a3", type="updateCard", date=_utc(5), list_after_id="done"),
        ],
    )
    config = _config()
    trello_client = Mock()
    trello_client.resolve_label_id.return_value = "l1"
    trello_client.list_cards.return_value = [labelled, other]
    trello_client.fetch_card_actions.return_value = [enriched]

    with patch("trello_cycle_time.main.parse_args", return_value=_args()) as parse_args_mock, patch(
        "trello_cycle_time.main.load_config", return_value=config
    ) as load_config_mock, patch(
        "trello_cycle_time.main.TrelloClient", return_value=trello_client
    ) as client_ctor_mock:
        exit_code = orchestrate_report()

    assert exit_code == 0
    parse_args_mock.assert_called_once_with()
    load_config_mock.assert_called_once_with(
        label_name="Feature X",
        label_id=None,
        board_id=None,
        max_workers=8,
        in_progress_list_id=None,
        completion_list_ids=[],
    )
    client_ctor_mock.assert_called_once_with(config=config)
    trello_client.resolve_label_id.assert_called_once_with("board-1", "Feature X")
    trello_client.list_cards.assert_called_once_with("board-1")
    trello_client.fetch_card_actions.assert_called_once_with([labelled], max_workers=8)

    output = capsys.readouterr().out
    assert "Build it" in output
    assert "Card completed: 5.3.2026" in output
    assert "Card cycle time (creation to completion): 4.00" in output
    assert "Analysed label: Feature X" in output
    assert "Total number of tasks: 1" in output


def test_orchestrate_report_with_label_id_skips_resolution(capsys):
    """Verify a configured label id is used directly without a label lookup."""
    config = _config(label_name=None, label_id="l1")
    trello_client = Mock()
    trello_client.list_cards.return_value = []
    trello_client.fetch_card_actions.return_value = []

    with patch("trello_cycle_time.main.parse_args", return_value=_args(label_name=None, label_id="l1")), patch(
        "trello_cycle_time.main.load_config", return_value=config
    ), patch("trello_cycle_time.main.TrelloClient", return_value=trello_client):
        exit_code = orchestrate_report()

    assert exit_code == 0
    trello_client.resolve_label_id.assert_not_called()
    output = capsys.readouterr().out
    assert "Analysed label: l1" in output
    assert "Total number of tasks: 0" in output


def test_orchestrate_report_configuration_error_returns_configuration_exit_code():
    """Verify invalid configuration returns the configuration exit code."""
    with patch("trello_cycle_time.main.parse_args", return_value=_args()), patch(
        "trello_cycle_time.main.load_config",
        side_effect=ConfigurationError("Label name not provided."),
    ):
        exit_code = orchestrate_report()

    assert exit_code == 2


def test_orchestrate_report_missing_credentials_returns_auth_error():
    """Verify missing credentials return the authentication exit code."""
    with patch("trello_cycle_time.main.parse_args", return_value=_args()), patch(
        "trello_cycle_time.main.load_config",
        side_effect=AuthenticationError("TRELLO_KEY environment variable undefined"),
    ), patch("trello_cycle_time.main.TrelloClient") as client_ctor_mock:
        exit_code = orchestrate_report()

    assert exit_code == 3
    client_ctor_mock.assert_not_called()


def test_orchestrate_report_unknown_label_returns_api_exit_code(capsys):
    """Verify an unresolvable label name fails with the API error exit code."""
    trello_client = Mock()
    trello_client.resolve_label_id.side_effect = LabelNotFoundError("Label 'Feature X' was not found")

    with patch("trello_cycle_time.main.parse_args", return_value=_args()), patch(
        "trello_cycle_time.main.load_config", return_value=_config()
    ), patch("trello_cycle_time.main.TrelloClient", return_value=trello_client):
        exit_code = orchestrate_report()

    assert exit_code == 4
    trello_client.list_cards.assert_not_called()
    assert "Label 'Feature X' was not found" in capsys.readouterr().err


def test_orchestrate_report_api_error_prints_no_partial_output(capsys):
    """Verify a failed action fetch aborts the run before any report is printed."""
    trello_client = Mock()
    trello_client.resolve_label_id.return_value = "l1"
    trello_client.list_cards.return_value = []
    trello_client.fetch_card_actions.side_effect = ApiError("rate limited")

    with patch("trello_cycle_time.main.parse_args", return_value=_args()), patch(
        "trello_cycle_time.main.load_config", return_value=_config()
    ), patch("trello_cycle_time.main.TrelloClient", return_value=trello_client):
        exit_code = orchestrate_report()

    assert exit_code == 4
    assert "SUMMARY" not in capsys.readouterr().out


def test_orchestrate_report_unexpected_error_returns_generic_exit_code():
    """Verify unexpected exceptions are mapped to the generic non-zero exit code."""
    with patch("trello_cycle_time.main.parse_args", side_effect=RuntimeError("boom")):
        exit_code = orchestrate_report()

    assert exit_code == 1
