"""Trello REST API client for card and action history retrieval."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import Config
from .errors import ApiError, AuthenticationError, LabelNotFoundError
from .models import COPY_CARD, CREATE_CARD, UPDATE_CARD, Action, Card, Label

logger = logging.getLogger(__name__)


class TrelloClient:
    """Small, typed client for the Trello board, card and action APIs."""

    _BASE_URL = "https://api.trello.com/1"
    _ACTION_FILTER = ",".join((CREATE_CARD, COPY_CARD, UPDATE_CARD))
    _ACTION_PAGE_SIZE = 1000
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated Trello API client.

        Args:
            config: Validated runtime configuration including key/token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _build_url(self, path: str) -> str:
        return f"{self._BASE_URL}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse Trello ISO8601 timestamps into timezone-aware UTC datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                pass

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Execute a GET request with retry logic for 429/5xx responses.

        Trello list endpoints return a JSON array, which is the only payload
        shape accepted here.

        Raises:
            AuthenticationError: If Trello rejects the key/token pair.
            ApiError: If the request repeatedly fails, returns HTTP >= 400,
                or does not return a JSON array.
        """
        url = self._build_url(path)
        query = dict(params or {})
        query["key"] = self._config.key
        query["token"] = self._config.token

        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=query, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"Trello request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = status_code == 429 or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                logger.info(
                    "Retrying Trello request",
                    extra={"url": url, "status_code": status_code, "attempt": attempt},
                )
                time.sleep(self._extract_backoff_seconds(response, attempt))
                continue

            if status_code == 401:
                raise AuthenticationError(
                    f"Trello rejected the configured key/token: GET {url} returned 401 - {response.text}"
                )

            if status_code >= 400:
                raise ApiError(
                    "Trello API request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise ApiError(f"Trello API returned invalid JSON: GET {url}") from exc

            if not isinstance(payload, list):
                raise ApiError(f"Trello API returned unexpected payload shape: GET {url}")

            return payload

        raise ApiError(f"Trello request failed after retries: GET {url}") from last_error

    def _parse_label(self, item: Dict[str, Any]) -> Optional[Label]:
        label_id = item.get("id")
        if not label_id:
            return None
        return Label(id=str(label_id), name=str(item.get("name") or ""))

    def list_labels(self, board_id: str) -> List[Label]:
        """List labels defined on a board."""
        payload = self._get_json(f"boards/{board_id}/labels")
        labels: List[Label] = []

        for item in payload:
            label = self._parse_label(item)
            if label is not None:
                labels.append(label)

        return labels

    def resolve_label_id(self, board_id: str, label_name: str) -> str:
        """Resolve a label name to its identifier using exact matching.

        Raises:
            LabelNotFoundError: If no label with the given name exists on the board.
        """
        for label in self.list_labels(board_id):
            if label.name == label_name:
                return label.id

        raise LabelNotFoundError(f"Label '{label_name}' was not found on board '{board_id}'.")

    def list_cards(self, board_id: str) -> List[Card]:
        """List all cards on a board, open and closed."""
        payload = self._get_json(f"boards/{board_id}/cards/all")
        cards: List[Card] = []

        for item in payload:
            card_id = item.get("id")
            if not card_id:
                raise ApiError(f"Trello card payload is missing required fields: board_id={board_id}, payload={item}")

            labels = [label for label in map(self._parse_label, item.get("labels") or []) if label is not None]
            cards.append(Card(id=str(card_id), name=str(item.get("name") or ""), labels=labels))

        return cards

    def list_card_actions(self, card_id: str) -> List[Action]:
        """List the creation, copy and update actions recorded for a card.

        Trello returns actions newest first in pages of at most
        ``_ACTION_PAGE_SIZE``. Older pages are requested with ``before`` set to
        the oldest action id seen so far until a partial page is returned.
        """
        items: List[Dict[str, Any]] = []
        before: Optional[str] = None

        while True:
            params: Dict[str, Any] = {
                "filter": self._ACTION_FILTER,
                "limit": self._ACTION_PAGE_SIZE,
            }
            if before is not None:
                params["before"] = before

            page_items = self._get_json(f"cards/{card_id}/actions", params=params)
            items.extend(page_items)

            if len(page_items) < self._ACTION_PAGE_SIZE:
                break

            before = page_items[-1].get("id")
            if not before:
                raise ApiError(
                    "Trello action page is missing the id needed to fetch older actions: "
                    f"card_id={card_id}"
                )

        actions: List[Action] = []
        for item in items:
            action_type = item.get("type")
            action_date = self._parse_datetime(item.get("date"))
            if not action_type or action_date is None:
                raise ApiError(
                    "Trello action payload is missing required fields: "
                    f"card_id={card_id}, payload={item}"
                )

            data = item.get("data") or {}
            actions.append(
                Action(
                    id=str(item.get("id") or ""),
                    type=str(action_type),
                    date=action_date,
                    list_id=(data.get("list") or {}).get("id"),
                    list_before_id=(data.get("listBefore") or {}).get("id"),
                    list_after_id=(data.get("listAfter") or {}).get("id"),
                )
            )

        return actions

    def fetch_card_actions(self, cards: Sequence[Card], max_workers: int) -> List[Card]:
        """Attach action histories to cards, fetching at most ``max_workers`` at once.

        Waits for every request to finish; the first failure is re-raised and
        no partial result is returned. Output order matches ``cards``.
        """
        logger.info(
            "Fetching card actions",
            extra={"cards_total": len(cards), "max_workers": max_workers},
        )
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            histories = list(executor.map(lambda card: self.list_card_actions(card.id), cards))

        return [replace(card, actions=actions) for card, actions in zip(cards, histories)]
