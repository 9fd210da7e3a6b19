"""Card selection by board label."""

from __future__ import annotations

from typing import List, Sequence

from .models import Card


def filter_cards_by_label(cards: Sequence[Card], label_id: str) -> List[Card]:
    """Return the cards tagged with ``label_id``, preserving input order."""
    return [card for card in cards if label_id in card.label_ids]
