"""Leitner box spaced repetition.

Three boxes: 0 = new or failed, 1 = seen once, 2 = known well. Lower boxes
are drawn more often, and people not seen for a while get a recency bonus.
All functions are pure; callers store the returned cards.
"""

import random
import time
from collections.abc import Mapping

from family_recall.models.person import Person
from family_recall.models.question import FlashcardRating
from family_recall.models.stats import LeitnerCard

LEITNER_BOXES = 3
BOX_WEIGHTS = (5, 2, 1)
MAX_RECENCY_BONUS = 10.0
MS_PER_MINUTE = 60_000

_default_rng = random.Random()


def now_ms() -> float:
    return time.time() * 1000


def new_card(person_id: str) -> LeitnerCard:
    return LeitnerCard(person_id=person_id, box=0, last_seen=0, correct_streak=0)


def init_cards(
    people: list[Person], existing: Mapping[str, LeitnerCard]
) -> dict[str, LeitnerCard]:
    """Return existing cards plus a box-0 card for every person without one.

    Cards of people missing from ``people`` are kept.
    """
    cards = dict(existing)
    for person in people:
        if person.id not in cards:
            cards[person.id] = new_card(person.id)
    return cards


def card_weight(card: LeitnerCard | None, now: float) -> float:
    """Selection weight: box weight plus minutes since last seen, capped at 10."""
    if card is None:
        return BOX_WEIGHTS[0] + MAX_RECENCY_BONUS
    box = min(card.box, LEITNER_BOXES - 1)
    if not card.last_seen:
        recency_bonus = MAX_RECENCY_BONUS
    else:
        elapsed = max(now - card.last_seen, 0.0)
        recency_bonus = min(elapsed / MS_PER_MINUTE, MAX_RECENCY_BONUS)
    return BOX_WEIGHTS[box] + recency_bonus


def select_next(
    people: list[Person],
    cards: Mapping[str, LeitnerCard],
    exclude_id: str | None = None,
    *,
    rng: random.Random | None = None,
    now: float | None = None,
) -> Person:
    """Pick the next person by weighted random selection.

    Args:
        people: Non-empty roster.
        cards: Leitner cards by person id.
        exclude_id: Previous pick, skipped unless it is the only person.
        rng: Random source, injectable for deterministic tests.
        now: Current time in epoch milliseconds.

    Returns:
        The selected person.
    """
    rng = rng or _default_rng
    now = now_ms() if now is None else now

    candidates = [p for p in people if p.id != exclude_id]
    if not candidates:
        return people[0]

    weighted = [(person, card_weight(cards.get(person.id), now)) for person in candidates]
    total_weight = sum(weight for _, weight in weighted)

    remaining = rng.random() * total_weight
    for person, weight in weighted:
        remaining -= weight
        if remaining <= 0:
            return person
    return candidates[0]


def update_card(card: LeitnerCard, correct: bool, *, now: float | None = None) -> LeitnerCard:
    """Promote one box on a correct answer, reset to box 0 on a miss."""
    now = now_ms() if now is None else now
    if correct:
        return card.model_copy(
            update={
                "box": min(card.box + 1, LEITNER_BOXES - 1),
                "last_seen": now,
                "correct_streak": card.correct_streak + 1,
            }
        )
    return card.model_copy(update={"box": 0, "last_seen": now, "correct_streak": 0})


def rate_card(
    card: LeitnerCard, rating: FlashcardRating, *, now: float | None = None
) -> LeitnerCard:
    """Apply a flashcard self-rating.

    ``easy`` skips a box, ``good`` promotes one, ``hard`` counts as a miss.
    """
    if rating == "easy":
        boosted = card.model_copy(update={"box": min(card.box + 1, LEITNER_BOXES - 1)})
        return update_card(boosted, True, now=now)
    return update_card(card, rating == "good", now=now)
