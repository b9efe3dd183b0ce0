"""Session statistics folding.

A session folds a stream of AnswerResults into SessionStats; at the end
the session is merged into the durable OverallStats. Every function
returns a new value and leaves its inputs untouched.
"""

from collections.abc import Mapping

import structlog

from family_recall.models.person import Person
from family_recall.models.question import QuestionCount
from family_recall.models.stats import (
    AnswerResult,
    LeitnerCard,
    OverallStats,
    PersonStats,
    SessionStats,
)

logger = structlog.get_logger()


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def empty_session_stats() -> SessionStats:
    return SessionStats()


def record_answer(stats: SessionStats, result: AnswerResult) -> SessionStats:
    """Fold one answer into the running session stats."""
    correct = stats.correct + (1 if result.correct else 0)
    wrong = stats.wrong + (0 if result.correct else 1)
    total = stats.total + 1
    streak = stats.streak + 1 if result.correct else 0
    return SessionStats(
        correct=correct,
        wrong=wrong,
        streak=streak,
        best_streak=max(stats.best_streak, streak),
        total=total,
        accuracy=_percent(correct, total),
        results=[*stats.results, result],
    )


def is_session_complete(stats: SessionStats, question_count: QuestionCount) -> bool:
    if question_count == "infinite":
        return False
    return stats.total >= question_count


def finish_session(
    overall: OverallStats,
    session: SessionStats,
    cards: Mapping[str, LeitnerCard],
    roster: list[Person],
) -> OverallStats:
    """Merge a finished session into the overall stats.

    Args:
        overall: Stats before this session.
        session: The session being closed.
        cards: Current Leitner cards, snapshotted into the result.
        roster: Current roster, used to name new PersonStats entries.

    Returns:
        New OverallStats with totals, per-person counters and cards updated.
    """
    names = {person.id: person.name for person in roster}
    person_stats = dict(overall.person_stats)

    for result in session.results:
        existing = person_stats.get(result.person_id) or PersonStats(
            person_id=result.person_id, name=names.get(result.person_id, "")
        )
        times_asked = existing.times_asked + 1
        times_correct = existing.times_correct + (1 if result.correct else 0)
        person_stats[result.person_id] = existing.model_copy(
            update={
                "times_asked": times_asked,
                "times_correct": times_correct,
                "accuracy": _percent(times_correct, times_asked),
            }
        )

    updated = OverallStats(
        total_sessions=overall.total_sessions + 1,
        total_questions=overall.total_questions + session.total,
        total_correct=overall.total_correct + session.correct,
        person_stats=person_stats,
        leitner_cards=dict(cards),
    )
    logger.debug(
        "session_folded",
        questions=session.total,
        correct=session.correct,
        total_sessions=updated.total_sessions,
    )
    return updated


def person_stats_report(overall: OverallStats, roster: list[Person]) -> list[PersonStats]:
    """Per-person stats, weakest first, with names refreshed from the roster."""
    names = {person.id: person.name for person in roster}
    report = [
        stats.model_copy(update={"name": names.get(stats.person_id, stats.name)})
        for stats in overall.person_stats.values()
    ]
    return sorted(report, key=lambda stats: stats.accuracy)
