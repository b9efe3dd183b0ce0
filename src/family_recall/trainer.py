"""Training session orchestration.

The Trainer is the only owner of mutable state: the roster, the overall
stats, the Leitner cards and the active session. The training core it
calls is pure; the Trainer stores what the core returns and persists the
stats at the end of every session.
"""

import random
from collections.abc import Callable
from pathlib import Path

import structlog

from family_recall.config import Settings, get_settings
from family_recall.models.answer import AnswerSubmission
from family_recall.models.person import Person
from family_recall.models.question import (
    FlashcardQuestion,
    FlashcardRating,
    MatchingRound,
    Question,
    SessionSettings,
    SpeedRoundQuestion,
)
from family_recall.models.stats import AnswerResult, LeitnerCard, OverallStats, SessionStats
from family_recall.storage import store
from family_recall.training.checkers import (
    InvalidAnswerError,
    check_answer,
    speed_round_timeout,
    to_answer_result,
)
from family_recall.training.generators import generate_question
from family_recall.training.leitner import (
    init_cards,
    new_card,
    now_ms,
    rate_card,
    select_next,
    update_card,
)
from family_recall.training.session import (
    empty_session_stats,
    finish_session,
    is_session_complete,
    record_answer,
)
from family_recall.training.timer import SpeedRoundTimer

logger = structlog.get_logger()


class TrainerError(RuntimeError):
    """Operation not valid in the trainer's current state."""


class Trainer:
    """Runs one training session at a time over a persisted roster.

    Args:
        data_dir: Directory holding the roster and stats documents.
        settings: Application settings (defaults to ``get_settings()``).
        rng: Random source shared by selection and question generation.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        data_dir: Path,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._data_dir = data_dir
        self._settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._clock = clock

        self.roster: list[Person] = []
        self.overall: OverallStats = OverallStats()
        self._cards: dict[str, LeitnerCard] = {}

        self._session_settings: SessionSettings | None = None
        self._session: SessionStats | None = None
        self._last_session: SessionStats | None = None
        self._question: Question | None = None
        self._question_started_at: float = 0.0
        self._last_person_id: str | None = None
        self._matched: set[str] = set()
        self._timer: SpeedRoundTimer | None = None

    # ── State ────────────────────────────────────────────────────

    @property
    def cards(self) -> dict[str, LeitnerCard]:
        return dict(self._cards)

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def session_settings(self) -> SessionSettings | None:
        return self._session_settings

    @property
    def session_stats(self) -> SessionStats | None:
        return self._session

    @property
    def last_session(self) -> SessionStats | None:
        """Stats of the most recently finished session."""
        return self._last_session

    @property
    def current_question(self) -> Question | None:
        return self._question

    @property
    def matched_person_ids(self) -> set[str]:
        return set(self._matched)

    # ── Roster & stats ───────────────────────────────────────────

    def load(self) -> None:
        """Load roster and stats from storage."""
        self.roster = store.load_roster(self._data_dir)
        self.overall = store.load_stats(self._data_dir)
        self._cards = init_cards(self.roster, self.overall.leitner_cards)
        logger.info(
            "trainer_loaded",
            people=len(self.roster),
            total_sessions=self.overall.total_sessions,
        )

    def save_roster(self, people: list[Person]) -> None:
        """Replace the roster. Any active session is abandoned."""
        if self.is_active:
            self.cancel_session()
        store.save_roster(self._data_dir, people)
        self.roster = list(people)
        self._cards = init_cards(self.roster, self._cards)

    def clear_stats(self) -> None:
        if self.is_active:
            self.cancel_session()
        store.clear_stats(self._data_dir)
        self.overall = OverallStats()
        self._cards = init_cards(self.roster, {})
        self._last_session = None

    def clear_all(self) -> None:
        if self.is_active:
            self.cancel_session()
        store.clear_all(self._data_dir)
        self.roster = []
        self.overall = OverallStats()
        self._cards = {}
        self._last_session = None

    # ── Session lifecycle ────────────────────────────────────────

    def start_session(self, session_settings: SessionSettings | None = None) -> SessionStats:
        """Start a new session, abandoning any session in progress.

        Raises:
            TrainerError: The roster is empty.
        """
        if not self.roster:
            raise TrainerError("Cannot start a session with an empty roster")
        if self.is_active:
            self.cancel_session()

        session_settings = session_settings or SessionSettings()
        if session_settings.question_count is None:
            session_settings = session_settings.model_copy(
                update={"question_count": self._settings.default_question_count}
            )
        self._session_settings = session_settings
        self._session = empty_session_stats()
        self._cards = init_cards(self.roster, self._cards)
        self._last_person_id = None
        logger.info(
            "session_started",
            mode=self._session_settings.game_mode.value,
            question_count=self._session_settings.question_count,
        )
        return self._session

    def next_question(self) -> Question:
        """Select the next person and generate a question for the session mode."""
        session_settings = self._require_session()
        self._discard_question()

        now = self._clock()
        person = select_next(
            self.roster, self._cards, self._last_person_id, rng=self._rng, now=now
        )
        self._last_person_id = person.id
        question = generate_question(
            person,
            self.roster,
            session_settings.game_mode,
            self._cards,
            rng=self._rng,
            now=now,
            time_limit_ms=self._settings.speed_round_time_limit_ms,
        )
        self._question = question
        self._question_started_at = now

        if isinstance(question, SpeedRoundQuestion):
            self._timer = SpeedRoundTimer(
                question.time_limit_ms, lambda: self._expire(question)
            )
            self._timer.start()
        return question

    def submit(self, submission: AnswerSubmission) -> AnswerResult:
        """Check an answer to the current question and fold it into the session.

        Raises:
            TrainerError: No question is waiting for an answer.
            InvalidAnswerError: The submission does not fit the question.
        """
        session_settings = self._require_session()
        question = self._question
        if question is None:
            raise TrainerError("No question is waiting for an answer")

        mode = session_settings.game_mode
        time_ms: float | None = None

        if isinstance(question, SpeedRoundQuestion):
            person_id = question.inner.person.id
            elapsed = self._clock() - self._question_started_at
            if elapsed >= question.time_limit_ms:
                check = speed_round_timeout(question)
                time_ms = float(question.time_limit_ms)
            else:
                check = check_answer(question, submission, self.roster)
                time_ms = elapsed
        elif isinstance(question, MatchingRound):
            person_id = self._matching_person_id(question, submission)
            check = check_answer(question, submission, self.roster)
        else:
            person_id = question.person.id
            check = check_answer(
                question, submission, self.roster, self._settings.no_siblings_answers
            )

        result = to_answer_result(check, person_id, mode, time_ms)
        rating = submission.rating if isinstance(question, FlashcardQuestion) else None
        self._apply(result, rating)

        if isinstance(question, MatchingRound):
            if result.correct:
                self._matched.add(person_id)
            if len(self._matched) == len(question.pairs):
                self._discard_question()
        else:
            self._discard_question()

        self._finish_if_complete()
        return result

    def end_session(self) -> OverallStats:
        """Finish the session early and persist its stats."""
        self._require_session()
        return self._finish()

    def cancel_session(self) -> None:
        """Abandon the session without recording anything."""
        self._require_session()
        self._discard_question()
        logger.info("session_cancelled", answered=self._session.total if self._session else 0)
        self._session = None
        self._session_settings = None
        self._cards = init_cards(self.roster, self.overall.leitner_cards)

    # ── Internals ────────────────────────────────────────────────

    def _require_session(self) -> SessionSettings:
        if self._session is None or self._session_settings is None:
            raise TrainerError("No active session")
        return self._session_settings

    def _matching_person_id(self, question: MatchingRound, submission: AnswerSubmission) -> str:
        person_id = submission.person_id
        if person_id is None:
            raise InvalidAnswerError("'personId' is required to answer a matching question")
        if person_id not in {pair.person_id for pair in question.pairs}:
            raise InvalidAnswerError(f"Person {person_id} is not part of this matching round")
        if person_id in self._matched:
            raise InvalidAnswerError(f"Person {person_id} is already matched")
        return person_id

    def _apply(self, result: AnswerResult, rating: FlashcardRating | None = None) -> None:
        assert self._session is not None
        self._session = record_answer(self._session, result)

        now = self._clock()
        card = self._cards.get(result.person_id) or new_card(result.person_id)
        if rating is not None:
            card = rate_card(card, rating, now=now)
        else:
            card = update_card(card, result.correct, now=now)
        self._cards = {**self._cards, result.person_id: card}

    def _expire(self, question: SpeedRoundQuestion) -> AnswerResult | None:
        if self._question is not question or self._session_settings is None:
            return None
        result = to_answer_result(
            speed_round_timeout(question),
            question.inner.person.id,
            self._session_settings.game_mode,
            float(question.time_limit_ms),
        )
        self._apply(result)
        self._question = None
        self._timer = None
        self._finish_if_complete()
        return result

    def _discard_question(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._question = None
        self._matched = set()

    def _finish_if_complete(self) -> None:
        if self._session is None or self._session_settings is None:
            return
        if is_session_complete(self._session, self._session_settings.question_count):
            self._finish()

    def _finish(self) -> OverallStats:
        assert self._session is not None
        self._discard_question()
        self.overall = finish_session(self.overall, self._session, self._cards, self.roster)
        store.save_stats(self._data_dir, self.overall)
        logger.info(
            "session_finished",
            questions=self._session.total,
            correct=self._session.correct,
            best_streak=self._session.best_streak,
            accuracy=round(self._session.accuracy, 1),
        )
        self._last_session = self._session
        self._session = None
        self._session_settings = None
        return self.overall
