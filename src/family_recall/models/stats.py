"""Answer, session and cross-session statistics models."""

from pydantic import ConfigDict, Field

from family_recall.models.person import CamelModel
from family_recall.models.question import GameMode


class LeitnerCard(CamelModel):
    """Spaced-repetition state for one person.

    Attributes:
        person_id: Roster id the card belongs to.
        box: 0 = new or just missed, 1 = seen once, 2 = known well.
        last_seen: Epoch milliseconds of the last answer, 0 if never seen.
        correct_streak: Consecutive correct answers since the last miss.
    """

    model_config = ConfigDict(frozen=True)

    person_id: str
    box: int = Field(default=0, ge=0, le=2)
    last_seen: float = 0
    correct_streak: int = Field(default=0, ge=0)


class AnswerResult(CamelModel):
    """Outcome of a single answered question."""

    model_config = ConfigDict(frozen=True)

    person_id: str
    correct: bool
    user_answer: str
    correct_answer: str
    mode: GameMode
    time_ms: float | None = None  # speed round only


class SessionStats(CamelModel):
    correct: int = 0
    wrong: int = 0
    streak: int = 0
    best_streak: int = 0
    total: int = 0
    accuracy: float = 0.0
    results: list[AnswerResult] = Field(default_factory=list)


class PersonStats(CamelModel):
    person_id: str
    name: str = ""
    times_asked: int = 0
    times_correct: int = 0
    accuracy: float = 0.0


class OverallStats(CamelModel):
    """Durable statistics accumulated across every finished session."""

    total_sessions: int = 0
    total_questions: int = 0
    total_correct: int = 0
    person_stats: dict[str, PersonStats] = Field(default_factory=dict)
    leitner_cards: dict[str, LeitnerCard] = Field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        """Overall accuracy in percent, 0 when nothing was asked yet."""
        if self.total_questions == 0:
            return 0.0
        return self.total_correct / self.total_questions * 100
