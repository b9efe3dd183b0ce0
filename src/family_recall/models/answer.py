"""User responses and checker verdicts."""

from pydantic import ConfigDict

from family_recall.models.person import CamelModel
from family_recall.models.question import FlashcardRating


class AnswerSubmission(CamelModel):
    """A response from the presentation layer.

    Only the fields relevant to the current question type are read:
    ``answer`` for true/false, ``selected_index`` for multiple choice,
    ``text`` for fill-in-the-blank, ``parents``/``siblings`` for free
    recall, ``person_id`` + ``text`` for one matching pair and ``rating``
    for flashcards.
    """

    answer: bool | None = None
    selected_index: int | None = None
    text: str | None = None
    parents: str | None = None
    siblings: str | None = None
    person_id: str | None = None
    rating: FlashcardRating | None = None


class CheckResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    correct: bool
    user_answer: str
    correct_answer: str


class FreeRecallResult(CheckResult):
    parents_correct: bool
    siblings_correct: bool
    correct_parents: str
    correct_siblings: str
