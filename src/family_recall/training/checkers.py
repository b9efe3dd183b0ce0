"""Answer checking for every question type."""

from collections.abc import Sequence
from typing import TypeVar, assert_never

from family_recall import messages
from family_recall.models.answer import AnswerSubmission, CheckResult, FreeRecallResult
from family_recall.models.person import Person
from family_recall.models.question import (
    FamilyRelation,
    FillBlankQuestion,
    FlashcardQuestion,
    FlashcardRating,
    FreeRecallQuestion,
    GameMode,
    MatchingRound,
    MultipleChoiceQuestion,
    Question,
    SpeedRoundQuestion,
    TrueFalseQuestion,
)
from family_recall.models.stats import AnswerResult
from family_recall.training.compare import (
    compare_arrays_unordered,
    compare_names,
    split_tokens,
    trim,
)
from family_recall.training.generators import relation_answer

T = TypeVar("T")

NO_SIBLINGS_ANSWERS: tuple[str, ...] = ("", messages.NO_SIBLINGS_SHORT, messages.NO_SIBLINGS)


class InvalidAnswerError(ValueError):
    """Submission does not carry the fields the question type needs."""


def _bool_label(value: bool) -> str:
    return messages.TRUE_LABEL if value else messages.FALSE_LABEL


def check_true_false(question: TrueFalseQuestion, answer: bool) -> CheckResult:
    return CheckResult(
        correct=answer == question.is_true,
        user_answer=_bool_label(answer),
        correct_answer=_bool_label(question.is_true),
    )


def check_multiple_choice(question: MultipleChoiceQuestion, selected_index: int) -> CheckResult:
    if 0 <= selected_index < len(question.options):
        user_answer = question.options[selected_index]
    else:
        user_answer = ""
    return CheckResult(
        correct=selected_index == question.correct_index,
        user_answer=user_answer,
        correct_answer=question.options[question.correct_index],
    )


def check_fill_blank(question: FillBlankQuestion, text: str) -> CheckResult:
    return CheckResult(
        correct=compare_names(text, question.missing_part),
        user_answer=trim(text),
        correct_answer=question.missing_part,
    )


def check_free_recall(
    person: Person,
    parents_text: str,
    siblings_text: str,
    no_siblings_answers: Sequence[str] = NO_SIBLINGS_ANSWERS,
) -> FreeRecallResult:
    """Check a full recall of parents and siblings.

    Both lists are compared as multisets of whitespace-separated names.
    For a person without siblings any of ``no_siblings_answers`` is
    accepted.

    Args:
        person: The person being recalled.
        parents_text: User's parents answer.
        siblings_text: User's siblings answer.
        no_siblings_answers: Accepted answers when there are no siblings.

    Returns:
        FreeRecallResult with per-field verdicts and display strings.
    """
    parents_correct = compare_arrays_unordered(split_tokens(parents_text), person.parents)

    if not person.siblings:
        siblings_correct = trim(siblings_text) in no_siblings_answers
    else:
        siblings_correct = compare_arrays_unordered(split_tokens(siblings_text), person.siblings)

    correct_parents = " ".join(person.parents)
    correct_siblings = " ".join(person.siblings) if person.siblings else messages.NO_SIBLINGS
    return FreeRecallResult(
        correct=parents_correct and siblings_correct,
        user_answer=messages.FREE_RECALL_ANSWER.format(
            parents=trim(parents_text), siblings=trim(siblings_text)
        ),
        correct_answer=messages.FREE_RECALL_ANSWER.format(
            parents=correct_parents, siblings=correct_siblings
        ),
        parents_correct=parents_correct,
        siblings_correct=siblings_correct,
        correct_parents=correct_parents,
        correct_siblings=correct_siblings,
    )


def check_matching_pair(
    person_id: str,
    selected_answer: str,
    roster: list[Person],
    relation: FamilyRelation,
) -> CheckResult:
    """Check one name-to-answer match. Unknown ids never match."""
    person = next((p for p in roster if p.id == person_id), None)
    if person is None:
        return CheckResult(correct=False, user_answer=selected_answer, correct_answer="")
    correct_answer = relation_answer(person, relation)
    return CheckResult(
        correct=selected_answer == correct_answer,
        user_answer=selected_answer,
        correct_answer=correct_answer,
    )


def check_flashcard(question: FlashcardQuestion, rating: FlashcardRating) -> CheckResult:
    return CheckResult(correct=rating != "hard", user_answer=rating, correct_answer="")


def speed_round_timeout(question: SpeedRoundQuestion) -> CheckResult:
    """Verdict for a speed-round question whose time budget ran out."""
    inner = question.inner
    if isinstance(inner, TrueFalseQuestion):
        correct_answer = _bool_label(inner.is_true)
    else:
        correct_answer = inner.options[inner.correct_index]
    return CheckResult(correct=False, user_answer=messages.TIME_UP, correct_answer=correct_answer)


def _require(value: T | None, field: str, question_type: str) -> T:
    if value is None:
        raise InvalidAnswerError(f"'{field}' is required to answer a {question_type} question")
    return value


def check_speed_round(question: SpeedRoundQuestion, submission: AnswerSubmission) -> CheckResult:
    inner = question.inner
    if isinstance(inner, TrueFalseQuestion):
        return check_true_false(inner, _require(submission.answer, "answer", question.type))
    index = _require(submission.selected_index, "selectedIndex", question.type)
    return check_multiple_choice(inner, index)


def check_answer(
    question: Question,
    submission: AnswerSubmission,
    roster: list[Person],
    no_siblings_answers: Sequence[str] = NO_SIBLINGS_ANSWERS,
) -> CheckResult:
    """Dispatch a submission to the checker for the question's type.

    Raises:
        InvalidAnswerError: The submission lacks a field the type needs.
    """
    match question:
        case FlashcardQuestion():
            return check_flashcard(question, _require(submission.rating, "rating", question.type))
        case TrueFalseQuestion():
            return check_true_false(question, _require(submission.answer, "answer", question.type))
        case MultipleChoiceQuestion():
            index = _require(submission.selected_index, "selectedIndex", question.type)
            return check_multiple_choice(question, index)
        case MatchingRound():
            person_id = _require(submission.person_id, "personId", question.type)
            text = _require(submission.text, "text", question.type)
            return check_matching_pair(person_id, text, roster, question.relation)
        case FillBlankQuestion():
            return check_fill_blank(question, _require(submission.text, "text", question.type))
        case FreeRecallQuestion():
            return check_free_recall(
                question.person,
                submission.parents or "",
                submission.siblings or "",
                no_siblings_answers,
            )
        case SpeedRoundQuestion():
            return check_speed_round(question, submission)
        case _:
            assert_never(question)


def to_answer_result(
    check: CheckResult,
    person_id: str,
    mode: GameMode,
    time_ms: float | None = None,
) -> AnswerResult:
    return AnswerResult(
        person_id=person_id,
        correct=check.correct,
        user_answer=check.user_answer,
        correct_answer=check.correct_answer,
        mode=mode,
        time_ms=time_ms,
    )
