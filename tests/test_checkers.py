"""Tests for answer checkers."""

import pytest

from family_recall import messages
from family_recall.models.answer import AnswerSubmission
from family_recall.models.question import (
    FillBlankQuestion,
    FlashcardQuestion,
    FreeRecallQuestion,
    GameMode,
    MatchingPair,
    MatchingRound,
    MultipleChoiceQuestion,
    SpeedRoundQuestion,
    TrueFalseQuestion,
)
from family_recall.training.checkers import (
    InvalidAnswerError,
    check_answer,
    check_fill_blank,
    check_flashcard,
    check_free_recall,
    check_matching_pair,
    check_multiple_choice,
    check_true_false,
    speed_round_timeout,
    to_answer_result,
)


@pytest.fixture
def true_false(ziv) -> TrueFalseQuestion:
    return TrueFalseQuestion(
        person=ziv, statement="רותם הוא/היא הורה של זיו", claimed_value="רותם",
        relation="parents", is_true=True,
    )


@pytest.fixture
def multiple_choice(ziv) -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        person=ziv, prompt="מי ההורים של זיו?", relation="parents",
        options=["רוני, רן", "רותם, טל", "מיכל", "—"], correct_index=1,
    )


@pytest.fixture
def fill_blank(ziv) -> FillBlankQuestion:
    return FillBlankQuestion(
        person=ziv, prompt="הורים של זיו: רותם ו___", visible_parts=["רותם"],
        missing_part="טל", relation="parents",
    )


class TestSimpleCheckers:
    def test_true_false(self, true_false):
        assert check_true_false(true_false, True).correct
        result = check_true_false(true_false, False)
        assert not result.correct
        assert result.user_answer == messages.FALSE_LABEL
        assert result.correct_answer == messages.TRUE_LABEL

    def test_multiple_choice(self, multiple_choice):
        assert check_multiple_choice(multiple_choice, 1).correct
        result = check_multiple_choice(multiple_choice, 0)
        assert not result.correct
        assert result.user_answer == "רוני, רן"
        assert result.correct_answer == "רותם, טל"

    def test_multiple_choice_out_of_range(self, multiple_choice):
        result = check_multiple_choice(multiple_choice, 9)
        assert not result.correct
        assert result.user_answer == ""

    def test_fill_blank_normalizes_whitespace(self, fill_blank):
        assert check_fill_blank(fill_blank, "  טל ").correct
        assert not check_fill_blank(fill_blank, "רותם").correct

    def test_flashcard_rating(self, ziv):
        q = FlashcardQuestion(person=ziv, show_side="name")
        assert check_flashcard(q, "easy").correct
        assert check_flashcard(q, "good").correct
        assert not check_flashcard(q, "hard").correct


class TestFreeRecall:
    def test_all_correct_any_order(self, ziv):
        result = check_free_recall(ziv, "טל  רותם", "עמית נועה")
        assert result.parents_correct
        assert result.siblings_correct
        assert result.correct

    def test_missing_sibling(self, ziv):
        result = check_free_recall(ziv, "רותם טל", "נועה")
        assert result.parents_correct
        assert not result.siblings_correct
        assert not result.correct
        assert result.correct_siblings == "נועה עמית"

    def test_wrong_parents(self, ziv):
        result = check_free_recall(ziv, "רותם", "נועה עמית")
        assert not result.parents_correct
        assert result.correct_parents == "רותם טל"

    @pytest.mark.parametrize("answer", ["", "   ", "אין", "אין אחים", " אין אחים "])
    def test_no_siblings_literals(self, only_child, answer):
        result = check_free_recall(only_child, "מיכל", answer)
        assert result.siblings_correct
        assert result.correct

    def test_no_siblings_rejects_names(self, only_child):
        result = check_free_recall(only_child, "מיכל", "רון")
        assert not result.siblings_correct
        assert result.correct_siblings == messages.NO_SIBLINGS

    def test_custom_no_siblings_answers(self, only_child):
        result = check_free_recall(only_child, "מיכל", "none", no_siblings_answers=("", "none"))
        assert result.siblings_correct
        assert not check_free_recall(
            only_child, "מיכל", "אין", no_siblings_answers=("", "none")
        ).siblings_correct

    def test_byte_order_mark_in_answers(self, only_child):
        result = check_free_recall(only_child, "\ufeffמיכל", "\ufeffאין")
        assert result.parents_correct
        assert result.siblings_correct

    def test_example_parents_per_match(self, only_child):
        result = check_free_recall(only_child, "א ב", "")
        assert not result.parents_correct
        assert result.siblings_correct
        assert not result.correct


class TestMatchingPair:
    def test_correct_parents(self, roster):
        assert check_matching_pair("ziv", "רותם, טל", roster, "parents").correct

    def test_no_siblings_answer(self, roster):
        result = check_matching_pair("dana", messages.NO_SIBLINGS, roster, "siblings")
        assert result.correct

    def test_wrong_answer(self, roster):
        result = check_matching_pair("ziv", "רוני, רן", roster, "parents")
        assert not result.correct
        assert result.correct_answer == "רותם, טל"

    def test_unknown_person(self, roster):
        result = check_matching_pair("nobody", "רותם, טל", roster, "parents")
        assert not result.correct
        assert result.correct_answer == ""


class TestSpeedRound:
    def test_timeout_true_false(self, true_false):
        q = SpeedRoundQuestion(inner=true_false, time_limit_ms=8000)
        result = speed_round_timeout(q)
        assert not result.correct
        assert result.user_answer == messages.TIME_UP
        assert result.correct_answer == messages.TRUE_LABEL

    def test_timeout_multiple_choice(self, multiple_choice):
        q = SpeedRoundQuestion(inner=multiple_choice, time_limit_ms=8000)
        assert speed_round_timeout(q).correct_answer == "רותם, טל"


class TestCheckAnswer:
    def test_dispatch_true_false(self, true_false, roster):
        assert check_answer(true_false, AnswerSubmission(answer=True), roster).correct

    def test_dispatch_speed_round(self, multiple_choice, roster):
        q = SpeedRoundQuestion(inner=multiple_choice, time_limit_ms=8000)
        assert check_answer(q, AnswerSubmission(selected_index=1), roster).correct

    def test_dispatch_matching(self, roster):
        q = MatchingRound(
            pairs=[MatchingPair(person_id="ziv", name="זיו", answer="רותם, טל")],
            relation="parents",
            answers=["רותם, טל"],
        )
        submission = AnswerSubmission(person_id="ziv", text="רותם, טל")
        assert check_answer(q, submission, roster).correct

    def test_dispatch_free_recall_defaults_to_empty(self, only_child, roster):
        q = FreeRecallQuestion(person=only_child)
        result = check_answer(q, AnswerSubmission(parents="מיכל"), roster)
        assert result.correct

    def test_missing_field_raises(self, fill_blank, roster):
        with pytest.raises(InvalidAnswerError, match="text"):
            check_answer(fill_blank, AnswerSubmission(answer=True), roster)

    def test_speed_round_missing_field_raises(self, true_false, roster):
        q = SpeedRoundQuestion(inner=true_false, time_limit_ms=8000)
        with pytest.raises(InvalidAnswerError):
            check_answer(q, AnswerSubmission(selected_index=0), roster)

    def test_submission_accepts_camel_case(self):
        submission = AnswerSubmission.model_validate({"selectedIndex": 2, "personId": "x"})
        assert submission.selected_index == 2
        assert submission.person_id == "x"


class TestToAnswerResult:
    def test_builds_result(self, true_false):
        check = check_true_false(true_false, True)
        result = to_answer_result(check, "ziv", GameMode.SPEED_ROUND, 1234.0)
        assert result.person_id == "ziv"
        assert result.correct
        assert result.mode == GameMode.SPEED_ROUND
        assert result.time_ms == 1234.0
        assert result.model_dump(by_alias=True)["timeMs"] == 1234.0
