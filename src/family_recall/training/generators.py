"""Question generators, one per game mode.

Every generator is a pure function of its inputs and the injected random
source. A generator never fails on a non-empty roster: when a mode has no
valid material (e.g. no false distractor exists) it degrades to a simpler
question that is still answerable.
"""

import random
from collections.abc import Mapping
from typing import assert_never

import structlog

from family_recall import messages
from family_recall.models.person import Person
from family_recall.models.question import (
    FamilyRelation,
    FillBlankQuestion,
    FlashcardQuestion,
    FreeRecallQuestion,
    GameMode,
    MatchingPair,
    MatchingRound,
    MultipleChoiceQuestion,
    Question,
    SpeedRoundQuestion,
    TrueFalseQuestion,
)
from family_recall.models.stats import LeitnerCard
from family_recall.training.leitner import select_next

logger = structlog.get_logger()

TRUE_STATEMENT_THRESHOLD = 0.4  # P(true) = 0.6
PARENTS_DIRECTION = 0.4
SIBLINGS_DIRECTION = 0.7
DISTRACTOR_POOL_SIZE = 5
DISTRACTOR_COUNT = 3
MATCHING_PAIRS = 4
FILL_BLANK_PARENTS_THRESHOLD = 0.4
SPEED_ROUND_TRUE_FALSE_THRESHOLD = 0.4
SPEED_ROUND_TIME_LIMIT_MS = 8000

_default_rng = random.Random()


def parents_answer(person: Person) -> str:
    """Canonical display string for a person's parents."""
    return ", ".join(person.parents)


def siblings_answer(person: Person) -> str:
    """Canonical display string for a person's siblings."""
    if not person.siblings:
        return messages.NO_SIBLINGS
    return ", ".join(person.siblings)


def relation_answer(person: Person, relation: FamilyRelation) -> str:
    return parents_answer(person) if relation == "parents" else siblings_answer(person)


def _pick_relation(rng: random.Random) -> FamilyRelation:
    return "parents" if rng.random() >= 0.5 else "siblings"


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def generate_flashcard(person: Person, *, rng: random.Random | None = None) -> FlashcardQuestion:
    rng = rng or _default_rng
    return FlashcardQuestion(person=person, show_side="name" if rng.random() >= 0.5 else "family")


def _true_statement(
    person: Person, relation: FamilyRelation, rng: random.Random
) -> TrueFalseQuestion:
    if relation == "parents" and person.parents:
        parent = rng.choice(person.parents)
        return TrueFalseQuestion(
            person=person,
            statement=messages.PARENT_STATEMENT.format(value=parent, name=person.name),
            claimed_value=parent,
            relation="parents",
            is_true=True,
        )
    if person.siblings:
        sibling = rng.choice(person.siblings)
        return TrueFalseQuestion(
            person=person,
            statement=messages.SIBLING_STATEMENT.format(value=sibling, name=person.name),
            claimed_value=sibling,
            relation="siblings",
            is_true=True,
        )
    return TrueFalseQuestion(
        person=person,
        statement=messages.NO_SIBLINGS_STATEMENT.format(name=person.name),
        claimed_value=messages.NO_SIBLINGS,
        relation="siblings",
        is_true=True,
    )


def generate_true_false(
    person: Person, roster: list[Person], *, rng: random.Random | None = None
) -> TrueFalseQuestion:
    """Generate a "Is X the parent/sibling of Y?" statement.

    True 60% of the time. A false statement borrows a value from another
    person's same relation that does not also belong to ``person``; when no
    such value exists a true statement is returned instead.
    """
    rng = rng or _default_rng
    is_true = rng.random() >= TRUE_STATEMENT_THRESHOLD
    relation = _pick_relation(rng)

    if is_true:
        return _true_statement(person, relation, rng)

    others = [p for p in roster if p.id != person.id]
    if relation == "parents":
        pool = [name for p in others for name in p.parents if name not in person.parents]
        template = messages.PARENT_STATEMENT
    else:
        pool = [name for p in others for name in p.siblings if name not in person.siblings]
        template = messages.SIBLING_STATEMENT

    if not pool:
        logger.debug("true_false_fallback", person_id=person.id, relation=relation)
        return _true_statement(person, relation, rng)

    fake = rng.choice(pool)
    return TrueFalseQuestion(
        person=person,
        statement=template.format(value=fake, name=person.name),
        claimed_value=fake,
        relation=relation,
        is_true=False,
    )


def generate_multiple_choice(
    person: Person, roster: list[Person], *, rng: random.Random | None = None
) -> MultipleChoiceQuestion:
    """Generate a four-option question in one of three directions.

    40% asks for the parents, 30% for the siblings, 30% for the name given
    the whole family. Distractors come from up to five other people and are
    padded with a placeholder when fewer than three distinct ones exist.
    """
    rng = rng or _default_rng
    direction = rng.random()
    others = [p for p in roster if p.id != person.id]
    sampled = rng.sample(others, min(DISTRACTOR_POOL_SIZE, len(others)))

    if direction < PARENTS_DIRECTION:
        relation = "parents"
        correct = parents_answer(person)
        candidates = [parents_answer(p) for p in sampled]
        prompt = messages.WHO_ARE_PARENTS.format(name=person.name)
    elif direction < SIBLINGS_DIRECTION:
        relation = "siblings"
        correct = siblings_answer(person)
        candidates = [siblings_answer(p) for p in sampled]
        prompt = messages.WHO_ARE_SIBLINGS.format(name=person.name)
    else:
        relation = "name"
        correct = person.name
        candidates = [p.name for p in sampled]
        prompt = messages.WHO_IS_THIS.format(
            parents=", ".join(person.parents),
            siblings=", ".join(person.siblings) or messages.NO_SIBLINGS_SHORT,
        )

    distractors = _unique([c for c in candidates if c and c != correct])[:DISTRACTOR_COUNT]
    while len(distractors) < DISTRACTOR_COUNT:
        distractors.append(messages.PLACEHOLDER_OPTION)

    options = [correct, *distractors]
    rng.shuffle(options)
    return MultipleChoiceQuestion(
        person=person,
        prompt=prompt,
        relation=relation,
        options=options,
        correct_index=options.index(correct),
    )


def generate_matching_round(
    roster: list[Person],
    cards: Mapping[str, LeitnerCard],
    *,
    rng: random.Random | None = None,
    now: float | None = None,
) -> MatchingRound:
    """Pick up to four distinct people, preferring low Leitner boxes."""
    rng = rng or _default_rng
    relation = _pick_relation(rng)

    remaining = list(roster)
    selected: list[Person] = []
    for _ in range(min(MATCHING_PAIRS, len(roster))):
        previous_id = selected[-1].id if selected else None
        person = select_next(remaining, cards, previous_id, rng=rng, now=now)
        selected.append(person)
        remaining = [p for p in remaining if p.id != person.id]

    pairs = [
        MatchingPair(person_id=p.id, name=p.name, answer=relation_answer(p, relation))
        for p in selected
    ]
    answers = [pair.answer for pair in pairs]
    rng.shuffle(answers)
    return MatchingRound(pairs=pairs, relation=relation, answers=answers)


def generate_fill_blank(person: Person, *, rng: random.Random | None = None) -> FillBlankQuestion:
    """Hide one parent or sibling and ask for it.

    Falls back to asking for the single parent, then to asking for the
    name given the parents.
    """
    rng = rng or _default_rng
    ask_parents = rng.random() >= FILL_BLANK_PARENTS_THRESHOLD

    if ask_parents and len(person.parents) >= 2:
        hide = rng.randrange(len(person.parents))
        visible = [p for i, p in enumerate(person.parents) if i != hide]
        return FillBlankQuestion(
            person=person,
            prompt=messages.PARENTS_BLANK.format(name=person.name, visible=", ".join(visible)),
            visible_parts=visible,
            missing_part=person.parents[hide],
            relation="parents",
        )
    if len(person.siblings) >= 2:
        hide = rng.randrange(len(person.siblings))
        visible = [s for i, s in enumerate(person.siblings) if i != hide]
        return FillBlankQuestion(
            person=person,
            prompt=messages.SIBLINGS_BLANK.format(name=person.name, visible=", ".join(visible)),
            visible_parts=visible,
            missing_part=person.siblings[hide],
            relation="siblings",
        )
    if len(person.parents) == 1:
        return FillBlankQuestion(
            person=person,
            prompt=messages.WHO_IS_PARENT.format(name=person.name),
            visible_parts=[],
            missing_part=person.parents[0],
            relation="parents",
        )
    return FillBlankQuestion(
        person=person,
        prompt=messages.WHO_IS_CHILD.format(parents=" ו".join(person.parents)),
        visible_parts=list(person.parents),
        missing_part=person.name,
        relation="name",
    )


def generate_free_recall(person: Person) -> FreeRecallQuestion:
    return FreeRecallQuestion(person=person)


def generate_speed_round(
    person: Person,
    roster: list[Person],
    *,
    rng: random.Random | None = None,
    time_limit_ms: int = SPEED_ROUND_TIME_LIMIT_MS,
) -> SpeedRoundQuestion:
    rng = rng or _default_rng
    if rng.random() >= SPEED_ROUND_TRUE_FALSE_THRESHOLD:
        inner = generate_true_false(person, roster, rng=rng)
    else:
        inner = generate_multiple_choice(person, roster, rng=rng)
    return SpeedRoundQuestion(inner=inner, time_limit_ms=time_limit_ms)


def generate_question(
    person: Person,
    roster: list[Person],
    mode: GameMode,
    cards: Mapping[str, LeitnerCard],
    *,
    rng: random.Random | None = None,
    now: float | None = None,
    time_limit_ms: int = SPEED_ROUND_TIME_LIMIT_MS,
) -> Question:
    """Generate a question for ``mode``.

    Matching ignores ``person`` and draws its own set from the roster.
    """
    match mode:
        case GameMode.FLASHCARDS:
            return generate_flashcard(person, rng=rng)
        case GameMode.TRUE_FALSE:
            return generate_true_false(person, roster, rng=rng)
        case GameMode.MULTIPLE_CHOICE:
            return generate_multiple_choice(person, roster, rng=rng)
        case GameMode.MATCHING:
            return generate_matching_round(roster, cards, rng=rng, now=now)
        case GameMode.FILL_BLANK:
            return generate_fill_blank(person, rng=rng)
        case GameMode.FREE_RECALL:
            return generate_free_recall(person)
        case GameMode.SPEED_ROUND:
            return generate_speed_round(person, roster, rng=rng, time_limit_ms=time_limit_ms)
        case _:
            assert_never(mode)
