"""Roster text parser.

Expected format: blocks of three non-empty lines per person, separated by
any number of blank lines.

    line 1: name
    line 2: parents (space-separated)
    line 3: siblings (space-separated)
"""

import uuid

import structlog

from family_recall import messages
from family_recall.models.person import (
    ParseError,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    Person,
)
from family_recall.training.compare import split_tokens, trim

logger = structlog.get_logger()

LINES_PER_PERSON = 3


def generate_id() -> str:
    return uuid.uuid4().hex[:9]


def parse_people_text(text: str) -> ParseResult:
    """Parse raw text into a roster.

    Args:
        text: Pasted roster text.

    Returns:
        ParseSuccess with one Person per block, in input order, or
        ParseFailure describing an empty input or a trailing incomplete
        block. Never raises.
    """
    lines = [trim(line) for line in text.splitlines()]
    non_empty = [line for line in lines if line]

    if not non_empty:
        return ParseFailure(error=ParseError(kind="empty", message=messages.EMPTY_INPUT))

    count = len(non_empty)
    remainder = count % LINES_PER_PERSON
    if remainder:
        if remainder == 1:
            message = messages.ONE_INCOMPLETE_LINE.format(count=count)
        else:
            message = messages.SOME_INCOMPLETE_LINES.format(remainder=remainder, count=count)
        logger.debug("roster_parse_incomplete", line_count=count, remainder=remainder)
        return ParseFailure(
            error=ParseError(
                kind="incomplete",
                message=message,
                remainder_lines=non_empty[count - remainder:],
            )
        )

    people: list[Person] = []
    seen_ids: set[str] = set()
    for i in range(0, count, LINES_PER_PERSON):
        person_id = generate_id()
        while person_id in seen_ids:
            person_id = generate_id()
        seen_ids.add(person_id)
        people.append(
            Person(
                id=person_id,
                name=non_empty[i],
                parents=split_tokens(non_empty[i + 1]),
                siblings=split_tokens(non_empty[i + 2]),
            )
        )

    logger.debug("roster_parsed", people=len(people))
    return ParseSuccess(people=people)


def format_people_text(people: list[Person]) -> str:
    """Render a roster back into the block format accepted by the parser."""
    blocks = [
        "\n".join([person.name, " ".join(person.parents), " ".join(person.siblings)])
        for person in people
    ]
    return "\n\n".join(blocks)
