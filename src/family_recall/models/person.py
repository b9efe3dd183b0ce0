"""Roster data models and parse results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys (the persisted JSON shape)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Person(CamelModel):
    """A single roster entry: a name plus its parents and siblings."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    parents: list[str] = Field(default_factory=list)
    siblings: list[str] = Field(default_factory=list)


class ParseError(CamelModel):
    """Why a block of text could not be turned into a roster."""

    kind: Literal["empty", "incomplete"]
    message: str
    remainder_lines: list[str] = Field(default_factory=list)


class ParseSuccess(CamelModel):
    success: Literal[True] = True
    people: list[Person]


class ParseFailure(CamelModel):
    success: Literal[False] = False
    error: ParseError


ParseResult = ParseSuccess | ParseFailure
