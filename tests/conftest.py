"""Shared fixtures for the training engine tests."""

import random

import pytest

from family_recall.models.person import Person


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value.

    choice/shuffle/randrange route through ``random()`` in a subclass that
    overrides it, so every draw is deterministic.
    """

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(0)

    def random(self) -> float:
        return self.value


class SequenceRandom(random.Random):
    """Random source cycling through a fixed list of ``random()`` values."""

    def __init__(self, values: list[float]) -> None:
        self.values = list(values)
        self._index = 0
        super().__init__(0)

    def random(self) -> float:
        value = self.values[self._index % len(self.values)]
        self._index += 1
        return value


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def sequence_random():
    return SequenceRandom


@pytest.fixture
def ziv() -> Person:
    return Person(id="ziv", name="זיו", parents=["רותם", "טל"], siblings=["נועה", "עמית"])


@pytest.fixture
def shlomi() -> Person:
    return Person(id="shlomi", name="שלומי", parents=["רוני", "רן"], siblings=["בן"])


@pytest.fixture
def only_child() -> Person:
    return Person(id="dana", name="דנה", parents=["מיכל"], siblings=[])


@pytest.fixture
def roster(ziv, shlomi, only_child) -> list[Person]:
    return [
        ziv,
        shlomi,
        only_child,
        Person(id="adam", name="אדם", parents=["הורה1", "הורה2"], siblings=["אח1"]),
        Person(id="hava", name="חוה", parents=["הורה3", "הורה4"], siblings=["אח2", "אח3"]),
        Person(id="yael", name="יעל", parents=["שרה", "דוד"], siblings=["גיל", "רון", "אור"]),
    ]
