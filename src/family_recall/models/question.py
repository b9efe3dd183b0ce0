"""Game modes and the question variants generated for them."""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import ConfigDict, Field

from family_recall.models.person import CamelModel, Person

RelationType = Literal["parents", "siblings", "name"]
FamilyRelation = Literal["parents", "siblings"]
QuestionCount = Literal[10, 20, 50, "infinite"]
FlashcardRating = Literal["easy", "good", "hard"]


class GameMode(StrEnum):
    """Quiz modes, in display order."""

    FLASHCARDS = "flashcards"
    TRUE_FALSE = "trueFalse"
    MULTIPLE_CHOICE = "multipleChoice"
    MATCHING = "matching"
    FILL_BLANK = "fillBlank"
    FREE_RECALL = "freeRecall"
    SPEED_ROUND = "speedRound"


class GameModeInfo(CamelModel):
    id: GameMode
    label: str
    description: str
    difficulty: int = Field(ge=1, le=5)
    icon: str


GAME_MODES: list[GameModeInfo] = [
    GameModeInfo(
        id=GameMode.FLASHCARDS, label="כרטיסיות",
        description="צפייה חופשית - הפוך לגלות, דרג קושי", difficulty=1, icon="📇",
    ),
    GameModeInfo(
        id=GameMode.TRUE_FALSE, label="נכון / לא נכון",
        description="טענות מהירות - האם X הורה של Y?", difficulty=2, icon="⚡",
    ),
    GameModeInfo(
        id=GameMode.MULTIPLE_CHOICE, label="ברירה מרובה",
        description="בחר תשובה נכונה מתוך 4 אפשרויות", difficulty=2, icon="🔘",
    ),
    GameModeInfo(
        id=GameMode.MATCHING, label="התאמה",
        description="חבר שמות להורים או אחים במשחק התאמה", difficulty=3, icon="🔗",
    ),
    GameModeInfo(
        id=GameMode.FILL_BLANK, label="השלם את החסר",
        description="מידע חלקי מוצג - הקלד את החסר", difficulty=4, icon="✏️",
    ),
    GameModeInfo(
        id=GameMode.FREE_RECALL, label="זיכרון חופשי",
        description="הקלד את כל ההורים והאחים בעצמך", difficulty=5, icon="🧠",
    ),
    GameModeInfo(
        id=GameMode.SPEED_ROUND, label="מבחן מהיר",
        description="שאלות עם טיימר - כמה תספיק?", difficulty=3, icon="⏱️",
    ),
]


class SessionSettings(CamelModel):
    game_mode: GameMode = GameMode.FLASHCARDS
    question_count: QuestionCount | None = None  # None -> configured default
    show_instant_feedback: bool = True


class _Question(CamelModel):
    model_config = ConfigDict(frozen=True)


class FlashcardQuestion(_Question):
    type: Literal["flashcard"] = "flashcard"
    person: Person
    show_side: Literal["name", "family"]


class TrueFalseQuestion(_Question):
    type: Literal["trueFalse"] = "trueFalse"
    person: Person
    statement: str
    claimed_value: str
    relation: RelationType
    is_true: bool


class MultipleChoiceQuestion(_Question):
    type: Literal["multipleChoice"] = "multipleChoice"
    person: Person
    prompt: str
    relation: RelationType
    options: list[str]
    correct_index: int


class MatchingPair(_Question):
    person_id: str
    name: str
    answer: str


class MatchingRound(_Question):
    type: Literal["matching"] = "matching"
    pairs: list[MatchingPair]
    relation: FamilyRelation
    # Answer column in display order, independent of the pair order.
    answers: list[str] = Field(default_factory=list)


class FillBlankQuestion(_Question):
    type: Literal["fillBlank"] = "fillBlank"
    person: Person
    prompt: str
    visible_parts: list[str]
    missing_part: str
    relation: RelationType


class FreeRecallQuestion(_Question):
    type: Literal["freeRecall"] = "freeRecall"
    person: Person


class SpeedRoundQuestion(_Question):
    type: Literal["speedRound"] = "speedRound"
    inner: Annotated[TrueFalseQuestion | MultipleChoiceQuestion, Field(discriminator="type")]
    time_limit_ms: int


Question = Annotated[
    FlashcardQuestion
    | TrueFalseQuestion
    | MultipleChoiceQuestion
    | MatchingRound
    | FillBlankQuestion
    | FreeRecallQuestion
    | SpeedRoundQuestion,
    Field(discriminator="type"),
]
