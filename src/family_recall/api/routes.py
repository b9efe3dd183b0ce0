"""REST API routes for the roster, statistics and training sessions."""

import functools

import structlog
from fastapi import APIRouter, HTTPException

from family_recall.config import get_settings
from family_recall.models.answer import AnswerSubmission
from family_recall.models.person import CamelModel, ParseFailure
from family_recall.models.question import GAME_MODES, SessionSettings
from family_recall.trainer import Trainer, TrainerError
from family_recall.training.checkers import InvalidAnswerError
from family_recall.training.parser import format_people_text, parse_people_text
from family_recall.training.session import person_stats_report

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class RosterText(CamelModel):
    text: str


@functools.lru_cache
def get_trainer() -> Trainer:
    """Get the process-wide trainer, loaded from storage on first use."""
    settings = get_settings()
    trainer = Trainer(settings.storage_dir, settings)
    trainer.load()
    return trainer


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _session_payload(trainer: Trainer) -> dict:
    return {
        "active": trainer.is_active,
        "settings": _dump(trainer.session_settings) if trainer.session_settings else None,
        "stats": _dump(trainer.session_stats) if trainer.session_stats else None,
        "lastSession": _dump(trainer.last_session) if trainer.last_session else None,
    }


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/modes")
async def list_modes() -> list[dict]:
    return [_dump(mode) for mode in GAME_MODES]


@router.post("/roster/parse")
async def parse_roster(body: RosterText) -> dict:
    """Parse roster text without saving it."""
    return _dump(parse_people_text(body.text))


@router.put("/roster")
async def save_roster(body: RosterText) -> dict:
    """Parse roster text and replace the saved roster."""
    result = parse_people_text(body.text)
    if isinstance(result, ParseFailure):
        raise HTTPException(status_code=422, detail=_dump(result.error))
    trainer = get_trainer()
    trainer.save_roster(result.people)
    return {"people": [_dump(p) for p in trainer.roster]}


@router.get("/roster")
async def get_roster() -> dict:
    trainer = get_trainer()
    return {
        "people": [_dump(p) for p in trainer.roster],
        "text": format_people_text(trainer.roster),
    }


@router.delete("/roster")
async def clear_roster() -> dict:
    """Clear the roster together with all statistics."""
    get_trainer().clear_all()
    return {"status": "cleared"}


@router.get("/stats")
async def get_stats() -> dict:
    trainer = get_trainer()
    return {
        "overall": _dump(trainer.overall),
        "accuracy": trainer.overall.accuracy,
        "people": [_dump(s) for s in person_stats_report(trainer.overall, trainer.roster)],
    }


@router.delete("/stats")
async def clear_stats() -> dict:
    get_trainer().clear_stats()
    return {"status": "cleared"}


@router.post("/session")
async def start_session(session_settings: SessionSettings) -> dict:
    trainer = get_trainer()
    try:
        trainer.start_session(session_settings)
    except TrainerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_payload(trainer)


@router.get("/session")
async def get_session() -> dict:
    return _session_payload(get_trainer())


@router.delete("/session")
async def cancel_session() -> dict:
    trainer = get_trainer()
    try:
        trainer.cancel_session()
    except TrainerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_payload(trainer)


@router.post("/session/question")
async def next_question() -> dict:
    trainer = get_trainer()
    try:
        question = trainer.next_question()
    except TrainerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _dump(question)


@router.post("/session/answer")
async def submit_answer(submission: AnswerSubmission) -> dict:
    trainer = get_trainer()
    try:
        result = trainer.submit(submission)
    except TrainerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidAnswerError as e:
        logger.warning("invalid_answer_submission", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "result": _dump(result),
        "questionOpen": trainer.current_question is not None,
        **_session_payload(trainer),
    }


@router.post("/session/end")
async def end_session() -> dict:
    trainer = get_trainer()
    try:
        overall = trainer.end_session()
    except TrainerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"overall": _dump(overall), **_session_payload(trainer)}
