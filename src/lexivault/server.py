import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from lexivault.application.config import resolve_config
from lexivault.application.engagement import progress_story
from lexivault.application.factory import get_study_service
from lexivault.application.study_service import StudyService
from lexivault.consts import APP_NAME, VERSION
from lexivault.domain.errors import ItemNotFoundError
from lexivault.domain.models import ItemStatus

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(f"{APP_NAME}.server")

_service: StudyService | None = None


def get_service() -> StudyService:
    """One service per process; single active learner."""
    global _service
    if _service is None:
        _service = get_study_service(resolve_config())
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{APP_NAME} server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info(f"{APP_NAME} server shutting down...")


app = FastAPI(
    title=f"{APP_NAME} server",
    description="Spaced-repetition scheduling API.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class ItemResponse(BaseModel):
    id: str
    term: str
    definition: str
    status: ItemStatus
    next_due_at: datetime


class AddItemRequest(BaseModel):
    term: str
    definition: str
    example: str = ""
    ipa: str | None = None
    tags: list[str] = []


class AnswerRequest(BaseModel):
    knew_it: bool


class AnswerResponse(BaseModel):
    item: ItemResponse
    previous_status: ItemStatus
    fast_mastery: bool


class MissionResponse(BaseModel):
    date: str
    item_ids: list[str]
    completed: bool


class StatsResponse(BaseModel):
    streak: int
    longest_streak: int
    last_study_date: str | None
    mastered_count: int
    item_count: int
    unlocked_achievements: list[str]
    daily_mission: MissionResponse | None


start_time = time.time()


def _item_response(item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        term=item.term,
        definition=item.definition,
        status=item.status,
        next_due_at=item.next_due_at,
    )


def _mission_response(mission) -> MissionResponse | None:
    if mission is None:
        return None
    return MissionResponse(
        date=mission.date,
        item_ids=list(mission.item_ids),
        completed=mission.completed,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/items/due", response_model=list[ItemResponse])
async def list_due(service: StudyService = Depends(get_service)):
    return [_item_response(item) for item in await service.due_items()]


@app.post("/items", response_model=ItemResponse, status_code=201)
async def add_item(req: AddItemRequest, service: StudyService = Depends(get_service)):
    result = await service.add_item(
        req.term, req.definition, example=req.example, ipa=req.ipa, tags=tuple(req.tags)
    )
    if not result.ok:
        raise HTTPException(status_code=409, detail=f'"{req.term}" already exists')
    return _item_response(result.item)


@app.post("/items/{item_id}/answer", response_model=AnswerResponse)
async def answer_item(
    item_id: str, req: AnswerRequest, service: StudyService = Depends(get_service)
):
    """Apply one answer immediately, as a regular review would."""
    try:
        outcome = await service.record_answer(item_id, req.knew_it)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return AnswerResponse(
        item=_item_response(outcome.item),
        previous_status=outcome.previous_status,
        fast_mastery=outcome.fast_mastery,
    )


@app.get("/mission", response_model=MissionResponse | None)
async def get_mission(service: StudyService = Depends(get_service)):
    stats = await service.refresh_mission()
    return _mission_response(stats.daily_mission)


@app.get("/stats", response_model=StatsResponse)
async def get_stats(service: StudyService = Depends(get_service)):
    state = await service.ensure_loaded()
    s = state.stats
    return StatsResponse(
        streak=s.streak,
        longest_streak=s.longest_streak,
        last_study_date=s.last_study_date,
        mastered_count=s.mastered_count,
        item_count=len(state.items),
        unlocked_achievements=list(s.unlocked_achievements),
        daily_mission=_mission_response(s.daily_mission),
    )


@app.get("/story")
async def get_story(service: StudyService = Depends(get_service)):
    state = await service.ensure_loaded()
    return {"story": progress_story(state.stats, state.items, state.history, service.now())}
