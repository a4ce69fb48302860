import logging
import time
from contextlib import asynccontextmanager
from datetime import date, datetime

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from spacelearn.application.config import resolve_config
from spacelearn.application.factory import open_service
from spacelearn.application.learning_service import LearningService
from spacelearn.consts import VERSION
from spacelearn.domain.errors import NotFound, StoreUnavailable, ValidationError
from spacelearn.domain.models import Difficulty, LearningEntry

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("spacelearn.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"SpaceLearn Server v{VERSION} starting up...")
    config = resolve_config()
    app.state.service = await open_service(config)
    yield
    # Shutdown
    logger.info("SpaceLearn Server shutting down...")
    await app.state.service.close()


app = FastAPI(
    title="SpaceLearn Server",
    description="Log learning entries and review them on a spaced schedule.",
    version=VERSION,
    lifespan=lifespan,
)


def get_service(request: Request) -> LearningService:
    return request.app.state.service


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"Store unavailable: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ---------- Schemas ----------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class ReviewOut(BaseModel):
    date: datetime
    questions: list[str]
    answers: list[str]
    step: int
    difficulty: Difficulty | None = None


class EntryOut(BaseModel):
    id: str
    label: str
    sequence_number: int
    content: str
    context: str | None
    tags: list[str]
    created_at: datetime
    step: int
    reviews: list[ReviewOut]

    @classmethod
    def from_entry(cls, entry: LearningEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            label=entry.label,
            sequence_number=entry.sequence_number,
            content=entry.content,
            context=entry.context,
            tags=list(entry.tags),
            created_at=entry.created_at,
            step=entry.step,
            reviews=[
                ReviewOut(
                    date=r.date,
                    questions=list(r.questions),
                    answers=list(r.answers),
                    step=r.step,
                    difficulty=r.difficulty,
                )
                for r in entry.reviews
            ],
        )


class DueResponse(BaseModel):
    today: date
    count: int
    entries: list[EntryOut]


class EntryCreate(BaseModel):
    content: str
    context: str | None = None
    tags: list[str] = Field(default_factory=list)


class EntryEdit(BaseModel):
    content: str | None = None
    context: str | None = None
    tags: list[str] | None = None


class ReviewRequest(BaseModel):
    questions: list[str] = Field(default_factory=list)
    answers: list[str] = Field(default_factory=list)
    difficulty: Difficulty | None = None


# ---------- Routes ----------

start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/entries", response_model=list[EntryOut])
async def list_entries(service: LearningService = Depends(get_service)):
    return [EntryOut.from_entry(e) for e in service.entries]


@app.post("/entries", response_model=EntryOut, status_code=201)
async def create_entry(req: EntryCreate, service: LearningService = Depends(get_service)):
    entry = await service.add_entry(req.content, req.context, req.tags)
    return EntryOut.from_entry(entry)


@app.get("/entries/due", response_model=DueResponse)
async def due_entries(
    today: date | None = None, service: LearningService = Depends(get_service)
):
    """
    Entries due for review. ``today`` overrides the server's current day.
    """
    day = today or date.today()
    entries = service.due_entries(day)
    return DueResponse(
        today=day, count=len(entries), entries=[EntryOut.from_entry(e) for e in entries]
    )


@app.get("/entries/today", response_model=list[EntryOut])
async def entries_created_on(
    day: date | None = None, service: LearningService = Depends(get_service)
):
    return [EntryOut.from_entry(e) for e in service.entries_created_on(day)]


@app.post("/entries/{entry_id}/review", response_model=EntryOut)
async def complete_review(
    entry_id: str, req: ReviewRequest, service: LearningService = Depends(get_service)
):
    entry = await service.complete_review(entry_id, req.questions, req.answers, req.difficulty)
    return EntryOut.from_entry(entry)


@app.patch("/entries/{entry_id}", response_model=EntryOut)
async def edit_entry(
    entry_id: str, req: EntryEdit, service: LearningService = Depends(get_service)
):
    entry = await service.edit_entry(entry_id, req.content, req.context, req.tags)
    return EntryOut.from_entry(entry)


@app.delete("/entries/{entry_id}", status_code=204)
async def delete_entry(entry_id: str, service: LearningService = Depends(get_service)):
    await service.delete_entry(entry_id)


@app.post("/entries/reload", response_model=list[EntryOut])
async def reload_entries(service: LearningService = Depends(get_service)):
    """Re-read every entry from the store."""
    entries = await service.load()
    return [EntryOut.from_entry(e) for e in entries]
