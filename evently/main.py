"""FastAPI application: entry point for the event listing and upload service."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from evently.config import Config
from evently.domain.errors import DomainError, ErrorCode, Unauthenticated
from evently.domain.models import (
    Category,
    CategoryCreateRequest,
    Event,
    EventCard,
    EventInput,
    EventListResponse,
    EventPage,
    EventUpdate,
    UploadResult,
)
from evently.domain.result import Err
from evently.repos.memory import CategoryRepository, EventRepository, seed_categories
from evently.services.event_actions import EventActions
from evently.services.formatting import format_date_time, format_price
from evently.services.query import merge_query_param, remove_query_params
from evently.services.uploads import CloudinaryImageHost, ImageHost, upload_image

Config.setup_logging()

app = FastAPI(title="Evently")

# ── Singletons (created at import time for simplicity) ────────────────
event_repo = EventRepository()
category_repo = CategoryRepository()
seed_categories(category_repo)

actions = EventActions(event_repo=event_repo, category_repo=category_repo)

_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.MISSING_ATTACHMENT: 400,
    ErrorCode.PAYLOAD_TOO_LARGE: 400,
    ErrorCode.UNSUPPORTED_MEDIA_TYPE: 400,
    ErrorCode.MISSING_EVENT_ID: 400,
    ErrorCode.PERSISTENCE_FAILED: 400,
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.UPLOAD_SUPERSEDED: 409,
    ErrorCode.SUBMISSION_LOCKED: 409,
    ErrorCode.UPSTREAM_UPLOAD_FAILED: 500,
}


@app.exception_handler(DomainError)
def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        content={"error": exc.message, "code": exc.code.value},
    )


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the same 400 shape as domain validation."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"error": message, "code": ErrorCode.VALIDATION_FAILED.value},
    )


# ── Dependencies ──────────────────────────────────────────────────────


@lru_cache
def get_image_host() -> ImageHost:
    return CloudinaryImageHost()


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Identity of the signed-in user; a missing header means signed out."""
    if not x_user_id:
        raise Unauthenticated()
    return x_user_id


def _unwrap(result):
    if isinstance(result, Err):
        raise result.error
    return result.value


def _card(event: Event, viewer_id: str | None) -> EventCard:
    return EventCard(
        event=event,
        price_label="FREE" if event.is_free else format_price(event.price),
        date_label=format_date_time(event.start_date_time)["date_time"],
        is_event_creator=bool(viewer_id) and viewer_id == event.organizer_id,
    )


def _page_links(request: Request, page: int, total_pages: int) -> dict[str, str]:
    params = request.url.query
    path = request.url.path
    links: dict[str, str] = {}
    if page < total_pages:
        links["next"] = merge_query_param(params, "page", page + 1, path=path)
    if page > 1:
        if page - 1 == 1:
            links["previous"] = remove_query_params(params, ["page"], path=path)
        else:
            links["previous"] = merge_query_param(params, "page", page - 1, path=path)
    return links


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/api/upload", response_model=UploadResult)
async def upload(
    request: Request, image_host: ImageHost = Depends(get_image_host)
) -> UploadResult:
    """Accept one image and return its hosted URL set.

    A ``file`` field that is absent or holds plain text counts as no file.
    At most one byte past the size cap is read.
    """
    async with request.form() as form:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            return upload_image(image_host, None, None, b"")
        content = await file.read(Config.MAX_UPLOAD_BYTES + 1)
        return await run_in_threadpool(
            upload_image, image_host, file.filename, file.content_type, content
        )


@app.get("/events", response_model=EventListResponse)
async def list_events(
    request: Request,
    query: str = "",
    category: str = "",
    page: int = 1,
    limit: int = Config.EVENTS_PAGE_SIZE,
    x_user_id: str | None = Header(default=None),
) -> EventListResponse:
    """Search, filter and paginate events, newest first."""
    result = await actions.get_all_events(
        query=query, category=category, page=page, limit=limit
    )
    return EventListResponse(
        data=[_card(e, x_user_id) for e in result.data],
        total_pages=result.total_pages,
        links=_page_links(request, page, result.total_pages),
    )


@app.post("/events", response_model=Event, status_code=201)
async def create_event(body: EventInput, user_id: str = Depends(current_user_id)) -> Event:
    return _unwrap(await actions.create_event(event=body, user_id=user_id, path="/profile"))


@app.get("/events/{event_id}", response_model=Event)
async def get_event(event_id: str) -> Event:
    return _unwrap(await actions.get_event(event_id))


@app.get("/events/{event_id}/related", response_model=EventPage)
async def related_events(event_id: str, page: int = 1) -> EventPage:
    """Other events in the same category as *event_id*."""
    event = _unwrap(await actions.get_event(event_id))
    return await actions.get_related_events_by_category(
        category_id=event.category.id, event_id=event.id, page=page
    )


@app.put("/events/{event_id}", response_model=Event)
async def update_event(
    event_id: str, body: EventInput, user_id: str = Depends(current_user_id)
) -> Event:
    result = await actions.update_event(
        user_id=user_id,
        event=EventUpdate(**body.model_dump(), id=event_id),
        path=f"/events/{event_id}",
    )
    return _unwrap(result)


@app.delete("/events/{event_id}", status_code=200)
async def delete_event(event_id: str, user_id: str = Depends(current_user_id)) -> dict:
    _unwrap(await actions.delete_event(event_id=event_id, user_id=user_id, path="/"))
    return {"status": "deleted"}


@app.get("/categories", response_model=list[Category])
async def list_categories() -> list[Category]:
    return await actions.get_all_categories()


@app.post("/categories", response_model=Category, status_code=201)
async def create_category(body: CategoryCreateRequest) -> Category:
    return _unwrap(await actions.create_category(body.name))
