"""Domain models for events, drafts and client-side view state."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class FormMode(StrEnum):
    CREATE = "Create"
    UPDATE = "Update"


class UploadStatus(StrEnum):
    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class SubmissionStatus(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class Feedback(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Persisted entities
# ---------------------------------------------------------------------------


class Category(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)


class Event(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    location: str = ""
    image_url: str
    start_date_time: datetime
    end_date_time: datetime
    price: str = "0"
    is_free: bool = False
    url: str = ""
    category: Category
    organizer_id: str
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> Event:
        if self.end_date_time < self.start_date_time:
            raise ValueError("end_date_time must not be before start_date_time")
        return self


class EventPage(BaseModel):
    data: list[Event] = Field(default_factory=list)
    total_pages: int = 0


# ---------------------------------------------------------------------------
# Drafts and normalized inputs
# ---------------------------------------------------------------------------


class EventDraft(BaseModel):
    """Unsaved, field-by-field editable representation of an event.

    Dates stay loose (``datetime`` or raw text) until normalization so that
    half-typed input can live in the draft.
    """

    title: str = ""
    description: str = ""
    location: str = ""
    image_url: str = ""
    start_date_time: datetime | str | None = Field(default_factory=_utcnow)
    end_date_time: datetime | str | None = Field(default_factory=_utcnow)
    category_id: str = ""
    price: str = ""
    is_free: bool = False
    url: str = ""
    organizer_id: str | None = None

    @classmethod
    def from_event(cls, event: Event | dict) -> EventDraft:
        """Hydrate a draft from a persisted event (or its JSON form)."""
        if isinstance(event, Event):
            event = event.model_dump()
        category = event.get("category") or {}
        return cls(
            title=event.get("title", ""),
            description=event.get("description", ""),
            location=event.get("location", ""),
            image_url=event.get("image_url", ""),
            start_date_time=event.get("start_date_time"),
            end_date_time=event.get("end_date_time"),
            category_id=event.get("category_id") or category.get("id", ""),
            price=event.get("price", ""),
            is_free=event.get("is_free", False),
            url=event.get("url", ""),
            organizer_id=event.get("organizer_id"),
        )


class EventInput(BaseModel):
    """A validated, normalized draft ready for the persistence actions."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = ""
    image_url: str = Field(min_length=1)
    start_date_time: datetime
    end_date_time: datetime
    category_id: str = Field(min_length=1)
    price: str = "0"
    is_free: bool = False
    url: str = ""

    @model_validator(mode="after")
    def _free_means_zero(self) -> EventInput:
        if self.is_free:
            self.price = "0"
        if self.end_date_time < self.start_date_time:
            raise ValueError("end_date_time must not be before start_date_time")
        return self


class EventUpdate(EventInput):
    id: str = Field(min_length=1)


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


class SelectedFile(BaseModel):
    """A file picked or dropped by the user, before it is uploaded."""

    name: str
    content_type: str = ""
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


class UploadResult(BaseModel):
    secure_url: str
    public_id: str | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None
    bytes: int | None = None
    variants: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Client view state
# ---------------------------------------------------------------------------


class UploadState(BaseModel):
    status: UploadStatus = UploadStatus.IDLE
    preview_url: str = ""
    error_message: str | None = None
    file_name: str | None = None


class SubmissionState(BaseModel):
    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str = ""
    event_id: str | None = None
    redirect_to: str | None = None
    navigated: bool = False

    @property
    def feedback(self) -> Feedback:
        if self.status == SubmissionStatus.ERROR:
            return Feedback.ERROR
        if self.status == SubmissionStatus.SUCCESS:
            return Feedback.SUCCESS
        return Feedback.INFO

    @property
    def submit_disabled(self) -> bool:
        return self.status in (
            SubmissionStatus.VALIDATING,
            SubmissionStatus.SUBMITTING,
            SubmissionStatus.SUCCESS,
        )


# ---------------------------------------------------------------------------
# Response DTOs
# ---------------------------------------------------------------------------


class EventCard(BaseModel):
    event: Event
    price_label: str
    date_label: str
    is_event_creator: bool = False


class EventListResponse(BaseModel):
    data: list[EventCard] = Field(default_factory=list)
    total_pages: int = 0
    links: dict[str, str] = Field(default_factory=dict)
