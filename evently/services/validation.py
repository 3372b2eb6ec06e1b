"""Service for validating and normalizing event drafts before submission."""

from __future__ import annotations

from datetime import datetime, timezone

import dateparser

from evently.domain.errors import ValidationError
from evently.domain.models import EventDraft, EventInput, FormMode
from evently.domain.result import Err, Ok, Result

REQUIRED_FIELDS = ("title", "description", "image_url", "category_id")


def coerce_datetime(value: datetime | str | None, now: datetime | None = None) -> datetime | None:
    """Turn a draft date into an aware UTC datetime, or ``None`` if unparseable.

    Strings are read as ISO-8601 first and then with ``dateparser`` so that
    free text such as "tomorrow 7pm" also works. Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        result = value
    else:
        raw = str(value).strip()
        try:
            result = datetime.fromisoformat(raw)
        except ValueError:
            settings = {"PREFER_DATES_FROM": "future", "RETURN_AS_TIMEZONE_AWARE": False}
            if now is not None:
                settings["RELATIVE_BASE"] = now.replace(tzinfo=None)
            result = dateparser.parse(raw, settings=settings)
            if result is None:
                return None
    if result.tzinfo is None:
        return result.replace(tzinfo=timezone.utc)
    return result.astimezone(timezone.utc)


def validate(
    draft: EventDraft, mode: FormMode, now: datetime | None = None
) -> Result[EventDraft, ValidationError]:
    """Check *draft* and return the first rule it breaks.

    Past start dates are only rejected when creating; an existing event can
    be edited after it has started.
    """
    now = now or datetime.now(timezone.utc)

    for field in REQUIRED_FIELDS:
        if not str(getattr(draft, field) or "").strip():
            return Err(ValidationError("Please fill in all required fields", field=field))

    start = coerce_datetime(draft.start_date_time, now)
    if start is None:
        return Err(ValidationError("Start date is invalid", field="start_date_time"))
    end = coerce_datetime(draft.end_date_time, now)
    if end is None:
        return Err(ValidationError("End date is invalid", field="end_date_time"))

    if mode == FormMode.CREATE and start < now:
        return Err(
            ValidationError("Start date cannot be in the past", field="start_date_time")
        )
    if end < start:
        return Err(
            ValidationError("End date must be after start date", field="end_date_time")
        )
    return Ok(draft)


def normalize(draft: EventDraft, now: datetime | None = None) -> EventInput:
    """Build the persistence payload from a draft that passed ``validate``."""
    if draft.is_free:
        price = "0"
    else:
        price = draft.price.strip() or "0"
    return EventInput(
        title=draft.title.strip(),
        description=draft.description.strip(),
        location=draft.location.strip(),
        image_url=draft.image_url,
        start_date_time=coerce_datetime(draft.start_date_time, now),
        end_date_time=coerce_datetime(draft.end_date_time, now),
        category_id=draft.category_id,
        price=price,
        is_free=draft.is_free,
        url=draft.url,
    )
