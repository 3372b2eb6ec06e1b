"""Tests for draft validation and normalization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from evently.domain.errors import ValidationError
from evently.domain.models import Category, Event, EventDraft, FormMode
from evently.domain.result import Err, Ok
from evently.services.validation import coerce_datetime, normalize, validate

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _draft(**overrides) -> EventDraft:
    defaults = dict(
        title="Jazz night",
        description="Live quartet on the rooftop",
        location="Rooftop bar",
        image_url="https://res.cloudinary.com/demo/image/upload/events/jazz.jpg",
        start_date_time=NOW + timedelta(days=2),
        end_date_time=NOW + timedelta(days=2, hours=3),
        category_id="cat-music",
        price="25",
    )
    defaults.update(overrides)
    return EventDraft(**defaults)


def test_valid_draft_passes():
    assert isinstance(validate(_draft(), FormMode.CREATE, NOW), Ok)


@pytest.mark.parametrize("field", ["title", "description", "image_url", "category_id"])
def test_missing_required_field(field):
    result = validate(_draft(**{field: ""}), FormMode.CREATE, NOW)
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    assert result.error.message == "Please fill in all required fields"
    assert result.error.field == field


def test_whitespace_title_counts_as_missing():
    result = validate(_draft(title="   "), FormMode.CREATE, NOW)
    assert isinstance(result, Err)


def test_start_in_past_rejected_on_create():
    result = validate(_draft(start_date_time=NOW - timedelta(hours=1)), FormMode.CREATE, NOW)
    assert isinstance(result, Err)
    assert result.error.message == "Start date cannot be in the past"


def test_start_in_past_allowed_on_update():
    draft = _draft(
        start_date_time=NOW - timedelta(hours=1),
        end_date_time=NOW + timedelta(hours=1),
    )
    assert isinstance(validate(draft, FormMode.UPDATE, NOW), Ok)


@pytest.mark.parametrize("mode", [FormMode.CREATE, FormMode.UPDATE])
def test_end_before_start_rejected(mode):
    draft = _draft(
        start_date_time=NOW + timedelta(days=3),
        end_date_time=NOW + timedelta(days=2),
    )
    result = validate(draft, mode, NOW)
    assert isinstance(result, Err)
    assert result.error.message == "End date must be after start date"


def test_end_equal_to_start_is_allowed():
    start = NOW + timedelta(days=1)
    assert isinstance(
        validate(_draft(start_date_time=start, end_date_time=start), FormMode.CREATE, NOW),
        Ok,
    )


def test_required_fields_checked_before_dates():
    draft = _draft(title="", start_date_time=NOW - timedelta(days=1))
    result = validate(draft, FormMode.CREATE, NOW)
    assert result.error.message == "Please fill in all required fields"


def test_unparseable_start_rejected():
    result = validate(_draft(start_date_time="zzzz"), FormMode.CREATE, NOW)
    assert isinstance(result, Err)
    assert result.error.message == "Start date is invalid"


def test_free_event_price_forced_to_zero():
    for price in ("25", "", "0", "199.99"):
        event = normalize(_draft(is_free=True, price=price), NOW)
        assert event.price == "0"
        assert event.is_free is True


def test_paid_event_keeps_price_and_blank_becomes_zero():
    assert normalize(_draft(price="42.50"), NOW).price == "42.50"
    assert normalize(_draft(price="  "), NOW).price == "0"


def test_normalize_coerces_date_strings():
    event = normalize(
        _draft(
            start_date_time="2026-07-01T18:00:00+02:00",
            end_date_time="2026-07-01T21:00:00",
        ),
        NOW,
    )
    assert event.start_date_time == datetime(2026, 7, 1, 16, 0, tzinfo=timezone.utc)
    assert event.end_date_time == datetime(2026, 7, 1, 21, 0, tzinfo=timezone.utc)


def test_coerce_naive_datetime_is_utc():
    assert coerce_datetime(datetime(2026, 7, 1, 9, 30), NOW) == datetime(
        2026, 7, 1, 9, 30, tzinfo=timezone.utc
    )


def test_coerce_empty_is_none():
    assert coerce_datetime("", NOW) is None
    assert coerce_datetime(None, NOW) is None


def test_draft_from_event_parses_date_strings():
    event = Event(
        title="Marathon",
        description="42km",
        image_url="https://utfs.io/f/marathon.png",
        start_date_time=NOW + timedelta(days=10),
        end_date_time=NOW + timedelta(days=10, hours=5),
        category=Category(id="cat-sports", name="Sports"),
        organizer_id="user_1",
        price="10",
    )
    payload = event.model_dump(mode="json")
    draft = EventDraft.from_event(payload)

    assert draft.category_id == "cat-sports"
    assert coerce_datetime(draft.start_date_time, NOW) == event.start_date_time
    assert isinstance(validate(draft, FormMode.UPDATE, NOW), Ok)
