"""Persistence actions for events and categories.

These are the create/update/list operations the event form and the listing
pages call. Every write returns an explicit ``Ok``/``Err`` result instead of
raising, and logs the page path whose cached render is now stale.
"""

from __future__ import annotations

import logging
import math

from evently.config import Config
from evently.domain.errors import (
    DomainError,
    EventNotFound,
    Forbidden,
    PersistenceError,
)
from evently.domain.models import (
    Category,
    Event,
    EventInput,
    EventPage,
    EventUpdate,
)
from evently.domain.result import Err, Ok, Result
from evently.repos.memory import CategoryRepository, EventRepository

logger = logging.getLogger(__name__)


def _paginate(events: list[Event], page: int, limit: int) -> EventPage:
    limit = max(limit, 1)
    page = max(page, 1)
    skip = (page - 1) * limit
    return EventPage(
        data=events[skip : skip + limit],
        total_pages=math.ceil(len(events) / limit),
    )


class EventActions:
    """In-process persistence collaborator backed by the memory repositories."""

    def __init__(
        self, event_repo: EventRepository, category_repo: CategoryRepository
    ) -> None:
        self.event_repo = event_repo
        self.category_repo = category_repo

    def _revalidate(self, path: str) -> None:
        logger.debug("Revalidating %s", path)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_event(
        self, event: EventInput, user_id: str, path: str
    ) -> Result[Event, DomainError]:
        if not user_id:
            return Err(PersistenceError("Organizer not found"))
        category = self.category_repo.get(event.category_id)
        if category is None:
            return Err(PersistenceError("Category not found"))

        created = Event(
            **event.model_dump(exclude={"category_id"}),
            category=category,
            organizer_id=user_id,
        )
        self.event_repo.add(created)
        logger.info("Created event %s for organizer %s", created.id, user_id)
        self._revalidate(path)
        return Ok(created)

    async def update_event(
        self, user_id: str, event: EventUpdate, path: str
    ) -> Result[Event, DomainError]:
        stored = self.event_repo.get(event.id)
        if stored is None:
            return Err(EventNotFound(event.id))
        if stored.organizer_id != user_id:
            return Err(Forbidden())
        category = self.category_repo.get(event.category_id)
        if category is None:
            return Err(PersistenceError("Category not found"))

        updated = stored.model_copy(
            update={
                **event.model_dump(exclude={"id", "category_id"}),
                "category": category,
            }
        )
        self.event_repo.add(updated)
        logger.info("Updated event %s", updated.id)
        self._revalidate(path)
        return Ok(updated)

    async def delete_event(
        self, event_id: str, user_id: str, path: str
    ) -> Result[Event, DomainError]:
        stored = self.event_repo.get(event_id)
        if stored is None:
            return Err(EventNotFound(event_id))
        if stored.organizer_id != user_id:
            return Err(Forbidden())
        self.event_repo.delete(event_id)
        logger.info("Deleted event %s", event_id)
        self._revalidate(path)
        return Ok(stored)

    async def create_category(self, name: str) -> Result[Category, DomainError]:
        existing = self.category_repo.get_by_name(name)
        if existing is not None:
            return Ok(existing)
        category = Category(name=name.strip())
        self.category_repo.add(category)
        return Ok(category)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_event(self, event_id: str) -> Result[Event, DomainError]:
        stored = self.event_repo.get(event_id)
        if stored is None:
            return Err(EventNotFound(event_id))
        return Ok(stored)

    async def get_all_events(
        self,
        query: str = "",
        category: str = "",
        page: int = 1,
        limit: int = Config.EVENTS_PAGE_SIZE,
    ) -> EventPage:
        events = self.event_repo.search(query=query, category_name=category)
        return _paginate(events, page, limit)

    async def get_related_events_by_category(
        self,
        category_id: str,
        event_id: str,
        page: int = 1,
        limit: int = 3,
    ) -> EventPage:
        events = self.event_repo.search(category_id=category_id, exclude_id=event_id)
        return _paginate(events, page, limit)

    async def get_all_categories(self) -> list[Category]:
        return self.category_repo.list_all()
