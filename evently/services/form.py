"""Event form controller: validation, submission lifecycle and redirect."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable

from evently.config import Config
from evently.domain.errors import (
    DomainError,
    MissingEventId,
    PersistenceError,
    SubmissionLocked,
    Unauthenticated,
)
from evently.domain.events import (
    FormEdited,
    Navigated,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    ValidationStarted,
)
from evently.domain.models import (
    Event,
    EventDraft,
    EventUpdate,
    FormMode,
    SubmissionState,
    SubmissionStatus,
)
from evently.domain.reducers import submission_reducer
from evently.domain.result import Err, Ok, Result
from evently.domain.store import Store
from evently.services import validation
from evently.services.event_actions import EventActions

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong"

Scheduler = Callable[[float, Callable[[], None]], Any]


class Navigator(ABC):
    """Interface for the page router."""

    @abstractmethod
    def push(self, path: str) -> None:
        ...

    @abstractmethod
    def back(self) -> None:
        ...


def _call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class EventFormController:
    """Drives one create or update form from draft to redirect.

    The redirect after a successful create is a separate step: ``submit``
    records the target and hands ``navigate`` to *scheduler*; the navigation
    itself happens when the scheduler fires it.
    """

    def __init__(
        self,
        actions: EventActions,
        navigator: Navigator,
        mode: FormMode = FormMode.CREATE,
        event: Event | None = None,
        event_id: str | None = None,
        scheduler: Scheduler = _call_later,
        redirect_delay: float = Config.REDIRECT_DELAY_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.actions = actions
        self.navigator = navigator
        self.mode = mode
        self.event_id = event_id or (event.id if event is not None else None)
        self._scheduler = scheduler
        self._redirect_delay = redirect_delay
        self._clock = clock
        self._pending: Any = None
        self.store: Store[SubmissionState] = Store(submission_reducer, SubmissionState())

        if mode == FormMode.UPDATE and event is not None:
            self.draft = EventDraft.from_event(event)
        else:
            self.draft = EventDraft()

    @property
    def state(self) -> SubmissionState:
        return self.store.state

    def _now(self) -> datetime | None:
        return self._clock() if self._clock is not None else None

    # ------------------------------------------------------------------
    # Draft editing
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Any) -> None:
        update = {name: value}
        if name == "is_free" and value:
            update["price"] = "0"
        self.draft = self.draft.model_copy(update=update)
        self.store.dispatch(FormEdited())

    def on_image_uploaded(self, url: str) -> None:
        """Callback handed to the uploader widget as ``on_field_change``."""
        self.set_field("image_url", url)

    def validate(self, draft: EventDraft | None = None) -> Result[EventDraft, DomainError]:
        if draft is None:
            draft = self.draft
        return validation.validate(draft, self.mode, self._now())

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(
        self, user_id: str | None, draft: EventDraft | None = None
    ) -> Result[Event, DomainError]:
        if self.state.submit_disabled:
            return Err(SubmissionLocked())

        draft = draft if draft is not None else self.draft
        self.store.dispatch(ValidationStarted())

        if not user_id:
            return self._fail(Unauthenticated())
        if self.mode == FormMode.UPDATE and not self.event_id:
            result = self._fail(MissingEventId())
            self.navigator.back()
            return result

        checked = self.validate(draft)
        if isinstance(checked, Err):
            return self._fail(checked.error)

        event = validation.normalize(draft, self._now())
        try:
            if self.mode == FormMode.CREATE:
                self.store.dispatch(SubmissionStarted(message="Creating your event..."))
                result = await self.actions.create_event(
                    event=event, user_id=user_id, path="/profile"
                )
            else:
                self.store.dispatch(SubmissionStarted(message="Updating your event..."))
                result = await self.actions.update_event(
                    user_id=user_id,
                    event=EventUpdate(**event.model_dump(), id=self.event_id),
                    path=f"/events/{self.event_id}",
                )
            if isinstance(result, Err):
                logger.error("Saving event failed: %s", result.error)
                return self._fail(result.error)
            saved = result.value if isinstance(result, Ok) else None
        except Exception as exc:
            logger.exception("Error saving event")
            return self._fail(PersistenceError(str(exc) or GENERIC_FAILURE))

        if saved is None:
            logger.error("Saving event returned no event: %r", result)
            return self._fail(PersistenceError(GENERIC_FAILURE))

        created = self.mode == FormMode.CREATE
        self.store.dispatch(
            SubmissionSucceeded(
                event_id=saved.id,
                redirect_to=f"/events/{saved.id}",
                message=(
                    "Event created successfully!" if created else "Event updated successfully!"
                ),
            )
        )
        if created:
            self._pending = self._scheduler(self._redirect_delay, self.navigate)
        else:
            self.navigate()
        return Ok(saved)

    def _fail(self, error: DomainError) -> Err:
        self.store.dispatch(SubmissionFailed(message=error.message or GENERIC_FAILURE))
        return Err(error)

    def navigate(self) -> None:
        """Perform the post-submission redirect, at most once."""
        state = self.state
        if self.store.closed or state.navigated:
            return
        if state.status != SubmissionStatus.SUCCESS or not state.redirect_to:
            return
        self.store.dispatch(Navigated(path=state.redirect_to))
        self.navigator.push(state.redirect_to)

    def dispose(self) -> None:
        """Unmount the form; a pending redirect is dropped."""
        self.store.close()
        pending, self._pending = self._pending, None
        if pending is not None and hasattr(pending, "cancel"):
            pending.cancel()
