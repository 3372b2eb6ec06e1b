"""Pure reducers for the uploader and event-form view state."""

from __future__ import annotations

from typing import Any

from evently.domain.events import (
    FileSelected,
    FormEdited,
    Navigated,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    UploadFailed,
    UploadStarted,
    UploadSucceeded,
    ValidationStarted,
)
from evently.domain.models import (
    SubmissionState,
    SubmissionStatus,
    UploadState,
    UploadStatus,
)


def upload_reducer(state: UploadState, action: Any) -> UploadState:
    # A failed upload keeps whatever preview was already showing.
    if isinstance(action, FileSelected):
        return state.model_copy(
            update={
                "status": UploadStatus.IDLE,
                "error_message": None,
                "file_name": action.file_name,
            }
        )
    if isinstance(action, UploadStarted):
        return state.model_copy(
            update={
                "status": UploadStatus.UPLOADING,
                "error_message": None,
                "file_name": action.file_name,
            }
        )
    if isinstance(action, UploadSucceeded):
        return state.model_copy(
            update={
                "status": UploadStatus.SUCCESS,
                "preview_url": action.url,
                "error_message": None,
            }
        )
    if isinstance(action, UploadFailed):
        return state.model_copy(
            update={"status": UploadStatus.ERROR, "error_message": action.message}
        )
    return state


def submission_reducer(state: SubmissionState, action: Any) -> SubmissionState:
    if isinstance(action, ValidationStarted):
        return SubmissionState(status=SubmissionStatus.VALIDATING)
    if isinstance(action, SubmissionStarted):
        return state.model_copy(
            update={"status": SubmissionStatus.SUBMITTING, "message": action.message}
        )
    if isinstance(action, SubmissionSucceeded):
        return state.model_copy(
            update={
                "status": SubmissionStatus.SUCCESS,
                "message": action.message,
                "event_id": action.event_id,
                "redirect_to": action.redirect_to,
            }
        )
    if isinstance(action, SubmissionFailed):
        return state.model_copy(
            update={"status": SubmissionStatus.ERROR, "message": action.message}
        )
    if isinstance(action, Navigated):
        return state.model_copy(update={"navigated": True})
    if isinstance(action, FormEdited):
        if state.status == SubmissionStatus.ERROR:
            return SubmissionState()
        return state
    return state
