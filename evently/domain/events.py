"""Actions dispatched to the upload and submission stores."""

from __future__ import annotations

from pydantic import BaseModel


# -- uploader ---------------------------------------------------------------


class FileSelected(BaseModel):
    """Fired when the user picks or drops a new file."""

    file_name: str


class UploadStarted(BaseModel):
    file_name: str


class UploadSucceeded(BaseModel):
    url: str


class UploadFailed(BaseModel):
    message: str


# -- event form -------------------------------------------------------------


class ValidationStarted(BaseModel):
    pass


class SubmissionStarted(BaseModel):
    message: str


class SubmissionSucceeded(BaseModel):
    """Fired when the persistence action returns the saved event."""

    event_id: str
    redirect_to: str
    message: str


class SubmissionFailed(BaseModel):
    message: str


class Navigated(BaseModel):
    """Fired once the post-submission redirect has been performed."""

    path: str


class FormEdited(BaseModel):
    """Fired when the user touches the draft after an error."""
