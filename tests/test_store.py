"""Tests for the reducer store and the view-state reducers."""

from evently.domain.events import (
    FileSelected,
    FormEdited,
    SubmissionFailed,
    UploadFailed,
    UploadStarted,
    UploadSucceeded,
    ValidationStarted,
)
from evently.domain.models import (
    FormMode,
    SubmissionState,
    SubmissionStatus,
    UploadState,
    UploadStatus,
)
from evently.domain.reducers import submission_reducer, upload_reducer
from evently.domain.store import Store


def test_subscribers_see_every_state():
    seen = []
    store = Store(upload_reducer, UploadState())
    store.subscribe(lambda s: seen.append(s.status))

    store.dispatch(UploadStarted(file_name="a.jpg"))
    store.dispatch(UploadSucceeded(url="https://host/a.jpg"))

    assert seen == [UploadStatus.UPLOADING, UploadStatus.SUCCESS]
    assert store.state.preview_url == "https://host/a.jpg"


def test_closed_store_drops_actions():
    store = Store(upload_reducer, UploadState(preview_url="https://host/a.jpg"))
    store.close()

    store.dispatch(UploadSucceeded(url="https://host/b.jpg"))

    assert store.state.preview_url == "https://host/a.jpg"
    assert store.state.status == UploadStatus.IDLE


def test_new_file_resets_error_but_keeps_preview():
    state = UploadState(
        status=UploadStatus.ERROR,
        preview_url="https://host/a.jpg",
        error_message="Invalid file type",
    )

    state = upload_reducer(state, FileSelected(file_name="b.jpg"))

    assert state.status == UploadStatus.IDLE
    assert state.error_message is None
    assert state.preview_url == "https://host/a.jpg"


def test_upload_failure_keeps_preview():
    state = UploadState(status=UploadStatus.UPLOADING, preview_url="https://host/a.jpg")
    state = upload_reducer(state, UploadFailed(message="Upload failed"))
    assert state.preview_url == "https://host/a.jpg"
    assert state.status == UploadStatus.ERROR


def test_edit_only_clears_error():
    failed = submission_reducer(SubmissionState(), SubmissionFailed(message="nope"))
    assert submission_reducer(failed, FormEdited()).status == SubmissionStatus.IDLE

    validating = submission_reducer(SubmissionState(), ValidationStarted())
    assert submission_reducer(validating, FormEdited()).status == SubmissionStatus.VALIDATING


def test_status_enums_compare_as_strings():
    assert FormMode.UPDATE == "Update"
    assert f"{UploadStatus.UPLOADING}" == "uploading"
    assert SubmissionStatus("error") is SubmissionStatus.ERROR
