"""Client-side image uploader: local checks, upload to the gateway, preview state."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from evently.config import Config
from evently.domain.errors import DomainError, UploadSuperseded, UpstreamUploadError
from evently.domain.events import (
    FileSelected,
    UploadFailed,
    UploadStarted,
    UploadSucceeded,
)
from evently.domain.models import SelectedFile, UploadState, UploadStatus
from evently.domain.reducers import upload_reducer
from evently.domain.result import Err, Ok, Result
from evently.domain.store import Store
from evently.services.uploads import check_upload

logger = logging.getLogger(__name__)


class FileUploader:
    """Upload widget state machine: idle -> uploading -> success | error.

    Starting a new upload while one is in flight cancels the earlier one, so
    only the most recent file can change the preview or reach
    ``on_field_change``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        on_field_change: Callable[[str], None],
        image_url: str = "",
        endpoint: str = "/api/upload",
        max_bytes: int = Config.MAX_UPLOAD_BYTES,
    ) -> None:
        self._client = client
        self._on_field_change = on_field_change
        self._endpoint = endpoint
        self._max_bytes = max_bytes
        self._inflight: asyncio.Task | None = None
        self.store: Store[UploadState] = Store(
            upload_reducer, UploadState(preview_url=image_url)
        )

    @property
    def state(self) -> UploadState:
        return self.store.state

    @property
    def busy(self) -> bool:
        return self.state.status == UploadStatus.UPLOADING

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------

    async def select_file(self, file: SelectedFile | None) -> Result[str, DomainError]:
        return await self._accept(file)

    async def drop_file(self, file: SelectedFile | None) -> Result[str, DomainError]:
        return await self._accept(file)

    async def _accept(self, file: SelectedFile | None) -> Result[str, DomainError]:
        self._cancel_inflight()
        name = file.name if file is not None else ""
        self.store.dispatch(FileSelected(file_name=name))
        try:
            check_upload(
                name,
                file.content_type if file is not None else None,
                file.size if file is not None else 0,
                max_bytes=self._max_bytes,
            )
        except DomainError as exc:
            self.store.dispatch(UploadFailed(message=exc.message))
            return Err(exc)
        return await self.upload(file)

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def upload(self, file: SelectedFile) -> Result[str, DomainError]:
        self._cancel_inflight()
        task = asyncio.ensure_future(self._send(file))
        self._inflight = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._inflight is task:
                # The caller itself was cancelled, not superseded.
                raise
            logger.info("Upload of %s cancelled", file.name)
            return Err(UploadSuperseded())
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _send(self, file: SelectedFile) -> Result[str, DomainError]:
        self.store.dispatch(UploadStarted(file_name=file.name))
        try:
            response = await self._client.post(
                self._endpoint,
                files={"file": (file.name, file.content, file.content_type)},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error uploading %s: %s", file.name, exc)
            return self._fail(UpstreamUploadError())

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.warning(
                "Upload of %s rejected with %s: %s", file.name, response.status_code, message
            )
            return self._fail(UpstreamUploadError(message or "Upload failed"))

        url = data.get("secure_url") if isinstance(data, dict) else None
        if not url:
            logger.warning("Upload of %s returned no URL", file.name)
            return self._fail(UpstreamUploadError())

        self.store.dispatch(UploadSucceeded(url=url))
        if not self.store.closed:
            self._on_field_change(url)
        return Ok(url)

    def _fail(self, error: DomainError) -> Err:
        self.store.dispatch(UploadFailed(message=error.message))
        return Err(error)

    def _cancel_inflight(self) -> None:
        task, self._inflight = self._inflight, None
        if task is not None and not task.done():
            task.cancel()

    def dispose(self) -> None:
        """Tear the widget down; late responses no longer update anything."""
        self.store.close()
        self._cancel_inflight()
