"""Lifecycle of the single résumé file attached to a candidate form."""

import asyncio
import logging
from typing import Callable, Optional

from .api_client import CandidateApiClient, UPLOAD_ERROR_PREFIX, resolve_error_message
from .exceptions import UploadError
from .models import (
    FileDescriptor,
    Notice,
    NoticeKind,
    UploadFile,
    UploadState,
    UploadStatus,
)

UPLOAD_BUTTON_LABEL = "Subir Archivo"
UPLOADING_BUTTON_LABEL = "Subiendo..."
UPLOAD_SUCCESS_TEXT = "Archivo subido con éxito"


class FileUploadController:
    """
    Tracks one selected file through ``Idle -> Uploading -> Uploaded | Failed``.

    Selecting another file always restarts at ``Idle``, so a descriptor
    obtained for a previous file is never reported for the new one.
    """

    def __init__(
        self,
        api_client: CandidateApiClient,
        on_change: Optional[Callable[[UploadFile], None]] = None,
        on_upload: Optional[Callable[[FileDescriptor], None]] = None,
        on_status: Optional[Callable[[UploadStatus], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_client = api_client
        self._on_change = on_change
        self._on_upload = on_upload
        self._on_status = on_status
        self._logger = logger or logging.getLogger(__name__)
        self._file: Optional[UploadFile] = None
        self._status = UploadStatus.idle()
        # File whose request is currently on the wire
        self._in_flight: Optional[UploadFile] = None
        self.notice: Optional[Notice] = None

    @property
    def file(self) -> Optional[UploadFile]:
        return self._file

    @property
    def status(self) -> UploadStatus:
        return self._status

    @property
    def descriptor(self) -> Optional[FileDescriptor]:
        """Descriptor of the current file, only once its upload has completed."""
        if self._status.state is UploadState.UPLOADED:
            return self._status.descriptor
        return None

    @property
    def is_busy(self) -> bool:
        return self._status.state is UploadState.UPLOADING

    @property
    def button_label(self) -> str:
        return UPLOADING_BUTTON_LABEL if self.is_busy else UPLOAD_BUTTON_LABEL

    @property
    def selected_file_label(self) -> str:
        return f"Selected file: {self._file.name if self._file else 'none'}"

    def select_file(self, file: Optional[UploadFile]) -> None:
        """Track ``file`` instead of the previous one; nothing is uploaded yet."""
        self._file = file
        self.notice = None
        self._set_status(UploadStatus.idle())
        if self._on_change is not None and file is not None:
            self._on_change(file)

    def reset(self) -> None:
        self._file = None
        self.notice = None
        self._set_status(UploadStatus.idle())

    async def upload(self) -> UploadStatus:
        """Upload the selected file; without a file this does nothing."""
        if self._file is None:
            self._logger.debug("Upload requested without a selected file")
            return self._status
        if self._in_flight is self._file:
            self._logger.debug("Upload of %s already in progress", self._file.name)
            return self._status

        file = self._file
        self._in_flight = file
        self.notice = None
        self._set_status(UploadStatus.uploading())
        try:
            descriptor = await asyncio.to_thread(self._api_client.upload_file, file)
        except UploadError as exc:
            self._fail(file, exc.message)
        except Exception as exc:
            self._logger.exception("Unexpected failure while uploading %s", file.name)
            self._fail(
                file, f"{UPLOAD_ERROR_PREFIX}: {resolve_error_message(transport_message=str(exc))}"
            )
        else:
            if file is not self._file:
                # Another file was selected while this one was in flight.
                self._logger.info("Discarding upload result for replaced file %s", file.name)
                return self._status
            self._set_status(UploadStatus.uploaded(descriptor))
            self.notice = Notice(NoticeKind.SUCCESS, UPLOAD_SUCCESS_TEXT)
            self._logger.info("Uploaded %s to %s", file.name, descriptor.file_path)
            if self._on_upload is not None:
                self._on_upload(descriptor)
        finally:
            if self._in_flight is file:
                self._in_flight = None
        return self._status

    def _fail(self, file: UploadFile, message: str) -> None:
        self._logger.error("Failed to upload %s: %s", file.name, message)
        if file is not self._file:
            return
        self._set_status(UploadStatus.failed(message))
        self.notice = Notice(NoticeKind.ERROR, message)

    def _set_status(self, status: UploadStatus) -> None:
        self._status = status
        if self._on_status is not None:
            self._on_status(status)
