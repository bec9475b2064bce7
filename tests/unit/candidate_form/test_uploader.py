import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from candidate_form.exceptions import UploadError
from candidate_form.models import FileDescriptor, NoticeKind, UploadFile, UploadState
from candidate_form.uploader import FileUploadController


@pytest.fixture
def cv_file():
    return UploadFile(name="test.pdf", content=b"content", content_type="application/pdf")


@pytest.fixture
def callbacks():
    return MagicMock()


@pytest.fixture
def uploader(fake_api, callbacks):
    return FileUploadController(
        fake_api, on_change=callbacks.on_change, on_upload=callbacks.on_upload
    )


def test_initial_view_state(uploader):
    assert uploader.status.state is UploadState.IDLE
    assert uploader.is_busy is False
    assert uploader.button_label == "Subir Archivo"
    assert uploader.selected_file_label == "Selected file: none"


def test_select_file_notifies_and_shows_name(uploader, callbacks, cv_file, fake_api):
    uploader.select_file(cv_file)

    callbacks.on_change.assert_called_once_with(cv_file)
    assert uploader.selected_file_label == "Selected file: test.pdf"
    assert uploader.status.state is UploadState.IDLE
    assert fake_api.uploads == []


@pytest.mark.asyncio
async def test_upload_success_reports_descriptor(uploader, callbacks, cv_file, fake_api):
    fake_api.upload_outcome = FileDescriptor(filePath="/uploads/test.pdf", fileType="application/pdf")
    uploader.select_file(cv_file)

    status = await uploader.upload()

    assert status.state is UploadState.UPLOADED
    assert uploader.descriptor == fake_api.upload_outcome
    assert fake_api.uploads == [cv_file]
    callbacks.on_upload.assert_called_once_with(fake_api.upload_outcome)
    assert uploader.notice.kind is NoticeKind.SUCCESS
    assert uploader.notice.text == "Archivo subido con éxito"


@pytest.mark.asyncio
async def test_upload_without_file_makes_no_call(uploader, callbacks, fake_api):
    status = await uploader.upload()

    assert status.state is UploadState.IDLE
    assert fake_api.uploads == []
    callbacks.on_upload.assert_not_called()


@pytest.mark.asyncio
async def test_busy_indicator_is_shown_while_uploading(uploader, cv_file, fake_api):
    seen = {}

    def observe():
        seen["busy"] = uploader.is_busy
        seen["label"] = uploader.button_label
        seen["state"] = uploader.status.state

    fake_api.during_upload = observe
    uploader.select_file(cv_file)

    await uploader.upload()

    assert seen == {"busy": True, "label": "Subiendo...", "state": UploadState.UPLOADING}
    assert uploader.is_busy is False


@pytest.mark.asyncio
async def test_network_rejection_clears_busy_and_restores_label(uploader, callbacks, cv_file, fake_api, caplog):
    fake_api.upload_outcome = UploadError("Error al subir el archivo: Network error")
    uploader.select_file(cv_file)

    with caplog.at_level(logging.ERROR):
        status = await uploader.upload()

    assert status.state is UploadState.FAILED
    assert status.message == "Error al subir el archivo: Network error"
    assert uploader.is_busy is False
    assert uploader.button_label == "Subir Archivo"
    assert uploader.descriptor is None
    assert uploader.notice.kind is NoticeKind.ERROR
    callbacks.on_upload.assert_not_called()
    assert any(record.levelno == logging.ERROR for record in caplog.records)


@pytest.mark.asyncio
async def test_unexpected_exception_still_leaves_uploading(uploader, cv_file, fake_api, caplog):
    fake_api.upload_outcome = RuntimeError("socket closed")
    uploader.select_file(cv_file)

    with caplog.at_level(logging.ERROR):
        status = await uploader.upload()

    assert status.state is UploadState.FAILED
    assert status.message == "Error al subir el archivo: socket closed"
    assert uploader.is_busy is False


@pytest.mark.asyncio
async def test_selecting_new_file_drops_previous_descriptor(uploader, cv_file):
    uploader.select_file(cv_file)
    await uploader.upload()
    assert uploader.descriptor is not None

    uploader.select_file(UploadFile(name="other.pdf", content=b"other"))

    assert uploader.status.state is UploadState.IDLE
    assert uploader.descriptor is None


@pytest.mark.asyncio
async def test_retry_after_failure_can_succeed(uploader, cv_file, fake_api):
    fake_api.upload_outcome = UploadError("Error al subir el archivo: timeout")
    uploader.select_file(cv_file)
    await uploader.upload()

    fake_api.upload_outcome = FileDescriptor(filePath="/uploads/test.pdf", fileType="application/pdf")
    status = await uploader.upload()

    assert status.state is UploadState.UPLOADED
    assert len(fake_api.uploads) == 2


@pytest.mark.asyncio
async def test_result_for_replaced_file_is_discarded(uploader, callbacks, cv_file, fake_api, gate):
    fake_api.upload_gate = gate
    uploader.select_file(cv_file)

    task = asyncio.create_task(uploader.upload())
    await asyncio.sleep(0)
    assert uploader.is_busy is True

    replacement = UploadFile(name="other.pdf", content=b"other")
    uploader.select_file(replacement)
    gate.set()
    status = await task

    assert status.state is UploadState.IDLE
    assert uploader.file is replacement
    assert uploader.descriptor is None
    assert uploader.is_busy is False
    callbacks.on_upload.assert_not_called()


@pytest.mark.asyncio
async def test_selecting_file_mid_upload_clears_busy_indicator(uploader, cv_file, fake_api, gate):
    fake_api.upload_gate = gate
    uploader.select_file(cv_file)

    task = asyncio.create_task(uploader.upload())
    await asyncio.sleep(0)
    uploader.select_file(UploadFile(name="b.pdf", content=b"b"))

    assert uploader.status.state is UploadState.IDLE
    assert uploader.is_busy is False
    assert uploader.button_label == "Subir Archivo"

    gate.set()
    await task
    assert uploader.is_busy is False


@pytest.mark.asyncio
async def test_replacement_file_can_upload_while_old_request_runs(uploader, callbacks, cv_file, fake_api, gate):
    fake_api.upload_gate = gate
    uploader.select_file(cv_file)
    stale = asyncio.create_task(uploader.upload())
    await asyncio.sleep(0)

    replacement = UploadFile(name="b.pdf", content=b"b")
    uploader.select_file(replacement)
    fresh = asyncio.create_task(uploader.upload())
    await asyncio.sleep(0)
    assert uploader.status.state is UploadState.UPLOADING

    gate.set()
    await stale
    status = await fresh

    assert len(fake_api.uploads) == 2
    assert replacement in fake_api.uploads
    assert status.state is UploadState.UPLOADED
    assert uploader.is_busy is False
    callbacks.on_upload.assert_called_once_with(fake_api.upload_outcome)


@pytest.mark.asyncio
async def test_second_upload_while_in_flight_is_ignored(uploader, cv_file, fake_api, gate):
    fake_api.upload_gate = gate
    uploader.select_file(cv_file)

    first = asyncio.create_task(uploader.upload())
    await asyncio.sleep(0)
    second_status = await uploader.upload()
    gate.set()
    await first

    assert second_status.state is UploadState.UPLOADING
    assert len(fake_api.uploads) == 1


def test_on_status_receives_every_transition(fake_api, cv_file):
    transitions = []
    uploader = FileUploadController(fake_api, on_status=lambda s: transitions.append(s.state))

    uploader.select_file(cv_file)
    asyncio.run(uploader.upload())

    assert transitions == [UploadState.IDLE, UploadState.UPLOADING, UploadState.UPLOADED]
