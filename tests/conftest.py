import pytest
import threading
from unittest.mock import MagicMock
import sys

# Adjust the python path to import the project modules
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from candidate_form import FileDescriptor, SubmissionResult


class FakeApiClient:
    """
    In-memory stand-in for CandidateApiClient.

    Records every call and replays the configured outcomes. A ``gate``
    (threading.Event) makes the next call block until the test releases it.
    """

    def __init__(self):
        self.uploads = []
        self.payloads = []
        self.upload_outcome = FileDescriptor(filePath="/uploads/test.pdf", fileType="application/pdf")
        self.submit_outcome = SubmissionResult(status_code=201, body={"id": 1})
        self.upload_gate = None
        self.submit_gate = None
        self.during_upload = None

    def upload_file(self, file):
        self.uploads.append(file)
        if self.during_upload is not None:
            self.during_upload()
        if self.upload_gate is not None:
            self.upload_gate.wait(timeout=5)
        if isinstance(self.upload_outcome, Exception):
            raise self.upload_outcome
        return self.upload_outcome

    def submit_candidate(self, payload):
        self.payloads.append(payload)
        if self.submit_gate is not None:
            self.submit_gate.wait(timeout=5)
        if isinstance(self.submit_outcome, Exception):
            raise self.submit_outcome
        return self.submit_outcome


@pytest.fixture
def fake_api():
    return FakeApiClient()


@pytest.fixture
def gate():
    event = threading.Event()
    yield event
    # Never leave a worker thread blocked after a failed assertion.
    event.set()


def make_response(status_code=200, json_body=None, text="", reason="OK"):
    """Build a MagicMock shaped like requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def response_factory():
    return make_response
