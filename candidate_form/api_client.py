"""
HTTP client for the candidate service.

Two retry-free operations:
- ``upload_file``: multipart ``POST /upload`` returning a ``FileDescriptor``
- ``submit_candidate``: JSON ``POST /candidates`` returning a ``SubmissionResult``

The client is an explicit value built around an injected ``requests.Session``,
so callers and tests decide which transport it talks to.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from config import ApiConfig
from core.logger import bind_context, get_structured_logger

from .exceptions import SubmissionError, UploadError
from .models import FileDescriptor, UploadFile

UPLOAD_PATH = "/upload"
CANDIDATES_PATH = "/candidates"

UPLOAD_ERROR_PREFIX = "Error al subir el archivo"
SUBMISSION_ERROR_PREFIX = "Error al enviar datos del candidato"
GENERIC_ERROR_MESSAGE = "Error desconocido"

# Keys of an error body, most specific first
ERROR_BODY_KEYS = ("message", "error")

HTTP_CREATED = 201


def _server_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ERROR_BODY_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None
    if isinstance(body, str) and body.strip():
        return body.strip()
    return None


def resolve_error_message(
    body: Any = None,
    transport_message: Optional[str] = None,
    fallback: str = GENERIC_ERROR_MESSAGE,
) -> str:
    """
    Pick the most specific error text available.

    Order: server ``message``, server ``error``, plain-text body,
    transport-level message, ``fallback``.
    """
    candidates = (_server_message(body), transport_message, fallback)
    return next(candidate for candidate in candidates if candidate)


def _response_body(response: requests.Response) -> Any:
    """Decoded JSON body, the raw text when it is not JSON, ``None`` when empty."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of ``POST /candidates`` as seen on the wire."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status_code == HTTP_CREATED

    @property
    def candidate_id(self) -> Optional[Any]:
        if isinstance(self.body, dict):
            return self.body.get("id")
        return None

    @property
    def error_message(self) -> Optional[str]:
        if self.ok:
            return None
        return resolve_error_message(
            self.body, transport_message=f"HTTP {self.status_code}"
        )

    def raise_for_status(self) -> None:
        if not self.ok:
            raise SubmissionError(
                f"{SUBMISSION_ERROR_PREFIX}: {self.error_message}",
                status_code=self.status_code,
                body=self.body,
            )


class CandidateApiClient:
    """Talks to the storage and candidate endpoints of one service instance."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._logger = bind_context(get_structured_logger(__name__), base_url=self.base_url)

    @classmethod
    def from_config(
        cls, api_config: ApiConfig, session: Optional[requests.Session] = None
    ) -> "CandidateApiClient":
        return cls(api_config.base_url, session=session, timeout=api_config.timeout_seconds)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def upload_file(self, file: UploadFile) -> FileDescriptor:
        """
        Send ``file`` to the storage endpoint.

        Args:
            file: The selected résumé

        Returns:
            The descriptor the server assigned to the stored file

        Raises:
            UploadError: On transport failure, non-2xx status or a malformed reply
        """
        # requests sets "multipart/form-data; boundary=..." for ``files=``
        files = {"file": (file.name, file.content, file.content_type)}
        try:
            response = self._session.post(
                self._url(UPLOAD_PATH), files=files, timeout=self.timeout
            )
        except requests.RequestException as exc:
            message = resolve_error_message(transport_message=str(exc) or None)
            self._logger.error("candidate_upload_failed", file_name=file.name, error=message)
            raise UploadError(f"{UPLOAD_ERROR_PREFIX}: {message}") from exc

        body = _response_body(response)
        if not response.ok:
            message = resolve_error_message(
                body, transport_message=response.reason or f"HTTP {response.status_code}"
            )
            self._logger.error(
                "candidate_upload_rejected",
                file_name=file.name,
                status_code=response.status_code,
                error=message,
            )
            raise UploadError(
                f"{UPLOAD_ERROR_PREFIX}: {message}", status_code=response.status_code
            )

        try:
            descriptor = FileDescriptor.model_validate(body)
        except PydanticValidationError as exc:
            self._logger.error("candidate_upload_malformed_reply", file_name=file.name, body=body)
            raise UploadError(
                f"{UPLOAD_ERROR_PREFIX}: respuesta inesperada del servidor",
                status_code=response.status_code,
            ) from exc

        self._logger.info(
            "candidate_file_uploaded", file_name=file.name, file_path=descriptor.file_path
        )
        return descriptor

    def submit_candidate(self, payload: Dict[str, Any]) -> SubmissionResult:
        """
        Send the assembled candidate record.

        HTTP error statuses are returned, not raised; only a request that
        never produced a response raises.

        Raises:
            SubmissionError: When the service could not be reached
        """
        try:
            response = self._session.post(
                self._url(CANDIDATES_PATH),
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            message = resolve_error_message(transport_message=str(exc) or None)
            self._logger.error("candidate_submission_failed", error=message)
            raise SubmissionError(f"{SUBMISSION_ERROR_PREFIX}: {message}") from exc

        result = SubmissionResult(status_code=response.status_code, body=_response_body(response))
        if result.ok:
            self._logger.info("candidate_submitted", candidate_id=result.candidate_id)
        else:
            self._logger.warning(
                "candidate_submission_rejected",
                status_code=result.status_code,
                error=result.error_message,
            )
        return result

    def send_candidate_data(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Submit and return the echoed record, raising ``SubmissionError`` unless created."""
        result = self.submit_candidate(payload)
        result.raise_for_status()
        return result.body if isinstance(result.body, dict) else {}
