"""
CandidateForm: the submission orchestrator.

Owns one ``CandidateDraft`` with its two repeatable sections, the résumé
``FileUploadController`` and the form's single ``SubmissionStatus``.
"""

import asyncio
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from core.dates import parse_wire_date

from .api_client import CandidateApiClient, SUBMISSION_ERROR_PREFIX, resolve_error_message
from .exceptions import SubmissionError, ValidationError
from .models import (
    EDUCATION_LABELS,
    SCALAR_FIELDS,
    SCALAR_LABELS,
    WORK_EXPERIENCE_LABELS,
    CandidateDraft,
    EducationEntry,
    Notice,
    NoticeKind,
    SubmissionState,
    SubmissionStatus,
    UploadState,
    UploadStatus,
    WorkExperienceEntry,
)
from .profile_schema import CandidateProfile
from .sections import RepeatableSection
from .uploader import FileUploadController

REQUIRED_FIELDS = ("first_name", "last_name", "email")
DATE_FIELDS = ("start_date", "end_date")
EMAIL_RX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SUBMIT_SUCCESS_TEXT = "Candidato añadido con éxito"
SUBMIT_ERROR_PREFIX = "Error al añadir candidato"


class CandidateForm:
    """Collects a candidate and submits it in two phases: optional upload, then record."""

    def __init__(
        self,
        api_client: CandidateApiClient,
        logger: Optional[logging.Logger] = None,
        on_section_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._api_client = api_client
        self._logger = logger or logging.getLogger(__name__)
        self.draft = CandidateDraft(
            educations=RepeatableSection(
                EducationEntry, "educations", EDUCATION_LABELS, on_change=on_section_change
            ),
            work_experiences=RepeatableSection(
                WorkExperienceEntry,
                "workExperiences",
                WORK_EXPERIENCE_LABELS,
                on_change=on_section_change,
            ),
        )
        self.uploader = FileUploadController(
            api_client, on_status=self._sync_cv, logger=self._logger
        )
        self.status = SubmissionStatus.idle()
        self.notice: Optional[Notice] = None
        self.field_errors: Dict[str, str] = {}

    # --- editing -------------------------------------------------------

    def set_field(self, name: str, value: Optional[str]) -> None:
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown candidate field: {name}")
        setattr(self.draft, name, value or "")
        self.field_errors.pop(name, None)

    def add_education(self) -> EducationEntry:
        return self.draft.educations.add()

    def remove_education(self, entry_id: str) -> bool:
        return self.draft.educations.remove(entry_id)

    def update_education(self, entry_id: str, field_name: str, value: Any) -> bool:
        return self.draft.educations.update(entry_id, field_name, self._coerce(field_name, value))

    def add_work_experience(self) -> WorkExperienceEntry:
        return self.draft.work_experiences.add()

    def remove_work_experience(self, entry_id: str) -> bool:
        return self.draft.work_experiences.remove(entry_id)

    def update_work_experience(self, entry_id: str, field_name: str, value: Any) -> bool:
        return self.draft.work_experiences.update(
            entry_id, field_name, self._coerce(field_name, value)
        )

    def load_profile(self, profile: CandidateProfile) -> None:
        """Replace the draft contents with a stored profile; the résumé is left untouched."""
        for attr in SCALAR_FIELDS:
            self.set_field(attr, getattr(profile, attr) or "")
        self.draft.educations.clear()
        for education in profile.educations:
            entry = self.add_education()
            for field_name, value in education.model_dump().items():
                self.update_education(entry.id, field_name, value)
        self.draft.work_experiences.clear()
        for experience in profile.work_experiences:
            entry = self.add_work_experience()
            for field_name, value in experience.model_dump().items():
                self.update_work_experience(entry.id, field_name, value)

    @staticmethod
    def _coerce(field_name: str, value: Any) -> Any:
        # Date pickers may hand over the typed text instead of a date;
        # anything short of a complete YYYY-MM-DD leaves the date unset.
        if field_name in DATE_FIELDS and isinstance(value, str):
            try:
                return parse_wire_date(value)
            except ValueError:
                return None
        return value

    def _sync_cv(self, upload_status: UploadStatus) -> None:
        if upload_status.state is UploadState.UPLOADED:
            self.draft.cv = upload_status.descriptor
        else:
            self.draft.cv = None

    # --- submission ----------------------------------------------------

    @property
    def can_submit(self) -> bool:
        return self.status.state is not SubmissionState.SUBMITTING

    def validate(self) -> Dict[str, str]:
        """Field-level messages for everything that blocks submission."""
        errors: Dict[str, str] = {}
        for attr in REQUIRED_FIELDS:
            if not getattr(self.draft, attr).strip():
                errors[attr] = "Este campo es obligatorio"
        email = self.draft.email.strip()
        if email and not EMAIL_RX.match(email):
            errors["email"] = "Correo electrónico no válido"
        return errors

    def build_payload(self) -> Dict[str, Any]:
        return self.draft.to_payload()

    async def submit(self) -> SubmissionStatus:
        """
        Validate, assemble and send the draft.

        Returns the resulting status. While a submission is in flight further
        calls return immediately without touching the network.
        """
        if not self.can_submit:
            self._logger.warning("Submission already in progress; ignoring duplicate submit")
            return self.status

        errors = self.validate()
        if errors:
            self.field_errors = errors
            labelled = {SCALAR_LABELS[name]: message for name, message in errors.items()}
            self._finish_failure(ValidationError(labelled).message)
            return self.status
        self.field_errors = {}

        if self.uploader.status.state is UploadState.UPLOADING:
            self._logger.warning("Résumé upload still in progress; submitting without cv")

        self.status = SubmissionStatus.submitting()
        self.notice = None
        try:
            payload = self.build_payload()
        except ValueError as exc:
            self._finish_failure(str(exc))
            return self.status

        try:
            result = await asyncio.to_thread(self._api_client.submit_candidate, payload)
        except SubmissionError as exc:
            self._finish_failure(_strip_prefix(exc.message, SUBMISSION_ERROR_PREFIX))
            return self.status
        except Exception as exc:
            self._logger.exception("Unexpected failure while submitting candidate")
            self._finish_failure(resolve_error_message(transport_message=str(exc)))
            return self.status

        if not result.ok:
            self._finish_failure(result.error_message)
            return self.status

        self.status = SubmissionStatus.success(result.candidate_id)
        self.notice = Notice(NoticeKind.SUCCESS, SUBMIT_SUCCESS_TEXT)
        self._logger.info("Candidate created with id=%s", result.candidate_id)
        self._clear_draft()
        return self.status

    def _finish_failure(self, message: str) -> None:
        self.status = SubmissionStatus.failure(message)
        self.notice = Notice(NoticeKind.ERROR, f"{SUBMIT_ERROR_PREFIX}: {message}")
        self._logger.error("Candidate submission failed: %s", message)

    def _clear_draft(self) -> None:
        self.draft.clear()
        self.uploader.reset()
        self.field_errors = {}

    # --- rendering -----------------------------------------------------

    def rendered_entry_fields(self) -> List[tuple]:
        """Inputs of both repeatable sections currently on screen."""
        return self.draft.educations.rendered_fields() + self.draft.work_experiences.rendered_fields()


def _strip_prefix(message: str, prefix: str) -> str:
    """Drop the client's own ``"<prefix>: "`` so the notice carries a single prefix."""
    head = f"{prefix}: "
    return message[len(head):] if message.startswith(head) else message
