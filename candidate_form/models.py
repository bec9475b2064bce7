from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.dates import format_wire_date

from .sections import RepeatableSection

# Draft attribute -> wire key, in form order
SCALAR_FIELDS: Dict[str, str] = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "address": "address",
}

SCALAR_LABELS: Dict[str, str] = {
    "first_name": "Nombre",
    "last_name": "Apellido",
    "email": "Correo electrónico",
    "phone": "Teléfono",
    "address": "Dirección",
}

EDUCATION_LABELS: Dict[str, str] = {
    "institution": "Institución",
    "title": "Título",
    "start_date": "Fecha de Inicio",
    "end_date": "Fecha de Fin",
}

WORK_EXPERIENCE_LABELS: Dict[str, str] = {
    "company": "Empresa",
    "position": "Puesto",
    "start_date": "Fecha de Inicio",
    "end_date": "Fecha de Fin",
}


@dataclass
class EducationEntry:
    """One education row of the form; dates stay calendar values while edited."""

    id: str
    institution: str = ""
    title: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "institution": self.institution,
            "title": self.title,
            "startDate": format_wire_date(self.start_date),
            "endDate": format_wire_date(self.end_date),
        }


@dataclass
class WorkExperienceEntry:
    """One work-experience row of the form."""

    id: str
    company: str = ""
    position: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "position": self.position,
            "startDate": format_wire_date(self.start_date),
            "endDate": format_wire_date(self.end_date),
        }


class FileDescriptor(BaseModel):
    """Stored-file reference returned by the upload endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_path: str = Field(alias="filePath", min_length=1)
    file_type: str = Field(alias="fileType")

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class UploadFile:
    """A file picked by the user, held in memory until it is uploaded."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadFile":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class SubmissionStatus:
    """Single submission state of a form instance."""

    state: SubmissionState
    result_id: Optional[Any] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SubmissionStatus":
        return cls(SubmissionState.IDLE)

    @classmethod
    def submitting(cls) -> "SubmissionStatus":
        return cls(SubmissionState.SUBMITTING)

    @classmethod
    def success(cls, result_id: Any) -> "SubmissionStatus":
        return cls(SubmissionState.SUCCESS, result_id=result_id)

    @classmethod
    def failure(cls, message: str) -> "SubmissionStatus":
        return cls(SubmissionState.FAILURE, message=message)


class UploadState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadStatus:
    """State of the résumé upload, independent from the submission status."""

    state: UploadState
    descriptor: Optional[FileDescriptor] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "UploadStatus":
        return cls(UploadState.IDLE)

    @classmethod
    def uploading(cls) -> "UploadStatus":
        return cls(UploadState.UPLOADING)

    @classmethod
    def uploaded(cls, descriptor: FileDescriptor) -> "UploadStatus":
        return cls(UploadState.UPLOADED, descriptor=descriptor)

    @classmethod
    def failed(cls, message: str) -> "UploadStatus":
        return cls(UploadState.FAILED, message=message)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """Message shown to the user after an upload or a submission."""

    kind: NoticeKind
    text: str


@dataclass
class CandidateDraft:
    """Everything the user has entered so far in one form session."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    educations: RepeatableSection[EducationEntry] = field(
        default_factory=lambda: RepeatableSection(
            EducationEntry, "educations", EDUCATION_LABELS
        )
    )
    work_experiences: RepeatableSection[WorkExperienceEntry] = field(
        default_factory=lambda: RepeatableSection(
            WorkExperienceEntry, "workExperiences", WORK_EXPERIENCE_LABELS
        )
    )
    cv: Optional[FileDescriptor] = None

    def clear(self) -> None:
        for attr in SCALAR_FIELDS:
            setattr(self, attr, "")
        self.educations.clear()
        self.work_experiences.clear()
        self.cv = None

    def to_payload(self) -> Dict[str, Any]:
        """Wire body for ``POST /candidates``."""
        payload: Dict[str, Any] = {
            wire_key: getattr(self, attr).strip() for attr, wire_key in SCALAR_FIELDS.items()
        }
        payload["educations"] = [entry.to_payload() for entry in self.educations]
        payload["workExperiences"] = [entry.to_payload() for entry in self.work_experiences]
        payload["cv"] = self.cv.to_payload() if self.cv is not None else None
        return payload
