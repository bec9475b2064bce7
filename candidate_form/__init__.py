from .api_client import CandidateApiClient, SubmissionResult, resolve_error_message
from .exceptions import CandidateFormError, SubmissionError, UploadError, ValidationError
from .form import CandidateForm
from .models import (
    CandidateDraft,
    EducationEntry,
    FileDescriptor,
    Notice,
    NoticeKind,
    SubmissionState,
    SubmissionStatus,
    UploadFile,
    UploadState,
    UploadStatus,
    WorkExperienceEntry,
)
from .profile_schema import CandidateProfile
from .profile_store import ProfileStore
from .sections import RepeatableSection
from .uploader import FileUploadController

__all__ = [
    "CandidateApiClient",
    "SubmissionResult",
    "resolve_error_message",
    "CandidateFormError",
    "SubmissionError",
    "UploadError",
    "ValidationError",
    "CandidateForm",
    "CandidateDraft",
    "EducationEntry",
    "FileDescriptor",
    "Notice",
    "NoticeKind",
    "SubmissionState",
    "SubmissionStatus",
    "UploadFile",
    "UploadState",
    "UploadStatus",
    "WorkExperienceEntry",
    "CandidateProfile",
    "ProfileStore",
    "RepeatableSection",
    "FileUploadController",
]
