from typing import Any, Dict, Optional


class CandidateFormError(Exception):
    """Base class for every recoverable candidate form failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(CandidateFormError):
    """Raised before any network call when required fields are missing or malformed."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        details = "; ".join(f"{name}: {msg}" for name, msg in self.field_errors.items())
        super().__init__(f"Datos del formulario no válidos: {details}")


class UploadError(CandidateFormError):
    """Exception raised when the storage endpoint rejects or never receives a file."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SubmissionError(CandidateFormError):
    """Exception raised when the candidate endpoint does not create the candidate."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
