"""Error kinds of the submission pipeline and the exceptions that carry them."""

from enum import Enum

from surveyrelay.components.models import HandlerResult


class SubmissionError(Enum):
    """Closed set of failures, each with the HTTP status and message returned to the caller."""

    METHOD_NOT_ALLOWED = (405, "Method Not Allowed")
    INVALID_FORMAT = (400, "Invalid submission data format.")
    MISSING_CONTACT_FIELDS = (
        422,
        "Veuillez fournir votre nom, email et numéro de téléphone "
        "pour participer aux concours/tests de produits.",
    )
    INVALID_EMAIL = (422, "Le format de l'email est invalide.")
    DELIVERY_FAILED = (500, "Failed to save to database.")
    PROCESSING_FAILED = (500, "Failed to process submission. Check request format.")

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message

    def to_result(self) -> HandlerResult:
        """Convert the error into the result returned to the caller.

        Returns:
            HandlerResult: Plain text result for METHOD_NOT_ALLOWED, JSON {"error": ...} otherwise.
        """
        if self is SubmissionError.METHOD_NOT_ALLOWED:
            return HandlerResult(status_code=self.status_code, body=self.message)
        return HandlerResult(status_code=self.status_code, body={"error": self.message})


class SubmissionFailure(Exception):
    """Base exception of the pipeline, carries the error kind to respond with."""

    def __init__(self, error: SubmissionError, detail: str | None = None):
        super().__init__(detail or error.message)
        self.error = error


class SubmissionValidationError(SubmissionFailure, ValueError):
    """Exception raised when the submission payload fails validation."""


class DeliveryError(SubmissionFailure):
    """Exception raised when the storage endpoint is unreachable or rejects the record."""

    def __init__(self, detail: str | None = None):
        super().__init__(SubmissionError.DELIVERY_FAILED, detail)
