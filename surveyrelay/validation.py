"""Input validation of survey submissions."""

import re
from typing import Any, NamedTuple

from pydantic import ValidationError

from surveyrelay.components.models import SurveyPayload
from surveyrelay.config import logger
from surveyrelay.errors import SubmissionError, SubmissionValidationError

OPT_IN_QUESTION = "q21"
OPT_OUT_ANSWER = "No, just completing the survey"
NAME_FIELD = "name-q21"
EMAIL_FIELD = "email-q21"
PHONE_FIELD = "phone-q21"
BOM = "\ufeff"

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class OptInFields(NamedTuple):
    """Contact details required from respondents who opted in to contests and product tests."""

    name: Any
    email: Any
    phone: Any

    @classmethod
    def from_responses(cls, responses: dict[str, Any]) -> "OptInFields":
        """Pick the contact fields out of the survey responses, missing ones are None."""
        return cls(
            name=responses.get(NAME_FIELD),
            email=responses.get(EMAIL_FIELD),
            phone=responses.get(PHONE_FIELD),
        )


def validate_payload_shape(data: Any) -> SurveyPayload:
    """Validate that the decoded body is an object with a surveyResponses object.

    Arguments:
        data: The decoded JSON body.

    Returns:
        SurveyPayload: The validated payload.

    Raises:
        SubmissionValidationError: If the body is falsy, not an object, or surveyResponses
            is missing or not an object.
    """
    if not data or not isinstance(data, dict):
        logger.error("Validation Error: submission body is empty or not an object.")
        raise SubmissionValidationError(SubmissionError.INVALID_FORMAT)

    try:
        return SurveyPayload.model_validate(data)
    except ValidationError:
        logger.error("Validation Error: missing or invalid surveyResponses object.")
        raise SubmissionValidationError(SubmissionError.INVALID_FORMAT)


def has_opted_in(responses: dict[str, Any]) -> bool:
    """Check whether the respondent opted in via the opt-in question.

    Arguments:
        responses: Mapping of question ID to raw answer.

    Returns:
        True if the answer is a list with at least one option other than the opt-out answer.
    """
    answers = responses.get(OPT_IN_QUESTION)
    if not isinstance(answers, list):
        return False
    return any(option != OPT_OUT_ANSWER for option in answers)


def _is_filled(value: Any) -> bool:
    # The byte order mark counts as blank, like in browser trim().
    return isinstance(value, str) and value.replace(BOM, "").strip() != ""


def validate_email(email: str) -> bool:
    """Validate the basic shape of an email address: local@domain.tld without whitespace.

    Arguments:
        email: The email address as submitted, not trimmed.

    Returns:
        True if the email is valid

    Raises:
        SubmissionValidationError: If the email does not match the pattern.
    """
    if not EMAIL_PATTERN.fullmatch(email):
        logger.error("Validation Error: invalid email format for %s follow-up.", OPT_IN_QUESTION)
        raise SubmissionValidationError(SubmissionError.INVALID_EMAIL)
    return True


def validate_opt_in(responses: dict[str, Any]) -> bool:
    """Require name, email and phone from respondents who opted in.

    Nothing is checked when the respondent did not opt in.

    Arguments:
        responses: Mapping of question ID to raw answer.

    Returns:
        True if the respondent opted in and the contact fields are valid, False if the
        respondent did not opt in.

    Raises:
        SubmissionValidationError: If a contact field is missing, not a string or blank, or if
            the email is malformed.
    """
    if not has_opted_in(responses):
        return False

    fields = OptInFields.from_responses(responses)
    if not all(_is_filled(value) for value in fields):
        logger.error(
            "Validation Error: missing name, email or phone for %s follow-up.", OPT_IN_QUESTION
        )
        raise SubmissionValidationError(SubmissionError.MISSING_CONTACT_FIELDS)

    return validate_email(fields.email)
