"""Survey relay models used to validate and structure submissions and results."""

import json
import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

MULTI_SELECT_SEPARATOR = ", "
SUCCESS_MESSAGE = "Survey submitted successfully!"


class SubmissionRequest(BaseModel):
    """An inbound request as handed over by the hosting platform."""

    method: str
    body: str | None = None
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    # Function platforms may deliver the body base64 encoded.
    is_base64_encoded: bool = False


class HandlerResult(BaseModel):
    """Status code and body returned for a request. A str body is sent as plain text."""

    status_code: int
    body: dict[str, str] | str

    @property
    def is_json(self) -> bool:
        """Whether the body has to be serialized as JSON."""
        return isinstance(self.body, dict)

    @classmethod
    def success(cls, submission_id: str) -> "HandlerResult":
        """Create the result of an accepted submission.

        Arguments:
            submission_id (str): Identifier of the request provided by the platform.

        Returns:
            HandlerResult: 200 result with the success message and the submission ID.
        """
        return cls(
            status_code=200,
            body={"message": SUCCESS_MESSAGE, "submissionId": submission_id},
        )


class SurveyPayload(BaseModel):
    """Payload model of a survey submission, only surveyResponses is required."""

    # Only the wire name surveyResponses is accepted.
    model_config = ConfigDict(extra="allow")

    survey_responses: dict[str, Any] = Field(alias="surveyResponses")


class ScalarAnswer(BaseModel):
    """Answer to a single choice or free text question."""

    kind: Literal["scalar"] = "scalar"
    value: str


class MultiSelectAnswer(BaseModel):
    """Answer to a multi-select question, options kept in the order they were sent."""

    kind: Literal["multi"] = "multi"
    values: list[str]


Answer = Annotated[Union[ScalarAnswer, MultiSelectAnswer], Field(discriminator="kind")]


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if item is None else _as_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def parse_answer(raw: Any) -> Answer:
    """Build the tagged answer from a raw JSON value.

    Lists become multi-select answers, where null options are rendered as empty strings.
    Any other value becomes a scalar answer. Numbers, booleans and null are rendered the way
    browsers stringify form values, nested lists are joined with "," and objects keep their
    JSON text.

    Arguments:
        raw (Any): The decoded JSON value of a question.

    Returns:
        ScalarAnswer | MultiSelectAnswer: The tagged answer.
    """
    if isinstance(raw, list):
        return MultiSelectAnswer(values=["" if item is None else _as_text(item) for item in raw])
    return ScalarAnswer(value=_as_text(raw))


def flatten_answer(answer: Answer) -> str:
    """Render an answer as the single string stored in the spreadsheet.

    Arguments:
        answer (ScalarAnswer | MultiSelectAnswer): The tagged answer.

    Returns:
        str: The scalar value, or the options joined with ", ".
    """
    if isinstance(answer, MultiSelectAnswer):
        return MULTI_SELECT_SEPARATOR.join(answer.values)
    return answer.value


def build_delivery_record(responses: dict[str, Any], timestamp: str) -> dict[str, str]:
    """Flatten survey responses into the record sent to the storage endpoint.

    The timestamp is set first, a question that is itself called "timestamp" replaces it.

    Arguments:
        responses (dict[str, Any]): Mapping of question ID to raw answer.
        timestamp (str): ISO-8601 time of handling.

    Returns:
        dict[str, str]: The delivery record, all values are strings.
    """
    record = {"timestamp": timestamp}
    for question_id, raw in responses.items():
        record[question_id] = flatten_answer(parse_answer(raw))
    return record
