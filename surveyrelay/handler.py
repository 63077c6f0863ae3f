"""Submission handler: validates a survey submission and forwards it to spreadsheet storage."""

import base64
import json
from datetime import datetime, timezone
from typing import Any, Callable

from surveyrelay.components.models import (
    HandlerResult,
    SubmissionRequest,
    SurveyPayload,
    build_delivery_record,
)
from surveyrelay.config import HandlerSettings, load_settings, logger
from surveyrelay.delivery import SheetsDelivery
from surveyrelay.errors import SubmissionError, SubmissionFailure
from surveyrelay.validation import validate_opt_in, validate_payload_shape


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format a time as ISO-8601 in UTC with milliseconds, e.g. 2025-01-31T12:00:00.000Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


class SubmissionHandler:
    """Handles one survey submission per call, holds no state between calls.

    Arguments:
        settings (HandlerSettings): Endpoint and logging settings.
        delivery (SheetsDelivery | None): Storage collaborator, built from the settings if None.
        clock (Callable[[], datetime] | None): Source of the current time, UTC now if None.
    """

    def __init__(
        self,
        settings: HandlerSettings,
        delivery: SheetsDelivery | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self.delivery = delivery or SheetsDelivery(settings.endpoint_url, timeout=settings.timeout)
        self.clock = clock or utc_now

    def handle(self, request: SubmissionRequest) -> HandlerResult:
        """Run the submission pipeline. Every failure is returned as a result, never raised.

        Arguments:
            request (SubmissionRequest): The inbound request.

        Returns:
            HandlerResult: Status code and body to respond with.
        """
        if request.method != "POST":
            logger.warning("Rejected %s request %s.", request.method, request.request_id)
            return SubmissionError.METHOD_NOT_ALLOWED.to_result()

        try:
            payload = validate_payload_shape(self.parse_body(request))
            responses = payload.survey_responses
            opted_in = validate_opt_in(responses)

            record = build_delivery_record(responses, iso_timestamp(self.clock()))
            self.delivery.deliver(record)
        except SubmissionFailure as e:
            logger.error("Submission %s failed: %s", request.request_id, e)
            return e.error.to_result()
        except Exception:
            logger.exception(
                "Submission %s failed due to an unexpected error.", request.request_id
            )
            return SubmissionError.PROCESSING_FAILED.to_result()

        self.log_success(request, payload, opted_in)
        return HandlerResult.success(request.request_id)

    @staticmethod
    def parse_body(request: SubmissionRequest) -> Any:
        """Decode the request body as strict JSON.

        Arguments:
            request (SubmissionRequest): The inbound request.

        Returns:
            Any: The decoded JSON value.

        Raises:
            SubmissionFailure: If the body is missing, not valid base64 (when flagged) or not
                valid JSON.
        """
        if request.body is None:
            raise SubmissionFailure(SubmissionError.PROCESSING_FAILED, "Request has no body")

        body = request.body
        try:
            if request.is_base64_encoded:
                body = base64.b64decode(body, validate=True).decode("utf-8")
            return json.loads(body, parse_constant=_reject_constant)
        except ValueError as e:
            logger.error("Failed to parse submission %s: %s", request.request_id, e)
            raise SubmissionFailure(SubmissionError.PROCESSING_FAILED, str(e)) from e

    def log_success(self, request: SubmissionRequest, payload: SurveyPayload, opted_in: bool):
        """Log an accepted submission. Answers are only logged when log_payload is enabled."""
        logger.info(
            "Received and validated submission %s (opted in: %s), questions: %s",
            request.request_id,
            opted_in,
            ", ".join(payload.survey_responses),
        )
        if self.settings.log_payload:
            logger.info(
                "Submission %s payload: %s",
                request.request_id,
                payload.model_dump(by_alias=True),
            )


def request_from_event(event: dict[str, Any], context: Any = None) -> SubmissionRequest:
    """Build a request from a function platform event.

    Both the REST style (httpMethod) and the HTTP API style (requestContext.http.method)
    events are supported. The request ID is taken from context.aws_request_id if present.

    Arguments:
        event (dict[str, Any]): The platform event.
        context (Any): The platform context.

    Returns:
        SubmissionRequest: The request to handle.
    """
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")

    fields: dict[str, Any] = {
        "method": method,
        "body": event.get("body"),
        "is_base64_encoded": bool(event.get("isBase64Encoded", False)),
    }
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        fields["request_id"] = request_id
    return SubmissionRequest(**fields)


def result_to_event_response(result: HandlerResult) -> dict[str, Any]:
    """Convert a result into the response shape function platforms expect.

    Arguments:
        result (HandlerResult): The handler result.

    Returns:
        dict[str, Any]: Mapping with statusCode, headers and body.
    """
    if result.is_json:
        content_type = "application/json; charset=utf-8"
        body = json.dumps(result.body, ensure_ascii=False)
    else:
        content_type = "text/plain; charset=utf-8"
        body = result.body
    return {
        "statusCode": result.status_code,
        "headers": {"Content-Type": content_type},
        "body": body,
    }


_default_handler: SubmissionHandler | None = None


def get_default_handler() -> SubmissionHandler:
    """Get the handler built from environment settings, created on first use."""
    global _default_handler
    if _default_handler is None:
        _default_handler = SubmissionHandler(load_settings())
        logger.info("Submission handler initialized.")
    return _default_handler


def lambda_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Entrypoint of the function platform, one call per submission.

    Arguments:
        event (dict[str, Any]): The platform event.
        context (Any): The platform context.

    Returns:
        dict[str, Any]: Mapping with statusCode, headers and body.
    """
    request = request_from_event(event, context)
    return result_to_event_response(get_default_handler().handle(request))
