"""Survey submission endpoint."""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from surveyrelay.components.models import HandlerResult, SubmissionRequest
from surveyrelay.handler import SubmissionHandler, get_default_handler

survey_router = APIRouter()

# Every method is routed to the handler, which answers 405 to anything but POST.
SUBMISSION_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
SUBMISSION_PATH = "/submit-survey"
REQUEST_ID_HEADERS = ("X-Nf-Request-Id", "X-Request-Id")


def get_submission_handler() -> SubmissionHandler:
    """Dependency that provides the submission handler."""
    return get_default_handler()


def resolve_request_id(request: Request) -> str:
    """Get the platform request ID from the headers, or generate one.

    Arguments:
        request (Request): The incoming HTTP request.

    Returns:
        str: The request ID.
    """
    for header in REQUEST_ID_HEADERS:
        if request_id := request.headers.get(header):
            return request_id
    return str(uuid.uuid4())


def to_response(result: HandlerResult) -> Response:
    """Convert a handler result into a FastAPI response.

    Arguments:
        result (HandlerResult): The handler result.

    Returns:
        Response: JSON response, or plain text response for text bodies.
    """
    if result.is_json:
        return JSONResponse(status_code=result.status_code, content=result.body)
    return PlainTextResponse(status_code=result.status_code, content=result.body)


@survey_router.api_route(SUBMISSION_PATH, methods=SUBMISSION_METHODS)
async def submit_survey(
    request: Request, handler: SubmissionHandler = Depends(get_submission_handler)
) -> Response:
    """Receive a survey submission, validate it and forward it to spreadsheet storage.

    Arguments:
        request (Request): The incoming HTTP request with the raw JSON body.
        handler (SubmissionHandler): The submission handler.

    Returns:
        Response: The handler result as an HTTP response.
    """
    raw_body = await request.body()
    submission = SubmissionRequest(
        method=request.method,
        body=raw_body.decode("utf-8", errors="replace"),
        request_id=resolve_request_id(request),
    )
    result = await run_in_threadpool(handler.handle, submission)
    return to_response(result)
