"""Main entry point for the survey relay API application."""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from surveyrelay.components.survey import SUBMISSION_PATH, survey_router, to_response
from surveyrelay.config import CORS_ORIGINS, logger
from surveyrelay.errors import SubmissionError

# Configure logging to suppress INFO level access logs
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

app = FastAPI(title="Survey Relay")


def get_client_ip(request: Request) -> str:
    """Get the client IP, taking proxy headers into account.

    Arguments:
        request (Request): The incoming HTTP request.

    Returns:
        str: The client IP address or "unknown".
    """
    if forwarded_for := request.headers.get("X-Forwarded-For"):
        return forwarded_for.split(",")[0].strip()
    if real_ip := request.headers.get("X-Real-IP"):
        return real_ip
    return request.client.host if request.client else "unknown"


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable) -> Response:
    """Middleware to log submission requests with client IP, status and timing.

    Only requests to the submission endpoint are logged, other paths pass through.

    Arguments:
        request (Request): The incoming HTTP request.
        call_next (Callable): The next handler in the processing chain.

    Returns:
        Response: The HTTP response returned by the next handler in the chain.
    """
    if request.url.path != SUBMISSION_PATH:
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)

    user_agent = request.headers.get("user-agent", "unknown")
    logger.info(
        "IP: %s - Origin: %s - %s %s - Status: %s - Time: %.3fs - UA: %s",
        get_client_ip(request),
        request.headers.get("origin", "not_specified"),
        request.method,
        request.url.path,
        response.status_code,
        time.time() - start_time,
        user_agent[:50] + "..." if len(user_agent) > 50 else user_agent,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(survey_router)


@app.get("/health")
def health():
    """Endpoint to check that the service is up."""
    return {"status": "ok"}


@app.exception_handler(StarletteHTTPException)
async def submission_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answer methods the submission route does not list with the plain text 405.

    Arguments:
        request (Request): The incoming HTTP request.
        exc (StarletteHTTPException): The exception raised by routing.

    Returns:
        Response: The plain text 405 on the submission path, FastAPI's default response otherwise.
    """
    if exc.status_code == 405 and request.url.path == SUBMISSION_PATH:
        logger.warning("Rejected %s request to %s.", request.method, request.url.path)
        return to_response(SubmissionError.METHOD_NOT_ALLOWED.to_result())
    return await http_exception_handler(request, exc)
