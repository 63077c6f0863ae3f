"""Configuration module for the survey relay."""

import logging
import os
import sys
from typing import NamedTuple

from dotenv import load_dotenv

LOGGER_NAME = "surveyrelay"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(level: str = "INFO") -> logging.Logger:
    """Create (or return the already configured) application logger.

    Arguments:
        level (str): The logging level name, e.g. "INFO" or "DEBUG".

    Returns:
        logging.Logger: Logger that writes to stdout.
    """
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level.upper())
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
    return app_logger


logger = get_logger(os.getenv("SURVEY_LOG_LEVEL", "INFO"))

local_env = os.path.join(os.getcwd(), "local.env")
if os.path.isfile(local_env):
    logger.info("Loading local environment variables from %s", local_env)
    load_dotenv(local_env)

DEFAULT_SHEETS_ENDPOINT = (
    "https://script.google.com/macros/s/"
    "AKfycbzRYBQTeuC4Hgp9-S5ILa6LguppGxb_keBHpcOipEo9oT_fwV7aWhgEc4gfO1fkQflV/exec"
)
SHEETS_ENDPOINT_KEY = "SURVEY_SHEETS_ENDPOINT"
DELIVERY_TIMEOUT_KEY = "SURVEY_DELIVERY_TIMEOUT"
LOG_PAYLOAD_KEY = "SURVEY_LOG_PAYLOAD"

CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]


class HandlerSettings(NamedTuple):
    """Settings the submission handler is constructed with.

    Attributes:
        endpoint_url (str): URL of the spreadsheet storage endpoint.
        timeout (float | None): Timeout of the delivery call in seconds, None for no timeout.
        log_payload (bool): Whether the full payload is logged after a successful submission.
    """

    endpoint_url: str
    timeout: float | None = None
    log_payload: bool = False


def env_flag(key: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment.

    Arguments:
        key (str): Name of the environment variable.
        default (bool): Value used when the variable is not set.

    Returns:
        bool: True for "1", "true", "yes" or "on" (case insensitive).
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_timeout(key: str) -> float | None:
    """Read an optional timeout in seconds from the environment.

    Arguments:
        key (str): Name of the environment variable.

    Raises:
        ValueError: If the value is set but is not a positive number.

    Returns:
        float | None: The timeout, or None if the variable is unset or empty.
    """
    value = os.getenv(key, "").strip()
    if not value:
        return None
    timeout = float(value)
    if timeout <= 0:
        raise ValueError(f"{key} must be a positive number of seconds, got {value!r}")
    return timeout


def load_settings() -> HandlerSettings:
    """Build handler settings from the environment.

    Returns:
        HandlerSettings: Settings with the endpoint, timeout and logging flag.
    """
    settings = HandlerSettings(
        endpoint_url=os.getenv(SHEETS_ENDPOINT_KEY, DEFAULT_SHEETS_ENDPOINT),
        timeout=env_timeout(DELIVERY_TIMEOUT_KEY),
        log_payload=env_flag(LOG_PAYLOAD_KEY),
    )
    logger.debug(
        "Loaded handler settings, timeout: %s, log payload: %s",
        settings.timeout,
        settings.log_payload,
    )
    return settings
