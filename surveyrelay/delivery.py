"""Delivery of flattened submissions to the spreadsheet storage endpoint."""

import requests

from surveyrelay.config import logger
from surveyrelay.errors import DeliveryError


class SheetsDelivery:
    """Posts delivery records to the spreadsheet endpoint as multipart/form-data.

    Arguments:
        endpoint_url (str): URL of the storage endpoint.
        timeout (float | None): Timeout of the call in seconds, None to wait indefinitely.
        session (requests.Session | None): Session to send requests with. If None, every
            delivery opens and closes its own session.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session

    @staticmethod
    def form_fields(record: dict[str, str]) -> list[tuple[str, tuple[None, str]]]:
        """Convert a record into requests multipart fields without file names.

        Arguments:
            record (dict[str, str]): The delivery record.

        Returns:
            list[tuple[str, tuple[None, str]]]: One form field per record entry, in record order.
        """
        return [(name, (None, value)) for name, value in record.items()]

    def _post(self, session: requests.Session, record: dict[str, str]) -> requests.Response:
        return session.post(self.endpoint_url, files=self.form_fields(record), timeout=self.timeout)

    def deliver(self, record: dict[str, str]) -> None:
        """Send the record to the storage endpoint in a single attempt.

        Arguments:
            record (dict[str, str]): The delivery record.

        Raises:
            DeliveryError: If the call fails or the endpoint answers with a non 2xx status.
        """
        try:
            if self.session is not None:
                response = self._post(self.session, record)
            else:
                with requests.Session() as session:
                    response = self._post(session, record)
        except Exception as e:
            logger.error("Error submitting to the spreadsheet endpoint: %s", e)
            raise DeliveryError(f"Delivery call failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(
                "Failed to submit to the spreadsheet endpoint, status: %s", response.status_code
            )
            raise DeliveryError(f"Endpoint answered with status {response.status_code}")

        logger.debug("Record with %d fields delivered.", len(record))
