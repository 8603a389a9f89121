"""
Remote catalog retrieval.
One GET against the movies.json source, no retries.
"""

import requests
from pydantic import ValidationError

from models import Catalog
from utils.logger import get_logger

from .errors import DecodeError, HttpError, TransportError

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30

HEADERS = {
    "Accept": "application/json",
    "User-Agent": "CineLyon/0.1",
}


class CatalogFetcher:
    """Fetch and decode the upstream catalog."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> Catalog:
        """
        Download the catalog.

        Raises:
            TransportError: connection failure or timeout
            HttpError: non-2xx status
            DecodeError: body is not a valid catalog
        """
        logger.debug("Fetching catalog", url=self.url, timeout=self.timeout)

        try:
            response = self.session.get(self.url, headers=HEADERS, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, self.url)

        try:
            catalog = Catalog.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"Invalid catalog payload: {e.error_count()} error(s)") from e

        logger.info(
            "Catalog fetched",
            url=self.url,
            days=len(catalog.days),
            generated_at=catalog.generated_at,
        )
        return catalog
