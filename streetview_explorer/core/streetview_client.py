"""
Street View Static API client - one GET per call, failures mapped to service errors.
"""
import logging
from typing import Optional

import requests

from streetview_explorer.config import REQUEST_TIMEOUT, STREETVIEW_IMAGE_URL, STREETVIEW_METADATA_URL
from streetview_explorer.errors import ConfigurationError, NetworkError, UpstreamError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "GOOGLE_API_KEY not found in environment variables. Please set your Google Maps API key."


class StreetViewClient:
    """Thin wrapper around the image and metadata endpoints.

    The API key is attached to every request here so callers never handle it,
    and it is kept out of the log lines.
    """

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        image_url: str = STREETVIEW_IMAGE_URL,
        metadata_url: str = STREETVIEW_METADATA_URL,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.image_url = image_url
        self.metadata_url = metadata_url

    def fetch_image(self, params: dict) -> bytes:
        """Download raw image bytes for the given query parameters."""
        response = self._get(self.image_url, params, "API")
        if not response.content:
            logger.error("API request returned an empty body")
            raise UpstreamError("API request returned an empty image", status_code=response.status_code)
        logger.info(f"Received {len(response.content)} bytes of image data")
        return response.content

    def fetch_metadata(self, params: dict) -> dict:
        """Fetch the JSON metadata document for the given query parameters."""
        response = self._get(self.metadata_url, params, "Metadata API")
        try:
            data = response.json()
        except ValueError:
            logger.error("Metadata API returned a body that is not JSON")
            raise UpstreamError("Metadata API returned invalid JSON", status_code=response.status_code) from None
        if not isinstance(data, dict):
            raise UpstreamError("Metadata API returned an unexpected payload", status_code=response.status_code)
        return data

    def _get(self, url: str, params: dict, label: str) -> requests.Response:
        if not self.api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        logger.info(f"Making {label} request: {url} {params}")
        try:
            response = self.session.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)
        except requests.Timeout as e:
            logger.error(f"{label} request timed out after {self.timeout}s")
            raise NetworkError(f"Network error: request timed out ({e})") from e
        except requests.RequestException as e:
            logger.error(f"{label} request failed - no response received: {str(e)}")
            raise NetworkError(f"Network error: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{label} request failed with response: {response.status_code} {response.reason}")
            raise UpstreamError(
                f"{label} request failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        logger.info(f"{label} request successful: {response.status_code}")
        return response
