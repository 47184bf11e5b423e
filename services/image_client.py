"""
Image lookup client backed by the Unsplash search API.
"""

from typing import Optional

import requests

from config import settings
from logger_config import logger


class ImageClient:
    """Finds a representative image URL for a word."""

    def __init__(
        self,
        access_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize client.

        Args:
            access_key: Unsplash access key; lookups are skipped without one
            api_url: Photo search endpoint
            timeout: Request timeout in seconds
            session: Optional preconfigured HTTP session
        """
        self.access_key = access_key if access_key is not None else settings.unsplash_access_key
        self.api_url = api_url or settings.unsplash_api_url
        self.timeout = timeout if timeout is not None else settings.image_timeout
        self.session = session or requests.Session()

    def lookup(self, word: str) -> str:
        """
        Get the first search result's image URL.

        Args:
            word: Search term

        Returns:
            Image URL, or an empty string when nothing was found
        """
        if not self.access_key:
            logger.debug("Unsplash access key not configured, skipping image lookup")
            return ""
        if not word or not word.strip():
            return ""

        params = {
            "query": word.strip(),
            "per_page": 1,
            "client_id": self.access_key
        }
        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            results = data.get("results") or []
            if not results:
                logger.info(f"No image found for '{word}'")
                return ""
            return (results[0].get("urls") or {}).get("regular") or ""
        except requests.RequestException as e:
            logger.warning(f"Image lookup failed for '{word}': {e}")
            return ""
        except (ValueError, AttributeError, TypeError) as e:
            logger.warning(f"Unexpected image response for '{word}': {e}")
            return ""

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
