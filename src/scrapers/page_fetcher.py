# src/scrapers/page_fetcher.py

"""Raw page fetcher built on a browser-impersonating curl_cffi session."""

import logging

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import TransientFetchError


class PageFetcher:
    """Retrieves page bodies. No parsing, no retries.

    The underlying session keeps one curl handle per thread, so a
    single fetcher can serve concurrent ``asyncio.to_thread`` calls.
    """

    def __init__(self, timeout: int | None = None) -> None:
        self.logger = logging.getLogger("price_monitor.fetcher")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = (
            timeout or self.settings.REQUEST_TIMEOUT
        )

    def close(self) -> None:
        """Release the underlying session."""
        self.session.close()

    def fetch(self, url: str) -> str:
        """GET *url* and return the decoded body.

        Raises:
            TransientFetchError: unreachable host, timeout or a
                non-2xx status.
        """
        try:
            resp = self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "Request error for %s: %s", url, exc,
            )
            raise TransientFetchError(url, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "HTTP %d for %s", resp.status_code, url,
            )
            raise TransientFetchError(
                url,
                f"HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        self.logger.debug(
            "Fetched %s (%d bytes)", url, len(resp.text),
        )
        return resp.text
