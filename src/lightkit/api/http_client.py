import logging
from typing import Optional

import requests

from lightkit.errors import LampRequestError

logger = logging.getLogger(__name__)

HEADERS = {"Content-Type": "application/json"}


class HttpClient:
    """Thin wrapper around a requests session bound to one lamp's base url."""

    def __init__(self, base_url: str, *, timeout: float = 5, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = timeout

    def close(self) -> None:
        self.session.close()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path}" if path else self.base_url

    def get(self, path: str) -> str:
        url = self.url(path)
        logger.debug("GET %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise LampRequestError(url, str(e)) from e

        self._check(url, r)
        return r.text

    def put(self, path: str, body: str) -> str:
        url = self.url(path)
        logger.debug("PUT %s %s", url, body)
        try:
            r = self.session.put(url, data=body, headers=HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            raise LampRequestError(url, str(e)) from e

        self._check(url, r)
        self._check_errors(url, r)
        return r.text

    @staticmethod
    def _check(url: str, r: requests.Response) -> None:
        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise LampRequestError(url, f"HTTP {r.status_code}: {r.text}", status=r.status_code) from e

    @staticmethod
    def _check_errors(url: str, r: requests.Response) -> None:
        # The Hue bridge answers 200 with [{"error": {...}}] entries on failure
        if not r.text:
            return
        try:
            js = r.json()
        except ValueError:
            return

        if isinstance(js, list):
            errors = [item["error"] for item in js if isinstance(item, dict) and "error" in item]
            if errors:
                raise LampRequestError(url, f"device errors: {errors}", status=r.status_code)
