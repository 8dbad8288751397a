"""A small API client that carries the site's CSRF token on every call."""

from __future__ import annotations

import threading
from urllib.parse import unquote_plus

import requests

CSRF_COOKIE = "XSRF-TOKEN"


class ApiClientError(Exception):
    """Raised when the API cannot be reached or hands out no CSRF token."""


class ApiClient:
    """Send requests to one site, fetching its CSRF token before the first call."""

    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url
        self.session = session if session is not None else requests.Session()
        self.csrf_token = ""
        self.initialized = False
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Visit the home page and read the CSRF token from its cookies."""
        try:
            self.session.get(self.base_url).close()
        except requests.RequestException as exc:
            raise ApiClientError(str(exc)) from exc

        token = next(
            (
                unquote_plus(cookie.value or "")
                for cookie in self.session.cookies
                if cookie.name == CSRF_COOKIE
            ),
            "",
        )
        if not token:
            raise ApiClientError("CSRF token not found")
        self.csrf_token = token
        self.initialized = True

    def request(self, method: str, endpoint: str, data: str = "") -> bytes:
        """Send ``data`` (JSON text, may be empty) to ``endpoint`` and return the body."""
        with self._lock:
            if not self.initialized:
                self.initialize()

        headers = {
            "X-XSRF-TOKEN": self.csrf_token,
            "Accept": "application/json, text/plain, */*",
            "Origin": self.base_url,
            "X-Requested-With": "XMLHttpRequest",
        }
        if data:
            headers["Content-Type"] = "application/json;charset=UTF-8"

        try:
            response = self.session.request(
                method,
                self.base_url + endpoint,
                data=data.encode("utf-8") if data else None,
                headers=headers,
            )
            return response.content
        except requests.RequestException as exc:
            raise ApiClientError(str(exc)) from exc