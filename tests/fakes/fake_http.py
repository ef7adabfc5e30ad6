"""
Fake HTTP layer for unit tests.

FakeSession stands in for requests.Session at the transport seam. It returns
real requests.Response objects, either from a FIFO queue or from routes
keyed by "METHOD path", and records every request it receives.
"""

import json
import threading
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import requests
from requests.structures import CaseInsensitiveDict

BASE_URL = "https://canvas.test/api/v1"


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
    url: str = f"{BASE_URL}/",
) -> requests.Response:
    """Build a real requests.Response with the given status, body and headers."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = "Fake"
    response.url = url
    response.encoding = "utf-8"

    all_headers = dict(headers or {})
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        all_headers.setdefault("Content-Type", "application/json; charset=utf-8")
    elif text is not None:
        response._content = text.encode("utf-8")
        all_headers.setdefault("Content-Type", "text/html; charset=utf-8")
    else:
        response._content = b""
    response.headers = CaseInsensitiveDict(all_headers)
    return response


def page(items: list[Any], next_url: str | None = None, status_code: int = 200) -> requests.Response:
    """A JSON array response, optionally advertising a next page."""
    headers = {}
    if next_url:
        headers["Link"] = f'<{next_url}>; rel="next", <{BASE_URL}/first>; rel="first"'
    return make_response(status_code, json_body=items, headers=headers)


def error(status_code: int, json_body: Any = None, text: str | None = None) -> requests.Response:
    return make_response(status_code, json_body=json_body, text=text)


@dataclass
class RecordedCall:
    method: str
    url: str
    params: dict[str, Any] | None
    json: Any
    timeout: float | None
    at: float

    @property
    def path(self) -> str:
        return urlsplit(self.url).path.removeprefix("/api/v1/")


class FakeSession:
    """Scripted replacement for requests.Session."""

    def __init__(self, responses: list[Any] | None = None):
        self.headers: dict[str, str] = {}
        self.queue: list[Any] = list(responses or [])
        self.routes: dict[str, Any] = {}
        self.calls: list[RecordedCall] = []
        self.closed = False
        self._lock = threading.Lock()

    def enqueue(self, *items: Any) -> None:
        """Queue responses (or exceptions to raise) in order."""
        self.queue.extend(items)

    def route(self, method: str, path: str, *items: Any) -> None:
        """
        Answer requests for `path` with the given items.

        A single item is returned for every matching request; several items
        are returned one per request, in order. A callable item is called
        with the request params and its result used instead.
        """
        self.routes[f"{method.upper()} {path}"] = list(items)

    def request(self, method, url, params=None, json=None, timeout=None):
        with self._lock:
            self.calls.append(RecordedCall(method, url, params, json, timeout, time.monotonic()))
            item = self._next_item(method, url)
        if callable(item):
            item = item(params)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    def calls_to(self, path: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.path == path]

    def _next_item(self, method: str, url: str) -> Any:
        parts = urlsplit(url)
        path = parts.path.removeprefix("/api/v1/")
        candidates = [f"{method} {path}"]
        if parts.query:
            candidates.insert(0, f"{method} {path}?{parts.query}")

        for key in candidates:
            if key in self.routes:
                items = self.routes[key]
                return items[0] if len(items) == 1 else items.pop(0)

        if self.queue:
            return self.queue.pop(0)
        raise AssertionError(f"Unexpected request: {method} {url}")
