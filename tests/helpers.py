"""Network doubles shared by the updater tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = "",
                 content: bytes = b"") -> None:
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None


class FakeSession:
    """Routes URLs to canned responses and records every call."""

    def __init__(self, get: Optional[Dict[str, Any]] = None, head: Optional[Dict[str, Any]] = None) -> None:
        self.get_routes = dict(get or {})
        self.head_routes = dict(head or {})
        self.calls: List[Tuple[str, str, Any]] = []
        self.closed = False

    def _answer(self, routes: Dict[str, Any], url: str) -> FakeResponse:
        answer = routes.get(url, FakeResponse(status_code=404))
        if isinstance(answer, Exception):
            raise answer
        return answer

    def get(self, url: str, timeout: Any = None, stream: bool = False) -> FakeResponse:
        self.calls.append(("GET", url, timeout))
        return self._answer(self.get_routes, url)

    def head(self, url: str, timeout: Any = None, allow_redirects: bool = False) -> FakeResponse:
        self.calls.append(("HEAD", url, timeout))
        return self._answer(self.head_routes, url)

    def close(self) -> None:
        self.closed = True

    def urls(self, method: str) -> List[str]:
        return [url for verb, url, _ in self.calls if verb == method]


