from collections import Counter
from typing import Any

import httpx

BASE_URL = "http://api.test"


class StubApi:
    def __init__(self):
        self.routes: dict[str, tuple[int, Any]] = {}
        self.calls: Counter[str] = Counter()

    def get(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[path] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path] += 1
        if path not in self.routes:
            return httpx.Response(404, json={"error": f"no route for {path}"})

        status_code, payload = self.routes[path]
        if isinstance(payload, (str, bytes)):
            return httpx.Response(status_code, content=payload)
        return httpx.Response(status_code, json=payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())
