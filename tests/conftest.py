from __future__ import annotations

from typing import Any, List, Optional

import pytest
import requests

TEST_KEY = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
MOCK_BASE = "http://mock.dvf.local"


class FakeResponse(requests.Response):
    def __init__(self, status: int = 200, body: bytes = b"{}", reason: str = "OK"):
        super().__init__()
        self.status_code = status
        self.reason = reason
        self._content = body
        self._content_consumed = True
        self.headers["Content-Type"] = "application/json"
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class FakeSession(requests.Session):
    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[Exception] = None):
        super().__init__()
        self.response = response if response is not None else FakeResponse()
        self.exc = exc
        self.sent: List[requests.PreparedRequest] = []
        self.kwargs: List[dict] = []

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        self.sent.append(request)
        self.kwargs.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
