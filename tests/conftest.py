"""
Shared fakes: in-memory storage, a scripted probe and a scripted
vision model.  Each records how often it was called.
"""
from __future__ import annotations

import pytest

from core.errors import StorageWriteError

VALID_REPLY = """{
  "name": "Grilled chicken with rice",
  "calories": 450,
  "protein": 35,
  "carbs": 48,
  "fat": 12,
  "meal_type": "lunch",
  "description": "A balanced plate"
}"""


class FakeStorage:
    def __init__(self, fail: bool = False, url: str | None = "https://cdn.test/{key}") -> None:
        self.fail = fail
        self.url = url
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.puts = 0

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.puts += 1
        if self.fail:
            raise StorageWriteError("bucket refused the upload")
        self.objects[key] = (data, content_type)

    def public_url(self, key: str) -> str:
        return self.url.format(key=key) if self.url else ""


class FakeProbe:
    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable
        self.calls: list[str] = []
        self.closed = False

    def is_reachable(self, url: str) -> bool:
        self.calls.append(url)
        return self.reachable

    def close(self) -> None:
        self.closed = True


class FakeVision:
    def __init__(self, reply: str = VALID_REPLY, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def complete(self, system_prompt, image_url, user_prompt, mime_type="image/jpeg"):
        self.calls.append(
            {"system": system_prompt, "url": image_url, "user": user_prompt, "mime": mime_type}
        )
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def vision() -> FakeVision:
    return FakeVision()
