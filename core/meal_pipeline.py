"""
core/meal_pipeline.py
────────────────────────────────────────────────────────────────────────
Meal-photo analysis as a fixed chain of stages:

    received → stored → published → inferred → parsed → validated → completed

Each stage either hands its output to the next or raises one terminal
`core.errors.AnalysisError`.  Nothing is retried and nothing is
persisted here; the caller decides whether to store the returned meal.

Collaborators are injected so tests can swap in fakes:

  • storage  – `put(key, data, content_type)`, `public_url(key)`
  • probe    – `is_reachable(url) -> bool`
  • vision   – `complete(system_prompt, image_url, user_prompt, mime_type) -> str`
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from core.errors import (
    AnalysisError,
    InvalidMealData,
    MalformedResponse,
    MissingImage,
    MissingUser,
    UnpublishedAsset,
    UnreachableAsset,
    UnsupportedImage,
)
from core.meal_parser import InvalidPayload, MalformedPayload, parse_meal_response
from core.models.meal import MealCandidate
from core.prompts import MEAL_SYSTEM_PROMPT, MEAL_USER_PROMPT

_LOG = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024

_EXTENSIONS = {"image/png": "png", "image/webp": "webp"}


class Stage(str, Enum):
    received = "received"
    stored = "stored"
    published = "published"
    inferred = "inferred"
    parsed = "parsed"
    validated = "validated"
    completed = "completed"


# ───────── collaborator contracts ────────────────────────────────────
class ImageStorage(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> None: ...

    def public_url(self, key: str) -> str: ...


class ReachabilityProbe(Protocol):
    def is_reachable(self, url: str) -> bool: ...


class VisionClient(Protocol):
    def complete(
        self, system_prompt: str, image_url: str, user_prompt: str, mime_type: str = ...
    ) -> str: ...


# ───────── outputs ───────────────────────────────────────────────────
@dataclass(frozen=True)
class AnalysisResult:
    meal: MealCandidate
    image_url: str
    storage_key: str
    prompt: str
    raw_response: str


def storage_key(user_id: str, timestamp_ms: int, content_type: str) -> str:
    ext = _EXTENSIONS.get(content_type, "jpg")
    return f"{user_id}/user_{user_id}_meal_{timestamp_ms}.{ext}"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class MealAnalysisPipeline:
    def __init__(
        self,
        storage: ImageStorage,
        probe: ReachabilityProbe,
        vision: VisionClient,
        clock: Callable[[], int] = _now_ms,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self._storage = storage
        self._probe = probe
        self._vision = vision
        self._clock = clock
        self._max_image_bytes = max_image_bytes

    def close(self) -> None:
        """Release HTTP clients held by the collaborators, where they have any."""
        for part in (self._storage, self._probe, self._vision):
            close = getattr(part, "close", None)
            if callable(close):
                close()

    def analyze(
        self,
        image: bytes | None,
        user_id: str | None,
        content_type: str | None = None,
    ) -> AnalysisResult:
        try:
            content_type = self._receive(image, user_id, content_type)
            key = self._store(image, user_id, content_type)     # type: ignore[arg-type]
            url = self._publish(key)
            raw = self._infer(url, content_type)
            meal = self._parse_and_validate(raw)
        except AnalysisError as exc:
            log = _LOG.warning if exc.status_code < 500 else _LOG.error
            log("meal analysis stopped at %s: %s", exc.stage, exc)
            raise

        _LOG.info("meal analysis %s for user %s (%s)", Stage.completed.value, user_id, key)
        return AnalysisResult(
            meal=meal,
            image_url=url,
            storage_key=key,
            prompt=MEAL_SYSTEM_PROMPT,
            raw_response=raw,
        )

    # ───────── stages ────────────────────────────────────────────────
    def _receive(self, image: bytes | None, user_id: str | None, content_type: str | None) -> str:
        if not image:
            raise MissingImage()
        if user_id is None or not str(user_id).strip():
            raise MissingUser()

        content_type = (content_type or DEFAULT_CONTENT_TYPE).lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            allowed = ", ".join(sorted(ALLOWED_CONTENT_TYPES))
            raise UnsupportedImage(f"content type {content_type} not in: {allowed}")
        if len(image) > self._max_image_bytes:
            raise UnsupportedImage(
                f"image is {len(image)} bytes, limit is {self._max_image_bytes}"
            )
        _LOG.debug("%s: %d bytes (%s)", Stage.received.value, len(image), content_type)
        return content_type

    def _store(self, image: bytes, user_id: str, content_type: str) -> str:
        key = storage_key(str(user_id).strip(), self._clock(), content_type)
        self._storage.put(key, image, content_type)
        _LOG.debug("%s: %s", Stage.stored.value, key)
        return key

    def _publish(self, key: str) -> str:
        url = self._storage.public_url(key)
        if not url:
            raise UnpublishedAsset(key)
        if not self._probe.is_reachable(url):
            raise UnreachableAsset(url)
        _LOG.debug("%s: %s", Stage.published.value, url)
        return url

    def _infer(self, url: str, content_type: str) -> str:
        mime = DEFAULT_CONTENT_TYPE if content_type == "image/jpg" else content_type
        raw = self._vision.complete(MEAL_SYSTEM_PROMPT, url, MEAL_USER_PROMPT, mime_type=mime)
        _LOG.debug("%s: %d chars", Stage.inferred.value, len(raw))
        return raw

    def _parse_and_validate(self, raw: str) -> MealCandidate:
        outcome = parse_meal_response(raw)
        if isinstance(outcome, MalformedPayload):
            _LOG.debug("unparsable model reply: %r", raw)
            raise MalformedResponse(outcome.reason)
        if isinstance(outcome, InvalidPayload):
            _LOG.debug("invalid model reply: %r", raw)
            raise InvalidMealData(outcome.field, outcome.reason)
        return outcome.meal
