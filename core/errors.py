"""
core/errors.py
────────────────────────────────────────────────────────────────────────
Terminal failures of the meal-analysis pipeline.

One class per stage outcome.  `status_code` follows the HTTP contract:
4xx for caller input or untrusted model output, 5xx for infrastructure.
"""
from __future__ import annotations


class AnalysisError(Exception):
    stage = "received"
    status_code = 500
    message = "meal analysis failed"

    def __init__(self, details: str | None = None, *, message: str | None = None) -> None:
        self.details = details
        if message is not None:
            self.message = message
        super().__init__(self.message if details is None else f"{self.message}: {details}")

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"success": False, "error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# ───────── received ──────────────────────────────────────────────────
class MissingImage(AnalysisError):
    stage = "received"
    status_code = 400
    message = "image is required"


class MissingUser(AnalysisError):
    stage = "received"
    status_code = 400
    message = "user id is required"


class UnsupportedImage(AnalysisError):
    stage = "received"
    status_code = 400
    message = "unsupported image"


# ───────── stored / published ────────────────────────────────────────
class StorageWriteError(AnalysisError):
    stage = "stored"
    status_code = 500
    message = "failed to upload image to storage"


class UnpublishedAsset(AnalysisError):
    stage = "published"
    status_code = 500
    message = "failed to obtain image URL"


class UnreachableAsset(AnalysisError):
    stage = "published"
    status_code = 500
    message = "image URL is not reachable"


# ───────── inferred ──────────────────────────────────────────────────
class InferenceUnavailable(AnalysisError):
    stage = "inferred"
    status_code = 500
    message = "image analysis service failed"


class InferenceConfigError(AnalysisError):
    stage = "inferred"
    status_code = 500
    message = "image analysis service is not configured"


# ───────── parsed / validated ────────────────────────────────────────
class MalformedResponse(AnalysisError):
    stage = "parsed"
    status_code = 400
    message = "failed to parse model response"


class InvalidMealData(AnalysisError):
    stage = "validated"
    status_code = 400
    message = "invalid meal data"

    def __init__(self, field: str, details: str | None = None) -> None:
        self.field = field
        super().__init__(details or f"invalid field: {field}")


# ───────── anything else ─────────────────────────────────────────────
class AnalysisFailed(AnalysisError):
    """Unexpected exception somewhere in the chain."""

    status_code = 500
    message = "server error"
