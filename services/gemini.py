# services/gemini.py
from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import types, errors as gerrors

from config import Settings
from core.errors import InferenceConfigError, InferenceUnavailable

_LOG = logging.getLogger(__name__)

# ───────────── Model defaults ─────────────
VISION_MODEL = "gemini-2.0-flash"


class GeminiVisionClient:
    """
    Vision completion over Gemini.  The image travels by URL; the client
    never downloads it.  Built without a key it still constructs, but every
    call fails with `InferenceConfigError`.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = VISION_MODEL,
        temperature: float = 0.2,
        max_output_tokens: int = 500,
        client: genai.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._client = client

    @classmethod
    def from_settings(cls, s: Settings) -> "GeminiVisionClient":
        return cls(
            api_key=s.gemini_api_key,
            model=s.vision_model,
            temperature=s.vision_temperature,
            max_output_tokens=s.vision_max_output_tokens,
        )

    def _ensure_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise InferenceConfigError("GEMINI_API_KEY not set in environment")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    # ───────────── Generation (sync) ─────────────
    def complete(
        self,
        system_prompt: str,
        image_url: str,
        user_prompt: str,
        mime_type: str = "image/jpeg",
    ) -> str:
        """Run one vision completion and return the model’s text reply."""
        client = self._ensure_client()
        try:
            resp = client.models.generate_content(
                model=self._model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[
                            types.Part.from_text(text=user_prompt),
                            types.Part.from_uri(file_uri=image_url, mime_type=mime_type),
                        ],
                    )
                ],
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    temperature=self._temperature,
                    max_output_tokens=self._max_output_tokens,
                ),
            )
        except gerrors.APIError as e:
            _LOG.error("Gemini vision call failed: %s", e)
            raise InferenceUnavailable(e.message or str(e)) from e
        except httpx.HTTPError as e:
            _LOG.error("Gemini unreachable: %s", e)
            raise InferenceUnavailable(str(e)) from e

        text = resp.text
        if not text:
            raise InferenceUnavailable("empty response from model")
        return text
