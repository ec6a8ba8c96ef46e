"""
services/storage.py
────────────────────────────────────────────────────────────────────────
Meal photos in Supabase Storage, plus the HTTP probe that confirms a
published URL actually serves the file.
"""
from __future__ import annotations

import logging

import httpx
from supabase import Client, create_client

from config import Settings
from core.errors import StorageWriteError, UnpublishedAsset

_LOG = logging.getLogger(__name__)

CACHE_CONTROL_SECONDS = "3600"


class SupabaseImageStorage:
    """`put` / `public_url` over one storage bucket."""

    def __init__(
        self,
        url: str | None,
        key: str | None,
        bucket: str = "food_images",
        client: Client | None = None,
    ) -> None:
        self._url = url
        self._key = key
        self.bucket = bucket
        self._client = client

    @classmethod
    def from_settings(cls, s: Settings) -> "SupabaseImageStorage":
        return cls(s.supabase_url, s.supabase_key, s.storage_bucket)

    def _bucket(self):
        if self._client is None:
            if not self._url or not self._key:
                raise StorageWriteError("SUPABASE_URL and SUPABASE_KEY must be set")
            try:
                self._client = create_client(self._url, self._key)
            except Exception as exc:  # bad URL or key format
                raise StorageWriteError(f"cannot create storage client: {exc}") from exc
        return self._client.storage.from_(self.bucket)

    def put(self, key: str, data: bytes, content_type: str) -> None:
        bucket = self._bucket()
        try:
            bucket.upload(
                path=key,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": CACHE_CONTROL_SECONDS,
                    "upsert": "false",
                },
            )
        except Exception as exc:  # storage3 raises several unrelated types
            _LOG.error("Supabase upload failed for %s: %s", key, exc)
            raise StorageWriteError(str(exc)) from exc

    def public_url(self, key: str) -> str:
        try:
            url = self._bucket().get_public_url(key)
        except StorageWriteError as exc:
            raise UnpublishedAsset(exc.details) from exc
        except Exception as exc:
            _LOG.error("Supabase public URL failed for %s: %s", key, exc)
            raise UnpublishedAsset(str(exc)) from exc
        return url or ""


class HttpReachabilityProbe:
    """One HEAD request; any transport error or non-2xx counts as unreachable."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(follow_redirects=True)

    def is_reachable(self, url: str) -> bool:
        try:
            resp = self._client.head(url)
        except httpx.HTTPError as exc:
            _LOG.warning("URL validation failed for %s: %s", url, exc)
            return False
        return resp.is_success

    def close(self) -> None:
        self._client.close()
