from __future__ import annotations

import os
from typing import Any, Mapping

import requests

from popular_media.config import DEFAULT_LANGUAGE, DEFAULT_TIMEOUT_SECONDS
from popular_media.models.media import MediaType

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
POPULAR_PAGE = 1


class TmdbClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class TmdbTransportError(TmdbClientError):
    """Network-level failure (DNS, connection reset, timeout)."""


class TmdbDecodeError(TmdbClientError):
    """Response body was not the JSON shape we expected."""


class TmdbProviderError(TmdbClientError):
    """TMDb answered, but signalled an error (HTTP status or `status_code` in the payload)."""


def require_api_key(api_key: str | None) -> str:
    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    if not resolved:
        raise RuntimeError("TMDB_API_KEY is not set.")
    return resolved


def resolve_api_key(api_key: str | None = None) -> str | None:
    """
    Best-effort API key resolution for callers that want to continue when the key is missing.
    """

    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def _request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    headers = {
        "accept": "application/json",
    }

    # Single attempt: a failed call surfaces to the caller, which skips that item or media type.
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise TmdbTransportError(f"TMDb request failed: {exc}") from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        if resp.status_code != 200:
            raise TmdbProviderError(
                f"TMDb request failed with HTTP {resp.status_code}.",
                status_code=resp.status_code,
                body_snippet=(resp.text or "")[:400],
            ) from exc
        raise TmdbDecodeError(
            "TMDb returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise TmdbDecodeError("TMDb returned unexpected JSON shape (not an object).", status_code=resp.status_code)

    # TMDb error envelope: {"success": false, "status_code": 34, "status_message": "..."}
    if resp.status_code != 200 or "status_code" in payload:
        provider_code = payload.get("status_code")
        message = payload.get("status_message") or f"HTTP {resp.status_code}"
        raise TmdbProviderError(
            f"TMDb returned an error (status_code={provider_code}): {message}",
            status_code=provider_code if isinstance(provider_code, int) else resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )
    return payload


class TmdbClient:
    """
    Thin TMDb v3 client for the popular lists and the per-title details endpoint.

    Credentials and locale are injected at construction; a shared `requests.Session`
    keeps connections warm across a sync run.
    """

    def __init__(
        self,
        api_key: str,
        *,
        session: requests.Session | None = None,
        language: str = DEFAULT_LANGUAGE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str = TMDB_API_BASE_URL,
    ) -> None:
        self.api_key = require_api_key(api_key)
        self.session = session or requests.Session()
        self.language = language or DEFAULT_LANGUAGE
        self.timeout_seconds = float(timeout_seconds)
        self.base_url = base_url.rstrip("/")

    def _get(self, path: str, params: Mapping[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        return _request_json(
            self.session,
            url,
            params={"api_key": self.api_key, **params},
            timeout_seconds=self.timeout_seconds,
        )

    def fetch_popular(self, media_type: MediaType | str) -> list[dict[str, Any]]:
        """
        Fetch the first page of `/{movie|tv}/popular`.

        Only page 1 is requested; TMDb returns ~20 items per page.
        """

        kind = MediaType.parse(media_type)
        payload = self._get(f"{kind.value}/popular", {"language": self.language, "page": POPULAR_PAGE})
        results = payload.get("results")
        if not isinstance(results, list):
            raise TmdbDecodeError(f"TMDb {kind.value}/popular response missing `results`.")
        return [item for item in results if isinstance(item, dict)]

    def fetch_details(
        self,
        provider_id: int,
        media_type: MediaType | str,
        *,
        language: str | None = None,
    ) -> dict[str, Any]:
        """
        Fetch a details payload from `/3/{movie|tv}/{id}`.

        Details carry `genres` as `{id, name}` objects instead of `genre_ids`.
        """

        kind = MediaType.parse(media_type)
        return self._get(f"{kind.value}/{int(provider_id)}", {"language": language or self.language})
