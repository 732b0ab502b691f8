from __future__ import annotations

from typing import Any

import pytest
import requests

from popular_media.integrations.tmdb.client import (
    TmdbClient,
    TmdbDecodeError,
    TmdbProviderError,
    TmdbTransportError,
)
from popular_media.models.media import MediaType


class _FakeResponse:
    def __init__(self, *, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else repr(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | Exception) -> None:
        self._response = response
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, *, params=None, headers=None, timeout=None):  # noqa: ANN001
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


def _client(session: _FakeSession, **kwargs: Any) -> TmdbClient:
    return TmdbClient("test-key", session=session, **kwargs)  # type: ignore[arg-type]


def test_fetch_popular_requests_first_page_with_timeout() -> None:
    session = _FakeSession(_FakeResponse(payload={"page": 1, "results": [{"id": 1, "title": "A"}, "junk"]}))
    items = _client(session, timeout_seconds=5).fetch_popular(MediaType.MOVIE)

    assert items == [{"id": 1, "title": "A"}]
    call = session.calls[0]
    assert call["url"] == "https://api.themoviedb.org/3/movie/popular"
    assert call["params"] == {"api_key": "test-key", "language": "en-US", "page": 1}
    assert call["timeout"] == 5.0


def test_fetch_popular_tv_uses_tv_path() -> None:
    session = _FakeSession(_FakeResponse(payload={"results": []}))
    assert _client(session).fetch_popular("tv") == []
    assert session.calls[0]["url"].endswith("/tv/popular")


def test_fetch_popular_missing_results_is_decode_error() -> None:
    session = _FakeSession(_FakeResponse(payload={"page": 1}))
    with pytest.raises(TmdbDecodeError):
        _client(session).fetch_popular("movie")


def test_transport_failure_is_wrapped() -> None:
    session = _FakeSession(requests.Timeout("read timed out"))
    with pytest.raises(TmdbTransportError):
        _client(session).fetch_popular("movie")
    assert len(session.calls) == 1


def test_non_json_body_is_decode_error() -> None:
    session = _FakeSession(_FakeResponse(payload=ValueError("bad json"), text="<html>"))
    with pytest.raises(TmdbDecodeError) as excinfo:
        _client(session).fetch_details(1, "movie")
    assert excinfo.value.body_snippet == "<html>"


def test_provider_error_envelope_raises() -> None:
    payload = {"success": False, "status_code": 34, "status_message": "The resource you requested could not be found."}
    session = _FakeSession(_FakeResponse(status_code=404, payload=payload))
    with pytest.raises(TmdbProviderError) as excinfo:
        _client(session).fetch_details(999, MediaType.TV)
    assert excinfo.value.status_code == 34


def test_http_error_without_json_is_provider_error() -> None:
    session = _FakeSession(_FakeResponse(status_code=503, payload=ValueError("no json"), text="unavailable"))
    with pytest.raises(TmdbProviderError) as excinfo:
        _client(session).fetch_popular("movie")
    assert excinfo.value.status_code == 503


def test_fetch_details_language_override() -> None:
    session = _FakeSession(_FakeResponse(payload={"id": 1399, "genres": [{"id": 18, "name": "Drama"}]}))
    payload = _client(session).fetch_details(1399, "tv", language="sv-SE")
    assert payload["genres"][0]["name"] == "Drama"
    assert session.calls[0]["url"] == "https://api.themoviedb.org/3/tv/1399"
    assert session.calls[0]["params"]["language"] == "sv-SE"


def test_missing_api_key_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        TmdbClient("")
