"""
TMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from popular_media.integrations.tmdb.client import (
        TmdbClient,
        TmdbClientError,
        TmdbDecodeError,
        TmdbProviderError,
        TmdbTransportError,
    )
    from popular_media.integrations.tmdb.genres import DEFAULT_GENRE_TABLE, GenreTable

__all__ = [
    "DEFAULT_GENRE_TABLE",
    "GenreTable",
    "TmdbClient",
    "TmdbClientError",
    "TmdbDecodeError",
    "TmdbProviderError",
    "TmdbTransportError",
]

_GENRE_NAMES = {"DEFAULT_GENRE_TABLE", "GenreTable"}


def __getattr__(name: str):
    if name in _GENRE_NAMES:
        from popular_media.integrations.tmdb import genres

        return getattr(genres, name)
    if name in __all__:
        from popular_media.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
