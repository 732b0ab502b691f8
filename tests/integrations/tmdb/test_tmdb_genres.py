from __future__ import annotations

import logging

import pytest

from popular_media.integrations.tmdb.genres import DEFAULT_GENRE_TABLE, GenreTable
from popular_media.models.media import MediaType


def test_resolve_keeps_input_order() -> None:
    assert DEFAULT_GENRE_TABLE.resolve([878, 28], MediaType.MOVIE) == ["Science Fiction", "Action"]
    assert DEFAULT_GENRE_TABLE.resolve([28, 878], MediaType.MOVIE) == ["Action", "Science Fiction"]


def test_resolve_skips_unknown_ids_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="popular_media.integrations.tmdb.genres"):
        names = DEFAULT_GENRE_TABLE.resolve([18, 424242, 35], "movie")
    assert names == ["Drama", "Comedy"]
    assert "424242" in caplog.text


def test_movie_only_id_is_unknown_for_tv() -> None:
    assert DEFAULT_GENRE_TABLE.resolve([878], MediaType.TV) == []
    assert DEFAULT_GENRE_TABLE.resolve([10765], MediaType.TV) == ["Sci-Fi & Fantasy"]
    assert DEFAULT_GENRE_TABLE.resolve([10765], MediaType.MOVIE) == []


def test_resolve_is_deterministic() -> None:
    ids = [28, 12, 16, 99999]
    assert DEFAULT_GENRE_TABLE.resolve(ids, "movie") == DEFAULT_GENRE_TABLE.resolve(ids, "movie")


def test_injected_maps_are_used() -> None:
    table = GenreTable(movie={1: "Custom Movie"}, tv={1: "Custom Series"})
    assert table.resolve([1], "movie") == ["Custom Movie"]
    assert table.resolve([1], "tv") == ["Custom Series"]
    assert table.name_for(28, "movie") is None


def test_series_alias_maps_to_tv() -> None:
    assert DEFAULT_GENRE_TABLE.resolve([10764], "series") == ["Reality"]
