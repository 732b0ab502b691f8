from __future__ import annotations

import pytest

from popular_media.models.media import CanonicalMediaRecord, MediaType
from popular_media.repositories.media_items import (
    MediaRepositoryError,
    assert_media_items_table_exists,
    find_media_item,
    find_missing_genre,
    sample_media_items,
    update_genre_text,
    upsert_media_item,
    upsert_media_items,
)
from tests.fakes import FakeResponse, FakeSupabase


def _record(provider_id: int, title: str = "Title", media_type: MediaType = MediaType.MOVIE, genre_text: str = ""):
    return CanonicalMediaRecord(provider_id=provider_id, title=title, media_type=media_type, genre_text=genre_text)


def _seed(movies: int, tv: int) -> FakeSupabase:
    rows = [
        {"tmdb_id": 1000 + i, "title": f"Movie {i}", "media_type": "movie", "genre_text": "Drama"}
        for i in range(movies)
    ]
    rows += [
        {"tmdb_id": 2000 + i, "title": f"Show {i}", "media_type": "tv", "genre_text": "Drama"}
        for i in range(tv)
    ]
    return FakeSupabase(rows)


def test_upsert_uses_tmdb_id_conflict_target_and_omits_local_id() -> None:
    db = FakeSupabase()
    local_id = upsert_media_item(db, _record(1061474, "Superman"))

    assert local_id == 1
    table, op, payload, on_conflict = db.calls[0]
    assert (table, op, on_conflict) == ("media_items", "upsert", "tmdb_id")
    assert "id" not in payload
    assert payload["media_type"] == "movie"


def test_upsert_twice_keeps_one_row_with_latest_title() -> None:
    db = FakeSupabase()
    first = upsert_media_item(db, _record(42, "Old Title"))
    second = upsert_media_item(db, _record(42, "New Title"))

    assert first == second
    assert len(db.rows) == 1
    assert db.rows[0]["title"] == "New Title"


def test_upsert_wraps_client_exceptions() -> None:
    db = FakeSupabase()
    db.fail_with = RuntimeError("connection refused")
    with pytest.raises(MediaRepositoryError):
        upsert_media_item(db, _record(1))


def test_upsert_raises_when_response_has_error() -> None:
    class _ErrorClient(FakeSupabase):
        def table(self, name: str):
            query = super().table(name)
            query.execute = lambda: FakeResponse(error="duplicate key value")  # type: ignore[method-assign]
            return query

    with pytest.raises(MediaRepositoryError):
        upsert_media_item(_ErrorClient(), _record(1))


def test_batch_upsert_returns_ids_and_skips_empty() -> None:
    db = FakeSupabase()
    assert upsert_media_items(db, []) == []
    assert db.calls == []
    assert upsert_media_items(db, [_record(1), _record(2)]) == [1, 2]


def test_find_missing_genre_returns_only_empty_or_null() -> None:
    db = FakeSupabase(
        [
            {"tmdb_id": 1, "title": "Has", "media_type": "movie", "genre_text": "Drama"},
            {"tmdb_id": 2, "title": "Empty", "media_type": "movie", "genre_text": ""},
            {"tmdb_id": 3, "title": "Null", "media_type": "tv", "genre_text": None},
        ]
    )
    missing = find_missing_genre(db)
    assert [r.provider_id for r in missing] == [2, 3]
    assert missing[1].media_type is MediaType.TV


def test_update_genre_text_only_touches_genres() -> None:
    db = FakeSupabase([{"tmdb_id": 7, "title": "Keep", "media_type": "tv", "genre_text": ""}])
    update_genre_text(db, 7, "Drama")
    assert db.calls[-1][2] == {"genre_text": "Drama"}
    record = find_media_item(db, 7)
    assert record is not None
    assert record.genre_text == "Drama"
    assert record.title == "Keep"
    assert find_media_item(db, 8) is None


def test_random_sample_is_bounded_and_type_filtered() -> None:
    db = _seed(movies=20, tv=20)
    for _ in range(5):
        sample = sample_media_items(db, MediaType.MOVIE, 8, random=True)
        assert len(sample) == 8
        assert all(r.media_type is MediaType.MOVIE for r in sample)
        assert len({r.provider_id for r in sample}) == 8
    assert db.calls[-1][0] == "media_items_shuffled"


def test_sample_never_pads_small_sets() -> None:
    db = _seed(movies=3, tv=1)
    assert len(sample_media_items(db, "movie", 8, random=True)) == 3
    assert len(sample_media_items(db, "tv", 8)) == 1


@pytest.mark.parametrize("limit", [0, -3])
def test_non_positive_limit_returns_empty_without_querying(limit: int) -> None:
    db = _seed(movies=5, tv=5)
    calls_before = len(db.calls)
    assert sample_media_items(db, "movie", limit, random=True) == []
    assert sample_media_items(db, "tv", limit) == []
    assert len(db.calls) == calls_before


def test_sample_limit_is_capped() -> None:
    db = _seed(movies=60, tv=0)
    assert len(sample_media_items(db, "movie", 500)) == 50


def test_latest_sample_orders_by_descending_local_id() -> None:
    db = _seed(movies=10, tv=0)
    latest = sample_media_items(db, "movie", 4)
    assert [r.local_id for r in latest] == [10, 9, 8, 7]
    assert db.calls[-1][0] == "media_items"


def test_preflight_reports_missing_table() -> None:
    db = FakeSupabase()
    db.fail_with = RuntimeError('relation "core.media_items" does not exist (42P01)')
    with pytest.raises(MediaRepositoryError) as excinfo:
        assert_media_items_table_exists(db)
    assert "0001_core_media_items.sql" in str(excinfo.value)
