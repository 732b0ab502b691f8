from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from supabase import Client

from popular_media.models.media import CanonicalMediaRecord, MediaType

SCHEMA = "core"
TABLE = "media_items"
# `create view core.media_items_shuffled as select * from core.media_items order by random()`
SHUFFLED_VIEW = "media_items_shuffled"
SELECT_FIELDS = "id,tmdb_id,title,poster_path,release_date,genre_text,media_type"
MAX_SAMPLE_LIMIT = 50


class MediaRepositoryError(RuntimeError):
    pass


def _raise_for_supabase_error(response: Any, context: str) -> None:
    if hasattr(response, "error") and response.error:
        raise MediaRepositoryError(f"Supabase error during {context}: {response.error}")


def _execute(query: Any, context: str) -> list[dict[str, Any]]:
    try:
        response = query.execute()
    except MediaRepositoryError:
        raise
    except Exception as exc:
        raise MediaRepositoryError(f"Supabase error during {context}: {exc}") from exc
    _raise_for_supabase_error(response, context)
    data = response.data or []
    return data if isinstance(data, list) else []


def assert_media_items_table_exists(db: Client) -> None:
    """
    Fail fast with a clear error if `core.media_items` is missing in Supabase.
    """

    try:
        _execute(db.schema(SCHEMA).table(TABLE).select("id").limit(1), "core.media_items preflight")
    except MediaRepositoryError as exc:
        msg = str(exc).casefold()
        if "42p01" in msg or "pgrst205" in msg or ("relation" in msg and "does not exist" in msg):
            raise MediaRepositoryError(
                "Database table `core.media_items` is missing. "
                "Apply `supabase/migrations/0001_core_media_items.sql`, then re-run the job."
            ) from exc
        raise


def upsert_media_item(db: Client, record: CanonicalMediaRecord) -> int:
    """
    Insert or update one record keyed by `tmdb_id`; returns the local `id`.

    PostgREST turns this into `INSERT ... ON CONFLICT (tmdb_id) DO UPDATE`, so concurrent
    writers for the same TMDb id never produce a duplicate-key error. `id` is never part
    of the payload, so an existing row keeps its id.
    """

    data = _execute(
        db.schema(SCHEMA).table(TABLE).upsert(record.to_row(), on_conflict="tmdb_id"),
        f"upserting media item tmdb_id={record.provider_id}",
    )
    if data and data[0].get("id") is not None:
        return int(data[0]["id"])
    raise MediaRepositoryError(f"Supabase upsert returned no id for tmdb_id={record.provider_id}.")


def upsert_media_items(db: Client, records: Iterable[CanonicalMediaRecord]) -> list[int]:
    payload = [r.to_row() for r in records]
    if not payload:
        return []
    data = _execute(
        db.schema(SCHEMA).table(TABLE).upsert(payload, on_conflict="tmdb_id"),
        "upserting media items",
    )
    return [int(row["id"]) for row in data if row.get("id") is not None]


def update_genre_text(db: Client, provider_id: int, genre_text: str) -> None:
    _execute(
        db.schema(SCHEMA).table(TABLE).update({"genre_text": genre_text}).eq("tmdb_id", int(provider_id)),
        f"updating genre_text for tmdb_id={provider_id}",
    )


def find_media_item(db: Client, provider_id: int) -> CanonicalMediaRecord | None:
    data = _execute(
        db.schema(SCHEMA).table(TABLE).select(SELECT_FIELDS).eq("tmdb_id", int(provider_id)).limit(1),
        "fetching media item",
    )
    if data:
        return CanonicalMediaRecord.from_row(data[0])
    return None


def find_missing_genre(db: Client) -> list[CanonicalMediaRecord]:
    data = _execute(
        db.schema(SCHEMA).table(TABLE).select(SELECT_FIELDS).or_("genre_text.is.null,genre_text.eq.").order("id"),
        "listing media items missing genres",
    )
    return [CanonicalMediaRecord.from_row(row) for row in data]


def sample_media_items(
    db: Client,
    media_type: MediaType | str,
    limit: int = 8,
    *,
    random: bool = False,
) -> list[CanonicalMediaRecord]:
    """
    Return up to `limit` rows of one media type.

    `random=True` reads from the shuffled view; otherwise the newest rows come first
    (descending `id`). Fewer rows than `limit` are returned as-is, and a `limit` of zero
    or less returns nothing without querying.
    """

    kind = MediaType.parse(media_type)
    limit = int(limit)
    if limit <= 0:
        return []
    limit = min(limit, MAX_SAMPLE_LIMIT)
    source = SHUFFLED_VIEW if random else TABLE
    query = db.schema(SCHEMA).table(source).select(SELECT_FIELDS).eq("media_type", kind.value)
    if not random:
        query = query.order("id", desc=True)
    data = _execute(query.limit(limit), f"sampling {kind.value} media items")
    records = [CanonicalMediaRecord.from_row(row) for row in data]
    return [r for r in records if r.media_type is kind][:limit]
