from __future__ import annotations

from typing import Any, Iterable, Mapping

from popular_media.integrations.tmdb.genres import DEFAULT_GENRE_TABLE, GenreTable
from popular_media.models.media import (
    CanonicalMediaRecord,
    MediaType,
    RawMovieRecord,
    RawRecord,
    RawSeriesRecord,
    parse_raw_record,
)

GENRE_SEPARATOR = ", "


class MediaNormalizationError(ValueError):
    pass


def _genre_names_from_objects(genres: Iterable[Mapping[str, Any]]) -> list[str]:
    names: list[str] = []
    for item in genres:
        name = item.get("name")
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return names


def extract_genre_names(payload: Mapping[str, Any]) -> list[str]:
    """Names from an expanded `genres` list (details endpoint shape); empty when absent."""

    genres = payload.get("genres")
    if not isinstance(genres, list):
        return []
    return _genre_names_from_objects(item for item in genres if isinstance(item, Mapping))


def _resolve_genre_text(raw: RawRecord, genre_table: GenreTable) -> str:
    if raw.genres is not None:
        return GENRE_SEPARATOR.join(_genre_names_from_objects(raw.genres))
    if raw.genre_ids:
        return GENRE_SEPARATOR.join(genre_table.resolve(raw.genre_ids, raw.media_type))
    return ""


def _title_and_date(raw: RawRecord) -> tuple[str | None, str | None]:
    if isinstance(raw, RawMovieRecord):
        return raw.title, raw.release_date
    if isinstance(raw, RawSeriesRecord):
        return raw.name, raw.first_air_date
    raise TypeError(f"Unsupported raw record type: {type(raw).__name__}")


def normalize(raw: RawRecord, *, genre_table: GenreTable = DEFAULT_GENRE_TABLE) -> CanonicalMediaRecord:
    if raw.id is None:
        raise MediaNormalizationError("TMDb record has no integer `id`.")

    title, release_date = _title_and_date(raw)
    if not title:
        raise MediaNormalizationError(f"TMDb record {raw.id} has no title/name.")

    return CanonicalMediaRecord(
        provider_id=raw.id,
        title=title,
        media_type=raw.media_type,
        poster_path=raw.poster_path or "",
        release_date=release_date,
        genre_text=_resolve_genre_text(raw, genre_table),
    )


def normalize_payload(
    payload: Mapping[str, Any],
    media_type: MediaType | str,
    *,
    genre_table: GenreTable = DEFAULT_GENRE_TABLE,
) -> CanonicalMediaRecord:
    return normalize(parse_raw_record(payload, media_type), genre_table=genre_table)
