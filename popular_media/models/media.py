from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union


class MediaType(str, Enum):
    """TMDb media type; the value doubles as the API path segment and the stored column value."""

    MOVIE = "movie"
    TV = "tv"

    @classmethod
    def parse(cls, value: MediaType | str) -> MediaType:
        if isinstance(value, MediaType):
            return value
        raw = str(value or "").strip().casefold()
        if raw in {"series", "tvshow", "tvshows", "show"}:
            return cls.TV
        if raw == "movies":
            return cls.MOVIE
        try:
            return cls(raw)
        except ValueError as exc:
            raise ValueError(f"Unknown media type: {value!r}") from exc

    @property
    def label(self) -> str:
        return "movies" if self is MediaType.MOVIE else "TV shows"


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.isdigit():
            return int(raw)
    return None


def _int_list(value: Any) -> tuple[int, ...]:
    if not isinstance(value, list):
        return ()
    ids: list[int] = []
    for item in value:
        parsed = _as_int(item)
        if parsed is not None:
            ids.append(parsed)
    return tuple(ids)


def _genre_objects(value: Any) -> tuple[Mapping[str, Any], ...] | None:
    # None means the payload did not carry `genres` at all, which is different from an empty list.
    if not isinstance(value, list):
        return None
    return tuple(item for item in value if isinstance(item, Mapping))


@dataclass(frozen=True)
class RawMovieRecord:
    """Movie-shaped TMDb payload (`/movie/popular` item or `/movie/{id}` details)."""

    id: int | None
    title: str | None = None
    release_date: str | None = None
    poster_path: str | None = None
    genre_ids: tuple[int, ...] = ()
    genres: tuple[Mapping[str, Any], ...] | None = None
    media_type: MediaType = field(default=MediaType.MOVIE, init=False)


@dataclass(frozen=True)
class RawSeriesRecord:
    """TV-shaped TMDb payload (`/tv/popular` item or `/tv/{id}` details)."""

    id: int | None
    name: str | None = None
    first_air_date: str | None = None
    poster_path: str | None = None
    genre_ids: tuple[int, ...] = ()
    genres: tuple[Mapping[str, Any], ...] | None = None
    media_type: MediaType = field(default=MediaType.TV, init=False)


RawRecord = Union[RawMovieRecord, RawSeriesRecord]


def parse_raw_record(payload: Mapping[str, Any], media_type: MediaType | str) -> RawRecord:
    """
    Build the variant for `media_type` from a TMDb payload.

    `title`/`release_date` win over `name`/`first_air_date` whichever shape the payload
    has, so a mislabelled item still lands with a title and date.
    """

    kind = MediaType.parse(media_type)
    title = _as_str(payload.get("title")) or _as_str(payload.get("name"))
    date = _as_str(payload.get("release_date")) or _as_str(payload.get("first_air_date"))
    common = {
        "id": _as_int(payload.get("id")),
        "poster_path": _as_str(payload.get("poster_path")),
        "genre_ids": _int_list(payload.get("genre_ids")),
        "genres": _genre_objects(payload.get("genres")),
    }
    if kind is MediaType.MOVIE:
        return RawMovieRecord(title=title, release_date=date, **common)
    return RawSeriesRecord(name=title, first_air_date=date, **common)


@dataclass(frozen=True)
class CanonicalMediaRecord:
    """
    Canonical media record (maps to `core.media_items`).

    `local_id` is assigned by the database on first insert and is None for records
    that have not been persisted yet.
    """

    provider_id: int
    title: str
    media_type: MediaType
    poster_path: str = ""
    release_date: str | None = None
    genre_text: str = ""
    local_id: int | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "tmdb_id": int(self.provider_id),
            "title": self.title,
            "poster_path": self.poster_path or "",
            "release_date": self.release_date,
            "genre_text": self.genre_text or "",
            "media_type": self.media_type.value,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> CanonicalMediaRecord:
        return cls(
            provider_id=int(row["tmdb_id"]),
            title=str(row.get("title") or ""),
            media_type=MediaType.parse(row.get("media_type") or MediaType.MOVIE),
            poster_path=str(row.get("poster_path") or ""),
            release_date=_as_str(row.get("release_date")),
            genre_text=str(row.get("genre_text") or ""),
            local_id=_as_int(row.get("id")),
        )

    def as_public_dict(self) -> dict[str, Any]:
        return {
            "id": self.local_id,
            "tmdb_id": self.provider_id,
            "title": self.title,
            "poster": self.poster_path,
            "release_date": self.release_date,
            "genres": self.genre_text,
            "type": self.media_type.value,
        }


@dataclass(frozen=True)
class BackfillUpdate:
    provider_id: int
    title: str
    media_type: MediaType
    genre_text: str
