from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from popular_media.models.media import MediaType

logger = logging.getLogger(__name__)

# https://api.themoviedb.org/3/genre/movie/list
TMDB_MOVIE_GENRES: Mapping[int, str] = MappingProxyType(
    {
        28: "Action",
        12: "Adventure",
        16: "Animation",
        35: "Comedy",
        80: "Crime",
        99: "Documentary",
        18: "Drama",
        10751: "Family",
        14: "Fantasy",
        36: "History",
        27: "Horror",
        10402: "Music",
        9648: "Mystery",
        10749: "Romance",
        878: "Science Fiction",
        10770: "TV Movie",
        53: "Thriller",
        10752: "War",
        37: "Western",
    }
)

# https://api.themoviedb.org/3/genre/tv/list
TMDB_TV_GENRES: Mapping[int, str] = MappingProxyType(
    {
        10759: "Action & Adventure",
        16: "Animation",
        35: "Comedy",
        80: "Crime",
        99: "Documentary",
        18: "Drama",
        10751: "Family",
        10762: "Kids",
        9648: "Mystery",
        10763: "News",
        10764: "Reality",
        10765: "Sci-Fi & Fantasy",
        10766: "Soap",
        10767: "Talk",
        10768: "War & Politics",
        37: "Western",
    }
)


@dataclass(frozen=True)
class GenreTable:
    """
    Static TMDb genre id -> name lookup, one map per media type.

    The two id spaces overlap only partially (e.g. 878 exists for movies only), so
    lookups never fall back across types.
    """

    movie: Mapping[int, str] = field(default_factory=lambda: TMDB_MOVIE_GENRES)
    tv: Mapping[int, str] = field(default_factory=lambda: TMDB_TV_GENRES)

    def _map_for(self, media_type: MediaType | str) -> Mapping[int, str]:
        return self.movie if MediaType.parse(media_type) is MediaType.MOVIE else self.tv

    def name_for(self, genre_id: int, media_type: MediaType | str) -> str | None:
        return self._map_for(media_type).get(int(genre_id))

    def resolve(self, ids: Iterable[int], media_type: MediaType | str) -> list[str]:
        kind = MediaType.parse(media_type)
        mapping = self._map_for(kind)
        names: list[str] = []
        for genre_id in ids:
            name = mapping.get(genre_id)
            if name is None:
                logger.info(f"Unknown TMDb genre id {genre_id} for media_type={kind.value}; skipping")
                continue
            names.append(name)
        return names


DEFAULT_GENRE_TABLE = GenreTable()
