"""
Domain models shared across scripts and services.
"""

from popular_media.models.media import (
    BackfillUpdate,
    CanonicalMediaRecord,
    MediaType,
    RawMovieRecord,
    RawSeriesRecord,
    parse_raw_record,
)

__all__ = [
    "BackfillUpdate",
    "CanonicalMediaRecord",
    "MediaType",
    "RawMovieRecord",
    "RawSeriesRecord",
    "parse_raw_record",
]
