"""
Ingestion helpers for pulling TMDb data into the local media table.
"""

from popular_media.ingestion.normalize import (
    MediaNormalizationError,
    extract_genre_names,
    normalize,
    normalize_payload,
)
from popular_media.ingestion.sync import MediaSync, PhaseResult, SyncReporter, SyncSummary

__all__ = [
    "MediaNormalizationError",
    "MediaSync",
    "PhaseResult",
    "SyncReporter",
    "SyncSummary",
    "extract_genre_names",
    "normalize",
    "normalize_payload",
]
