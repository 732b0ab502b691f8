"""
Repository layer for DB access patterns.
"""

from popular_media.repositories.media_items import (
    MediaRepositoryError,
    find_media_item,
    find_missing_genre,
    sample_media_items,
    update_genre_text,
    upsert_media_item,
    upsert_media_items,
)

__all__ = [
    "MediaRepositoryError",
    "find_media_item",
    "find_missing_genre",
    "sample_media_items",
    "update_genre_text",
    "upsert_media_item",
    "upsert_media_items",
]
