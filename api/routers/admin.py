"""
Admin endpoints: nonce issuance, manual "sync now", and the genre backfill.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.auth import AdminUser, actor_name, require_nonce
from api.deps import AjaxError, AppSettings, MediaSyncDep, ajax_success
from api.nonces import GENRE_BACKFILL, MEDIA_SYNC, REFRESH_MOVIES, REFRESH_TVSHOWS, create_nonce
from popular_media.config import require_setting
from popular_media.repositories.media_items import MediaRepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/nonces")
def get_nonces(settings: AppSettings, user: AdminUser):
    """Nonces for the admin page's buttons; valid for 12-24 hours."""
    secret = require_setting(settings.nonce_secret, "NONCE_SECRET")
    return ajax_success(
        {
            "nonce_movies": create_nonce(secret, REFRESH_MOVIES, user["id"]),
            "nonce_tvshows": create_nonce(secret, REFRESH_TVSHOWS, user["id"]),
            "nonce_sync": create_nonce(secret, MEDIA_SYNC, user["id"]),
            "nonce_backfill": create_nonce(secret, GENRE_BACKFILL, user["id"]),
        }
    )


@router.post("/sync")
def sync_now(
    media_sync: MediaSyncDep,
    user: Annotated[dict, Depends(require_nonce(MEDIA_SYNC))],
):
    summary = media_sync.run_full_sync(actor=actor_name(user))
    return ajax_success(summary.as_dict())


@router.post("/backfill-genres")
def backfill_genres(
    media_sync: MediaSyncDep,
    user: Annotated[dict, Depends(require_nonce(GENRE_BACKFILL))],
):
    try:
        updates = media_sync.run_genre_backfill(actor=actor_name(user))
    except MediaRepositoryError as exc:
        logger.error(f"Genre backfill could not list candidates: {exc}")
        raise AjaxError("Database error while loading records without genres", status_code=502) from exc
    return ajax_success(
        {
            "updated": [
                {
                    "tmdb_id": u.provider_id,
                    "title": u.title,
                    "type": u.media_type.value,
                    "genres": u.genre_text,
                }
                for u in updates
            ]
        }
    )
