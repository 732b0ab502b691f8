"""
Random refresh endpoints used by the admin page and the public front end.

Route names keep the WordPress admin-ajax action names so the existing scripts
only need a new base URL.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.auth import actor_name, require_nonce
from api.deps import AjaxError, AppSettings, SupabaseClient, ajax_success
from api.nonces import REFRESH_MOVIES, REFRESH_TVSHOWS
from popular_media.ingestion.sync import SYSTEM_ACTOR, SyncReporter
from popular_media.models.media import MediaType
from popular_media.repositories.media_items import MediaRepositoryError, sample_media_items

logger = logging.getLogger(__name__)
reporter = SyncReporter(logger)

router = APIRouter(prefix="/ajax", tags=["ajax"])

RESPONSE_KEYS = {MediaType.MOVIE: "movies", MediaType.TV: "tvshows"}


def _random_items(db: SupabaseClient, media_type: MediaType, limit: int, actor: str) -> list[dict]:
    try:
        records = sample_media_items(db, media_type, limit, random=True)
    except MediaRepositoryError as exc:
        logger.error(f"Failed to sample {media_type.value} items: {exc}")
        raise AjaxError(f"Database error while loading {media_type.label}", status_code=502) from exc
    reporter.sample_served(actor, media_type, "Random selection", len(records))
    return [record.as_public_dict() for record in records]


def _manual_refresh(db: SupabaseClient, settings: AppSettings, user: dict, media_type: MediaType) -> dict:
    actor = actor_name(user) or SYSTEM_ACTOR
    items = _random_items(db, media_type, settings.sample_size, actor)
    logger.info(f"Manual refresh: {media_type.label} triggered_by={actor} randomized={len(items)}")
    return ajax_success({RESPONSE_KEYS[media_type]: items})


@router.post("/refresh_movies")
def refresh_movies(
    db: SupabaseClient,
    settings: AppSettings,
    user: Annotated[dict, Depends(require_nonce(REFRESH_MOVIES))],
):
    """Admin: 8 random movies (auth + nonce required)."""
    return _manual_refresh(db, settings, user, MediaType.MOVIE)


@router.post("/refresh_tvshows")
def refresh_tvshows(
    db: SupabaseClient,
    settings: AppSettings,
    user: Annotated[dict, Depends(require_nonce(REFRESH_TVSHOWS))],
):
    """Admin: 8 random TV shows (auth + nonce required)."""
    return _manual_refresh(db, settings, user, MediaType.TV)


@router.api_route("/front_refresh_movies", methods=["GET", "POST"])
def front_refresh_movies(db: SupabaseClient, settings: AppSettings):
    return ajax_success({"movies": _random_items(db, MediaType.MOVIE, settings.sample_size, SYSTEM_ACTOR)})


@router.api_route("/front_refresh_tvshows", methods=["GET", "POST"])
def front_refresh_tvshows(db: SupabaseClient, settings: AppSettings):
    return ajax_success({"tvshows": _random_items(db, MediaType.TV, settings.sample_size, SYSTEM_ACTOR)})
