"""
Dependency injection for Supabase/TMDb clients and the WordPress-style JSON envelope.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import Depends
from supabase import Client, create_client

from popular_media.config import Settings, get_settings, require_setting
from popular_media.ingestion.sync import MediaSync
from popular_media.integrations.tmdb.client import TmdbClient

logger = logging.getLogger(__name__)

AppSettings = Annotated[Settings, Depends(get_settings)]


def get_supabase_client(settings: AppSettings) -> Client:
    """
    Returns a Supabase client using the anon key (for public read operations).
    """
    return create_client(
        require_setting(settings.supabase_url, "SUPABASE_URL"),
        require_setting(settings.supabase_anon_key, "SUPABASE_ANON_KEY"),
    )


def get_supabase_admin_client(settings: AppSettings) -> Client:
    """
    Returns a Supabase client using the service role key (bypasses RLS).
    Use only for the sync/backfill writes.
    """
    return create_client(
        require_setting(settings.supabase_url, "SUPABASE_URL"),
        require_setting(settings.supabase_service_role_key, "SUPABASE_SERVICE_ROLE_KEY"),
    )


def get_tmdb_client(settings: AppSettings) -> TmdbClient:
    return TmdbClient(
        require_setting(settings.tmdb_api_key, "TMDB_API_KEY"),
        language=settings.tmdb_language,
        timeout_seconds=settings.tmdb_timeout_seconds,
    )


# Type aliases for dependency injection
SupabaseClient = Annotated[Client, Depends(get_supabase_client)]
SupabaseAdminClient = Annotated[Client, Depends(get_supabase_admin_client)]


def get_media_sync(
    db: SupabaseAdminClient,
    client: Annotated[TmdbClient, Depends(get_tmdb_client)],
) -> MediaSync:
    return MediaSync(db, client)


MediaSyncDep = Annotated[MediaSync, Depends(get_media_sync)]


class AjaxError(Exception):
    """
    Rendered as `{"success": false, "data": message}` with `status_code`.

    Mirrors `wp_send_json_error()` so existing admin/front-end scripts keep working.
    """

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def ajax_success(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def ajax_error(message: str) -> dict[str, Any]:
    return {"success": False, "data": message}
