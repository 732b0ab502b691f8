from __future__ import annotations

from supabase import Client, create_client

from popular_media.config import get_settings, require_setting


def create_supabase_admin_client(*, url: str | None = None, service_role_key: str | None = None) -> Client:
    """
    Create a Supabase client using the service role key (bypasses RLS).

    Intended for the sync and backfill jobs, which write to `core.media_items`.
    """

    settings = get_settings()
    return create_client(
        url or require_setting(settings.supabase_url, "SUPABASE_URL"),
        service_role_key or require_setting(settings.supabase_service_role_key, "SUPABASE_SERVICE_ROLE_KEY"),
    )
