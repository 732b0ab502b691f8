from __future__ import annotations

import argparse
import logging

from supabase import Client

from popular_media.config import get_settings, require_setting
from popular_media.db.supabase import create_supabase_admin_client
from popular_media.integrations.tmdb.client import TmdbClient
from popular_media.repositories.media_items import assert_media_items_table_exists


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_env_and_db() -> Client:
    get_settings()
    db = create_supabase_admin_client()
    assert_media_items_table_exists(db)
    return db


def build_tmdb_client() -> TmdbClient:
    settings = get_settings()
    return TmdbClient(
        require_setting(settings.tmdb_api_key, "TMDB_API_KEY"),
        language=settings.tmdb_language,
        timeout_seconds=settings.tmdb_timeout_seconds,
    )
