#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from popular_media.ingestion.sync import MediaSync
from popular_media.models.media import MediaType
from scripts._sync_common import add_common_args, build_tmdb_client, configure_logging, load_env_and_db


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sync_popular_media",
        description="Fetch TMDb popular movies and TV shows into core.media_items.",
    )
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    db = load_env_and_db()

    summary = MediaSync(db, build_tmdb_client()).run_full_sync()

    print(
        "sync_popular_media: "
        f"movies={summary.count(MediaType.MOVIE)} tvshows={summary.count(MediaType.TV)} level={summary.level}"
    )
    print(summary.message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
