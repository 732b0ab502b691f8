#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from popular_media.ingestion.sync import MediaSync
from popular_media.repositories.media_items import find_missing_genre
from scripts._sync_common import add_common_args, build_tmdb_client, configure_logging, load_env_and_db


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="backfill_genres",
        description="Fill genre_text for core.media_items rows stored without genres.",
    )
    add_common_args(parser)
    parser.add_argument("--dry-run", action="store_true", help="List candidates without calling TMDb or writing.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    db = load_env_and_db()

    if args.dry_run:
        candidates = find_missing_genre(db)
        for record in candidates:
            print(f"CANDIDATE tmdb_id={record.provider_id} type={record.media_type.value} title={record.title}")
        print(f"backfill_genres: candidates={len(candidates)} (dry run)")
        return 0

    updates = MediaSync(db, build_tmdb_client()).run_genre_backfill()
    for update in updates:
        print(f"UPDATED {update.title} ({update.media_type.value}): {update.genre_text}")
    print(f"backfill_genres: updated={len(updates)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
