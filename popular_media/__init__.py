"""
Shared popular-media library code.

This package is intended to hold code that is reused across:
- the FastAPI app in `api/`
- sync/backfill scripts in `scripts/`

App entrypoints (FastAPI routers, CLI scripts) should live outside this package and
import from `popular_media` rather than the other way around.
"""
