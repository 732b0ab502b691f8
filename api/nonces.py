"""
Short-lived, action-scoped request tokens (WordPress nonce semantics).

A nonce is an HMAC over (action, user id, tick), where a tick is half of the
lifetime. A token stays valid for the tick it was issued in and the next one.
"""
from __future__ import annotations

import hashlib
import hmac
import time

NONCE_LIFETIME_SECONDS = 24 * 60 * 60
NONCE_LENGTH = 10

REFRESH_MOVIES = "refresh_movies"
REFRESH_TVSHOWS = "refresh_tvshows"
MEDIA_SYNC = "wp_movies_update"
GENRE_BACKFILL = "genre_backfill"


def nonce_tick(now: float | None = None) -> int:
    current = time.time() if now is None else now
    return int(current // (NONCE_LIFETIME_SECONDS / 2))


def _digest(secret: str, action: str, user_id: str, tick: int) -> str:
    message = f"{tick}|{action}|{user_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()[-NONCE_LENGTH:]


def create_nonce(secret: str, action: str, user_id: str, *, now: float | None = None) -> str:
    return _digest(secret, action, user_id, nonce_tick(now))


def verify_nonce(secret: str, nonce: str | None, action: str, user_id: str, *, now: float | None = None) -> bool:
    if not nonce:
        return False
    tick = nonce_tick(now)
    for candidate in (tick, tick - 1):
        if hmac.compare_digest(_digest(secret, action, user_id, candidate), nonce):
            return True
    return False
