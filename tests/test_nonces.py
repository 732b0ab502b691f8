from __future__ import annotations

from api.nonces import NONCE_LIFETIME_SECONDS, create_nonce, verify_nonce

SECRET = "test-secret"
NOW = 1_750_000_000.0


def test_nonce_round_trip_for_same_action_and_user() -> None:
    nonce = create_nonce(SECRET, "refresh_movies", "user-1", now=NOW)
    assert verify_nonce(SECRET, nonce, "refresh_movies", "user-1", now=NOW)


def test_nonce_is_scoped_to_action_user_and_secret() -> None:
    nonce = create_nonce(SECRET, "refresh_movies", "user-1", now=NOW)
    assert not verify_nonce(SECRET, nonce, "refresh_tvshows", "user-1", now=NOW)
    assert not verify_nonce(SECRET, nonce, "refresh_movies", "user-2", now=NOW)
    assert not verify_nonce("other-secret", nonce, "refresh_movies", "user-1", now=NOW)


def test_nonce_survives_one_tick_then_expires() -> None:
    half = NONCE_LIFETIME_SECONDS / 2
    nonce = create_nonce(SECRET, "wp_movies_update", "user-1", now=NOW)
    assert verify_nonce(SECRET, nonce, "wp_movies_update", "user-1", now=NOW + half)
    assert not verify_nonce(SECRET, nonce, "wp_movies_update", "user-1", now=NOW + 2 * half + half)


def test_empty_nonce_is_rejected() -> None:
    assert not verify_nonce(SECRET, None, "wp_movies_update", "user-1", now=NOW)
    assert not verify_nonce(SECRET, "", "wp_movies_update", "user-1", now=NOW)
