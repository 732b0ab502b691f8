"""
Authentication utilities for FastAPI.

Extracts user information from Supabase JWT tokens and gates the admin
endpoints behind an admin role plus a per-action nonce.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Callable

from fastapi import Depends, Request
from supabase import create_client

from api.deps import AjaxError, AppSettings
from api.nonces import verify_nonce
from popular_media.config import Settings, require_setting

logger = logging.getLogger(__name__)

NONCE_HEADER = "X-WP-Nonce"
NONCE_PARAM = "_wpnonce"


def get_bearer_token(request: Request) -> str | None:
    """
    Extract Bearer token from Authorization header.

    Returns None if no token is present.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def get_current_user(request: Request, settings: AppSettings) -> dict | None:
    """
    Get the current user from the Supabase JWT token.

    Returns None if no token or invalid token.
    Returns user dict with 'id', 'email', 'app_metadata', etc. if valid.
    """
    token = get_bearer_token(request)
    if not token:
        return None

    try:
        client = create_client(
            require_setting(settings.supabase_url, "SUPABASE_URL"),
            require_setting(settings.supabase_anon_key, "SUPABASE_ANON_KEY"),
        )
        user_response = client.auth.get_user(token)

        if user_response and user_response.user:
            return {
                "id": str(user_response.user.id),
                "email": user_response.user.email,
                "role": user_response.user.role,
                "app_metadata": dict(user_response.user.app_metadata or {}),
            }
        return None
    except Exception as e:
        logger.warning(f"Failed to validate token: {e}")
        return None


def is_admin(user: dict[str, Any] | None, settings: Settings) -> bool:
    if not user:
        return False
    app_metadata = user.get("app_metadata") or {}
    if app_metadata.get("role") == "admin":
        return True
    email = (user.get("email") or "").casefold()
    return bool(email) and email in settings.admin_emails


def actor_name(user: dict[str, Any] | None) -> str | None:
    if not user:
        return None
    return user.get("email") or user.get("id")


async def require_admin(
    settings: AppSettings,
    user: Annotated[dict | None, Depends(get_current_user)],
) -> dict:
    """
    Dependency that requires an authenticated admin.

    Raises a 403 envelope otherwise, matching admin-ajax.
    """
    if not is_admin(user, settings):
        raise AjaxError("Unauthorized", status_code=403)
    return user


AdminUser = Annotated[dict, Depends(require_admin)]


async def read_nonce(request: Request) -> str | None:
    """
    Nonce from the `X-WP-Nonce` header, the `_wpnonce` query parameter, or the
    `_wpnonce` field of a form or JSON body, in that order.
    """
    nonce = request.headers.get(NONCE_HEADER) or request.query_params.get(NONCE_PARAM)
    if nonce:
        return nonce

    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if content_type in {"application/x-www-form-urlencoded", "multipart/form-data"}:
        form = await request.form()
        value = form.get(NONCE_PARAM)
        return value if isinstance(value, str) else None
    if content_type == "application/json":
        try:
            body = await request.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get(NONCE_PARAM), str):
            return body[NONCE_PARAM]
    return None


def require_nonce(action: str) -> Callable[..., Any]:
    async def _check(request: Request, settings: AppSettings, user: AdminUser) -> dict:
        nonce = await read_nonce(request)
        secret = require_setting(settings.nonce_secret, "NONCE_SECRET")
        if not verify_nonce(secret, nonce, action, user["id"]):
            raise AjaxError("Nonce verification failed", status_code=403)
        return user

    return _check
