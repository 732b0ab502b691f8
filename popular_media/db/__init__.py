"""
Database helpers for popular-media scripts/services.
"""

from popular_media.db.supabase import create_supabase_admin_client

__all__ = [
    "create_supabase_admin_client",
]
