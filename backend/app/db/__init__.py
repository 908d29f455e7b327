"""Database connections module."""

from app.db.supabase import get_async_supabase_client_async, reset_supabase_client

__all__ = ["get_async_supabase_client_async", "reset_supabase_client"]
