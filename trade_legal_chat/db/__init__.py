"""Database modules"""

from trade_legal_chat.db.base import ChatStoreInterface
from trade_legal_chat.db.supabase import SupabaseStore, get_database
from trade_legal_chat.db.sqlite_client import SQLiteStore

__all__ = [
    "ChatStoreInterface",
    "SupabaseStore",
    "SQLiteStore",
    "get_database",
]
