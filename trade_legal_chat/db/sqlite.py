"""SQLite database operations"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from trade_legal_chat.utils.config import get_settings


def get_db_path() -> Path:
    """Get database path from settings"""
    settings = get_settings()
    return Path(settings.database_path)


@contextmanager
def get_connection():
    """Get a database connection as context manager"""
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def to_iso(value: datetime) -> str:
    """Fixed-width UTC ISO string, so text ordering matches time ordering"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _now() -> str:
    return to_iso(datetime.now(timezone.utc))


def init_db():
    """Initialize database with schema"""
    with get_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS legal_chat_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                summary TEXT,
                message_count INTEGER NOT NULL DEFAULT 0,
                last_message_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_sessions_user
            ON legal_chat_sessions(user_id, updated_at)
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS legal_chat_messages (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES legal_chat_sessions(id),
                user_id TEXT NOT NULL,
                message TEXT NOT NULL DEFAULT '',
                response TEXT NOT NULL DEFAULT '',
                message_type TEXT NOT NULL CHECK (message_type IN ('user', 'assistant')),
                ai_confidence REAL NOT NULL DEFAULT 0,
                suggestions TEXT NOT NULL DEFAULT '[]',
                related_topics TEXT NOT NULL DEFAULT '[]',
                context_data TEXT NOT NULL DEFAULT '{}',
                timestamp TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_messages_session
            ON legal_chat_messages(session_id, timestamp)
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS legal_chat_context (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES legal_chat_sessions(id),
                user_id TEXT NOT NULL,
                context_key TEXT NOT NULL,
                context_value TEXT NOT NULL,
                context_type TEXT NOT NULL DEFAULT 'general',
                importance INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE(session_id, context_key)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS ai_configurations (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                is_active INTEGER NOT NULL DEFAULT 0,
                system_role TEXT NOT NULL DEFAULT '',
                custom_instructions TEXT NOT NULL DEFAULT '',
                temperature REAL,
                max_tokens INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)


# Sessions

def create_session(user_id: str, title: str) -> dict:
    """Insert a chat session. Returns the stored row."""
    now = _now()
    session = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "title": title,
        "summary": None,
        "message_count": 0,
        "last_message_at": None,
        "created_at": now,
        "updated_at": now,
    }
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO legal_chat_sessions
            (id, user_id, title, summary, message_count, last_message_at, created_at, updated_at)
            VALUES (:id, :user_id, :title, :summary, :message_count, :last_message_at,
                    :created_at, :updated_at)
            """,
            session,
        )
    return session


def get_session(session_id: str) -> Optional[dict]:
    """Get session by ID"""
    with get_connection() as conn:
        row = conn.execute(
            "SELECT * FROM legal_chat_sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return dict(row) if row else None


def list_sessions(user_id: str) -> list[dict]:
    """Sessions of a user, most recently updated first"""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT * FROM legal_chat_sessions WHERE user_id = ? "
            "ORDER BY updated_at DESC, rowid DESC",
            (user_id,),
        ).fetchall()
        return [dict(r) for r in rows]


def touch_session(session_id: str, added_messages: int, at: str) -> None:
    """Bump message_count and move last_message_at/updated_at forward"""
    with get_connection() as conn:
        conn.execute(
            """
            UPDATE legal_chat_sessions
            SET message_count = message_count + ?, last_message_at = ?, updated_at = ?
            WHERE id = ?
            """,
            (added_messages, at, at, session_id),
        )


# Messages

_JSON_MESSAGE_COLUMNS = ("suggestions", "related_topics", "context_data")


def insert_message(row: dict) -> dict:
    """Insert one message row. Returns it with its id."""
    data = {**row, "id": row.get("id") or str(uuid.uuid4())}
    params = {
        **data,
        **{col: json.dumps(data.get(col), ensure_ascii=False) for col in _JSON_MESSAGE_COLUMNS},
    }
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO legal_chat_messages
            (id, session_id, user_id, message, response, message_type, ai_confidence,
             suggestions, related_topics, context_data, timestamp)
            VALUES (:id, :session_id, :user_id, :message, :response, :message_type,
                    :ai_confidence, :suggestions, :related_topics, :context_data, :timestamp)
            """,
            params,
        )
    return data


def _message_from_row(row: sqlite3.Row) -> dict:
    data = dict(row)
    for col in _JSON_MESSAGE_COLUMNS:
        data[col] = json.loads(data[col]) if data[col] else None
    return data


def get_messages(user_id: str, session_id: str) -> list[dict]:
    """All rows of a (user, session) pair in insertion order"""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT * FROM legal_chat_messages WHERE user_id = ? AND session_id = ? "
            "ORDER BY timestamp ASC, rowid ASC",
            (user_id, session_id),
        ).fetchall()
        return [_message_from_row(r) for r in rows]


def get_recent_messages(session_id: str, limit: int) -> list[dict]:
    """Newest rows of a session, newest first"""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT * FROM legal_chat_messages WHERE session_id = ? "
            "ORDER BY timestamp DESC, rowid DESC LIMIT ?",
            (session_id, limit),
        ).fetchall()
        return [_message_from_row(r) for r in rows]


# Context facts

def get_context(session_id: str) -> list[dict]:
    """Context facts of a session, most important first"""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT session_id, user_id, context_key, context_value, context_type, importance "
            "FROM legal_chat_context WHERE session_id = ? "
            "ORDER BY importance DESC, context_key ASC",
            (session_id,),
        ).fetchall()
        return [dict(r) for r in rows]


def upsert_context(fact: dict) -> None:
    """Insert or overwrite the fact for (session_id, context_key)"""
    now = _now()
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO legal_chat_context
            (id, session_id, user_id, context_key, context_value, context_type, importance,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(session_id, context_key) DO UPDATE SET
                user_id = excluded.user_id,
                context_value = excluded.context_value,
                context_type = excluded.context_type,
                importance = excluded.importance,
                updated_at = excluded.updated_at
            """,
            (
                str(uuid.uuid4()),
                fact["session_id"],
                fact["user_id"],
                fact["context_key"],
                fact["context_value"],
                fact["context_type"],
                fact["importance"],
                now,
                now,
            ),
        )


# AI configurations

def _config_from_row(row: sqlite3.Row) -> dict:
    data = dict(row)
    data["is_active"] = bool(data["is_active"])
    return data


def get_active_ai_config() -> Optional[dict]:
    """The active AI configuration, if any"""
    with get_connection() as conn:
        row = conn.execute(
            "SELECT * FROM ai_configurations WHERE is_active = 1 LIMIT 1"
        ).fetchone()
        return _config_from_row(row) if row else None


def list_ai_configs() -> list[dict]:
    """All AI configurations, newest first"""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT * FROM ai_configurations ORDER BY created_at DESC"
        ).fetchall()
        return [_config_from_row(r) for r in rows]


def insert_ai_config(config: dict) -> dict:
    """Insert an AI configuration. Returns the stored row."""
    now = _now()
    data = {
        **config,
        "id": config.get("id") or str(uuid.uuid4()),
        "created_at": now,
        "updated_at": now,
    }
    with get_connection() as conn:
        if data.get("is_active"):
            conn.execute("UPDATE ai_configurations SET is_active = 0")
        conn.execute(
            """
            INSERT INTO ai_configurations
            (id, name, description, is_active, system_role, custom_instructions,
             temperature, max_tokens, created_at, updated_at)
            VALUES (:id, :name, :description, :is_active, :system_role, :custom_instructions,
                    :temperature, :max_tokens, :created_at, :updated_at)
            """,
            {**data, "is_active": 1 if data.get("is_active") else 0},
        )
    return data


def set_active_ai_config(config_id: str) -> bool:
    """Activate one configuration, deactivate the others"""
    with get_connection() as conn:
        exists = conn.execute(
            "SELECT 1 FROM ai_configurations WHERE id = ?", (config_id,)
        ).fetchone()
        if not exists:
            return False
        conn.execute(
            "UPDATE ai_configurations SET is_active = CASE WHEN id = ? THEN 1 ELSE 0 END, "
            "updated_at = ?",
            (config_id, _now()),
        )
        return True


_AI_CONFIG_COLUMNS = (
    "name", "description", "is_active", "system_role", "custom_instructions",
    "temperature", "max_tokens",
)


def update_ai_config(config_id: str, fields: dict) -> Optional[dict]:
    """Write the given columns of one configuration. Returns the stored row."""
    unknown = set(fields) - set(_AI_CONFIG_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown AI configuration fields: {sorted(unknown)}")

    with get_connection() as conn:
        exists = conn.execute(
            "SELECT 1 FROM ai_configurations WHERE id = ?", (config_id,)
        ).fetchone()
        if not exists:
            return None

        params = {**fields, "id": config_id, "updated_at": _now()}
        if "is_active" in fields:
            params["is_active"] = 1 if fields["is_active"] else 0
            if fields["is_active"]:
                conn.execute(
                    "UPDATE ai_configurations SET is_active = 0 WHERE id != ?", (config_id,)
                )
        assignments = ", ".join(f"{col} = :{col}" for col in [*fields, "updated_at"])
        conn.execute(f"UPDATE ai_configurations SET {assignments} WHERE id = :id", params)

        row = conn.execute(
            "SELECT * FROM ai_configurations WHERE id = ?", (config_id,)
        ).fetchone()
        return _config_from_row(row)


def delete_ai_config(config_id: str) -> bool:
    """Delete one configuration. Returns False when it does not exist."""
    with get_connection() as conn:
        cursor = conn.execute("DELETE FROM ai_configurations WHERE id = ?", (config_id,))
        return cursor.rowcount > 0


def count_rows(table: str) -> int:
    """Row count of one of the chat tables"""
    if table not in {
        "legal_chat_sessions",
        "legal_chat_messages",
        "legal_chat_context",
        "ai_configurations",
    }:
        raise ValueError(f"Unknown table: {table}")
    with get_connection() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
