"""
Conversation history store backed by SQLite.

Provides:
- Append-only message log keyed by session id (WAL mode for concurrency)
- Session listing ordered by most recent activity
- Last-N turn windows for the dialogue pipeline
- Per-session slot state (QueryInfo) carried between turns
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import aiosqlite
from loguru import logger

from api_recommender.config.settings import settings, resolve_path
from api_recommender.models.conversation import ASSISTANT, USER, ConversationTurn, SessionSummary
from api_recommender.models.query_info import QueryInfo

_SCHEMA = """
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_messages_session ON messages(session, id);
CREATE TABLE IF NOT EXISTS session_state (
    session TEXT PRIMARY KEY,
    query_info TEXT NOT NULL,
    updated TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HistoryStore:
    """Abstraction layer for conversation storage"""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize history store

        Args:
            db_path: Path to SQLite database (defaults to settings.history_db_path),
                ":memory:" for an in-memory database
        """
        self._conn: Optional[aiosqlite.Connection] = None
        self._initialized = False

        if db_path is None:
            db_path = str(resolve_path(settings.history_db_path))
        self.db_path = db_path

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def async_init(self):
        """Open the connection and create tables - call this from lifespan startup"""
        if self._initialized:
            return

        conn = await aiosqlite.connect(self.db_path, timeout=10.0)
        try:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.execute("PRAGMA busy_timeout=5000")
            await conn.executescript(_SCHEMA)
            await conn.commit()
        except Exception as e:
            logger.error(f"Failed to initialize history store: {e}")
            await conn.close()
            raise

        self._conn = conn
        self._initialized = True
        logger.info(f"Initialized history store at {self.db_path}")

    @property
    def conn(self) -> aiosqlite.Connection:
        if not self._initialized:
            raise RuntimeError("HistoryStore not initialized. Call async_init() first.")
        return self._conn

    async def close(self):
        """Close the aiosqlite connection"""
        if self._conn:
            await self._conn.close()
            self._conn = None
            self._initialized = False
            logger.debug("Closed history store connection")

    async def append_turn(self, session_id: str, user_text: str, assistant_text: str) -> None:
        """Record a user message and the assistant reply."""
        await self.conn.executemany(
            "INSERT INTO messages (session, role, content, created) VALUES (?, ?, ?, ?)",
            [
                (session_id, USER, user_text, _now()),
                (session_id, ASSISTANT, assistant_text, _now()),
            ],
        )
        await self.conn.commit()

    async def recent_turns(self, session_id: str, n: int) -> List[ConversationTurn]:
        """Last ``n`` messages of a session, oldest first."""
        if n <= 0:
            return []
        cursor = await self.conn.execute(
            "SELECT role, content, created FROM messages WHERE session = ? ORDER BY id DESC LIMIT ?",
            (session_id, n),
        )
        rows = await cursor.fetchall()
        return [ConversationTurn(role=r[0], text=r[1], timestamp=r[2]) for r in reversed(rows)]

    async def get_messages(self, session_id: str, limit: Optional[int] = None) -> List[ConversationTurn]:
        """First ``limit`` messages of a session in chronological order."""
        session_id = session_id.strip()
        if not session_id:
            raise ValueError("session id is required")
        if not limit or limit <= 0:
            limit = settings.session_messages_limit

        cursor = await self.conn.execute(
            "SELECT role, content, created FROM messages WHERE session = ? ORDER BY id ASC LIMIT ?",
            (session_id, limit),
        )
        rows = await cursor.fetchall()
        return [ConversationTurn(role=r[0], text=r[1], timestamp=r[2]) for r in rows]

    async def list_sessions(self, limit: Optional[int] = None) -> List[SessionSummary]:
        """Sessions ordered by most recent activity."""
        if not limit or limit <= 0:
            limit = settings.session_list_limit

        cursor = await self.conn.execute(
            """
            SELECT
                m1.session,
                MAX(m1.created) AS last_created,
                (
                    SELECT content FROM messages m2
                    WHERE m2.session = m1.session
                    ORDER BY m2.id DESC LIMIT 1
                ) AS last_content,
                COUNT(*) AS total,
                MAX(m1.id) AS last_id
            FROM messages m1
            WHERE m1.session IS NOT NULL AND m1.session != ''
            GROUP BY m1.session
            ORDER BY last_id DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = await cursor.fetchall()
        return [
            SessionSummary(
                id=row[0],
                last_message_at=row[1],
                last_message_preview=(row[2] or "").strip() or None,
                message_count=row[3],
            )
            for row in rows
        ]

    async def load_query_info(self, session_id: str) -> QueryInfo:
        """Slot state carried from the previous turn (empty when none)."""
        cursor = await self.conn.execute(
            "SELECT query_info FROM session_state WHERE session = ?", (session_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return QueryInfo()
        return QueryInfo.from_dict(json.loads(row[0]))

    async def save_query_info(self, session_id: str, query_info: QueryInfo) -> None:
        await self.conn.execute(
            """
            INSERT INTO session_state (session, query_info, updated) VALUES (?, ?, ?)
            ON CONFLICT(session) DO UPDATE SET query_info = excluded.query_info, updated = excluded.updated
            """,
            (session_id, json.dumps(query_info.to_dict()), _now()),
        )
        await self.conn.commit()

    async def clear_query_info(self, session_id: str) -> None:
        await self.conn.execute("DELETE FROM session_state WHERE session = ?", (session_id,))
        await self.conn.commit()


# Global instance (singleton pattern)
_history_store: Optional[HistoryStore] = None


def get_history_store() -> HistoryStore:
    """Get global history store instance (singleton)"""
    global _history_store
    if _history_store is None:
        _history_store = HistoryStore()
    return _history_store
