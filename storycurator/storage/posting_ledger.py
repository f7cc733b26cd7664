"""
Posting Ledger
==============

Records which item URLs were already shared to which channel so scheduled
shares don't repeat themselves. The publisher treats the ledger as
optional.
"""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Iterable, List, Optional, Protocol, Set, Union

from ..models.content import ContentCategory, category_tag
from ..utils.exceptions import LedgerError
from ..utils.logging import get_logger_for_component


SCHEMA = """
CREATE TABLE IF NOT EXISTS posted_content (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    category TEXT NOT NULL,
    channel_id TEXT NOT NULL,
    message_ref TEXT,
    shared_at TIMESTAMP NOT NULL,
    UNIQUE(url, channel_id)
);
CREATE INDEX IF NOT EXISTS idx_posted_content_channel
    ON posted_content(channel_id, category);
"""


@dataclass
class PostingRecord:
    """One item shared to one channel."""
    url: str
    category: str
    channel_id: str
    message_ref: Optional[str]
    shared_at: datetime


class PostingLedger(Protocol):
    def shared_urls(self, category: Union[ContentCategory, str], channel_id: str) -> Set[str]:
        ...

    def mark_shared(self, category: Union[ContentCategory, str], channel_id: str,
                    urls: Iterable[str], message_ref: Optional[str]) -> int:
        ...


class SQLitePostingLedger:
    """Posting ledger stored in a SQLite file."""

    def __init__(self, db_path: str = "data/storycurator.db"):
        """Initialize ledger and create the schema if needed.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = get_logger_for_component("posting_ledger")

        with self._connection() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
        except sqlite3.Error as e:
            raise LedgerError(f"Cannot open ledger at {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise LedgerError(f"Ledger operation failed: {e}") from e
        finally:
            conn.close()

    def shared_urls(self, category: Union[ContentCategory, str], channel_id: str) -> Set[str]:
        """URLs already shared to a channel for a category."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT url FROM posted_content WHERE category = ? AND channel_id = ?",
                (category_tag(category), channel_id),
            ).fetchall()
        return {row["url"] for row in rows}

    def mark_shared(self, category: Union[ContentCategory, str], channel_id: str,
                    urls: Iterable[str], message_ref: Optional[str]) -> int:
        """Record URLs as shared; already-recorded URLs are left untouched.

        Returns:
            Number of newly recorded URLs
        """
        shared_at = datetime.now(timezone.utc).isoformat()
        tag = category_tag(category)

        with self._connection() as conn:
            inserted = 0
            for url in urls:
                cursor = conn.execute(
                    """
                    INSERT OR IGNORE INTO posted_content
                        (url, category, channel_id, message_ref, shared_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (url, tag, channel_id, message_ref, shared_at),
                )
                inserted += cursor.rowcount

        self.logger.debug(f"Recorded {inserted} shared URLs for {tag} in {channel_id}")
        return inserted

    def history(self, channel_id: str, limit: int = 50) -> List[PostingRecord]:
        """Most recent postings to a channel, newest first."""
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT url, category, channel_id, message_ref, shared_at
                FROM posted_content
                WHERE channel_id = ?
                ORDER BY shared_at DESC, id DESC
                LIMIT ?
                """,
                (channel_id, limit),
            ).fetchall()

        return [
            PostingRecord(
                url=row["url"],
                category=row["category"],
                channel_id=row["channel_id"],
                message_ref=row["message_ref"],
                shared_at=datetime.fromisoformat(row["shared_at"]),
            )
            for row in rows
        ]
