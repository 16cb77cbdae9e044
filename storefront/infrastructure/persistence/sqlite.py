from __future__ import annotations

import logging
import re
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, TypeVar

from ...domain.models import Page, PageRequest, Role

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FROM_KEYWORD = re.compile(r"\bFROM\b", re.IGNORECASE)


def _from_clause(select: str) -> str:
    match = _FROM_KEYWORD.search(select)
    if not match:
        raise ValueError("SELECT statement has no FROM clause")
    return select[match.start():]


class Transaction:
    """Handle for the unit of work currently holding the database lock."""

    def __init__(self) -> None:
        self._callbacks: List[Callable[[], Any]] = []

    def on_commit(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once the outermost transaction commits; dropped on rollback."""
        self._callbacks.append(callback)


class SQLiteDatabase:
    """Single shared SQLite connection serialised by a re-entrant lock.

    Repositories run every statement through this object so that a use case
    spanning several repositories can share one transaction.
    """

    def __init__(self, path: Path) -> None:
        if str(path) != ":memory:":
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.RLock()
        self._current: Optional[Transaction] = None
        self._initialize()

    def _initialize(self) -> None:
        with self._lock, self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS roles (
                    name TEXT PRIMARY KEY,
                    description TEXT
                );

                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    phone TEXT,
                    role TEXT NOT NULL REFERENCES roles(name),
                    is_active INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS refresh_tokens (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    token TEXT NOT NULL UNIQUE,
                    user_id TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    is_revoked INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_refresh_tokens_user
                    ON refresh_tokens(user_id);

                CREATE TABLE IF NOT EXISTS otps (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    code TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    is_used INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_otps_user_created
                    ON otps(user_id, created_at DESC);

                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES users(id),
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    title TEXT,
                    description TEXT,
                    image TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS products (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES users(id),
                    category_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    title TEXT,
                    description TEXT,
                    short_description TEXT,
                    price REAL NOT NULL,
                    discount_price REAL,
                    quantity INTEGER NOT NULL DEFAULT 0,
                    images TEXT NOT NULL DEFAULT '[]',
                    featured INTEGER NOT NULL DEFAULT 0,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    avg_rating REAL NOT NULL DEFAULT 0,
                    review_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE RESTRICT
                );

                CREATE INDEX IF NOT EXISTS idx_products_category
                    ON products(category_id);

                CREATE TABLE IF NOT EXISTS comments (
                    id TEXT PRIMARY KEY,
                    product_id TEXT NOT NULL,
                    user_id TEXT NOT NULL REFERENCES users(id),
                    parent_id TEXT,
                    content TEXT NOT NULL,
                    is_approved INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(product_id) REFERENCES products(id) ON DELETE CASCADE,
                    FOREIGN KEY(parent_id) REFERENCES comments(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_comments_product
                    ON comments(product_id, parent_id);

                CREATE TABLE IF NOT EXISTS reviews (
                    id TEXT PRIMARY KEY,
                    product_id TEXT NOT NULL,
                    user_id TEXT NOT NULL REFERENCES users(id),
                    rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
                    title TEXT,
                    comment TEXT NOT NULL,
                    is_approved INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(product_id, user_id),
                    FOREIGN KEY(product_id) REFERENCES products(id) ON DELETE CASCADE
                );
                """
            )
            self._conn.executemany(
                "INSERT OR IGNORE INTO roles (name, description) VALUES (?, ?)",
                [(role.value, role.description) for role in Role],
            )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # Unit of work -----------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Hold the lock for a whole use case; nested calls join the outer one."""
        with self._lock:
            if self._current is not None:
                yield self._current
                return
            tx = Transaction()
            self._current = tx
            try:
                yield tx
            except BaseException:
                self._conn.rollback()
                raise
            else:
                self._conn.commit()
            finally:
                self._current = None
        for callback in tx._callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Post-commit callback failed")

    @property
    def in_transaction(self) -> bool:
        return self._current is not None

    # Statement helpers ------------------------------------------------------
    def execute(self, statement: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._conn.execute(statement, params)

    def fetchone(self, statement: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            cur = self._conn.execute(statement, params)
            return cur.fetchone()

    def fetchall(self, statement: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            cur = self._conn.execute(statement, params)
            return cur.fetchall()

    def count(self, statement: str, params: Sequence[Any] = ()) -> int:
        row = self.fetchone(statement, params)
        return int(row[0]) if row else 0

    def paginate(
        self,
        select: str,
        where: str,
        params: Sequence[Any],
        page: PageRequest,
        sort_columns: Dict[str, str],
        mapper: Callable[[sqlite3.Row], T],
        count_from: Optional[str] = None,
    ) -> Page[T]:
        """Run ``select`` + ``where`` as one page and count the full result set.

        ``sort_columns`` maps the public sort keys onto SQL columns; unknown keys
        fall back to the first entry.
        """
        column = sort_columns.get(page.sort_by) or next(iter(sort_columns.values()))
        direction = "ASC" if page.sort_order.upper() == "ASC" else "DESC"
        with self._lock:
            total = self.count(f"SELECT COUNT(*) {count_from or _from_clause(select)} {where}", params)
            rows = self.fetchall(
                f"{select} {where} ORDER BY {column} {direction} LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            )
        return Page(
            items=[mapper(row) for row in rows],
            total_items=total,
            current_page=page.page,
            limit=page.limit,
        )

    # Time helpers -----------------------------------------------------------
    @staticmethod
    def now() -> datetime:
        return datetime.now(tz=timezone.utc).replace(microsecond=0)

    @staticmethod
    def format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def parse_datetime(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
