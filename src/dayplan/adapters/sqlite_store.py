"""SQLite task store adapter."""

import asyncio
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from dayplan.core.errors import PersistenceFailure
from dayplan.core.tasks import NewTask, Task, TaskStatus

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    SQLite task storage.

    Implements PersistentStore protocol. Blocking sqlite calls run in a
    worker thread; each call opens its own connection.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info(f"Task store ready at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    slot TEXT
                )
                """
            )
            for column in ("title", "created_at", "status", "slot"):
                conn.execute(f"CREATE INDEX IF NOT EXISTS idx_tasks_{column} ON tasks({column})")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        try:
            status = TaskStatus(row["status"])
        except ValueError:
            status = TaskStatus.PENDING
        return Task(
            id=str(row["id"]),
            title=row["title"],
            created_at=datetime.fromisoformat(row["created_at"]),
            status=status,
            slot=row["slot"],
        )

    def _create_sync(self, record: NewTask) -> str:
        conn = self._connect()
        try:
            cur = conn.execute(
                "INSERT INTO tasks(title, created_at, status, slot) VALUES (?, ?, ?, ?)",
                (record.title, record.created_at.isoformat(), record.status.value, record.slot),
            )
            conn.commit()
            if cur.lastrowid is None:
                raise PersistenceFailure("SQLite did not return an id for the new task")
            return str(cur.lastrowid)
        finally:
            conn.close()

    def _upsert_sync(self, task: Task) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, title, created_at, status, slot)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    created_at = excluded.created_at,
                    status = excluded.status,
                    slot = excluded.slot
                """,
                (int(task.id), task.title, task.created_at.isoformat(), task.status.value, task.slot),
            )
            conn.commit()
        finally:
            conn.close()

    def _load_all_sync(self) -> list[Task]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    async def create(self, record: NewTask) -> str:
        try:
            return await asyncio.to_thread(self._create_sync, record)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"SQLite create failed: {e}") from e

    async def upsert(self, task: Task) -> None:
        try:
            await asyncio.to_thread(self._upsert_sync, task)
        except (sqlite3.Error, ValueError) as e:
            raise PersistenceFailure(f"SQLite upsert failed for task {task.id}: {e}") from e

    async def load_all(self) -> list[Task]:
        try:
            return await asyncio.to_thread(self._load_all_sync)
        except (sqlite3.Error, ValueError) as e:
            raise PersistenceFailure(f"SQLite load failed: {e}") from e
