from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .migrations import apply_migrations, connect_db, pending_migrations

KNOWN_FOLDERS = ("inbox", "sent", "drafts", "bin")
ALL_FOLDERS = "all"
DEFAULT_COMPOSE_FOLDER = "sent"
DEFAULT_USER_EMAIL = "user@example.com"

_UPDATABLE_FLAGS = ("is_important", "is_read")
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


class MailRepository:
    """Single-user email store on top of one SQLite connection.

    The store never validates folder names: any string is stored and any
    string can be filtered on. Updates and deletes addressed to an id that
    does not exist are silent no-ops.
    """

    def __init__(
        self,
        db_path: Path,
        sender_email: str = DEFAULT_USER_EMAIL,
        *,
        check_same_thread: bool = True,
    ):
        self.db_path = db_path
        self.sender_email = sender_email
        self.connection = connect_db(db_path, check_same_thread=check_same_thread)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> MailRepository:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def migrate(self) -> list[str]:
        return apply_migrations(self.connection, MIGRATIONS_DIR)

    def pending_migrations(self) -> list[str]:
        return pending_migrations(self.connection, MIGRATIONS_DIR)

    def add_user(self, email: str, password: str) -> int:
        with self.connection:
            cursor = self.connection.execute(
                "INSERT INTO users (email, password) VALUES (?, ?)",
                (email, password),
            )
        return int(cursor.lastrowid)

    def authenticate(self, email: str | None, password: str | None) -> str | None:
        # NULL never compares equal, so missing credentials match nothing
        row = self.connection.execute(
            "SELECT email FROM users WHERE email = ? AND password = ?",
            (email, password),
        ).fetchone()
        if row is None:
            return None
        return row["email"]

    def list_emails(self, folder: str | None = None, search: str | None = None) -> list[dict[str, Any]]:
        query = "SELECT * FROM emails WHERE 1=1"
        params: list[Any] = []

        if folder and folder != ALL_FOLDERS:
            query += " AND folder = ?"
            params.append(folder)

        if search:
            # LIKE wildcards inside the term are passed through unescaped
            query += " AND (subject LIKE ? OR body LIKE ? OR sender LIKE ?)"
            pattern = f"%{search}%"
            params.extend([pattern, pattern, pattern])

        query += " ORDER BY timestamp DESC"
        rows = self.connection.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def get_email(self, email_id: int) -> dict[str, Any] | None:
        row = self.connection.execute("SELECT * FROM emails WHERE id = ?", (email_id,)).fetchone()
        return dict(row) if row is not None else None

    def insert_email(
        self,
        sender: str | None,
        recipient: str | None,
        subject: str | None,
        body: str | None,
        folder: str | None,
        is_important: bool = False,
    ) -> int:
        with self.connection:
            cursor = self.connection.execute(
                """
                INSERT INTO emails (sender, recipient, subject, body, folder, is_important)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (sender, recipient, subject, body, folder, 1 if is_important else 0),
            )
        return int(cursor.lastrowid)

    def compose_email(
        self,
        recipient: str | None,
        subject: str | None,
        body: str | None,
        folder: str | None = DEFAULT_COMPOSE_FOLDER,
    ) -> int:
        return self.insert_email(
            sender=self.sender_email,
            recipient=recipient,
            subject=subject,
            body=body,
            folder=folder,
        )

    def update_email(self, email_id: int, changes: Mapping[str, Any]) -> None:
        """Apply the subset of ``folder``/``is_important``/``is_read`` present in ``changes``."""
        assignments: list[str] = []
        params: list[Any] = []

        if "folder" in changes:
            assignments.append("folder = ?")
            params.append(changes["folder"])
        for flag in _UPDATABLE_FLAGS:
            if flag in changes:
                assignments.append(f"{flag} = ?")
                params.append(1 if changes[flag] else 0)

        if not assignments:
            return

        params.append(email_id)
        with self.connection:
            self.connection.execute(
                f"UPDATE emails SET {', '.join(assignments)} WHERE id = ?",
                params,
            )

    def delete_email(self, email_id: int) -> None:
        with self.connection:
            self.connection.execute("DELETE FROM emails WHERE id = ?", (email_id,))

    def folder_summary(self) -> list[dict[str, Any]]:
        rows = self.connection.execute(
            """
            SELECT
                folder,
                COUNT(*) AS total,
                SUM(CASE WHEN is_read THEN 0 ELSE 1 END) AS unread
            FROM emails
            WHERE folder IS NOT NULL
            GROUP BY folder
            """
        ).fetchall()
        counts = {row["folder"]: (int(row["total"]), int(row["unread"])) for row in rows}

        extra_folders = sorted(name for name in counts if name not in KNOWN_FOLDERS)
        summary: list[dict[str, Any]] = []
        for name in [*KNOWN_FOLDERS, *extra_folders]:
            total, unread = counts.get(name, (0, 0))
            summary.append({"folder": name, "total": total, "unread": unread})
        return summary

    def fetch_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for table in ("users", "emails"):
            row = self.connection.execute(f"SELECT COUNT(*) AS cnt FROM {table}").fetchone()
            counts[table] = int(row["cnt"])
        return counts
