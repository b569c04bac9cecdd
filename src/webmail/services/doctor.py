from __future__ import annotations

import platform
import sqlite3
import sys

from webmail.config import Settings
from webmail.core.db import MailRepository


def _check_database(settings: Settings) -> list[dict[str, str]]:
    if not settings.db_path.exists():
        return [
            {
                "check": "db",
                "status": "warn",
                "detail": f"{settings.db_path} does not exist, run `webmail init`",
            }
        ]

    checks: list[dict[str, str]] = []
    try:
        with MailRepository(settings.db_path, settings.user_email) as repository:
            pending = repository.pending_migrations()
            checks.append(
                {
                    "check": "db_migrations",
                    "status": "warn" if pending else "ok",
                    "detail": ", ".join(pending) if pending else "up to date",
                }
            )
            if not pending:
                counts = repository.fetch_counts()
                checks.append(
                    {
                        "check": "db_contents",
                        "status": "ok" if counts["users"] else "warn",
                        "detail": f"users={counts['users']} emails={counts['emails']}",
                    }
                )
    except sqlite3.Error as exc:
        checks.append({"check": "db", "status": "warn", "detail": str(exc)})
    return checks


def run_doctor_checks(settings: Settings) -> list[dict[str, str]]:
    checks: list[dict[str, str]] = []

    checks.append(
        {
            "check": "python_version",
            "status": "ok" if sys.version_info >= (3, 10) else "warn",
            "detail": platform.python_version(),
        }
    )

    checks.append(
        {
            "check": "db_parent",
            "status": "ok" if settings.db_path.parent.exists() else "warn",
            "detail": str(settings.db_path.parent),
        }
    )

    checks.extend(_check_database(settings))

    checks.append(
        {
            "check": "static_dir",
            "status": "ok" if (settings.static_dir / "index.html").exists() else "warn",
            "detail": str(settings.static_dir),
        }
    )

    return checks
