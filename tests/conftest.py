from __future__ import annotations

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from webmail.api import create_app
from webmail.config import Settings
from webmail.core.db import MailRepository, seed_if_empty

WEBMAIL_ENV_VARS = [
    "WEBMAIL_HOME",
    "WEBMAIL_DATA_DIR",
    "WEBMAIL_DB_PATH",
    "WEBMAIL_LOG_DIR",
    "WEBMAIL_STATIC_DIR",
    "WEBMAIL_USER_EMAIL",
    "WEBMAIL_USER_PASSWORD",
    "WEBMAIL_HOST",
    "WEBMAIL_PORT",
    "WEBMAIL_SEED",
    "WEBMAIL_LOG_LEVEL",
    "WEBMAIL_LOG_TO_FILES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):  # noqa: ANN001
    for name in WEBMAIL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture()
def repository(tmp_path: Path):
    db_path = tmp_path / "mail.db"
    repo = MailRepository(db_path)
    repo.migrate()
    seed_if_empty(repo)
    try:
        yield repo
    finally:
        repo.close()


@pytest.fixture()
def empty_repository(tmp_path: Path):
    repo = MailRepository(tmp_path / "empty.db")
    repo.migrate()
    try:
        yield repo
    finally:
        repo.close()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    root = tmp_path / "project"
    root.mkdir(parents=True, exist_ok=True)
    s = Settings.load(base_dir=root)
    s.log_to_files = False
    s.ensure_directories()
    return s


@pytest.fixture()
def test_logger() -> logging.Logger:
    logger = logging.getLogger("webmail-test")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)
    return logger


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings, configure_logs=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def set_timestamp():
    def _set(repository: MailRepository, email_id: int, timestamp: str) -> None:
        with repository.connection:
            repository.connection.execute(
                "UPDATE emails SET timestamp = ? WHERE id = ?",
                (timestamp, email_id),
            )

    return _set
