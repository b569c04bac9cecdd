from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from webmail.core.db.repository import DEFAULT_USER_EMAIL
from webmail.core.db.seed import DEFAULT_USER_PASSWORD

TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUE_VALUES


@dataclass(slots=True)
class Settings:
    root_dir: Path
    data_dir: Path
    db_path: Path
    logs_dir: Path
    static_dir: Path
    user_email: str = DEFAULT_USER_EMAIL
    user_password: str = DEFAULT_USER_PASSWORD
    host: str = "0.0.0.0"
    port: int = 3000
    seed_on_startup: bool = True
    log_level: str = "INFO"
    log_to_files: bool = True

    @classmethod
    def load(cls, base_dir: Path | None = None) -> Settings:
        load_dotenv(override=False)

        root_env = os.getenv("WEBMAIL_HOME")
        root_dir = Path(root_env).expanduser().resolve() if root_env else (base_dir or Path.cwd()).resolve()

        data_dir = Path(os.getenv("WEBMAIL_DATA_DIR", root_dir / "data")).expanduser().resolve()
        db_path = Path(os.getenv("WEBMAIL_DB_PATH", data_dir / "mail.db")).expanduser().resolve()
        logs_dir = Path(os.getenv("WEBMAIL_LOG_DIR", root_dir / "logs")).expanduser().resolve()
        static_dir = Path(os.getenv("WEBMAIL_STATIC_DIR", root_dir / "dist")).expanduser().resolve()

        return cls(
            root_dir=root_dir,
            data_dir=data_dir,
            db_path=db_path,
            logs_dir=logs_dir,
            static_dir=static_dir,
            user_email=os.getenv("WEBMAIL_USER_EMAIL", DEFAULT_USER_EMAIL),
            user_password=os.getenv("WEBMAIL_USER_PASSWORD", DEFAULT_USER_PASSWORD),
            host=os.getenv("WEBMAIL_HOST", "0.0.0.0"),
            port=int(os.getenv("WEBMAIL_PORT", "3000")),
            seed_on_startup=_env_flag("WEBMAIL_SEED", True),
            log_level=os.getenv("WEBMAIL_LOG_LEVEL", "INFO"),
            log_to_files=_env_flag("WEBMAIL_LOG_TO_FILES", True),
        )

    def ensure_directories(self) -> None:
        for path in [self.root_dir, self.data_dir, self.logs_dir]:
            path.mkdir(parents=True, exist_ok=True)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
