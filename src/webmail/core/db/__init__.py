from .migrations import apply_migrations, connect_db, pending_migrations
from .repository import ALL_FOLDERS, DEFAULT_COMPOSE_FOLDER, KNOWN_FOLDERS, MailRepository
from .seed import SEED_EMAILS, seed_if_empty

__all__ = [
    "connect_db",
    "apply_migrations",
    "pending_migrations",
    "MailRepository",
    "KNOWN_FOLDERS",
    "ALL_FOLDERS",
    "DEFAULT_COMPOSE_FOLDER",
    "SEED_EMAILS",
    "seed_if_empty",
]
