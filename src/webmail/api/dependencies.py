from collections.abc import Iterator

from fastapi import Request

from webmail.config import Settings
from webmail.core.db import MailRepository
from webmail.services import MailboxService


def get_mailbox(request: Request) -> Iterator[MailboxService]:
    """One connection per request, closed once the response is produced."""
    settings: Settings = request.app.state.settings
    # the dependency and the handler may run on different threadpool workers
    repository = MailRepository(settings.db_path, settings.user_email, check_same_thread=False)
    try:
        yield MailboxService(repository=repository, logger=request.app.state.logger)
    finally:
        repository.close()
