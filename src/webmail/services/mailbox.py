from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from webmail.core.db import DEFAULT_COMPOSE_FOLDER, MailRepository
from webmail.core.errors import EmailNotFound, InvalidCredentials


class MailboxService:
    def __init__(
        self,
        repository: MailRepository,
        logger: logging.Logger | logging.LoggerAdapter,
    ):
        self.repository = repository
        self.logger = logger

    def login(self, email: str | None, password: str | None) -> dict[str, str]:
        matched = self.repository.authenticate(email, password)
        if matched is None:
            self.logger.warning("Login rejected for %s", email)
            raise InvalidCredentials()
        self.logger.info("Login accepted for %s", matched)
        return {"email": matched}

    def list_emails(self, folder: str | None = None, search: str | None = None) -> list[dict[str, Any]]:
        emails = self.repository.list_emails(folder=folder, search=search)
        self.logger.debug("Listed %s emails (folder=%r, search=%r)", len(emails), folder, search)
        return emails

    def get_email(self, email_id: int) -> dict[str, Any]:
        email = self.repository.get_email(email_id)
        if email is None:
            raise EmailNotFound(email_id)
        return email

    def compose(
        self,
        recipient: str | None,
        subject: str | None,
        body: str | None,
        folder: str | None = DEFAULT_COMPOSE_FOLDER,
    ) -> int:
        email_id = self.repository.compose_email(recipient, subject, body, folder=folder)
        self.logger.info("Composed email %s to %s in folder %r", email_id, recipient, folder)
        return email_id

    def update(self, email_id: int, changes: Mapping[str, Any]) -> None:
        self.repository.update_email(email_id, changes)
        self.logger.info("Updated email %s: %s", email_id, sorted(changes))

    def move(self, email_id: int, folder: str) -> None:
        self.update(email_id, {"folder": folder})

    def delete(self, email_id: int) -> None:
        self.repository.delete_email(email_id)
        self.logger.info("Deleted email %s", email_id)

    def folder_summary(self) -> list[dict[str, Any]]:
        return self.repository.folder_summary()
