from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from webmail import __version__
from webmail.api.dependencies import get_mailbox
from webmail.api.schemas import (
    ComposeRequest,
    EmailRecord,
    EmailUpdateRequest,
    FolderSummary,
    LoginRequest,
)
from webmail.config import Settings
from webmail.core.db import MailRepository, seed_if_empty
from webmail.core.errors import EmailNotFound, InvalidCredentials, WebmailError
from webmail.core.logging import configure_logging, get_logger, parse_level
from webmail.services import MailboxService

ERROR_STATUS = {
    InvalidCredentials: 401,
    EmailNotFound: 404,
}


class SpaStaticFiles(StaticFiles):
    """Serves the built UI and falls back to ``index.html`` for client-side routes."""

    async def get_response(self, path: str, scope):  # noqa: ANN001
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def _build_lifespan(configure_logs: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings: Settings = app.state.settings
        settings.ensure_directories()

        correlation_id = uuid.uuid4().hex
        if configure_logs:
            configure_logging(
                settings.logs_dir,
                correlation_id=correlation_id,
                level=parse_level(settings.log_level),
                log_to_files=settings.log_to_files,
            )
        logger = get_logger("webmail.api", correlation_id)

        with MailRepository(settings.db_path, settings.user_email) as repository:
            executed = repository.migrate()
            if executed:
                logger.info("Applied migrations: %s", executed)
            if settings.seed_on_startup and seed_if_empty(
                repository, settings.user_email, settings.user_password
            ):
                logger.info("Seeded empty store for %s", settings.user_email)

        app.state.logger = logger
        logger.info("Mail store ready at %s", settings.db_path)
        try:
            yield
        finally:
            app.state.logger = None
            logger.info("Mail store shutting down")

    return lifespan


def create_app(settings: Settings | None = None, *, configure_logs: bool = True) -> FastAPI:
    settings = settings or Settings.load()

    app = FastAPI(
        title="Webmail API",
        description="Personal single-user webmail backed by SQLite",
        version=__version__,
        lifespan=_build_lifespan(configure_logs),
    )
    app.state.settings = settings

    @app.exception_handler(WebmailError)
    async def webmail_error_handler(request: Request, exc: WebmailError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 400)
        return JSONResponse(status_code=status_code, content={"success": False, "message": str(exc)})

    @app.post("/api/login")
    def login(credentials: LoginRequest, mailbox: MailboxService = Depends(get_mailbox)) -> dict[str, Any]:
        user = mailbox.login(credentials.email, credentials.password)
        return {"success": True, "user": user}

    @app.get("/api/emails", response_model=list[EmailRecord])
    def list_emails(
        folder: str | None = None,
        search: str | None = None,
        mailbox: MailboxService = Depends(get_mailbox),
    ):
        return mailbox.list_emails(folder=folder, search=search)

    @app.get("/api/emails/{email_id}", response_model=EmailRecord)
    def get_email(email_id: int, mailbox: MailboxService = Depends(get_mailbox)):
        return mailbox.get_email(email_id)

    @app.post("/api/emails")
    def compose_email(request: ComposeRequest, mailbox: MailboxService = Depends(get_mailbox)) -> dict[str, Any]:
        email_id = mailbox.compose(request.recipient, request.subject, request.body, folder=request.folder)
        return {"success": True, "id": email_id}

    @app.patch("/api/emails/{email_id}")
    def update_email(
        email_id: int,
        changes: EmailUpdateRequest | None = None,
        mailbox: MailboxService = Depends(get_mailbox),
    ) -> dict[str, Any]:
        mailbox.update(email_id, changes.model_dump(exclude_unset=True) if changes else {})
        return {"success": True}

    @app.delete("/api/emails/{email_id}")
    def delete_email(email_id: int, mailbox: MailboxService = Depends(get_mailbox)) -> dict[str, Any]:
        mailbox.delete(email_id)
        return {"success": True}

    @app.get("/api/folders", response_model=list[FolderSummary])
    def folder_summary(mailbox: MailboxService = Depends(get_mailbox)):
        return mailbox.folder_summary()

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", SpaStaticFiles(directory=str(static_dir), html=True), name="ui")

    return app
