from __future__ import annotations

import subprocess
import sys
import uuid
from pathlib import Path

import typer
import uvicorn
from rich import print
from rich.console import Console
from rich.table import Table

from webmail.config import Settings
from webmail.core.db import ALL_FOLDERS, DEFAULT_COMPOSE_FOLDER, KNOWN_FOLDERS, MailRepository, seed_if_empty
from webmail.core.logging import configure_logging, get_logger, parse_level
from webmail.services import MailboxService, run_doctor_checks

app = typer.Typer(no_args_is_help=True, help="Webmail CLI: personal single-user mailbox")


def _load_settings(base_dir: Path | None = None) -> Settings:
    settings = Settings.load(base_dir=base_dir)
    settings.ensure_directories()
    return settings


def _open_mailbox(settings: Settings, repository: MailRepository) -> MailboxService:
    correlation_id = uuid.uuid4().hex
    configure_logging(
        settings.logs_dir,
        correlation_id=correlation_id,
        level=parse_level(settings.log_level),
        log_to_files=settings.log_to_files,
    )
    repository.migrate()
    return MailboxService(repository=repository, logger=get_logger("webmail.cli", correlation_id))


@app.command("init")
def init_command(
    base_dir: Path | None = typer.Option(None, help="Project root (defaults to the current directory)"),
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Seed the owner account and sample emails"),
) -> None:
    settings = _load_settings(base_dir=base_dir)
    with MailRepository(settings.db_path, settings.user_email) as repository:
        executed = repository.migrate()
        seeded = seed and seed_if_empty(repository, settings.user_email, settings.user_password)
    print(f"[green]Initialized[/green]. DB: {settings.db_path}")
    print(f"Migrations: {executed if executed else 'none pending'}")
    print(f"Seed: {'applied' if seeded else 'skipped'}")


@app.command("serve")
def serve_command(
    host: str | None = typer.Option(None, help="Bind address (defaults to WEBMAIL_HOST)"),
    port: int | None = typer.Option(None, help="Port (defaults to WEBMAIL_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    settings = _load_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port
    print(f"Server running on http://localhost:{bind_port}")
    uvicorn.run(
        "webmail.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
    )


@app.command("emails")
def emails_command(
    folder: str = typer.Option(ALL_FOLDERS, help=f"Folder: {ALL_FOLDERS}, {', '.join(KNOWN_FOLDERS)}"),
    search: str | None = typer.Option(None, help="Substring in subject, body or sender"),
) -> None:
    settings = _load_settings()
    with MailRepository(settings.db_path, settings.user_email) as repository:
        emails = _open_mailbox(settings, repository).list_emails(folder=folder, search=search)

    table = Table(title=f"{folder} ({len(emails)})")
    for column in ("id", "when", "folder", "from", "to", "subject", "flags"):
        table.add_column(column)
    for email in emails:
        flags = ("!" if email["is_important"] else "") + ("" if email["is_read"] else "*")
        table.add_row(
            str(email["id"]),
            str(email["timestamp"]),
            str(email["folder"]),
            str(email["sender"] or ""),
            str(email["recipient"] or ""),
            str(email["subject"] or ""),
            flags,
        )
    Console().print(table)


@app.command("compose")
def compose_command(
    to: str = typer.Option(..., "--to", help="Recipient address"),
    subject: str = typer.Option("", help="Subject line"),
    body: str = typer.Option("", help="Message body"),
    folder: str = typer.Option(DEFAULT_COMPOSE_FOLDER, help="Target folder"),
) -> None:
    settings = _load_settings()
    with MailRepository(settings.db_path, settings.user_email) as repository:
        email_id = _open_mailbox(settings, repository).compose(to, subject, body, folder=folder)
    print(f"[green]Saved[/green] email {email_id} to {folder}")


@app.command("move")
def move_command(
    email_id: int = typer.Argument(..., help="Email id"),
    folder: str = typer.Argument(..., help="Destination folder"),
) -> None:
    if not folder.strip():
        raise typer.BadParameter("Folder must not be empty")
    settings = _load_settings()
    with MailRepository(settings.db_path, settings.user_email) as repository:
        _open_mailbox(settings, repository).move(email_id, folder)
    print(f"[green]Moved[/green] email {email_id} to {folder}")


@app.command("doctor")
def doctor_command() -> None:
    settings = _load_settings()
    checks = run_doctor_checks(settings)

    print("Doctor results:")
    for check in checks:
        status = check["status"].upper()
        print(f"- [{status}] {check['check']}: {check['detail']}")


@app.command("tests")
def tests_command() -> None:
    result = subprocess.run([sys.executable, "-m", "pytest", "-q"], check=False)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)
    print("[green]Tests passed[/green]")


if __name__ == "__main__":
    app()
