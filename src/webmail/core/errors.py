from __future__ import annotations


class WebmailError(Exception):
    """Base class for errors the mailbox surfaces to callers."""


class InvalidCredentials(WebmailError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)
        self.message = message


class EmailNotFound(WebmailError):
    def __init__(self, email_id: int):
        super().__init__(f"Email {email_id} not found")
        self.email_id = email_id
        self.message = str(self)
