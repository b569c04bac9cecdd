from __future__ import annotations

from .repository import DEFAULT_USER_EMAIL, MailRepository

DEFAULT_USER_PASSWORD = "password123"

# ``None`` in sender/recipient stands for the mailbox owner.
SEED_EMAILS: list[dict[str, object]] = [
    {
        "sender": "google@google.com",
        "recipient": None,
        "subject": "Welcome to your new mail",
        "body": "This is a clean, minimal email client built just for you.",
        "folder": "inbox",
    },
    {
        "sender": "newsletter@tech.com",
        "recipient": None,
        "subject": "Weekly Tech Update",
        "body": "Here are the latest trends in web development...",
        "folder": "inbox",
    },
    {
        "sender": None,
        "recipient": "friend@gmail.com",
        "subject": "Project Update",
        "body": "Hey, just wanted to let you know the project is on track.",
        "folder": "sent",
    },
    {
        "sender": "system@mail.com",
        "recipient": None,
        "subject": "Security Alert",
        "body": "A new device logged into your account.",
        "folder": "inbox",
        "is_important": True,
    },
]


def seed_if_empty(
    repository: MailRepository,
    user_email: str = DEFAULT_USER_EMAIL,
    user_password: str = DEFAULT_USER_PASSWORD,
) -> bool:
    """Seed the owner credential and sample emails when no user exists yet."""
    if repository.fetch_counts()["users"] > 0:
        return False

    repository.add_user(user_email, user_password)
    for email in SEED_EMAILS:
        repository.insert_email(
            sender=email["sender"] or user_email,
            recipient=email["recipient"] or user_email,
            subject=email["subject"],
            body=email["body"],
            folder=email["folder"],
            is_important=bool(email.get("is_important", False)),
        )
    return True
