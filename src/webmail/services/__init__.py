from .doctor import run_doctor_checks
from .mailbox import MailboxService

__all__ = ["MailboxService", "run_doctor_checks"]
