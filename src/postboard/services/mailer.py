"""Best-effort admin email about comments awaiting moderation."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from postboard.core.settings import Settings, settings

logger = logging.getLogger(__name__)

SUBJECT_PENDING_COMMENT = "New comment pending moderation"


class NotificationError(RuntimeError):
    """Raised when a notification could not be delivered."""


class CommentNotifier(Protocol):
    """Anything able to tell the admin about a new pending comment."""

    def notify_pending_comment(self, post_id: str, author: str, body: str) -> None:
        ...


class CommentMailer:
    """Sends the pending-comment email through SMTP.

    Does nothing unless host, credentials and the admin address are all
    configured.
    """

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.mail_enabled

    def build_message(self, post_id: str, author: str, body: str) -> EmailMessage:
        """Return the email sent for a comment awaiting moderation."""
        message = EmailMessage()
        message["Subject"] = SUBJECT_PENDING_COMMENT
        message["From"] = self.config.smtp_from or self.config.smtp_user or ""
        message["To"] = self.config.admin_email or ""
        message.set_content(f"New comment on post {post_id}\nAuthor: {author}\n{body}")
        return message

    def notify_pending_comment(self, post_id: str, author: str, body: str) -> None:
        """Email the admin about a new pending comment.

        Raises:
            NotificationError: If the SMTP exchange fails.
        """
        if not self.enabled:
            logger.debug("SMTP not configured; skipping pending comment email")
            return

        message = self.build_message(post_id, author, body)
        try:
            with smtplib.SMTP(
                self.config.smtp_host or "",
                self.config.smtp_port,
                timeout=self.config.smtp_timeout_seconds,
            ) as smtp:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                smtp.login(self.config.smtp_user or "", self.config.smtp_pass or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Could not send pending comment email: {exc}") from exc
        logger.info("Pending comment email sent for post %s", post_id)


_mailer: CommentMailer | None = None


def get_comment_mailer() -> CommentMailer:
    """Return the process-wide mailer instance."""
    global _mailer
    if _mailer is None:
        _mailer = CommentMailer()
    return _mailer
