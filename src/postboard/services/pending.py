"""Pending-comment signal for the admin badge."""

from postboard.services.comments import CommentStore


class PendingNotifier:
    """Derives the number of comments awaiting moderation.

    Polled far more often than the moderation queue is opened, so it counts
    rows instead of loading them.
    """

    def __init__(self, comments: CommentStore) -> None:
        self.comments = comments

    def pending_count(self) -> int:
        return self.comments.pending_count()
