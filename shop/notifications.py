# shop/notifications.py
import logging

from django.contrib import messages

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"

_LEVELS = {
    SUCCESS: messages.SUCCESS,
    ERROR: messages.ERROR,
}


class MessagesNotifier:
    """
    Notification sink backed by django.contrib.messages.

    Called as notify(kind, message). Requests without the messages
    middleware (or with a non-messages kind) are ignored.
    """

    def __init__(self, request):
        self.request = request

    def __call__(self, kind: str, message: str) -> None:
        level = _LEVELS.get(kind, messages.INFO)
        messages.add_message(self.request, level, message, fail_silently=True)


def send(notify, kind: str, message: str) -> None:
    """Fire-and-forget delivery; a missing or broken sink never breaks the caller."""
    if notify is None or not message:
        return
    try:
        notify(kind, message)
    except Exception:
        logger.warning("Notification sink failed for %r", message, exc_info=True)
