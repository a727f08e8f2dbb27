from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from activities.models import Activity
from notifications.dispatch import NotificationDispatcher

User = get_user_model()


def make_user(username, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass1234",
        **extra,
    )


def make_activity(owner, starts_in=timedelta(hours=1), duration=timedelta(hours=2), **fields):
    start = timezone.now() + starts_in
    defaults = {
        "title": "Beach cleanup",
        "type": Activity.TYPE_CLEANUP,
        "status": Activity.STATUS_SCHEDULED,
        "start_date": start,
        "end_date": start + duration,
        "address": "1 Ocean Drive",
        "city": "Lisbon",
    }
    defaults.update(fields)
    return Activity.objects.create(created_by=owner, **defaults)


class RecordingDispatcher(NotificationDispatcher):
    """Keeps every dispatched message in memory."""

    def __init__(self):
        self.sent = []

    def dispatch(self, recipient_user_id, message_kind, payload, send_at=None):
        self.sent.append({
            "recipient_user_id": recipient_user_id,
            "message_kind": message_kind,
            "payload": payload,
            "send_at": send_at,
        })


class FailingDispatcher(RecordingDispatcher):
    """Raises for the listed recipients, records the rest."""

    def __init__(self, failing_user_ids=None):
        super().__init__()
        self.failing_user_ids = set(failing_user_ids or [])

    def dispatch(self, recipient_user_id, message_kind, payload, send_at=None):
        if not self.failing_user_ids or recipient_user_id in self.failing_user_ids:
            raise ConnectionError("broker unavailable")
        super().dispatch(recipient_user_id, message_kind, payload, send_at)
