# notifications/tasks.py
import logging

from celery import shared_task
from django.contrib.auth import get_user_model
from django.utils import timezone

from activities.datetime_utils import parse_iso
from .models import Notification

logger = logging.getLogger("hub.notifications")


@shared_task(name="notifications.deliver_notification")
def deliver_notification(recipient_user_id, message_kind, payload, send_at=None):
    """
    Store the message for the delivery channels.
    Returns the Notification id, or a short reason string when skipped.
    """
    from activities.models import Activity

    User = get_user_model()
    try:
        user = User.objects.get(pk=recipient_user_id)
    except User.DoesNotExist:
        logger.warning(f"Notification dropped: recipient {recipient_user_id} not found ({message_kind})")
        return "recipient_not_found"

    payload = payload or {}
    snapshot = payload.get("activity") or {}

    activity_id = snapshot.get("id")
    if activity_id and not Activity.objects.filter(pk=activity_id).exists():
        activity_id = None

    notification = Notification.objects.create(
        user=user,
        kind=message_kind,
        title=(payload.get("title") or snapshot.get("title") or message_kind)[:255],
        body=payload.get("message", ""),
        payload=payload,
        activity_id=activity_id,
        send_at=parse_iso(send_at) or timezone.now(),
    )
    logger.info(f"Notification stored: id={notification.id}, user={user.id}, kind={message_kind}")
    return notification.id
