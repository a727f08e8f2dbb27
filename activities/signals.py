# activities/signals.py
import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger("hub.activities")

# Sent after the creating transaction commits; kwargs: activity
activity_created = Signal()


@receiver(activity_created)
def enqueue_activity_reminders(sender, activity, **kwargs):
    """Hand reminder scheduling to the worker; never fails the caller."""
    from .tasks import schedule_activity_reminders

    try:
        schedule_activity_reminders.delay(str(activity.pk))
    except Exception as e:
        logger.warning(f"Failed to enqueue reminders for activity {activity.pk}: {e}")
