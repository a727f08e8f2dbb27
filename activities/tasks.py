# activities/tasks.py
import logging

from celery import shared_task

from .models import Activity
from .reminders import ReminderScheduler

logger = logging.getLogger("hub.activities")


@shared_task(name="activities.schedule_activity_reminders")
def schedule_activity_reminders(activity_id: str):
    """
    Emit the time-relative reminders for a newly created activity.
    """
    try:
        activity = Activity.objects.get(pk=activity_id)
    except Activity.DoesNotExist:
        return "activity_not_found"

    try:
        return ReminderScheduler().on_activity_created(activity)
    except Exception as e:
        # Reminders are best effort; the activity stays created
        logger.warning(f"Reminder scheduling failed for activity {activity_id}: {e}")
        return "failed"
