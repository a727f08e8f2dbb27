# activities/reminders.py
"""
Time-relative reminders for a newly created activity.

One reminder per configured offset before the start, addressed to the
owner. Offsets whose reminder time is not after the reference time
(creation) are skipped.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from django.conf import settings

from notifications.dispatch import dispatch_safely, get_dispatcher
from . import datetime_utils

logger = logging.getLogger("hub.activities")

REMINDER_KIND = "activity_reminder"
DEFAULT_OFFSETS_HOURS = (24, 2, 0.5)


@dataclass
class ReminderJob:
    user_id: int
    activity_snapshot: dict
    send_at: datetime
    offset_hours: float
    message: str

    def payload(self) -> dict:
        return {
            "activity": self.activity_snapshot,
            "offset_hours": self.offset_hours,
            "title": f"Reminder: {self.activity_snapshot['title']}",
            "message": self.message,
        }


def reminder_message(title: str, offset_hours: float) -> str:
    if offset_hours == 24:
        return f"Reminder: {title} is tomorrow"
    if offset_hours == 2:
        return f"Reminder: {title} starts in 2 hours"
    if offset_hours == 0.5:
        return f"Reminder: {title} starts in 30 minutes"
    return f"Reminder: {title} starts in {offset_hours:g} hours"


def activity_snapshot(activity) -> dict:
    return {
        "id": str(activity.pk),
        "title": activity.title,
        "start": datetime_utils.format_for_api(activity.start_date),
        "location": activity.location_label,
    }


class ReminderScheduler:

    def __init__(self, dispatcher=None, breaker=None, offsets=None):
        self.dispatcher = dispatcher
        self.breaker = breaker
        if offsets is None:
            offsets = getattr(settings, "ACTIVITY_REMINDER_OFFSETS_HOURS", DEFAULT_OFFSETS_HOURS)
        self.offsets = tuple(offsets)

    def compute_jobs(self, activity, reference=None) -> list:
        """Reminder jobs still in the future relative to `reference` (default: creation time)."""
        reference = reference or activity.created_at or datetime_utils.now()
        snapshot = activity_snapshot(activity)

        jobs = []
        for hours in self.offsets:
            send_at = datetime_utils.hours_before(activity.start_date, hours)
            if send_at <= reference:
                continue
            jobs.append(ReminderJob(
                user_id=activity.created_by_id,
                activity_snapshot=snapshot,
                send_at=send_at,
                offset_hours=hours,
                message=reminder_message(activity.title, hours),
            ))
        return jobs

    def on_activity_created(self, activity, reference=None) -> int:
        """Dispatch the reminders; returns how many the dispatcher accepted."""
        jobs = self.compute_jobs(activity, reference=reference)
        if not jobs:
            logger.info(f"No reminders due for activity {activity.pk}")
            return 0

        dispatcher = self.dispatcher or get_dispatcher()
        scheduled = 0
        for job in jobs:
            if dispatch_safely(
                dispatcher, job.user_id, REMINDER_KIND, job.payload(), send_at=job.send_at, breaker=self.breaker
            ):
                scheduled += 1

        logger.info(f"Reminders scheduled for activity {activity.pk}: {scheduled}/{len(jobs)}")
        return scheduled
