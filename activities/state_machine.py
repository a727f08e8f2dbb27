# activities/state_machine.py
"""
Activity State Machine.

Enforces valid state transitions for the activity lifecycle:
draft → scheduled → confirmed → in_progress → completed
cancelled / postponed from any non-terminal state, postponed → scheduled.

Any transition not in VALID_TRANSITIONS is rejected while
ACTIVITY_ENFORCE_STATUS_TRANSITIONS is on.
"""
from typing import Tuple
import logging

from django.conf import settings

from notifications.dispatch import dispatch_safely, get_dispatcher
from . import datetime_utils
from .exceptions import InvalidStatusTransition, PermissionDenied
from .models import Activity
from .store import ActivityStore

logger = logging.getLogger("hub.activities")

STATUS_CHANGED_KIND = "activity_status_changed"


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Activity.STATUS_DRAFT: [Activity.STATUS_SCHEDULED, Activity.STATUS_CANCELLED, Activity.STATUS_POSTPONED],
    Activity.STATUS_SCHEDULED: [Activity.STATUS_CONFIRMED, Activity.STATUS_CANCELLED, Activity.STATUS_POSTPONED],
    Activity.STATUS_CONFIRMED: [Activity.STATUS_IN_PROGRESS, Activity.STATUS_CANCELLED, Activity.STATUS_POSTPONED],
    Activity.STATUS_IN_PROGRESS: [Activity.STATUS_COMPLETED, Activity.STATUS_CANCELLED, Activity.STATUS_POSTPONED],
    Activity.STATUS_POSTPONED: [Activity.STATUS_SCHEDULED, Activity.STATUS_CANCELLED],
    Activity.STATUS_COMPLETED: [],
    Activity.STATUS_CANCELLED: [],
}

# Message sent to participants; statuses not listed notify nobody
STATUS_MESSAGES = {
    Activity.STATUS_CANCELLED: "activity cancelled",
    Activity.STATUS_POSTPONED: "activity postponed",
    Activity.STATUS_CONFIRMED: "activity confirmed",
    Activity.STATUS_IN_PROGRESS: "activity under way",
    Activity.STATUS_COMPLETED: "activity completed",
}


def enforcement_enabled() -> bool:
    return getattr(settings, "ACTIVITY_ENFORCE_STATUS_TRANSITIONS", True)


def can_transition(activity: Activity, new_status: str) -> Tuple[bool, str]:
    """
    Check if an activity can transition to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = activity.status

    if new_status == current_status:
        return True, "Same status"

    if new_status not in dict(Activity.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    if not enforcement_enabled():
        return True, ""

    if is_terminal_status(current_status):
        return False, f"'{current_status}' is a terminal status"

    allowed = VALID_TRANSITIONS.get(current_status, [])

    if new_status not in allowed:
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def get_allowed_transitions(activity: Activity) -> list:
    return VALID_TRANSITIONS.get(activity.status, [])


def is_terminal_status(status: str) -> bool:
    """Completed and cancelled activities never change status again."""
    return status in VALID_TRANSITIONS and len(VALID_TRANSITIONS[status]) == 0


class StatusController:
    """
    Owner-only status changes with best-effort participant fan-out.

    The status write commits first; notifications go out afterwards, one
    participant at a time, and a failed dispatch never stops the rest.
    """

    def __init__(self, store: ActivityStore = None, dispatcher=None, breaker=None):
        self.store = store or ActivityStore()
        self.dispatcher = dispatcher
        self.breaker = breaker

    def update_status(self, activity_id, new_status: str, requester) -> dict:
        with self.store.transaction():
            activity = self.store.find_by_id(activity_id, for_update=True)

            if activity.created_by_id != requester.pk:
                logger.warning(
                    f"Status change denied: activity={activity.pk}, requester={requester.pk}"
                )
                raise PermissionDenied("Only the activity owner can change its status.")

            old_status = activity.status
            can, reason = can_transition(activity, new_status)
            if not can:
                logger.warning(
                    f"Invalid state transition attempted: activity={activity.pk}, "
                    f"from={old_status}, to={new_status}, actor={requester.pk}. Reason: {reason}"
                )
                raise InvalidStatusTransition(
                    reason,
                    current_status=old_status,
                    requested_status=new_status,
                    allowed=get_allowed_transitions(activity),
                )

            if old_status == new_status:
                return {"activity": activity, "changed": False, "notified": 0, "failed": 0}

            self.store.set_status(activity, new_status)
            outcome = {"activity": activity, "changed": True, "notified": 0, "failed": 0}

            def notify_participants():
                outcome["notified"], outcome["failed"] = self._fan_out(activity)

            # Counts stay 0 while an enclosing transaction is still open
            self.store.on_commit(notify_participants)

        logger.info(
            f"Activity state transition: activity={activity.pk}, "
            f"from={old_status}, to={new_status}, actor={requester.pk}"
        )
        return outcome

    def _fan_out(self, activity: Activity):
        message = STATUS_MESSAGES.get(activity.status)
        if message is None:
            return 0, 0

        dispatcher = self.dispatcher or get_dispatcher()
        payload = {
            "activity": {
                "id": str(activity.pk),
                "title": activity.title,
                "start": datetime_utils.format_for_api(activity.start_date),
                "location": activity.location_label,
            },
            "status": activity.status,
            "title": activity.title,
            "message": message,
        }

        notified = failed = 0
        for participant in self.store.list_participants(activity.pk):
            if dispatch_safely(dispatcher, participant.user_id, STATUS_CHANGED_KIND, payload, breaker=self.breaker):
                notified += 1
            else:
                failed += 1

        if failed:
            logger.warning(
                f"Status fan-out incomplete: activity={activity.pk}, notified={notified}, failed={failed}"
            )
        return notified, failed
