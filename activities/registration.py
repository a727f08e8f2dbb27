# activities/registration.py
"""
Join / leave an activity under its capacity limit.

The capacity check and the counter change are one step: the activity row
is locked for the duration of the transaction and the counter moves
through a conditional UPDATE, so two requests racing for the last seat
cannot both succeed.
"""
import logging

from . import datetime_utils
from .capacity import has_room, spots_left
from .exceptions import (
    ActivityAlreadyStarted,
    AlreadyRegistered,
    CapacityExceeded,
    NotOpenForRegistration,
    NotRegistered,
)
from .models import Activity, ActivityParticipant
from .store import ActivityStore

logger = logging.getLogger("hub.activities")


class RegistrationWorkflow:

    def __init__(self, store: ActivityStore = None):
        self.store = store or ActivityStore()

    def register(self, activity_id, user, role: str = ActivityParticipant.ROLE_PARTICIPANT) -> ActivityParticipant:
        # Fast fail outside the transaction
        if self.store.participant_exists(activity_id, user):
            raise AlreadyRegistered(activity_id=str(activity_id))

        with self.store.transaction():
            # Lock the activity row to serialize registrations for it
            activity = self.store.find_by_id(activity_id, for_update=True)

            if activity.status not in Activity.OPEN_STATUSES:
                raise NotOpenForRegistration(status=activity.status)

            # Re-check inside the lock
            if self.store.participant_exists(activity.pk, user):
                raise AlreadyRegistered(activity_id=str(activity.pk))

            if not has_room(activity):
                self._log_full(activity, user)
                raise CapacityExceeded(max_participants=activity.max_participants)

            participant = self.store.add_participant(activity, user, role)
            if participant is None:
                raise AlreadyRegistered(activity_id=str(activity.pk))

            # Conditional increment; rolls the insert back if the seat is gone
            if not self.store.atomic_counter_update(activity.pk, +1):
                self._log_full(activity, user)
                raise CapacityExceeded(max_participants=activity.max_participants)

        self.store.refresh_counter(activity)
        logger.info(
            f"Registration created: user={user.pk}, activity={activity.pk}, role={role}, "
            f"count={activity.current_participants}"
        )
        return participant

    def unregister(self, activity_id, user) -> Activity:
        with self.store.transaction():
            activity = self.store.find_by_id(activity_id, for_update=True)

            participant = self.store.get_participant(activity.pk, user)
            if participant is None:
                raise NotRegistered(activity_id=str(activity.pk))

            if not datetime_utils.is_activity_upcoming(activity):
                raise ActivityAlreadyStarted(start_date=datetime_utils.format_for_api(activity.start_date))

            self.store.remove_participant(participant)
            self.store.atomic_counter_update(activity.pk, -1)

        self.store.refresh_counter(activity)
        logger.info(
            f"Registration removed: user={user.pk}, activity={activity.pk}, "
            f"count={activity.current_participants}"
        )
        return activity

    def _log_full(self, activity, user):
        logger.warning(
            f"Registration failed: capacity exceeded for activity {activity.pk}. "
            f"user={user.pk}, available={spots_left(activity)}"
        )
