# activities/confirmation.py
import logging

from . import datetime_utils
from .exceptions import NotRegistered
from .models import ActivityConfirmation
from .store import ActivityStore

logger = logging.getLogger("hub.activities")


class ConfirmationWorkflow:
    """
    Record a participant's attendance intent.

    Any status may follow any other; calling again simply overwrites the
    participant's single confirmation row.
    """

    def __init__(self, store: ActivityStore = None):
        self.store = store or ActivityStore()

    def confirm_attendance(self, activity_id, user, status: str, notes=None) -> ActivityConfirmation:
        confirmed_at = datetime_utils.now() if status == ActivityConfirmation.STATUS_CONFIRMED else None

        with self.store.transaction():
            # Serialized with unregister on the activity row
            activity = self.store.find_by_id(activity_id, for_update=True)
            if not self.store.participant_exists(activity.pk, user):
                raise NotRegistered(activity_id=str(activity.pk))

            confirmation, created = self.store.save_confirmation(
                activity.pk, user, status=status, confirmed_at=confirmed_at, notes=notes
            )

        logger.info(
            f"Attendance {'recorded' if created else 'updated'}: "
            f"user={user.pk}, activity={activity_id}, status={status}"
        )
        return confirmation
