# activities/store.py
"""
ActivityStore: the only component that touches the activity tables.

Workflows receive a store instance rather than using the ORM directly;
every read, write and counter change goes through here.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q

from .capacity import room_condition
from .exceptions import ActivityNotFound
from .models import (
    Activity,
    ActivityConfirmation,
    ActivityMaterial,
    ActivityParticipant,
    ActivityRequirement,
)

logger = logging.getLogger("hub.activities")


MATERIAL_FIELDS = ("name", "description", "quantity", "unit", "is_required", "provided_by")
REQUIREMENT_FIELDS = (
    "title",
    "description",
    "requirement_type",
    "is_required",
    "priority",
    "validation_rules",
    "min_value",
    "max_value",
    "allowed_values",
)


def _pick(data: dict, fields) -> dict:
    return {field: data[field] for field in fields if data.get(field) is not None}


class ActivityStore:

    def transaction(self):
        return transaction.atomic()

    def on_commit(self, callback):
        transaction.on_commit(callback)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------
    def find_by_id(self, activity_id, for_update: bool = False) -> Activity:
        """
        Load one activity or raise ActivityNotFound.
        `for_update` locks the row; only meaningful inside transaction().
        """
        qs = Activity.objects.all()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=activity_id)
        except (Activity.DoesNotExist, ValueError, DjangoValidationError):
            raise ActivityNotFound(activity_id=str(activity_id))

    def find_with_children(self, activity_id) -> Activity:
        try:
            return (
                Activity.objects
                .select_related("created_by")
                .prefetch_related("materials", "requirements", "participants__user", "confirmations__user")
                .get(pk=activity_id)
            )
        except (Activity.DoesNotExist, ValueError, DjangoValidationError):
            raise ActivityNotFound(activity_id=str(activity_id))

    def create_with_children(self, data: dict, created_by, materials=None, requirements=None) -> Activity:
        """Insert the activity with its materials and requirements in one transaction."""
        with transaction.atomic():
            activity = Activity.objects.create(created_by=created_by, **data)
            ActivityMaterial.objects.bulk_create(
                [ActivityMaterial(activity=activity, **_pick(m, MATERIAL_FIELDS)) for m in materials or []]
            )
            ActivityRequirement.objects.bulk_create(
                [ActivityRequirement(activity=activity, **_pick(r, REQUIREMENT_FIELDS)) for r in requirements or []]
            )
        return activity

    def set_status(self, activity: Activity, new_status: str) -> Activity:
        activity.status = new_status
        activity.save(update_fields=["status", "updated_at"])
        return activity

    def atomic_counter_update(self, activity_id, delta: int) -> bool:
        """
        Compare-and-swap on current_participants.

        +1 only succeeds while there is room, -1 only while the counter is
        positive. Returns False when the guard rejected the update.
        """
        qs = Activity.objects.filter(pk=activity_id)
        if delta > 0:
            qs = qs.filter(room_condition())
        elif delta < 0:
            qs = qs.filter(current_participants__gte=-delta)
        updated = qs.update(current_participants=F("current_participants") + delta)
        return updated == 1

    def refresh_counter(self, activity: Activity) -> Activity:
        activity.refresh_from_db(fields=["current_participants"])
        return activity

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def get_participant(self, activity_id, user):
        return ActivityParticipant.objects.filter(activity_id=activity_id, user=user).first()

    def participant_exists(self, activity_id, user) -> bool:
        try:
            return ActivityParticipant.objects.filter(activity_id=activity_id, user=user).exists()
        except (ValueError, DjangoValidationError):
            raise ActivityNotFound(activity_id=str(activity_id))

    def add_participant(self, activity: Activity, user, role: str):
        """
        Insert the participant row. Returns None when the (activity, user)
        unique constraint fired, i.e. a concurrent request got there first.
        """
        try:
            with transaction.atomic():
                return ActivityParticipant.objects.create(activity=activity, user=user, role=role)
        except IntegrityError:
            logger.info(f"Duplicate participant insert ignored: activity={activity.pk}, user={user.pk}")
            return None

    def remove_participant(self, participant: ActivityParticipant):
        ActivityConfirmation.objects.filter(
            activity_id=participant.activity_id, user_id=participant.user_id
        ).delete()
        participant.delete()

    def list_participants(self, activity_id):
        return list(
            ActivityParticipant.objects
            .filter(activity_id=activity_id)
            .select_related("user")
            .order_by("joined_at", "id")
        )

    # ------------------------------------------------------------------
    # Confirmations
    # ------------------------------------------------------------------
    def save_confirmation(self, activity_id, user, status: str, confirmed_at, notes):
        """
        Insert-or-replace keyed by (activity, user).

        The existing row is locked and overwritten; when there is none a new
        row is inserted, and a lost insert race falls back to overwriting the
        winner's row.
        """
        values = {"status": status, "confirmed_at": confirmed_at, "notes": notes}
        with transaction.atomic():
            existing = (
                ActivityConfirmation.objects
                .select_for_update()
                .filter(activity_id=activity_id, user=user)
                .first()
            )
            if existing is not None:
                return self._overwrite_confirmation(existing, values), False
            try:
                with transaction.atomic():
                    return ActivityConfirmation.objects.create(activity_id=activity_id, user=user, **values), True
            except IntegrityError:
                existing = ActivityConfirmation.objects.select_for_update().get(activity_id=activity_id, user=user)
                return self._overwrite_confirmation(existing, values), False

    def _overwrite_confirmation(self, confirmation, values):
        for field, value in values.items():
            setattr(confirmation, field, value)
        confirmation.save(update_fields=["status", "confirmed_at", "notes", "updated_at"])
        return confirmation

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def activities(self):
        return Activity.objects.all()

    def involving(self, user_id, role: str = "all"):
        """Activities created by and/or joined by the user."""
        if role == "created":
            return Activity.objects.filter(created_by_id=user_id)
        if role == "participating":
            return Activity.objects.filter(participants__user_id=user_id).distinct()
        return Activity.objects.filter(
            Q(created_by_id=user_id) | Q(participants__user_id=user_id)
        ).distinct()

    def visible_to(self, activity: Activity, user) -> bool:
        """Owners and participants may read an activity's details."""
        if activity.created_by_id == user.pk:
            return True
        return self.participant_exists(activity.pk, user)
