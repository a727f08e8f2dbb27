# activities/services.py
"""
ActivityService: the operation surface of the activity engine.

Every method returns the result envelope from `results.py`; domain errors
raised by the workflows are converted there and never escape.
"""
import logging
import math

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError

from . import datetime_utils
from .confirmation import ConfirmationWorkflow
from .exceptions import ActivityNotFound, InvalidSchedule, PermissionDenied, ValidationError
from .models import Activity
from .registration import RegistrationWorkflow
from .results import enveloped, ok
from .serializers import (
    ActivityDetailSerializer,
    ActivitySerializer,
    ConfirmationSerializer,
    ParticipantSerializer,
)
from .signals import activity_created
from .state_machine import StatusController
from .stats import counts_for
from .store import ActivityStore

logger = logging.getLogger("hub.activities")


def is_admin(user) -> bool:
    return bool(getattr(user, "is_hub_admin", False))


def paginate(queryset, page=1, limit=None):
    """Slice a queryset; returns (items, {page, limit, total, pages})."""
    max_limit = getattr(settings, "ACTIVITY_LIST_MAX_LIMIT", 100)
    try:
        limit = min(max(1, int(limit or getattr(settings, "ACTIVITY_LIST_DEFAULT_LIMIT", 20))), max_limit)
        page = max(1, int(page or 1))
    except (TypeError, ValueError):
        raise ValidationError("page and limit must be integers.", page=str(page), limit=str(limit))

    total = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])

    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }


class ActivityService:

    def __init__(self, store: ActivityStore = None, dispatcher=None, breaker=None):
        self.store = store or ActivityStore()
        self.registration = RegistrationWorkflow(self.store)
        self.confirmation = ConfirmationWorkflow(self.store)
        self.status_controller = StatusController(self.store, dispatcher=dispatcher, breaker=breaker)

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    @enveloped
    def create(self, data: dict, user):
        data = dict(data)
        materials = data.pop("materials", None) or []
        requirements = data.pop("requirements", None) or []

        start, end = data.get("start_date"), data.get("end_date")
        if start is None or end is None or start >= end:
            raise InvalidSchedule(
                start_date=datetime_utils.format_for_api(start),
                end_date=datetime_utils.format_for_api(end),
            )

        with self.store.transaction():
            activity = self.store.create_with_children(
                data, created_by=user, materials=materials, requirements=requirements
            )
            # Reminders only for activities that actually committed
            self.store.on_commit(lambda: activity_created.send(sender=Activity, activity=activity))

        logger.info(
            f"Activity created: id={activity.pk}, owner={user.pk}, status={activity.status}, "
            f"materials={len(materials)}, requirements={len(requirements)}"
        )
        activity = self.store.find_with_children(activity.pk)
        return ok(ActivityDetailSerializer(activity).data)

    @enveloped
    def get_by_id(self, activity_id, requesting_user):
        activity = self.store.find_with_children(activity_id)
        if not self.store.visible_to(activity, requesting_user):
            # Same answer as a missing id
            raise ActivityNotFound(activity_id=str(activity_id))
        return ok(ActivityDetailSerializer(activity).data)

    @enveloped
    def update_status(self, activity_id, new_status: str, requester):
        outcome = self.status_controller.update_status(activity_id, new_status, requester)
        return ok({
            "activity": ActivitySerializer(outcome["activity"]).data,
            "changed": outcome["changed"],
            "notified": outcome["notified"],
            "failed": outcome["failed"],
        })

    # ─────────────────────────────────────────────────────────────
    # Participation
    # ─────────────────────────────────────────────────────────────

    @enveloped
    def register(self, activity_id, user, role=None):
        kwargs = {"role": role} if role else {}
        participant = self.registration.register(activity_id, user, **kwargs)
        return ok(ParticipantSerializer(participant).data)

    @enveloped
    def unregister(self, activity_id, user):
        activity = self.registration.unregister(activity_id, user)
        return ok({
            "activity_id": str(activity.pk),
            "current_participants": activity.current_participants,
        })

    @enveloped
    def confirm_attendance(self, activity_id, user, status: str, notes=None):
        confirmation = self.confirmation.confirm_attendance(activity_id, user, status, notes=notes)
        return ok(ConfirmationSerializer(confirmation).data)

    # ─────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────

    @enveloped
    def list_for_user(self, user_id, requesting_user, filters=None):
        filters = filters or {}
        if requesting_user.pk != user_id and not is_admin(requesting_user):
            raise PermissionDenied("You can only list your own activities.")

        qs = self.store.involving(user_id, filters.get("role", "all"))
        if filters.get("type"):
            qs = qs.filter(type=filters["type"])
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("from_date"):
            qs = qs.filter(start_date__gte=filters["from_date"])
        if filters.get("to_date"):
            qs = qs.filter(start_date__lte=filters["to_date"])

        items, pagination = paginate(
            qs.select_related("created_by").order_by("start_date"),
            filters.get("page"),
            filters.get("limit"),
        )
        return ok(ActivitySerializer(items, many=True).data, pagination=pagination)

    @enveloped
    def list_upcoming(self, user, filters=None):
        filters = filters or {}
        qs = self.store.involving(user.pk, "all").filter(
            start_date__gte=filters.get("from_date") or datetime_utils.now()
        )
        if filters.get("to_date"):
            qs = qs.filter(start_date__lte=filters["to_date"])
        if filters.get("type"):
            qs = qs.filter(type=filters["type"])
        if filters.get("city"):
            qs = qs.filter(city__icontains=filters["city"])

        items, pagination = paginate(
            qs.select_related("created_by").order_by("start_date"),
            filters.get("page"),
            filters.get("limit"),
        )
        return ok(ActivitySerializer(items, many=True).data, pagination=pagination)

    @enveloped
    def list_by_opportunity(self, opportunity_id, filters=None):
        filters = filters or {}
        try:
            qs = self.store.activities().filter(opportunity_id=opportunity_id)
        except (ValueError, DjangoValidationError):
            raise ValidationError("Invalid opportunity id.", opportunity_id=str(opportunity_id))
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])

        items, pagination = paginate(
            qs.select_related("created_by").order_by("start_date"),
            filters.get("page"),
            filters.get("limit"),
        )
        return ok(ActivitySerializer(items, many=True).data, pagination=pagination)

    @enveloped
    def stats(self, requesting_user, user_id=None):
        if user_id is None:
            if not is_admin(requesting_user):
                raise PermissionDenied("Global statistics are restricted to admins.")
            return ok(counts_for())

        if requesting_user.pk != user_id and not is_admin(requesting_user):
            raise PermissionDenied("You can only view your own statistics.")
        return ok(counts_for(user_id))
