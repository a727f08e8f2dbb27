# activities/capacity.py
from django.db.models import F, Q


def has_room(activity) -> bool:
    """True when one more participant fits (no limit, or below the limit)."""
    if activity.max_participants is None:
        return True
    return activity.current_participants < activity.max_participants


def room_condition() -> Q:
    """
    has_room() as a queryset filter, so the capacity check can be applied in
    the same UPDATE statement that increments the counter.
    """
    return Q(max_participants__isnull=True) | Q(current_participants__lt=F("max_participants"))


def spots_left(activity):
    """Remaining seats, or None when the activity is unlimited."""
    if activity.max_participants is None:
        return None
    return max(0, activity.max_participants - activity.current_participants)
