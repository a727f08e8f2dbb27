# activities/stats.py
from django.db.models import Count

from . import datetime_utils
from .models import Activity


def counts_for(user=None):
    """
    Aggregate activity counts, scoped to activities created by `user`
    when one is given. Recomputed on every call.
    """
    qs = Activity.objects.all()
    if user is not None:
        qs = qs.filter(created_by=user)

    now = datetime_utils.now()

    by_status = {
        row["status"]: row["total"]
        for row in qs.order_by().values("status").annotate(total=Count("id"))
    }
    by_type = {
        row["type"]: row["total"]
        for row in qs.order_by().values("type").annotate(total=Count("id"))
    }

    return {
        "total_activities": qs.count(),
        "upcoming_activities": qs.filter(start_date__gte=now).count(),
        "completed_activities": by_status.get(Activity.STATUS_COMPLETED, 0),
        "by_status": by_status,
        "by_type": by_type,
    }
