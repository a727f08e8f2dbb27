# notifications/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """
    A message produced for a user. Channel selection and delivery
    (push/SMS/email) read these rows; nothing here sends anything.
    """
    KIND_ACTIVITY_REMINDER = "activity_reminder"
    KIND_ACTIVITY_STATUS_CHANGED = "activity_status_changed"

    KIND_CHOICES = [
        (KIND_ACTIVITY_REMINDER, "Activity Reminder"),
        (KIND_ACTIVITY_STATUS_CHANGED, "Activity Status Changed"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    kind = models.CharField(max_length=64, choices=KIND_CHOICES)
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    payload = models.JSONField(default=dict, blank=True)
    send_at = models.DateTimeField(default=timezone.now)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    # Optional link to the activity the message is about
    activity = models.ForeignKey(
        "activities.Activity",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notif_user_read_idx"),
            models.Index(fields=["kind"], name="notif_kind_idx"),
            models.Index(fields=["send_at"], name="notif_send_at_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.kind} - {self.title}"
