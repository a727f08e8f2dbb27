# activities/models.py
import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Activity(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_SCHEDULED = "scheduled"
    STATUS_CONFIRMED = "confirmed"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_POSTPONED = "postponed"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SCHEDULED, "Scheduled"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_IN_PROGRESS, "In progress"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_POSTPONED, "Postponed"),
    ]

    # Registration is only open in these states
    OPEN_STATUSES = (STATUS_SCHEDULED, STATUS_CONFIRMED)

    TYPE_VOLUNTEER_WORK = "volunteer_work"
    TYPE_TRAINING = "training"
    TYPE_MEETING = "meeting"
    TYPE_EVENT = "event"
    TYPE_WORKSHOP = "workshop"
    TYPE_ORIENTATION = "orientation"
    TYPE_CLEANUP = "cleanup"
    TYPE_FUNDRAISING = "fundraising"
    TYPE_AWARENESS = "awareness"
    TYPE_OTHER = "other"

    TYPE_CHOICES = [
        (TYPE_VOLUNTEER_WORK, "Volunteer work"),
        (TYPE_TRAINING, "Training"),
        (TYPE_MEETING, "Meeting"),
        (TYPE_EVENT, "Event"),
        (TYPE_WORKSHOP, "Workshop"),
        (TYPE_ORIENTATION, "Orientation"),
        (TYPE_CLEANUP, "Cleanup"),
        (TYPE_FUNDRAISING, "Fundraising"),
        (TYPE_AWARENESS, "Awareness"),
        (TYPE_OTHER, "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=32, choices=TYPE_CHOICES, default=TYPE_OTHER)

    max_participants = models.PositiveIntegerField(null=True, blank=True)
    current_participants = models.PositiveIntegerField(default=0)

    is_recurring = models.BooleanField(default=False)
    recurrence_rule = models.CharField(max_length=255, blank=True, null=True)

    # Physical location
    address = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=120, blank=True, null=True)
    state = models.CharField(max_length=120, blank=True, null=True)
    zip_code = models.CharField(max_length=20, blank=True, null=True)
    country = models.CharField(max_length=120, blank=True, null=True)
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    # Online location
    is_online = models.BooleanField(default=False)
    meeting_url = models.URLField(max_length=1024, blank=True, null=True)

    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    timezone = models.CharField(max_length=64, default="UTC")

    opportunity_id = models.UUIDField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_activities",
    )
    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_SCHEDULED,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_date__lt=F("end_date")),
                name="activity_start_before_end",
            ),
            models.CheckConstraint(
                condition=Q(max_participants__isnull=True)
                | Q(current_participants__lte=F("max_participants")),
                name="activity_within_capacity",
            ),
        ]
        indexes = [
            models.Index(fields=["created_by", "start_date"], name="activity_owner_start_idx"),
            models.Index(fields=["start_date"], name="activity_start_idx"),
            models.Index(fields=["status"], name="activity_status_idx"),
            models.Index(fields=["opportunity_id", "start_date"], name="activity_opp_start_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def location_label(self) -> str:
        return self.address or "Online"


class ActivityMaterial(models.Model):
    activity = models.ForeignKey(Activity, on_delete=models.CASCADE, related_name="materials")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    quantity = models.PositiveIntegerField(default=1)
    unit = models.CharField(max_length=32, blank=True, null=True)
    is_required = models.BooleanField(default=True)
    provided_by = models.CharField(max_length=255, blank=True, null=True, help_text="Who brings it")

    def __str__(self):
        return f"{self.name} x{self.quantity}"


class ActivityRequirement(models.Model):
    TYPE_AGE = "age"
    TYPE_EXPERIENCE = "experience"
    TYPE_EDUCATION = "education"
    TYPE_SKILL = "skill"
    TYPE_LANGUAGE = "language"
    TYPE_AVAILABILITY = "availability"
    TYPE_LOCATION = "location"
    TYPE_DOCUMENT = "document"
    TYPE_BACKGROUND_CHECK = "background_check"
    TYPE_CUSTOM = "custom"

    TYPE_CHOICES = [
        (TYPE_AGE, "Age"),
        (TYPE_EXPERIENCE, "Experience"),
        (TYPE_EDUCATION, "Education"),
        (TYPE_SKILL, "Skill"),
        (TYPE_LANGUAGE, "Language"),
        (TYPE_AVAILABILITY, "Availability"),
        (TYPE_LOCATION, "Location"),
        (TYPE_DOCUMENT, "Document"),
        (TYPE_BACKGROUND_CHECK, "Background check"),
        (TYPE_CUSTOM, "Custom"),
    ]

    PRIORITY_LOW = "low"
    PRIORITY_MEDIUM = "medium"
    PRIORITY_HIGH = "high"
    PRIORITY_CRITICAL = "critical"

    PRIORITY_CHOICES = [
        (PRIORITY_LOW, "Low"),
        (PRIORITY_MEDIUM, "Medium"),
        (PRIORITY_HIGH, "High"),
        (PRIORITY_CRITICAL, "Critical"),
    ]

    activity = models.ForeignKey(Activity, on_delete=models.CASCADE, related_name="requirements")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    requirement_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default=TYPE_CUSTOM)
    is_required = models.BooleanField(default=True)
    priority = models.CharField(max_length=16, choices=PRIORITY_CHOICES, default=PRIORITY_MEDIUM)

    # Validation bounds checked by the matching layer
    validation_rules = models.JSONField(default=dict, blank=True)
    min_value = models.FloatField(blank=True, null=True)
    max_value = models.FloatField(blank=True, null=True)
    allowed_values = models.JSONField(default=list, blank=True)

    def __str__(self):
        return self.title


class ActivityParticipant(models.Model):
    ROLE_ORGANIZER = "organizer"
    ROLE_COORDINATOR = "coordinator"
    ROLE_FACILITATOR = "facilitator"
    ROLE_PARTICIPANT = "participant"
    ROLE_OBSERVER = "observer"

    ROLE_CHOICES = [
        (ROLE_ORGANIZER, "Organizer"),
        (ROLE_COORDINATOR, "Coordinator"),
        (ROLE_FACILITATOR, "Facilitator"),
        (ROLE_PARTICIPANT, "Participant"),
        (ROLE_OBSERVER, "Observer"),
    ]

    activity = models.ForeignKey(Activity, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activity_participations",
    )
    role = models.CharField(max_length=32, choices=ROLE_CHOICES, default=ROLE_PARTICIPANT)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["activity", "user"], name="participant_activity_user_uniq"),
        ]
        indexes = [
            models.Index(fields=["activity", "joined_at"], name="participant_activity_idx"),
            models.Index(fields=["user"], name="participant_user_idx"),
        ]

    def __str__(self):
        return f"{self.user} ({self.role}) @ {self.activity}"


class ActivityConfirmation(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_DECLINED = "declined"
    STATUS_MAYBE = "maybe"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_DECLINED, "Declined"),
        (STATUS_MAYBE, "Maybe"),
    ]

    NOTES_MAX_LENGTH = 500

    activity = models.ForeignKey(Activity, on_delete=models.CASCADE, related_name="confirmations")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activity_confirmations",
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    confirmed_at = models.DateTimeField(blank=True, null=True)
    notes = models.CharField(max_length=NOTES_MAX_LENGTH, blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["activity", "user"], name="confirmation_activity_user_uniq"),
        ]
        indexes = [
            models.Index(fields=["activity", "status"], name="confirmation_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.status} @ {self.activity}"
