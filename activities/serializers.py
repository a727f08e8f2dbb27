from django.conf import settings
from rest_framework import serializers

from .capacity import spots_left
from .models import (
    Activity,
    ActivityConfirmation,
    ActivityMaterial,
    ActivityParticipant,
    ActivityRequirement,
)
from .sanitizers import sanitize_description, sanitize_notes, sanitize_text, sanitize_title


# -----------------------------------------
# CHILD ROWS
# -----------------------------------------
class MaterialSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityMaterial
        fields = ["id", "name", "description", "quantity", "unit", "is_required", "provided_by"]
        read_only_fields = ["id"]
        extra_kwargs = {"quantity": {"min_value": 1}}

    def validate_name(self, value):
        return sanitize_text(value, max_length=255)


class RequirementSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityRequirement
        fields = [
            "id",
            "title",
            "description",
            "requirement_type",
            "is_required",
            "priority",
            "validation_rules",
            "min_value",
            "max_value",
            "allowed_values",
        ]
        read_only_fields = ["id"]

    def validate_title(self, value):
        return sanitize_title(value)

    def validate(self, attrs):
        low, high = attrs.get("min_value"), attrs.get("max_value")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({"min_value": "min_value cannot exceed max_value."})
        return attrs


class ParticipantSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = ActivityParticipant
        fields = ["id", "activity", "user", "username", "role", "joined_at"]
        read_only_fields = fields


class ConfirmationSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = ActivityConfirmation
        fields = ["id", "activity", "user", "username", "status", "confirmed_at", "notes", "updated_at"]
        read_only_fields = fields


# -----------------------------------------
# ACTIVITY
# -----------------------------------------
ACTIVITY_FIELDS = [
    "id",
    "title",
    "description",
    "type",
    "status",
    "max_participants",
    "current_participants",
    "spots_left",
    "is_recurring",
    "recurrence_rule",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "latitude",
    "longitude",
    "is_online",
    "meeting_url",
    "start_date",
    "end_date",
    "timezone",
    "opportunity_id",
    "created_by",
    "created_by_name",
    "created_at",
    "updated_at",
]


class ActivitySerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source="created_by.username", read_only=True)
    spots_left = serializers.SerializerMethodField()

    class Meta:
        model = Activity
        fields = ACTIVITY_FIELDS
        read_only_fields = fields

    def get_spots_left(self, obj):
        return spots_left(obj)


class ActivityDetailSerializer(ActivitySerializer):
    materials = MaterialSerializer(many=True, read_only=True)
    requirements = RequirementSerializer(many=True, read_only=True)
    participants = ParticipantSerializer(many=True, read_only=True)
    confirmations = ConfirmationSerializer(many=True, read_only=True)

    class Meta(ActivitySerializer.Meta):
        fields = ACTIVITY_FIELDS + ["materials", "requirements", "participants", "confirmations"]
        read_only_fields = fields


class ActivityCreateSerializer(serializers.ModelSerializer):
    """
    Input validation for creation. Only shapes and sanitizes the payload;
    schedule rules (start before end) are checked by ActivityService.
    """
    status = serializers.ChoiceField(
        choices=[Activity.STATUS_DRAFT, Activity.STATUS_SCHEDULED],
        default=Activity.STATUS_SCHEDULED,
    )
    materials = MaterialSerializer(many=True, required=False)
    requirements = RequirementSerializer(many=True, required=False)

    class Meta:
        model = Activity
        fields = [
            "title",
            "description",
            "type",
            "status",
            "max_participants",
            "is_recurring",
            "recurrence_rule",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "latitude",
            "longitude",
            "is_online",
            "meeting_url",
            "start_date",
            "end_date",
            "timezone",
            "opportunity_id",
            "materials",
            "requirements",
        ]
        extra_kwargs = {"max_participants": {"min_value": 1}}

    def validate_title(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Title cannot be blank.")
        return value

    def validate_description(self, value):
        return sanitize_description(value)

    def validate(self, attrs):
        if attrs.get("is_recurring") and not attrs.get("recurrence_rule"):
            raise serializers.ValidationError({"recurrence_rule": "Required for recurring activities."})
        if attrs.get("is_online") and not attrs.get("meeting_url"):
            raise serializers.ValidationError({"meeting_url": "Required for online activities."})
        return attrs


# -----------------------------------------
# OPERATION INPUTS
# -----------------------------------------
class RegisterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(
        choices=ActivityParticipant.ROLE_CHOICES,
        default=ActivityParticipant.ROLE_PARTICIPANT,
    )


class ConfirmAttendanceSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ActivityConfirmation.STATUS_CHOICES)
    notes = serializers.CharField(
        max_length=ActivityConfirmation.NOTES_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )

    def validate_notes(self, value):
        return sanitize_notes(value, ActivityConfirmation.NOTES_MAX_LENGTH)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Activity.STATUS_CHOICES)


class PageSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, required=False)

    def validate_limit(self, value):
        return min(value, getattr(settings, "ACTIVITY_LIST_MAX_LIMIT", 100))


class ActivityListFilterSerializer(PageSerializer):
    ROLE_CHOICES = ["all", "created", "participating"]

    role = serializers.ChoiceField(choices=ROLE_CHOICES, default="all")
    type = serializers.ChoiceField(choices=Activity.TYPE_CHOICES, required=False)
    status = serializers.ChoiceField(choices=Activity.STATUS_CHOICES, required=False)
    from_date = serializers.DateTimeField(required=False)
    to_date = serializers.DateTimeField(required=False)


class UpcomingFilterSerializer(PageSerializer):
    type = serializers.ChoiceField(choices=Activity.TYPE_CHOICES, required=False)
    city = serializers.CharField(max_length=120, required=False)
    from_date = serializers.DateTimeField(required=False)
    to_date = serializers.DateTimeField(required=False)


class OpportunityFilterSerializer(PageSerializer):
    status = serializers.ChoiceField(choices=Activity.STATUS_CHOICES, required=False)
