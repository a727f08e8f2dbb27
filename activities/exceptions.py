# activities/exceptions.py
"""
Domain errors raised by the activity workflows.

Each carries a stable `code` for clients and the HTTP status the request
layer should answer with. ActivityService converts them into the
{"success": False, "error": {...}} envelope; they never cross that boundary.
"""
from rest_framework import status as http_status


class ActivityError(Exception):
    code = "activity_error"
    status_code = http_status.HTTP_400_BAD_REQUEST
    default_message = "Activity operation failed."

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


# ─────────────────────────────────────────────────────────────
# Categories
# ─────────────────────────────────────────────────────────────

class ValidationError(ActivityError):
    code = "validation_error"
    default_message = "Invalid input."


class NotFoundError(ActivityError):
    code = "not_found"
    status_code = http_status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class PermissionDenied(ActivityError):
    code = "permission_denied"
    status_code = http_status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action."


class ConflictError(ActivityError):
    code = "conflict"
    status_code = http_status.HTTP_409_CONFLICT


class TemporalError(ActivityError):
    code = "temporal_error"
    default_message = "Operation not allowed at this time."


# ─────────────────────────────────────────────────────────────
# Concrete errors
# ─────────────────────────────────────────────────────────────

class ActivityNotFound(NotFoundError):
    code = "activity_not_found"
    default_message = "Activity not found."


class NotRegistered(NotFoundError):
    code = "not_registered"
    default_message = "User is not registered for this activity."


class NotOpenForRegistration(ConflictError):
    code = "not_open_for_registration"
    default_message = "Activity is not open for registration."


class AlreadyRegistered(ConflictError):
    code = "already_registered"
    default_message = "User is already registered for this activity."


class CapacityExceeded(ConflictError):
    code = "capacity_exceeded"
    default_message = "Activity has reached its participant limit."


class InvalidStatusTransition(ConflictError):
    code = "invalid_status_transition"
    default_message = "Status transition not allowed."


class InvalidSchedule(TemporalError):
    code = "invalid_schedule"
    default_message = "Start date must be before end date."


class ActivityAlreadyStarted(TemporalError):
    code = "activity_already_started"
    default_message = "Cannot unregister from an activity that has already started."
