from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    ActivityCreateSerializer,
    ActivityListFilterSerializer,
    ConfirmAttendanceSerializer,
    OpportunityFilterSerializer,
    RegisterSerializer,
    StatusUpdateSerializer,
    UpcomingFilterSerializer,
)
from .services import ActivityService


def envelope_response(result: dict, success_status=status.HTTP_200_OK) -> Response:
    """Render a service envelope; failures carry their own status code."""
    result = dict(result)
    error_status = result.pop("status_code", status.HTTP_400_BAD_REQUEST)
    return Response(result, status=success_status if result["success"] else error_status)


class ActivityServiceMixin:
    permission_classes = [IsAuthenticated]

    def get_service(self) -> ActivityService:
        return ActivityService()


class ActivityCreateView(ActivityServiceMixin, APIView):
    """POST /api/activities/"""

    def post(self, request):
        serializer = ActivityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().create(serializer.validated_data, request.user)
        return envelope_response(result, status.HTTP_201_CREATED)


class ActivityDetailView(ActivityServiceMixin, APIView):
    def get(self, request, activity_id):
        return envelope_response(self.get_service().get_by_id(activity_id, request.user))


class ActivityRegistrationView(ActivityServiceMixin, APIView):
    """
    POST   /api/activities/<id>/register/  join
    DELETE /api/activities/<id>/register/  leave (before start only)
    """

    def post(self, request, activity_id):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().register(activity_id, request.user, serializer.validated_data["role"])
        return envelope_response(result, status.HTTP_201_CREATED)

    def delete(self, request, activity_id):
        return envelope_response(self.get_service().unregister(activity_id, request.user))


class ActivityConfirmView(ActivityServiceMixin, APIView):
    def post(self, request, activity_id):
        serializer = ConfirmAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().confirm_attendance(
            activity_id,
            request.user,
            serializer.validated_data["status"],
            notes=serializer.validated_data.get("notes"),
        )
        return envelope_response(result)


class ActivityStatusView(ActivityServiceMixin, APIView):
    """PUT/PATCH /api/activities/<id>/status/ (owner only)"""

    def put(self, request, activity_id):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().update_status(
            activity_id, serializer.validated_data["status"], request.user
        )
        return envelope_response(result)

    def patch(self, request, activity_id):
        return self.put(request, activity_id)


class UserActivitiesView(ActivityServiceMixin, APIView):
    def get(self, request, user_id):
        filters = ActivityListFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        return envelope_response(
            self.get_service().list_for_user(user_id, request.user, filters.validated_data)
        )


class UpcomingActivitiesView(ActivityServiceMixin, APIView):
    def get(self, request):
        filters = UpcomingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        return envelope_response(self.get_service().list_upcoming(request.user, filters.validated_data))


class OpportunityActivitiesView(ActivityServiceMixin, APIView):
    def get(self, request, opportunity_id):
        filters = OpportunityFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        return envelope_response(
            self.get_service().list_by_opportunity(opportunity_id, filters.validated_data)
        )


class ActivityStatsView(ActivityServiceMixin, APIView):
    """
    GET /api/activities/stats/           global (admins)
    GET /api/activities/stats/<user_id>/ one owner's activities
    """

    def get(self, request, user_id=None):
        return envelope_response(self.get_service().stats(request.user, user_id=user_id))
