from django.urls import path
from .views import (
    ActivityCreateView,
    ActivityDetailView,
    ActivityRegistrationView,
    ActivityConfirmView,
    ActivityStatusView,
    UserActivitiesView,
    UpcomingActivitiesView,
    OpportunityActivitiesView,
    ActivityStatsView,
)

urlpatterns = [
    path('', ActivityCreateView.as_view(), name='activity-create'),
    path('upcoming/', UpcomingActivitiesView.as_view(), name='activity-upcoming'),
    path('stats/', ActivityStatsView.as_view(), name='activity-stats'),
    path('stats/<int:user_id>/', ActivityStatsView.as_view(), name='activity-stats-user'),
    path('user/<int:user_id>/', UserActivitiesView.as_view(), name='activity-user-list'),
    path('opportunity/<uuid:opportunity_id>/', OpportunityActivitiesView.as_view(), name='activity-opportunity-list'),
    path('<uuid:activity_id>/', ActivityDetailView.as_view(), name='activity-detail'),
    path('<uuid:activity_id>/register/', ActivityRegistrationView.as_view(), name='activity-register'),
    path('<uuid:activity_id>/confirm/', ActivityConfirmView.as_view(), name='activity-confirm'),
    path('<uuid:activity_id>/status/', ActivityStatusView.as_view(), name='activity-status'),
]
