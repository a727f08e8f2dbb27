from django.contrib import admin
from .models import (
    Activity, ActivityMaterial, ActivityRequirement,
    ActivityParticipant, ActivityConfirmation
)


class ActivityMaterialInline(admin.TabularInline):
    model = ActivityMaterial
    extra = 0


class ActivityRequirementInline(admin.TabularInline):
    model = ActivityRequirement
    extra = 0


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'status', 'created_by', 'start_date', 'current_participants', 'max_participants')
    list_filter = ('status', 'type', 'is_online', 'start_date')
    search_fields = ('title', 'description', 'city', 'created_by__username')
    date_hierarchy = 'start_date'
    readonly_fields = ('current_participants', 'created_at', 'updated_at')
    inlines = [ActivityMaterialInline, ActivityRequirementInline]

@admin.register(ActivityParticipant)
class ActivityParticipantAdmin(admin.ModelAdmin):
    list_display = ('user', 'activity', 'role', 'joined_at')
    list_filter = ('role',)
    search_fields = ('user__username', 'activity__title')

@admin.register(ActivityConfirmation)
class ActivityConfirmationAdmin(admin.ModelAdmin):
    list_display = ('user', 'activity', 'status', 'confirmed_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'activity__title')
