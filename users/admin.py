from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'first_name', 'last_name', 'is_staff')
    list_filter = ('role', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    fieldsets = UserAdmin.fieldsets + (
        ('Volunteer profile', {'fields': ('role', 'phone', 'city')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Volunteer profile', {'fields': ('role', 'phone', 'city')}),
    )
