# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_VOLUNTEER = "volunteer"
    ROLE_ORGANIZER = "organizer"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_VOLUNTEER, 'Volunteer'),
        (ROLE_ORGANIZER, 'Organizer'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_VOLUNTEER
    )

    phone = models.CharField(max_length=20, blank=True, null=True)
    city = models.CharField(max_length=120, blank=True, null=True)

    @property
    def is_hub_admin(self) -> bool:
        """Admins may read other users' activity lists and stats."""
        return self.is_superuser or self.role == self.ROLE_ADMIN
