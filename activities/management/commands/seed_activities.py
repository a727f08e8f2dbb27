from datetime import timedelta

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.utils import timezone

from activities.models import Activity
from activities.services import ActivityService

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with sample organizers, volunteers and activities"

    def add_arguments(self, parser):
        parser.add_argument("--volunteers", type=int, default=3)

    def handle(self, *args, **options):
        self.stdout.write("Seeding activities...")
        service = ActivityService()

        # 1. Ensure users
        admin, _ = User.objects.get_or_create(username="admin", defaults={"email": "admin@example.com", "role": "admin"})
        if not admin.check_password("admin"):
            admin.set_password("admin")
            admin.save()

        organizer, _ = User.objects.get_or_create(
            username="organizer", defaults={"email": "organizer@example.com", "role": "organizer"}
        )
        organizer.set_password("password")
        organizer.save()

        volunteers = []
        for i in range(options["volunteers"]):
            user, _ = User.objects.get_or_create(
                username=f"volunteer{i + 1}", defaults={"email": f"volunteer{i + 1}@example.com"}
            )
            user.set_password("password")
            user.save()
            volunteers.append(user)

        # 2. Create activities
        now = timezone.now()
        activities_data = [
            {
                "title": "Riverside Cleanup",
                "description": "Collect litter along the river bank. Gloves and bags provided.",
                "type": Activity.TYPE_CLEANUP,
                "start_date": now + timedelta(days=3),
                "end_date": now + timedelta(days=3, hours=3),
                "max_participants": 15,
                "address": "Riverside Park, North Gate",
                "city": "Lisbon",
                "materials": [{"name": "Trash bags", "quantity": 30, "provided_by": "organizer"}],
            },
            {
                "title": "New Volunteer Orientation",
                "description": "Online welcome session for new volunteers.",
                "type": Activity.TYPE_ORIENTATION,
                "start_date": now + timedelta(days=1),
                "end_date": now + timedelta(days=1, hours=1),
                "is_online": True,
                "meeting_url": "https://meet.example.com/orientation",
                "requirements": [{"title": "Signed code of conduct", "requirement_type": "document"}],
            },
            {
                "title": "Food Bank Sorting",
                "description": "Sort and pack donations for weekly distribution.",
                "type": Activity.TYPE_VOLUNTEER_WORK,
                "start_date": now + timedelta(days=7),
                "end_date": now + timedelta(days=7, hours=4),
                "max_participants": 2,
                "address": "12 Market Street",
                "city": "Porto",
            },
        ]

        for data in activities_data:
            if Activity.objects.filter(title=data["title"], created_by=organizer).exists():
                self.stdout.write(f"Exists: {data['title']}")
                continue

            result = service.create(data, organizer)
            if not result["success"]:
                self.stderr.write(f"Failed: {data['title']} ({result['error']['code']})")
                continue
            self.stdout.write(f"Created Activity: {data['title']}")

            # 3. Registrations, capacity permitting
            for user in volunteers:
                registered = service.register(result["data"]["id"], user)
                if not registered["success"]:
                    self.stdout.write(f"  {user.username}: {registered['error']['code']}")

        self.stdout.write(self.style.SUCCESS("Done."))
