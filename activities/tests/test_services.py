import uuid
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from activities.models import Activity, ActivityMaterial, ActivityRequirement
from activities.registration import RegistrationWorkflow
from activities.services import ActivityService, paginate
from activities.stats import counts_for
from users.models import User
from .utils import make_activity, make_user


class CreateActivityTestCase(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.service = ActivityService()
        self.start = timezone.now() + timedelta(days=1)

    def test_creates_activity_with_children(self):
        result = self.service.create(
            {
                "title": "Tree planting",
                "type": Activity.TYPE_VOLUNTEER_WORK,
                "start_date": self.start,
                "end_date": self.start + timedelta(hours=4),
                "max_participants": 10,
                "materials": [{"name": "Shovel", "quantity": 5, "provided_by": "organizer"}],
                "requirements": [
                    {"title": "Adults only", "requirement_type": "age", "min_value": 18},
                ],
            },
            self.owner,
        )

        self.assertTrue(result["success"], result)
        activity = Activity.objects.get(pk=result["data"]["id"])
        self.assertEqual(activity.created_by, self.owner)
        self.assertEqual(activity.status, Activity.STATUS_SCHEDULED)
        self.assertEqual(activity.current_participants, 0)
        self.assertEqual(ActivityMaterial.objects.get(activity=activity).quantity, 5)
        self.assertEqual(ActivityRequirement.objects.get(activity=activity).min_value, 18)
        self.assertEqual(len(result["data"]["materials"]), 1)

    def test_start_must_precede_end(self):
        result = self.service.create(
            {"title": "Backwards", "start_date": self.start, "end_date": self.start},
            self.owner,
        )
        self.assertFalse(result["success"])
        self.assertEqual(result["error"]["code"], "invalid_schedule")
        self.assertEqual(result["status_code"], 400)
        self.assertFalse(Activity.objects.exists())


class GetActivityTestCase(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.member = make_user("member")
        self.stranger = make_user("stranger")
        self.activity = make_activity(self.owner)
        RegistrationWorkflow().register(self.activity.pk, self.member)
        self.service = ActivityService()

    def test_owner_and_participants_can_read(self):
        for user in (self.owner, self.member):
            result = self.service.get_by_id(self.activity.pk, user)
            self.assertTrue(result["success"])
            self.assertEqual(len(result["data"]["participants"]), 1)

    def test_other_users_get_not_found(self):
        result = self.service.get_by_id(self.activity.pk, self.stranger)
        self.assertFalse(result["success"])
        self.assertEqual(result["error"]["code"], "activity_not_found")

        missing = self.service.get_by_id(uuid.uuid4(), self.owner)
        self.assertEqual(missing["error"]["code"], "activity_not_found")


class ListActivitiesTestCase(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.volunteer = make_user("volunteer")
        self.admin = make_user("admin", role=User.ROLE_ADMIN)
        self.service = ActivityService()

        self.created = [
            make_activity(self.owner, starts_in=timedelta(days=d), title=f"Owned {d}") for d in (3, 1, 2)
        ]
        other = make_user("other")
        self.joined = make_activity(other, starts_in=timedelta(days=5), city="Porto", title="Joined")
        RegistrationWorkflow().register(self.joined.pk, self.owner)

    def test_roles_and_ordering(self):
        result = self.service.list_for_user(self.owner.pk, self.owner)
        self.assertEqual(
            [a["title"] for a in result["data"]],
            ["Owned 1", "Owned 2", "Owned 3", "Joined"],
        )
        self.assertEqual(result["pagination"], {"page": 1, "limit": 20, "total": 4, "pages": 1})

        created = self.service.list_for_user(self.owner.pk, self.owner, {"role": "created"})
        self.assertEqual(created["pagination"]["total"], 3)

        participating = self.service.list_for_user(self.owner.pk, self.owner, {"role": "participating"})
        self.assertEqual([a["title"] for a in participating["data"]], ["Joined"])

    def test_pagination(self):
        result = self.service.list_for_user(self.owner.pk, self.owner, {"page": 2, "limit": 3})
        self.assertEqual([a["title"] for a in result["data"]], ["Joined"])
        self.assertEqual(result["pagination"], {"page": 2, "limit": 3, "total": 4, "pages": 2})

    def test_limit_is_capped(self):
        _, pagination = paginate(Activity.objects.all(), page=1, limit=1000)
        self.assertEqual(pagination["limit"], 100)

    def test_non_numeric_paging_is_a_validation_error(self):
        result = self.service.list_for_user(self.owner.pk, self.owner, {"page": "two"})
        self.assertFalse(result["success"])
        self.assertEqual(result["error"]["code"], "validation_error")
        self.assertEqual(result["status_code"], 400)

        result = self.service.list_upcoming(self.owner, {"limit": "lots"})
        self.assertEqual(result["error"]["code"], "validation_error")

    def test_listing_someone_else_requires_admin(self):
        denied = self.service.list_for_user(self.owner.pk, self.volunteer)
        self.assertFalse(denied["success"])
        self.assertEqual(denied["status_code"], 403)

        allowed = self.service.list_for_user(self.owner.pk, self.admin)
        self.assertTrue(allowed["success"])

    def test_upcoming_filters(self):
        result = self.service.list_upcoming(self.owner, {"city": "porto"})
        self.assertEqual([a["title"] for a in result["data"]], ["Joined"])

        window = self.service.list_upcoming(
            self.owner, {"to_date": timezone.now() + timedelta(days=2, hours=12)}
        )
        self.assertEqual([a["title"] for a in window["data"]], ["Owned 1", "Owned 2"])

    def test_by_opportunity(self):
        opportunity_id = uuid.uuid4()
        make_activity(self.volunteer, opportunity_id=opportunity_id, title="Shift A")
        make_activity(
            self.volunteer, opportunity_id=opportunity_id, title="Shift B", status=Activity.STATUS_CANCELLED
        )

        everything = self.service.list_by_opportunity(opportunity_id)
        self.assertEqual(everything["pagination"]["total"], 2)

        cancelled = self.service.list_by_opportunity(opportunity_id, {"status": Activity.STATUS_CANCELLED})
        self.assertEqual([a["title"] for a in cancelled["data"]], ["Shift B"])


class StatsTestCase(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.admin = make_user("admin", role=User.ROLE_ADMIN)
        make_activity(self.owner, type=Activity.TYPE_TRAINING)
        make_activity(self.owner, status=Activity.STATUS_COMPLETED, starts_in=timedelta(days=-3))
        make_activity(self.admin, status=Activity.STATUS_CANCELLED)

    def test_counts_for_owner(self):
        stats = counts_for(self.owner)
        self.assertEqual(stats["total_activities"], 2)
        self.assertEqual(stats["upcoming_activities"], 1)
        self.assertEqual(stats["completed_activities"], 1)
        self.assertEqual(stats["by_status"], {"scheduled": 1, "completed": 1})
        self.assertEqual(stats["by_type"], {"training": 1, "cleanup": 1})

    def test_global_counts(self):
        stats = counts_for()
        self.assertEqual(stats["total_activities"], 3)
        self.assertEqual(stats["by_status"]["cancelled"], 1)

    def test_access_rules(self):
        service = ActivityService()
        self.assertTrue(service.stats(self.owner, user_id=self.owner.pk)["success"])
        self.assertEqual(service.stats(self.owner)["status_code"], 403)
        self.assertEqual(service.stats(self.owner, user_id=self.admin.pk)["status_code"], 403)
        self.assertEqual(service.stats(self.admin)["data"]["total_activities"], 3)


class SeedCommandTestCase(TestCase):
    def test_seed_is_idempotent(self):
        from io import StringIO
        from django.core.management import call_command

        call_command("seed_activities", volunteers=3, stdout=StringIO())
        call_command("seed_activities", volunteers=3, stdout=StringIO())

        self.assertEqual(Activity.objects.count(), 3)
        food_bank = Activity.objects.get(title="Food Bank Sorting")
        self.assertEqual(food_bank.current_participants, 2)
