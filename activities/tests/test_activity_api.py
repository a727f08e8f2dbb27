from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APITestCase

from activities.models import Activity, ActivityConfirmation
from notifications.models import Notification
from .utils import make_activity, make_user


class ActivityAPITestCase(APITestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.volunteer = make_user("volunteer")
        self.client.force_authenticate(user=self.owner)
        self.start = timezone.now() + timedelta(days=2)

    def create_payload(self, **overrides):
        payload = {
            "title": "  Community <b>garden</b> day ",
            "description": "<p>Bring <script>alert(1)</script>gloves</p>",
            "type": Activity.TYPE_VOLUNTEER_WORK,
            "start_date": self.start.isoformat(),
            "end_date": (self.start + timedelta(hours=3)).isoformat(),
            "max_participants": 2,
            "city": "Lisbon",
            "materials": [{"name": "Gloves", "quantity": 10}],
        }
        payload.update(overrides)
        return payload

    def test_create_sanitizes_and_schedules_reminders(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(reverse("activity-create"), self.create_payload(), format="json")

        self.assertEqual(
            response.status_code,
            201,
            f"Status: {response.status_code}, Content: {getattr(response, 'data', response.content)}",
        )
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["title"], "Community garden day")
        self.assertNotIn("<script>", data["description"])
        self.assertEqual(data["status"], Activity.STATUS_SCHEDULED)
        self.assertEqual(data["materials"][0]["name"], "Gloves")
        self.assertEqual(
            Notification.objects.filter(user=self.owner, kind=Notification.KIND_ACTIVITY_REMINDER).count(), 3
        )

    def test_create_rejects_bad_schedule(self):
        response = self.client.post(
            reverse("activity-create"),
            self.create_payload(end_date=self.start.isoformat()),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "invalid_schedule")
        self.assertNotIn("status_code", response.data)

    def test_create_validation_errors_use_the_envelope(self):
        response = self.client.post(
            reverse("activity-create"), self.create_payload(status=Activity.STATUS_COMPLETED), format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error"]["code"], "validation_error")
        self.assertIn("status", response.data["error"]["details"])

    def test_anonymous_requests_are_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(reverse("activity-create"), self.create_payload(), format="json")
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data["success"])

    def test_registration_flow(self):
        activity = make_activity(self.owner, max_participants=1)
        register_url = reverse("activity-register", args=[activity.pk])
        confirm_url = reverse("activity-confirm", args=[activity.pk])

        self.client.force_authenticate(user=self.volunteer)
        response = self.client.post(register_url, {}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["role"], "participant")

        response = self.client.post(register_url, {}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"]["code"], "already_registered")

        response = self.client.post(
            confirm_url, {"status": "confirmed", "notes": "See you there"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.data["data"]["confirmed_at"])

        response = self.client.post(confirm_url, {"status": "maybe", "notes": "x" * 501}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            ActivityConfirmation.objects.get(activity=activity, user=self.volunteer).status, "confirmed"
        )

        late = make_user("late")
        self.client.force_authenticate(user=late)
        response = self.client.post(register_url, {}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"]["code"], "capacity_exceeded")

        self.client.force_authenticate(user=self.volunteer)
        response = self.client.delete(register_url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["current_participants"], 0)

        response = self.client.delete(register_url)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["code"], "not_registered")

    def test_status_update(self):
        activity = make_activity(self.owner)
        url = reverse("activity-status", args=[activity.pk])

        self.client.force_authenticate(user=self.volunteer)
        response = self.client.patch(url, {"status": "cancelled"}, format="json")
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.owner)
        response = self.client.put(url, {"status": "completed"}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"]["code"], "invalid_status_transition")

        response = self.client.patch(url, {"status": "confirmed"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["activity"]["status"], "confirmed")
        self.assertTrue(response.data["data"]["changed"])

    def test_detail_and_lists(self):
        activity = make_activity(self.owner, title="Mine")

        response = self.client.get(reverse("activity-detail", args=[activity.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["title"], "Mine")

        self.client.force_authenticate(user=self.volunteer)
        response = self.client.get(reverse("activity-detail", args=[activity.pk]))
        self.assertEqual(response.status_code, 404)

        response = self.client.get(reverse("activity-user-list", args=[self.owner.pk]))
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse("activity-user-list", args=[self.owner.pk]), {"limit": 500})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["pagination"]["limit"], 100)

        response = self.client.get(reverse("activity-upcoming"))
        self.assertEqual([a["title"] for a in response.data["data"]], ["Mine"])

        response = self.client.get(reverse("activity-stats-user", args=[self.owner.pk]))
        self.assertEqual(response.data["data"]["total_activities"], 1)

        response = self.client.get(reverse("activity-stats"))
        self.assertEqual(response.status_code, 403)
