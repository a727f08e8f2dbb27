from django.urls import reverse
from rest_framework.test import APITestCase


class HealthCheckTestCase(APITestCase):
    def test_public_and_reports_db(self):
        response = self.client.get(reverse("health-check"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "ok")
        self.assertTrue(response.data["db"])
