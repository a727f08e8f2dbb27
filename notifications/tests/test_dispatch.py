import time
from datetime import timedelta
from unittest import mock

from circuitbreaker import CircuitBreakerError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from activities.tests.utils import FailingDispatcher, RecordingDispatcher, make_activity, make_user
from notifications.breaker import DispatchBreaker
from notifications.dispatch import CeleryNotificationDispatcher, dispatch_safely, get_dispatcher
from notifications.models import Notification
from notifications.tasks import deliver_notification


def boom():
    raise ConnectionError("down")


class DispatchBreakerTestCase(SimpleTestCase):
    def setUp(self):
        self.breaker = DispatchBreaker(failure_threshold=2, recovery_timeout=0.2)

    def guarded(self, func, breaker=None):
        return (breaker or self.breaker).decorate(func)()

    def trip(self):
        for _ in range(2):
            with self.assertRaises(ConnectionError):
                self.guarded(boom)

    def test_opens_after_consecutive_failures(self):
        self.trip()

        self.assertTrue(self.breaker.opened)
        with self.assertRaises(CircuitBreakerError):
            self.guarded(lambda: "never called")

    def test_success_resets_the_count(self):
        with self.assertRaises(ConnectionError):
            self.guarded(boom)
        self.assertEqual(self.guarded(lambda: "ok"), "ok")
        with self.assertRaises(ConnectionError):
            self.guarded(boom)
        self.assertTrue(self.breaker.closed)

    def test_trial_call_after_recovery_timeout(self):
        self.trip()
        time.sleep(0.3)
        self.assertFalse(self.breaker.opened)

        # A failing trial re-opens straight away
        with self.assertRaises(ConnectionError):
            self.guarded(boom)
        self.assertTrue(self.breaker.opened)

        time.sleep(0.3)
        self.assertEqual(self.guarded(lambda: "ok"), "ok")
        self.assertTrue(self.breaker.closed)

    @override_settings(NOTIFICATION_BREAKER_FAILURE_THRESHOLD=3, NOTIFICATION_BREAKER_RESET_SECONDS=45)
    def test_sized_from_settings(self):
        breaker = DispatchBreaker()
        for _ in range(2):
            with self.assertRaises(ConnectionError):
                self.guarded(boom, breaker)
        self.assertTrue(breaker.closed)

        with self.assertRaises(ConnectionError):
            self.guarded(boom, breaker)
        self.assertTrue(breaker.opened)
        self.assertGreater(breaker.open_remaining, 30)


class DispatchSafelyTestCase(SimpleTestCase):
    def test_returns_false_instead_of_raising(self):
        breaker = DispatchBreaker(failure_threshold=2, recovery_timeout=60)
        dispatcher = FailingDispatcher()

        self.assertFalse(dispatch_safely(dispatcher, 1, "activity_reminder", {}, breaker=breaker))
        self.assertFalse(dispatch_safely(dispatcher, 1, "activity_reminder", {}, breaker=breaker))
        self.assertTrue(breaker.opened)

        healthy = RecordingDispatcher()
        self.assertFalse(dispatch_safely(healthy, 1, "activity_reminder", {}, breaker=breaker))
        self.assertEqual(healthy.sent, [])

    def test_passes_send_at_through(self):
        dispatcher = RecordingDispatcher()
        when = timezone.now() + timedelta(hours=2)

        self.assertTrue(dispatch_safely(dispatcher, 7, "activity_reminder", {"message": "hi"}, when, DispatchBreaker()))
        self.assertEqual(dispatcher.sent[0]["send_at"], when)

    @override_settings(NOTIFICATION_DISPATCHER="activities.tests.utils.RecordingDispatcher")
    def test_dispatcher_is_configurable(self):
        self.assertIsInstance(get_dispatcher(), RecordingDispatcher)

    def test_celery_dispatcher_enqueues_with_eta(self):
        when = timezone.now() + timedelta(hours=1)
        with mock.patch("notifications.tasks.deliver_notification.apply_async") as apply_async:
            CeleryNotificationDispatcher(timeout=1.5).dispatch(3, "activity_reminder", {"message": "hi"}, when)

        _, kwargs = apply_async.call_args
        self.assertEqual(kwargs["eta"], when)
        self.assertEqual(kwargs["kwargs"]["recipient_user_id"], 3)
        self.assertEqual(kwargs["kwargs"]["send_at"], when.isoformat())
        self.assertEqual(kwargs["retry_policy"]["interval_max"], 1.5)


class DeliverNotificationTestCase(TestCase):
    def setUp(self):
        self.user = make_user("volunteer")

    def test_stores_notification_linked_to_activity(self):
        activity = make_activity(self.user, title="River cleanup")
        send_at = activity.start_date - timedelta(minutes=30)

        notification_id = deliver_notification(
            self.user.pk,
            Notification.KIND_ACTIVITY_REMINDER,
            {
                "activity": {"id": str(activity.pk), "title": "River cleanup"},
                "message": "Reminder: River cleanup starts in 30 minutes",
            },
            send_at.isoformat(),
        )

        notification = Notification.objects.get(pk=notification_id)
        self.assertEqual(notification.user, self.user)
        self.assertEqual(notification.activity, activity)
        self.assertEqual(notification.title, "River cleanup")
        self.assertEqual(notification.send_at, send_at)
        self.assertFalse(notification.is_read)

    def test_unknown_recipient_is_skipped(self):
        result = deliver_notification(999999, Notification.KIND_ACTIVITY_STATUS_CHANGED, {"message": "x"})
        self.assertEqual(result, "recipient_not_found")
        self.assertFalse(Notification.objects.exists())
