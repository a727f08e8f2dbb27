# notifications/dispatch.py
"""
Notification Dispatcher boundary.

The activity core only produces (recipient, kind, payload, send_at) tuples
and hands them to a dispatcher. Which dispatcher is used is decided by the
NOTIFICATION_DISPATCHER setting (a dotted path, like EMAIL_BACKEND).
"""
import logging
from datetime import datetime
from typing import Optional

from circuitbreaker import CircuitBreakerError
from django.conf import settings
from django.utils.module_loading import import_string

from activities.datetime_utils import format_for_api
from .breaker import default_breaker

logger = logging.getLogger("hub.notifications")


class NotificationDispatcher:
    """Base class; subclasses own channel selection and delivery."""

    def dispatch(
        self,
        recipient_user_id,
        message_kind: str,
        payload: dict,
        send_at: Optional[datetime] = None,
    ) -> None:
        raise NotImplementedError


class CeleryNotificationDispatcher(NotificationDispatcher):
    """
    Enqueue the `deliver_notification` task, delayed until `send_at`.

    Publishing is bounded: the broker connection timeout comes from
    CELERY_BROKER_CONNECTION_TIMEOUT and the publish retry policy never
    waits longer than `timeout` seconds in total.
    """

    def __init__(self, timeout: Optional[float] = None):
        if timeout is None:
            timeout = getattr(settings, "NOTIFICATION_DISPATCH_TIMEOUT", 2.0)
        self.timeout = float(timeout)

    def dispatch(self, recipient_user_id, message_kind, payload, send_at=None):
        from .tasks import deliver_notification

        deliver_notification.apply_async(
            kwargs={
                "recipient_user_id": recipient_user_id,
                "message_kind": message_kind,
                "payload": payload,
                "send_at": format_for_api(send_at),
            },
            eta=send_at,
            retry=True,
            retry_policy={
                "max_retries": 1,
                "interval_start": 0,
                "interval_step": self.timeout,
                "interval_max": self.timeout,
            },
        )


def get_dispatcher() -> NotificationDispatcher:
    return import_string(settings.NOTIFICATION_DISPATCHER)()


def dispatch_safely(
    dispatcher: NotificationDispatcher,
    recipient_user_id,
    message_kind: str,
    payload: dict,
    send_at: Optional[datetime] = None,
    breaker=None,
) -> bool:
    """
    Best-effort dispatch. Never raises; returns True when the dispatcher
    accepted the message.
    """
    if breaker is None:
        breaker = default_breaker
    try:
        # decorate() rejects calls while open; call() alone does not
        breaker.decorate(dispatcher.dispatch)(recipient_user_id, message_kind, payload, send_at)
    except CircuitBreakerError:
        logger.warning(
            f"Dispatch skipped (breaker open): kind={message_kind}, recipient={recipient_user_id}"
        )
        return False
    except Exception as e:
        logger.warning(
            f"Dispatch failed: kind={message_kind}, recipient={recipient_user_id}: {e}"
        )
        if breaker.opened:
            logger.warning(
                f"Notification breaker opened; pausing dispatch for {breaker.open_remaining:.0f}s"
            )
        return False
    return True
