# notifications/breaker.py
"""
Circuit breaker around notification dispatch.

After `failure_threshold` consecutive failures the breaker opens and every
call is rejected with CircuitBreakerError for `recovery_timeout` seconds.
The first call after that is a trial: success closes the breaker, failure
opens it again straight away.
"""
from circuitbreaker import CircuitBreaker
from django.conf import settings


class DispatchBreaker(CircuitBreaker):
    """CircuitBreaker sized from the NOTIFICATION_BREAKER_* settings."""

    def __init__(self, failure_threshold=None, recovery_timeout=None, name="notification_dispatch"):
        if failure_threshold is None:
            failure_threshold = getattr(settings, "NOTIFICATION_BREAKER_FAILURE_THRESHOLD", 5)
        if recovery_timeout is None:
            recovery_timeout = getattr(settings, "NOTIFICATION_BREAKER_RESET_SECONDS", 30)
        super().__init__(
            failure_threshold=max(1, int(failure_threshold)),
            recovery_timeout=recovery_timeout,
            expected_exception=Exception,
            name=name,
        )


# Process-wide breaker shared by the default dispatch path
default_breaker = DispatchBreaker()
