# activities/results.py
"""Result envelope returned by ActivityService: {success, data|error, pagination?}."""
import functools
import logging

from .exceptions import ActivityError

logger = logging.getLogger("hub.activities")


def ok(data=None, pagination=None) -> dict:
    result = {"success": True, "data": data}
    if pagination is not None:
        result["pagination"] = pagination
    return result


def fail(error: ActivityError) -> dict:
    return {"success": False, "error": error.as_dict(), "status_code": error.status_code}


def enveloped(func):
    """
    Run a service operation and turn domain errors into a failed envelope.
    Anything that is not an ActivityError is a bug and propagates.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ActivityError as exc:
            logger.info(f"{func.__name__} rejected: {exc.code} ({exc.message})")
            return fail(exc)
    return wrapper
