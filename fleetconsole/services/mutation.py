"""Shared success/failure handling for data mutations."""

import logging
from contextlib import contextmanager

import peewee

from .cache import query_cache
from .notifications import notifier

logger = logging.getLogger("fleetconsole.services")

BACKEND_ERRORS = (peewee.PeeweeException, peewee.DoesNotExist)


@contextmanager
def mutation(bucket: str, failure_title: str):
    """
    Wrap one insert/update/delete.

    On failure: destructive toast with the raw error, then re-raise.
    On success: invalidate `bucket`. The caller emits the success toast,
    since it usually needs the mutated row for the message.
    """
    try:
        yield
    except BACKEND_ERRORS as e:
        logger.warning(f"{failure_title}: {e}")
        notifier.error(failure_title, e)
        raise
    query_cache.invalidate(bucket)
