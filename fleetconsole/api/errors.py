"""Translate backend (peewee) errors into HTTP responses."""

import logging
from contextlib import contextmanager

import peewee
from fastapi import HTTPException

logger = logging.getLogger("fleetconsole.server")


@contextmanager
def backend_errors(resource: str = "resource"):
    """Missing rows -> 404, any other database error -> 400 with the raw message."""
    try:
        yield
    except peewee.DoesNotExist:
        raise HTTPException(status_code=404, detail=f"{resource} not found")
    except peewee.PeeweeException as e:
        logger.error(f"{resource} operation failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))
