"""Celery application configuration."""

import logging
from typing import Any

from celery import Celery
from celery.signals import after_setup_logger

from shopmetrics.core.config import settings
from shopmetrics.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Create Celery app
celery_app = Celery(
    "shopmetrics",
    broker=str(settings.redis_url),
    backend=str(settings.redis_url),
    include=[
        "shopmetrics.workers.tasks.sync",
    ],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # A full sync of a large store pages through every order
    task_time_limit=1800,
    task_soft_time_limit=1680,
    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Result backend settings
    result_expires=3600,  # Results expire after 1 hour
    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=4,
    # Default queue name (must match worker -Q flag)
    task_default_queue="default",
    task_routes={
        "tasks.sync.*": {"queue": "sync"},
    },
    beat_schedule={
        "sync-active-stores": {
            "task": "tasks.sync.sync_active_stores",
            "schedule": settings.sync_interval_seconds,  # Every 30 minutes
        },
    },
)


@after_setup_logger.connect
def _configure_worker_logging(**_kwargs: Any) -> None:
    setup_logging(debug=settings.debug)


class BaseTask(celery_app.Task):  # type: ignore[misc, name-defined]
    """Base task class that logs failures.

    Sync tasks are not retried: the next beat run picks the store up again.
    """

    abstract = True

    def on_failure(
        self,
        exc: Exception,
        task_id: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        einfo: Any,
    ) -> None:
        logger.error("Task %s[%s] failed with args %s: %s", self.name, task_id, args, exc)
        super().on_failure(exc, task_id, args, kwargs, einfo)
