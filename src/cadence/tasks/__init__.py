"""Celery app and beat schedule for scheduled maintenance."""

from celery import Celery
from celery.schedules import crontab

from cadence.config import get_settings

BEAT_SCHEDULE = {
    # Retention sweep; rows are only deleted once both lists are out of window.
    "cleanup-dnc-cache-weekly": {
        "task": "cadence.tasks.maintenance.cleanup_dnc_cache",
        "schedule": crontab(hour=3, minute=0, day_of_week="sun"),
    },
    "refresh-expiring-tokens": {
        "task": "cadence.tasks.maintenance.refresh_expiring_tokens",
        "schedule": crontab(minute="*/30"),
    },
}


def make_celery(app=None) -> Celery:
    """Create the Celery instance.

    Args:
        app: Optional Flask app; when given, every task runs inside its
            app context and inherits its config.

    Returns:
        Configured Celery instance
    """
    settings = get_settings()

    celery = Celery(
        "cadence",
        broker=settings.redis_url,
        backend=settings.celery_result_backend,
        include=["cadence.tasks.maintenance"],
    )
    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        beat_schedule=BEAT_SCHEDULE,
    )

    if app is not None:
        celery.conf.update(app.config)

        class FlaskTask(celery.Task):
            def __call__(self, *args, **kwargs):
                with app.app_context():
                    return self.run(*args, **kwargs)

        celery.Task = FlaskTask

    return celery


celery_app = make_celery()
