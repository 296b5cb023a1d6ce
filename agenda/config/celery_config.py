"""Celery application factory"""
from celery import Celery

from agenda.config.settings import get_settings


def create_celery_app() -> Celery:
    settings = get_settings()

    app = Celery(
        "agenda",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["agenda.tasks.reminder_tasks"],
    )
    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        beat_schedule={
            "dispatch-due-reminders": {
                "task": "agenda.tasks.reminder_tasks.dispatch_due_reminders",
                "schedule": float(settings.REMINDER_DISPATCH_INTERVAL_SECONDS),
            },
        },
    )
    return app


celery_app = create_celery_app()
