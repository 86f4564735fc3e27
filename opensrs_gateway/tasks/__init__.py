"""Celery configuration"""
from celery import Celery
from celery.schedules import crontab
from opensrs_gateway.core.config import settings

celery_app = Celery(
    "opensrs_gateway",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "opensrs_gateway.tasks.domain_tasks",
    ]
)

celery_app.conf.task_routes = {
    "opensrs_gateway.tasks.domain.*": {"queue": "domains"},
}

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)

# Periodic tasks
celery_app.conf.beat_schedule = {
    "mark-expired-domains-hourly": {
        "task": "opensrs_gateway.tasks.domain.mark_expired_domains",
        "schedule": crontab(minute=0),
    },
}
