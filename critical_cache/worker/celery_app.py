"""Celery application configuration."""

from celery import Celery

from critical_cache.core.config import settings

celery_app = Celery("critical_cache")

broker_url = settings.celery_broker_url or settings.redis_url
result_backend = settings.celery_result_backend or settings.redis_url

celery_app.conf.update(
    broker_url=broker_url,
    result_backend=result_backend,
    task_default_queue="critical_cache",
    task_soft_time_limit=30,
    task_time_limit=60,
    worker_max_tasks_per_child=1000,
    task_track_started=True,
    task_always_eager=settings.debug,
    task_ignore_result=True,
)

celery_app.autodiscover_tasks(["critical_cache.tasks"], related_name="page_cache_tasks")
