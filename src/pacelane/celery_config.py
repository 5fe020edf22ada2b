"""
Celery app for background suggestion generation
"""

from celery import Celery

from . import config


def make_celery(app_name='pacelane'):
    """Celery app backed by Redis, routing suggestion jobs to their own queue"""
    celery_app = Celery(
        app_name,
        broker=config.REDIS_URL,
        backend=config.REDIS_URL
    )

    celery_app.conf.update(
        # Serialization
        task_serializer='json',
        result_serializer='json',
        accept_content=['json'],

        # Timezone
        timezone='UTC',
        enable_utc=True,

        task_track_started=True,
        # One slow LLM call should not hold queued jobs behind it
        worker_prefetch_multiplier=1,
        result_expires=3600,

        task_routes={
            'pacelane.tasks.generate_content_suggestions_task': {'queue': 'suggestions'},
        },

        # An LLM call should never take this long
        task_soft_time_limit=120,
        task_time_limit=180,

        task_acks_late=True,
        task_reject_on_worker_lost=True,

        broker_connection_retry_on_startup=True,
    )

    return celery_app


celery_app = make_celery()
