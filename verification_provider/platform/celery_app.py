from celery import Celery
from kombu import Queue

from verification_provider.platform.config import settings

TASKS_MODULE = "verification_provider.features.verification.workers.tasks"
PERIODIC_TASKS_MODULE = "verification_provider.features.verification.workers.periodic_tasks"

PROCESS_VERIFICATION_REQUEST_TASK = f"{TASKS_MODULE}.process_verification_request"
SEND_EMAIL_REQUEST_TASK = f"{TASKS_MODULE}.send_email_request"
REMOVE_EXPIRED_RECORDS_TASK = f"{PERIODIC_TASKS_MODULE}.remove_expired_verification_records"


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Queue Structure:
    - verification_request: inbound {"Email": ...} payloads, one per code request
    - email_request: outbound serialized EmailRequest messages for the email sender
    - verification.maintenance: Beat-driven cleanup of expired codes
    """
    celery_app = Celery(
        "verification_provider",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
    )

    celery_app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer=settings.CELERY_RESULT_SERIALIZER,
        accept_content=[settings.CELERY_ACCEPT_CONTENT],
        timezone="UTC",
        enable_utc=True,
        task_track_started=settings.CELERY_TASK_TRACK_STARTED,
        task_time_limit=settings.CELERY_TASK_TIME_LIMIT,

        result_expires=3600,

        task_routes={
            PROCESS_VERIFICATION_REQUEST_TASK: {"queue": settings.VERIFICATION_REQUEST_QUEUE},
            SEND_EMAIL_REQUEST_TASK: {"queue": settings.EMAIL_REQUEST_QUEUE},
            REMOVE_EXPIRED_RECORDS_TASK: {"queue": settings.MAINTENANCE_QUEUE},
        },

        task_queues=(
            Queue("default"),
            Queue(settings.VERIFICATION_REQUEST_QUEUE),
            Queue(settings.EMAIL_REQUEST_QUEUE),
            Queue(settings.MAINTENANCE_QUEUE),
        ),

        task_default_queue="default",

        worker_prefetch_multiplier=1,

        # Ack only after the task finished. A raised error is still acked;
        # tasks that want redelivery raise Reject(requeue=True)
        task_acks_late=True,
        task_acks_on_failure_or_timeout=True,
        task_reject_on_worker_lost=True,

        beat_schedule={
            "remove-expired-verification-records": {
                "task": REMOVE_EXPIRED_RECORDS_TASK,
                "schedule": settings.CLEANUP_INTERVAL_SECONDS,
            },
        },
    )

    celery_app.autodiscover_tasks(["verification_provider.features.verification.workers"])

    return celery_app


celery_app = create_celery_app()
