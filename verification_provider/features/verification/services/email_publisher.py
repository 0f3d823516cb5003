import logging

from celery import Celery

from verification_provider.platform.celery_app import SEND_EMAIL_REQUEST_TASK, celery_app
from verification_provider.platform.config import settings

logger = logging.getLogger(__name__)


class CeleryEmailRequestPublisher:
    """Publishes serialized EmailRequest payloads onto the email request queue."""

    def __init__(self, app: Celery | None = None, queue: str | None = None):
        self.app = app or celery_app
        self.queue = queue or settings.EMAIL_REQUEST_QUEUE

    def publish(self, payload: str) -> None:
        result = self.app.send_task(SEND_EMAIL_REQUEST_TASK, args=[payload], queue=self.queue)
        logger.info(f"Email request {result.id} published to {self.queue}")
