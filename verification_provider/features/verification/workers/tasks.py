import asyncio
import logging
from typing import Any, Dict

from celery.exceptions import Reject

from verification_provider.features.verification.schemas.verification import EmailRequest
from verification_provider.features.verification.services.email_publisher import CeleryEmailRequestPublisher
from verification_provider.features.verification.services.record_store import SqlAlchemyVerificationRecordStore
from verification_provider.features.verification.services.verification_service import VerificationService
from verification_provider.features.verification.utils import message_codec
from verification_provider.platform.celery_app import (
    PROCESS_VERIFICATION_REQUEST_TASK,
    SEND_EMAIL_REQUEST_TASK,
    celery_app,
)
from verification_provider.platform.db.session import worker_session
from verification_provider.platform.exceptions import MalformedPayloadError, PersistenceError
from verification_provider.platform.services.email import EmailDeliveryError, send_email

logger = logging.getLogger(__name__)


async def _process_verification_request(payload: str | bytes) -> EmailRequest:
    async with worker_session() as db:
        service = VerificationService(
            SqlAlchemyVerificationRecordStore(db),
            CeleryEmailRequestPublisher(),
        )
        return await service.process_message(payload)


@celery_app.task(bind=True, name=PROCESS_VERIFICATION_REQUEST_TASK)
def process_verification_request(self, payload: str) -> Dict[str, Any]:
    """
    Issue a verification code for one inbound queue message.

    Args:
        payload: Raw UTF-8 JSON body, e.g. {"Email": "user@example.com"}

    Returns:
        Dict with the recipient the email request was published for
    """
    task_id = self.request.id
    logger.info(f"[{task_id}] Received verification request")

    try:
        email_request = asyncio.run(_process_verification_request(payload))
    except MalformedPayloadError as e:
        # Redelivering cannot fix the payload
        logger.error(f"[{task_id}] Rejected malformed verification request: {e}")
        raise Reject(str(e), requeue=False)
    except PersistenceError as e:
        # Nothing was published; hand the message back for another attempt
        logger.error(f"[{task_id}] Verification request not stored, requeueing: {e}")
        raise Reject(str(e), requeue=True)
    except Exception as e:
        logger.error(f"[{task_id}] Verification request failed: {e}")
        raise

    logger.info(f"[{task_id}] Verification code issued for {email_request.to}")
    return {"status": "published", "to": email_request.to}


@celery_app.task(
    bind=True,
    name=SEND_EMAIL_REQUEST_TASK,
    max_retries=3,
    default_retry_delay=30,
    autoretry_for=(EmailDeliveryError,),
    retry_backoff=True,
)
def send_email_request(self, payload: str) -> Dict[str, Any]:
    """
    Deliver one EmailRequest taken off the email request queue.

    Args:
        payload: Serialized EmailRequest ({"To", "Subject", "HtmlBody", "PlainText"})
    """
    task_id = self.request.id

    try:
        email_request = message_codec.decode_email_request(payload)
    except MalformedPayloadError as e:
        logger.error(f"[{task_id}] Rejected malformed email request: {e}")
        raise Reject(str(e), requeue=False)

    send_email(
        to_email=email_request.to,
        subject=email_request.subject,
        html_body=email_request.html_body,
        plain_text=email_request.plain_text,
    )

    logger.info(f"[{task_id}] Email request delivered to {email_request.to}")
    return {"status": "sent", "to": email_request.to}
