import asyncio
import logging
import os
from datetime import datetime, timedelta
from typing import Callable, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from verification_provider.features.verification.models.verification_record import VerificationRecord
from verification_provider.features.verification.schemas.verification import (
    EmailRequest,
    VerificationRequest,
)
from verification_provider.features.verification.services.record_store import VerificationRecordStore
from verification_provider.features.verification.utils import message_codec
from verification_provider.features.verification.utils.clock import utc_now
from verification_provider.features.verification.utils.code_generator import generate_code
from verification_provider.platform.config import settings
from verification_provider.platform.exceptions import InvalidArgumentError, PersistenceError

logger = logging.getLogger(__name__)

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../template")

if not os.path.exists(template_dir):
    template_dir = os.path.join(os.getcwd(), "verification_provider/features/verification/template")

env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
)


class EmailRequestPublisher(Protocol):
    """Synchronous sink for serialized email requests; may block on the broker."""

    def publish(self, payload: str) -> None: ...


class VerificationService:
    """
    Issues verification codes.

    One inbound message goes through unpack -> generate code -> save ->
    build email -> serialize -> publish. A failing stage stops the pipeline,
    so nothing is published for a code that was not stored.
    """

    def __init__(
        self,
        store: VerificationRecordStore,
        publisher: EmailRequestPublisher | None = None,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utc_now,
        code_generator: Callable[[], str] = generate_code,
    ):
        self.store = store
        self.publisher = publisher
        self.ttl = ttl or timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES)
        self.clock = clock
        self.code_generator = code_generator

    def generate_code(self) -> str:
        return self.code_generator()

    def unpack_verification_request(self, raw_message: bytes | str) -> VerificationRequest:
        return message_codec.decode_verification_request(raw_message)

    def generate_email_request(self, request: VerificationRequest | None, code: str) -> EmailRequest:
        if request is None:
            raise InvalidArgumentError("request")
        if not code:
            raise InvalidArgumentError("code")

        context = {
            "email": request.email,
            "code": code,
            "ttl_minutes": int(self.ttl.total_seconds() // 60),
            "sender_name": settings.MAIL_FROM_NAME,
        }
        return EmailRequest(
            to=request.email,
            subject=f"{settings.VERIFICATION_EMAIL_SUBJECT}: {code}",
            html_body=env.get_template("verification_code.html").render(**context),
            plain_text=env.get_template("verification_code.txt").render(**context),
        )

    async def save_verification_request(self, request: VerificationRequest | None, code: str) -> bool:
        """Store `code` for the request's email, replacing any earlier code.

        Returns True only when the commit reports at least one affected row.
        PersistenceError from the store is not caught here.
        """
        if request is None:
            raise InvalidArgumentError("request")

        expires_at = self.clock() + self.ttl
        record = await self.store.find_by_email(request.email)
        if record is None:
            self.store.add(VerificationRecord(email=request.email, code=code, expires_at=expires_at))
        else:
            record.code = code
            record.expires_at = expires_at

        affected = await self.store.save_changes()
        if affected < 1:
            logger.warning(f"Saving verification code for {request.email} affected no rows")
            return False

        logger.info(f"Verification code stored for {request.email}, expires at {expires_at.isoformat()}")
        return True

    def generate_service_bus_email_request(self, email_request: EmailRequest | None) -> str:
        return message_codec.encode_email_request(email_request)

    async def process_message(self, raw_message: bytes | str) -> EmailRequest:
        if self.publisher is None:
            raise InvalidArgumentError("publisher", "An email request publisher is required to process messages")

        request = self.unpack_verification_request(raw_message)
        code = self.generate_code()

        if not await self.save_verification_request(request, code):
            raise PersistenceError("save", f"no rows affected for {request.email}")

        email_request = self.generate_email_request(request, code)
        payload = self.generate_service_bus_email_request(email_request)
        await asyncio.to_thread(self.publisher.publish, payload)

        logger.info(f"Verification email request published for {request.email}")
        return email_request
