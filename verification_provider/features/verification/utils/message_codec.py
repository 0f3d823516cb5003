"""
Wire format of the verification queues.

Both queues carry UTF-8 JSON objects with PascalCase keys:
- verification_request: {"Email": "..."}
- email_request: {"To": "...", "Subject": "...", "HtmlBody": "...", "PlainText": "..."}
"""
from pydantic import ValidationError

from verification_provider.features.verification.schemas.verification import (
    EmailRequest,
    VerificationRequest,
)
from verification_provider.platform.exceptions import InvalidArgumentError, MalformedPayloadError


def _as_text(raw_message: bytes | bytearray | memoryview | str) -> str:
    if isinstance(raw_message, str):
        return raw_message
    try:
        return bytes(raw_message).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPayloadError(f"Payload is not valid UTF-8: {e}") from e


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
        for err in error.errors()
    )


def decode_verification_request(raw_message: bytes | str) -> VerificationRequest:
    if raw_message is None:
        raise MalformedPayloadError("Payload is empty")
    try:
        return VerificationRequest.model_validate_json(_as_text(raw_message))
    except ValidationError as e:
        raise MalformedPayloadError(f"Invalid verification request: {_describe(e)}") from e


def encode_verification_request(request: VerificationRequest) -> str:
    if request is None:
        raise InvalidArgumentError("request")
    return request.model_dump_json(by_alias=True)


def encode_email_request(email_request: EmailRequest) -> str:
    if email_request is None:
        raise InvalidArgumentError("email_request")
    return email_request.model_dump_json(by_alias=True)


def decode_email_request(raw_message: bytes | str) -> EmailRequest:
    if raw_message is None:
        raise MalformedPayloadError("Payload is empty")
    try:
        return EmailRequest.model_validate_json(_as_text(raw_message))
    except ValidationError as e:
        raise MalformedPayloadError(f"Invalid email request: {_describe(e)}") from e
