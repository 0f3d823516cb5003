from verification_provider.features.verification.schemas.verification import (
    EmailRequest,
    ValidateCodeResponse,
    ValidateRequest,
    ValidationResult,
    VerificationRequest,
)

__all__ = [
    "EmailRequest",
    "ValidateCodeResponse",
    "ValidateRequest",
    "ValidationResult",
    "VerificationRequest",
]
