from verification_provider.features.verification.services.cleanup_service import CleanupService
from verification_provider.features.verification.services.record_store import (
    SqlAlchemyVerificationRecordStore,
    VerificationRecordStore,
)
from verification_provider.features.verification.services.validation_service import ValidationService
from verification_provider.features.verification.services.verification_service import (
    EmailRequestPublisher,
    VerificationService,
)

__all__ = [
    "CleanupService",
    "EmailRequestPublisher",
    "SqlAlchemyVerificationRecordStore",
    "ValidationService",
    "VerificationRecordStore",
    "VerificationService",
]
