from verification_provider.features.verification.models.verification_record import VerificationRecord

__all__ = ["VerificationRecord"]
