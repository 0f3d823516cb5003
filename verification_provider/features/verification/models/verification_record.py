from sqlalchemy import Column, DateTime, String

from verification_provider.platform.db.base import BaseModel


class VerificationRecord(BaseModel):
    __tablename__ = "verification_records"

    email = Column(String, unique=True, index=True, nullable=False)
    code = Column(String(6), nullable=False)
    # Naive UTC, compared against utc_now()
    expires_at = Column(DateTime, index=True, nullable=False)

    def __repr__(self):
        return f"<VerificationRecord email={self.email!r} expires_at={self.expires_at!r}>"
