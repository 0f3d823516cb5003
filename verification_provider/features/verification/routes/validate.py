from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from verification_provider.features.verification.schemas.verification import (
    ValidateCodeResponse,
    ValidateRequest,
)
from verification_provider.features.verification.services.record_store import (
    SqlAlchemyVerificationRecordStore,
    VerificationRecordStore,
)
from verification_provider.features.verification.services.validation_service import ValidationService
from verification_provider.platform.db.session import get_db
from verification_provider.platform.response import api_response

router = APIRouter(prefix="/verification", tags=["Verification"])


def get_verification_store(db: AsyncSession = Depends(get_db)) -> VerificationRecordStore:
    return SqlAlchemyVerificationRecordStore(db)


@router.post(
    "/validate",
    response_model=ValidateCodeResponse,
    responses={400: {"model": ValidateCodeResponse}},
)
async def validate_code(
    payload: ValidateRequest,
    store: VerificationRecordStore = Depends(get_verification_store),
):
    valid = await ValidationService(store).validate_code(payload)
    if not valid:
        return api_response(
            data={"valid": False},
            message="Invalid or expired verification code",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return api_response(data={"valid": True}, message="Verification code accepted")
