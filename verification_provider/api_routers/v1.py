from fastapi import APIRouter

from verification_provider.features.verification.routes.validate import router as validate_router

api_router = APIRouter()

api_router.include_router(validate_router)
