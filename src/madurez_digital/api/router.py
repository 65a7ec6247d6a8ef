"""Top-level API router for the digital maturity service.

API prefix: /api/v1
"""

from fastapi import APIRouter

from madurez_digital.api.routes.survey import router as survey_router

router = APIRouter()
router.include_router(survey_router)
