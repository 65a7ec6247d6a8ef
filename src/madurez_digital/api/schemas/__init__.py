"""Pydantic schemas package for the digital maturity survey API."""

from madurez_digital.api.schemas.survey import (
    CategoryScoreSchema,
    DashboardSchema,
    PillarScoreSchema,
    ReportStateSchema,
    StartSurveyResponse,
    SubmitAnswersRequest,
    SubmitAnswersResponse,
    SurveyResultsResponse,
    TaxonomyResponse,
)

__all__ = [
    "CategoryScoreSchema",
    "DashboardSchema",
    "PillarScoreSchema",
    "ReportStateSchema",
    "StartSurveyResponse",
    "SubmitAnswersRequest",
    "SubmitAnswersResponse",
    "SurveyResultsResponse",
    "TaxonomyResponse",
]
