"""Services package for the digital maturity results service."""

from madurez_digital.core.services.survey_service import (
    ExportedDocument,
    InvalidAnswerError,
    ReportNotReadyError,
    SurveyNotFoundError,
    SurveyResults,
    SurveyService,
    UnknownQuestionError,
)

__all__ = [
    "ExportedDocument",
    "InvalidAnswerError",
    "ReportNotReadyError",
    "SurveyNotFoundError",
    "SurveyResults",
    "SurveyService",
    "UnknownQuestionError",
]
