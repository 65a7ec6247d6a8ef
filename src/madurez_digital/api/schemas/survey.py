"""Pydantic request/response schemas for the digital maturity survey API.

All API inputs and outputs are strictly typed Pydantic v2 models. Response
models read the core dataclasses through ``from_attributes``.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from madurez_digital.core.report_requester import ReportStatus


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


class CategorySchema(_FromAttributes):
    """A category and its ordered question identifiers."""

    label: str
    question_ids: list[str]


class PillarSchema(_FromAttributes):
    """A pillar with its ordered categories."""

    pillar_id: str
    label: str
    slug: str
    categories: list[CategorySchema]


class TaxonomyResponse(BaseModel):
    """Survey structure in display order.

    Attributes:
        pillars: Pillars in fixed order.
        identity_fields: Free-text fields accepted alongside the answers.
        total_questions: Number of Likert questions.
    """

    pillars: list[PillarSchema]
    identity_fields: list[str]
    total_questions: int


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


class StartSurveyResponse(BaseModel):
    """Response after opening a results session."""

    survey_id: uuid.UUID
    total_questions: int


class SubmitAnswersRequest(BaseModel):
    """Answers from the survey-taking flow.

    Attributes:
        answers: Question id -> Likert value (1-5), plus the identity fields
            ``Nombre`` and ``Empresa`` as strings.
        saved_survey_id: ID under which the survey flow persisted the survey.
    """

    answers: dict[str, StrictInt | StrictFloat | StrictStr] = Field(default_factory=dict)
    saved_survey_id: str | None = Field(default=None, max_length=200)


class SubmitAnswersResponse(BaseModel):
    """Progress after merging answers."""

    survey_id: uuid.UUID
    answered_count: int
    total_questions: int
    progress: float


# ---------------------------------------------------------------------------
# Scores and dashboard
# ---------------------------------------------------------------------------


class CategoryScoreSchema(_FromAttributes):
    label: str
    value: float


class PillarScoreSchema(_FromAttributes):
    name: str
    label: str
    average: float
    categories: list[CategoryScoreSchema]


class GaugeSchema(_FromAttributes):
    label: str
    value: float
    percentage: float
    maturity_level: str | None


class RadarPointSchema(_FromAttributes):
    category: str
    value: float


class RadarChartSchema(_FromAttributes):
    title: str
    description: str
    points: list[RadarPointSchema]


class CategoryBreakdownSchema(_FromAttributes):
    position: int
    label: str
    value: float
    display_value: str
    display_percentage: str


class PillarViewSchema(_FromAttributes):
    name: str
    label: str
    slug: str
    gauge: GaugeSchema
    radar: RadarChartSchema
    categories: list[CategoryBreakdownSchema]


class DashboardSchema(_FromAttributes):
    overall_average: float
    overall_gauge: GaugeSchema
    pillar_gauges: list[GaugeSchema]
    main_radar: RadarChartSchema
    pillars: list[PillarViewSchema]
    header: str | None
    saved_confirmation: str | None


class ReportStateSchema(_FromAttributes):
    """Narrative state.

    Attributes:
        status: idle | loading | success | error.
        text: Markdown narrative on success, fallback message on error.
    """

    status: ReportStatus
    text: str


class SurveyResultsResponse(BaseModel):
    """Full results payload for the dashboard.

    Attributes:
        survey_id: Session identifier.
        overall_average: Mean of the pillar averages.
        total_score: overall_average rounded to 2 decimals.
        pillar_scores: Per-pillar scores in fixed order.
        dashboard: Gauges, radar series and category breakdowns.
        report: Narrative state when the results were built.
    """

    survey_id: uuid.UUID
    overall_average: float
    total_score: float
    pillar_scores: list[PillarScoreSchema]
    dashboard: DashboardSchema
    report: ReportStateSchema
