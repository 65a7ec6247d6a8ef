"""FastAPI router for the digital maturity survey results flow.

All routes are thin: they parse inputs, build dependencies, delegate to
SurveyService, and serialise responses. No business logic lives here.

API prefix: /api/v1/surveys
"""

import uuid

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    HTTPException,
    Path,
    Request,
    Response,
    status,
)

from madurez_digital.api.schemas.survey import (
    DashboardSchema,
    PillarSchema,
    PillarScoreSchema,
    ReportStateSchema,
    StartSurveyResponse,
    SubmitAnswersRequest,
    SubmitAnswersResponse,
    SurveyResultsResponse,
    TaxonomyResponse,
)
from madurez_digital.core.interfaces import INarrativeClient, IReportRenderer, ISurveyRepository
from madurez_digital.core.scoring import round_score
from madurez_digital.core.services.survey_service import (
    InvalidAnswerError,
    ReportNotReadyError,
    SurveyNotFoundError,
    SurveyService,
    UnknownQuestionError,
)
from madurez_digital.core.taxonomy import IDENTITY_FIELDS
from madurez_digital.observability import get_logger
from madurez_digital.settings import Settings

logger = get_logger(__name__)

router = APIRouter(prefix="/surveys", tags=["Digital Maturity Survey"])


# ---------------------------------------------------------------------------
# Dependency providers
# ---------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> ISurveyRepository:
    return request.app.state.repository


def get_narrative_client(request: Request) -> INarrativeClient:
    return request.app.state.narrative_client


def get_renderer(request: Request) -> IReportRenderer:
    return request.app.state.renderer


def get_survey_service(
    repository: ISurveyRepository = Depends(get_repository),
    narrative_client: INarrativeClient = Depends(get_narrative_client),
    renderer: IReportRenderer = Depends(get_renderer),
    settings: Settings = Depends(get_settings),
) -> SurveyService:
    """Build SurveyService with injected dependencies.

    Returns:
        Configured SurveyService instance.
    """
    return SurveyService(
        repository=repository,
        narrative_client=narrative_client,
        renderer=renderer,
        settings=settings,
    )


def _not_found(exc: SurveyNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ---------------------------------------------------------------------------
# Survey structure
# ---------------------------------------------------------------------------


@router.get(
    "/taxonomy",
    response_model=TaxonomyResponse,
    summary="List pillars, categories and question identifiers",
)
async def get_taxonomy(
    service: SurveyService = Depends(get_survey_service),
) -> TaxonomyResponse:
    """Return the survey structure in display order."""
    taxonomy = service.taxonomy
    return TaxonomyResponse(
        pillars=[PillarSchema.model_validate(pillar) for pillar in taxonomy],
        identity_fields=list(IDENTITY_FIELDS),
        total_questions=len(taxonomy.question_ids),
    )


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=StartSurveyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a survey results session",
)
async def start_survey(
    service: SurveyService = Depends(get_survey_service),
) -> StartSurveyResponse:
    session = await service.start_survey()
    return StartSurveyResponse(
        survey_id=session.survey_id,
        total_questions=len(service.taxonomy.question_ids),
    )


@router.put(
    "/{survey_id}/answers",
    response_model=SubmitAnswersResponse,
    summary="Merge answers from the survey-taking flow",
)
async def submit_answers(
    body: SubmitAnswersRequest,
    survey_id: uuid.UUID = Path(..., description="Survey results session UUID"),
    service: SurveyService = Depends(get_survey_service),
) -> SubmitAnswersResponse:
    """Merge Likert answers (1-5) and the Nombre/Empresa identity fields.

    The batch is rejected as a whole with HTTP 422 if any key is not a survey
    question or identity field, or any answer is outside the 1-5 scale.
    """
    try:
        session = await service.submit_answers(
            survey_id=survey_id,
            answers=body.answers,
            saved_survey_id=body.saved_survey_id,
        )
    except SurveyNotFoundError as exc:
        raise _not_found(exc) from exc
    except (UnknownQuestionError, InvalidAnswerError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    total_questions = len(service.taxonomy.question_ids)
    answered_count = sum(1 for key in session.answers if key not in IDENTITY_FIELDS)
    return SubmitAnswersResponse(
        survey_id=survey_id,
        answered_count=answered_count,
        total_questions=total_questions,
        progress=round(answered_count / total_questions, 4),
    )


@router.get(
    "/{survey_id}/results",
    response_model=SurveyResultsResponse,
    summary="Aggregated scores and dashboard data",
)
async def get_results(
    background_tasks: BackgroundTasks,
    survey_id: uuid.UUID = Path(..., description="Survey results session UUID"),
    service: SurveyService = Depends(get_survey_service),
) -> SurveyResultsResponse:
    """Return per-category, per-pillar and overall scores with the dashboard.

    The first call for a session starts the narrative request in the
    background; poll ``/report`` for its outcome.
    """
    try:
        results = await service.get_results(survey_id)
    except SurveyNotFoundError as exc:
        raise _not_found(exc) from exc

    if results.report_payload is not None:
        background_tasks.add_task(service.generate_report, results)

    return SurveyResultsResponse(
        survey_id=results.survey_id,
        overall_average=results.overall_average,
        total_score=round_score(results.overall_average),
        pillar_scores=[PillarScoreSchema.model_validate(p) for p in results.pillar_scores],
        dashboard=DashboardSchema.model_validate(results.dashboard),
        report=ReportStateSchema.model_validate(results.report),
    )


@router.get(
    "/{survey_id}/report",
    response_model=ReportStateSchema,
    summary="Current narrative report state",
)
async def get_report(
    survey_id: uuid.UUID = Path(..., description="Survey results session UUID"),
    service: SurveyService = Depends(get_survey_service),
) -> ReportStateSchema:
    try:
        state = await service.get_report_state(survey_id)
    except SurveyNotFoundError as exc:
        raise _not_found(exc) from exc
    return ReportStateSchema.model_validate(state)


@router.get(
    "/{survey_id}/report.pdf",
    response_class=Response,
    summary="Download the report as PDF",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_report(
    survey_id: uuid.UUID = Path(..., description="Survey results session UUID"),
    service: SurveyService = Depends(get_survey_service),
) -> Response:
    """Download scores and narrative as ``reporte-madurez-digital.pdf``.

    Returns HTTP 409 while the narrative is loading or has no text yet.
    """
    try:
        document = await service.export_document(survey_id)
    except SurveyNotFoundError as exc:
        raise _not_found(exc) from exc
    except ReportNotReadyError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.post(
    "/{survey_id}/new-survey",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Reset the session for a new survey",
)
async def new_survey(
    survey_id: uuid.UUID = Path(..., description="Survey results session UUID"),
    service: SurveyService = Depends(get_survey_service),
) -> Response:
    """Clear answers and narrative state so a new survey can start."""
    try:
        await service.new_survey(survey_id)
    except SurveyNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
