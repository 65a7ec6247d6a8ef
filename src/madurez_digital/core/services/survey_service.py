"""Service layer for the digital maturity results flow.

Implements the results-side lifecycle of a survey run:
    1. start_survey()        : opens a session with an empty answer map
    2. submit_answers()      : merges answers from the survey-taking flow
    3. get_results()         : aggregates and builds the dashboard; the first
                               call claims the one-shot narrative request
    4. generate_report()     : performs the claimed narrative request
    5. export_document()     : renders the downloadable report
    6. new_survey()          : reset that clears answers and narrative

Repositories, the narrative client and the renderer are injected as Protocol
implementations. No FastAPI or httpx imports belong here.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from madurez_digital.core.dashboard import (
    Dashboard,
    build_dashboard,
    build_report_document,
)
from madurez_digital.core.interfaces import (
    INarrativeClient,
    IReportRenderer,
    ISurveyRepository,
)
from madurez_digital.core.models import SurveySession
from madurez_digital.core.report_requester import (
    ReportRequester,
    ReportState,
    build_report_payload,
)
from madurez_digital.core.scoring import (
    AnswerValue,
    PillarScore,
    compute_overall_average,
    compute_pillar_scores,
)
from madurez_digital.core.taxonomy import DEFAULT_TAXONOMY, IDENTITY_FIELDS, Taxonomy
from madurez_digital.observability import get_logger
from madurez_digital.settings import Settings

logger = get_logger(__name__)


class SurveyNotFoundError(Exception):
    """Raised when no session exists for the requested survey_id."""


class UnknownQuestionError(Exception):
    """Raised when an answer key is neither a question nor an identity field."""


class InvalidAnswerError(Exception):
    """Raised when an answer value has the wrong type or is outside the scale."""


class ReportNotReadyError(Exception):
    """Raised when exporting while the narrative is loading or empty."""


@dataclass(frozen=True)
class SurveyResults:
    """Aggregation output plus the derived dashboard for one session.

    Attributes:
        survey_id: Session identifier.
        pillar_scores: Per-pillar scores in taxonomy order.
        overall_average: Mean of the pillar averages.
        dashboard: View model derived from the scores.
        report: Narrative state at the time the results were built.
        report_payload: Body for the narrative request when this call claimed
            the one-shot request, otherwise None.
        claimed_requester: The requester this call claimed, otherwise None.
            The narrative is fetched on this object even if the session is
            reset before the request runs.
    """

    survey_id: uuid.UUID
    pillar_scores: tuple[PillarScore, ...]
    overall_average: float
    dashboard: Dashboard
    report: ReportState
    report_payload: dict[str, Any] | None = None
    claimed_requester: ReportRequester | None = None


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    media_type: str
    content: bytes


class SurveyService:
    """Orchestrates aggregation, the narrative request and the export.

    Args:
        repository: Session store.
        narrative_client: Client for the narrative service.
        renderer: Document renderer for the export.
        settings: Service settings.
        taxonomy: Taxonomy answers are scored against.
    """

    def __init__(
        self,
        repository: ISurveyRepository,
        narrative_client: INarrativeClient,
        renderer: IReportRenderer,
        settings: Settings,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    ) -> None:
        self._repository = repository
        self._narrative_client = narrative_client
        self._renderer = renderer
        self._settings = settings
        self._taxonomy = taxonomy

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def _new_requester(self) -> ReportRequester:
        return ReportRequester(
            client=self._narrative_client,
            fallback_message=self._settings.report_fallback_message,
        )

    async def _get_session(self, survey_id: uuid.UUID) -> SurveySession:
        session = await self._repository.get(survey_id)
        if session is None:
            raise SurveyNotFoundError(f"Survey {survey_id} not found.")
        return session

    async def start_survey(self) -> SurveySession:
        """Open a results session with an empty answer map."""
        session = await self._repository.add(
            SurveySession(survey_id=uuid.uuid4(), requester=self._new_requester())
        )
        logger.info(
            "Survey session started",
            survey_id=str(session.survey_id),
            question_count=len(self._taxonomy.question_ids),
        )
        return session

    def _validate_answer(self, key: str, value: AnswerValue) -> None:
        if key in IDENTITY_FIELDS:
            if not isinstance(value, str):
                raise InvalidAnswerError(f"Field {key!r} must be a string.")
            return

        if not self._taxonomy.contains_question(key):
            raise UnknownQuestionError(f"Question {key!r} is not part of the survey.")

        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidAnswerError(f"Answer for {key!r} must be a number.")
        if not (self._settings.likert_min <= value <= self._settings.likert_max):
            raise InvalidAnswerError(
                f"Answer for {key!r} must be between {self._settings.likert_min} and "
                f"{self._settings.likert_max}, got {value!r}"
            )

    async def submit_answers(
        self,
        survey_id: uuid.UUID,
        answers: Mapping[str, AnswerValue],
        saved_survey_id: str | None = None,
    ) -> SurveySession:
        """Merge answers into the session.

        The whole batch is validated before anything is stored.

        Args:
            survey_id: Session identifier.
            answers: Question id or identity field -> value.
            saved_survey_id: Optional ID of the persisted survey.

        Returns:
            The updated session.

        Raises:
            SurveyNotFoundError: If the session does not exist.
            UnknownQuestionError: If a key is not in the taxonomy.
            InvalidAnswerError: If a value is out of range or of the wrong type.
        """
        session = await self._get_session(survey_id)
        for key, value in answers.items():
            self._validate_answer(key, value)

        session.answers.update(answers)
        if saved_survey_id is not None:
            session.saved_survey_id = saved_survey_id

        logger.debug(
            "Answers submitted",
            survey_id=str(survey_id),
            submitted_count=len(answers),
            answered_count=len(session.answers),
        )
        return session

    async def get_results(self, survey_id: uuid.UUID) -> SurveyResults:
        """Aggregate the current answers and build the dashboard.

        Results are recomputed on every call. The first call for a session
        claims the narrative request and returns its payload so the caller
        can pass the results to generate_report(); later calls return no payload.

        Raises:
            SurveyNotFoundError: If the session does not exist.
        """
        session = await self._get_session(survey_id)
        pillar_scores = compute_pillar_scores(session.answers, self._taxonomy)
        overall_average = compute_overall_average(pillar_scores)

        payload: dict[str, Any] | None = None
        claimed: ReportRequester | None = None
        if session.requester.claim():
            claimed = session.requester
            payload = build_report_payload(pillar_scores, overall_average, session.answers)
            logger.info("Narrative request scheduled", survey_id=str(survey_id))

        dashboard = build_dashboard(
            pillar_scores,
            overall_average,
            session.answers,
            self._taxonomy,
            saved_survey_id=session.saved_survey_id,
        )
        return SurveyResults(
            survey_id=survey_id,
            pillar_scores=tuple(pillar_scores),
            overall_average=overall_average,
            dashboard=dashboard,
            report=session.requester.state,
            report_payload=payload,
            claimed_requester=claimed,
        )

    async def generate_report(self, results: SurveyResults) -> ReportState:
        """Run the narrative request claimed by get_results().

        The request runs on the requester that get_results() claimed. After a
        reset that requester is detached from the session, so its outcome
        never reaches the new survey run.
        """
        if results.claimed_requester is None or results.report_payload is None:
            return results.report
        return await results.claimed_requester.fetch(results.report_payload)

    async def get_report_state(self, survey_id: uuid.UUID) -> ReportState:
        session = await self._get_session(survey_id)
        return session.requester.state

    async def export_document(self, survey_id: uuid.UUID) -> ExportedDocument:
        """Render the downloadable report.

        Raises:
            SurveyNotFoundError: If the session does not exist.
            ReportNotReadyError: While the narrative is loading or empty.
        """
        session = await self._get_session(survey_id)
        report = session.requester.state
        if not report.has_text:
            raise ReportNotReadyError(
                f"Report for survey {survey_id} is not ready (status: {report.status.value})."
            )

        pillar_scores = compute_pillar_scores(session.answers, self._taxonomy)
        overall_average = compute_overall_average(pillar_scores)
        document = build_report_document(
            pillar_scores,
            overall_average,
            session.answers,
            report,
            title=self._settings.pdf_title,
        )
        content = self._renderer.render(document)

        logger.info(
            "Report document exported",
            survey_id=str(survey_id),
            size_bytes=len(content),
        )
        return ExportedDocument(
            filename=self._settings.pdf_filename,
            media_type=self._renderer.media_type,
            content=content,
        )

    async def new_survey(self, survey_id: uuid.UUID) -> None:
        """Reset the session for a new survey run.

        Clears the answers and the saved-survey ID and replaces the narrative
        requester, which is the only way to request a narrative again.

        Raises:
            SurveyNotFoundError: If the session does not exist.
        """
        session = await self._get_session(survey_id)
        session.answers.clear()
        session.saved_survey_id = None
        session.requester = self._new_requester()
        logger.info("Survey reset requested", survey_id=str(survey_id))
