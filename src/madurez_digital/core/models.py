"""In-process domain models for survey results sessions."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from madurez_digital.core.report_requester import ReportRequester
from madurez_digital.core.scoring import AnswerValue


@dataclass
class SurveySession:
    """Answers and narrative state for one survey run.

    Attributes:
        survey_id: Session identifier handed to the client.
        requester: Fetch-once narrative requester for this run.
        answers: Question id (or identity field) -> answer value.
        saved_survey_id: ID under which the survey flow persisted the survey,
            shown in the confirmation message only.
        created_at: Session creation time (UTC).
    """

    survey_id: uuid.UUID
    requester: ReportRequester
    answers: dict[str, AnswerValue] = field(default_factory=dict)
    saved_survey_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))
