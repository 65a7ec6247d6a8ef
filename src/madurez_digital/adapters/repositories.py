"""In-process survey session repository.

Implements ISurveyRepository. Answers belong to the survey-taking flow; this
store only keeps the sessions the results service is serving, for the
lifetime of the process.
"""

import uuid

from madurez_digital.core.models import SurveySession


class InMemorySurveyRepository:
    """Dict-backed session store keyed by survey_id."""

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, SurveySession] = {}

    async def add(self, session: SurveySession) -> SurveySession:
        self._sessions[session.survey_id] = session
        return session

    async def get(self, survey_id: uuid.UUID) -> SurveySession | None:
        return self._sessions.get(survey_id)

    def __len__(self) -> int:
        return len(self._sessions)
