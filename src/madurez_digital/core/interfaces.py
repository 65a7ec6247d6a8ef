"""Abstract interfaces (Protocol classes) for the digital maturity service.

Services depend on these interfaces, not concrete implementations. Concrete
implementations live in ``adapters/`` and are injected from the route
dependency providers.
"""

import uuid
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from madurez_digital.core.dashboard import ReportDocument
    from madurez_digital.core.models import SurveySession


@runtime_checkable
class INarrativeClient(Protocol):
    """Client for the external narrative-generation service."""

    async def generate_report(self, payload: dict[str, Any]) -> str:
        """Send aggregated scores and return the markdown narrative.

        Raises:
            NarrativeServiceError: On transport failure, non-2xx status, or a
                response without a string ``report`` field.
        """
        ...


@runtime_checkable
class ISurveyRepository(Protocol):
    """Repository interface for survey results sessions."""

    async def add(self, session: "SurveySession") -> "SurveySession":
        """Store a new session."""
        ...

    async def get(self, survey_id: uuid.UUID) -> "SurveySession | None":
        """Retrieve a session by ID, or None."""
        ...


@runtime_checkable
class IReportRenderer(Protocol):
    """Renders a report document into downloadable bytes."""

    media_type: str

    def render(self, document: "ReportDocument") -> bytes:
        """Render the document."""
        ...
