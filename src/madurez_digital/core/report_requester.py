"""One-shot narrative report requester.

Serialises the aggregated scores into the body expected by the narrative
service, issues a single request per results session and exposes the outcome
as a ReportState:

    IDLE -> LOADING -> SUCCESS(text)
                    -> ERROR(fallback message)

The requester is fetch-once: an explicit guard flag is claimed before the
request is sent, so later calls return the current state instead of issuing a
second request. Resetting the survey replaces the requester.

Every failure raised by the narrative client (transport, non-2xx status,
malformed body) collapses to the same user-facing fallback message. The reason
is logged, never raised to the caller.
"""

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from madurez_digital.core.interfaces import INarrativeClient
from madurez_digital.core.scoring import AnswerMap, PillarScore, round_score
from madurez_digital.core.taxonomy import IDENTITY_FIELDS
from madurez_digital.observability import get_logger

logger = get_logger(__name__)

TOTAL_SCORE_FIELD: str = "TotalScore"

DEFAULT_FALLBACK_MESSAGE: str = (
    "❌ Error al generar el análisis automático. Por favor, intenta de nuevo."
)


class NarrativeServiceError(Exception):
    """Base class for failures talking to the narrative service."""


class NarrativeTransportError(NarrativeServiceError):
    """Raised when the request never produced an HTTP response."""


class NarrativeStatusError(NarrativeServiceError):
    """Raised when the narrative service answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the service.
        detail: Optional error detail supplied in the response body.
    """

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail or "Failed to generate report")


class MalformedNarrativeError(NarrativeServiceError):
    """Raised when the response body lacks a string ``report`` field."""


class ReportStatus(str, enum.Enum):
    """Lifecycle of a narrative request."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ReportState:
    """Snapshot of a requester.

    Attributes:
        status: Current lifecycle status.
        text: Narrative markdown on SUCCESS, the fallback message on ERROR,
            empty otherwise.
    """

    status: ReportStatus = ReportStatus.IDLE
    text: str = ""

    @property
    def is_loading(self) -> bool:
        return self.status is ReportStatus.LOADING

    @property
    def has_text(self) -> bool:
        """True once there is something to show or export."""
        return self.status in (ReportStatus.SUCCESS, ReportStatus.ERROR) and bool(self.text)


def build_report_payload(
    pillar_scores: Sequence[PillarScore],
    overall_average: float,
    answers: AnswerMap,
) -> dict[str, Any]:
    """Build the JSON body sent to the narrative service.

    Shape::

        {
            "<Pillar label>": {"<Category label>": 3.33, ...},
            ...
            "Nombre": "...",
            "Empresa": "...",
            "TotalScore": 3.12,
        }

    Identity fields missing from the answers are left out of the body.

    Args:
        pillar_scores: Output of compute_pillar_scores(), in taxonomy order.
        overall_average: Output of compute_overall_average().
        answers: Survey answers holding the identity fields.

    Returns:
        Ordered dict ready for JSON serialisation.
    """
    payload: dict[str, Any] = {
        pillar.label: {category.label: category.value for category in pillar.categories}
        for pillar in pillar_scores
    }
    for field_name in IDENTITY_FIELDS:
        if field_name in answers:
            payload[field_name] = answers[field_name]
    payload[TOTAL_SCORE_FIELD] = round_score(overall_average)
    return payload


class ReportRequester:
    """Fetch-once narrative requester for a single results session.

    Args:
        client: Narrative service client.
        fallback_message: Text shown when the request fails for any reason.
    """

    def __init__(
        self,
        client: INarrativeClient,
        fallback_message: str = DEFAULT_FALLBACK_MESSAGE,
    ) -> None:
        self._client = client
        self._fallback_message = fallback_message
        self._requested = False
        self._state = ReportState()

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def requested(self) -> bool:
        """Whether the single allowed request has been claimed."""
        return self._requested

    def claim(self) -> bool:
        """Claim the single request slot and move to LOADING.

        Returns:
            True if this call claimed the slot, False if it was already taken.
        """
        if self._requested:
            return False
        self._requested = True
        self._state = ReportState(status=ReportStatus.LOADING)
        return True

    async def request_report(self, payload: dict[str, Any]) -> ReportState:
        """Claim the slot and fetch the narrative, at most once.

        Args:
            payload: Body built by build_report_payload().

        Returns:
            The resulting state. When the slot was already claimed, the
            current state is returned and no request is issued.
        """
        if not self.claim():
            logger.debug("Narrative already requested", status=self._state.status.value)
            return self._state
        return await self.fetch(payload)

    async def fetch(self, payload: dict[str, Any]) -> ReportState:
        """Issue the request for a slot claimed with claim().

        Args:
            payload: Body built by build_report_payload().

        Returns:
            SUCCESS with the narrative, or ERROR with the fallback message.
            Without a claimed, still-loading slot nothing is sent and the
            current state is returned.
        """
        if self._state.status is not ReportStatus.LOADING:
            logger.warning(
                "Narrative fetch without a pending claim",
                status=self._state.status.value,
            )
            return self._state

        try:
            report = await self._client.generate_report(payload)
        except NarrativeStatusError as exc:
            logger.error(
                "Narrative service returned an error status",
                status_code=exc.status_code,
                detail=exc.detail,
            )
            self._state = ReportState(status=ReportStatus.ERROR, text=self._fallback_message)
        except NarrativeServiceError as exc:
            logger.error(
                "Narrative request failed",
                reason=type(exc).__name__,
                error=str(exc),
            )
            self._state = ReportState(status=ReportStatus.ERROR, text=self._fallback_message)
        except Exception:
            logger.exception("Unexpected narrative client failure")
            self._state = ReportState(status=ReportStatus.ERROR, text=self._fallback_message)
        else:
            logger.info("Narrative report received", report_length=len(report))
            self._state = ReportState(status=ReportStatus.SUCCESS, text=report)
        return self._state
