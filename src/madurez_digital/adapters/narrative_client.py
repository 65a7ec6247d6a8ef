"""HTTP client for the external narrative-generation service.

Implements the INarrativeClient interface with a single POST round-trip and no
retries. Transport errors, non-2xx statuses and malformed bodies are raised as
NarrativeServiceError subclasses; the ReportRequester decides what the user
sees.
"""

from typing import Any

import httpx

from madurez_digital.core.report_requester import (
    MalformedNarrativeError,
    NarrativeStatusError,
    NarrativeTransportError,
)
from madurez_digital.observability import get_logger
from madurez_digital.settings import Settings

logger = get_logger(__name__)


class HttpNarrativeClient:
    """Narrative client backed by a shared ``httpx.AsyncClient``.

    Args:
        http_client: Client whose base_url points at the narrative service.
        endpoint_path: Path of the report generation endpoint.
    """

    def __init__(self, http_client: httpx.AsyncClient, endpoint_path: str) -> None:
        self._http = http_client
        self._endpoint_path = endpoint_path

    @classmethod
    def build_http_client(cls, settings: Settings) -> httpx.AsyncClient:
        """Create the AsyncClient configured from settings.

        No timeout is applied unless ``report_timeout_seconds`` is set.
        """
        return httpx.AsyncClient(
            base_url=settings.report_service_url,
            timeout=httpx.Timeout(settings.report_timeout_seconds),
            headers={"Content-Type": "application/json"},
        )

    async def generate_report(self, payload: dict[str, Any]) -> str:
        """POST the scores and return the markdown report.

        Args:
            payload: Body built by build_report_payload().

        Returns:
            The ``report`` string from the response body.

        Raises:
            NarrativeTransportError: If no HTTP response was received.
            NarrativeStatusError: On a non-2xx response.
            MalformedNarrativeError: If the body is not JSON or lacks a string
                ``report`` field.
        """
        try:
            response = await self._http.post(self._endpoint_path, json=payload)
        except httpx.HTTPError as exc:
            raise NarrativeTransportError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise NarrativeStatusError(response.status_code, _error_detail(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedNarrativeError("Formato de respuesta inválido") from exc

        if not isinstance(data, dict) or not isinstance(data.get("report"), str):
            raise MalformedNarrativeError("Formato de respuesta inválido")

        logger.debug(
            "Narrative service responded",
            status_code=response.status_code,
            report_length=len(data["report"]),
        )
        return data["report"]


def _error_detail(response: httpx.Response) -> str | None:
    """Extract the optional ``detail`` field of an error response."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return None
