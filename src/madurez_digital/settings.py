"""Service settings for the digital maturity results service.

Settings use the MADUREZ_ env prefix, e.g. MADUREZ_REPORT_SERVICE_URL.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for madurez-digital.

    Environment variable prefix: MADUREZ_
    """

    service_name: str = "madurez-digital"

    # Likert scale accepted for question answers
    likert_min: int = 1
    likert_max: int = 5

    # Narrative report service
    report_service_url: str = "http://localhost:3000"
    report_endpoint_path: str = "/api/survey/generate-report"
    # None keeps the request pending for as long as the remote takes
    report_timeout_seconds: float | None = None
    report_fallback_message: str = (
        "❌ Error al generar el análisis automático. Por favor, intenta de nuevo."
    )

    # Document export
    pdf_filename: str = "reporte-madurez-digital.pdf"
    pdf_title: str = "Reporte de Madurez Digital"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(env_prefix="MADUREZ_")
