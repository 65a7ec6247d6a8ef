"""Results dashboard view model.

Derives everything the results view and the PDF export display from the
aggregation output: gauges, radar chart series, per-category breakdowns, the
identity header and the saved-survey confirmation. Scores are passed through
unchanged; only display strings are formatted here.

Maturity levels map a 1-5 score to a label by truncating to the integer part:

    1.00-1.99 -> 01. Básico
    2.00-2.99 -> 02. Inicial
    3.00-3.99 -> 03. Intermedio
    4.00-4.99 -> 04. Avanzado
    5.00      -> 05. Óptimo

Scores below 1 (no answers) have no maturity level.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from madurez_digital.core.report_requester import ReportState
from madurez_digital.core.scoring import AnswerMap, PillarScore, round_score
from madurez_digital.core.taxonomy import COMPANY_FIELD, NAME_FIELD, Taxonomy

SCALE_MAX: float = 5.0

OVERALL_GAUGE_LABEL: str = "Madurez Digital"
MAIN_RADAR_TITLE: str = "Vista General"
MAIN_RADAR_DESCRIPTION: str = "Comparación de los 4 pilares de madurez digital"

MATURITY_LEVELS: dict[int, str] = {
    1: "01. Básico",
    2: "02. Inicial",
    3: "03. Intermedio",
    4: "04. Avanzado",
    5: "05. Óptimo",
}

_HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class Gauge:
    """Radial gauge value. ``percentage`` is value / 5 * 100."""

    label: str
    value: float
    percentage: float
    maturity_level: str | None


@dataclass(frozen=True)
class RadarPoint:
    category: str
    value: float


@dataclass(frozen=True)
class RadarChart:
    title: str
    description: str
    points: tuple[RadarPoint, ...]


@dataclass(frozen=True)
class CategoryBreakdown:
    """One category card of a pillar tab.

    Attributes:
        position: 1-based position within the pillar.
        label: Category label.
        value: Category score, unchanged.
        display_value: Score with one decimal (e.g., '3.3').
        display_percentage: Score on a 0-100 scale without decimals (e.g., '67%').
    """

    position: int
    label: str
    value: float
    display_value: str
    display_percentage: str


@dataclass(frozen=True)
class PillarView:
    """Detail tab for one pillar."""

    name: str
    label: str
    slug: str
    gauge: Gauge
    radar: RadarChart
    categories: tuple[CategoryBreakdown, ...]


@dataclass(frozen=True)
class Dashboard:
    """Everything the results view renders."""

    overall_average: float
    overall_gauge: Gauge
    pillar_gauges: tuple[Gauge, ...]
    main_radar: RadarChart
    pillars: tuple[PillarView, ...]
    header: str | None
    saved_confirmation: str | None


@dataclass(frozen=True)
class PillarSection:
    label: str
    average: float
    categories: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class ReportDocument:
    """Content of the exported document.

    Attributes:
        title: Document title.
        user_name: Respondent name, if given.
        company_name: Respondent company, if given.
        overall_average: Overall score.
        pillars: Pillar sections in taxonomy order.
        narrative: Narrative text with HTML tags removed.
    """

    title: str
    user_name: str | None
    company_name: str | None
    overall_average: float
    pillars: tuple[PillarSection, ...]
    narrative: str


def percentage(value: float, scale_max: float = SCALE_MAX) -> float:
    """Express a 0-5 score as a 0-100 percentage."""
    return value / scale_max * 100


def maturity_level_label(score: float) -> str | None:
    """Map a 1-5 score to its maturity label, or None below 1."""
    if score < 1:
        return None
    return MATURITY_LEVELS[min(int(score), 5)]


def strip_html(text: str) -> str:
    """Remove anything that looks like an HTML tag from ``text``."""
    return _HTML_TAG_PATTERN.sub("", text)


def _identity(answers: AnswerMap, field_name: str) -> str | None:
    value = answers.get(field_name)
    if value is None or value == "":
        return None
    return str(value)


def _gauge(label: str, value: float) -> Gauge:
    return Gauge(
        label=label,
        value=value,
        percentage=percentage(value),
        maturity_level=maturity_level_label(value),
    )


def saved_confirmation_message(saved_survey_id: str | None) -> str | None:
    """Confirmation line shown once the survey flow has persisted the survey."""
    if not saved_survey_id:
        return None
    return f"✅ Tu encuesta se ha guardado exitosamente (ID: {saved_survey_id[-8:]})"


def build_dashboard(
    pillar_scores: Sequence[PillarScore],
    overall_average: float,
    answers: AnswerMap,
    taxonomy: Taxonomy,
    saved_survey_id: str | None = None,
) -> Dashboard:
    """Assemble the results view model.

    Args:
        pillar_scores: Output of compute_pillar_scores().
        overall_average: Output of compute_overall_average().
        answers: Survey answers, read for the identity header only.
        taxonomy: Taxonomy the scores were computed with (for pillar slugs).
        saved_survey_id: Optional persisted survey ID for the confirmation.

    Returns:
        Dashboard view model.
    """
    pillar_gauges: list[Gauge] = []
    pillar_views: list[PillarView] = []

    for index, pillar in enumerate(pillar_scores, start=1):
        gauge = _gauge(f"{index}. {pillar.label}", pillar.average)
        pillar_gauges.append(gauge)

        radar = RadarChart(
            title=pillar.label,
            description=f"Análisis detallado de {pillar.label.lower()}",
            points=tuple(RadarPoint(category=c.label, value=c.value) for c in pillar.categories),
        )
        breakdown = tuple(
            CategoryBreakdown(
                position=position,
                label=category.label,
                value=category.value,
                display_value=f"{category.value:.1f}",
                display_percentage=f"{percentage(category.value):.0f}%",
            )
            for position, category in enumerate(pillar.categories, start=1)
        )
        pillar_views.append(
            PillarView(
                name=pillar.name,
                label=pillar.label,
                slug=taxonomy.pillar(pillar.name).slug,
                gauge=gauge,
                radar=radar,
                categories=breakdown,
            )
        )

    main_radar = RadarChart(
        title=MAIN_RADAR_TITLE,
        description=MAIN_RADAR_DESCRIPTION,
        points=tuple(
            RadarPoint(category=p.label, value=round_score(p.average)) for p in pillar_scores
        ),
    )

    name = _identity(answers, NAME_FIELD)
    company = _identity(answers, COMPANY_FIELD)
    header = f"{name} - {company or ''}" if name else None

    return Dashboard(
        overall_average=overall_average,
        overall_gauge=_gauge(OVERALL_GAUGE_LABEL, overall_average),
        pillar_gauges=tuple(pillar_gauges),
        main_radar=main_radar,
        pillars=tuple(pillar_views),
        header=header,
        saved_confirmation=saved_confirmation_message(saved_survey_id),
    )


def build_report_document(
    pillar_scores: Sequence[PillarScore],
    overall_average: float,
    answers: AnswerMap,
    report: ReportState,
    title: str,
) -> ReportDocument:
    """Assemble the export document from the same scores as the dashboard.

    Args:
        pillar_scores: Output of compute_pillar_scores().
        overall_average: Output of compute_overall_average().
        answers: Survey answers holding the identity fields.
        report: Narrative state; its text is exported with HTML tags removed.
        title: Document title.

    Returns:
        ReportDocument for the renderer.
    """
    return ReportDocument(
        title=title,
        user_name=_identity(answers, NAME_FIELD),
        company_name=_identity(answers, COMPANY_FIELD),
        overall_average=overall_average,
        pillars=tuple(
            PillarSection(
                label=p.label,
                average=p.average,
                categories=tuple((c.label, c.value) for c in p.categories),
            )
            for p in pillar_scores
        ),
        narrative=strip_html(report.text),
    )
