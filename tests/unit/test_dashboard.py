"""Unit tests for the results dashboard view model and export document."""

from collections.abc import Callable

import pytest

from madurez_digital.core.dashboard import (
    MAIN_RADAR_DESCRIPTION,
    MAIN_RADAR_TITLE,
    OVERALL_GAUGE_LABEL,
    build_dashboard,
    build_report_document,
    maturity_level_label,
    percentage,
    saved_confirmation_message,
    strip_html,
)
from madurez_digital.core.report_requester import ReportState, ReportStatus
from madurez_digital.core.scoring import compute_overall_average, compute_pillar_scores
from madurez_digital.core.taxonomy import DEFAULT_TAXONOMY

AnswerFactory = Callable[[int | float], dict[str, int | float]]


def _dashboard(answers: dict[str, object], saved_survey_id: str | None = None):  # noqa: ANN202
    pillars = compute_pillar_scores(answers, DEFAULT_TAXONOMY)  # type: ignore[arg-type]
    return build_dashboard(
        pillars,
        compute_overall_average(pillars),
        answers,  # type: ignore[arg-type]
        DEFAULT_TAXONOMY,
        saved_survey_id=saved_survey_id,
    )


class TestHelpers:
    """Tests for the display helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, 0.0), (2.5, 50.0), (3.0, 60.0), (5.0, 100.0)],
    )
    def test_percentage(self, value: float, expected: float) -> None:
        assert percentage(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0.0, None),
            (0.99, None),
            (1.0, "01. Básico"),
            (2.99, "02. Inicial"),
            (3.0, "03. Intermedio"),
            (4.5, "04. Avanzado"),
            (5.0, "05. Óptimo"),
        ],
    )
    def test_maturity_level_label(self, score: float, expected: str | None) -> None:
        assert maturity_level_label(score) == expected

    def test_strip_html_removes_tags(self) -> None:
        assert strip_html("<p>Hola <b>mundo</b></p><br/>") == "Hola mundo"

    def test_strip_html_keeps_markdown(self) -> None:
        text = "# Título\n\n- **uno**"
        assert strip_html(text) == text

    def test_saved_confirmation_uses_last_eight_characters(self) -> None:
        message = saved_confirmation_message("3f2a9c7e-1b4d-4e8f-9a6b-0123456789ab")
        assert message == "✅ Tu encuesta se ha guardado exitosamente (ID: 456789ab)"

    @pytest.mark.parametrize("saved_id", [None, ""])
    def test_no_confirmation_without_id(self, saved_id: str | None) -> None:
        assert saved_confirmation_message(saved_id) is None


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_overall_gauge(self, answer_all: AnswerFactory) -> None:
        dashboard = _dashboard(dict(answer_all(3)))
        gauge = dashboard.overall_gauge
        assert gauge.label == OVERALL_GAUGE_LABEL
        assert gauge.value == 3.0
        assert gauge.percentage == pytest.approx(60.0)
        assert gauge.maturity_level == "03. Intermedio"

    def test_pillar_gauges_are_numbered(self) -> None:
        labels = [g.label for g in _dashboard({}).pillar_gauges]
        assert labels == [
            "1. Estrategia",
            "2. Tecnología",
            "3. Analítica de datos",
            "4. Gente y Liderazgo",
        ]

    def test_main_radar_has_one_point_per_pillar(self, answer_all: AnswerFactory) -> None:
        radar = _dashboard(dict(answer_all(4))).main_radar
        assert radar.title == MAIN_RADAR_TITLE
        assert radar.description == MAIN_RADAR_DESCRIPTION
        assert [(p.category, p.value) for p in radar.points] == [
            ("Estrategia", 4.0),
            ("Tecnología", 4.0),
            ("Analítica de datos", 4.0),
            ("Gente y Liderazgo", 4.0),
        ]

    def test_main_radar_values_are_rounded(self) -> None:
        # Visión Digital = 4.33 -> Estrategia = 0.866
        dashboard = _dashboard(
            {
                "vision_digital_definida": 4,
                "vision_digital_documentada": 4,
                "revision_vision_digital": 5,
            }
        )
        assert dashboard.main_radar.points[0].value == 0.87

    def test_pillar_views_carry_slug_and_radar(self) -> None:
        views = _dashboard({}).pillars
        assert [v.slug for v in views] == ["estrategia", "tecnologia", "analitica", "gente"]
        technology = views[1]
        assert technology.radar.title == "Tecnología"
        assert technology.radar.description == "Análisis detallado de tecnología"
        assert len(technology.radar.points) == 5

    def test_category_breakdown_display(self) -> None:
        dashboard = _dashboard(
            {
                "vision_digital_definida": 3,
                "vision_digital_documentada": 3,
                "revision_vision_digital": 4,
            }
        )
        first = dashboard.pillars[0].categories[0]
        assert first.position == 1
        assert first.label == "Visión Digital"
        assert first.value == 3.33
        assert first.display_value == "3.3"
        assert first.display_percentage == "67%"

    def test_unanswered_pillar_has_no_maturity_level(self) -> None:
        dashboard = _dashboard({})
        assert all(g.maturity_level is None for g in dashboard.pillar_gauges)
        assert dashboard.overall_gauge.percentage == 0.0

    def test_header_with_name_and_company(self) -> None:
        dashboard = _dashboard({"Nombre": "Ana", "Empresa": "ACME"})
        assert dashboard.header == "Ana - ACME"

    def test_header_with_name_only(self) -> None:
        assert _dashboard({"Nombre": "Ana"}).header == "Ana - "

    def test_no_header_without_name(self) -> None:
        assert _dashboard({"Empresa": "ACME"}).header is None

    def test_saved_confirmation(self) -> None:
        dashboard = _dashboard({}, saved_survey_id="abcdefgh12345678")
        assert dashboard.saved_confirmation is not None
        assert "12345678" in dashboard.saved_confirmation

    def test_scores_pass_through_unchanged(self, answer_all: AnswerFactory) -> None:
        answers = dict(answer_all(2))
        pillars = compute_pillar_scores(answers, DEFAULT_TAXONOMY)
        dashboard = build_dashboard(
            pillars, compute_overall_average(pillars), answers, DEFAULT_TAXONOMY
        )
        assert [g.value for g in dashboard.pillar_gauges] == [p.average for p in pillars]


class TestBuildReportDocument:
    """Tests for build_report_document."""

    def test_document_mirrors_scores_and_strips_html(self, answer_all: AnswerFactory) -> None:
        answers: dict[str, object] = dict(answer_all(4))
        answers.update({"Nombre": "Ana", "Empresa": "ACME"})
        pillars = compute_pillar_scores(answers, DEFAULT_TAXONOMY)  # type: ignore[arg-type]
        report = ReportState(status=ReportStatus.SUCCESS, text="<p>Buen **avance**</p>")

        document = build_report_document(
            pillars,
            compute_overall_average(pillars),
            answers,  # type: ignore[arg-type]
            report,
            title="Reporte",
        )

        assert document.title == "Reporte"
        assert document.user_name == "Ana"
        assert document.company_name == "ACME"
        assert document.overall_average == 4.0
        assert [s.label for s in document.pillars] == [p.label for p in pillars]
        assert document.pillars[0].categories[0] == ("Visión Digital", 4.0)
        assert document.narrative == "Buen **avance**"

    def test_missing_identity_is_none(self) -> None:
        pillars = compute_pillar_scores({}, DEFAULT_TAXONOMY)
        document = build_report_document(
            pillars,
            0.0,
            {},
            ReportState(status=ReportStatus.ERROR, text="fallo"),
            title="Reporte",
        )
        assert document.user_name is None
        assert document.company_name is None
        assert document.narrative == "fallo"
