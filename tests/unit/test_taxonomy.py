"""Unit tests for the digital maturity survey taxonomy.

Tests verify:
- Four pillars in fixed order with their labels and slugs
- Five categories per pillar, each with 3-6 questions
- Question IDs are unique across the whole taxonomy
- Construction rejects duplicated questions, pillars and empty categories
"""

import pytest

from madurez_digital.core.taxonomy import (
    ALL_PILLAR_IDS,
    DEFAULT_TAXONOMY,
    Category,
    Pillar,
    Taxonomy,
    TaxonomyError,
)

_EXPECTED_PILLARS = [
    ("Pilar1", "Estrategia", "estrategia"),
    ("Pilar2", "Tecnología", "tecnologia"),
    ("Pilar3", "Analítica de datos", "analitica"),
    ("Pilar4", "Gente y Liderazgo", "gente"),
]


class TestDefaultTaxonomyStructure:
    """Tests verifying the shape of the default taxonomy."""

    def test_four_pillars_in_fixed_order(self) -> None:
        """Pillars must appear as Pilar1..Pilar4 with their labels and slugs."""
        actual = [(p.pillar_id, p.label, p.slug) for p in DEFAULT_TAXONOMY]
        assert actual == _EXPECTED_PILLARS

    def test_all_pillar_ids_matches_taxonomy_order(self) -> None:
        assert ALL_PILLAR_IDS == ("Pilar1", "Pilar2", "Pilar3", "Pilar4")

    @pytest.mark.parametrize("pillar_id", ["Pilar1", "Pilar2", "Pilar3", "Pilar4"])
    def test_each_pillar_has_five_categories(self, pillar_id: str) -> None:
        assert len(DEFAULT_TAXONOMY.pillar(pillar_id).categories) == 5

    def test_category_sizes_between_three_and_six(self) -> None:
        """Every category groups 3 to 6 questions."""
        for pillar in DEFAULT_TAXONOMY:
            for category in pillar.categories:
                assert 3 <= len(category.question_ids) <= 6, (
                    f"{category.label!r} has {len(category.question_ids)} questions"
                )

    def test_total_question_count(self) -> None:
        """19 categories of 3 questions plus one category of 6."""
        assert len(DEFAULT_TAXONOMY.question_ids) == 63

    def test_question_ids_are_unique(self) -> None:
        ids = DEFAULT_TAXONOMY.question_ids
        assert len(ids) == len(set(ids))

    def test_category_order_of_first_pillar(self) -> None:
        labels = [c.label for c in DEFAULT_TAXONOMY.pillar("Pilar1").categories]
        assert labels == [
            "Visión Digital",
            "Alineación Estratégica",
            "Technology Roadmap",
            "Curva S",
            "Valor Digital (CX)",
        ]

    def test_automation_category_has_six_questions(self) -> None:
        automation = DEFAULT_TAXONOMY.pillar("Pilar2").categories[2]
        assert automation.label == "Automatización de Procesos"
        assert len(automation.question_ids) == 6

    def test_contains_question(self) -> None:
        assert DEFAULT_TAXONOMY.contains_question("vision_digital_definida")
        assert not DEFAULT_TAXONOMY.contains_question("Nombre")

    def test_unknown_pillar_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            DEFAULT_TAXONOMY.pillar("Pilar5")

    def test_taxonomy_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_TAXONOMY.pillars = ()  # type: ignore[misc]


class TestTaxonomyValidation:
    """Tests for the structural checks run at construction."""

    def test_duplicate_question_across_categories_raises(self) -> None:
        with pytest.raises(TaxonomyError, match="appears in both"):
            Taxonomy(
                pillars=(
                    Pillar(
                        pillar_id="P1",
                        label="Uno",
                        slug="uno",
                        categories=(
                            Category(label="A", question_ids=("q1", "q2")),
                            Category(label="B", question_ids=("q2", "q3")),
                        ),
                    ),
                )
            )

    def test_duplicate_question_across_pillars_raises(self) -> None:
        with pytest.raises(TaxonomyError):
            Taxonomy(
                pillars=(
                    Pillar("P1", "Uno", "uno", (Category("A", ("q1",)),)),
                    Pillar("P2", "Dos", "dos", (Category("B", ("q1",)),)),
                )
            )

    def test_duplicate_pillar_id_raises(self) -> None:
        with pytest.raises(TaxonomyError, match="Duplicate pillar id"):
            Taxonomy(
                pillars=(
                    Pillar("P1", "Uno", "uno", (Category("A", ("q1",)),)),
                    Pillar("P1", "Otro", "otro", (Category("B", ("q2",)),)),
                )
            )

    def test_empty_category_raises(self) -> None:
        with pytest.raises(TaxonomyError, match="has no questions"):
            Taxonomy(pillars=(Pillar("P1", "Uno", "uno", (Category("A", ()),)),))

    def test_taxonomy_error_is_value_error(self) -> None:
        assert issubclass(TaxonomyError, ValueError)
