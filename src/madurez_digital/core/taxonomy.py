"""Digital maturity survey taxonomy.

Defines the four pillars of the self-assessment, the categories inside each
pillar and the ordered question identifiers that belong to each category.
Order is carried as data (tuples), so pillar and category order is the display
order used by the dashboard, the narrative payload and the PDF export.

Pillars:
    Pilar1: Estrategia
    Pilar2: Tecnología
    Pilar3: Analítica de datos
    Pilar4: Gente y Liderazgo

A Taxonomy is immutable and is injected into the scoring functions rather than
read from module globals, so tests can substitute a smaller one.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

# Identity fields captured alongside the Likert answers.
NAME_FIELD: str = "Nombre"
COMPANY_FIELD: str = "Empresa"
IDENTITY_FIELDS: tuple[str, ...] = (NAME_FIELD, COMPANY_FIELD)


class TaxonomyError(ValueError):
    """Raised when a taxonomy definition breaks its structural invariants."""


@dataclass(frozen=True)
class Category:
    """A named group of survey questions inside a pillar.

    Attributes:
        label: Display label (e.g., 'Visión Digital').
        question_ids: Ordered question identifiers scored in this category.
    """

    label: str
    question_ids: tuple[str, ...]


@dataclass(frozen=True)
class Pillar:
    """A top-level maturity dimension.

    Attributes:
        pillar_id: Stable identifier (e.g., 'Pilar1').
        label: Display label (e.g., 'Estrategia').
        slug: Short key used by the results view (e.g., 'estrategia').
        categories: Ordered categories belonging to this pillar.
    """

    pillar_id: str
    label: str
    slug: str
    categories: tuple[Category, ...]

    @property
    def question_ids(self) -> tuple[str, ...]:
        """All question identifiers of the pillar, in category order."""
        return tuple(qid for category in self.categories for qid in category.question_ids)


@dataclass(frozen=True)
class Taxonomy:
    """Ordered, validated Pillar -> Category -> QuestionId hierarchy.

    Construction fails with TaxonomyError if a question identifier appears in
    more than one category, if a category is empty, or if pillar identifiers or
    category labels within a pillar repeat.
    """

    pillars: tuple[Pillar, ...]
    _pillars_by_id: dict[str, Pillar] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        seen_questions: dict[str, str] = {}
        pillars_by_id: dict[str, Pillar] = {}

        for pillar in self.pillars:
            if pillar.pillar_id in pillars_by_id:
                raise TaxonomyError(f"Duplicate pillar id {pillar.pillar_id!r}")
            pillars_by_id[pillar.pillar_id] = pillar

            labels = [category.label for category in pillar.categories]
            if len(labels) != len(set(labels)):
                raise TaxonomyError(
                    f"Duplicate category label in pillar {pillar.pillar_id!r}"
                )

            for category in pillar.categories:
                if not category.question_ids:
                    raise TaxonomyError(
                        f"Category {category.label!r} in pillar {pillar.pillar_id!r} "
                        "has no questions"
                    )
                for qid in category.question_ids:
                    if qid in seen_questions:
                        raise TaxonomyError(
                            f"Question {qid!r} appears in both {seen_questions[qid]!r} "
                            f"and {category.label!r}"
                        )
                    seen_questions[qid] = category.label

        # frozen dataclass: bypass __setattr__ for the derived lookup
        object.__setattr__(self, "_pillars_by_id", pillars_by_id)

    def __iter__(self) -> Iterator[Pillar]:
        return iter(self.pillars)

    def __len__(self) -> int:
        return len(self.pillars)

    def pillar(self, pillar_id: str) -> Pillar:
        """Return the pillar with the given identifier.

        Raises:
            KeyError: If the pillar does not exist.
        """
        return self._pillars_by_id[pillar_id]

    @property
    def question_ids(self) -> tuple[str, ...]:
        """Every question identifier in taxonomy order."""
        return tuple(qid for pillar in self.pillars for qid in pillar.question_ids)

    def contains_question(self, question_id: str) -> bool:
        return question_id in self.question_ids


def _category(label: str, *question_ids: str) -> Category:
    return Category(label=label, question_ids=tuple(question_ids))


DEFAULT_TAXONOMY: Taxonomy = Taxonomy(
    pillars=(
        # -------------------------------------------------------------------
        # Pilar1: Estrategia
        # -------------------------------------------------------------------
        Pillar(
            pillar_id="Pilar1",
            label="Estrategia",
            slug="estrategia",
            categories=(
                _category(
                    "Visión Digital",
                    "vision_digital_definida",
                    "vision_digital_documentada",
                    "revision_vision_digital",
                ),
                _category(
                    "Alineación Estratégica",
                    "alineacion_estrategica",
                    "evaluacion_impacto_digital",
                    "integracion_planeacion",
                ),
                _category(
                    "Technology Roadmap",
                    "roadmap_tecnologico",
                    "actualizacion_roadmap",
                    "uso_taxonomia_digital",
                ),
                _category(
                    "Curva S",
                    "momento_incorporacion_tecnologia",
                    "ciclo_vida_impacto_tecnologia",
                    "evaluacion_madurez_tecnologia",
                ),
                _category(
                    "Valor Digital (CX)",
                    "experiencia_cliente_estrategia_digital",
                    "digitalizacion_propuesta_valor",
                    "monitoreo_valor_digital",
                ),
            ),
        ),
        # -------------------------------------------------------------------
        # Pilar2: Tecnología
        # -------------------------------------------------------------------
        Pillar(
            pillar_id="Pilar2",
            label="Tecnología",
            slug="tecnologia",
            categories=(
                _category(
                    "Infraestructura Tecnológica",
                    "estado_infraestructura",
                    "conectividad_redes",
                    "plataformas_hardware",
                ),
                _category(
                    "Metodologías Digitales",
                    "presencia_metodologias_innovacion",
                    "estandarizacion_enfoque_metodologico",
                    "aplicacion_practica_metodologias",
                ),
                _category(
                    "Automatización de Procesos",
                    "impacto_automatizacion",
                    "mineria_procesos",
                    "porcentaje_procesos_automatizados",
                    "herramientas_bajo_costo",
                    "robustez_herramientas",
                    "herramientas_especializadas",
                ),
                _category(
                    "Integración de Sistemas",
                    "nivel_integracion_sistemas",
                    "flexibilidad_arquitectura",
                    "fluidez_datos",
                ),
                _category(
                    "Tecnologías Emergentes",
                    "exploracion_tecnologias",
                    "pilotos_tecnologias",
                    "escalamiento_tecnologias",
                ),
            ),
        ),
        # -------------------------------------------------------------------
        # Pilar3: Analítica de datos
        # -------------------------------------------------------------------
        Pillar(
            pillar_id="Pilar3",
            label="Analítica de datos",
            slug="analitica",
            categories=(
                _category(
                    "Gobierno de Datos",
                    "politicas_gestion_datos",
                    "control_acceso_datos",
                    "calidad_datos",
                ),
                _category(
                    "Analítica de Negocio",
                    "nivel_herramientas_analitica",
                    "accesibilidad_comprension_datos",
                    "estructura_proceso_insights",
                ),
                _category(
                    "Decisiones con Datos",
                    "confianza_datos",
                    "estructura_proceso_decisiones",
                    "integracion_analisis_decisiones",
                ),
                _category(
                    "Flujo de Datos",
                    "conectividad_sistemas",
                    "fluidez_intercambio_datos",
                    "formalidad_arquitectura_datos",
                ),
                _category(
                    "Transaccionalidad",
                    "frecuencia_actualizacion_datos",
                    "accesibilidad_trazabilidad_transacciones",
                    "integracion_plataformas_transaccionales",
                ),
            ),
        ),
        # -------------------------------------------------------------------
        # Pilar4: Gente y Liderazgo
        # -------------------------------------------------------------------
        Pillar(
            pillar_id="Pilar4",
            label="Gente y Liderazgo",
            slug="gente",
            categories=(
                _category(
                    "Liderazgo Digital",
                    "compromiso_liderazgo",
                    "visibilidad_liderazgo",
                    "claridad_roles_liderazgo",
                ),
                _category(
                    "Cultura Digital",
                    "apertura_cambio",
                    "comunicacion_interna",
                    "participacion_personal",
                ),
                _category(
                    "Talento Digital",
                    "capacitacion_habilidades",
                    "evaluacion_competencias",
                    "atraccion_retencion_talento",
                ),
                _category(
                    "Gobernanza del Cambio",
                    "estructuras_gobernanza",
                    "participacion_interdepartamental",
                    "metricas_objetivos_cambio",
                ),
                _category(
                    "Gestión del Cambio",
                    "aplicacion_metodologias",
                    "comunicacion_acompanamiento",
                    "medicion_impacto_humano",
                ),
            ),
        ),
    )
)

ALL_PILLAR_IDS: tuple[str, ...] = tuple(p.pillar_id for p in DEFAULT_TAXONOMY)
