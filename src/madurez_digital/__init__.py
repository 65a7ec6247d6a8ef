"""Digital maturity survey results service.

Scores the four-pillar digital maturity self-assessment (Estrategia,
Tecnología, Analítica de datos, Gente y Liderazgo), builds the results
dashboard data, requests the narrative report and exports it as PDF.
"""

__version__ = "0.1.0"
