"""Surf-conditions decision engine for the Siargao surf dashboard.

Subpackages:

- scoring: spot profiles, wave-height correction, quality scoring, tide stages
- cache: DuckDB-backed tide and AI report caches, tide refresh scheduling
- clients: marine weather, tide and language-model collaborators
- reports: prompt construction and LLM output parsing
- api: FastAPI application (thin HTTP layer over SurfReportEngine)
"""

__version__ = "1.0.0"
