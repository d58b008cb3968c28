"""
Crop Science document scraper - PDF harvesting from a JSON document index.

Architecture:
- core/: Stable foundation (models, HTTP client, index, normalizer, dedup, downloader)
- config/: YAML-driven run configuration
- orchestrator: Sequential fetch -> filter -> download pipeline
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
