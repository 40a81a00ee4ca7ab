# contract_analyzer package initialization
"""
Contract Analyzer - Source Package
PDF contract extraction, clause classification and revenue recognition analysis.
"""

__version__ = "1.0.0"
__description__ = "PDF contract analysis for revenue automation"

# Subpackages are not imported here so that optional extraction and OCR
# dependencies are only loaded by the code paths that use them.

__all__ = ["api", "cli", "config", "pdf", "schemas", "services", "utils"]
