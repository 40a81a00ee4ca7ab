"""
PDF Services Module
Contract-level PDF processing

Components:
- PDF Orchestrator: extraction with OCR fallback, preprocessing, section
  segmentation, clause classification and optional AI enrichment
"""

from .pdf_orchestrator import PDFOrchestrator, ProcessedContract

__all__ = [
    'PDFOrchestrator',
    'ProcessedContract',
]
