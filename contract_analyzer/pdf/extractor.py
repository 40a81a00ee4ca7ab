#!/usr/bin/env python3
"""
Unified PDF Extractor - Simple, Powerful, Optimal
Combines PyMuPDF, PDFPlumber, PyPDF with ranking + fallback

Accepts either a file path or the raw bytes of an uploaded PDF.
"""

import io
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

PDFSource = Union[str, Path, bytes]

GOOD_ENOUGH_SCORE = 80.0


@dataclass
class ExtractionResult:
    """Unified extraction result"""
    success: bool
    text: str
    method: str
    confidence: float
    processing_time: float
    page_count: int
    error: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    pages: List[str] = field(default_factory=list)


def read_source(source: PDFSource) -> bytes:
    """Raw PDF bytes from a path or bytes. Raises FileNotFoundError."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {source}")
    return path.read_bytes()


class UnifiedPDFExtractor:
    """Unified PDF extractor with ranking and fallback"""

    def __init__(self):
        self.methods = []
        self._init_extractors()

    def _init_extractors(self):
        """Initialize extractors in priority order"""
        # 1. PyMuPDF (fastest)
        try:
            import fitz  # noqa: F401
            self.methods.append(('pymupdf', self._extract_pymupdf))
            logger.debug("PyMuPDF initialized")
        except ImportError:
            logger.warning("PyMuPDF not available")

        # 2. PDFPlumber (best for tables/layout)
        try:
            import pdfplumber  # noqa: F401
            self.methods.append(('pdfplumber', self._extract_pdfplumber))
            logger.debug("PDFPlumber initialized")
        except ImportError:
            logger.warning("PDFPlumber not available")

        # 3. PyPDF (pure Python fallback)
        try:
            import pypdf  # noqa: F401
            self.methods.append(('pypdf', self._extract_pypdf))
            logger.debug("PyPDF initialized")
        except ImportError:
            logger.warning("PyPDF not available")

        if not self.methods:
            raise RuntimeError("No PDF extractors available")

    def extract_text(self, source: PDFSource) -> ExtractionResult:
        """Extract text with ranking and fallback"""
        start_time = time.time()

        try:
            data = read_source(source)
        except FileNotFoundError as e:
            return ExtractionResult(False, "", "none", 0.0, 0.0, 0, str(e))

        best_result = None
        best_score = 0.0

        for method_name, extractor_func in self.methods:
            try:
                result = extractor_func(data)
                score = self._calculate_score(result)

                logger.debug(f"{method_name}: {len(result.text)} chars, score: {score:.2f}")

                if score > best_score:
                    best_score = score
                    best_result = result

                if score > GOOD_ENOUGH_SCORE:
                    break

            except Exception as e:
                logger.warning(f"{method_name} failed: {e}")
                continue

        if best_result:
            best_result.processing_time = time.time() - start_time
            return best_result

        return ExtractionResult(False, "", "all_failed", 0.0, time.time() - start_time, 0, "All extractors failed")

    def _extract_pymupdf(self, data: bytes) -> ExtractionResult:
        """PyMuPDF extraction"""
        import fitz
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text() for page in doc]

        text = "\n".join(pages)
        confidence = min(95.0, len(text) / 100)
        return ExtractionResult(True, text, "pymupdf", confidence, 0.0, len(pages), "", {"fast": True}, pages)

    def _extract_pdfplumber(self, data: bytes) -> ExtractionResult:
        """PDFPlumber extraction"""
        import pdfplumber
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]

        text = "\n".join(pages)
        confidence = min(90.0, len(text) / 100)
        return ExtractionResult(True, text, "pdfplumber", confidence, 0.0, len(pages), "", {"layout_aware": True}, pages)

    def _extract_pypdf(self, data: bytes) -> ExtractionResult:
        """PyPDF extraction"""
        import pypdf
        reader = pypdf.PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]

        text = "\n".join(pages)
        confidence = min(85.0, len(text) / 100)
        return ExtractionResult(True, text, "pypdf", confidence, 0.0, len(pages), "", {"pure_python": True}, pages)

    def _calculate_score(self, result: ExtractionResult) -> float:
        """Calculate quality score for ranking"""
        if not result.success or not result.text.strip():
            return 0.0

        # Base score from confidence
        score = result.confidence

        if len(result.text) > 5000:
            score += 10
        elif len(result.text) > 1000:
            score += 5

        # Method-specific bonuses
        if result.method == "pymupdf":
            score += 5
        elif result.method == "pdfplumber":
            score += 3

        return min(100.0, score)
