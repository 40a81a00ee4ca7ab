#!/usr/bin/env python3
"""
PDF Contract Orchestrator
Extract -> Preprocess -> Segment -> Classify -> (optional) AI cleanup / metadata

Runs the whole rule-based pipeline over one contract and turns every
failure into an unsuccessful ProcessedContract instead of an exception.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...config.settings import settings
from ...pdf.extractor import ExtractionResult, PDFSource, UnifiedPDFExtractor, read_source
from ...pdf.ocr_extractor import OCRExtractor
from ...utils.errors import ContractProcessingError
from ...utils.logging import log_error, log_timing
from ...utils.text_cleaner import ClauseBoundary, PreprocessedText, TextCleaner
from ..ai.azure_form_recognizer import AzureFormRecognizerClient
from ..ai.text_cleanup import TextCleanupService
from ..analysis.clause_classifier import ClauseClassifier, RelevantClauses
from ..analysis.metadata_extractor import ContractMetadata, MetadataExtractor
from ..analysis.revenue_insights import ContractAnalysis, RevenueInsights
from ..analysis.section_segmenter import ContractSection, SectionSegmenter

logger = logging.getLogger(__name__)

MSG_SUCCESS = "PDF contract processed successfully"
MSG_NO_TEXT = "Failed to extract text from PDF"
MSG_ERROR = "Error processing PDF contract"


@dataclass
class ProcessedContract:
    """Structured result of processing one contract."""
    success: bool
    message: str
    full_text: str = ""
    sections: List[ContractSection] = field(default_factory=list)
    relevant_clauses: RelevantClauses = field(default_factory=RelevantClauses)
    metadata: Optional[ContractMetadata] = None
    analysis: Optional[ContractAnalysis] = None
    clause_boundaries: List[ClauseBoundary] = field(default_factory=list)
    extraction_method: str = ""
    source: Optional[str] = None
    error: Optional[str] = None
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "source": self.source,
            "error": self.error,
            "full_text": self.full_text,
            "sections": [section.to_dict() for section in self.sections],
            "relevant_clauses": self.relevant_clauses.to_dict(),
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "clause_boundaries": [
                {"start": b.start, "end": b.end, "type": b.type, "confidence": b.confidence, "text": b.text}
                for b in self.clause_boundaries
            ],
            "extraction_method": self.extraction_method,
            "processing_time": self.processing_time,
        }


class PDFOrchestrator:
    """Coordinates extraction, preprocessing and analysis of a contract."""

    def __init__(
        self,
        extractor: Optional[UnifiedPDFExtractor] = None,
        ocr_extractor: Optional[OCRExtractor] = None,
        cleanup_service: Optional[TextCleanupService] = None,
        azure_client: Optional[AzureFormRecognizerClient] = None,
    ):
        self.extractor = extractor or UnifiedPDFExtractor()
        self.ocr_extractor = ocr_extractor or OCRExtractor()
        self._cleanup_service = cleanup_service
        self._azure_client = azure_client

        self.text_cleaner = TextCleaner(ocr_cleaner=self._ai_clean)
        self.classifier = ClauseClassifier()
        self.segmenter = SectionSegmenter(classifier=self.classifier)
        self.metadata_extractor = MetadataExtractor()
        self.insights = RevenueInsights(segmenter=self.segmenter)

    @property
    def cleanup_service(self) -> TextCleanupService:
        if self._cleanup_service is None:
            self._cleanup_service = TextCleanupService()
        return self._cleanup_service

    @property
    def azure_client(self) -> AzureFormRecognizerClient:
        if self._azure_client is None:
            self._azure_client = AzureFormRecognizerClient()
        return self._azure_client

    def _ai_clean(self, text: str) -> str:
        return self.cleanup_service.clean_ocr_text(text)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract_text(self, source: PDFSource) -> ExtractionResult:
        """Library extraction, falling back to OCR when the text layer is thin."""
        result = self.extractor.extract_text(source)

        too_short = len(result.text.strip()) < settings.min_text_chars
        if (not result.success or too_short) and settings.enable_ocr_fallback:
            logger.info(f"Library extraction gave {len(result.text.strip())} chars, trying OCR")
            ocr_result = self.ocr_extractor.extract_text(source)
            if ocr_result.success and len(ocr_result.text.strip()) > len(result.text.strip()):
                return ocr_result
            if ocr_result.error:
                logger.warning(f"OCR fallback unavailable: {ocr_result.error}")

        return result

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def preprocess_pdf(self, source: PDFSource, ai_cleanup: bool = False) -> PreprocessedText:
        """
        Extract and preprocess a PDF.

        Raises:
            ContractProcessingError: nothing could be extracted or preprocessing failed
        """
        extraction = self.extract_text(source)
        if not extraction.text.strip():
            raise ContractProcessingError(MSG_NO_TEXT)
        return self.text_cleaner.preprocess(extraction.text, ai_cleanup=ai_cleanup)

    def process_contract(
        self,
        source: PDFSource,
        use_ai: bool = False,
        use_azure: bool = False,
        hierarchical: bool = False,
    ) -> ProcessedContract:
        """
        Full contract pipeline for a PDF path or bytes.

        Args:
            use_ai: run LLM OCR cleanup on the extracted text
            use_azure: fill metadata gaps with Azure Form Recognizer
            hierarchical: nest sections instead of a flat ARTICLE/Section list
        """
        start_time = time.time()
        source_name = None if isinstance(source, (bytes, bytearray)) else str(source)

        try:
            data = read_source(source)
            extraction = self.extract_text(data)

            if not extraction.text.strip():
                logger.warning(f"No text extracted from {source_name or 'upload'}: {extraction.error}")
                return ProcessedContract(
                    success=False,
                    message=MSG_NO_TEXT,
                    source=source_name,
                    error=extraction.error or None,
                    extraction_method=extraction.method,
                )

            contract = self._analyze(extraction.text, extraction.page_count, use_ai, hierarchical)
            contract.extraction_method = extraction.method
            contract.source = source_name

            if use_azure:
                external = self.azure_client.analyze(data)
                contract.metadata = self.metadata_extractor.merge(contract.metadata, external, "azure")

            contract.processing_time = time.time() - start_time
            logger.info(
                f"Processed contract {source_name or 'upload'}",
                extra=log_timing("process_contract", contract.processing_time * 1000,
                                 sections=len(contract.sections), method=extraction.method),
            )
            return contract

        except Exception as e:
            logger.error(MSG_ERROR, extra=log_error(e, source=source_name))
            return ProcessedContract(
                success=False,
                message=MSG_ERROR,
                source=source_name,
                error=str(e),
                processing_time=time.time() - start_time,
            )

    def process_text(self, text: str, use_ai: bool = False, hierarchical: bool = False) -> ProcessedContract:
        """Same pipeline for contract text that is already extracted."""
        start_time = time.time()

        if not text or not text.strip():
            return ProcessedContract(success=False, message=MSG_NO_TEXT, error="Empty text")

        try:
            contract = self._analyze(text, 0, use_ai, hierarchical)
            contract.extraction_method = "text"
            contract.processing_time = time.time() - start_time
            return contract
        except Exception as e:
            logger.error(MSG_ERROR, extra=log_error(e))
            return ProcessedContract(success=False, message=MSG_ERROR, error=str(e))

    def _analyze(self, raw_text: str, page_count: int, use_ai: bool, hierarchical: bool) -> ProcessedContract:
        preprocessed = self.text_cleaner.preprocess(raw_text, ai_cleanup=use_ai)
        full_text = preprocessed.normalized_text

        if hierarchical:
            sections = self.segmenter.extract_sections_hierarchical(full_text)
        else:
            sections = self.segmenter.extract_sections(full_text)

        return ProcessedContract(
            success=True,
            message=MSG_SUCCESS,
            full_text=full_text,
            sections=sections,
            relevant_clauses=self.classifier.identify_relevant_clauses(full_text),
            metadata=self.metadata_extractor.extract_metadata(full_text, page_count),
            analysis=self.insights.analyze_contract_content(full_text),
            clause_boundaries=preprocessed.clause_boundaries,
        )

    def process_directory(self, pdf_directory: str, **kwargs) -> List[ProcessedContract]:
        """Process every *.pdf in a directory, in name order."""
        pdf_dir = Path(pdf_directory)

        if not pdf_dir.is_dir():
            logger.error(f"PDF directory does not exist: {pdf_dir}")
            return []

        pdf_files = sorted(pdf_dir.glob("*.pdf"))
        logger.info(f"Found {len(pdf_files)} PDF files to process")

        results = []
        for i, pdf_path in enumerate(pdf_files, 1):
            logger.info(f"Processing PDF {i}/{len(pdf_files)}: {pdf_path.name}")
            result = self.process_contract(str(pdf_path), **kwargs)
            if not result.success:
                logger.warning(f"{pdf_path.name}: {result.message}")
            results.append(result)

        return results
