"""
OCR Text Extractor
PDF text extraction using OCR (Optical Character Recognition)

Used for scanned or image-only contracts where the PDF carries no text
layer. Pages are rasterised with PyMuPDF and read with Tesseract. Any
failure, including a missing Tesseract install, produces an unsuccessful
ExtractionResult instead of an exception.
"""

import io
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..config.settings import settings
from .extractor import ExtractionResult, PDFSource, read_source

try:
    import pytesseract
    from PIL import Image, ImageEnhance, ImageFilter
    import fitz  # PyMuPDF for PDF to image conversion
    TESSERACT_AVAILABLE = True
except ImportError:
    TESSERACT_AVAILABLE = False
    pytesseract = None
    Image = None
    fitz = None

MAX_OCR_BYTES = 50 * 1024 * 1024


@dataclass
class OCRConfig:
    """Configuration for OCR extraction."""
    language: Optional[str] = None
    dpi: Optional[int] = None
    psm: int = 6  # Page segmentation mode (6 = uniform block of text)
    oem: int = 3  # OCR engine mode (3 = default, based on available)
    confidence_threshold: float = 0.0  # Pages below this mean confidence are dropped
    preprocess_image: bool = True
    enhance_contrast: bool = True
    denoise: bool = True

    def __post_init__(self):
        if self.language is None:
            self.language = settings.ocr_language
        if self.dpi is None:
            self.dpi = settings.ocr_dpi

    @property
    def tesseract_args(self) -> str:
        return f'--psm {self.psm} --oem {self.oem} -l {self.language}'


class OCRExtractor:
    """
    OCR-based PDF text extractor using Tesseract.

    Falls back gracefully when OCR is unavailable.
    """

    def __init__(self, config: Optional[OCRConfig] = None):
        self.config = config or OCRConfig()
        self.logger = logging.getLogger(__name__)
        self._tesseract_checked = False

        if not TESSERACT_AVAILABLE:
            self.logger.warning(
                "OCR dependencies not available. Install: pip install pytesseract pillow pymupdf"
            )

    def is_available(self) -> bool:
        """True when the Python packages and the tesseract binary are present."""
        if not TESSERACT_AVAILABLE:
            return False
        if not self._tesseract_checked:
            try:
                version = pytesseract.get_tesseract_version()
                self.logger.debug(f"Tesseract version: {version}")
            except Exception as e:
                self.logger.warning(f"Tesseract not usable: {e}")
                return False
            self._tesseract_checked = True
        return True

    def _failure(self, error: str, start_time: float) -> ExtractionResult:
        return ExtractionResult(
            success=False,
            text="",
            method="ocr",
            confidence=0.0,
            processing_time=time.time() - start_time,
            page_count=0,
            error=error,
        )

    def extract_text(self, source: PDFSource) -> ExtractionResult:
        """
        Extract text from PDF using OCR.

        Args:
            source: Path to a PDF file or its raw bytes

        Returns:
            ExtractionResult with extracted text and metadata
        """
        start_time = time.time()

        if not self.is_available():
            return self._failure(
                "OCR dependencies not available. Install pytesseract, pillow, pymupdf and tesseract.",
                start_time,
            )

        try:
            data = read_source(source)
            if len(data) > MAX_OCR_BYTES:
                return self._failure(f"File too large for OCR: {len(data)} bytes", start_time)

            pages, page_count, confidence, metadata = self._extract_with_ocr(data)
            text = '\n\n'.join(pages).strip()

            return ExtractionResult(
                success=bool(text),
                text=text,
                method="ocr",
                confidence=confidence,
                processing_time=time.time() - start_time,
                page_count=page_count,
                error="" if text else "No text extracted from PDF",
                metadata=metadata,
                pages=pages,
            )

        except Exception as e:
            error_msg = f"OCR extraction failed: {str(e)}"
            self.logger.error(error_msg)
            return self._failure(error_msg, start_time)

    def _extract_with_ocr(self, data: bytes) -> Tuple[List[str], int, float, Dict[str, Any]]:
        """
        OCR every page of the document.

        Returns:
            Tuple of (page_texts, page_count, confidence, metadata)
        """
        pages: List[str] = []
        confidences: List[float] = []
        metadata = {
            'pages_processed': 0,
            'pages_failed': 0,
            'average_confidence': 0.0,
            'ocr_config': {
                'language': self.config.language,
                'dpi': self.config.dpi,
                'psm': self.config.psm,
                'oem': self.config.oem,
            },
        }

        with fitz.open(stream=data, filetype="pdf") as pdf_doc:
            page_count = len(pdf_doc)

            for page_num, page in enumerate(pdf_doc):
                try:
                    image = self._convert_page_to_image(page)
                    page_text, page_confidence = self._extract_text_from_image(image)
                except Exception as e:
                    self.logger.warning(f"Failed to process page {page_num + 1}: {e}")
                    metadata['pages_failed'] += 1
                    continue

                if page_text and page_confidence >= self.config.confidence_threshold:
                    pages.append(page_text)
                    confidences.append(page_confidence)
                    metadata['pages_processed'] += 1
                else:
                    metadata['pages_failed'] += 1
                    self.logger.warning(f"Page {page_num + 1} failed OCR: confidence {page_confidence:.1f}%")

        average_confidence = sum(confidences) / len(confidences) if confidences else 0.0
        metadata['average_confidence'] = average_confidence
        return pages, page_count, average_confidence, metadata

    def _convert_page_to_image(self, page) -> "Image.Image":
        """Render a PyMuPDF page at the configured DPI."""
        zoom = self.config.dpi / 72
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
        image = Image.open(io.BytesIO(pix.tobytes("ppm")))

        if self.config.preprocess_image:
            image = self._preprocess_image(image)
        return image

    def _preprocess_image(self, image: "Image.Image") -> "Image.Image":
        """Grayscale, contrast boost and median denoise."""
        if image.mode != 'L':
            image = image.convert('L')

        if self.config.enhance_contrast:
            image = ImageEnhance.Contrast(image).enhance(1.5)

        if self.config.denoise:
            image = image.filter(ImageFilter.MedianFilter(size=3))

        return image

    def _extract_text_from_image(self, image: "Image.Image") -> Tuple[str, float]:
        """
        Extract text from image using Tesseract.

        Returns:
            Tuple of (extracted_text, confidence_score)
        """
        args = self.config.tesseract_args
        extracted_text = pytesseract.image_to_string(image, config=args)

        try:
            data = pytesseract.image_to_data(image, config=args, output_type=pytesseract.Output.DICT)
            confidences = [float(conf) for conf in data['conf'] if float(conf) > 0]
            avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
        except Exception as e:
            self.logger.debug(f"Tesseract confidence data unavailable: {e}")
            avg_confidence = 50.0

        return extracted_text.strip(), avg_confidence

    def get_extraction_info(self) -> Dict[str, Any]:
        """Get information about the extraction capabilities."""
        return {
            'name': 'OCR Extractor',
            'available': TESSERACT_AVAILABLE,
            'dependencies': ['pytesseract', 'pillow', 'pymupdf'],
            'config': {
                'language': self.config.language,
                'dpi': self.config.dpi,
                'confidence_threshold': self.config.confidence_threshold,
            },
        }
