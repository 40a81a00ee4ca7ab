"""
Text Cleaner for Contract Documents
Normalization, paragraph reconstruction and clause boundary detection

Text coming out of PDF parsers and OCR is full of hard line breaks, curly
quotes, stray control characters and page-break artifacts. This module
turns it into stable paragraphs and tags the places where a new clause
starts (headings and legal connectives such as "notwithstanding").

Key behaviours:
- normalize_text is idempotent, so cleaned text can be cleaned again safely
- Broken lines are rejoined unless the next line looks like a new sentence,
  a list item or a Section/Article heading
- Blank lines always end a paragraph
"""

import logging
import re
import unicodedata
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import ContractProcessingError
from .pattern_manager import PatternManager, get_pattern_manager

logger = logging.getLogger(__name__)

_NEWLINES = re.compile(r'\r\n|\r|\f|\v|\u2028|\u2029')
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0e-\x1f\x7f-\x9f]')
_HORIZONTAL_WS = re.compile(r'[^\S\n]+')
_EXCESS_BLANK_LINES = re.compile(r'\n{3,}')

_QUOTE_FIXES = {
    '\u2018': "'", '\u2019': "'", '\u201a': "'", '\u201b': "'",
    '\u201c': '"', '\u201d': '"', '\u201e': '"', '\u201f': '"',
}


@dataclass
class ClauseBoundary:
    """A clause marker located in the text."""
    start: int
    end: int
    type: str
    confidence: float
    text: str = ""


@dataclass
class PreprocessedText:
    """Normalized text, its paragraphs and the detected clause boundaries."""
    normalized_text: str
    paragraphs: List[str] = field(default_factory=list)
    clause_boundaries: List[ClauseBoundary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalize_text(text: str) -> str:
    """
    Normalize raw extracted text.

    Unicode NFKC, unified line endings (form feeds become line breaks),
    control characters removed, curly quotes straightened, horizontal
    whitespace collapsed, lines trimmed and runs of blank lines reduced to
    one. Applying it twice gives the same result as applying it once.
    """
    if not text:
        return ""

    # Strip control characters before composing, so removal cannot leave
    # a composable pair behind for a second pass
    text = _NEWLINES.sub('\n', text)
    text = _CONTROL_CHARS.sub('', text)
    text = unicodedata.normalize('NFKC', text)

    for curly, straight in _QUOTE_FIXES.items():
        text = text.replace(curly, straight)

    text = _HORIZONTAL_WS.sub(' ', text)
    text = '\n'.join(line.strip() for line in text.split('\n'))
    text = _EXCESS_BLANK_LINES.sub('\n\n', text)

    return text.strip()


def join_broken_lines(lines: List[str], patterns: Optional[PatternManager] = None) -> List[str]:
    """
    Rejoin lines that a PDF hard-wrapped in the middle of a sentence.

    A line continues the current paragraph only when it starts in lower case
    (no capital, digit or list marker), is not a Section/Article heading and
    the paragraph so far does not end with '.', ':' or ';'.
    """
    patterns = patterns or get_pattern_manager()
    paragraphs: List[str] = []
    current = ''

    for line in lines:
        trimmed = line.strip()

        if not trimmed:
            if current:
                paragraphs.append(current)
            current = ''
            continue

        is_continuation = (
            not patterns.capital_start.match(trimmed)
            and not patterns.list_marker_start.match(trimmed)
            and not patterns.continuation_header.match(trimmed)
            and len(current) > 0
            and not current.endswith(('.', ':', ';'))
        )

        if is_continuation:
            current += ' ' + trimmed
        else:
            if current:
                paragraphs.append(current)
            current = trimmed

    if current:
        paragraphs.append(current)

    return paragraphs


def detect_clause_boundaries(text: str, patterns: Optional[PatternManager] = None) -> List[ClauseBoundary]:
    """Locate clause markers in text, sorted by start offset."""
    patterns = patterns or get_pattern_manager()
    boundaries: List[ClauseBoundary] = []

    if not text:
        return boundaries

    for marker in patterns.clause_markers:
        for match in marker.pattern.finditer(text):
            boundaries.append(ClauseBoundary(
                start=match.start(),
                end=match.end(),
                type=marker.type,
                confidence=marker.confidence,
                text=match.group(0),
            ))

    return sorted(boundaries, key=lambda b: b.start)


class TextCleaner:
    """
    Preprocessor for contract text.

    Single entry point (`preprocess`) that runs normalization, paragraph
    reconstruction, optional AI OCR cleanup and clause boundary detection.
    """

    def __init__(self, ocr_cleaner: Optional[Callable[[str], str]] = None):
        """
        Args:
            ocr_cleaner: Optional callable that repairs OCR errors, e.g. an
                LLM-backed cleanup. Must return the input on failure.
        """
        self.pattern_manager = get_pattern_manager()
        self.ocr_cleaner = ocr_cleaner

    def normalize_text(self, text: str) -> str:
        return normalize_text(text)

    def join_broken_lines(self, lines: List[str]) -> List[str]:
        return join_broken_lines(lines, self.pattern_manager)

    def detect_clause_boundaries(self, text: str) -> List[ClauseBoundary]:
        return detect_clause_boundaries(text, self.pattern_manager)

    def preprocess(self, text: str, ai_cleanup: bool = False) -> PreprocessedText:
        """
        Normalize, rebuild paragraphs, optionally AI-clean, detect boundaries.

        Raises:
            ContractProcessingError: if any step fails
        """
        try:
            normalized = self.normalize_text(text)
            paragraphs = self.join_broken_lines(normalized.split('\n'))
            joined = '\n'.join(paragraphs)

            if ai_cleanup and self.ocr_cleaner is not None:
                joined = self.ocr_cleaner(joined)

            boundaries = self.detect_clause_boundaries(joined)

            return PreprocessedText(
                normalized_text=joined,
                paragraphs=[p for p in joined.split('\n') if p.strip()],
                clause_boundaries=boundaries,
            )
        except Exception as e:
            logger.error(f"Error in text preprocessing: {e}")
            raise ContractProcessingError("Failed to preprocess text") from e
