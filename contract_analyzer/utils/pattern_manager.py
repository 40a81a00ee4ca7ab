"""
Pattern Manager for Contract Processing
Centralized regex patterns and keyword sets for commercial contracts

This module provides a single home for every regex and keyword list the
analysis pipeline relies on, so the preprocessor, segmenter, classifier and
metadata extractor agree on what a heading, a clause marker or a revenue
keyword looks like.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Pattern, Tuple


@dataclass
class ClauseMarker:
    """A fixed clause-boundary marker with a static confidence."""
    pattern: Pattern[str]
    type: str
    confidence: float


@dataclass
class HeadingPattern:
    """A section heading pattern and its nesting level."""
    kind: str
    pattern: Pattern[str]
    level: int


# Clause categories, in declaration order. Ties resolve to the earlier one.
CLAUSE_CATEGORIES: Tuple[str, ...] = ("revenue", "performance", "payment", "termination")

CLAUSE_KEYWORDS: Dict[str, List[str]] = {
    "revenue": ["payment", "fee", "compensation", "price", "revenue", "consideration"],
    "performance": ["performance", "obligation", "delivery", "service", "milestone"],
    "payment": ["payment", "invoice", "billing", "fee", "price"],
    "termination": ["termination", "cancellation", "expiration", "end"],
}

# Used to type whole sections by title/content membership
SECTION_TYPE_KEYWORDS: Dict[str, List[str]] = {
    "revenue": ["revenue", "payment", "compensation", "fee", "pricing"],
    "performance": ["performance", "service", "delivery", "obligation"],
    "payment": ["payment", "invoice", "billing", "fee"],
    "termination": ["termination", "cancellation", "end", "expire"],
}

# Used to find the dominant category of a section by whole-word counts
SECTION_COUNT_KEYWORDS: Dict[str, List[str]] = {
    "revenue": ["revenue", "payment", "fee", "price", "compensation"],
    "performance": ["performance", "delivery", "service", "obligation"],
    "payment": ["payment", "invoice", "billing"],
    "termination": ["termination", "cancellation", "expiration"],
}

RISK_KEYWORDS: Dict[str, List[str]] = {
    "high": ["penalty", "termination", "liability", "breach", "damages", "legal action"],
    "medium": ["deadline", "requirement", "obligation", "compliance", "restriction"],
    "low": ["notice", "amendment", "communication", "cooperation"],
}

LEGAL_TERMS = (
    "agreement", "contract", "party", "clause", "term", "condition", "obligation",
    "right", "liability", "indemnity", "warranty", "termination", "breach", "dispute",
    "governing law", "jurisdiction", "confidential", "intellectual property", "shall",
    "must", "will not", "required", "exclusive", "payment",
)

SUMMARY_KEYWORDS = (
    "revenue", "payment", "performance", "termination", "obligation", "deadline",
    "penalty", "compliance", "requirement", "liability",
)

MONTHS = (
    "January|February|March|April|May|June|July|August|"
    "September|October|November|December"
)


class PatternManager:
    """
    Centralized pattern manager for commercial contracts.

    Provides consistent compiled regex patterns for:
    - Clause boundary markers (provided that, notwithstanding, ...)
    - Section headings (ARTICLE / Section / numbered / titled)
    - Contract metadata (dates, parties, value)
    - Revenue recognition cues (methods, payment terms, obligations)
    - Cross references and ASC 606 / IFRS 15 compliance phrases
    """

    def __init__(self):
        """Initialize pattern manager with compiled patterns."""
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        """Compile all regex patterns for performance."""

        self.clause_markers: List[ClauseMarker] = [
            ClauseMarker(re.compile(r'provided[,\s]+that', re.IGNORECASE), 'condition', 0.9),
            ClauseMarker(re.compile(r'notwithstanding', re.IGNORECASE), 'exception', 0.9),
            ClauseMarker(re.compile(r'subject to', re.IGNORECASE), 'condition', 0.8),
            ClauseMarker(re.compile(r'for the avoidance of doubt', re.IGNORECASE), 'clarification', 0.9),
            ClauseMarker(re.compile(r'whereas', re.IGNORECASE), 'recital', 0.9),
            ClauseMarker(re.compile(r'^Section \d+', re.IGNORECASE | re.MULTILINE), 'section', 1.0),
            ClauseMarker(re.compile(r'^Article \d+', re.IGNORECASE | re.MULTILINE), 'article', 1.0),
        ]

        # Flat section split: ARTICLE n / Section n at line start
        self.section_heading = re.compile(
            r'^[ \t]*(?:ARTICLE|Section)[ \t]+(\d+(?:\.\d+)*)[ \t]*[.:\-]?[ \t]*([^\n]*)$',
            re.IGNORECASE | re.MULTILINE
        )

        # Hierarchy patterns, tried in order; the first match wins
        self.heading_patterns: List[HeadingPattern] = [
            HeadingPattern('article', re.compile(r'^\s*ARTICLE\s+(\d+|[IVXLC]+)\s*[.:\-]?\s*(.*)$', re.IGNORECASE), 0),
            HeadingPattern('section', re.compile(r'^\s*Section\s+(\d+(?:\.\d+)*)\s*[.:\-]?\s*(.*)$', re.IGNORECASE), 1),
            # "1. Scope", "2) Fees", "1.1 Fees", "3.2.1. Credits"
            HeadingPattern('numbered', re.compile(r'^\s*(\d+\.\d+(?:\.\d+)*|\d+(?=[.:)]))[.:)]?\s+(.*)$'), 2),
            HeadingPattern('titled', re.compile(r'^\s*([A-Z][A-Za-z ]{2,60}):\s*(.*)$'), 3),
        ]

        self.continuation_header = re.compile(r'^(Section|Article|SECTION)', re.IGNORECASE)
        self.list_marker_start = re.compile(r'^[\d.()]+')
        self.capital_start = re.compile(r'^[A-Z]')

        self.sentence_split = re.compile(r'[.!?]+')
        self.modal_verbs = re.compile(r'\b(shall|must|required|essential)\b', re.IGNORECASE)
        self.word = re.compile(r'\b\w+\b')

        self.legal_terms = re.compile(
            r'\b(' + '|'.join(re.escape(t) for t in LEGAL_TERMS) + r')\b',
            re.IGNORECASE
        )
        self.summary_keywords = re.compile(
            r'\b(?:' + '|'.join(SUMMARY_KEYWORDS) + r')\b',
            re.IGNORECASE
        )

        self.date_patterns = [
            re.compile(
                r'(?:dated|effective date|as of)\s+(\d{1,2}(?:st|nd|rd|th)?\s+(?:' + MONTHS + r'),?\s+\d{4})',
                re.IGNORECASE
            ),
            re.compile(r'(?:dated|effective date|as of)\s+((?:' + MONTHS + r')\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4})', re.IGNORECASE),
            re.compile(r'(?:dated|effective date|as of)\s+(\d{2}/\d{2}/\d{4})', re.IGNORECASE),
            re.compile(r'(?:dated|effective date|as of)\s+(\d{4}-\d{2}-\d{2})', re.IGNORECASE),
        ]

        self.party_patterns = [
            re.compile(r'between\s+([^,\n]+?(?:LLC|Inc\.|Corporation|Ltd\.|Limited|Company))', re.IGNORECASE),
            re.compile(r'(?:THIS AGREEMENT|AGREEMENT) is made .*? between ([^,]+?) and ([^,.\n]+)', re.IGNORECASE),
            re.compile(r'PARTIES:\s*\n\s*1\.\s*([^\n]+)\n\s*2\.\s*([^\n]+)', re.IGNORECASE),
        ]

        self.value_patterns = [
            re.compile(r'total\s+value\s+of\s+(?:USD|US\$|\$)\s*([\d,]+(?:\.\d{2})?)', re.IGNORECASE),
            re.compile(r'contract\s+value\s*(?:of)?\s*(?:USD|US\$|\$)\s*([\d,]+(?:\.\d{2})?)', re.IGNORECASE),
            re.compile(r'consideration\s+of\s+(?:USD|US\$|\$)\s*([\d,]+(?:\.\d{2})?)', re.IGNORECASE),
        ]

        self.cross_reference_patterns = [
            re.compile(r'pursuant to (?:Section|Article|Clause) ([^,.;]+)', re.IGNORECASE),
            re.compile(r'reference to (?:Section|Article|Clause) ([^,.;]+)', re.IGNORECASE),
            re.compile(r'as defined in (?:Section|Article|Clause) ([^,.;]+)', re.IGNORECASE),
        ]

        # Checked in order; the first method with a hit wins
        self.recognition_methods: List[Tuple[str, Pattern[str]]] = [
            ('point in time', re.compile(r'point[- ]in[- ]time|upon delivery|upon completion', re.IGNORECASE)),
            ('over time', re.compile(r'over[- ]time|percentage[- ]of[- ]completion|milestone', re.IGNORECASE)),
            ('usage-based', re.compile(r'usage[- ]based|consumption|per[- ]use', re.IGNORECASE)),
        ]

        self.payment_terms = re.compile(r'payment.{0,50}(?:due|within|net).{0,30}days', re.IGNORECASE)

        self.performance_obligations = [
            re.compile(r'shall (?:provide|deliver|perform|complete|maintain|support)', re.IGNORECASE),
            re.compile(r'responsible for (?:providing|delivering|performing|completing|maintaining|supporting)', re.IGNORECASE),
            re.compile(r'obligations?.*(?:include|consist|comprise)', re.IGNORECASE),
        ]

        self.compliance_patterns: List[Tuple[Pattern[str], str]] = [
            (re.compile(r'performance obligation', re.IGNORECASE),
             'Requires identification of distinct performance obligations'),
            (re.compile(r'variable consideration', re.IGNORECASE),
             'Requires constraint assessment for variable consideration'),
            (re.compile(r'significant financing', re.IGNORECASE),
             'Time value of money considerations required'),
            (re.compile(r'stand-alone selling price', re.IGNORECASE),
             'Allocation of transaction price analysis needed'),
        ]

    def count_whole_word(self, text: str, keyword: str) -> int:
        """Count case-insensitive whole-word occurrences of keyword."""
        return len(re.findall(r'\b' + re.escape(keyword) + r'\b', text, re.IGNORECASE))


_default_manager: PatternManager = None


def get_pattern_manager() -> PatternManager:
    """Shared PatternManager instance (patterns are compiled once)."""
    global _default_manager
    if _default_manager is None:
        _default_manager = PatternManager()
    return _default_manager
