"""
Clause Classifier
Keyword-overlap classification of contract sentences and sections

Every sentence is scored against four fixed keyword sets (revenue,
performance, payment, termination). The scoring is deliberately simple and
fully deterministic: the same text always produces the same type and
confidence pairs.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...utils.pattern_manager import (
    CLAUSE_CATEGORIES,
    CLAUSE_KEYWORDS,
    SECTION_COUNT_KEYWORDS,
    SECTION_TYPE_KEYWORDS,
    PatternManager,
    get_pattern_manager,
)

logger = logging.getLogger(__name__)

OTHER = "other"


@dataclass
class Clause:
    """A sentence that matched a keyword set."""
    text: str
    confidence: float


@dataclass
class ClassifiedClause:
    """A sentence with its winning category."""
    text: str
    type: str
    confidence: float
    matched_keywords: List[str] = field(default_factory=list)


@dataclass
class RelevantClauses:
    """Clauses bucketed by category."""
    revenue: List[Clause] = field(default_factory=list)
    performance: List[Clause] = field(default_factory=list)
    payment: List[Clause] = field(default_factory=list)
    termination: List[Clause] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return asdict(self)

    def counts(self) -> Dict[str, int]:
        return {category: len(getattr(self, category)) for category in CLAUSE_CATEGORIES}


class ClauseClassifier:
    """Assigns contract sentences and sections to revenue-related buckets."""

    def __init__(
        self,
        keyword_sets: Optional[Dict[str, List[str]]] = None,
        patterns: Optional[PatternManager] = None,
    ):
        self.keyword_sets = keyword_sets or CLAUSE_KEYWORDS
        self.patterns = patterns or get_pattern_manager()

    def split_sentences(self, text: str) -> List[str]:
        """Split on runs of sentence-ending punctuation, dropping empties."""
        if not text:
            return []
        return [s.strip() for s in self.patterns.sentence_split.split(text) if s.strip()]

    def _matched_keywords(self, sentence: str, keywords: List[str]) -> List[str]:
        # Substring containment, so "end" also hits "amendment"
        lowered = sentence.lower()
        return [keyword for keyword in keywords if keyword.lower() in lowered]

    def extract_clauses_with_keywords(self, text: str, keywords: List[str]) -> List[Clause]:
        """
        Sentences containing at least one keyword.

        Confidence is the share of the keyword list found in the sentence.
        """
        clauses: List[Clause] = []
        if not keywords:
            return clauses

        for sentence in self.split_sentences(text):
            matched = self._matched_keywords(sentence, keywords)
            if matched:
                clauses.append(Clause(
                    text=sentence,
                    confidence=len(matched) / len(keywords),
                ))

        return clauses

    def identify_revenue_clauses(self, text: str) -> List[Clause]:
        return self.extract_clauses_with_keywords(text, self.keyword_sets["revenue"])

    def identify_performance_clauses(self, text: str) -> List[Clause]:
        return self.extract_clauses_with_keywords(text, self.keyword_sets["performance"])

    def identify_payment_clauses(self, text: str) -> List[Clause]:
        return self.extract_clauses_with_keywords(text, self.keyword_sets["payment"])

    def identify_termination_clauses(self, text: str) -> List[Clause]:
        return self.extract_clauses_with_keywords(text, self.keyword_sets["termination"])

    def identify_relevant_clauses(self, text: str) -> RelevantClauses:
        """Bucket every matching sentence into each category it touches."""
        return RelevantClauses(
            revenue=self.identify_revenue_clauses(text),
            performance=self.identify_performance_clauses(text),
            payment=self.identify_payment_clauses(text),
            termination=self.identify_termination_clauses(text),
        )

    def classify_sentence(self, sentence: str) -> Tuple[str, float]:
        """
        Single best category for a sentence.

        The category with most keyword hits wins; ties go to the category
        declared first. No hits gives ("other", 0.0).
        """
        best_type = OTHER
        best_hits = 0
        best_size = 1

        for category in CLAUSE_CATEGORIES:
            keywords = self.keyword_sets[category]
            hits = len(self._matched_keywords(sentence, keywords))
            if hits > best_hits:
                best_type, best_hits, best_size = category, hits, len(keywords)

        if best_hits == 0:
            return OTHER, 0.0
        return best_type, best_hits / best_size

    def classify_text(self, text: str) -> List[ClassifiedClause]:
        """Classify every sentence, keeping those with a category."""
        results: List[ClassifiedClause] = []
        for sentence in self.split_sentences(text):
            clause_type, confidence = self.classify_sentence(sentence)
            if clause_type == OTHER:
                continue
            results.append(ClassifiedClause(
                text=sentence,
                type=clause_type,
                confidence=confidence,
                matched_keywords=self._matched_keywords(sentence, self.keyword_sets[clause_type]),
            ))
        return results

    def determine_type(self, title: str, content: str) -> str:
        """First category whose keywords appear in the section title or body."""
        haystack_title = (title or "").lower()
        haystack_content = (content or "").lower()

        for category in CLAUSE_CATEGORIES:
            for keyword in SECTION_TYPE_KEYWORDS[category]:
                if keyword in haystack_title or keyword in haystack_content:
                    return category
        return OTHER

    def determine_section_type(self, content: str) -> str:
        """Category with the highest whole-word keyword count; ties go to the later category."""
        counts = {
            category: sum(
                self.patterns.count_whole_word(content or "", keyword)
                for keyword in SECTION_COUNT_KEYWORDS[category]
            )
            for category in CLAUSE_CATEGORIES
        }

        best = max(reversed(CLAUSE_CATEGORIES), key=lambda c: counts[c])
        return best if counts[best] > 0 else OTHER
