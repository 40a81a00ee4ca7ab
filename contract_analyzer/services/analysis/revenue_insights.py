"""
Revenue recognition insights (ASC 606 / IFRS 15)

Regex cues that describe how and when a contract recognises revenue:
recognition method, payment terms, performance obligations and the
compliance work the contract wording implies.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ...utils.pattern_manager import SECTION_TYPE_KEYWORDS, PatternManager, get_pattern_manager
from .metadata_extractor import MetadataExtractor
from .section_segmenter import ContractSection, SectionSegmenter

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "not specified"

TRIGGER_TYPES = ("milestone", "usage", "time", "performance", "hybrid", "contingent", "cumulative")
TRIGGER_TIMINGS = ("point_in_time", "over_time")


@dataclass
class ContractSummary:
    total_sections: int
    revenue_clauses: int
    performance_clauses: int
    payment_clauses: int
    risk_level: str
    key_terms: List[str] = field(default_factory=list)


@dataclass
class RevenueSummary:
    revenue_recognition_method: str
    payment_terms: str
    performance_obligations: List[str] = field(default_factory=list)
    compliance_impacts: List[str] = field(default_factory=list)


@dataclass
class ContractAnalysis:
    """Contract-level summary plus revenue recognition summary."""
    summary: ContractSummary
    revenue_summary: RevenueSummary

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RevenueInsights:
    """Contract-level revenue recognition heuristics."""

    def __init__(
        self,
        segmenter: Optional[SectionSegmenter] = None,
        patterns: Optional[PatternManager] = None,
    ):
        self.patterns = patterns or get_pattern_manager()
        self.segmenter = segmenter or SectionSegmenter(patterns=self.patterns)
        self.metadata = MetadataExtractor(self.patterns)

    def identify_revenue_recognition_method(self, content: str) -> str:
        for method, pattern in self.patterns.recognition_methods:
            if pattern.search(content or ""):
                return method
        return NOT_SPECIFIED

    def identify_payment_terms(self, content: str) -> str:
        match = self.patterns.payment_terms.search(content or "")
        return match.group(0) if match else NOT_SPECIFIED

    def identify_performance_obligations(self, content: str) -> List[str]:
        """Unique obligation phrases, in pattern order."""
        seen: Dict[str, None] = {}
        for pattern in self.patterns.performance_obligations:
            for match in pattern.finditer(content or ""):
                phrase = match.group(0).strip()
                if phrase:
                    seen.setdefault(phrase, None)
        return list(seen)

    def analyze_compliance_impact(self, content: str) -> List[str]:
        return [
            impact for pattern, impact in self.patterns.compliance_patterns
            if pattern.search(content or "")
        ]

    def _count_sections(self, sections: List[ContractSection], category: str) -> int:
        keywords = SECTION_TYPE_KEYWORDS[category]
        count = 0
        for section in sections:
            title = section.title.lower()
            content = section.content.lower()
            if any(k in title or k in content for k in keywords):
                count += 1
        return count

    def analyze_contract_content(self, content: str) -> ContractAnalysis:
        """
        Summarize a whole contract.

        Section counts use the flat ARTICLE/Section split; a section counts
        towards every category whose keywords it mentions.
        """
        sections = self.segmenter.extract_sections(content)

        summary = ContractSummary(
            total_sections=len(sections),
            revenue_clauses=self._count_sections(sections, "revenue"),
            performance_clauses=self._count_sections(sections, "performance"),
            payment_clauses=self._count_sections(sections, "payment"),
            risk_level=self.segmenter.determine_risk_level(content),
            key_terms=self.metadata.extract_keywords(content),
        )
        revenue_summary = RevenueSummary(
            revenue_recognition_method=self.identify_revenue_recognition_method(content),
            payment_terms=self.identify_payment_terms(content),
            performance_obligations=self.identify_performance_obligations(content),
            compliance_impacts=self.analyze_compliance_impact(content),
        )

        logger.debug(
            f"Contract analysis: {summary.total_sections} sections, "
            f"method={revenue_summary.revenue_recognition_method}"
        )
        return ContractAnalysis(summary=summary, revenue_summary=revenue_summary)


def validate_revenue_triggers(triggers: List[Dict[str, Any]]) -> bool:
    """
    Check LLM-produced revenue triggers for a usable shape.

    Each trigger needs a known type, a point_in_time/over_time timing, at
    least one condition and a measurement. An empty list is valid.
    """
    for trigger in triggers:
        if not isinstance(trigger, dict):
            return False
        recognition = trigger.get("recognition") or {}
        if trigger.get("type") not in TRIGGER_TYPES:
            return False
        if recognition.get("timing") not in TRIGGER_TIMINGS:
            return False
        if not trigger.get("conditions"):
            return False
        if not trigger.get("measurement"):
            return False
    return True


def assess_variable_consideration(clauses: List[Dict[str, Any]], contract_value: float = 0.0) -> Dict[str, Any]:
    """
    Summarize variable consideration across LLM-analyzed revenue clauses.

    Only clauses of type "variable" count. A constraint is needed when any
    of their triggers lists recognition constraints. The estimated impact is
    the sum of the clauses' "estimated_value" fields, capped at the contract
    value when one is given.
    """
    variable = [c for c in clauses if isinstance(c, dict) and c.get("type") == "variable"]

    constrained = []
    for clause in variable:
        triggers = clause.get("triggers") or []
        if any((t.get("recognition") or {}).get("constraints") for t in triggers if isinstance(t, dict)):
            constrained.append(clause)

    impact = sum(
        float(c["estimated_value"])
        for c in variable
        if isinstance(c.get("estimated_value"), (int, float))
    )
    if contract_value > 0:
        impact = min(impact, contract_value)

    recommendations = [
        f"Constrain the estimate for clause {c.get('id') or (c.get('clause') or '')[:60]!r} "
        f"until the uncertainty is resolved (IFRS 15.56 / ASC 606-10-32-11)"
        for c in constrained
    ]

    return {
        "has_constraint": bool(constrained),
        "estimated_impact": impact,
        "recommendations": recommendations,
    }
