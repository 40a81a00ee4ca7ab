"""
Contract metadata extraction: effective date, parties, total value and
cross references, all from regex cues in the contract text.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ...utils.pattern_manager import PatternManager, get_pattern_manager

logger = logging.getLogger(__name__)


@dataclass
class ContractMetadata:
    """Metadata recovered from a contract."""
    page_count: int = 0
    contract_date: Optional[str] = None
    parties: List[str] = field(default_factory=list)
    total_value: Optional[float] = None
    cross_references: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    source: str = "regex"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class MetadataExtractor:
    """Regex-based metadata extraction."""

    def __init__(self, patterns: Optional[PatternManager] = None):
        self.patterns = patterns or get_pattern_manager()

    def extract_contract_date(self, text: str) -> Optional[str]:
        for pattern in self.patterns.date_patterns:
            match = pattern.search(text or "")
            if match and match.group(1):
                return match.group(1)
        return None

    def extract_parties(self, text: str) -> List[str]:
        """Party names from 'between X and Y' style recitals and PARTIES blocks."""
        parties: List[str] = []
        for pattern in self.patterns.party_patterns:
            for match in pattern.finditer(text or ""):
                for group in match.groups():
                    if group:
                        name = group.strip()
                        if name and name not in parties:
                            parties.append(name)
        return parties

    def extract_total_value(self, text: str) -> Optional[float]:
        for pattern in self.patterns.value_patterns:
            match = pattern.search(text or "")
            if match and match.group(1):
                try:
                    return float(match.group(1).replace(',', ''))
                except ValueError:
                    logger.debug(f"Unparseable contract value: {match.group(1)}")
        return None

    def find_cross_references(self, text: str) -> List[str]:
        references: List[str] = []
        for pattern in self.patterns.cross_reference_patterns:
            for match in pattern.finditer(text or ""):
                references.append(match.group(1).strip())
        return references

    def extract_keywords(self, text: str) -> List[str]:
        """Unique lowercase revenue/risk keywords, in order of first appearance."""
        seen: Dict[str, None] = {}
        for match in self.patterns.summary_keywords.finditer(text or ""):
            seen.setdefault(match.group(0).lower(), None)
        return list(seen)

    def extract_metadata(self, text: str, page_count: int = 0) -> ContractMetadata:
        return ContractMetadata(
            page_count=page_count,
            contract_date=self.extract_contract_date(text),
            parties=self.extract_parties(text),
            total_value=self.extract_total_value(text),
            cross_references=self.find_cross_references(text),
            keywords=self.extract_keywords(text),
        )

    def merge(self, metadata: ContractMetadata, external: Dict[str, Any], source: str) -> ContractMetadata:
        """
        Fill gaps in regex metadata with values from an external service.

        Regex values win; external values only fill fields that are empty.
        """
        if not external:
            return metadata

        if not metadata.contract_date and external.get("contract_date"):
            metadata.contract_date = external["contract_date"]
        if not metadata.parties and external.get("parties"):
            metadata.parties = list(external["parties"])
        if metadata.total_value is None and external.get("total_value") is not None:
            metadata.total_value = external["total_value"]
        metadata.source = f"{metadata.source}+{source}"
        return metadata
