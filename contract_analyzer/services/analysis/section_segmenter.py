"""
Section Segmenter
Splits contract text into Article/Section blocks and scores each block

Two views of the same document are available:
- a flat list of ARTICLE/Section blocks (`extract_sections`)
- a tree built with a heading stack (`extract_sections_hierarchical`),
  nesting ARTICLE > Section > numbered item > "Title:" line

Every block carries an importance score, a three-tier risk level and the
legal key terms it mentions.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...utils.pattern_manager import RISK_KEYWORDS, PatternManager, get_pattern_manager
from .clause_classifier import ClauseClassifier

logger = logging.getLogger(__name__)


@dataclass
class SectionAnalysis:
    """Heuristic analysis of one section."""
    importance: float
    risk_level: str
    key_terms: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)


@dataclass
class ContractSection:
    """A section of a contract, possibly with nested sub-sections."""
    title: str
    content: str
    page_number: int = 1
    number: str = ""
    kind: str = "section"
    level: int = 0
    type: str = "other"
    importance: float = 0.0
    analysis: Optional[SectionAnalysis] = None
    sub_sections: List['ContractSection'] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "number": self.number,
            "kind": self.kind,
            "level": self.level,
            "page_number": self.page_number,
            "content": self.content,
            "type": self.type,
            "importance": self.importance,
            "analysis": {
                "importance": self.analysis.importance,
                "risk_level": self.analysis.risk_level,
                "key_terms": self.analysis.key_terms,
                "keywords": self.analysis.keywords,
            } if self.analysis else None,
            "sub_sections": [child.to_dict() for child in self.sub_sections],
        }


class SectionSegmenter:
    """Regex-driven section segmentation with keyword scoring."""

    def __init__(
        self,
        classifier: Optional[ClauseClassifier] = None,
        patterns: Optional[PatternManager] = None,
    ):
        self.patterns = patterns or get_pattern_manager()
        self.classifier = classifier or ClauseClassifier(patterns=self.patterns)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def calculate_importance(self, content: str) -> float:
        """Weighted modal-verb count plus normalized length, capped at 10."""
        content = content or ""
        keyword_weight = len(self.patterns.modal_verbs.findall(content))
        length_weight = min(len(content) / 1000, 1)
        return min((keyword_weight * 0.6 + length_weight * 0.4) * 10, 10)

    def determine_risk_level(self, content: str) -> str:
        """
        Three-tier risk from keyword buckets.

        Two or more high-risk keywords is high; three or more medium-risk
        keywords, or exactly one high-risk keyword, is medium; else low.
        """
        lowered = (content or "").lower()
        high_count = sum(1 for word in RISK_KEYWORDS["high"] if word in lowered)
        medium_count = sum(1 for word in RISK_KEYWORDS["medium"] if word in lowered)

        if high_count >= 2:
            return "high"
        if medium_count >= 3 or high_count == 1:
            return "medium"
        return "low"

    def extract_key_terms(self, content: str) -> List[str]:
        """Unique lowercase legal terms, in order of first appearance."""
        seen: Dict[str, None] = {}
        for match in self.patterns.legal_terms.finditer(content or ""):
            seen.setdefault(match.group(0).lower(), None)
        return list(seen)

    def analyze_section_content(self, content: str) -> SectionAnalysis:
        return SectionAnalysis(
            importance=self.calculate_importance(content),
            risk_level=self.determine_risk_level(content),
            key_terms=self.extract_key_terms(content),
            keywords=self.patterns.word.findall((content or "").lower()),
        )

    # ------------------------------------------------------------------
    # Flat segmentation
    # ------------------------------------------------------------------

    def extract_sections(self, text: str) -> List[ContractSection]:
        """
        Split text on ARTICLE/Section headings found at line start.

        The heading remainder becomes the title, everything up to the next
        heading becomes the content. Text before the first heading is not
        a section.
        """
        sections: List[ContractSection] = []
        if not text:
            return sections

        matches = list(self.patterns.section_heading.finditer(text))
        for index, match in enumerate(matches):
            body_end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
            title = match.group(2).strip()
            content = text[match.end():body_end].strip() or title

            section = self._build_section(
                title=title,
                content=content,
                number=match.group(1),
                kind="article" if match.group(0).strip().lower().startswith("article") else "section",
                level=0,
            )
            section.type = self.classifier.determine_type(section.title, section.content)
            sections.append(section)

        logger.debug(f"Extracted {len(sections)} flat sections")
        return sections

    # ------------------------------------------------------------------
    # Hierarchical segmentation
    # ------------------------------------------------------------------

    def extract_sections_hierarchical(self, text: str) -> List[ContractSection]:
        """
        Build a section tree with a heading stack.

        A heading pops the stack down to its own level and is attached to
        whatever remains on top (or becomes a root). Non-heading lines are
        accumulated into the node currently on top of the stack.
        """
        roots: List[ContractSection] = []
        if not text:
            return roots

        stack: List[ContractSection] = []
        buffer: List[str] = []

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            node = self._match_heading(line)
            if node is None:
                buffer.append(line)
                continue

            self._flush_buffer(buffer, stack[-1] if stack else None)
            buffer = []

            while stack and stack[-1].level >= node.level:
                stack.pop()

            if stack:
                stack[-1].sub_sections.append(node)
            else:
                roots.append(node)
            stack.append(node)

        self._flush_buffer(buffer, stack[-1] if stack else None)

        for root in roots:
            self._finalize(root)

        logger.debug(f"Extracted {len(roots)} top-level sections")
        return roots

    def _match_heading(self, line: str) -> Optional[ContractSection]:
        for heading in self.patterns.heading_patterns:
            match = heading.pattern.match(line)
            if match:
                inline = match.group(2).strip() if match.group(2) else ""
                if heading.kind == "titled":
                    title = match.group(1).strip()
                else:
                    title = inline
                    inline = ""
                return ContractSection(
                    title=title,
                    content=inline,
                    number=match.group(1).strip() if heading.kind != "titled" else "",
                    kind=heading.kind,
                    level=heading.level,
                )
        return None

    def _flush_buffer(self, buffer: List[str], target: Optional[ContractSection]) -> None:
        if not buffer or target is None:
            return
        content = re.sub(r'\s+', ' ', " ".join(buffer)).strip()
        if not content:
            return
        target.content = f"{target.content}\n{content}".strip() if target.content else content

    def _finalize(self, node: ContractSection) -> None:
        scored = node.content or node.title
        node.analysis = self.analyze_section_content(scored)
        node.importance = node.analysis.importance
        node.type = self.classifier.determine_section_type(scored)
        for child in node.sub_sections:
            self._finalize(child)

    def _build_section(self, title: str, content: str, number: str, kind: str, level: int) -> ContractSection:
        analysis = self.analyze_section_content(content)
        return ContractSection(
            title=title,
            content=content,
            number=number,
            kind=kind,
            level=level,
            importance=analysis.importance,
            analysis=analysis,
        )

    def count_sections(self, sections: List[ContractSection]) -> int:
        """Total number of nodes in a section forest."""
        return sum(1 + self.count_sections(s.sub_sections) for s in sections)
