"""
Semantic chunk labelling.

Rule-based labels (keywords and regexes per chunk type) optionally merged
with labels proposed by an LLM.
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern

logger = logging.getLogger(__name__)

LABEL_THRESHOLD = 0.3
PATTERN_WEIGHT = 2


@dataclass
class ChunkType:
    keywords: List[str]
    patterns: List[Pattern[str]]


CHUNK_TYPES: Dict[str, ChunkType] = {
    "REVENUE_RECOGNITION": ChunkType(
        keywords=["revenue", "recognition", "payment terms", "billing", "invoice"],
        patterns=[re.compile(r'revenue.{0,50}recogni[sz]ed', re.I), re.compile(r'payment.{0,30}schedule', re.I)],
    ),
    "PERFORMANCE_OBLIGATION": ChunkType(
        keywords=["deliverable", "milestone", "performance", "obligation", "service"],
        patterns=[re.compile(r'performance.{0,30}obligation', re.I), re.compile(r'delivery.{0,30}milestone', re.I)],
    ),
    "PAYMENT_TERMS": ChunkType(
        keywords=["payment", "invoice", "billing", "net", "days"],
        patterns=[re.compile(r'net\s*\d+(\s*days)?', re.I), re.compile(r'payment.{0,30}due', re.I)],
    ),
    "TERMINATION": ChunkType(
        keywords=["terminate", "termination", "cancellation", "notice"],
        patterns=[re.compile(r'terminat.{0,50}notice', re.I), re.compile(r'cancel.{0,30}agreement', re.I)],
    ),
}


@dataclass
class ChunkLabel:
    type: str
    confidence: float
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LabeledChunk:
    text: str
    start_index: int
    end_index: int
    labels: List[ChunkLabel] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SemanticLabeler:
    """
    Labels contract chunks with revenue-relevant types.

    Args:
        llm_labeler: Optional callable returning a list of
            {"type", "confidence", "metadata"} dicts for a chunk. Failures
            are logged and the chunk keeps its rule-based labels.
    """

    def __init__(
        self,
        llm_labeler: Optional[Callable[[str], List[Dict[str, Any]]]] = None,
        chunk_types: Optional[Dict[str, ChunkType]] = None,
    ):
        self.llm_labeler = llm_labeler
        self.chunk_types = chunk_types or CHUNK_TYPES

    def classify_with_rules(self, text: str) -> List[ChunkLabel]:
        labels: List[ChunkLabel] = []
        lowered = text.lower()

        for label_type, definition in self.chunk_types.items():
            matches = sum(1 for keyword in definition.keywords if keyword.lower() in lowered)
            matches += sum(PATTERN_WEIGHT for pattern in definition.patterns if pattern.search(text))

            confidence = matches / (len(definition.keywords) + len(definition.patterns) * PATTERN_WEIGHT)
            if confidence > LABEL_THRESHOLD:
                labels.append(ChunkLabel(
                    type=label_type,
                    confidence=confidence,
                    metadata={"keyword_matches": matches, "text_length": len(text)},
                ))

        return labels

    def _llm_labels(self, text: str) -> List[ChunkLabel]:
        if self.llm_labeler is None:
            return []
        try:
            raw = self.llm_labeler(text) or []
        except Exception as e:
            logger.warning(f"LLM chunk labelling failed: {e}")
            return []

        labels = []
        for item in raw:
            if not isinstance(item, dict) or "type" not in item:
                continue
            labels.append(ChunkLabel(
                type=str(item["type"]),
                confidence=float(item.get("confidence", 0.0)),
                metadata=dict(item.get("metadata") or {}),
            ))
        return labels

    @staticmethod
    def merge_labels(rule_labels: List[ChunkLabel], llm_labels: List[ChunkLabel]) -> List[ChunkLabel]:
        """Same-type labels keep the higher confidence and merged metadata."""
        merged = list(rule_labels)
        by_type = {label.type: label for label in merged}

        for label in llm_labels:
            existing = by_type.get(label.type)
            if existing:
                existing.confidence = max(existing.confidence, label.confidence)
                existing.metadata = {**existing.metadata, **label.metadata}
            else:
                merged.append(label)
                by_type[label.type] = label

        return merged

    def label_chunk(self, text: str, start_index: int = 0, end_index: Optional[int] = None) -> LabeledChunk:
        labels = self.merge_labels(self.classify_with_rules(text), self._llm_labels(text))
        return LabeledChunk(
            text=text,
            start_index=start_index,
            end_index=end_index if end_index is not None else start_index + len(text),
            labels=labels,
        )

    def label_chunks(self, chunks: List[Dict[str, Any]]) -> List[LabeledChunk]:
        """Label {"text", "start_index", "end_index"} chunks in order."""
        return [
            self.label_chunk(chunk["text"], chunk.get("start_index", 0), chunk.get("end_index"))
            for chunk in chunks
        ]
