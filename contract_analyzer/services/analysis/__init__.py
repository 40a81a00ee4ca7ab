"""Rule-based contract analysis: sections, clauses, metadata and revenue cues."""

from .clause_classifier import ClauseClassifier
from .metadata_extractor import MetadataExtractor
from .revenue_insights import RevenueInsights
from .section_segmenter import SectionSegmenter
from .semantic_labeler import SemanticLabeler

__all__ = [
    'ClauseClassifier',
    'MetadataExtractor',
    'RevenueInsights',
    'SectionSegmenter',
    'SemanticLabeler',
]
