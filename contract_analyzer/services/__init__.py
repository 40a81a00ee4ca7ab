"""
Services Package
Contract analysis, external AI adapters and PDF orchestration.
"""

from .analysis import *
from .ai import *
from .pdf import *

__all__ = [
    # Analysis
    'ClauseClassifier',
    'SectionSegmenter',
    'MetadataExtractor',
    'RevenueInsights',
    'SemanticLabeler',

    # AI adapters
    'TextCleanupService',
    'AzureFormRecognizerClient',
    'HuggingFaceInferenceClient',
    'ChunkAnalyzer',
    'ContractAssistant',
    'LLMChunkLabeler',
    'RevenueClauseAnalyzer',

    # PDF
    'PDFOrchestrator',
    'ProcessedContract',
]
