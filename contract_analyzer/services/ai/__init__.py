"""External AI adapters (OpenAI, Azure Form Recognizer, Hugging Face)."""

from .azure_form_recognizer import AzureFormRecognizerClient
from .chunk_analyzer import ChunkAnalyzer
from .chunk_labeler import LLMChunkLabeler
from .contract_assistant import ContractAssistant
from .huggingface import HuggingFaceInferenceClient
from .revenue_analyzer import RevenueClauseAnalyzer
from .text_cleanup import TextCleanupService

__all__ = [
    'AzureFormRecognizerClient',
    'ChunkAnalyzer',
    'ContractAssistant',
    'HuggingFaceInferenceClient',
    'LLMChunkLabeler',
    'RevenueClauseAnalyzer',
    'TextCleanupService',
]
