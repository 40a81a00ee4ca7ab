"""
Chunked LLM contract analysis.

The contract text is split with a recursive character splitter and every
chunk is sent through the section and clause prompts. Requests are
started with a fixed stagger (chunk index times the configured delay) and
gathered together; a chunk whose analysis fails contributes nothing.
"""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ...config.settings import settings
from ...pdf.extractor import UnifiedPDFExtractor
from ...utils.errors import ContractProcessingError
from ...utils.pattern_manager import CLAUSE_CATEGORIES
from ..llm.base import BaseLLMProvider
from ..llm.factory import LLMFactory
from ..llm.prompt.prompt import CLAUSE_ANALYSIS, METADATA_EXTRACTION, SECTION_ANALYSIS, SYSTEM_CONTRACT_ANALYST

logger = logging.getLogger(__name__)

SEPARATORS = ["\n\n", "\n", " ", ""]


@dataclass
class ChunkAnalysisResult:
    """Merged result of a chunked analysis."""
    full_text: str
    sections: List[Dict[str, Any]] = field(default_factory=list)
    relevant_clauses: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunk_count: int = 0
    failed_chunks: int = 0
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ChunkAnalyzer:
    """Map-reduce style contract analysis over text chunks."""

    def __init__(
        self,
        llm: Optional[BaseLLMProvider] = None,
        extractor: Optional[UnifiedPDFExtractor] = None,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[int] = None,
        delay_seconds: Optional[float] = None,
    ):
        self._llm = llm
        self.extractor = extractor or UnifiedPDFExtractor()
        self.delay_seconds = settings.chunk_delay_seconds if delay_seconds is None else delay_seconds
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size or settings.chunk_size,
            chunk_overlap=settings.chunk_overlap if chunk_overlap is None else chunk_overlap,
            separators=SEPARATORS,
        )

    @property
    def llm(self) -> BaseLLMProvider:
        if self._llm is None:
            self._llm = LLMFactory.create_provider()
        return self._llm

    def split_text(self, text: str) -> List[str]:
        return self.splitter.split_text(text)

    async def _ask_json(self, template: str, text: str) -> Any:
        response = await self.llm.generate(
            template.format(text=text),
            system_prompt=SYSTEM_CONTRACT_ANALYST,
        )
        return response.json_content()

    async def analyze_chunk(self, chunk: str) -> Optional[Dict[str, Any]]:
        """Section and clause analysis of one chunk; None on failure."""
        try:
            section = await self._ask_json(SECTION_ANALYSIS, chunk)
            clauses = await self._ask_json(CLAUSE_ANALYSIS, chunk)
            return {"section": section, "clauses": clauses}
        except Exception as e:
            logger.error(f"Error analyzing chunk: {e}")
            return None

    async def _staggered(self, index: int, chunk: str) -> Optional[Dict[str, Any]]:
        if index and self.delay_seconds:
            await asyncio.sleep(index * self.delay_seconds)
        return await self.analyze_chunk(chunk)

    async def process_contract(self, source: Union[str, bytes]) -> ChunkAnalysisResult:
        """
        Analyze a PDF (path or bytes) chunk by chunk.

        Raises:
            ContractProcessingError: extraction, splitting or metadata failed
        """
        try:
            extraction = self.extractor.extract_text(source)
            if not extraction.success or not extraction.text.strip():
                raise ContractProcessingError(extraction.error or "No text extracted")
            return await self._analyze(extraction.text, extraction.page_count)
        except Exception as e:
            logger.error(f"Error in chunked LLM processing: {e}")
            raise ContractProcessingError("Failed to process contract with chunked LLM analysis") from e

    async def process_text(self, text: str) -> ChunkAnalysisResult:
        """Same as process_contract for text that is already extracted."""
        try:
            if not text or not text.strip():
                raise ContractProcessingError("No text to analyze")
            return await self._analyze(text, 0)
        except Exception as e:
            logger.error(f"Error in chunked LLM processing: {e}")
            raise ContractProcessingError("Failed to process contract with chunked LLM analysis") from e

    async def _analyze(self, text: str, page_count: int) -> ChunkAnalysisResult:
        start_time = time.time()
        chunks = self.split_text(text)
        logger.info(f"Analyzing contract in {len(chunks)} chunks")

        results = await asyncio.gather(*(self._staggered(i, chunk) for i, chunk in enumerate(chunks)))

        # Metadata comes from the opening chunk only
        metadata = await self._ask_json(METADATA_EXTRACTION, chunks[0])
        if not isinstance(metadata, dict):
            logger.warning("Metadata response was not a JSON object")
            metadata = {}

        sections = [
            {
                "title": result["section"].get("title", ""),
                "content": result["section"].get("content", ""),
                "importance": result["section"].get("importance", 0),
                "type": result["section"].get("type", "general"),
            }
            for result in results
            if result and isinstance(result.get("section"), dict)
        ]

        return ChunkAnalysisResult(
            full_text=text,
            sections=sections,
            relevant_clauses=self.merge_clauses(results),
            metadata={
                "page_count": page_count or metadata.get("page_count") or 0,
                "contract_date": metadata.get("contract_date"),
                "parties": metadata.get("parties") or [],
                "total_value": metadata.get("total_value"),
            },
            chunk_count=len(chunks),
            failed_chunks=sum(1 for result in results if result is None),
            processing_time=time.time() - start_time,
        )

    @staticmethod
    def merge_clauses(results: List[Optional[Dict[str, Any]]]) -> Dict[str, List[Dict[str, Any]]]:
        """Concatenate clauses per type across chunks; the last clause with a given text wins."""
        merged: Dict[str, Dict[str, Dict[str, Any]]] = {category: {} for category in CLAUSE_CATEGORIES}

        for result in results:
            if not result or not isinstance(result.get("clauses"), dict):
                continue
            for category in CLAUSE_CATEGORIES:
                for clause in result["clauses"].get(category) or []:
                    if isinstance(clause, dict) and clause.get("text"):
                        merged[category][clause["text"]] = clause

        return {category: list(by_text.values()) for category, by_text in merged.items()}
