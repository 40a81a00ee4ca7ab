"""
Request and response schemas for the contract analysis API.

The pipeline itself works with dataclasses; these models only describe
what crosses the HTTP boundary.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TextAnalysisRequest(BaseModel):
    """Contract text submitted directly instead of a PDF."""
    text: str = Field(..., min_length=1, description="Contract text")
    use_ai: bool = Field(default=False, description="Run LLM OCR cleanup before analysis")
    hierarchical: bool = Field(default=False, description="Nest sections instead of a flat list")


class PreprocessRequest(BaseModel):
    text: str = Field(..., min_length=1)
    ai_cleanup: bool = False


class ChunkAnalysisRequest(BaseModel):
    text: str = Field(..., min_length=1)


class ClauseClassificationRequest(BaseModel):
    text: str = Field(..., min_length=1)
    use_model: bool = Field(default=False, description="Also ask the hosted clause classifier")


class ClassifiedClauseOut(BaseModel):
    text: str
    type: str
    confidence: float
    matched_keywords: List[str] = Field(default_factory=list)


class ClauseClassificationResponse(BaseModel):
    clauses: List[ClassifiedClauseOut]
    counts: Dict[str, int]
    model_prediction: Optional[Dict[str, Any]] = None


class ChunkIn(BaseModel):
    text: str = Field(..., min_length=1)
    start_index: int = 0
    end_index: Optional[int] = None


class LabelRequest(BaseModel):
    chunks: List[ChunkIn] = Field(..., min_length=1)
    use_llm: bool = Field(default=False, description="Merge labels proposed by the chat model")


class RevenueClauseRequest(BaseModel):
    text: str = Field(..., min_length=1)
    industry_context: Optional[str] = None
    contract_type: Optional[str] = None
    special_focus: Optional[List[str]] = None


class ContractTextRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Contract text")


class ContractQuestionRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Contract text")
    question: str = Field(..., min_length=1)


class ContractQuestionResponse(BaseModel):
    answer: str


class VariableConsiderationRequest(BaseModel):
    """Revenue clauses as returned by /revenue/analyze-clauses."""
    clauses: List[Dict[str, Any]] = Field(default_factory=list)
    contract_value: float = Field(default=0.0, ge=0)


class RevenuePoint(BaseModel):
    date: str = Field(..., description="ISO date, YYYY-MM-DD")
    value: float


class ForecastRequest(BaseModel):
    history: List[RevenuePoint] = Field(..., min_length=1)
    horizon: int = Field(default=12, ge=1, le=120)


class ForecastPoint(BaseModel):
    date: str
    forecast: float
    lower_bound: float
    upper_bound: float


class ForecastResponse(BaseModel):
    forecast: List[ForecastPoint]
    horizon: int


class ServiceStatus(BaseModel):
    """Which optional services are configured."""
    openai: bool
    azure_form_recognizer: bool
    huggingface: bool
    ocr: bool
    ai_cleanup_enabled: bool
