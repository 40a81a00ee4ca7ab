"""
FastAPI API for Contract Analysis
REST endpoints for PDF contract extraction, clause classification and
revenue recognition analysis
"""

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ..config.settings import settings
from ..pdf.ocr_extractor import OCRExtractor
from ..schemas.contract import (
    ChunkAnalysisRequest,
    ClauseClassificationRequest,
    ClauseClassificationResponse,
    ClassifiedClauseOut,
    ContractQuestionRequest,
    ContractQuestionResponse,
    ContractTextRequest,
    ForecastRequest,
    ForecastResponse,
    LabelRequest,
    PreprocessRequest,
    RevenueClauseRequest,
    ServiceStatus,
    TextAnalysisRequest,
    VariableConsiderationRequest,
)
from ..services.ai.chunk_analyzer import ChunkAnalyzer
from ..services.ai.chunk_labeler import LLMChunkLabeler
from ..services.ai.contract_assistant import ContractAssistant
from ..services.ai.huggingface import HuggingFaceInferenceClient
from ..services.ai.revenue_analyzer import RevenueClauseAnalyzer
from ..services.analysis.clause_classifier import ClauseClassifier
from ..services.analysis.revenue_insights import assess_variable_consideration
from ..services.analysis.semantic_labeler import SemanticLabeler
from ..services.pdf.pdf_orchestrator import PDFOrchestrator
from ..utils.errors import ContractProcessingError, ExternalServiceError
from ..utils.logging import get_logger
from ..utils.text_cleaner import TextCleaner

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

# Initialize FastAPI app
app = FastAPI(
    title="Contract Analyzer API",
    description="PDF contract analysis for revenue recognition",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
orchestrator = PDFOrchestrator()
classifier = ClauseClassifier()
text_cleaner = TextCleaner(ocr_cleaner=lambda text: orchestrator.cleanup_service.clean_ocr_text(text))
labeler = SemanticLabeler()
chunk_labeler = LLMChunkLabeler()
hf_client = HuggingFaceInferenceClient()
chunk_analyzer = ChunkAnalyzer(extractor=orchestrator.extractor)
revenue_analyzer = RevenueClauseAnalyzer()
assistant = ContractAssistant()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "contract-analyzer-api"}


@app.get("/status", response_model=ServiceStatus)
def service_status():
    """Which optional AI services are configured"""
    return ServiceStatus(
        openai=bool(settings.openai_api_key),
        azure_form_recognizer=bool(settings.azure_form_recognizer_endpoint and settings.azure_form_recognizer_key),
        huggingface=bool(settings.huggingface_api_key),
        ocr=OCRExtractor().is_available(),
        ai_cleanup_enabled=settings.enable_ai_cleanup,
    )


@app.get("/status/openai")
def openai_status():
    """Verify the OpenAI key with a minimal completion"""
    return assistant.check_availability()


@app.post("/contracts/analyze")
async def analyze_contract(
    file: UploadFile = File(...),
    use_ai: bool = Form(False),
    use_azure: bool = Form(False),
    hierarchical: bool = Form(False),
):
    """Upload a PDF contract and return sections, clauses and metadata"""
    if file.content_type != PDF_CONTENT_TYPE:
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    data = await file.read()
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    if not data:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # process_contract blocks on PDF parsing and OCR
    result = await run_in_threadpool(
        orchestrator.process_contract,
        data,
        use_ai=use_ai or settings.enable_ai_cleanup,
        use_azure=use_azure,
        hierarchical=hierarchical,
    )
    if not result.success:
        status = 422 if result.message == "Failed to extract text from PDF" else 500
        raise HTTPException(status_code=status, detail=result.message)

    payload = result.to_dict()
    payload["source"] = file.filename
    return payload


@app.post("/contracts/analyze-text")
def analyze_contract_text(request: TextAnalysisRequest):
    """Run the contract pipeline on plain text"""
    result = orchestrator.process_text(request.text, use_ai=request.use_ai, hierarchical=request.hierarchical)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.message)
    return result.to_dict()


@app.post("/contracts/preprocess")
def preprocess_text(request: PreprocessRequest):
    """Normalize text, rebuild paragraphs and detect clause boundaries"""
    try:
        return text_cleaner.preprocess(request.text, ai_cleanup=request.ai_cleanup).to_dict()
    except ContractProcessingError as e:
        logger.error(f"Preprocessing failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/contracts/analyze-chunks")
async def analyze_chunks(request: ChunkAnalysisRequest):
    """Chunked LLM analysis of contract text"""
    try:
        result = await chunk_analyzer.process_text(request.text)
        return result.to_dict()
    except ContractProcessingError as e:
        logger.error(f"Chunked analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/contracts/extract-data")
def extract_contract_data(request: ContractTextRequest):
    """LLM extraction of contract header fields, with defaults for anything missing"""
    return assistant.extract_contract_data(request.text)


@app.post("/contracts/ask", response_model=ContractQuestionResponse)
def ask_contract_question(request: ContractQuestionRequest):
    """Answer a question about the submitted contract"""
    return ContractQuestionResponse(answer=assistant.answer_question(request.text, request.question))


@app.post("/contracts/extract-entities")
def extract_contract_entities(request: ContractTextRequest):
    """Named entities in the contract"""
    try:
        return assistant.extract_entities(request.text)
    except ContractProcessingError as e:
        logger.error(f"Entity extraction failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/contracts/analyze-obligations")
def analyze_contract_obligations(request: ContractTextRequest):
    """Obligations, deliverables and service levels in the contract"""
    try:
        return assistant.analyze_obligations(request.text)
    except ContractProcessingError as e:
        logger.error(f"Obligation analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/clauses/classify", response_model=ClauseClassificationResponse)
def classify_clauses(request: ClauseClassificationRequest):
    """Keyword classification of every sentence, optionally with the hosted model"""
    clauses = classifier.classify_text(request.text)
    model_prediction = None

    if request.use_model:
        try:
            model_prediction = hf_client.classify_clause(request.text)
        except ExternalServiceError as e:
            logger.error(f"Model clause classification failed: {e}")
            raise HTTPException(status_code=502, detail="Failed to classify clause")

    return ClauseClassificationResponse(
        clauses=[
            ClassifiedClauseOut(
                text=c.text,
                type=c.type,
                confidence=c.confidence,
                matched_keywords=c.matched_keywords,
            )
            for c in clauses
        ],
        counts=classifier.identify_relevant_clauses(request.text).counts(),
        model_prediction=model_prediction,
    )


@app.post("/clauses/label")
def label_chunks(request: LabelRequest):
    """Rule-based semantic labels for contract chunks, optionally merged with LLM labels"""
    active = SemanticLabeler(llm_labeler=chunk_labeler) if request.use_llm else labeler
    labeled = active.label_chunks([chunk.model_dump() for chunk in request.chunks])
    return {"chunks": [chunk.to_dict() for chunk in labeled]}


@app.post("/revenue/analyze-clauses")
def analyze_revenue_clauses(request: RevenueClauseRequest):
    """LLM analysis of revenue triggers (IFRS 15 / ASC 606)"""
    try:
        return revenue_analyzer.analyze(
            request.text,
            industry_context=request.industry_context,
            contract_type=request.contract_type,
            special_focus=request.special_focus,
        )
    except ContractProcessingError as e:
        logger.error(f"Revenue clause analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/revenue/variable-consideration")
def variable_consideration(request: VariableConsiderationRequest):
    """Constraint check and estimated impact of variable consideration clauses"""
    return assess_variable_consideration(request.clauses, request.contract_value)


@app.post("/revenue/forecast", response_model=ForecastResponse)
def forecast_revenue(request: ForecastRequest):
    """Revenue forecast from the hosted time-series model"""
    try:
        forecast = hf_client.forecast_revenue(
            [point.model_dump() for point in request.history],
            horizon=request.horizon,
        )
        return ForecastResponse(forecast=forecast, horizon=request.horizon)
    except ExternalServiceError as e:
        logger.error(f"Revenue forecast failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to forecast revenue")


if __name__ == "__main__":
    uvicorn.run(
        "contract_analyzer.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
