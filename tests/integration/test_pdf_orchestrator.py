"""
Integration tests for the end-to-end contract pipeline.
"""

import pytest

from contract_analyzer.pdf.extractor import ExtractionResult
from contract_analyzer.services.ai.text_cleanup import TextCleanupService
from contract_analyzer.services.pdf.pdf_orchestrator import (
    MSG_ERROR,
    MSG_NO_TEXT,
    MSG_SUCCESS,
    PDFOrchestrator,
)
from contract_analyzer.utils.errors import ContractProcessingError

OCR_TEXT = (
    "Section 1 Fees\n"
    "The Customer shall pay the fees monthly. Payment is due within 30 days of invoice."
)


class StubOCR:
    def __init__(self, text=OCR_TEXT):
        self.text = text
        self.calls = 0

    def extract_text(self, source):
        self.calls += 1
        return ExtractionResult(True, self.text, "ocr", 90.0, 0.0, 1)


class StubAzure:
    def __init__(self, fields):
        self.fields = fields
        self.received = None

    def analyze(self, pdf_bytes):
        self.received = pdf_bytes
        return self.fields


@pytest.fixture
def orchestrator():
    return PDFOrchestrator(ocr_extractor=StubOCR())


class TestProcessContract:

    def test_pdf_bytes(self, orchestrator, contract_pdf_bytes):
        result = orchestrator.process_contract(contract_pdf_bytes)

        assert result.success
        assert result.message == MSG_SUCCESS
        assert result.extraction_method == "pymupdf"
        assert result.source is None
        assert [s.title for s in result.sections] == ["DEFINITIONS", "Fees and Payment", "Services", "TERMINATION"]
        assert result.metadata.page_count == 2
        assert result.metadata.contract_date == "January 15, 2024"
        assert result.analysis.summary.risk_level == "high"
        assert result.relevant_clauses.payment
        assert result.clause_boundaries
        assert orchestrator.ocr_extractor.calls == 0

    def test_pdf_path_is_reported_as_source(self, orchestrator, contract_pdf_bytes, tmp_path):
        pdf_path = tmp_path / "msa.pdf"
        pdf_path.write_bytes(contract_pdf_bytes)

        result = orchestrator.process_contract(str(pdf_path), hierarchical=True)

        assert result.success
        assert result.source == str(pdf_path)
        assert [s.title for s in result.sections] == ["DEFINITIONS", "TERMINATION"]

    def test_blank_pdf_without_ocr(self, orchestrator, blank_pdf_bytes):
        result = orchestrator.process_contract(blank_pdf_bytes)

        assert not result.success
        assert result.message == MSG_NO_TEXT
        assert result.sections == []
        assert orchestrator.ocr_extractor.calls == 0

    def test_blank_pdf_falls_back_to_ocr(self, orchestrator, blank_pdf_bytes, monkeypatch):
        monkeypatch.setattr("contract_analyzer.services.pdf.pdf_orchestrator.settings.enable_ocr_fallback", True)

        result = orchestrator.process_contract(blank_pdf_bytes)

        assert result.success
        assert result.extraction_method == "ocr"
        assert [s.title for s in result.sections] == ["Fees"]
        assert orchestrator.ocr_extractor.calls == 1

    def test_missing_file(self, orchestrator, tmp_path):
        result = orchestrator.process_contract(str(tmp_path / "missing.pdf"))

        assert not result.success
        assert result.message == MSG_ERROR
        assert "File not found" in result.error

    def test_azure_fills_metadata_gaps(self, contract_pdf_bytes):
        azure = StubAzure({"contract_date": "2020-01-01", "total_value": 1.0, "parties": ["Other"]})
        orchestrator = PDFOrchestrator(ocr_extractor=StubOCR(), azure_client=azure)

        result = orchestrator.process_contract(contract_pdf_bytes, use_azure=True)

        assert azure.received == contract_pdf_bytes
        assert result.metadata.contract_date == "January 15, 2024"
        assert result.metadata.source == "regex+azure"

    def test_ai_cleanup(self, contract_pdf_bytes, fake_llm):
        llm = fake_llm(lambda messages: messages[1]["content"].replace("Globex", "Initech"))
        orchestrator = PDFOrchestrator(ocr_extractor=StubOCR(), cleanup_service=TextCleanupService(llm=llm))

        result = orchestrator.process_contract(contract_pdf_bytes, use_ai=True)

        assert result.success
        assert "Initech" in result.full_text
        assert "Globex" not in result.full_text
        assert len(llm.calls) == 1

    def test_to_dict(self, orchestrator, contract_pdf_bytes):
        data = orchestrator.process_contract(contract_pdf_bytes).to_dict()

        assert data["success"] is True
        assert data["metadata"]["page_count"] == 2
        assert set(data["relevant_clauses"]) == {"revenue", "performance", "payment", "termination"}
        assert data["analysis"]["summary"]["total_sections"] == 4


class TestProcessText:

    def test_sample_text(self, orchestrator, sample_contract_text):
        result = orchestrator.process_text(sample_contract_text)

        assert result.success
        assert result.extraction_method == "text"
        assert [s.type for s in result.sections] == ["other", "revenue", "revenue", "termination"]
        assert result.metadata.parties == ["Acme Software Inc.", "Globex Corporation"]
        assert result.metadata.total_value == 360000.0
        assert result.analysis.revenue_summary.revenue_recognition_method == "over time"
        assert "Terms used in this agreement have the meanings given below." in result.full_text

    def test_empty_text(self, orchestrator):
        result = orchestrator.process_text("  ")
        assert not result.success
        assert result.message == MSG_NO_TEXT


class TestPreprocessPdf:

    def test_preprocess(self, orchestrator, contract_pdf_bytes):
        preprocessed = orchestrator.preprocess_pdf(contract_pdf_bytes)
        assert preprocessed.paragraphs
        assert any(b.type == "article" for b in preprocessed.clause_boundaries)

    def test_blank_raises(self, orchestrator, blank_pdf_bytes):
        with pytest.raises(ContractProcessingError, match=MSG_NO_TEXT):
            orchestrator.preprocess_pdf(blank_pdf_bytes)


class TestProcessDirectory:

    def test_processes_pdfs_in_name_order(self, orchestrator, contract_pdf_bytes, blank_pdf_bytes, tmp_path):
        (tmp_path / "b_contract.pdf").write_bytes(contract_pdf_bytes)
        (tmp_path / "a_scan.pdf").write_bytes(blank_pdf_bytes)
        (tmp_path / "notes.txt").write_text("not a contract")

        results = orchestrator.process_directory(str(tmp_path))

        assert [r.source.split("/")[-1] for r in results] == ["a_scan.pdf", "b_contract.pdf"]
        assert [r.success for r in results] == [False, True]

    def test_missing_directory(self, orchestrator, tmp_path):
        assert orchestrator.process_directory(str(tmp_path / "nowhere")) == []
