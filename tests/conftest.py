"""
Pytest configuration and shared fixtures for the contract analyzer.

- Environment is configured before any project import so the settings
  singleton picks up test values
- Vendor HTTP is served by httpx.MockTransport, never the network
- PDFs are generated on the fly with PyMuPDF
"""

import os
import sys
import warnings
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
import httpx

warnings.filterwarnings("ignore", category=DeprecationWarning)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

# Set test environment variables before any imports
os.environ.update({
    "OPENAI_API_KEY": "test-key",
    "HUGGINGFACE_API_KEY": "test-key",
    "AZURE_FORM_RECOGNIZER_ENDPOINT": "https://test.cognitiveservices.azure.com",
    "AZURE_FORM_RECOGNIZER_KEY": "test-key",
    "AZURE_POLL_INTERVAL": "0",
    "CHUNK_DELAY_SECONDS": "0",
    "HTTP_MAX_RETRIES": "0",
    "ENABLE_OCR_FALLBACK": "false",
    "ENABLE_AI_CLEANUP": "false",
    "LOG_LEVEL": "WARNING",
    "LOG_STRUCTURED": "false",
})

# Import after environment setup
from contract_analyzer.services.llm.base import BaseLLMProvider, LLMResponse  # noqa: E402
from contract_analyzer.utils.http import HttpClient  # noqa: E402


SAMPLE_CONTRACT = """MASTER SERVICES AGREEMENT

This Agreement is made effective as of January 15, 2024 between Acme Software Inc. and Globex Corporation.

ARTICLE 1 DEFINITIONS
Terms used in this agreement have the meanings
given below.

Section 1.1 Fees and Payment
The Customer shall pay the annual fee of $120,000. Payment is due within 30 days of invoice.
The total value of USD 360,000 covers the full term.

Section 1.2 Services
The Provider shall provide support services and shall deliver each milestone on schedule.
Revenue is recognized over time as milestones are completed.

ARTICLE 2 TERMINATION
Either party may terminate for breach; the breaching party is subject to a penalty and liability for damages.
Notwithstanding the foregoing, termination requires thirty days notice.
"""


@pytest.fixture
def sample_contract_text() -> str:
    return SAMPLE_CONTRACT


def build_pdf(pages: List[str]) -> bytes:
    """Create a text PDF with one page per string."""
    import fitz

    doc = fitz.open()
    for page_text in pages:
        page = doc.new_page()
        page.insert_textbox(fitz.Rect(50, 50, 550, 800), page_text, fontsize=8)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def contract_pdf_bytes() -> bytes:
    first, _, second = SAMPLE_CONTRACT.partition("ARTICLE 2")
    return build_pdf([first, "ARTICLE 2" + second])


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    import fitz

    doc = fitz.open()
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpClient]:
    """HttpClient backed by an httpx.MockTransport handler."""
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HttpClient:
        return HttpClient(client=httpx.Client(transport=httpx.MockTransport(handler)), max_retries=0)
    return _make


class FakeLLM(BaseLLMProvider):
    """
    Scripted provider.

    `responder(prompt_or_messages) -> str` decides the reply; exceptions
    raised by the responder propagate like provider errors.
    """

    def __init__(self, responder: Callable[[Any], str]):
        super().__init__(model="fake", api_key="fake")
        self.responder = responder
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, prompt: str, **kwargs) -> LLMResponse:
        self.calls.append({"prompt": prompt, **kwargs})
        return LLMResponse(content=self.responder(prompt), model="fake", provider="fake")

    def complete(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        self.calls.append({"messages": messages, **kwargs})
        return LLMResponse(content=self.responder(messages), model="fake", provider="fake")

    def get_model_info(self) -> Dict[str, Any]:
        return {"provider": "fake", "model": "fake"}


@pytest.fixture
def fake_llm() -> Callable[[Callable[[Any], str]], FakeLLM]:
    return FakeLLM
