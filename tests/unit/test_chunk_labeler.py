"""
Unit tests for LLM chunk labelling.
"""

import json

import pytest

from contract_analyzer.services.ai.chunk_labeler import LLMChunkLabeler
from contract_analyzer.services.analysis.semantic_labeler import SemanticLabeler


def test_returns_model_labels(fake_llm):
    labels = [{"type": "PAYMENT_TERMS", "confidence": 0.9, "metadata": {"net_days": 30}}]
    llm = fake_llm(lambda messages: json.dumps({"labels": labels}))

    assert LLMChunkLabeler(llm=llm)("Net 30.") == labels

    call = llm.calls[0]
    assert call["json_mode"] is True
    assert call["temperature"] == 0.3
    assert call["messages"][0]["role"] == "system"
    assert call["messages"][1] == {"role": "user", "content": "Net 30."}


@pytest.mark.parametrize("reply", ["[]", "{}", '{"labels": "PAYMENT_TERMS"}'])
def test_unusable_shapes_give_no_labels(fake_llm, reply):
    assert LLMChunkLabeler(llm=fake_llm(lambda messages: reply))("Net 30.") == []


def test_merged_by_semantic_labeler(fake_llm):
    llm = fake_llm(lambda messages: json.dumps({"labels": [{"type": "PAYMENT_TERMS", "confidence": 0.99}]}))
    labeler = SemanticLabeler(llm_labeler=LLMChunkLabeler(llm=llm))

    chunk = labeler.label_chunk("Payment is due net 30 days after invoice.")

    payment = next(label for label in chunk.labels if label.type == "PAYMENT_TERMS")
    assert payment.confidence == 0.99
    assert "keyword_matches" in payment.metadata


def test_provider_errors_propagate(fake_llm):
    def broken(messages):
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError):
        LLMChunkLabeler(llm=fake_llm(broken))("Net 30.")
