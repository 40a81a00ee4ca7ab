"""
Unit tests for contract text preprocessing.

Covers normalization (including idempotency), paragraph reconstruction,
clause boundary detection and the TextCleaner entry point.
"""

import pytest

from contract_analyzer.utils.errors import ContractProcessingError
from contract_analyzer.utils.text_cleaner import (
    TextCleaner,
    detect_clause_boundaries,
    join_broken_lines,
    normalize_text,
)


class TestNormalizeText:

    def test_straightens_quotes_and_collapses_whitespace(self):
        raw = "  \u201cFees\u201d   are\tdue \u2018net 30\u2019  "
        assert normalize_text(raw) == "\"Fees\" are due 'net 30'"

    def test_unifies_line_endings_and_blank_runs(self):
        raw = "Line one\r\nLine two\rLine three\f\n\n\n\nLine four"
        assert normalize_text(raw) == "Line one\nLine two\nLine three\n\nLine four"

    def test_removes_control_characters(self):
        assert normalize_text("Pay\x00ment\x07 terms") == "Payment terms"

    def test_nfkc_folds_compatibility_characters(self):
        # non-breaking space and the "fi" ligature
        assert normalize_text("con\ufb01dential\u00a0information") == "confidential information"

    def test_empty_input(self):
        assert normalize_text("") == ""
        assert normalize_text(None) == ""

    @pytest.mark.parametrize("raw", [
        "  \u201cQuoted\u201d \r\n\r\n\r\n text\x0c with\u00a0nbsp  ",
        "e\u0301\x00\u0301 combining marks around a control char",
        "\u2028Section 1\u2029\n\n\n\nARTICLE 2\t\t body",
        "plain text",
        "",
    ])
    def test_is_idempotent(self, raw):
        once = normalize_text(raw)
        assert normalize_text(once) == once


class TestJoinBrokenLines:

    def test_rejoins_lowercase_continuations(self):
        lines = ["The Customer shall pay the fees", "within thirty days of invoice."]
        assert join_broken_lines(lines) == ["The Customer shall pay the fees within thirty days of invoice."]

    def test_capital_start_begins_new_paragraph(self):
        lines = ["First clause without period", "Second clause starts here."]
        assert join_broken_lines(lines) == ["First clause without period", "Second clause starts here."]

    def test_terminal_punctuation_closes_paragraph(self):
        lines = ["Definitions:", "fees means the amounts payable"]
        assert join_broken_lines(lines) == ["Definitions:", "fees means the amounts payable"]

    def test_list_markers_and_headers_are_not_joined(self):
        lines = ["the parties agree to the following", "(a) payment terms", "section 2 applies"]
        assert join_broken_lines(lines) == [
            "the parties agree to the following",
            "(a) payment terms",
            "section 2 applies",
        ]

    def test_blank_line_closes_paragraph(self):
        lines = ["the first paragraph", "", "continues nowhere"]
        assert join_broken_lines(lines) == ["the first paragraph", "continues nowhere"]


class TestClauseBoundaries:

    def test_markers_sorted_by_start(self):
        text = (
            "Section 1 Fees\n"
            "Notwithstanding clause 3, fees are payable, provided that the invoice is valid.\n"
            "Article 2 Term\n"
            "Whereas the parties agree, subject to approval."
        )
        boundaries = detect_clause_boundaries(text)

        starts = [b.start for b in boundaries]
        assert starts == sorted(starts)
        assert [b.type for b in boundaries] == [
            "section", "exception", "condition", "article", "recital", "condition",
        ]

    def test_marker_confidences(self):
        boundaries = detect_clause_boundaries("For the avoidance of doubt, subject to Section 4")
        by_type = {b.type: b.confidence for b in boundaries}
        assert by_type == {"clarification": 0.9, "condition": 0.8}

    def test_section_marker_requires_line_start(self):
        boundaries = detect_clause_boundaries("as described in Section 4 above")
        assert boundaries == []


class TestTextCleaner:

    def test_preprocess_pipeline(self, sample_contract_text):
        result = TextCleaner().preprocess(sample_contract_text)

        assert "Terms used in this agreement have the meanings given below." in result.paragraphs
        assert result.normalized_text == "\n".join(result.paragraphs)
        assert {b.type for b in result.clause_boundaries} >= {"section", "article", "exception"}

    def test_preprocess_ai_cleanup_uses_callable(self):
        cleaner = TextCleaner(ocr_cleaner=lambda text: text.replace("0bligation", "obligation"))
        result = cleaner.preprocess("The 0bligation survives.", ai_cleanup=True)
        assert result.normalized_text == "The obligation survives."

    def test_ai_cleanup_skipped_when_not_requested(self):
        cleaner = TextCleaner(ocr_cleaner=lambda text: "replaced")
        assert cleaner.preprocess("Keep me.").normalized_text == "Keep me."

    def test_preprocess_wraps_failures(self):
        def broken(_):
            raise RuntimeError("model down")

        cleaner = TextCleaner(ocr_cleaner=broken)
        with pytest.raises(ContractProcessingError, match="Failed to preprocess text"):
            cleaner.preprocess("Some text.", ai_cleanup=True)
