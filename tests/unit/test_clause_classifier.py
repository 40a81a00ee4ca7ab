"""
Unit tests for keyword clause classification.
"""

import pytest

from contract_analyzer.services.analysis.clause_classifier import (
    OTHER,
    ClauseClassifier,
    RelevantClauses,
)


@pytest.fixture
def classifier():
    return ClauseClassifier()


class TestClassifySentence:

    def test_payment_sentence(self, classifier):
        clause_type, confidence = classifier.classify_sentence("Payment is due within 30 days of invoice")
        assert clause_type == "payment"
        assert confidence == pytest.approx(2 / 5)

    def test_tie_goes_to_first_category(self, classifier):
        # "fee" is both a revenue and a payment keyword
        clause_type, confidence = classifier.classify_sentence("The Customer shall pay the annual fee of $120,000")
        assert clause_type == "revenue"
        assert confidence == pytest.approx(1 / 6)

    def test_substring_matching(self, classifier):
        # "end" is found inside "amendment"
        assert classifier.classify_sentence("Any amendment must be in writing") == ("termination", 0.25)

    def test_no_keywords(self, classifier):
        assert classifier.classify_sentence("The sky is blue") == (OTHER, 0.0)

    def test_deterministic(self, classifier):
        sentence = "Milestone delivery triggers the service fee invoice"
        results = {classifier.classify_sentence(sentence) for _ in range(5)}
        assert len(results) == 1


class TestClassifyText:

    def test_skips_unclassified_sentences(self, classifier):
        clauses = classifier.classify_text("The sky is blue. Payment is due on invoice! Termination requires notice?")
        assert [c.type for c in clauses] == ["payment", "termination"]
        assert clauses[0].matched_keywords == ["payment", "invoice"]
        assert clauses[1].text == "Termination requires notice"

    def test_empty_text(self, classifier):
        assert classifier.classify_text("") == []
        assert classifier.split_sentences("") == []


class TestRelevantClauses:

    def test_sentence_lands_in_every_matching_bucket(self, classifier):
        clauses = classifier.identify_relevant_clauses("The fee is payable on invoice. The service starts in May.")

        assert [c.text for c in clauses.revenue] == ["The fee is payable on invoice"]
        assert [c.text for c in clauses.payment] == ["The fee is payable on invoice"]
        assert [c.text for c in clauses.performance] == ["The service starts in May"]
        assert clauses.termination == []
        assert clauses.payment[0].confidence == pytest.approx(2 / 5)

    def test_counts_and_dict(self, classifier):
        clauses = classifier.identify_relevant_clauses("Termination or cancellation ends the term.")
        assert clauses.counts() == {"revenue": 0, "performance": 0, "payment": 0, "termination": 1}
        assert clauses.to_dict()["termination"][0]["confidence"] == pytest.approx(3 / 4)

    def test_empty_keyword_list(self, classifier):
        assert classifier.extract_clauses_with_keywords("Payment due.", []) == []

    def test_default_is_empty(self):
        assert RelevantClauses().counts() == {"revenue": 0, "performance": 0, "payment": 0, "termination": 0}


class TestSectionTypes:

    @pytest.mark.parametrize("title,content,expected", [
        ("Fees and Payment", "Amounts are listed below.", "revenue"),
        ("Scope", "Support service levels apply.", "performance"),
        ("Invoices", "Billing is quarterly.", "payment"),
        ("Term", "The contract may expire early.", "termination"),
        ("Notices", "Written notice is required.", OTHER),
    ])
    def test_determine_type(self, classifier, title, content, expected):
        assert classifier.determine_type(title, content) == expected

    def test_determine_section_type_by_counts(self, classifier):
        content = "The invoice and billing cycle. Payment follows the invoice."
        assert classifier.determine_section_type(content) == "payment"

    def test_determine_section_type_counts_whole_words(self, classifier):
        # "fees" and "services" are not whole-word hits for "fee" or "service"
        assert classifier.determine_section_type("Fees for services") == OTHER

    def test_determine_section_type_tie(self, classifier):
        assert classifier.determine_section_type("payment invoice fee") == "payment"

    def test_determine_section_type_shared_keyword_goes_to_payment(self, classifier):
        # "payment" counts for both revenue and payment
        assert classifier.determine_section_type("Payment is due monthly.") == "payment"
