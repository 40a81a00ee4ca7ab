"""
Unit tests for revenue recognition insights and trigger validation.
"""

import pytest

from contract_analyzer.services.analysis.revenue_insights import (
    NOT_SPECIFIED,
    RevenueInsights,
    assess_variable_consideration,
    validate_revenue_triggers,
)


@pytest.fixture
def insights():
    return RevenueInsights()


class TestRevenueInsights:

    def test_sample_contract_analysis(self, insights, sample_contract_text):
        analysis = insights.analyze_contract_content(sample_contract_text)

        summary = analysis.summary
        assert summary.total_sections == 4
        assert summary.revenue_clauses == 2
        assert summary.performance_clauses == 1
        assert summary.payment_clauses == 1
        assert summary.risk_level == "high"
        assert summary.key_terms == ["payment", "revenue", "termination", "penalty", "liability"]

        revenue = analysis.revenue_summary
        assert revenue.revenue_recognition_method == "over time"
        assert revenue.payment_terms == "Payment is due within 30 days"
        assert revenue.performance_obligations == ["shall provide", "shall deliver"]
        assert revenue.compliance_impacts == []

    def test_to_dict(self, insights, sample_contract_text):
        data = insights.analyze_contract_content(sample_contract_text).to_dict()
        assert set(data) == {"summary", "revenue_summary"}
        assert data["summary"]["total_sections"] == 4

    @pytest.mark.parametrize("content,expected", [
        ("Revenue is recognized upon delivery of the licence.", "point in time"),
        ("Recognized using percentage-of-completion.", "over time"),
        ("Fees follow a usage-based model.", "usage-based"),
        ("Milestones apply upon completion.", "point in time"),
        ("Nothing about recognition.", NOT_SPECIFIED),
    ])
    def test_recognition_method(self, insights, content, expected):
        assert insights.identify_revenue_recognition_method(content) == expected

    def test_payment_terms_not_specified(self, insights):
        assert insights.identify_payment_terms("Fees are payable annually.") == NOT_SPECIFIED

    def test_performance_obligations_unique(self, insights):
        content = (
            "The Vendor shall deliver the software. The Vendor shall deliver updates. "
            "The Vendor is responsible for maintaining the servers."
        )
        assert insights.identify_performance_obligations(content) == [
            "shall deliver",
            "responsible for maintaining",
        ]

    def test_obligation_phrase_runs_to_last_keyword(self, insights):
        content = "Obligations of the Vendor include hosting, and support obligations include backups."
        assert insights.identify_performance_obligations(content) == [
            "Obligations of the Vendor include hosting, and support obligations include",
        ]

    def test_compliance_impacts(self, insights):
        content = "Variable consideration is allocated to each performance obligation."
        assert insights.analyze_compliance_impact(content) == [
            "Requires identification of distinct performance obligations",
            "Requires constraint assessment for variable consideration",
        ]

    def test_empty_contract(self, insights):
        analysis = insights.analyze_contract_content("")
        assert analysis.summary.total_sections == 0
        assert analysis.summary.risk_level == "low"
        assert analysis.revenue_summary.payment_terms == NOT_SPECIFIED


def _trigger(**overrides):
    trigger = {
        "type": "milestone",
        "recognition": {"timing": "point_in_time"},
        "conditions": ["Customer acceptance"],
        "measurement": "Fixed amount per milestone",
    }
    trigger.update(overrides)
    return trigger


class TestValidateRevenueTriggers:

    def test_valid_triggers(self):
        assert validate_revenue_triggers([
            _trigger(),
            _trigger(type="usage", recognition={"timing": "over_time"}),
        ])

    def test_empty_list_is_valid(self):
        assert validate_revenue_triggers([])

    @pytest.mark.parametrize("trigger", [
        _trigger(type="bonus"),
        _trigger(recognition={"timing": "eventually"}),
        _trigger(recognition=None),
        _trigger(conditions=[]),
        _trigger(measurement=""),
        "milestone",
    ])
    def test_invalid_triggers(self, trigger):
        assert not validate_revenue_triggers([_trigger(), trigger])


class TestVariableConsideration:

    def _clause(self, **overrides):
        clause = {
            "id": "C-1",
            "clause": "A bonus of $10,000 is payable if uptime exceeds 99.9%.",
            "type": "variable",
            "estimated_value": 10000,
            "triggers": [{"recognition": {"constraints": ["Uptime is outside the vendor's control"]}}],
        }
        clause.update(overrides)
        return clause

    def test_constrained_variable_clause(self):
        result = assess_variable_consideration([self._clause()], contract_value=120000)

        assert result["has_constraint"] is True
        assert result["estimated_impact"] == 10000
        assert len(result["recommendations"]) == 1
        assert "'C-1'" in result["recommendations"][0]

    def test_only_variable_clauses_count(self):
        result = assess_variable_consideration([
            self._clause(type="primary"),
            self._clause(id="C-2", triggers=[{"recognition": {"constraints": []}}], estimated_value=2500),
        ])

        assert result == {"has_constraint": False, "estimated_impact": 2500.0, "recommendations": []}

    def test_impact_capped_at_contract_value(self):
        clauses = [self._clause(), self._clause(id="C-2")]
        assert assess_variable_consideration(clauses, contract_value=15000)["estimated_impact"] == 15000

    def test_no_clauses(self):
        assert assess_variable_consideration([]) == {
            "has_constraint": False,
            "estimated_impact": 0,
            "recommendations": [],
        }
