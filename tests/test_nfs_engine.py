"""
Tests for the NFS composer and engine.

============================================================
PURPOSE
============================================================
Verifies composite weighting, risk level and grade
classification, recommendations and end-to-end scenarios.

============================================================
"""

import pytest

from nfs_scoring import (
    CompositeWeights,
    ConfigurationError,
    CreditInput,
    FinancialInput,
    NfsGrade,
    NfsScoringConfig,
    NfsScoringEngine,
    RECOMMENDATIONS,
    RiskLevel,
    ScoreCategory,
    ScoringRequest,
    ScoringResult,
    SubScores,
    composite_score,
    determine_grade,
    determine_risk_level,
    format_score_summary,
    generate_recommendation,
    score_one,
)
from nfs_scoring.config import DEFAULT_RECOMMENDATION


# =============================================================
# TEST: Composite Score
# =============================================================

class TestCompositeScore:
    """Weighted sum of sub-scores."""

    def test_default_weights(self):
        """Default weights give 0.4/0.3/0.3 of the sub-scores."""
        total = composite_score(SubScores(financial=90, credit=50, asset=50))
        assert total == pytest.approx(66.0)

    def test_all_hundred_gives_hundred(self):
        """Perfect sub-scores give a perfect composite."""
        total = composite_score(SubScores(financial=100, credit=100, asset=100))
        assert total == pytest.approx(100.0)

    def test_custom_weights(self):
        """Custom weights are applied to the sum."""
        weights = CompositeWeights(financial=0.5, credit=0.25, asset=0.25)
        total = composite_score(SubScores(financial=80, credit=40, asset=0), weights)
        assert total == pytest.approx(50.0)

    def test_weights_must_sum_to_one(self):
        """Weights summing above 1.0 are rejected."""
        with pytest.raises(ConfigurationError):
            CompositeWeights(financial=0.5, credit=0.5, asset=0.5)

    def test_negative_weight_rejected(self):
        """Negative weights are rejected even if the sum is 1.0."""
        with pytest.raises(ConfigurationError):
            CompositeWeights(financial=1.2, credit=-0.1, asset=-0.1)


# =============================================================
# TEST: Classification
# =============================================================

class TestClassification:
    """Risk level and grade thresholds."""

    @pytest.mark.parametrize("score,expected", [
        (100.0, RiskLevel.VERY_LOW),
        (80.0, RiskLevel.VERY_LOW),
        (79.99, RiskLevel.LOW),
        (70.0, RiskLevel.LOW),
        (69.99, RiskLevel.MEDIUM),
        (60.0, RiskLevel.MEDIUM),
        (59.99, RiskLevel.HIGH),
        (50.0, RiskLevel.HIGH),
        (49.99, RiskLevel.VERY_HIGH),
        (0.0, RiskLevel.VERY_HIGH),
    ])
    def test_risk_level_thresholds(self, score, expected):
        """Risk level boundaries are inclusive at the lower bound."""
        assert determine_risk_level(score) == expected

    @pytest.mark.parametrize("score,expected", [
        (100.0, NfsGrade.AAA),
        (90.0, NfsGrade.AAA),
        (89.99, NfsGrade.AA),
        (80.0, NfsGrade.AA),
        (70.0, NfsGrade.A),
        (60.0, NfsGrade.BBB),
        (50.0, NfsGrade.BB),
        (40.0, NfsGrade.B),
        (30.0, NfsGrade.CCC),
        (29.99, NfsGrade.D),
        (0.0, NfsGrade.D),
    ])
    def test_grade_thresholds(self, score, expected):
        """Grade boundaries are inclusive at the lower bound."""
        assert determine_grade(score) == expected

    def test_classification_is_monotonic(self):
        """Higher scores never give a worse grade or riskier level."""
        previous_rank = None
        previous_severity = None

        for step in range(0, 201):
            score = step / 2
            rank = determine_grade(score).rank
            severity = determine_risk_level(score).severity_order

            if previous_rank is not None:
                assert rank >= previous_rank
                assert severity <= previous_severity

            previous_rank = rank
            previous_severity = severity


# =============================================================
# TEST: Recommendations
# =============================================================

class TestRecommendations:
    """Guidance lookup."""

    def test_every_level_has_guidance(self):
        """Every risk level maps to its own recommendation."""
        for level in RiskLevel:
            assert generate_recommendation(level) == RECOMMENDATIONS[level]

    def test_accepts_string_values(self):
        """Recommendation lookup accepts the level's string value."""
        assert generate_recommendation("MEDIUM") == RECOMMENDATIONS[RiskLevel.MEDIUM]

    @pytest.mark.parametrize("value", ["UNKNOWN", "medium", "", None])
    def test_unknown_level_is_unable_to_assess(self, value):
        """Unknown levels fall back to the default recommendation."""
        assert generate_recommendation(value) == DEFAULT_RECOMMENDATION


# =============================================================
# TEST: Engine Scenarios
# =============================================================

class TestNfsScoringEngine:
    """End-to-end scoring."""

    @pytest.fixture
    def engine(self):
        return NfsScoringEngine()

    def test_financial_only_request(self, engine, healthy_financial):
        """Financial-only input scores 66, MEDIUM, BBB."""
        result = engine.score(ScoringRequest(
            enterprise_id="ent-001",
            financial=healthy_financial,
        ))

        assert result.enterprise_id == "ent-001"
        assert result.sub_scores.financial == 90.0
        assert result.sub_scores.credit == 50.0
        assert result.sub_scores.asset == 50.0
        assert result.composite_score == pytest.approx(66.0)
        assert result.risk_level == "MEDIUM"
        assert result.grade == "BBB"
        assert result.recommendation == RECOMMENDATIONS[RiskLevel.MEDIUM]
        assert result.calculation_id is None

    def test_all_zero_financial_only(self, engine, zero_financial):
        """All-zero financials score 42, VERY_HIGH, B."""
        result = engine.score_inputs(zero_financial)

        assert result.sub_scores.financial == 30.0
        assert result.composite_score == pytest.approx(42.0)
        assert result.risk_level == "VERY_HIGH"
        assert result.grade == "B"

    def test_strong_enterprise_is_top_grade(
        self, engine, healthy_financial, strong_credit, strong_asset
    ):
        """Strong data in every category grades AAA."""
        result = engine.score_inputs(healthy_financial, strong_credit, strong_asset)

        assert result.sub_scores.credit == 100.0
        assert result.sub_scores.asset == 100.0
        assert result.composite_score == pytest.approx(96.0)
        assert result.risk_level == "VERY_LOW"
        assert result.grade == "AAA"

    def test_scoring_is_deterministic(
        self, engine, healthy_financial, strong_credit, strong_asset
    ):
        """Same request gives the same result across engines."""
        request = ScoringRequest("ent-9", healthy_financial, strong_credit, strong_asset)
        assert engine.score(request) == engine.score(request)
        assert engine.score(request) == NfsScoringEngine().score(request)

    def test_absent_and_neutral_credit_behave_the_same(self, engine, healthy_financial):
        """Absent credit equals credit data worth exactly 50."""
        without_credit = engine.score_inputs(healthy_financial)
        assert without_credit.sub_scores.credit == 50.0

        # a credit profile that lands on exactly 50 points
        neutral_credit = engine.score_inputs(
            healthy_financial,
            credit=CreditInput(
                credit_score=600, risk_level="HIGH",
                default_history=False, late_payments=1,
            ),
        )
        assert neutral_credit.sub_scores.credit == 50.0
        assert neutral_credit.composite_score == pytest.approx(without_credit.composite_score)

    def test_assess_keeps_breakdown(self, engine, healthy_financial):
        """assess() returns per-category components."""
        assessment = engine.assess(ScoringRequest("ent-1", healthy_financial))

        assert assessment.financial.components["profitability"] == 25.0
        assert assessment.credit.is_neutral
        assert assessment.asset.is_neutral
        assert assessment.get_assessment(ScoreCategory.FINANCIAL).score == 90.0

        payload = assessment.to_dict()
        assert set(payload["breakdown"]) == {"financial", "credit", "asset"}
        assert payload["breakdown"]["credit"]["neutral"] is True

    def test_composite_always_in_bounds(self, engine):
        """Extreme figures keep the composite within 0-100."""
        extremes = [
            FinancialInput(revenue=-1e12, profit=1e12, assets=-5, liabilities=1e15,
                           equity=-1, cash_flow=-1e15),
            FinancialInput(revenue=1e15, profit=1e15, assets=1e15, liabilities=0,
                           equity=1, cash_flow=1e15),
        ]
        for financial in extremes:
            result = engine.score_inputs(financial)
            assert 0.0 <= result.composite_score <= 100.0

    def test_neutral_score_comes_from_config(self, healthy_financial):
        """The configured neutral score is used for absent data."""
        engine = NfsScoringEngine(NfsScoringConfig(neutral_score=40.0))
        result = engine.score_inputs(healthy_financial)

        assert result.sub_scores.credit == 40.0
        assert result.sub_scores.asset == 40.0
        assert result.composite_score == pytest.approx(60.0)

    def test_compose_from_sub_scores(self, engine):
        """compose() classifies precomputed sub-scores."""
        result = engine.compose("ent-x", SubScores(financial=100, credit=80, asset=60))
        assert result.composite_score == pytest.approx(82.0)
        assert result.risk_level == "VERY_LOW"
        assert result.grade == "AA"


# =============================================================
# TEST: Convenience and Output
# =============================================================

class TestConvenience:

    def test_score_one(self, healthy_financial):
        """score_one scores without an explicit engine."""
        result = score_one(healthy_financial, enterprise_id="ent-001")
        assert result.grade == "BBB"

    def test_result_to_dict(self, healthy_financial):
        """Result dict uses the camelCase output shape."""
        payload = score_one(healthy_financial, enterprise_id="ent-001").to_dict()

        assert payload["id"] == ""
        assert payload["enterpriseId"] == "ent-001"
        assert payload["riskLevel"] == "MEDIUM"
        assert payload["nfsGrade"] == "BBB"
        assert payload["factors"] == {
            "financialScore": 90.0,
            "creditScore": 50.0,
            "assetScore": 50.0,
        }
        assert payload["createdAt"] is None

    def test_failed_placeholder(self):
        """Failed placeholder has score 0, ERROR and grade E."""
        result = ScoringResult.failed("ent-404")

        assert result.composite_score == 0.0
        assert result.risk_level == "ERROR"
        assert result.grade == "E"
        assert not result.succeeded

    def test_format_score_summary(self, healthy_financial):
        """Summary text includes id, score and grade."""
        summary = format_score_summary(score_one(healthy_financial, enterprise_id="ent-001"))

        assert "ent-001" in summary
        assert "66.00/100" in summary
        assert "BBB" in summary
