"""
NFS Scoring Engine - Main Orchestrator.

============================================================
PURPOSE
============================================================
The NfsScoringEngine is the main entry point for scoring a
single enterprise.

It orchestrates:
1. Category sub-scoring (financial, credit, asset)
2. Weighted composition into a composite score
3. Risk level and grade classification
4. Recommendation lookup
5. Result packaging

============================================================
DESIGN PRINCIPLES
============================================================
- Single responsibility: orchestration only
- Delegates to individual sub-scorers
- Deterministic and stateless per call
- Total: never raises for well-typed numeric input

============================================================
USAGE
============================================================
    from nfs_scoring import NfsScoringEngine, ScoringRequest, FinancialInput

    engine = NfsScoringEngine()

    result = engine.score(ScoringRequest(
        enterprise_id="ent-001",
        financial=FinancialInput(
            revenue=1000, profit=150, assets=2000,
            liabilities=400, equity=1000, cash_flow=100,
        ),
    ))

    print(f"Score: {result.composite_score:.1f} ({result.grade})")

============================================================
"""

from typing import Optional

from .config import (
    DEFAULT_RECOMMENDATION,
    RECOMMENDATIONS,
    CompositeWeights,
    NfsScoringConfig,
)
from .scorers import AssetSubScorer, CreditSubScorer, FinancialSubScorer
from .types import (
    AssetInput,
    CreditInput,
    FinancialInput,
    NfsAssessment,
    NfsGrade,
    RiskLevel,
    ScoringRequest,
    ScoringResult,
    SubScores,
)


class NfsScoringEngine:
    """
    Main orchestrator for NFS scoring.

    ============================================================
    RESPONSIBILITIES
    ============================================================
    1. Initialize and configure sub-scorers
    2. Run all sub-scorers
    3. Weight sub-scores into the composite
    4. Classify risk level and grade
    5. Package output

    The engine keeps no state between calls; one instance can
    be shared freely.
    ============================================================
    """

    def __init__(self, config: Optional[NfsScoringConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Engine and scorer configuration.
                    Uses defaults if not provided.
        """
        self.config = config or NfsScoringConfig()

        self._financial_scorer = FinancialSubScorer(self.config.financial)
        self._credit_scorer = CreditSubScorer(
            self.config.credit, neutral_score=self.config.neutral_score
        )
        self._asset_scorer = AssetSubScorer(
            self.config.asset, neutral_score=self.config.neutral_score
        )

    def assess(self, request: ScoringRequest) -> NfsAssessment:
        """
        Score one request and keep the per-category breakdown.

        Args:
            request: Complete input for one enterprise

        Returns:
            NfsAssessment with result and sub-score assessments
        """
        financial = self._financial_scorer.score(request.financial)
        credit = self._credit_scorer.score(request.credit)
        asset = self._asset_scorer.score(request.asset)

        sub_scores = SubScores(
            financial=financial.score,
            credit=credit.score,
            asset=asset.score,
        )
        result = self.compose(request.enterprise_id, sub_scores)

        return NfsAssessment(
            result=result,
            financial=financial,
            credit=credit,
            asset=asset,
        )

    def score(self, request: ScoringRequest) -> ScoringResult:
        """Score one request."""
        return self.assess(request).result

    def score_inputs(
        self,
        financial: FinancialInput,
        credit: Optional[CreditInput] = None,
        asset: Optional[AssetInput] = None,
        enterprise_id: str = "",
    ) -> ScoringResult:
        """Score raw inputs without building a ScoringRequest first."""
        return self.score(ScoringRequest(
            enterprise_id=enterprise_id,
            financial=financial,
            credit=credit,
            asset=asset,
        ))

    def compose(self, enterprise_id: str, sub_scores: SubScores) -> ScoringResult:
        """
        Combine sub-scores into a complete result.

        Args:
            enterprise_id: Identifier carried onto the result
            sub_scores: Clamped category sub-scores

        Returns:
            ScoringResult with composite score, risk level, grade
            and recommendation
        """
        total = composite_score(sub_scores, self.config.weights)
        risk_level = determine_risk_level(total)

        return ScoringResult(
            enterprise_id=enterprise_id,
            composite_score=total,
            risk_level=risk_level.value,
            grade=determine_grade(total).value,
            sub_scores=sub_scores,
            recommendation=generate_recommendation(risk_level),
        )


# ============================================================
# COMPOSER FUNCTIONS
# ============================================================


def composite_score(
    sub_scores: SubScores,
    weights: Optional[CompositeWeights] = None,
) -> float:
    """
    Weighted sum of the three sub-scores.

    With the default weights:
        financial * 0.4 + credit * 0.3 + asset * 0.3
    """
    w = weights or CompositeWeights()
    return (
        sub_scores.financial * w.financial
        + sub_scores.credit * w.credit
        + sub_scores.asset * w.asset
    )


def determine_risk_level(score: float) -> RiskLevel:
    """Get the risk level classification for a composite score."""
    return RiskLevel.from_composite_score(score)


def determine_grade(score: float) -> NfsGrade:
    """Get the letter grade for a composite score."""
    return NfsGrade.from_composite_score(score)


def generate_recommendation(risk_level) -> str:
    """
    Look up the guidance text for a risk level.

    Accepts a RiskLevel or its string value; anything else
    yields the "unable to assess" text.
    """
    level = RiskLevel.parse(risk_level) if risk_level is not None else None
    if level is None:
        return DEFAULT_RECOMMENDATION
    return RECOMMENDATIONS.get(level, DEFAULT_RECOMMENDATION)


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def score_one(
    financial: FinancialInput,
    credit: Optional[CreditInput] = None,
    asset: Optional[AssetInput] = None,
    enterprise_id: str = "",
    config: Optional[NfsScoringConfig] = None,
) -> ScoringResult:
    """
    Convenience function to score one enterprise in one call.

    Creates a temporary engine. For repeated scoring, prefer
    creating a NfsScoringEngine instance.
    """
    engine = NfsScoringEngine(config=config)
    return engine.score_inputs(financial, credit, asset, enterprise_id=enterprise_id)


def format_score_summary(result: ScoringResult) -> str:
    """
    Format a human-readable score summary.

    Useful for logging and the command line.
    """
    lines = [
        "=" * 50,
        "NFS SCORE SUMMARY",
        "=" * 50,
        f"Enterprise:     {result.enterprise_id}",
        f"Composite:      {result.composite_score:.2f}/100",
        f"Risk Level:     {result.risk_level}",
        f"Grade:          {result.grade}",
        "",
        "Sub-scores:",
        f"  Financial:    {result.sub_scores.financial:.1f}",
        f"  Credit:       {result.sub_scores.credit:.1f}",
        f"  Asset:        {result.sub_scores.asset:.1f}",
        "",
        f"Recommendation: {result.recommendation}",
        "=" * 50,
    ]

    return "\n".join(lines)
