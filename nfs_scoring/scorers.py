"""
NFS Scoring Engine - Sub-Scorers.

============================================================
PURPOSE
============================================================
Individual scorers for each category.

Each scorer:
1. Takes typed input data (or None when the data is absent)
2. Derives its ratios, replacing impossible divisions with 0
3. Awards tiered points per component
4. Returns a SubScoreAssessment clamped to [0, 100]

============================================================
DESIGN PRINCIPLES
============================================================
- Pure functions: same input = same output
- No external state or side effects
- Never raises for numeric input, including zeros and
  negative values
- Absent optional data resolves to the neutral score at the
  scorer's single entry point

============================================================
TIER LOGIC PATTERN
============================================================
For each component:
    for threshold, points in tiers (best first):
        if value beats threshold:
            award points
    otherwise award the floor

Final score = clamp(sum of components, 0, 100)

============================================================
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from .config import (
    RISK_LEVEL_POINTS,
    AssetScoringConfig,
    CreditScoringConfig,
    FinancialScoringConfig,
    Tiers,
)
from .types import (
    NEUTRAL_SCORE,
    AssetInput,
    CreditInput,
    FinancialInput,
    RiskLevel,
    ScoreCategory,
    SubScoreAssessment,
    clamp_score,
)


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


# ============================================================
# BASE SCORER
# ============================================================


class BaseSubScorer(ABC):
    """
    Abstract base class for category sub-scorers.

    Provides the tier lookup and the final packaging
    of a SubScoreAssessment.
    """

    @property
    @abstractmethod
    def category(self) -> ScoreCategory:
        """Return the category this scorer handles."""
        pass

    def _tier_points(
        self,
        value: float,
        tiers: Tiers,
        comparison: str = "gt",  # gt, gte, lt, lte
        floor: float = 0.0,
    ) -> float:
        """
        Award points for a value against ordered tiers.

        Args:
            value: The metric value to check
            tiers: (threshold, points) pairs, best tier first
            comparison: How the value must relate to a threshold
                - "gt": value > threshold (higher is better)
                - "gte": value >= threshold (higher is better)
                - "lt": value < threshold (lower is better)
                - "lte": value <= threshold (lower is better)
            floor: Points when no tier matches

        Returns:
            Points of the first matching tier, else floor
        """
        for threshold, points in tiers:
            if comparison == "gt" and value > threshold:
                return points
            elif comparison == "gte" and value >= threshold:
                return points
            elif comparison == "lt" and value < threshold:
                return points
            elif comparison == "lte" and value <= threshold:
                return points
        return floor

    def _assessment(
        self,
        components: Dict[str, float],
        ratios: Optional[Dict[str, float]] = None,
    ) -> SubScoreAssessment:
        return SubScoreAssessment(
            category=self.category,
            score=clamp_score(sum(components.values())),
            components=components,
            ratios=ratios or {},
        )

    def _neutral(self, neutral_score: float) -> SubScoreAssessment:
        return SubScoreAssessment(
            category=self.category,
            score=clamp_score(neutral_score),
            is_neutral=True,
        )


# ============================================================
# FINANCIAL SCORER
# ============================================================


class FinancialSubScorer(BaseSubScorer):
    """
    Score raw financial figures.

    ============================================================
    COMPONENTS
    ============================================================
    1. Profitability (0-30): profit / revenue; no points when
       revenue <= 0
    2. Leverage (0-30): liabilities / assets, assets taken as 1
       when not positive
    3. Cash-flow coverage (0-20)
    4. Return on equity (0-20): profit / equity, 0 if equity <= 0
    ============================================================
    """

    def __init__(self, config: Optional[FinancialScoringConfig] = None):
        self.config = config or FinancialScoringConfig()

    @property
    def category(self) -> ScoreCategory:
        return ScoreCategory.FINANCIAL

    def score(self, data: FinancialInput) -> SubScoreAssessment:
        """
        Score financial data.

        Args:
            data: FinancialInput with raw figures

        Returns:
            SubScoreAssessment with component points
        """
        cfg = self.config

        profit_margin = safe_ratio(data.profit, data.revenue)
        # Non-positive assets fall back to a denominator of 1, so the
        # ratio equals the liabilities figure itself.
        debt_ratio = data.liabilities / (data.assets if data.assets > 0 else 1)
        roe = safe_ratio(data.profit, data.equity)

        # Without revenue there is no margin to reward.
        if data.revenue > 0:
            profitability = self._tier_points(profit_margin, cfg.profit_margin_tiers, "gt")
        else:
            profitability = 0.0

        components = {
            "profitability": profitability,
            "leverage": self._tier_points(debt_ratio, cfg.debt_ratio_tiers, "lt"),
            "cash_flow": self._cash_flow_points(data),
            "return_on_equity": self._tier_points(roe, cfg.roe_tiers, "gt"),
        }
        ratios = {
            "profit_margin": profit_margin,
            "debt_ratio": debt_ratio,
            "roe": roe,
        }
        return self._assessment(components, ratios)

    def _cash_flow_points(self, data: FinancialInput) -> float:
        cfg = self.config
        if data.cash_flow > data.liabilities * cfg.cash_flow_strong_coverage:
            return cfg.cash_flow_strong_points
        elif data.cash_flow > 0:
            return cfg.cash_flow_positive_points
        elif data.cash_flow > data.liabilities * cfg.cash_flow_tolerated_coverage:
            return cfg.cash_flow_tolerated_points
        return 0.0


# ============================================================
# CREDIT SCORER
# ============================================================


class CreditSubScorer(BaseSubScorer):
    """
    Score credit bureau data.

    ============================================================
    COMPONENTS
    ============================================================
    1. Bureau score (0-50)
    2. Delinquency (0-30): zero whenever there is a default
       history
    3. Qualitative risk level (0-20): unknown levels score the
       configured default
    ============================================================
    """

    def __init__(
        self,
        config: Optional[CreditScoringConfig] = None,
        neutral_score: float = NEUTRAL_SCORE,
    ):
        self.config = config or CreditScoringConfig()
        self.neutral_score = neutral_score

    @property
    def category(self) -> ScoreCategory:
        return ScoreCategory.CREDIT

    def score(self, data: Optional[CreditInput]) -> SubScoreAssessment:
        """Score credit data, or return the neutral score when absent."""
        if data is None:
            return self._neutral(self.neutral_score)

        cfg = self.config

        if data.default_history:
            delinquency = 0.0
        elif data.late_payments == 0:
            delinquency = cfg.no_late_payment_points
        else:
            delinquency = self._tier_points(
                data.late_payments, cfg.late_payment_tiers, "lte"
            )

        components = {
            "bureau_score": self._tier_points(
                data.credit_score,
                cfg.bureau_score_tiers,
                "gte",
                floor=cfg.bureau_score_floor,
            ),
            "delinquency": delinquency,
            "risk_level": self._risk_level_points(data.risk_level),
        }
        return self._assessment(components)

    def _risk_level_points(self, value: Optional[str]) -> float:
        level = RiskLevel.parse(value) if value is not None else None
        if level is None:
            return self.config.default_risk_level_points
        return RISK_LEVEL_POINTS[level]


# ============================================================
# ASSET SCORER
# ============================================================


class AssetSubScorer(BaseSubScorer):
    """
    Score asset and collateral data.

    ============================================================
    COMPONENTS
    ============================================================
    1. Sufficiency (0-40): total assets in millions
    2. Collateral coverage (0-30): collateral / total assets
    3. Liquidity (0-30)
    ============================================================
    """

    def __init__(
        self,
        config: Optional[AssetScoringConfig] = None,
        neutral_score: float = NEUTRAL_SCORE,
    ):
        self.config = config or AssetScoringConfig()
        self.neutral_score = neutral_score

    @property
    def category(self) -> ScoreCategory:
        return ScoreCategory.ASSET

    def score(self, data: Optional[AssetInput]) -> SubScoreAssessment:
        """Score asset data, or return the neutral score when absent."""
        if data is None:
            return self._neutral(self.neutral_score)

        cfg = self.config

        asset_ratio = data.total_assets / cfg.asset_scale if data.total_assets > 0 else 0.0
        collateral_ratio = safe_ratio(data.collateral_value, data.total_assets)

        components = {
            "sufficiency": self._tier_points(
                asset_ratio, cfg.sufficiency_tiers, "gt", floor=cfg.sufficiency_floor
            ),
            "collateral": self._tier_points(collateral_ratio, cfg.collateral_tiers, "gt"),
            "liquidity": self._tier_points(data.liquidity_ratio, cfg.liquidity_tiers, "gt"),
        }
        ratios = {
            "asset_ratio": asset_ratio,
            "collateral_ratio": collateral_ratio,
            "liquidity_ratio": data.liquidity_ratio,
        }
        return self._assessment(components, ratios)
