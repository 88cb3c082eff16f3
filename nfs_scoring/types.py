"""
NFS Scoring Engine - Type Definitions.

============================================================
PURPOSE
============================================================
Data contracts for the Net Financing Space (NFS) engine.

This module defines the enums, inputs and outputs used by
the scorers, the composer and the batch runner.

============================================================
DESIGN PRINCIPLES
============================================================
- All inputs and results are immutable (frozen dataclasses)
- Enums for discrete classifications
- Optional credit/asset data is modelled as Optional[...]
  and resolved once, at each sub-scorer's entry point
- Clear separation between input and output types

============================================================
SCORE CATEGORIES
============================================================
The engine evaluates exactly three categories:

1. FINANCIAL - Profitability, leverage, cash flow, ROE
2. CREDIT    - Bureau score, delinquency, qualitative risk
3. ASSET     - Sufficiency, collateral coverage, liquidity

Each category produces a sub-score in [0, 100].

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================
# CONSTANTS
# ============================================================


MIN_SCORE = 0.0
MAX_SCORE = 100.0

# Score assigned to a category whose source data is absent
NEUTRAL_SCORE = 50.0

FAILED_RISK_LEVEL = "ERROR"
FAILED_GRADE = "E"
FAILED_RECOMMENDATION = "Calculation failed"


def clamp_score(value: float) -> float:
    """Clamp a score into [MIN_SCORE, MAX_SCORE]."""
    return max(MIN_SCORE, min(MAX_SCORE, float(value)))


# ============================================================
# ENUMS
# ============================================================


class ScoreCategory(str, Enum):
    """The three sub-score categories combined by the composer."""

    FINANCIAL = "financial"
    CREDIT = "credit"
    ASSET = "asset"


class RiskLevel(str, Enum):
    """
    Qualitative risk bucket.

    Used both as a credit input (bureau / analyst opinion) and
    as the derived classification of a composite score.

    Composite score ranges:
    - VERY_LOW:  >= 80
    - LOW:       >= 70
    - MEDIUM:    >= 60
    - HIGH:      >= 50
    - VERY_HIGH: below 50
    """

    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @classmethod
    def from_composite_score(cls, score: float) -> "RiskLevel":
        """
        Classify risk level from a composite score.

        Args:
            score: Composite score (0-100)

        Returns:
            Appropriate RiskLevel classification
        """
        if score >= 80:
            return cls.VERY_LOW
        elif score >= 70:
            return cls.LOW
        elif score >= 60:
            return cls.MEDIUM
        elif score >= 50:
            return cls.HIGH
        else:
            return cls.VERY_HIGH

    @classmethod
    def parse(cls, value: Any) -> Optional["RiskLevel"]:
        """Return the exactly matching level, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def severity_order(self) -> int:
        """Numeric ordering for severity comparison (higher = riskier)."""
        return {
            "VERY_LOW": 0,
            "LOW": 1,
            "MEDIUM": 2,
            "HIGH": 3,
            "VERY_HIGH": 4,
        }[self.value]


class NfsGrade(str, Enum):
    """
    Letter grade derived from the composite score.

    AAA >= 90, AA >= 80, A >= 70, BBB >= 60,
    BB >= 50, B >= 40, CCC >= 30, D below 30.
    """

    AAA = "AAA"
    AA = "AA"
    A = "A"
    BBB = "BBB"
    BB = "BB"
    B = "B"
    CCC = "CCC"
    D = "D"

    @classmethod
    def from_composite_score(cls, score: float) -> "NfsGrade":
        if score >= 90:
            return cls.AAA
        elif score >= 80:
            return cls.AA
        elif score >= 70:
            return cls.A
        elif score >= 60:
            return cls.BBB
        elif score >= 50:
            return cls.BB
        elif score >= 40:
            return cls.B
        elif score >= 30:
            return cls.CCC
        else:
            return cls.D

    @property
    def rank(self) -> int:
        """Numeric ordering (higher = better grade)."""
        return len(NfsGrade) - list(NfsGrade).index(self)


# ============================================================
# INPUT DATA CONTRACTS
# ============================================================


@dataclass(frozen=True)
class FinancialInput:
    """
    Raw financial figures for one enterprise.

    Currency units are caller-defined but must be consistent.
    Zero and negative values are valid.
    """

    revenue: float = 0.0
    profit: float = 0.0
    assets: float = 0.0
    liabilities: float = 0.0
    equity: float = 0.0
    cash_flow: float = 0.0


@dataclass(frozen=True)
class CreditInput:
    """
    Credit bureau data for one enterprise.

    risk_level is kept as given; unknown levels are scored
    with the default points rather than rejected.
    """

    credit_score: float = 0.0
    risk_level: Optional[str] = None
    default_history: bool = False
    late_payments: int = 0


@dataclass(frozen=True)
class AssetInput:
    """Asset and collateral data for one enterprise."""

    total_assets: float = 0.0
    collateral_value: float = 0.0
    liquidity_ratio: float = 0.0


@dataclass(frozen=True)
class ScoringRequest:
    """
    Complete input bundle for scoring one enterprise.

    enterprise_id is opaque to the engine; existence checks
    belong to the caller.
    """

    enterprise_id: str
    financial: FinancialInput
    credit: Optional[CreditInput] = None
    asset: Optional[AssetInput] = None

    def to_dict(self) -> Dict[str, Any]:
        """Input snapshot in the camelCase shape used by stored records."""
        payload: Dict[str, Any] = {
            "enterpriseId": self.enterprise_id,
            "financialData": {
                "revenue": self.financial.revenue,
                "profit": self.financial.profit,
                "assets": self.financial.assets,
                "liabilities": self.financial.liabilities,
                "equity": self.financial.equity,
                "cashFlow": self.financial.cash_flow,
            },
        }
        if self.credit is not None:
            payload["creditData"] = {
                "creditScore": self.credit.credit_score,
                "riskLevel": self.credit.risk_level,
                "defaultHistory": self.credit.default_history,
                "latePayments": self.credit.late_payments,
            }
        if self.asset is not None:
            payload["assetData"] = {
                "totalAssets": self.asset.total_assets,
                "collateralValue": self.asset.collateral_value,
                "liquidityRatio": self.asset.liquidity_ratio,
            }
        return payload


# ============================================================
# OUTPUT DATA CONTRACTS
# ============================================================


@dataclass(frozen=True)
class SubScoreAssessment:
    """
    Result of a single sub-scorer.

    Carries the clamped score plus the points awarded per
    component, for audit and display.
    """

    category: ScoreCategory
    score: float

    # Points per component, e.g. {"profitability": 25, ...}
    components: Dict[str, float] = field(default_factory=dict)

    # Derived ratios used to award the points
    ratios: Dict[str, float] = field(default_factory=dict)

    # True when the category had no data and the neutral score was used
    is_neutral: bool = False


@dataclass(frozen=True)
class SubScores:
    """The three category sub-scores, each in [0, 100]."""

    financial: float = 0.0
    credit: float = 0.0
    asset: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "financialScore": self.financial,
            "creditScore": self.credit,
            "assetScore": self.asset,
        }


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete output for one enterprise.

    ============================================================
    OUTPUT GUARANTEES
    ============================================================
    - composite_score: Always 0-100
    - risk_level: A RiskLevel value, or "ERROR" for a failed
      batch slot
    - grade: An NfsGrade value, or "E" for a failed batch slot
    - sub_scores: Always present, each 0-100

    calculation_id and created_at are only set once a record
    has been persisted.
    ============================================================
    """

    enterprise_id: str
    composite_score: float
    risk_level: str
    grade: str
    sub_scores: SubScores
    recommendation: str

    calculation_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def failed(cls, enterprise_id: str) -> "ScoringResult":
        """Placeholder for a batch slot whose calculation failed."""
        return cls(
            enterprise_id=enterprise_id,
            composite_score=0.0,
            risk_level=FAILED_RISK_LEVEL,
            grade=FAILED_GRADE,
            sub_scores=SubScores(),
            recommendation=FAILED_RECOMMENDATION,
        )

    @property
    def succeeded(self) -> bool:
        return self.risk_level != FAILED_RISK_LEVEL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.calculation_id or "",
            "enterpriseId": self.enterprise_id,
            "score": self.composite_score,
            "riskLevel": self.risk_level,
            "nfsGrade": self.grade,
            "factors": self.sub_scores.to_dict(),
            "recommendation": self.recommendation,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NfsAssessment:
    """A scoring result together with the per-category breakdown."""

    result: ScoringResult
    financial: SubScoreAssessment
    credit: SubScoreAssessment
    asset: SubScoreAssessment

    @property
    def all_assessments(self) -> List[SubScoreAssessment]:
        return [self.financial, self.credit, self.asset]

    def get_assessment(self, category: ScoreCategory) -> SubScoreAssessment:
        mapping = {
            ScoreCategory.FINANCIAL: self.financial,
            ScoreCategory.CREDIT: self.credit,
            ScoreCategory.ASSET: self.asset,
        }
        return mapping[category]

    def to_dict(self) -> Dict[str, Any]:
        payload = self.result.to_dict()
        payload["breakdown"] = {
            a.category.value: {
                "score": a.score,
                "components": dict(a.components),
                "ratios": dict(a.ratios),
                "neutral": a.is_neutral,
            }
            for a in self.all_assessments
        }
        return payload


@dataclass(frozen=True)
class BatchItemOutcome:
    """
    Per-item outcome of a batch run.

    Exactly one of result / error is set.
    """

    index: int
    enterprise_id: str
    result: Optional[ScoringResult] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None

    def to_result(self) -> ScoringResult:
        """Return the scored result, or the failure placeholder."""
        if self.succeeded:
            return self.result
        return ScoringResult.failed(self.enterprise_id)
