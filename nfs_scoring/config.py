"""
NFS Scoring Engine - Configuration.

============================================================
PURPOSE
============================================================
Defines the configuration dataclasses and threshold tables
for the NFS scorers and composer.

============================================================
DESIGN PRINCIPLES
============================================================
- Thresholds are ordered (threshold, points) tiers, checked
  from best to worst; the first tier that matches wins
- Each scorer has a floor value for "no tier matched"
- Immutable configurations
- Lookup tables are read-only mappings keyed by enum

============================================================
TIER SEMANTICS
============================================================
Higher-is-better metrics ("gt" / "gte"):
    value >  threshold  (gt)
    value >= threshold  (gte)
Lower-is-better metrics ("lt" / "lte"):
    value <  threshold  (lt)
    value <= threshold  (lte)

============================================================
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .exceptions import ConfigurationError
from .types import NEUTRAL_SCORE, RiskLevel


logger = logging.getLogger(__name__)


Tiers = Tuple[Tuple[float, float], ...]


# ============================================================
# LOOKUP TABLES
# ============================================================


# Points awarded for the qualitative credit risk level (0-20)
RISK_LEVEL_POINTS: Mapping[RiskLevel, float] = MappingProxyType({
    RiskLevel.VERY_LOW: 20.0,
    RiskLevel.LOW: 15.0,
    RiskLevel.MEDIUM: 10.0,
    RiskLevel.HIGH: 5.0,
    RiskLevel.VERY_HIGH: 0.0,
})


# Guidance per composite risk level
RECOMMENDATIONS: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.VERY_LOW: (
        "Excellent financial position and strong credit; "
        "recommend approving the loan at a preferential rate"
    ),
    RiskLevel.LOW: (
        "Sound financial position and good credit record; "
        "recommend approving the loan"
    ),
    RiskLevel.MEDIUM: (
        "Average financial position; recommend approval "
        "subject to collateral or a guarantee"
    ),
    RiskLevel.HIGH: (
        "Elevated risk; proceed with caution and require "
        "additional guarantees"
    ),
    RiskLevel.VERY_HIGH: (
        "Very high risk; recommend deferring the application "
        "or requiring high-value collateral"
    ),
})

DEFAULT_RECOMMENDATION = "Unable to assess"


# ============================================================
# FINANCIAL SCORING CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class FinancialScoringConfig:
    """
    Configuration for the Financial Sub-Scorer.

    ============================================================
    COMPONENTS
    ============================================================
    - Profitability (0-30): profit / revenue
    - Leverage (0-30): liabilities / assets
    - Cash-flow coverage (0-20): cash flow vs liabilities
    - Return on equity (0-20): profit / equity
    ============================================================
    """

    profit_margin_tiers: Tiers = (
        (0.20, 30.0),
        (0.10, 25.0),
        (0.0, 20.0),
        (-0.10, 10.0),
    )

    debt_ratio_tiers: Tiers = (
        (0.3, 30.0),
        (0.5, 25.0),
        (0.7, 15.0),
        (0.9, 10.0),
    )

    # Cash flow above this share of liabilities earns full points
    cash_flow_strong_coverage: float = 0.10
    cash_flow_strong_points: float = 20.0
    cash_flow_positive_points: float = 15.0
    # Mildly negative cash flow, down to this share of liabilities
    cash_flow_tolerated_coverage: float = -0.05
    cash_flow_tolerated_points: float = 10.0

    roe_tiers: Tiers = (
        (0.20, 20.0),
        (0.10, 15.0),
        (0.05, 10.0),
        (0.0, 5.0),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profit_margin_tiers": [list(t) for t in self.profit_margin_tiers],
            "debt_ratio_tiers": [list(t) for t in self.debt_ratio_tiers],
            "cash_flow_strong_coverage": self.cash_flow_strong_coverage,
            "cash_flow_strong_points": self.cash_flow_strong_points,
            "cash_flow_positive_points": self.cash_flow_positive_points,
            "cash_flow_tolerated_coverage": self.cash_flow_tolerated_coverage,
            "cash_flow_tolerated_points": self.cash_flow_tolerated_points,
            "roe_tiers": [list(t) for t in self.roe_tiers],
        }


# ============================================================
# CREDIT SCORING CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class CreditScoringConfig:
    """
    Configuration for the Credit Sub-Scorer.

    ============================================================
    COMPONENTS
    ============================================================
    - Bureau score (0-50): floor of 5 below the lowest tier
    - Delinquency (0-30): only without a default history
    - Qualitative risk level (0-20): RISK_LEVEL_POINTS lookup
    ============================================================
    """

    bureau_score_tiers: Tiers = (
        (800.0, 50.0),
        (700.0, 45.0),
        (650.0, 35.0),
        (600.0, 25.0),
        (500.0, 15.0),
    )
    bureau_score_floor: float = 5.0

    # Exactly zero late payments
    no_late_payment_points: float = 30.0

    # Otherwise the late payment count, checked with <=
    late_payment_tiers: Tiers = (
        (2.0, 20.0),
        (5.0, 10.0),
    )

    # Points for an unknown or unspecified risk level
    default_risk_level_points: float = 10.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bureau_score_tiers": [list(t) for t in self.bureau_score_tiers],
            "bureau_score_floor": self.bureau_score_floor,
            "no_late_payment_points": self.no_late_payment_points,
            "late_payment_tiers": [list(t) for t in self.late_payment_tiers],
            "risk_level_points": {k.value: v for k, v in RISK_LEVEL_POINTS.items()},
            "default_risk_level_points": self.default_risk_level_points,
        }


# ============================================================
# ASSET SCORING CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class AssetScoringConfig:
    """
    Configuration for the Asset Sub-Scorer.

    ============================================================
    COMPONENTS
    ============================================================
    - Sufficiency (0-40): total assets in millions
    - Collateral coverage (0-30): collateral / total assets
    - Liquidity (0-30): current-ratio style liquidity ratio
    ============================================================
    """

    asset_scale: float = 1_000_000.0

    sufficiency_tiers: Tiers = (
        (100.0, 40.0),
        (50.0, 35.0),
        (10.0, 25.0),
        (1.0, 15.0),
    )
    sufficiency_floor: float = 5.0

    collateral_tiers: Tiers = (
        (0.8, 30.0),
        (0.6, 25.0),
        (0.4, 15.0),
        (0.2, 10.0),
    )

    liquidity_tiers: Tiers = (
        (2.0, 30.0),
        (1.5, 25.0),
        (1.0, 20.0),
        (0.5, 10.0),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset_scale": self.asset_scale,
            "sufficiency_tiers": [list(t) for t in self.sufficiency_tiers],
            "sufficiency_floor": self.sufficiency_floor,
            "collateral_tiers": [list(t) for t in self.collateral_tiers],
            "liquidity_tiers": [list(t) for t in self.liquidity_tiers],
        }


# ============================================================
# COMPOSITE WEIGHTS
# ============================================================


@dataclass(frozen=True)
class CompositeWeights:
    """
    Weights used by the composer.

    All weights must sum to 1.0.
    """

    financial: float = 0.4
    credit: float = 0.3
    asset: float = 0.3

    def __post_init__(self) -> None:
        """Validate weights."""
        for name in ("financial", "credit", "asset"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Weight '{name}' must not be negative")
        total = self.total()
        if abs(total - 1.0) > 0.001:
            raise ConfigurationError(
                f"Composite weights must sum to 1.0, got {total:.3f}",
                details=self.to_dict(),
            )

    def total(self) -> float:
        return self.financial + self.credit + self.asset

    def to_dict(self) -> Dict[str, float]:
        return {
            "financial": self.financial,
            "credit": self.credit,
            "asset": self.asset,
        }


# ============================================================
# MAIN CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class NfsScoringConfig:
    """
    Complete NFS engine configuration.

    Combines all sub-configurations.
    """

    financial: FinancialScoringConfig = field(default_factory=FinancialScoringConfig)
    credit: CreditScoringConfig = field(default_factory=CreditScoringConfig)
    asset: AssetScoringConfig = field(default_factory=AssetScoringConfig)
    weights: CompositeWeights = field(default_factory=CompositeWeights)

    # Sub-score used when credit or asset data is absent
    neutral_score: float = NEUTRAL_SCORE

    engine_version: str = "1.0.0"

    def __post_init__(self) -> None:
        if not 0 <= self.neutral_score <= 100:
            raise ConfigurationError(
                f"Neutral score must be within [0, 100], got {self.neutral_score}"
            )

    @classmethod
    def from_env(cls, base: Optional["NfsScoringConfig"] = None) -> "NfsScoringConfig":
        """
        Load configuration overrides from environment variables.

        Environment variables:
        - NFS_WEIGHT_FINANCIAL
        - NFS_WEIGHT_CREDIT
        - NFS_WEIGHT_ASSET
        - NFS_NEUTRAL_SCORE
        """
        config = base or cls()

        try:
            weights = config.weights
            if any(os.getenv(f"NFS_WEIGHT_{n}") for n in ("FINANCIAL", "CREDIT", "ASSET")):
                weights = CompositeWeights(
                    financial=float(os.getenv("NFS_WEIGHT_FINANCIAL", weights.financial)),
                    credit=float(os.getenv("NFS_WEIGHT_CREDIT", weights.credit)),
                    asset=float(os.getenv("NFS_WEIGHT_ASSET", weights.asset)),
                )

            neutral_score = config.neutral_score
            if os.getenv("NFS_NEUTRAL_SCORE"):
                neutral_score = float(os.getenv("NFS_NEUTRAL_SCORE"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid NFS environment setting: {e}") from e

        return replace(config, weights=weights, neutral_score=neutral_score)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "NfsScoringConfig":
        """
        Load configuration from a YAML file.

        Recognised keys:
            weights: {financial, credit, asset}
            neutral_score: float
            engine_version: str
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load YAML config from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"YAML config {path} must be a mapping")

        config = cls()

        try:
            if "weights" in data:
                w = data["weights"] or {}
                config = replace(config, weights=CompositeWeights(
                    financial=float(w.get("financial", 0.4)),
                    credit=float(w.get("credit", 0.3)),
                    asset=float(w.get("asset", 0.3)),
                ))
            if "neutral_score" in data:
                config = replace(config, neutral_score=float(data["neutral_score"]))
            if "engine_version" in data:
                config = replace(config, engine_version=str(data["engine_version"]))
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid value in YAML config {path}: {e}") from e

        logger.info(f"Loaded NFS scoring config from {path}")
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "financial": self.financial.to_dict(),
            "credit": self.credit.to_dict(),
            "asset": self.asset.to_dict(),
            "weights": self.weights.to_dict(),
            "neutral_score": self.neutral_score,
            "engine_version": self.engine_version,
        }


# ============================================================
# DEFAULT CONFIGURATION
# ============================================================


def get_default_config() -> NfsScoringConfig:
    """Return the default NFS engine configuration."""
    return NfsScoringConfig()
