"""
NFS Scoring Engine - Package.

============================================================
PURPOSE
============================================================
The Net Financing Space (NFS) engine scores an enterprise's
creditworthiness and financing capacity from its financial,
credit and asset data.

============================================================
WHAT IT IS
============================================================
- Deterministic, rule-based, threshold scoring
- Pure and stateless: same input, same output
- Total: zeros and negative figures never raise
- Batch runner with per-item failure isolation

============================================================
WHAT IT IS NOT
============================================================
- NOT a learned or statistical model
- NOT a streaming or distributed system
- NOT responsible for persistence (see service/repository)

============================================================
SCORING
============================================================
Sub-scores, each 0-100:
- FINANCIAL: profitability, leverage, cash flow, ROE
- CREDIT: bureau score, delinquency, risk level (50 if absent)
- ASSET: sufficiency, collateral, liquidity (50 if absent)

Composite = 0.4 * financial + 0.3 * credit + 0.3 * asset

Risk level: VERY_LOW >= 80, LOW >= 70, MEDIUM >= 60,
            HIGH >= 50, VERY_HIGH below 50
Grade: AAA >= 90, AA >= 80, A >= 70, BBB >= 60, BB >= 50,
       B >= 40, CCC >= 30, D below 30

============================================================
USAGE
============================================================
    from nfs_scoring import score_one, FinancialInput

    result = score_one(FinancialInput(
        revenue=1000, profit=150, assets=2000,
        liabilities=400, equity=1000, cash_flow=100,
    ))

    print(result.composite_score, result.risk_level, result.grade)
    # 66.0 MEDIUM BBB

============================================================
"""

# Types
from .types import (
    # Constants
    NEUTRAL_SCORE,
    FAILED_RISK_LEVEL,
    FAILED_GRADE,
    FAILED_RECOMMENDATION,

    # Enums
    ScoreCategory,
    RiskLevel,
    NfsGrade,

    # Input types
    FinancialInput,
    CreditInput,
    AssetInput,
    ScoringRequest,

    # Output types
    SubScoreAssessment,
    SubScores,
    ScoringResult,
    NfsAssessment,
    BatchItemOutcome,
)

# Exceptions
from .exceptions import (
    NfsScoringError,
    EnterpriseNotFoundError,
    CalculationNotFoundError,
    InvalidRequestError,
    ConfigurationError,
)

# Configuration
from .config import (
    FinancialScoringConfig,
    CreditScoringConfig,
    AssetScoringConfig,
    CompositeWeights,
    NfsScoringConfig,
    RISK_LEVEL_POINTS,
    RECOMMENDATIONS,
    get_default_config,
)

# Scorers
from .scorers import (
    BaseSubScorer,
    FinancialSubScorer,
    CreditSubScorer,
    AssetSubScorer,
)

# Engine
from .engine import (
    NfsScoringEngine,
    score_one,
    composite_score,
    determine_risk_level,
    determine_grade,
    generate_recommendation,
    format_score_summary,
)

# Batch
from .batch import (
    NfsBatchRunner,
    score_batch,
)

# Binding
from .schemas import (
    NfsCalculateItem,
    NfsBatchRequest,
    parse_batch_payload,
    load_batch_file,
)


__all__ = [
    # Constants
    "NEUTRAL_SCORE",
    "FAILED_RISK_LEVEL",
    "FAILED_GRADE",
    "FAILED_RECOMMENDATION",

    # Enums
    "ScoreCategory",
    "RiskLevel",
    "NfsGrade",

    # Input types
    "FinancialInput",
    "CreditInput",
    "AssetInput",
    "ScoringRequest",

    # Output types
    "SubScoreAssessment",
    "SubScores",
    "ScoringResult",
    "NfsAssessment",
    "BatchItemOutcome",

    # Exceptions
    "NfsScoringError",
    "EnterpriseNotFoundError",
    "CalculationNotFoundError",
    "InvalidRequestError",
    "ConfigurationError",

    # Configuration
    "FinancialScoringConfig",
    "CreditScoringConfig",
    "AssetScoringConfig",
    "CompositeWeights",
    "NfsScoringConfig",
    "RISK_LEVEL_POINTS",
    "RECOMMENDATIONS",
    "get_default_config",

    # Scorers
    "BaseSubScorer",
    "FinancialSubScorer",
    "CreditSubScorer",
    "AssetSubScorer",

    # Engine
    "NfsScoringEngine",
    "score_one",
    "composite_score",
    "determine_risk_level",
    "determine_grade",
    "generate_recommendation",
    "format_score_summary",

    # Batch
    "NfsBatchRunner",
    "score_batch",

    # Binding
    "NfsCalculateItem",
    "NfsBatchRequest",
    "parse_batch_payload",
    "load_batch_file",
]


__version__ = "1.0.0"
