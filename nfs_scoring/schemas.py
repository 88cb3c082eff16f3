"""
Pydantic Schemas for NFS calculation payloads.

Binds the camelCase JSON shape used by callers
({"calculations": [{"enterpriseId", "financialData", ...}]})
and converts it to engine requests. Validation errors are
raised here so the engine only ever sees well-typed input.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .exceptions import InvalidRequestError
from .types import AssetInput, CreditInput, FinancialInput, ScoringRequest


# =============================================================
# INPUT SECTIONS
# =============================================================

class FinancialData(BaseModel):
    """Raw financial figures. Zero and negative values are allowed."""
    revenue: float
    profit: float
    assets: float
    liabilities: float
    equity: float
    cash_flow: float = Field(alias="cashFlow")

    class Config:
        populate_by_name = True
        allow_inf_nan = False

    def to_input(self) -> FinancialInput:
        return FinancialInput(
            revenue=self.revenue,
            profit=self.profit,
            assets=self.assets,
            liabilities=self.liabilities,
            equity=self.equity,
            cash_flow=self.cash_flow,
        )


class CreditData(BaseModel):
    """Credit bureau data. Unknown risk levels are kept and scored as default."""
    credit_score: float = Field(alias="creditScore")
    risk_level: Optional[str] = Field(default=None, alias="riskLevel")
    default_history: bool = Field(default=False, alias="defaultHistory")
    late_payments: int = Field(default=0, ge=0, alias="latePayments")

    class Config:
        populate_by_name = True
        allow_inf_nan = False

    def to_input(self) -> CreditInput:
        return CreditInput(
            credit_score=self.credit_score,
            risk_level=self.risk_level,
            default_history=self.default_history,
            late_payments=self.late_payments,
        )


class AssetData(BaseModel):
    """Asset and collateral data."""
    total_assets: float = Field(alias="totalAssets")
    collateral_value: float = Field(alias="collateralValue")
    liquidity_ratio: float = Field(alias="liquidityRatio")

    class Config:
        populate_by_name = True
        allow_inf_nan = False

    def to_input(self) -> AssetInput:
        return AssetInput(
            total_assets=self.total_assets,
            collateral_value=self.collateral_value,
            liquidity_ratio=self.liquidity_ratio,
        )


# =============================================================
# REQUESTS
# =============================================================

class NfsCalculateItem(BaseModel):
    """One enterprise to score."""
    enterprise_id: str = Field(min_length=1, alias="enterpriseId")
    financial_data: FinancialData = Field(alias="financialData")
    credit_data: Optional[CreditData] = Field(default=None, alias="creditData")
    asset_data: Optional[AssetData] = Field(default=None, alias="assetData")

    class Config:
        populate_by_name = True

    def to_request(self) -> ScoringRequest:
        return ScoringRequest(
            enterprise_id=self.enterprise_id,
            financial=self.financial_data.to_input(),
            credit=self.credit_data.to_input() if self.credit_data else None,
            asset=self.asset_data.to_input() if self.asset_data else None,
        )


class NfsBatchRequest(BaseModel):
    """Batch payload: {"calculations": [...]}."""
    calculations: List[NfsCalculateItem]

    def to_requests(self) -> List[ScoringRequest]:
        return [item.to_request() for item in self.calculations]


# =============================================================
# LOADERS
# =============================================================

def parse_batch_payload(payload: Union[Dict[str, Any], List[Any]]) -> List[ScoringRequest]:
    """
    Validate a batch payload and convert it to engine requests.

    Accepts either {"calculations": [...]} or a bare list of
    items.

    Raises:
        InvalidRequestError: If the payload fails validation
    """
    if isinstance(payload, list):
        payload = {"calculations": payload}

    try:
        batch = NfsBatchRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(
            f"Invalid NFS batch payload: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e

    return batch.to_requests()


def load_batch_file(path: Union[str, Path]) -> List[ScoringRequest]:
    """Read a JSON batch file and convert it to engine requests."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidRequestError(f"Cannot read batch file {path}: {e}") from e

    return parse_batch_payload(payload)
