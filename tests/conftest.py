"""
Shared fixtures for NFS scoring tests.
"""

import pytest
from sqlalchemy.orm import sessionmaker

from database import create_all_tables, create_database_engine
from nfs_scoring import (
    AssetInput,
    CreditInput,
    FinancialInput,
    ScoringRequest,
)
from nfs_scoring import models  # noqa: F401


# ============================================================
# INPUT FIXTURES
# ============================================================

@pytest.fixture
def healthy_financial():
    """Financial figures scoring 90: margin 0.15, debt 0.2, roe 0.15."""
    return FinancialInput(
        revenue=1000,
        profit=150,
        assets=2000,
        liabilities=400,
        equity=1000,
        cash_flow=100,
    )


@pytest.fixture
def zero_financial():
    return FinancialInput(
        revenue=0,
        profit=0,
        assets=0,
        liabilities=0,
        equity=0,
        cash_flow=0,
    )


@pytest.fixture
def strong_credit():
    return CreditInput(
        credit_score=820,
        risk_level="VERY_LOW",
        default_history=False,
        late_payments=0,
    )


@pytest.fixture
def strong_asset():
    return AssetInput(
        total_assets=150_000_000,
        collateral_value=130_000_000,
        liquidity_ratio=2.5,
    )


@pytest.fixture
def make_request(healthy_financial):
    """Factory for requests with the healthy financial profile."""
    def _make(enterprise_id: str, credit=None, asset=None, financial=None):
        return ScoringRequest(
            enterprise_id=enterprise_id,
            financial=financial or healthy_financial,
            credit=credit,
            asset=asset,
        )
    return _make


# ============================================================
# DATABASE FIXTURES
# ============================================================

@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_database_engine("sqlite://")
    create_all_tables(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()
