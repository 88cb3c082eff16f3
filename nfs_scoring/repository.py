"""
NFS Scoring Engine - Repository.

============================================================
PURPOSE
============================================================
Repository pattern implementation for NFS persistence.

Provides clean interface for:
- Checking that an enterprise exists
- Saving calculation records
- Querying calculation history
- Retrieving a single calculation

============================================================
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, desc, func
from sqlalchemy.orm import Session, selectinload

from .models import Enterprise, NfsCalculation
from .types import ScoringRequest, ScoringResult


class NfsCalculationRepository:
    """
    Repository for NFS persistence operations.

    ============================================================
    METHODS
    ============================================================
    - add_enterprise / get_enterprise / enterprise_exists
    - save_calculation: Persist one scored request
    - get_history: Paginated history, newest first
    - get_calculation: Single record with its enterprise
    ============================================================

    The repository never commits; transaction boundaries
    belong to the caller (see database.transaction_scope).
    """

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session
        """
        self._session = session

    # --------------------------------------------------------
    # ENTERPRISES
    # --------------------------------------------------------

    def add_enterprise(
        self,
        name: str,
        credit_code: Optional[str] = None,
        enterprise_id: Optional[str] = None,
    ) -> Enterprise:
        enterprise = Enterprise(name=name, credit_code=credit_code)
        if enterprise_id:
            enterprise.id = enterprise_id
        self._session.add(enterprise)
        self._session.flush()
        return enterprise

    def get_enterprise(self, enterprise_id: str) -> Optional[Enterprise]:
        return self._session.get(Enterprise, enterprise_id)

    def enterprise_exists(self, enterprise_id: str) -> bool:
        stmt = select(func.count()).select_from(Enterprise).where(
            Enterprise.id == enterprise_id
        )
        return self._session.execute(stmt).scalar_one() > 0

    # --------------------------------------------------------
    # WRITE OPERATIONS
    # --------------------------------------------------------

    def save_calculation(
        self,
        request: ScoringRequest,
        result: ScoringResult,
        engine_version: str = "1.0.0",
    ) -> NfsCalculation:
        """
        Save one scored request.

        Args:
            request: The request the result was computed from
            result: The engine result
            engine_version: Version of the scoring rules used

        Returns:
            Created NfsCalculation with ID and created_at set
        """
        result_data = result.to_dict()
        for key in ("id", "enterpriseId", "createdAt"):
            result_data.pop(key, None)

        calculation = NfsCalculation(
            enterprise_id=request.enterprise_id,
            input_data=request.to_dict(),
            result_data=result_data,
            score=result.composite_score,
            risk_level=result.risk_level,
            status="COMPLETED",
            engine_version=engine_version,
        )

        self._session.add(calculation)
        self._session.flush()
        return calculation

    # --------------------------------------------------------
    # READ OPERATIONS
    # --------------------------------------------------------

    def get_history(
        self,
        enterprise_id: str,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[NfsCalculation], int]:
        """
        Get calculations for an enterprise, newest first.

        Args:
            enterprise_id: Enterprise to query
            page: 1-based page number
            page_size: Records per page

        Returns:
            (records on the page, total record count)
        """
        stmt = (
            select(NfsCalculation)
            .where(NfsCalculation.enterprise_id == enterprise_id)
            .order_by(desc(NfsCalculation.created_at))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        records = list(self._session.execute(stmt).scalars().all())

        count_stmt = select(func.count()).select_from(NfsCalculation).where(
            NfsCalculation.enterprise_id == enterprise_id
        )
        total = self._session.execute(count_stmt).scalar_one()

        return records, total

    def get_calculation(self, calculation_id: str) -> Optional[NfsCalculation]:
        """
        Get a specific calculation by ID, with its enterprise loaded.

        Returns:
            NfsCalculation or None if it does not exist
        """
        stmt = (
            select(NfsCalculation)
            .options(selectinload(NfsCalculation.enterprise))
            .where(NfsCalculation.id == calculation_id)
        )
        return self._session.execute(stmt).scalar_one_or_none()
