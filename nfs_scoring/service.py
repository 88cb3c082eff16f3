"""
NFS Scoring Engine - Calculation Service.

============================================================
PURPOSE
============================================================
Wires the pure engine to its collaborators:

    enterprise check -> engine -> persistence

calculate_single() raises on a missing enterprise or a
persistence failure. calculate_batch() runs items through
NfsBatchRunner, so those failures become isolated failed
slots instead.

============================================================
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import sessionmaker

from database import transaction_scope

from .batch import NfsBatchRunner
from .engine import NfsScoringEngine
from .exceptions import CalculationNotFoundError, EnterpriseNotFoundError
from .repository import NfsCalculationRepository
from .types import ScoringRequest, ScoringResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass(frozen=True)
class CalculationHistory:
    data: List[Dict[str, Any]]
    pagination: Pagination

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "pagination": self.pagination.to_dict()}


class NfsService:
    """
    Calculation service over the engine and the repository.

    Each calculate_single() call runs in its own transaction.
    """

    def __init__(
        self,
        engine: Optional[NfsScoringEngine] = None,
        session_factory: Optional[sessionmaker] = None,
    ):
        self.engine = engine or NfsScoringEngine()
        self._session_factory = session_factory

    def calculate_single(self, request: ScoringRequest) -> ScoringResult:
        """
        Score and persist one request.

        Raises:
            EnterpriseNotFoundError: If the enterprise is unknown
            DatabasePersistenceError: If the record cannot be stored
        """
        with transaction_scope(self._session_factory) as session:
            repository = NfsCalculationRepository(session)

            if not repository.enterprise_exists(request.enterprise_id):
                raise EnterpriseNotFoundError(request.enterprise_id)

            result = self.engine.score(request)
            calculation = repository.save_calculation(
                request,
                result,
                engine_version=self.engine.config.engine_version,
            )

            logger.info(
                f"NFS calculation {calculation.id} stored for enterprise "
                f"{request.enterprise_id}: score={result.composite_score:.2f} "
                f"grade={result.grade}"
            )

            return replace(
                result,
                calculation_id=calculation.id,
                created_at=calculation.created_at,
            )

    def calculate_batch(self, requests: Sequence[ScoringRequest]) -> List[ScoringResult]:
        """Score and persist a batch; failed items become placeholders."""
        runner = NfsBatchRunner(engine=self.engine, item_scorer=self.calculate_single)
        return runner.run(requests)

    def get_history(
        self,
        enterprise_id: str,
        page: int = 1,
        page_size: int = 20,
    ) -> CalculationHistory:
        """Paginated calculation history for an enterprise, newest first."""
        page = max(1, page)
        page_size = max(1, page_size)

        with transaction_scope(self._session_factory) as session:
            repository = NfsCalculationRepository(session)
            records, total = repository.get_history(enterprise_id, page, page_size)
            data = [record.to_dict() for record in records]

        return CalculationHistory(
            data=data,
            pagination=Pagination(page=page, page_size=page_size, total=total),
        )

    def get_result(self, calculation_id: str) -> Dict[str, Any]:
        """
        Get one stored calculation with its enterprise.

        Raises:
            CalculationNotFoundError: If no such calculation exists
        """
        with transaction_scope(self._session_factory) as session:
            repository = NfsCalculationRepository(session)
            calculation = repository.get_calculation(calculation_id)
            if calculation is None:
                raise CalculationNotFoundError(calculation_id)
            return calculation.to_dict(include_enterprise=True)

    def register_enterprise(
        self,
        name: str,
        credit_code: Optional[str] = None,
        enterprise_id: Optional[str] = None,
    ) -> str:
        """Create an enterprise record and return its id."""
        with transaction_scope(self._session_factory) as session:
            repository = NfsCalculationRepository(session)
            enterprise = repository.add_enterprise(name, credit_code, enterprise_id)
            return enterprise.id
