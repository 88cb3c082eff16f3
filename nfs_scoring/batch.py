"""
NFS Scoring Engine - Batch Runner.

============================================================
PURPOSE
============================================================
Applies scoring to an ordered list of requests.

============================================================
ISOLATION CONTRACT
============================================================
- Output has the same length and order as the input
- Each item is processed independently
- Any exception while processing one item (enterprise
  lookup, persistence, unexpected error) is recorded for
  that slot only; processing continues with the next item
- run() turns failed slots into placeholder results
  (score 0, risk level "ERROR", grade "E")
- run_outcomes() returns the success/failure outcomes and
  leaves the decision to the caller

============================================================
EXECUTION
============================================================
run() / run_outcomes(): sequential, item N+1 starts after
item N completes.

run_async(): items overlap under a semaphore; results are
reassembled in input order.

============================================================
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from .engine import NfsScoringEngine
from .types import BatchItemOutcome, ScoringRequest, ScoringResult


logger = logging.getLogger(__name__)


# Raises (e.g. EnterpriseNotFoundError) when the enterprise is unknown
EnterpriseCheck = Callable[[str], Union[None, Awaitable[None]]]

# Full per-item handler; defaults to check + engine.score
ItemScorer = Callable[[ScoringRequest], Union[ScoringResult, Awaitable[ScoringResult]]]


class NfsBatchRunner:
    """
    Score a batch of requests with per-item failure isolation.

    ============================================================
    HOOKS
    ============================================================
    enterprise_check: Optional pre-step run for every item.
        A raised exception fails that item only.
    item_scorer: Replaces the default "check then score" step,
        e.g. with a service call that also persists the result.
    ============================================================
    """

    def __init__(
        self,
        engine: Optional[NfsScoringEngine] = None,
        enterprise_check: Optional[EnterpriseCheck] = None,
        item_scorer: Optional[ItemScorer] = None,
        max_concurrency: int = 8,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.engine = engine or NfsScoringEngine()
        self._enterprise_check = enterprise_check
        self._item_scorer = item_scorer
        self.max_concurrency = max_concurrency

    # --------------------------------------------------------
    # SEQUENTIAL
    # --------------------------------------------------------

    def run(self, requests: Sequence[ScoringRequest]) -> List[ScoringResult]:
        """Score every request; failed slots become placeholders."""
        return [outcome.to_result() for outcome in self.run_outcomes(requests)]

    def run_outcomes(self, requests: Sequence[ScoringRequest]) -> List[BatchItemOutcome]:
        """Score every request and return per-item outcomes."""
        outcomes = [self._run_item(index, request) for index, request in enumerate(requests)]
        self._log_summary(outcomes)
        return outcomes

    def _run_item(self, index: int, request: ScoringRequest) -> BatchItemOutcome:
        try:
            if self._item_scorer is not None:
                result = self._reject_awaitable(self._item_scorer(request))
            else:
                if self._enterprise_check is not None:
                    self._reject_awaitable(self._enterprise_check(request.enterprise_id))
                result = self.engine.score(request)

            return BatchItemOutcome(index=index, enterprise_id=request.enterprise_id, result=result)
        except Exception as e:
            return self._failed(index, request, e)

    @staticmethod
    def _reject_awaitable(value):
        # Async hooks belong to run_async
        if inspect.isawaitable(value):
            close = getattr(value, "close", None)
            if close is not None:
                close()
            raise TypeError("Async hook used with run(); use run_async() instead")
        return value

    # --------------------------------------------------------
    # ASYNC
    # --------------------------------------------------------

    async def run_async(self, requests: Sequence[ScoringRequest]) -> List[ScoringResult]:
        """Async variant of run(); overlaps items, keeps input order."""
        outcomes = await self.run_outcomes_async(requests)
        return [outcome.to_result() for outcome in outcomes]

    async def run_outcomes_async(
        self,
        requests: Sequence[ScoringRequest],
    ) -> List[BatchItemOutcome]:
        """Async variant of run_outcomes()."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(index: int, request: ScoringRequest) -> BatchItemOutcome:
            async with semaphore:
                return await self._run_item_async(index, request)

        tasks = [run_one(i, r) for i, r in enumerate(requests)]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: List[BatchItemOutcome] = []
        for index, (request, result) in enumerate(zip(requests, results)):
            if isinstance(result, BatchItemOutcome):
                outcomes.append(result)
            else:
                outcomes.append(self._failed(index, request, result))

        self._log_summary(outcomes)
        return outcomes

    async def _run_item_async(self, index: int, request: ScoringRequest) -> BatchItemOutcome:
        try:
            if self._item_scorer is not None:
                result = self._item_scorer(request)
                if inspect.isawaitable(result):
                    result = await result
            else:
                if self._enterprise_check is not None:
                    checked = self._enterprise_check(request.enterprise_id)
                    if inspect.isawaitable(checked):
                        await checked
                result = self.engine.score(request)

            return BatchItemOutcome(index=index, enterprise_id=request.enterprise_id, result=result)
        except Exception as e:
            return self._failed(index, request, e)

    # --------------------------------------------------------
    # HELPERS
    # --------------------------------------------------------

    def _failed(
        self,
        index: int,
        request: ScoringRequest,
        error: BaseException,
    ) -> BatchItemOutcome:
        enterprise_id = getattr(request, "enterprise_id", "")
        logger.warning(
            f"NFS calculation failed for enterprise {enterprise_id} "
            f"(item {index}): {error}"
        )
        return BatchItemOutcome(index=index, enterprise_id=enterprise_id, error=error)

    def _log_summary(self, outcomes: List[BatchItemOutcome]) -> None:
        failed = sum(1 for o in outcomes if not o.succeeded)
        logger.info(
            f"NFS batch completed: {len(outcomes) - failed}/{len(outcomes)} succeeded"
        )


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def score_batch(
    requests: Sequence[ScoringRequest],
    engine: Optional[NfsScoringEngine] = None,
    enterprise_check: Optional[EnterpriseCheck] = None,
) -> List[ScoringResult]:
    """
    Score a batch in one call.

    Returns one result per request, in input order; failed
    items are placeholders.
    """
    runner = NfsBatchRunner(engine=engine, enterprise_check=enterprise_check)
    return runner.run(requests)
