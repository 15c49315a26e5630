"""Keeper service that periodically reassesses active loans.

The keeper is an external trigger: it resolves current collateral values
through an injected source and calls ``reassess_loan`` for each borrower.
The engine itself stays synchronous; only this host-side loop runs as an
asyncio task.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from lending_risk.core.config import EngineSettings
from lending_risk.models.exceptions import RiskEngineError
from lending_risk.models.results import ReassessmentResult

from .loan_lifecycle import LoanLifecycleManager


logger = logging.getLogger(__name__)

CollateralValueSource = Callable[[str], Optional[int]]


class LiquidationKeeper:
    """Continuously reassess borrower loans and report liquidations."""

    def __init__(
        self,
        manager: LoanLifecycleManager,
        collateral_value_source: CollateralValueSource,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self._manager = manager
        self._collateral_value_source = collateral_value_source
        self._settings = settings or EngineSettings()
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _borrowers(self) -> List[str]:
        """Configured borrowers, or every active borrower when none are configured."""
        if self._settings.keeper_borrowers:
            return list(self._settings.keeper_borrowers)
        return self._manager.list_active_borrowers()

    def run_once(self) -> List[ReassessmentResult]:
        """Execute one reassessment sweep and return the results produced."""
        borrowers = self._borrowers()
        if not borrowers:
            logger.debug("No borrowers to reassess.")
            return []

        logger.info("Keeper sweep started borrowers=%d", len(borrowers))
        results: List[ReassessmentResult] = []
        for borrower in borrowers:
            result = self._evaluate_borrower(borrower)
            if result is not None:
                results.append(result)

        liquidated = sum(1 for item in results if item.liquidated)
        logger.info("Keeper sweep finished reassessed=%d liquidated=%d", len(results), liquidated)
        return results

    def _evaluate_borrower(self, borrower: str) -> Optional[ReassessmentResult]:
        """Reassess one borrower; failures are logged and do not stop the sweep."""
        try:
            value = self._collateral_value_source(borrower)
        except Exception:
            logger.exception("Collateral value lookup failed borrower=%s", borrower)
            return None
        if value is None:
            logger.debug("No collateral value available borrower=%s", borrower)
            return None

        try:
            result = self._manager.reassess_loan(borrower, value)
        except RiskEngineError as exc:
            logger.info("Skipping borrower=%s code=%s reason=%s", borrower, exc.code.value, exc)
            return None
        except Exception:
            logger.exception("Failed reassessing borrower=%s", borrower)
            return None

        if result.liquidated:
            logger.warning(
                "Borrower liquidated by keeper borrower=%s health=%d penalty_bps=%d",
                borrower,
                result.health_ratio,
                result.liquidation_penalty,
            )
        return result

    async def start(self) -> None:
        """Start the sweep loop in a background task if enabled."""
        if not self._settings.keeper_enabled:
            logger.info("Liquidation keeper disabled by keeper.enabled=false")
            return
        if self.is_running:
            logger.info("Liquidation keeper already running.")
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run_loop(), name="liquidation-keeper")
        logger.info("Liquidation keeper started interval_sec=%d", self._settings.keeper_poll_interval_sec)

    async def stop(self) -> None:
        """Gracefully stop the background task."""
        if not self._task:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Liquidation keeper task cancelled.")
        finally:
            self._task = None

    async def _run_loop(self) -> None:
        """Main loop: sweep, then wait for the interval or a stop request."""
        logger.info("Liquidation keeper loop running.")
        stop_event = self._stop_event
        while stop_event is not None and not stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("Unhandled error during keeper sweep.")

            try:
                await asyncio.wait_for(
                    stop_event.wait(),
                    timeout=float(self._settings.keeper_poll_interval_sec),
                )
            except asyncio.TimeoutError:
                continue
