"""Loan lifecycle orchestration: creation, top-up, repayment and reassessment.

State machine per borrower::

    NonExistent -> ACTIVE -> ACTIVE (reassessed)
                          -> REPAID      (terminal)
                          -> LIQUIDATED  (terminal)

Every public operation reads its records, computes the new state with the
pure functions in ``risk_calculator`` and ``reputation_tracker``, and
writes the results back inside one store transaction. The manager never
moves value; it only reports amounts.
"""

import logging
from typing import List, Optional

from lending_risk.common.protocol_constants import MAX_RISK_SCORE_BPS
from lending_risk.core.clock import BlockClock
from lending_risk.core.config import EngineSettings
from lending_risk.models.enums import LoanStatus, ReassessmentAction, ReputationEvent
from lending_risk.models.exceptions import (
    InsufficientCollateralError,
    InvalidAmountError,
    LoanAlreadyExistsError,
    LoanNotFoundError,
    RiskEngineError,
)
from lending_risk.models.loans import LoanModel
from lending_risk.models.profiles import BorrowerProfileModel
from lending_risk.models.repositories import LoanStore
from lending_risk.models.results import LoanHealthSnapshot, LoanTerms, ReassessmentResult
from lending_risk.models.risk_parameters import GlobalRiskParametersModel

from . import reputation_tracker, risk_calculator
from .parameter_store import ParameterStore


logger = logging.getLogger(__name__)


def _require_amount(name: str, value: int, allow_zero: bool = False) -> int:
    """Validate an integer token amount.

    Raises:
        InvalidAmountError: If ``value`` is not an int, is negative, or is
            zero while ``allow_zero`` is False.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError("{0} must be an integer amount".format(name))
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidAmountError("{0} must be greater than 0".format(name))
    return value


class LoanLifecycleManager:
    """Public operation surface of the risk engine."""

    def __init__(
        self,
        store: LoanStore,
        clock: BlockClock,
        parameter_store: ParameterStore,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._parameter_store = parameter_store
        self._settings = settings or EngineSettings()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_active_loan(self, borrower: str) -> LoanModel:
        loan = self._store.get_loan(borrower)
        if loan is None or not loan.is_active:
            raise LoanNotFoundError("No active loan for borrower {0!r}".format(borrower))
        return loan

    def _load_profile(self, borrower: str) -> BorrowerProfileModel:
        return self._store.get_profile(borrower) or reputation_tracker.default_profile(borrower)

    def _ensure_can_open(self, borrower: str) -> None:
        existing = self._store.get_loan(borrower)
        if existing is None:
            return
        if existing.is_active or not self._settings.allow_reborrow_after_close:
            raise LoanAlreadyExistsError(
                "Loan record already exists for borrower {0!r} status={1}".format(borrower, existing.status.value)
            )
        logger.info("Replacing closed loan record borrower=%s status=%s", borrower, existing.status.value)

    # ------------------------------------------------------------------
    # Borrower operations
    # ------------------------------------------------------------------

    def create_loan(self, caller: str, collateral: int, debt: int) -> LoanTerms:
        """Open a loan for ``caller``.

        Args:
            caller: Borrower identity opening the loan.
            collateral: Collateral posted, in collateral asset units.
            debt: Amount borrowed, in debt asset units.

        Returns:
            LoanTerms: ``(loan_amount, interest_rate, risk_score)``.

        Raises:
            InvalidAmountError: If either amount is not a positive integer.
            LoanAlreadyExistsError: If the caller already has a loan record.
            InsufficientCollateralError: If coverage is below 110 %.
        """
        try:
            _require_amount("collateral", collateral)
            _require_amount("debt", debt)
            with self._store.transaction():
                self._ensure_can_open(caller)

                ratio = risk_calculator.health_ratio(collateral, debt)
                if not risk_calculator.meets_creation_floor(ratio):
                    raise InsufficientCollateralError(
                        "Health ratio {0} bps is below the creation floor".format(ratio)
                    )

                profile = self._load_profile(caller)
                parameters = self._parameter_store.get_parameters()
                rate = risk_calculator.interest_rate(ratio, profile.reputation_score)
                score = risk_calculator.risk_score(ratio, parameters.volatility_index, profile.defaults)
                now = self._clock.now()

                loan = LoanModel(
                    borrower=caller,
                    collateral_amount=collateral,
                    loan_amount=debt,
                    interest_rate=rate,
                    risk_score=score,
                    last_update_block=now,
                    created_block=now,
                )
                self._store.put_loan(caller, loan)
                self._store.put_profile(caller, reputation_tracker.register_new_loan(profile))

            logger.info(
                "Loan created borrower=%s collateral=%d debt=%d health=%d rate=%d score=%d block=%d",
                caller,
                collateral,
                debt,
                ratio,
                rate,
                score,
                now,
            )
            return LoanTerms(loan_amount=debt, interest_rate=rate, risk_score=score)
        except RiskEngineError as exc:
            logger.warning("Create loan rejected borrower=%s code=%s reason=%s", caller, exc.code.value, exc)
            raise
        except Exception:
            logger.exception("Failed creating loan borrower=%s", caller)
            raise

    def add_collateral(self, caller: str, amount: int) -> LoanModel:
        """Top up collateral on the caller's active loan.

        Debt, rate, score and the update block are left as they are.

        Raises:
            InvalidAmountError: If ``amount`` is not a positive integer.
            LoanNotFoundError: If the caller has no active loan.
        """
        try:
            _require_amount("amount", amount)
            with self._store.transaction():
                loan = self._load_active_loan(caller)
                updated = loan.copy_with(collateral_amount=loan.collateral_amount + amount)
                stored = self._store.put_loan(caller, updated)
            logger.info(
                "Collateral added borrower=%s amount=%d total=%d",
                caller,
                amount,
                stored.collateral_amount,
            )
            return stored
        except RiskEngineError as exc:
            logger.warning("Add collateral rejected borrower=%s code=%s reason=%s", caller, exc.code.value, exc)
            raise
        except Exception:
            logger.exception("Failed adding collateral borrower=%s", caller)
            raise

    def repay_loan(self, caller: str) -> int:
        """Close the caller's active loan as repaid.

        Returns:
            int: Collateral owed back to the caller. Transferring it is the
            host's responsibility.

        Raises:
            LoanNotFoundError: If the caller has no active loan.
        """
        try:
            with self._store.transaction():
                loan = self._load_active_loan(caller)
                now = max(self._clock.now(), loan.last_update_block)
                closed = loan.copy_with(is_active=False, status=LoanStatus.REPAID, closed_block=now)
                profile = reputation_tracker.apply_event(self._load_profile(caller), ReputationEvent.REPAY)
                self._store.put_loan(caller, closed)
                self._store.put_profile(caller, profile)
            logger.info(
                "Loan repaid borrower=%s debt=%d collateral_returned=%d block=%d",
                caller,
                loan.loan_amount,
                loan.collateral_amount,
                now,
            )
            return loan.collateral_amount
        except RiskEngineError as exc:
            logger.warning("Repay rejected borrower=%s code=%s reason=%s", caller, exc.code.value, exc)
            raise
        except Exception:
            logger.exception("Failed repaying loan borrower=%s", caller)
            raise

    # ------------------------------------------------------------------
    # Keeper operation
    # ------------------------------------------------------------------

    def reassess_loan(self, borrower: str, current_collateral_value: int) -> ReassessmentResult:
        """Accrue interest, re-price risk and liquidate when coverage is too low.

        Any caller may trigger this. With ``blocks_elapsed`` blocks since
        the last update::

            interest     = debt * rate * blocks // (52560 * 10000)
            total_debt   = debt + interest
            health       = value * 10000 // total_debt
            score        = risk_score(health, volatility, defaults) + blocks // 1000
            rate'        = interest_rate(health, reputation) * factor // 10000

        Below 10500 bps the loan is liquidated: only its status changes and
        the borrower records a default. Otherwise the loan carries the new
        debt, rate and clamped score forward.

        Raises:
            InvalidAmountError: If ``current_collateral_value`` is negative
                or not an integer.
            LoanNotFoundError: If there is no active loan or no profile.
        """
        try:
            _require_amount("current_collateral_value", current_collateral_value, allow_zero=True)
            with self._store.transaction():
                loan = self._load_active_loan(borrower)
                profile = self._store.get_profile(borrower)
                if profile is None:
                    raise LoanNotFoundError("No borrower profile for {0!r}".format(borrower))
                parameters = self._parameter_store.get_parameters()

                now = self._clock.now()
                blocks_elapsed = now - loan.last_update_block
                if blocks_elapsed < 0:
                    logger.warning(
                        "Clock behind last update borrower=%s now=%d last_update=%d; treating as zero elapsed",
                        borrower,
                        now,
                        loan.last_update_block,
                    )
                    blocks_elapsed = 0
                    now = loan.last_update_block

                interest = risk_calculator.accrued_interest(loan.loan_amount, loan.interest_rate, blocks_elapsed)
                total_debt = loan.loan_amount + interest
                new_health = risk_calculator.health_ratio(current_collateral_value, total_debt)
                adjusted_score = risk_calculator.risk_score(
                    new_health,
                    parameters.volatility_index,
                    profile.defaults,
                ) + risk_calculator.time_risk_increase(blocks_elapsed)
                adjusted_rate = risk_calculator.adjust_rate(
                    risk_calculator.interest_rate(new_health, profile.reputation_score),
                    parameters.risk_adjustment_factor,
                )

                if risk_calculator.is_liquidatable(new_health):
                    result = self._liquidate(
                        loan, profile, parameters, now, new_health, adjusted_score, interest, total_debt, blocks_elapsed
                    )
                else:
                    result = self._carry_forward(
                        loan, now, new_health, adjusted_score, adjusted_rate, interest, total_debt, blocks_elapsed
                    )
            return result
        except RiskEngineError as exc:
            logger.warning("Reassessment rejected borrower=%s code=%s reason=%s", borrower, exc.code.value, exc)
            raise
        except Exception:
            logger.exception("Failed reassessing loan borrower=%s", borrower)
            raise

    def _liquidate(
        self,
        loan: LoanModel,
        profile: BorrowerProfileModel,
        parameters: GlobalRiskParametersModel,
        now: int,
        new_health: int,
        adjusted_score: int,
        interest: int,
        total_debt: int,
        blocks_elapsed: int,
    ) -> ReassessmentResult:
        """Close the loan as liquidated; amounts stay as they were before reassessment."""
        closed = loan.copy_with(is_active=False, status=LoanStatus.LIQUIDATED, closed_block=now)
        self._store.put_loan(loan.borrower, closed)
        self._store.put_profile(loan.borrower, reputation_tracker.apply_event(profile, ReputationEvent.DEFAULT))
        logger.warning(
            "Loan liquidated borrower=%s health=%d total_debt=%d penalty_bps=%d block=%d",
            loan.borrower,
            new_health,
            total_debt,
            parameters.liquidation_penalty,
            now,
        )
        return ReassessmentResult(
            borrower=loan.borrower,
            action=ReassessmentAction.LIQUIDATED,
            health_ratio=new_health,
            risk_score=adjusted_score,
            new_interest_rate=0,
            liquidation_penalty=parameters.liquidation_penalty,
            interest_accrued=interest,
            total_debt=total_debt,
            blocks_elapsed=blocks_elapsed,
        )

    def _carry_forward(
        self,
        loan: LoanModel,
        now: int,
        new_health: int,
        adjusted_score: int,
        adjusted_rate: int,
        interest: int,
        total_debt: int,
        blocks_elapsed: int,
    ) -> ReassessmentResult:
        """Keep the loan active with accrued debt and re-priced risk."""
        clamped_score = min(adjusted_score, MAX_RISK_SCORE_BPS)
        updated = loan.copy_with(
            loan_amount=total_debt,
            interest_rate=adjusted_rate,
            risk_score=clamped_score,
            last_update_block=now,
        )
        self._store.put_loan(loan.borrower, updated)
        logger.info(
            "Loan reassessed borrower=%s health=%d interest=%d total_debt=%d rate=%d score=%d block=%d",
            loan.borrower,
            new_health,
            interest,
            total_debt,
            adjusted_rate,
            clamped_score,
            now,
        )
        return ReassessmentResult(
            borrower=loan.borrower,
            action=ReassessmentAction.UPDATED,
            health_ratio=new_health,
            risk_score=clamped_score,
            new_interest_rate=adjusted_rate,
            liquidation_penalty=0,
            interest_accrued=interest,
            total_debt=total_debt,
            blocks_elapsed=blocks_elapsed,
        )

    # ------------------------------------------------------------------
    # Administrator operations
    # ------------------------------------------------------------------

    def set_global_volatility(self, caller: str, new_value: int) -> GlobalRiskParametersModel:
        """Administrator-only update of the volatility index (0..10000)."""
        return self._parameter_store.set_volatility(caller, new_value)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def get_loan(self, borrower: str) -> Optional[LoanModel]:
        """Return the borrower's loan record in any state."""
        return self._store.get_loan(borrower)

    def get_profile(self, borrower: str) -> Optional[BorrowerProfileModel]:
        """Return the borrower's profile, if one was ever created."""
        return self._store.get_profile(borrower)

    def get_global_parameters(self) -> GlobalRiskParametersModel:
        return self._parameter_store.get_parameters()

    def get_loan_health(self, borrower: str, current_collateral_value: int) -> LoanHealthSnapshot:
        """Preview coverage of the recorded debt at a collateral value, without accrual.

        Raises:
            InvalidAmountError: If the value is negative or not an integer.
            LoanNotFoundError: If the borrower has no active loan.
        """
        _require_amount("current_collateral_value", current_collateral_value, allow_zero=True)
        loan = self._load_active_loan(borrower)
        ratio = risk_calculator.health_ratio(current_collateral_value, loan.loan_amount)
        return LoanHealthSnapshot(
            borrower=borrower,
            collateral_value=current_collateral_value,
            debt=loan.loan_amount,
            health_ratio=ratio,
            risk_tier=risk_calculator.risk_tier(ratio),
            is_liquidatable=risk_calculator.is_liquidatable(ratio),
        )

    def list_active_borrowers(self) -> List[str]:
        """Borrowers whose loan is still active, sorted."""
        active: List[str] = []
        for borrower in self._store.list_borrowers():
            loan = self._store.get_loan(borrower)
            if loan is not None and loan.is_active:
                active.append(borrower)
        return active
