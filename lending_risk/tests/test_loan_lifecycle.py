"""Integration tests for the loan lifecycle manager."""

import unittest

from lending_risk.core.clock import BlockClock, ManualBlockClock
from lending_risk.core.config import EngineSettings
from lending_risk.main import create_engine
from lending_risk.models.enums import LoanStatus, ReassessmentAction, RiskTier
from lending_risk.models.exceptions import (
    InsufficientCollateralError,
    InvalidAmountError,
    InvalidRiskParamsError,
    LoanAlreadyExistsError,
    LoanNotFoundError,
    UnauthorizedError,
)
from lending_risk.models.loans import LoanModel
from lending_risk.repositories import InMemoryLoanStore
from lending_risk.services import LoanLifecycleManager, ParameterStore, StaticAccessPolicy


ADMIN = "protocol-admin"


class FakeClock(BlockClock):
    """Clock whose height tests set directly."""

    def __init__(self, height: int) -> None:
        self.height = height

    def now(self) -> int:
        return self.height


class FailingProfileStore(InMemoryLoanStore):
    """Store whose profile writes always fail."""

    def put_profile(self, borrower, profile):
        raise RuntimeError("profile write failed")


def _engine(**settings_overrides):
    settings = EngineSettings(**settings_overrides)
    clock = ManualBlockClock()
    store = InMemoryLoanStore()
    engine = create_engine(settings=settings, store=store, clock=clock)
    return engine, clock, store


class CreateLoanTests(unittest.TestCase):
    """Loan opening rules."""

    def setUp(self) -> None:
        self.engine, self.clock, self.store = _engine()

    def test_create_returns_terms(self) -> None:
        """Open a loan and return its terms."""
        self.assertEqual(self.engine.create_loan("alice", 2000, 1000), (1000, 125, 2500))
        loan = self.engine.get_loan("alice")
        self.assertTrue(loan.is_active)
        self.assertEqual(loan.collateral_amount, 2000)
        self.assertEqual(loan.last_update_block, 0)
        self.assertEqual(self.engine.get_profile("alice").total_loans_taken, 1)

    def test_creation_floor_is_inclusive(self) -> None:
        """Accept 110% coverage and reject anything below."""
        self.assertEqual(self.engine.create_loan("alice", 11_000, 10_000), (10_000, 375, 2500))
        with self.assertRaises(InsufficientCollateralError):
            self.engine.create_loan("bob", 10_999, 10_000)
        self.assertIsNone(self.engine.get_loan("bob"))
        self.assertIsNone(self.engine.get_profile("bob"))

    def test_amounts_must_be_positive(self) -> None:
        """Reject zero and negative amounts."""
        with self.assertRaises(InvalidAmountError):
            self.engine.create_loan("alice", 0, 1000)
        with self.assertRaises(InvalidAmountError):
            self.engine.create_loan("alice", 1000, 0)
        with self.assertRaises(InvalidAmountError):
            self.engine.create_loan("alice", -5, 1000)

    def test_second_loan_rejected(self) -> None:
        """Refuse a second loan for the same borrower."""
        self.engine.create_loan("alice", 2000, 1000)
        with self.assertRaises(LoanAlreadyExistsError):
            self.engine.create_loan("alice", 5000, 1000)

    def test_created_block_follows_clock(self) -> None:
        """Stamp creation with the current block."""
        self.clock.advance(42)
        self.engine.create_loan("alice", 2000, 1000)
        loan = self.engine.get_loan("alice")
        self.assertEqual(loan.created_block, 42)
        self.assertEqual(loan.last_update_block, 42)

    def test_failed_profile_write_rolls_back_loan(self) -> None:
        """Undo the loan write when the profile write fails."""
        store = FailingProfileStore()
        engine = create_engine(settings=EngineSettings(), store=store, clock=ManualBlockClock())
        with self.assertRaises(RuntimeError):
            engine.create_loan("alice", 2000, 1000)
        self.assertIsNone(store.get_loan("alice"))


class AddCollateralTests(unittest.TestCase):
    """Collateral top-ups."""

    def setUp(self) -> None:
        self.engine, self.clock, _ = _engine()
        self.engine.create_loan("alice", 2000, 1000)

    def test_top_up_keeps_terms(self) -> None:
        """Change only the collateral amount."""
        self.clock.advance(100)
        loan = self.engine.add_collateral("alice", 500)
        self.assertEqual(loan.collateral_amount, 2500)
        self.assertEqual(loan.interest_rate, 125)
        self.assertEqual(loan.risk_score, 2500)
        self.assertEqual(loan.last_update_block, 0)

    def test_top_up_requires_active_loan(self) -> None:
        """Reject a top-up without an active loan."""
        with self.assertRaises(LoanNotFoundError):
            self.engine.add_collateral("bob", 500)

    def test_top_up_amount_must_be_positive(self) -> None:
        """Reject a zero top-up."""
        with self.assertRaises(InvalidAmountError):
            self.engine.add_collateral("alice", 0)


class RepayLoanTests(unittest.TestCase):
    """Repayment and closing."""

    def setUp(self) -> None:
        self.engine, self.clock, _ = _engine()
        self.engine.create_loan("alice", 2000, 1000)

    def test_repay_returns_collateral_and_rewards(self) -> None:
        """Close as repaid and reward reputation."""
        self.clock.advance(10)
        self.assertEqual(self.engine.repay_loan("alice"), 2000)
        loan = self.engine.get_loan("alice")
        self.assertFalse(loan.is_active)
        self.assertEqual(loan.status, LoanStatus.REPAID)
        self.assertEqual(loan.closed_block, 10)
        profile = self.engine.get_profile("alice")
        self.assertEqual(profile.loans_repaid, 1)
        self.assertEqual(profile.reputation_score, 7600)
        self.assertEqual(profile.total_loans_taken, 1)

    def test_closed_loan_cannot_be_touched(self) -> None:
        """Treat a repaid loan as closed for good."""
        self.engine.repay_loan("alice")
        with self.assertRaises(LoanNotFoundError):
            self.engine.repay_loan("alice")
        with self.assertRaises(LoanNotFoundError):
            self.engine.reassess_loan("alice", 2000)
        with self.assertRaises(LoanAlreadyExistsError):
            self.engine.create_loan("alice", 2000, 1000)

    def test_reborrow_when_enabled(self) -> None:
        """Replace a closed loan when reborrowing is allowed."""
        engine, _, _ = _engine(allow_reborrow_after_close=True)
        engine.create_loan("alice", 2000, 1000)
        engine.repay_loan("alice")
        self.assertEqual(engine.create_loan("alice", 2000, 1000), (1000, 120, 2500))
        self.assertEqual(engine.get_profile("alice").total_loans_taken, 2)

    def test_repay_unknown_borrower(self) -> None:
        """Reject repaying a loan that never existed."""
        with self.assertRaises(LoanNotFoundError):
            self.engine.repay_loan("bob")


class ReassessLoanTests(unittest.TestCase):
    """Interest accrual, re-pricing and liquidation."""

    def setUp(self) -> None:
        self.engine, self.clock, self.store = _engine()

    def test_liquidation_threshold_not_reached(self) -> None:
        """Keep a loan active at exactly 10500."""
        self.engine.create_loan("alice", 20_000, 10_000)
        result = self.engine.reassess_loan("alice", 10_500)
        self.assertEqual(result.action, ReassessmentAction.UPDATED)
        self.assertEqual(result.health_ratio, 10_500)
        self.assertEqual(result.new_interest_rate, 375)
        self.assertEqual(result.risk_score, 7500)
        self.assertEqual(result.liquidation_penalty, 0)
        loan = self.engine.get_loan("alice")
        self.assertTrue(loan.is_active)
        self.assertEqual(loan.interest_rate, 375)
        self.assertEqual(loan.risk_score, 7500)

    def test_zero_elapsed_accrues_nothing(self) -> None:
        """Accrue no interest in the same block."""
        self.engine.create_loan("alice", 2000, 1000)
        result = self.engine.reassess_loan("alice", 2000)
        self.assertEqual(result.blocks_elapsed, 0)
        self.assertEqual(result.interest_accrued, 0)
        self.assertEqual(result.total_debt, 1000)
        self.assertEqual(result.action, ReassessmentAction.UPDATED)
        self.assertEqual(self.engine.get_loan("alice").loan_amount, 1000)

    def test_liquidation_below_threshold(self) -> None:
        """Liquidate at 10499 and record a default."""
        self.engine.create_loan("alice", 20_000, 10_000)
        result = self.engine.reassess_loan("alice", 10_499)
        self.assertTrue(result.liquidated)
        self.assertEqual(result.risk_score, 7500)
        self.assertEqual(result.new_interest_rate, 0)
        self.assertEqual(result.liquidation_penalty, 1000)

        loan = self.engine.get_loan("alice")
        self.assertFalse(loan.is_active)
        self.assertEqual(loan.status, LoanStatus.LIQUIDATED)
        self.assertEqual(loan.collateral_amount, 20_000)
        self.assertEqual(loan.loan_amount, 10_000)
        self.assertEqual(loan.interest_rate, 125)
        self.assertEqual(loan.risk_score, 2500)
        profile = self.engine.get_profile("alice")
        self.assertEqual(profile.defaults, 1)
        self.assertEqual(profile.reputation_score, 6500)

        with self.assertRaises(LoanNotFoundError):
            self.engine.add_collateral("alice", 100)

    def test_one_year_accrual(self) -> None:
        """Accrue a full year of simple interest."""
        self.engine.create_loan("alice", 2_000_000, 1_000_000)
        self.clock.advance(52_560)
        result = self.engine.reassess_loan("alice", 2_000_000)
        self.assertEqual(result.interest_accrued, 12_500)
        self.assertEqual(result.total_debt, 1_012_500)
        self.assertEqual(result.health_ratio, 19_753)
        self.assertEqual(result.new_interest_rate, 125)
        self.assertEqual(result.risk_score, 2552)
        self.assertEqual(result.blocks_elapsed, 52_560)
        loan = self.engine.get_loan("alice")
        self.assertEqual(loan.loan_amount, 1_012_500)
        self.assertEqual(loan.last_update_block, 52_560)

    def test_risk_adjustment_factor_scales_rate(self) -> None:
        """Scale the new rate by the adjustment factor."""
        policy = StaticAccessPolicy([ADMIN])
        parameters = ParameterStore(policy)
        parameters.set_risk_adjustment_factor(ADMIN, 20_000)
        clock = ManualBlockClock()
        engine = LoanLifecycleManager(InMemoryLoanStore(), clock, parameters)
        engine.create_loan("alice", 2_000_000, 1_000_000)
        clock.advance(52_560)
        self.assertEqual(engine.reassess_loan("alice", 2_000_000).new_interest_rate, 250)

    def test_score_is_clamped_when_kept_active(self) -> None:
        """Store a clamped score on an active loan."""
        self.engine.set_global_volatility(ADMIN, 10_000)
        self.engine.create_loan("alice", 20_000, 10_000)
        self.clock.advance(2000)
        result = self.engine.reassess_loan("alice", 10_600)
        self.assertEqual(result.action, ReassessmentAction.UPDATED)
        self.assertEqual(result.interest_accrued, 4)
        self.assertEqual(result.total_debt, 10_004)
        self.assertEqual(result.health_ratio, 10_595)
        self.assertEqual(result.risk_score, 10_000)
        self.assertEqual(result.new_interest_rate, 375)
        self.assertEqual(self.engine.get_loan("alice").risk_score, 10_000)

    def test_liquidation_reports_unclamped_score(self) -> None:
        """Report the raw score on liquidation."""
        self.engine.set_global_volatility(ADMIN, 10_000)
        self.engine.create_loan("alice", 20_000, 10_000)
        self.clock.advance(2000)
        result = self.engine.reassess_loan("alice", 10_000)
        self.assertTrue(result.liquidated)
        self.assertEqual(result.health_ratio, 9996)
        self.assertEqual(result.risk_score, 10_002)

    def test_zero_collateral_value_liquidates(self) -> None:
        """Liquidate when collateral is worth nothing."""
        self.engine.create_loan("alice", 2000, 1000)
        result = self.engine.reassess_loan("alice", 0)
        self.assertTrue(result.liquidated)
        self.assertEqual(result.health_ratio, 0)

    def test_negative_collateral_value_rejected(self) -> None:
        """Reject a negative collateral value."""
        self.engine.create_loan("alice", 2000, 1000)
        with self.assertRaises(InvalidAmountError):
            self.engine.reassess_loan("alice", -1)

    def test_missing_profile(self) -> None:
        """Reject reassessment when the profile is missing."""
        self.store.put_loan(
            "ghost",
            LoanModel(
                borrower="ghost",
                collateral_amount=2000,
                loan_amount=1000,
                interest_rate=125,
                risk_score=2500,
                last_update_block=0,
            ),
        )
        with self.assertRaises(LoanNotFoundError):
            self.engine.reassess_loan("ghost", 2000)

    def test_clock_behind_last_update_counts_as_zero_elapsed(self) -> None:
        """Treat a lagging clock as zero elapsed blocks."""
        clock = FakeClock(100)
        store = InMemoryLoanStore()
        engine = create_engine(settings=EngineSettings(), store=store, clock=clock)
        engine.create_loan("alice", 2000, 1000)
        clock.height = 50
        with self.assertLogs("lending_risk.services.loan_lifecycle", level="WARNING"):
            result = engine.reassess_loan("alice", 2000)
        self.assertEqual(result.blocks_elapsed, 0)
        self.assertEqual(result.interest_accrued, 0)
        self.assertEqual(engine.get_loan("alice").last_update_block, 100)


class AdministrationTests(unittest.TestCase):
    """Administrator parameter changes."""

    def setUp(self) -> None:
        self.engine, _, _ = _engine()

    def test_admin_sets_volatility(self) -> None:
        """Apply a volatility change to new loans."""
        params = self.engine.set_global_volatility(ADMIN, 8000)
        self.assertEqual(params.volatility_index, 8000)
        self.assertEqual(self.engine.get_global_parameters().volatility_index, 8000)
        self.assertEqual(self.engine.create_loan("alice", 2000, 1000).risk_score, 4000)

    def test_non_admin_rejected(self) -> None:
        """Reject volatility changes from other callers."""
        with self.assertRaises(UnauthorizedError):
            self.engine.set_global_volatility("mallory", 8000)
        self.assertEqual(self.engine.get_global_parameters().volatility_index, 5000)

    def test_authorization_checked_before_range(self) -> None:
        """Check the caller before the value."""
        with self.assertRaises(UnauthorizedError):
            self.engine.set_global_volatility("mallory", 10_001)
        with self.assertRaises(InvalidRiskParamsError):
            self.engine.set_global_volatility(ADMIN, 10_001)


class QueryTests(unittest.TestCase):
    """Read-only queries."""

    def setUp(self) -> None:
        self.engine, _, _ = _engine()
        self.engine.create_loan("alice", 2000, 1000)

    def test_loan_health_snapshot(self) -> None:
        """Preview health without touching the loan."""
        snapshot = self.engine.get_loan_health("alice", 1200)
        self.assertEqual(snapshot.health_ratio, 12_000)
        self.assertEqual(snapshot.risk_tier, RiskTier.HIGH)
        self.assertFalse(snapshot.is_liquidatable)

        snapshot = self.engine.get_loan_health("alice", 1000)
        self.assertEqual(snapshot.health_ratio, 10_000)
        self.assertEqual(snapshot.risk_tier, RiskTier.CRITICAL)
        self.assertTrue(snapshot.is_liquidatable)
        self.assertTrue(self.engine.get_loan("alice").is_active)

    def test_reads_do_not_mutate(self) -> None:
        """Return identical records on repeated reads."""
        first = (self.engine.get_loan("alice"), self.engine.get_profile("alice"))
        self.engine.get_loan_health("alice", 500)
        second = (self.engine.get_loan("alice"), self.engine.get_profile("alice"))
        self.assertEqual(first, second)

    def test_list_active_borrowers(self) -> None:
        """List only borrowers with active loans."""
        self.engine.create_loan("bob", 2000, 1000)
        self.engine.create_loan("carol", 2000, 1000)
        self.engine.repay_loan("bob")
        self.assertEqual(self.engine.list_active_borrowers(), ["alice", "carol"])

    def test_unknown_borrower_reads(self) -> None:
        """Return nothing for unknown borrowers."""
        self.assertIsNone(self.engine.get_loan("nobody"))
        self.assertIsNone(self.engine.get_profile("nobody"))
        with self.assertRaises(LoanNotFoundError):
            self.engine.get_loan_health("nobody", 1000)


if __name__ == "__main__":
    unittest.main()
