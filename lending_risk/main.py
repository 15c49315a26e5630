"""Engine entrypoint: wires settings, store, clock and parameters together."""

from typing import Optional

from lending_risk.core import BlockClock, EngineSettings, ManualBlockClock, get_logger, load_settings, setup_logging
from lending_risk.models.repositories import LoanStore
from lending_risk.repositories import InMemoryLoanStore
from lending_risk.services import AccessPolicy, LoanLifecycleManager, ParameterStore


logger = get_logger(__name__)


def create_engine(
    settings: Optional[EngineSettings] = None,
    store: Optional[LoanStore] = None,
    clock: Optional[BlockClock] = None,
    access_policy: Optional[AccessPolicy] = None,
) -> LoanLifecycleManager:
    """Create a configured engine instance.

    Missing collaborators fall back to the in-memory store and a manual
    block clock starting at height 0, which is what tests and local
    simulations use. Hosts pass their own store and clock.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    parameter_store = ParameterStore.from_settings(settings, access_policy=access_policy)
    engine = LoanLifecycleManager(
        store=store or InMemoryLoanStore(),
        clock=clock or ManualBlockClock(),
        parameter_store=parameter_store,
        settings=settings,
    )
    logger.info(
        "Engine initialized: %s allow_reborrow_after_close=%s",
        settings.app_name,
        settings.allow_reborrow_after_close,
    )
    return engine
