"""In-memory implementation of the loan store."""

from contextlib import contextmanager
import copy
import logging
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional

from lending_risk.models.exceptions import ModelValidationError
from lending_risk.models.loans import LoanModel
from lending_risk.models.profiles import BorrowerProfileModel
from lending_risk.models.repositories import LoanStore


logger = logging.getLogger(__name__)


class InMemoryLoanStore(LoanStore):
    """Keep loan and profile documents in process memory.

    Records are stored as serialized documents, so callers always receive
    fresh model instances. ``transaction()`` holds the store lock and
    restores the previous contents if the wrapped block raises.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._memory_store: Dict[str, Dict[str, Dict[str, Any]]] = {"loans": {}, "profiles": {}}
        self._transaction_depth = 0

    def _set_document(self, collection: str, document_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Persist one document."""
        with self._lock:
            bucket = self._memory_store.setdefault(collection, {})
            bucket[document_id] = dict(payload)
            return dict(bucket[document_id])

    def _get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document by id."""
        with self._lock:
            payload = self._memory_store.setdefault(collection, {}).get(document_id)
            if payload is None:
                return None
            return dict(payload)

    def _require_key(self, borrower: str, record_borrower: str) -> None:
        if borrower != record_borrower:
            raise ModelValidationError(
                "Record borrower {0!r} does not match store key {1!r}".format(record_borrower, borrower)
            )

    def get_loan(self, borrower: str) -> Optional[LoanModel]:
        payload = self._get_document("loans", borrower)
        if payload is None:
            return None
        return LoanModel.from_document(payload)

    def put_loan(self, borrower: str, loan: LoanModel) -> LoanModel:
        self._require_key(borrower, loan.borrower)
        stored = self._set_document("loans", borrower, loan.to_document())
        return LoanModel.from_document(stored)

    def delete_loan(self, borrower: str) -> None:
        with self._lock:
            removed = self._memory_store.setdefault("loans", {}).pop(borrower, None)
        if removed is not None:
            logger.info("Loan record deleted borrower=%s", borrower)

    def get_profile(self, borrower: str) -> Optional[BorrowerProfileModel]:
        payload = self._get_document("profiles", borrower)
        if payload is None:
            return None
        return BorrowerProfileModel.from_document(payload)

    def put_profile(self, borrower: str, profile: BorrowerProfileModel) -> BorrowerProfileModel:
        self._require_key(borrower, profile.borrower)
        stored = self._set_document("profiles", borrower, profile.to_document())
        return BorrowerProfileModel.from_document(stored)

    def list_borrowers(self) -> List[str]:
        with self._lock:
            return sorted(self._memory_store.setdefault("loans", {}).keys())

    @contextmanager
    def transaction(self) -> Iterator["InMemoryLoanStore"]:
        with self._lock:
            outermost = self._transaction_depth == 0
            snapshot = copy.deepcopy(self._memory_store) if outermost else None
            self._transaction_depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._memory_store = snapshot
                    logger.warning("Store transaction rolled back.")
                raise
            finally:
                self._transaction_depth -= 1
