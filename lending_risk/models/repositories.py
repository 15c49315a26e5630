"""Store interface for datastore-agnostic loan and profile access."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import logging
from typing import Iterator, List, Optional

from .loans import LoanModel
from .profiles import BorrowerProfileModel


logger = logging.getLogger(__name__)


class LoanStore(ABC):
    """Key-value store of loan and profile records keyed by borrower identity.

    Implementations hand out copies: mutating a returned model never
    changes persisted state until it is written back with ``put_*``.
    """

    @abstractmethod
    def get_loan(self, borrower: str) -> Optional[LoanModel]:
        """Return the borrower's loan record in any state, or None.

        Raises:
            ModelValidationError: If the stored payload is malformed.
        """

    @abstractmethod
    def put_loan(self, borrower: str, loan: LoanModel) -> LoanModel:
        """Insert or overwrite the borrower's loan record."""

    @abstractmethod
    def delete_loan(self, borrower: str) -> None:
        """Remove the borrower's loan record if present."""

    @abstractmethod
    def get_profile(self, borrower: str) -> Optional[BorrowerProfileModel]:
        """Return the borrower's profile, or None.

        Raises:
            ModelValidationError: If the stored payload is malformed.
        """

    @abstractmethod
    def put_profile(self, borrower: str, profile: BorrowerProfileModel) -> BorrowerProfileModel:
        """Insert or overwrite the borrower's profile."""

    @abstractmethod
    def list_borrowers(self) -> List[str]:
        """Return every borrower that has a loan record, sorted."""

    @contextmanager
    def transaction(self) -> Iterator["LoanStore"]:
        """Group writes into one atomic unit.

        The default does nothing extra; stores with their own transaction
        support override it.
        """
        yield self


__all__ = ["LoanStore"]
