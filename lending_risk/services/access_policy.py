"""Administrator checks for parameter mutation."""

from abc import ABC, abstractmethod
from typing import Iterable


class AccessPolicy(ABC):
    """Decides which caller identities hold the administrator capability."""

    @abstractmethod
    def is_administrator(self, identity: str) -> bool:
        """Return True when ``identity`` may change global parameters."""


class StaticAccessPolicy(AccessPolicy):
    """Fixed set of administrator identities, usually from settings."""

    def __init__(self, administrators: Iterable[str]) -> None:
        self._administrators = frozenset(str(item).strip() for item in administrators if str(item).strip())

    @property
    def administrators(self) -> frozenset:
        return self._administrators

    def is_administrator(self, identity: str) -> bool:
        return identity in self._administrators
