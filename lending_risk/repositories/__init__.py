"""Store implementations."""

from .memory_store import InMemoryLoanStore

__all__ = ["InMemoryLoanStore"]
