"""Shared base models and common type aliases."""

import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import ModelValidationError


logger = logging.getLogger(__name__)

Amount = int
BasisPoints = int
BlockHeight = int

RecordT = TypeVar("RecordT", bound="BaseRecordModel")


class BaseRecordModel(BaseModel):
    """Base schema for records persisted by the external key-value store."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=False,
        extra="forbid",
        strict=False,
    )

    def to_document(self) -> Dict[str, Any]:
        """Serialize model into a plain store document.

        Returns:
            Dict[str, Any]: Serialized model payload.

        Raises:
            ModelValidationError: If serialization fails.
        """
        try:
            return self.model_dump(mode="json")
        except Exception as exc:
            logger.exception("Failed to serialize %s", self.__class__.__name__)
            raise ModelValidationError(str(exc)) from exc

    @classmethod
    def from_document(cls: Type[RecordT], data: Dict[str, Any]) -> RecordT:
        """Create model instance from a store document.

        Args:
            data: Store document payload.

        Returns:
            BaseRecordModel: Typed domain instance.

        Raises:
            ModelValidationError: If payload parsing fails.
        """
        try:
            return cls(**dict(data))
        except (ValidationError, TypeError) as exc:
            logger.exception("Failed to parse store payload for %s", cls.__name__)
            raise ModelValidationError(str(exc)) from exc

    def copy_with(self: RecordT, **changes: Any) -> RecordT:
        """Return a validated copy with ``changes`` applied; ``self`` is untouched."""
        payload = self.model_dump()
        payload.update(changes)
        try:
            return self.__class__(**payload)
        except ValidationError as exc:
            logger.exception("Invalid update for %s changes=%s", self.__class__.__name__, sorted(changes))
            raise ModelValidationError(str(exc)) from exc
