"""Record codec: converting application objects to and from row attributes."""

from abc import ABC, abstractmethod
from typing import Any, Self

from pydantic import BaseModel, ValidationError

from dynamotree.errors import CodecError


class Storable(ABC):
    """Capability interface for objects the tree can store.

    Implementations return and accept the non-key attributes of an object
    row. Failures should be raised as CodecError; the tree does not wrap
    them.
    """

    @abstractmethod
    def to_attributes(self) -> dict[str, Any]:
        """Serialize this object to row attributes."""
        pass

    @classmethod
    @abstractmethod
    def from_attributes(cls, attributes: dict[str, Any]) -> Self:
        """Build an object from row attributes."""
        pass


class StorableModel(BaseModel, Storable):
    """Pydantic model that stores its JSON-mode dump as row attributes."""

    def to_attributes(self) -> dict[str, Any]:
        """Dump fields in JSON mode. Explicit None values are kept."""
        return self.model_dump(mode="json")

    @classmethod
    def from_attributes(cls, attributes: dict[str, Any]) -> Self:
        """Validate attributes into a model instance."""
        try:
            return cls.model_validate(attributes)
        except ValidationError as e:
            raise CodecError(
                f"cannot decode {cls.__name__} from stored attributes: {e}",
                cause=e,
            ) from e
