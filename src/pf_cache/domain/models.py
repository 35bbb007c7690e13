"""Domain models for the read cache — dataclasses, no I/O."""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class CacheScope:
    """A (resource-collection, filter) pair whose pages are cached together.

    The user is supplied per call, so one scope object serves every user.
    `aggregates` names the generation-independent values (e.g. "total")
    that must be deleted whenever the scope is invalidated.
    """

    collection: str
    filters: tuple[tuple[str, str], ...] = ()
    aggregates: tuple[str, ...] = field(default=(), compare=False)

    @property
    def segment(self) -> str:
        """Key segment identifying the scope, e.g. 'filter:category:<id>:expenses'."""
        if not self.filters:
            return self.collection
        parts = ["filter"]
        for name, value in self.filters:
            parts.extend((name, value))
        parts.append(self.collection)
        return ":".join(parts)


@dataclass
class Cached(Generic[T]):
    """A read result plus whether it was served from the cache."""

    value: T
    cached: bool

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict of the value with the `cached` flag merged in."""
        data = self.value.model_dump(mode="json")
        data["cached"] = self.cached
        return data
