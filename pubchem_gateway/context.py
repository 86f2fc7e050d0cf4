"""Request context threaded through every gateway call."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping
from uuid import uuid4


@dataclass(frozen=True)
class RequestContext:
    """
    Correlation data for one logical operation.

    Created once by the caller and passed unchanged to every call made on its
    behalf. Carries no retry or cancellation state; cancelling the asyncio task
    is how a caller cancels the operation.
    """

    request_id: str = field(default_factory=lambda: uuid4().hex)
    operation: str | None = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def create(cls, operation: str | None = None, **fields: Any) -> "RequestContext":
        return cls(operation=operation, fields=fields)

    def as_log_fields(self) -> dict[str, Any]:
        out: dict[str, Any] = {"request_id": self.request_id}
        if self.operation:
            out["operation"] = self.operation
        out.update(self.fields)
        return out
