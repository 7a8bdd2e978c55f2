"""Helpers shared by the application services."""

from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from foodorder.domain.base import AggregateRoot, DomainEvent
from foodorder.domain.exceptions import DomainError, ErrorCode
from foodorder.domain.value_objects import EntityId

logger = structlog.get_logger()

I = TypeVar("I", bound=EntityId)


# ============================================================================
# Service Result Base
# ============================================================================


@dataclass
class ServiceResult:
    """Outcome of a service call.

    Failed calls carry the domain error's code, message and details so the
    API layer can translate them without inspecting the exception.
    """

    success: bool = True
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failed(cls, exc: DomainError, **kwargs: Any) -> Any:
        """Build a failed result from a domain error.

        Args:
            exc: The error that ended the call.
            **kwargs: Extra result fields.

        Returns:
            Result instance of the calling class.
        """
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.code,
            details=dict(exc.details),
            **kwargs,
        )


# ============================================================================
# Helpers
# ============================================================================


def parse_id(id_type: type[I], value: str | None, code: ErrorCode) -> I:
    """Wrap a raw identifier, reporting blanks with a domain error code.

    Args:
        id_type: Typed identifier class.
        value: Raw identifier from the request.
        code: Error code to raise when the value is missing or blank.

    Returns:
        Typed identifier.

    Raises:
        DomainError: If the value is missing or blank.
    """
    try:
        return id_type.of(value)
    except ValueError as e:
        raise DomainError(code, details={"value": value}) from e


def drain_events(aggregate: AggregateRoot, request_id: str | None = None) -> list[DomainEvent]:
    """Collect the aggregate's pending events after a successful save.

    Publication is out of scope; events are logged and returned.

    Args:
        aggregate: Saved aggregate.
        request_id: Request ID for correlation.

    Returns:
        Events that were pending.
    """
    events = aggregate.collect_events()
    for event in events:
        logger.info(
            "Domain event recorded",
            event_type=event.event_type,
            event_id=str(event.event_id),
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            payload=event.to_dict()["payload"],
            request_id=request_id,
        )
    return events
