"""Read-only limiter state models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(slots=True, frozen=True)
class LimiterSnapshot:
    """Point-in-time counters of one limiter."""

    limit: float
    max_queue: float | None
    active_count: int
    pending_count: int

    @property
    def idle(self) -> bool:
        """Return whether nothing is running and nothing is queued."""

        return self.active_count == 0 and self.pending_count == 0


class StatusModel(BaseModel):
    """Base model for limiter status routes."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class LimiterStatusResponse(StatusModel):
    """Counters exposed by the status endpoint."""

    limit: float
    max_queue: float | None = Field(default=None, alias="maxQueue")
    active_count: int = Field(alias="activeCount")
    pending_count: int = Field(alias="pendingCount")
    idle: bool

    @classmethod
    def from_snapshot(cls, snapshot: LimiterSnapshot) -> LimiterStatusResponse:
        """Build a response payload from a limiter snapshot."""

        return cls(
            limit=snapshot.limit,
            max_queue=snapshot.max_queue,
            active_count=snapshot.active_count,
            pending_count=snapshot.pending_count,
            idle=snapshot.idle,
        )


class IdleResponse(StatusModel):
    """Payload returned once the limiter drained."""

    status: str = "idle"


__all__ = ["IdleResponse", "LimiterSnapshot", "LimiterStatusResponse", "StatusModel"]
