"""Ticker protocol and reconciler health.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICKER PROTOCOL                                                              │
│                                                                               │
│   ┌─────────────────┐   wait(interval) -> True    ┌─────────────────┐        │
│   │  EventTicker    │ ──────────────────────────► │  Reconciler     │        │
│   │  (wall clock)   │                             │  loop           │        │
│   └─────────────────┘   wait(interval) -> False   │                 │        │
│                          (cancelled: loop exits)  │  - fetch        │        │
│   ┌─────────────────┐                             │  - classify     │        │
│   │  ManualTicker   │ ──────────────────────────► │  - swap         │        │
│   │  (tests)        │                             └─────────────────┘        │
│   └─────────────────┘                                                         │
│                                                                               │
│  The ticker decides WHEN a cycle runs; the reconciler decides WHAT runs.     │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Ticker(Protocol):
    """Timing source for the reconciliation loop."""

    name: str

    def wait(self, interval_seconds: float) -> bool:
        """Block until the next tick.

        Returns:
            True when a tick fired, False once the ticker is cancelled.
        """
        ...

    def cancel(self) -> None:
        """Wake any waiter and make every later ``wait`` return False."""
        ...


class ReconcilerState(str, Enum):
    """Reconciler lifecycle states."""

    IDLE = "idle"
    RECONCILING = "reconciling"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass
class ReconcilerHealth:
    """Structured reconciler health response."""

    healthy: bool
    state: ReconcilerState
    ticker: str
    cycles: int = 0
    generation: int | None = None
    last_success: datetime | None = None
    snapshot_age_seconds: float | None = None
    last_error: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "healthy": self.healthy,
            "state": self.state.value,
            "ticker": self.ticker,
            "cycles": self.cycles,
            "generation": self.generation,
            "last_success": self.last_success.isoformat() if self.last_success else None,
            "snapshot_age_seconds": self.snapshot_age_seconds,
            "last_error": self.last_error,
            **self.extra,
        }


__all__ = ["Ticker", "ReconcilerState", "ReconcilerHealth"]
