"""Reconciliation loop: periodic fetch → classify → swap."""

from bugsheet.reconcile.loop import DEFAULT_INTERVAL_SECONDS, Reconciler
from bugsheet.reconcile.protocol import ReconcilerHealth, ReconcilerState, Ticker
from bugsheet.reconcile.ticker import EventTicker, ManualTicker

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "Reconciler",
    "ReconcilerHealth",
    "ReconcilerState",
    "Ticker",
    "EventTicker",
    "ManualTicker",
]
