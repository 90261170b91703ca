"""Polling, deduplication, reconciliation and pagination."""

from rps_watch.sync.dedup import EventWindow
from rps_watch.sync.paginator import HistoryPaginator
from rps_watch.sync.poller import BlockRangePoller
from rps_watch.sync.reconciler import DisplayOrder, GameReconciler, LobbyReconciler
from rps_watch.sync.scheduler import CancelToken, PeriodicTask, SingleFlight

__all__ = [
    "EventWindow",
    "HistoryPaginator",
    "BlockRangePoller",
    "DisplayOrder", "GameReconciler", "LobbyReconciler",
    "CancelToken", "PeriodicTask", "SingleFlight",
]
