"""View-facing API components."""

from rps_watch.api.sync_api import GameSyncService, Subscription

__all__ = ["GameSyncService", "Subscription"]
