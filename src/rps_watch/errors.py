"""Error taxonomy for ledger reads."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for every error raised by rps_watch."""


class TransientUnavailable(SyncError):
    """Network failure or rate limit. Retried on the next natural tick."""


class NotFound(SyncError):
    """No record exists at the requested id or index."""


class StaleResponse(SyncError):
    """The request that produced a response was superseded or cancelled."""
