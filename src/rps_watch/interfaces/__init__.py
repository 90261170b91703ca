"""Protocol interfaces for rps_watch collaborators."""

from rps_watch.interfaces.adapter import LedgerAdapter, RecordKind

__all__ = ["LedgerAdapter", "RecordKind"]
