"""Cursor-based pagination over an account's append-only history log."""

from __future__ import annotations

import logging
from itertools import count

from rps_watch.errors import NotFound, StaleResponse, TransientUnavailable
from rps_watch.interfaces.adapter import LedgerAdapter, RecordKind
from rps_watch.models.outcomes import HistoryPage
from rps_watch.sync.scheduler import CancelToken

log = logging.getLogger(__name__)


class HistoryPaginator:
    """Fetches fixed-size pages of one account's game history.

    Page requests may overlap. Each request takes a sequence number when
    it starts, and only the most recently started request is allowed to
    replace ``current``; responses that lose the race are discarded.
    """

    def __init__(
        self,
        adapter: LedgerAdapter,
        account: str,
        page_size: int = 10,
        token: CancelToken | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._adapter = adapter
        self._account = account
        self._page_size = page_size
        self._token = token or CancelToken()
        self._seq = count(1)
        self._latest = 0
        self._current: HistoryPage | None = None

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current(self) -> HistoryPage | None:
        """Page applied by the most recently initiated request."""
        return self._current

    async def page(self, index: int) -> HistoryPage | None:
        """Load page ``index``. Returns None if the response was superseded.

        An account without a history log gets an empty page. Raises
        TransientUnavailable when the ledger cannot be read.
        """
        if index < 0:
            raise ValueError(f"page index must be >= 0, got {index}")
        seq = next(self._seq)
        self._latest = seq
        try:
            result = await self._fetch(seq, index)
        except StaleResponse:
            log.debug("Discarding stale history page %d (request %d)", index, seq)
            return None
        except NotFound:
            # Accounts that never played have no history log at all.
            if seq != self._latest or self._token.cancelled:
                return None
            result = HistoryPage(index=index, entries=(), total=0, page_size=self._page_size)
        except TransientUnavailable:
            if seq != self._latest:
                return None
            log.warning("History page %d unavailable", index)
            raise
        self._current = result
        return result

    async def _fetch(self, seq: int, index: int) -> HistoryPage:
        # The total can grow between pages, so it is re-read every time.
        total = int(await self._adapter.read_record(RecordKind.HISTORY_COUNT, self._account))
        cursor = index * self._page_size
        entries = []
        if cursor < total:
            entries = await self._adapter.read_range(
                RecordKind.HISTORY, self._account, cursor, self._page_size,
            )
        self._check_live(seq)
        return HistoryPage(
            index=index,
            entries=tuple(entries),
            total=total,
            page_size=self._page_size,
        )

    def _check_live(self, seq: int) -> None:
        if self._token.cancelled or seq != self._latest:
            raise StaleResponse(f"history request {seq} superseded by {self._latest}")

