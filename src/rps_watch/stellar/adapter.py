"""Soroban RPC implementation of the LedgerAdapter protocol."""

from __future__ import annotations

import logging
from typing import Any, Callable

from stellar_sdk import Address, SorobanServerAsync, scval, xdr
from stellar_sdk.contract import ContractClientAsync
from stellar_sdk.contract.exceptions import SimulationFailedError
from stellar_sdk.soroban_rpc import EventFilter, EventFilterType, EventInfo

from rps_watch.errors import NotFound, TransientUnavailable
from rps_watch.interfaces.adapter import RecordKind
from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.stellar.parsing import (
    parse_event,
    parse_game,
    parse_history_entry,
    parse_stats,
    parse_token_profits,
)

log = logging.getLogger(__name__)

EVENT_PAGE_LIMIT = 100

# Topic patterns emitted by the contract:
#   single-player result: ("single", "result")
#   multiplayer result:   ("multi",  "result")
_CATEGORY_TOPICS = {
    EventCategory.SINGLE_RESULT: scval.to_symbol("single").to_xdr(),
    EventCategory.MULTI_RESULT: scval.to_symbol("multi").to_xdr(),
}


class SorobanLedgerAdapter:
    """Read-only access to the game contract over Soroban RPC.

    Every RPC failure surfaces as TransientUnavailable; a simulation that
    fails or returns no value for a game read surfaces as NotFound.
    """

    def __init__(
        self,
        rpc_url: str,
        contract_id: str,
        network_passphrase: str,
        account: str | None = None,
    ) -> None:
        self._server = SorobanServerAsync(rpc_url)
        self._client = ContractClientAsync(
            contract_id=contract_id,
            rpc_url=rpc_url,
            network_passphrase=network_passphrase,
        )
        self._contract_id = contract_id
        self._account = account or None

    async def close(self) -> None:
        """Close the underlying aiohttp sessions."""
        await self._server.close()
        await self._client.server.close()

    def account_identity(self) -> str | None:
        return self._account

    async def current_height(self) -> int:
        try:
            latest = await self._server.get_latest_ledger()
        except Exception as exc:
            raise TransientUnavailable(f"get_latest_ledger failed: {exc}") from exc
        return latest.sequence

    async def query_events(
        self, category: EventCategory, from_height: int, to_height: int
    ) -> list[GameEvent]:
        filters = [
            EventFilter(
                event_type=EventFilterType.CONTRACT,
                contract_ids=[self._contract_id],
                topics=[[_CATEGORY_TOPICS[category], "*"]],
            )
        ]
        events: list[GameEvent] = []
        cursor: str | None = None
        while True:
            try:
                # start_ledger and cursor are mutually exclusive
                if cursor:
                    response = await self._server.get_events(
                        filters=filters, cursor=cursor, limit=EVENT_PAGE_LIMIT,
                    )
                else:
                    response = await self._server.get_events(
                        start_ledger=from_height, filters=filters, limit=EVENT_PAGE_LIMIT,
                    )
            except Exception as exc:
                raise TransientUnavailable(
                    f"get_events {category.value} from {from_height} failed: {exc}"
                ) from exc

            past_range = False
            for info in response.events:
                if info.ledger > to_height:
                    past_range = True
                    break
                if not info.in_successful_contract_call:
                    continue
                parsed = self._decode_event(category, info)
                if parsed is not None:
                    events.append(parsed)

            if past_range or len(response.events) < EVENT_PAGE_LIMIT or not response.cursor:
                return events
            cursor = response.cursor

    def _decode_event(self, category: EventCategory, info: EventInfo) -> GameEvent | None:
        try:
            value = scval.to_native(xdr.SCVal.from_xdr(info.value))
        except Exception:
            log.warning("Could not decode value XDR for event %s", info.id)
            return None
        return parse_event(category, value, info.ledger, info.ledger_close_at)

    async def read_record(self, kind: RecordKind, key: Any = None) -> Any:
        if kind is RecordKind.GAME:
            raw = await self._call("get_game", [scval.to_uint64(int(key))], missing_ok=False)
            return parse_game(int(key), raw)
        if kind is RecordKind.GAME_COUNT:
            return int(await self._call("total_games", []))
        if kind is RecordKind.HISTORY_COUNT:
            return int(await self._call("history_count", [_address(key)]))
        if kind is RecordKind.PLAYER_STATS:
            return parse_stats(await self._call("player_stats", [_address(key)]))
        if kind is RecordKind.TOKEN_PROFITS:
            return parse_token_profits(await self._call("token_profits", [_address(key)]))
        raise ValueError(f"{kind.value} is not a point-read record kind")

    async def read_range(
        self, kind: RecordKind, key: Any, start: int, count: int
    ) -> list[Any]:
        if kind is not RecordKind.HISTORY:
            raise ValueError(f"{kind.value} is not a range record kind")
        raw = await self._call(
            "get_history",
            [_address(key), scval.to_uint32(start), scval.to_uint32(count)],
        )
        return [parse_history_entry(r) for r in raw or []]

    async def _call(
        self,
        function_name: str,
        parameters: list[xdr.SCVal],
        missing_ok: bool = True,
        parse: Callable[[xdr.SCVal], Any] = scval.to_native,
    ) -> Any:
        """Simulate a read-only contract call and return its native result."""
        try:
            tx = await self._client.invoke(
                function_name, parameters, parse_result_xdr_fn=parse,
            )
            result = tx.result()
        except SimulationFailedError as exc:
            raise NotFound(f"{function_name} simulation failed: {exc}") from exc
        except Exception as exc:
            raise TransientUnavailable(f"{function_name} failed: {exc}") from exc
        if result is None and not missing_ok:
            raise NotFound(f"{function_name} returned no value")
        return result


def _address(account: str) -> xdr.SCVal:
    return scval.to_address(Address(account))
