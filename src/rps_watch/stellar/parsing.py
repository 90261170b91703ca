"""Decoding of native (``scval.to_native``) contract values into models."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Sequence

from stellar_sdk import Address

from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.models.game import (
    UNSET_ADDRESS,
    GameKind,
    GameRecord,
    HistoryEntry,
    Outcome,
    PlayerStats,
    TokenProfit,
)

log = logging.getLogger(__name__)


def addr_to_str(addr: object) -> str:
    """Extract the string address from a stellar_sdk.Address or plain str."""
    if isinstance(addr, Address):
        return addr.address
    if addr is None:
        return UNSET_ADDRESS
    return str(addr)


def _field(raw: Mapping[str, Any], name: str, default: Any = None) -> Any:
    # Maps decoded from symbol keys may come back as str or bytes keys.
    if name in raw:
        return raw[name]
    return raw.get(name.encode("utf-8"), default)


def parse_game(game_id: int, raw: Mapping[str, Any]) -> GameRecord:
    return GameRecord(
        id=game_id,
        player1=addr_to_str(_field(raw, "player1")),
        player2=addr_to_str(_field(raw, "player2")),
        player1_choice=int(_field(raw, "player1_choice", 0)),
        player2_choice=int(_field(raw, "player2_choice", 0)),
        player1_committed=bool(_field(raw, "player1_committed", False)),
        player2_committed=bool(_field(raw, "player2_committed", False)),
        stake=int(_field(raw, "bet_amount", 0)),
        finished=bool(_field(raw, "finished", False)),
        is_token_game=bool(_field(raw, "is_token_game", False)),
        token=addr_to_str(_field(raw, "token")),
    )


def parse_history_entry(raw: Mapping[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        game_id=int(_field(raw, "game_id")),
        kind=GameKind(int(_field(raw, "game_type", 0))),
        opponent=addr_to_str(_field(raw, "opponent")),
        player_choice=int(_field(raw, "player_choice", 0)),
        opponent_choice=int(_field(raw, "opponent_choice", 0)),
        stake=int(_field(raw, "bet_amount", 0)),
        token=addr_to_str(_field(raw, "token")),
        result=Outcome(int(_field(raw, "result", 0))),
        payout=int(_field(raw, "payout", 0)),
        timestamp=int(_field(raw, "timestamp", 0)),
    )


def parse_stats(raw: Mapping[str, Any]) -> PlayerStats:
    return PlayerStats(
        wins=int(_field(raw, "wins", 0)),
        losses=int(_field(raw, "losses", 0)),
        total_profits=int(_field(raw, "total_profits", 0)),
    )


def parse_token_profits(raw: Sequence[Any]) -> list[TokenProfit]:
    """Zip the (tokens, amounts) pair returned by the contract, dropping zeros."""
    tokens, amounts = raw
    return [
        TokenProfit(token=addr_to_str(t), profit=int(a))
        for t, a in zip(tokens, amounts)
        if int(a) != 0
    ]


def _epoch(close_at: datetime | str | int | None) -> int:
    if close_at is None:
        return 0
    if isinstance(close_at, datetime):
        return int(close_at.timestamp())
    if isinstance(close_at, int):
        return close_at
    return int(datetime.fromisoformat(close_at.replace("Z", "+00:00")).timestamp())


def parse_event(
    category: EventCategory,
    raw: Mapping[str, Any],
    ledger: int,
    close_at: datetime | str | int | None,
) -> GameEvent | None:
    """Build a GameEvent from a decoded event value. None if malformed."""
    try:
        if category is EventCategory.SINGLE_RESULT:
            participant = addr_to_str(_field(raw, "player"))
            payload = {
                "player_choice": int(_field(raw, "player_choice", 0)),
                "house_choice": int(_field(raw, "house_choice", 0)),
                "result": int(_field(raw, "result", 0)),
                "payout": int(_field(raw, "payout", 0)),
                "is_token_game": bool(_field(raw, "is_token_game", False)),
                "token": addr_to_str(_field(raw, "token")),
            }
        else:
            participant = addr_to_str(_field(raw, "winner"))
            payload = {
                "game_id": int(_field(raw, "game_id")),
                "payout": int(_field(raw, "payout", 0)),
                "is_token_game": bool(_field(raw, "is_token_game", False)),
                "token": addr_to_str(_field(raw, "token")),
            }
    except (TypeError, ValueError) as exc:
        log.warning("Failed to parse %s event at ledger %d: %s", category.value, ledger, exc)
        return None

    return GameEvent(
        category=category,
        participant=participant,
        timestamp=_epoch(close_at),
        block_height=ledger,
        payload=payload,
    )
