"""Contract event models deserialized from the Soroban event stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class EventCategory(str, Enum):
    """Event categories emitted by the game contract."""

    SINGLE_RESULT = "single_result"  # player vs. house
    MULTI_RESULT = "multi_result"  # two-player game resolved


def _freeze(payload: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(payload or {}))


@dataclass(frozen=True)
class GameEvent:
    """A single observed result event.

    ``timestamp`` is the close time (unix seconds) of the ledger that
    carried the event, so a re-scan of the same range yields the same value.
    """

    category: EventCategory
    participant: str  # player (single) or winner (multi), Stellar address
    timestamp: int
    block_height: int
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _freeze(self.payload))

    @property
    def identity(self) -> tuple[str, int, str]:
        """Dedup key. Block height is deliberately not part of it."""
        return (self.category.value, self.timestamp, self.participant)
