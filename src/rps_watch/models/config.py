"""Configuration models for the watcher."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PollConfig:
    """Tick periods and per-tick bounds for every poller."""

    event_poll_interval: float = 0.2  # seconds
    room_poll_interval: float = 5.0
    lobby_poll_interval: float = 10.0
    max_block_window: int = 5  # ledgers scanned per event tick
    category_pause: float = 0.1  # seconds between category queries
    dedup_capacity: int = 100
    lobby_batch_size: int = 10
    lobby_display_cap: int = 50
    history_page_size: int = 10


@dataclass
class WatchConfig:
    """Complete watcher configuration."""

    # Watch
    account: str = ""  # local participant address; empty = no session
    log_level: str = "info"

    # Stellar
    network: str = "testnet"
    rpc_url: str = "https://soroban-testnet.stellar.org"
    network_passphrase: str = "Test SDF Network ; September 2015"
    contract_id: str = ""  # rock-paper-scissors game contract ID

    # Polling
    poll: PollConfig = field(default_factory=PollConfig)
