"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from rps_watch.models.config import PollConfig, WatchConfig

NETWORK_PASSPHRASES = {
    "testnet": "Test SDF Network ; September 2015",
    "mainnet": "Public Global Stellar Network ; September 2015",
}


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "RPS_WATCH_",
) -> WatchConfig:
    """Load watcher configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (RPS_WATCH_CONTRACT_ID, etc.)
        2. TOML config file
        3. Defaults from WatchConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = WatchConfig()

    # ── Watch section ──────────────────────────────────────
    watch = raw.get("watch", {})
    if v := watch.get("account"):
        cfg.account = str(v)
    if v := watch.get("log_level"):
        cfg.log_level = str(v)

    # ── Stellar section ────────────────────────────────────
    stellar = raw.get("stellar", {})
    if v := stellar.get("network"):
        cfg.network = str(v)
        cfg.network_passphrase = NETWORK_PASSPHRASES.get(cfg.network, cfg.network_passphrase)
    if v := stellar.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := stellar.get("network_passphrase"):
        cfg.network_passphrase = str(v)
    if v := stellar.get("contract_id"):
        cfg.contract_id = str(v)

    # ── Poll section ───────────────────────────────────────
    poll = raw.get("poll", {})
    defaults = PollConfig()
    cfg.poll = PollConfig(
        event_poll_interval=float(poll.get("event_poll_interval", defaults.event_poll_interval)),
        room_poll_interval=float(poll.get("room_poll_interval", defaults.room_poll_interval)),
        lobby_poll_interval=float(poll.get("lobby_poll_interval", defaults.lobby_poll_interval)),
        max_block_window=int(poll.get("max_block_window", defaults.max_block_window)),
        category_pause=float(poll.get("category_pause", defaults.category_pause)),
        dedup_capacity=int(poll.get("dedup_capacity", defaults.dedup_capacity)),
        lobby_batch_size=int(poll.get("lobby_batch_size", defaults.lobby_batch_size)),
        lobby_display_cap=int(poll.get("lobby_display_cap", defaults.lobby_display_cap)),
        history_page_size=int(poll.get("history_page_size", defaults.history_page_size)),
    )

    # ── Environment variable overrides (highest priority) ──
    if net := os.environ.get(f"{env_prefix}NETWORK"):
        cfg.network = net
        cfg.network_passphrase = NETWORK_PASSPHRASES.get(net, cfg.network_passphrase)
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if cid := os.environ.get(f"{env_prefix}CONTRACT_ID"):
        cfg.contract_id = cid
    if account := os.environ.get(f"{env_prefix}ACCOUNT"):
        cfg.account = account

    return cfg
