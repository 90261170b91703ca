"""CLI entry point for rps_watch."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from datetime import datetime, timezone

import click

from rps_watch.api.sync_api import GameSyncService
from rps_watch.config import load_config
from rps_watch.errors import SyncError
from rps_watch.game import rules
from rps_watch.models.config import WatchConfig
from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.models.game import GameKind, GameRecord, Outcome
from rps_watch.models.outcomes import LobbyOutcome, Milestone
from rps_watch.stellar.adapter import SorobanLedgerAdapter

STROOPS_PER_XLM = 10_000_000


def _xlm(stroops: int) -> str:
    return f"{stroops / STROOPS_PER_XLM:.7f} XLM"


def _require_contract(cfg: WatchConfig) -> None:
    """Exit with error if no contract ID is configured."""
    if not cfg.contract_id:
        click.echo("Error: No contract ID configured.", err=True)
        click.echo("Set RPS_WATCH_CONTRACT_ID or contract_id in config.", err=True)
        sys.exit(1)


def _require_account(cfg: WatchConfig) -> None:
    if not cfg.account:
        click.echo("Error: No account configured.", err=True)
        click.echo("Set RPS_WATCH_ACCOUNT or account in config.", err=True)
        sys.exit(1)


def _adapter(cfg: WatchConfig) -> SorobanLedgerAdapter:
    return SorobanLedgerAdapter(
        cfg.rpc_url, cfg.contract_id, cfg.network_passphrase, account=cfg.account,
    )


def _date(timestamp: int) -> str:
    if not timestamp:
        return "-"
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


async def _until_interrupted() -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass
    await stop.wait()


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """rps_watch - follow an on-chain Rock-Paper-Scissors game from the terminal."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show watcher configuration."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"Network:    {cfg.network}")
    click.echo(f"RPC URL:    {cfg.rpc_url}")
    click.echo(f"Contract:   {cfg.contract_id or '(not set)'}")
    click.echo(f"Account:    {cfg.account or '(not set)'}")
    click.echo(f"Event tick: {cfg.poll.event_poll_interval}s")
    click.echo(f"Room tick:  {cfg.poll.room_poll_interval}s")
    click.echo(f"Lobby tick: {cfg.poll.lobby_poll_interval}s")


@cli.command()
@click.pass_context
def height(ctx: click.Context) -> None:
    """Print the latest ledger sequence."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)

    async def _height():
        adapter = _adapter(cfg)
        try:
            click.echo(await adapter.current_height())
        except SyncError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        finally:
            await adapter.close()

    asyncio.run(_height())


# ── Live views ─────────────────────────────────────────


def _format_event(event: GameEvent) -> str:
    p = event.payload
    who = rules.short_address(event.participant, placeholder="House")
    if event.category is EventCategory.SINGLE_RESULT:
        result = Outcome(p["result"]).name
        return (
            f"[{event.block_height}] {who} played {rules.choice_name(p['player_choice'])} "
            f"vs house {rules.choice_name(p['house_choice'])}: {result} "
            f"payout={p['payout']}"
        )
    if rules.is_slot_open(event.participant):
        return f"[{event.block_height}] game #{p['game_id']} draw payout={p['payout']}"
    return f"[{event.block_height}] game #{p['game_id']} won by {who} payout={p['payout']}"


@cli.command()
@click.pass_context
def events(ctx: click.Context) -> None:
    """Stream game results as they land on the ledger."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)

    async def _events():
        adapter = _adapter(cfg)
        service = GameSyncService(adapter, cfg.poll)
        service.subscribe_events(lambda e: click.echo(_format_event(e)))
        try:
            await _until_interrupted()
        finally:
            await service.close()
            await adapter.close()

    asyncio.run(_events())


def _format_game(game: GameRecord, account: str | None) -> str:
    flags = []
    if rules.can_join(game, account):
        flags.append("joinable")
    if rules.can_move(game, account):
        flags.append("your move")
    if rules.is_waiting_for_opponent(game, account):
        flags.append("waiting")
    suffix = f" ({', '.join(flags)})" if flags else ""
    return (
        f"#{game.id:<5} {rules.short_address(game.player1)} vs "
        f"{rules.short_address(game.player2)}  stake={game.stake}  "
        f"{rules.game_status(game)}{suffix}"
    )


@cli.command()
@click.pass_context
def lobby(ctx: click.Context) -> None:
    """Show the lobby and refresh it whenever a game changes."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)

    def _show(outcome: LobbyOutcome) -> None:
        click.echo(f"\nLobby: {outcome.total} games")
        for game in outcome.games:
            click.echo("  " + _format_game(game, cfg.account))
        if outcome.my_active_games:
            ids = ", ".join(f"#{g.id}" for g in outcome.my_active_games)
            click.echo(f"My active games: {ids}")

    async def _lobby():
        adapter = _adapter(cfg)
        service = GameSyncService(adapter, cfg.poll)
        service.subscribe_lobby(_show)
        try:
            await _until_interrupted()
        finally:
            await service.close()
            await adapter.close()

    asyncio.run(_lobby())


@cli.command()
@click.argument("game_id", type=int)
@click.pass_context
def room(ctx: click.Context, game_id: int) -> None:
    """Follow a single game until interrupted."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)

    def _milestone(m: Milestone) -> None:
        click.echo(f">>> {m.message}")

    async def _room():
        adapter = _adapter(cfg)
        service = GameSyncService(adapter, cfg.poll)
        service.subscribe_game(
            game_id,
            lambda g: click.echo(_format_game(g, cfg.account)),
            _milestone,
        )
        try:
            await _until_interrupted()
        finally:
            await service.close()
            await adapter.close()

    asyncio.run(_room())


# ── Account ────────────────────────────────────────────


@cli.command()
@click.option("--page", "page_index", type=int, default=0, help="Zero-based page index")
@click.pass_context
def history(ctx: click.Context, page_index: int) -> None:
    """Show one page of the account's game history."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)
    _require_account(cfg)

    async def _history():
        adapter = _adapter(cfg)
        service = GameSyncService(adapter, cfg.poll)
        try:
            page = await service.fetch_history_page(page_index)
        except SyncError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        finally:
            await adapter.close()

        if page is None:
            return
        if not page.entries:
            click.echo("No games on this page.")
        for e in page.entries:
            kind = "Single" if e.kind is GameKind.SINGLE else "Multi"
            click.echo(
                f"  #{e.game_id:<5} {kind:<6} vs {rules.short_address(e.opponent, placeholder='House')}  "
                f"{rules.choice_name(e.player_choice)}/{rules.choice_name(e.opponent_choice)}  "
                f"{e.result.name:<4} payout={e.payout}  {_date(e.timestamp)}"
            )
        last = min((page.index + 1) * page.page_size, page.total)
        click.echo(f"Showing {page.index * page.page_size + 1 if page.entries else 0}-{last} of {page.total}")
        nav = []
        if page.has_previous:
            nav.append(f"--page {page.index - 1} for previous")
        if page.has_next:
            nav.append(f"--page {page.index + 1} for next")
        if nav:
            click.echo("  " + ", ".join(nav))

    asyncio.run(_history())


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show the account's win/loss record and profits."""
    cfg = load_config(ctx.obj["config_path"])
    _require_contract(cfg)
    _require_account(cfg)

    async def _stats():
        adapter = _adapter(cfg)
        service = GameSyncService(adapter, cfg.poll)
        try:
            s = await service.fetch_player_stats()
        except SyncError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        finally:
            await adapter.close()

        if s is None:
            return
        click.echo(f"Wins:       {s.wins}")
        click.echo(f"Losses:     {s.losses}")
        click.echo(f"Win rate:   {s.win_rate}%")
        click.echo(f"Profits:    {s.total_profits} stroops ({_xlm(s.total_profits)})")
        for p in s.token_profits:
            click.echo(f"  {rules.short_address(p.token)}: {p.profit}")

    asyncio.run(_stats())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
