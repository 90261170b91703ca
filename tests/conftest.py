"""Shared fixtures for rps_watch tests."""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest
from pytest_metadata.plugin import metadata_key

from rps_watch.models.config import PollConfig

from tests.factories import ALICE
from tests.mocks import MockLedger

CONTRACT_ID = "CCEDYFIHUCJFITWEOT7BWUO2HBQQ72L244ZXQ4YNOC6FYRDN3MKDQFK7"


def pytest_configure(config):
    """Add run info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "in-memory mock ledger"
    meta["Game Contract"] = CONTRACT_ID
    meta["Local Account"] = ALICE


def fast_poll_config(**overrides) -> PollConfig:
    """PollConfig with tick periods short enough for tests."""
    defaults = dict(
        event_poll_interval=0.01,
        room_poll_interval=0.01,
        lobby_poll_interval=0.01,
        category_pause=0,
    )
    defaults.update(overrides)
    return PollConfig(**defaults)


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until ``predicate`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def ledger():
    """Mock ledger at height 1000 with ALICE as the local account."""
    return MockLedger(height=1000, account=ALICE)


@pytest.fixture
def anon_ledger():
    """Mock ledger without a session."""
    return MockLedger(height=1000, account=None)
