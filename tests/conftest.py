import os
import sys
from collections import deque

import pytest
from fastapi.testclient import TestClient

# Ensure the project root (containing core/, services/, api/) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models import ShotOutcome
from settings import Settings
from core.game_manager import GameManager
from main import create_app

BANG = ShotOutcome.BANG
CLICK = ShotOutcome.CLICK

PASS_BURN = 5
GRIT_BONUS = 10
ENTRY_FEE_HINT = 100
CHANNEL = "channel-1"


class ScriptedChamber:
    """Replays queued outcomes instead of spinning for real."""

    def __init__(self, *outcomes):
        self.outcomes = deque(outcomes)
        self.spins = 0

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)

    def spin(self):
        self.spins += 1
        if not self.outcomes:
            raise AssertionError("chamber spun more times than scripted")
        return self.outcomes.popleft()


@pytest.fixture()
def chamber():
    return ScriptedChamber()


@pytest.fixture()
def manager(chamber):
    return GameManager(
        pass_burn_amount=PASS_BURN,
        grit_bonus_amount=GRIT_BONUS,
        entry_fee_hint=ENTRY_FEE_HINT,
        chamber=chamber,
    )


@pytest.fixture()
def enroll(manager):
    """enroll("A", "B", amount=100) -> every player joins CHANNEL."""
    def _enroll(*identities, amount=100, channel_id=CHANNEL):
        results = []
        for identity in identities:
            results.append(manager.enroll(channel_id, identity, f"0x{identity}", amount))
        return results
    return _enroll


@pytest.fixture()
def started(manager, enroll):
    """started("A", "B", "C") -> enrolled and started game in CHANNEL."""
    def _started(*identities, amount=100):
        enroll(*identities, amount=amount)
        manager.start_game(CHANNEL, identities[0])
        return manager.registry.get(CHANNEL)
    return _started


@pytest.fixture()
def test_settings():
    return Settings(
        _env_file=None,
        pass_burn_amount=PASS_BURN,
        grit_bonus_amount=GRIT_BONUS,
        entry_fee_hint=ENTRY_FEE_HINT,
        bot_id=None,
        webhook_secret=None,
    )


@pytest.fixture()
def client(test_settings, chamber):
    application = create_app(test_settings, chamber=chamber)
    with TestClient(application) as test_client:
        yield test_client
