import itertools
import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from mastery.application.config import EngineConfig
from mastery.application.engine import MasteryEngine
from mastery.infrastructure.clock import FixedClock

# Fixed offset so day boundaries do not depend on the machine running the tests.
# The process zone is pinned to the same offset by the local_timezone fixture.
LOCAL_TZ = timezone(timedelta(hours=5, minutes=30))
LOCAL_TZ_POSIX = "IST-05:30"
START = datetime(2026, 3, 2, 10, 0, tzinfo=LOCAL_TZ)


@pytest.fixture(autouse=True)
def mock_home(tmp_path_factory, monkeypatch):
    """Mocks Path.home() to point to a temp dir and drops MASTERY_* env vars."""
    home = tmp_path_factory.mktemp("home")

    # Isolate config files and state from the developer's real home directory
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("MASTERY_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def config():
    return EngineConfig(achievement_bonus=False)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"card_{next(counter):04d}"


@pytest.fixture
def engine(clock, config, id_factory):
    return MasteryEngine(clock, config=config, id_factory=id_factory)


@pytest.fixture(autouse=True)
def local_timezone():
    """Pins the process's local time zone to LOCAL_TZ (UTC+05:30, no DST)."""
    previous = os.environ.get("TZ")
    os.environ["TZ"] = LOCAL_TZ_POSIX
    time.tzset()
    yield LOCAL_TZ
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()
