import random

import pytest

from warp_kitten import log as log_module
from warp_kitten.geometry import Viewport
from warp_kitten.kitten import PursuitController
from warp_kitten.settings import SimulationConfig
from warp_kitten.timers import Scheduler
from warp_kitten.treats import TreatPhysics


@pytest.fixture(autouse=True)
def quiet_log_file(monkeypatch):
    # Console only; keep test runs from writing game_debug.log
    monkeypatch.setattr(log_module, "LOG_FILE", None)


@pytest.fixture
def viewport():
    return Viewport(800, 600)


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def engine(viewport, scheduler):
    return TreatPhysics(viewport, scheduler, SimulationConfig(), random.Random(1234))


@pytest.fixture
def controller(engine, viewport, scheduler):
    return PursuitController(engine, viewport, scheduler, rng=random.Random(99))


def place_treat(engine, x, y, vy=0.0, landing=True):
    """Spawn a treat and pin it at an exact pixel position."""
    treat = engine.find(engine.spawn(x, y))
    treat.x, treat.y = float(x), float(y)
    treat.vx, treat.vy = 0.0, vy
    treat.is_landing = landing
    return treat


@pytest.fixture
def place(engine):
    return lambda x, y, **kw: place_treat(engine, x, y, **kw)
