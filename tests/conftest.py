import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402
import pytest  # noqa: E402

import FallingDodge as fd  # noqa: E402


class StubRng:
    """Stand-in for `random`: random() is fixed, uniform() picks a fraction."""

    def __init__(self, roll=0.99, frac=0.0):
        self.roll = roll
        self.frac = frac

    def random(self):
        return self.roll

    def uniform(self, a, b):
        return a + (b - a) * self.frac


@pytest.fixture
def no_spawn():
    return StubRng(roll=0.99)


@pytest.fixture
def running_state():
    return fd.new_state(phase=fd.RunPhase.RUNNING)


@pytest.fixture
def font():
    pygame.font.init()
    yield pygame.font.Font(None, 28)
    pygame.font.quit()


@pytest.fixture
def make_rng():
    return StubRng
