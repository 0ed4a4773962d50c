"""Shared fixtures: a seeded simulator and an in-memory save store."""

import random

import pytest

from cubeburst.data.balance import BALANCE
from cubeburst.engine.particles import ParticleSimulator
from cubeburst.engine.save import MemorySaveStore
from cubeburst.engine.session import GameSession


@pytest.fixture
def store():
    return MemorySaveStore()


@pytest.fixture
def make_session(store):
    """Build a session with a deterministic simulator."""

    def _make(state=None, **kwargs):
        kwargs.setdefault("store", store)
        kwargs.setdefault(
            "simulator",
            ParticleSimulator(balance=BALANCE.particles, rng=random.Random(42)),
        )
        return GameSession(state=state, **kwargs)

    return _make


@pytest.fixture
def session(make_session):
    return make_session()
