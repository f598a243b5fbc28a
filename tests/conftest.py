"""Shared pytest fixtures for all tests."""

import sys
from pathlib import Path

import pytest

# Project modules live at the repository root
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import FakeSolver  # noqa: E402
from smart_solver import SolverError  # noqa: E402


@pytest.fixture
def fake_solver():
    return FakeSolver()


@pytest.fixture
def failing_solver():
    return FakeSolver(error=SolverError("quota exceeded"))


@pytest.fixture
def session(fake_solver):
    from session_manager import CalculatorSession
    return CalculatorSession(solver=fake_solver)


@pytest.fixture
def api_client(monkeypatch, session):
    """Flask test client bound to a fresh session with a fake solver."""
    import api
    monkeypatch.setattr(api, "session", session)
    api.app.config['TESTING'] = True
    with api.app.test_client() as client:
        yield client
