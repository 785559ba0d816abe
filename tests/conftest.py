"""
Pytest configuration and shared fixtures for all jsdeob tests.

The rewriter and driver are stateless between calls, so one instance of
each is shared across the whole session.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))
from jsdeob.compiler.driver import PrettifyDriver
from jsdeob.passes.rewriter import Rewriter


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_driver():
    """Driver with every built-in rule; builds a fresh parser per call"""
    return PrettifyDriver()


@pytest.fixture(scope="session")
def session_rewriter():
    """Rewriter with the default registry"""
    return Rewriter()


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def rewriter(session_rewriter):
    return session_rewriter


@pytest.fixture
def driver(session_driver):
    return session_driver


@pytest.fixture
def no_color(monkeypatch):
    """Plain diagnostics regardless of the terminal"""
    monkeypatch.setenv("NO_COLOR", "1")


def pytest_configure(config):
    config.addinivalue_line("markers", "cli: tests driving the command line entry point")
