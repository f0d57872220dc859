"""Integration test configuration for pytest.

Integration tests run the provider as a child process, the way a host would.
"""
import os
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


@pytest.fixture(scope="session")
def provider_command() -> list[str]:
    """Command line that starts the provider's run command."""
    return [sys.executable, "-m", "counter_provider", "run"]


@pytest.fixture
def provider_env() -> dict[str, str]:
    """Environment with the source tree importable and no provider overrides."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("COUNTER_PROVIDER_")}
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    env["PYTHONUNBUFFERED"] = "1"
    return env
