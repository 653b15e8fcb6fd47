"""
Shared fixtures for the classbox suites.
"""

import pytest

from classbox import Env, Log


@pytest.fixture(autouse=True)
def reset_env():
    """Drop config overrides made by a test."""
    yield
    env = Env.cur()
    for key in list(env._overrides):
        env.setConfig(key, None)


@pytest.fixture
def log_recs():
    """Collect every LogRec emitted while the test runs."""
    recs = []
    Log.addHandler(recs.append)
    yield recs
    Log.removeHandler(recs.append)
