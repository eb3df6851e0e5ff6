import os

import pytest

SKIP_SLOW = None


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: pairing-heavy test, skipped when CL_VERIFIER_SKIP_SLOW is set"
    )


def pytest_sessionstart(session):
    global SKIP_SLOW

    SKIP_SLOW = os.getenv("CL_VERIFIER_SKIP_SLOW", "").lower()
    SKIP_SLOW = SKIP_SLOW and SKIP_SLOW not in ("false", "0")


def pytest_runtest_setup(item: pytest.Item):
    if tuple(item.iter_markers(name="slow")) and SKIP_SLOW:
        pytest.skip("slow test skipped by CL_VERIFIER_SKIP_SLOW")
