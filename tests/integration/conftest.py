"""Integration-test conftest — skip guard for live-network tests.

Integration tests require:
    ARTICLEX_TEST_INTEGRATION=1   (set in shell before running)
    outbound HTTPS

Run with:
    ARTICLEX_TEST_INTEGRATION=1 pytest tests/integration/ -v
"""

from __future__ import annotations

import os

import pytest


def pytest_collection_modifyitems(config, items):
    if os.getenv("ARTICLEX_TEST_INTEGRATION"):
        return
    skip = pytest.mark.skip(reason="Set ARTICLEX_TEST_INTEGRATION=1 to run live-network tests")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
