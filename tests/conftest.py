"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

import pytest

from poll_auditor.config import PollConfig
from tests.helpers import BTC_NO, BTC_YES, STX_NO, STX_YES


@pytest.fixture
def poll_config(tmp_path) -> PollConfig:
    """Config of a poll open between blocks 0 and 200."""
    return PollConfig(
        stx_yes_address=STX_YES,
        stx_no_address=STX_NO,
        btc_yes_address=BTC_YES,
        btc_no_address=BTC_NO,
        start_block=0,
        end_block=200,
        pox_cycles=(84, 85),
        page_limit=2,
        retry_limit=2,
        retry_delay=0.0,
        output_dir=str(tmp_path / "output"),
        file_prefix="test-poll",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line("markers", "slow: mark test as slow-running")
