"""
Unit tests for PollConfig loading and validation.
"""

import dataclasses
import os

import pytest

from poll_auditor.config import (
    DEFAULT_PAGE_LIMIT,
    DEFAULT_RETRY_DELAY,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_STACKS_API_URL,
    PollConfig,
)
from poll_auditor.shared.exceptions import ConfigurationException
from tests.helpers import BTC_NO, BTC_YES, STX_NO, STX_YES


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every POLL_* variable for the duration of a test."""
    for name in list(os.environ):
        if name.startswith("POLL_"):
            monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    # load_dotenv writes to os.environ directly
    for name in list(os.environ):
        if name.startswith("POLL_"):
            del os.environ[name]


@pytest.fixture
def poll_env(clean_env):
    clean_env.setenv("POLL_STX_YES_ADDRESS", STX_YES.lower())
    clean_env.setenv("POLL_STX_NO_ADDRESS", STX_NO)
    clean_env.setenv("POLL_BTC_YES_ADDRESS", BTC_YES.upper())
    clean_env.setenv("POLL_BTC_NO_ADDRESS", BTC_NO)
    clean_env.setenv("POLL_POX_CYCLES", "84, 85,86")
    clean_env.setenv("POLL_START_BLOCK", "100")
    clean_env.setenv("POLL_END_BLOCK", "250")
    return clean_env


class TestFromEnv:
    def test_loads_values_and_defaults(self, poll_env, tmp_path):
        config = PollConfig.from_env(str(tmp_path / "missing.env"))

        assert config.stx_yes_address == STX_YES
        assert config.stx_no_address == STX_NO
        assert config.btc_yes_address == BTC_YES
        assert config.pox_cycles == (84, 85, 86)
        assert config.start_block == 100
        assert config.end_block == 250
        assert config.page_limit == DEFAULT_PAGE_LIMIT
        assert config.retry_limit == DEFAULT_RETRY_LIMIT
        assert config.retry_delay == DEFAULT_RETRY_DELAY
        assert config.stacks_api_url == DEFAULT_STACKS_API_URL
        assert config.secondary_stacked_only is True
        assert config.api_key is None

    def test_loads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / "poll.env"
        env_file.write_text(
            "\n".join(
                [
                    f"POLL_STX_YES_ADDRESS={STX_YES}",
                    f"POLL_STX_NO_ADDRESS={STX_NO}",
                    f"POLL_BTC_YES_ADDRESS={BTC_YES}",
                    f"POLL_BTC_NO_ADDRESS={BTC_NO}",
                    "POLL_API_KEY=secret",
                    "POLL_PAGE_LIMIT=20",
                    "POLL_RETRY_DELAY=2.5",
                    "POLL_SECONDARY_STACKED_ONLY=false",
                    "POLL_END_BLOCK=10",
                ]
            )
        )

        config = PollConfig.from_env(str(env_file)).validate()

        assert config.api_key == "secret"
        assert config.stacks_headers == {"X-API-KEY": "secret"}
        assert config.page_limit == 20
        assert config.retry_delay == 2.5
        assert config.secondary_stacked_only is False
        assert config.pox_cycles == ()

    def test_invalid_integer(self, poll_env, tmp_path):
        poll_env.setenv("POLL_START_BLOCK", "one hundred")

        with pytest.raises(ConfigurationException, match="POLL_START_BLOCK"):
            PollConfig.from_env(str(tmp_path / "missing.env"))

    def test_invalid_cycles(self, poll_env, tmp_path):
        poll_env.setenv("POLL_POX_CYCLES", "84,x")

        with pytest.raises(ConfigurationException, match="POLL_POX_CYCLES"):
            PollConfig.from_env(str(tmp_path / "missing.env"))


class TestValidate:
    def test_valid_config(self, poll_config):
        assert poll_config.validate() is poll_config

    def test_config_is_immutable(self, poll_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            poll_config.start_block = 5

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"stx_yes_address": ""}, "stx_yes_address"),
            ({"btc_no_address": ""}, "btc_no_address"),
            ({"stx_no_address": STX_YES.lower()}, "STX YES and NO"),
            ({"btc_no_address": BTC_YES}, "BTC YES and NO"),
            ({"start_block": 300}, "start_block"),
            ({"start_block": -1}, "Block heights"),
            ({"page_limit": 0}, "page_limit"),
            ({"retry_limit": -1}, "retry_limit"),
            ({"max_concurrent_requests": 0}, "max_concurrent_requests"),
        ],
    )
    def test_invalid_values(self, poll_config, changes, message):
        config = dataclasses.replace(poll_config, **changes)

        with pytest.raises(ConfigurationException, match=message):
            config.validate()

    def test_with_output(self, poll_config):
        config = poll_config.with_output("reports", None)

        assert config.output_dir == "reports"
        assert config.file_prefix == poll_config.file_prefix
        assert config.stx_yes_address == poll_config.stx_yes_address

    def test_no_api_key_no_header(self, poll_config):
        assert poll_config.stacks_headers == {}
