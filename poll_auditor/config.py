"""
Poll configuration.

A PollConfig instance describes one poll (vote addresses, PoX cycles,
block window) plus the fetch settings of the run. It is immutable and is
handed to every component explicitly; nothing reads configuration from
module globals.

Values are usually loaded from the environment (or a .env file) with
PollConfig.from_env():

    POLL_API_KEY              Hiro API key, sent as X-API-KEY (optional)
    POLL_STACKS_API_URL       default https://api.hiro.so
    POLL_MEMPOOL_API_URL      default https://mempool.space/api
    POLL_STX_YES_ADDRESS      Stacks address receiving YES votes
    POLL_STX_NO_ADDRESS       Stacks address receiving NO votes
    POLL_BTC_YES_ADDRESS      Bitcoin address receiving YES votes
    POLL_BTC_NO_ADDRESS       Bitcoin address receiving NO votes
    POLL_POX_CYCLES           comma separated reward cycle ids, e.g. "84,85"
    POLL_START_BLOCK          first Stacks block height of the poll (inclusive)
    POLL_END_BLOCK            last Stacks block height of the poll (inclusive)
    POLL_PAGE_LIMIT           page size for paginated endpoints (default 50)
    POLL_RETRY_LIMIT          retries after the first attempt (default 18)
    POLL_RETRY_DELAY          seconds between attempts (default 10)
    POLL_SECONDARY_STACKED_ONLY  "true" (default) or "false"
    POLL_MAX_CONCURRENT_REQUESTS  bound on parallel balance lookups (default 10)
    POLL_OUTPUT_DIR           directory for CSV exports (default "output")
    POLL_FILE_PREFIX          prefix of CSV file names (default "poll")
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

from poll_auditor.shared.addresses import (
    normalize_btc_address,
    normalize_stacks_address,
)
from poll_auditor.shared.exceptions import ConfigurationException

DEFAULT_STACKS_API_URL = "https://api.hiro.so"
DEFAULT_MEMPOOL_API_URL = "https://mempool.space/api"
DEFAULT_PAGE_LIMIT = 50
DEFAULT_RETRY_LIMIT = 18
DEFAULT_RETRY_DELAY = 10.0

# micro-STX per STX
MICRO_STX_PER_STX = 1_000_000

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class PollConfig:
    """
    Immutable settings for one poll tally.

    secondary_stacked_only:
        The BTC channel only ever represents stacked participation: a
        stacker voting through its payout address is credited with its
        locked STX, its unstacked total is 0 and its total metric equals
        the locked amount. Set to False to credit BTC voters with their
        full balance like STX voters.
    """

    stx_yes_address: str
    stx_no_address: str
    btc_yes_address: str
    btc_no_address: str
    start_block: int
    end_block: int
    pox_cycles: Tuple[int, ...] = field(default_factory=tuple)
    api_key: Optional[str] = None
    stacks_api_url: str = DEFAULT_STACKS_API_URL
    mempool_api_url: str = DEFAULT_MEMPOOL_API_URL
    page_limit: int = DEFAULT_PAGE_LIMIT
    retry_limit: int = DEFAULT_RETRY_LIMIT
    retry_delay: float = DEFAULT_RETRY_DELAY
    secondary_stacked_only: bool = True
    max_concurrent_requests: int = 10
    output_dir: str = "output"
    file_prefix: str = "poll"

    def __post_init__(self):
        # frozen: normalized values are written through object.__setattr__
        object.__setattr__(
            self, "stx_yes_address", normalize_stacks_address(self.stx_yes_address)
        )
        object.__setattr__(
            self, "stx_no_address", normalize_stacks_address(self.stx_no_address)
        )
        object.__setattr__(
            self, "btc_yes_address", normalize_btc_address(self.btc_yes_address)
        )
        object.__setattr__(
            self, "btc_no_address", normalize_btc_address(self.btc_no_address)
        )
        object.__setattr__(self, "pox_cycles", tuple(self.pox_cycles))

    def validate(self) -> "PollConfig":
        """
        Check the configuration before any network call is made.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigurationException: On the first invalid value found
        """
        for name in (
            "stx_yes_address",
            "stx_no_address",
            "btc_yes_address",
            "btc_no_address",
        ):
            if not getattr(self, name):
                raise ConfigurationException(f"{name} is not set")

        if self.stx_yes_address == self.stx_no_address:
            raise ConfigurationException(
                "STX YES and NO vote addresses must differ"
            )
        if self.btc_yes_address == self.btc_no_address:
            raise ConfigurationException(
                "BTC YES and NO vote addresses must differ"
            )
        if self.start_block < 0 or self.end_block < 0:
            raise ConfigurationException("Block heights must be >= 0")
        if self.start_block > self.end_block:
            raise ConfigurationException(
                f"start_block ({self.start_block}) is after "
                f"end_block ({self.end_block})"
            )
        if self.page_limit <= 0:
            raise ConfigurationException("page_limit must be > 0")
        if self.retry_limit < 0 or self.retry_delay < 0:
            raise ConfigurationException(
                "retry_limit and retry_delay must be >= 0"
            )
        if self.max_concurrent_requests <= 0:
            raise ConfigurationException("max_concurrent_requests must be > 0")
        return self

    def with_output(
        self, output_dir: Optional[str] = None, file_prefix: Optional[str] = None
    ) -> "PollConfig":
        """Copy of this config with a different output location."""
        return replace(
            self,
            output_dir=output_dir or self.output_dir,
            file_prefix=file_prefix or self.file_prefix,
        )

    @property
    def stacks_headers(self) -> dict:
        return {"X-API-KEY": self.api_key} if self.api_key else {}

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "PollConfig":
        """
        Build a config from POLL_* environment variables.

        Args:
            env_file: Optional .env file loaded before reading the environment

        Raises:
            ConfigurationException: If a numeric variable cannot be parsed
        """
        load_dotenv(env_file)

        return cls(
            api_key=os.getenv("POLL_API_KEY") or None,
            stacks_api_url=os.getenv("POLL_STACKS_API_URL", DEFAULT_STACKS_API_URL),
            mempool_api_url=os.getenv(
                "POLL_MEMPOOL_API_URL", DEFAULT_MEMPOOL_API_URL
            ),
            stx_yes_address=os.getenv("POLL_STX_YES_ADDRESS", ""),
            stx_no_address=os.getenv("POLL_STX_NO_ADDRESS", ""),
            btc_yes_address=os.getenv("POLL_BTC_YES_ADDRESS", ""),
            btc_no_address=os.getenv("POLL_BTC_NO_ADDRESS", ""),
            pox_cycles=_parse_cycles(os.getenv("POLL_POX_CYCLES", "")),
            start_block=_env_int("POLL_START_BLOCK", 0),
            end_block=_env_int("POLL_END_BLOCK", 0),
            page_limit=_env_int("POLL_PAGE_LIMIT", DEFAULT_PAGE_LIMIT),
            retry_limit=_env_int("POLL_RETRY_LIMIT", DEFAULT_RETRY_LIMIT),
            retry_delay=_env_float("POLL_RETRY_DELAY", DEFAULT_RETRY_DELAY),
            secondary_stacked_only=os.getenv(
                "POLL_SECONDARY_STACKED_ONLY", "true"
            ).strip().lower()
            in _TRUE_VALUES,
            max_concurrent_requests=_env_int("POLL_MAX_CONCURRENT_REQUESTS", 10),
            output_dir=os.getenv("POLL_OUTPUT_DIR", "output"),
            file_prefix=os.getenv("POLL_FILE_PREFIX", "poll"),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationException(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}")


def _parse_cycles(raw: str) -> Tuple[int, ...]:
    cycles = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            cycles.append(int(part))
        except ValueError:
            raise ConfigurationException(
                f"POLL_POX_CYCLES must be comma separated integers, got {raw!r}"
            )
    return tuple(cycles)
