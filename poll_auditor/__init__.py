"""Poll Auditor - tally Stacks governance polls voted with STX and BTC."""

__version__ = "1.0.0"

from .config import PollConfig
from .pipeline import PollAuditor

__all__ = ["PollAuditor", "PollConfig"]
