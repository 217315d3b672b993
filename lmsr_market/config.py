"""
Market configuration.

Defaults come from the environment:
    LMSR_LIQUIDITY   liquidity parameter b (default 100)
    LMSR_OUTCOMES    number of outcomes (default 2)
"""

import os

from pydantic import BaseModel, Field


DEFAULT_LIQUIDITY = 100.0
DEFAULT_OUTCOMES = 2


class MarketConfig(BaseModel):
    liquidity: float = Field(default=DEFAULT_LIQUIDITY, gt=0, allow_inf_nan=False)
    num_outcomes: int = Field(default=DEFAULT_OUTCOMES, ge=2)

    @classmethod
    def from_env(cls) -> "MarketConfig":
        return cls(
            liquidity=os.environ.get("LMSR_LIQUIDITY", DEFAULT_LIQUIDITY),
            num_outcomes=os.environ.get("LMSR_OUTCOMES", DEFAULT_OUTCOMES),
        )
