"""
Data models for the ledger side of an LMSR market.

A Position is what one participant holds: collateral plus signed share
counts per outcome. A TradeResult is the ledger's answer to a trade
request, executed or declined. Declines are ordinary values here, not
exceptions: the caller asked for something the participant could not
afford, nothing went wrong.

Amounts are floats in collateral units. Shares are signed (negative =
sold more than held).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


EXECUTED = "executed"
DECLINED = "declined"

# Decline reasons
UNKNOWN_PARTICIPANT = "unknown_participant"
INSUFFICIENT_COLLATERAL = "insufficient_collateral"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Position:
    """
    One participant's holdings in a market.

    shares: per-outcome holdings, same length as the market's outcomes
    collateral: deposited funds not yet spent, never negative
    """
    shares: list[float]
    collateral: float = 0.0

    @staticmethod
    def new(num_outcomes: int) -> "Position":
        return Position(shares=[0.0] * num_outcomes)


@dataclass
class TradeResult:
    """
    Outcome of a ledger trade request.

    shares: signed delta applied (executed) or attempted (declined)
    cost: collateral charged; negative means collateral paid back
    reason: None if executed, else UNKNOWN_PARTICIPANT or
            INSUFFICIENT_COLLATERAL
    """
    status: str
    participant_id: str
    outcome_id: int
    shares: float
    cost: float
    reason: Optional[str] = None
    created_at: str = field(default_factory=_now)

    @property
    def executed(self) -> bool:
        return self.status == EXECUTED

    @staticmethod
    def ok(participant_id: str, outcome_id: int, shares: float,
           cost: float) -> "TradeResult":
        return TradeResult(EXECUTED, participant_id, outcome_id, shares, cost)

    @staticmethod
    def declined(participant_id: str, outcome_id: int, shares: float,
                 cost: float, reason: str) -> "TradeResult":
        return TradeResult(DECLINED, participant_id, outcome_id, shares, cost,
                           reason=reason)
