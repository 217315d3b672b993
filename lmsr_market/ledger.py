"""
Ledger. Collateral, positions and trade application for one LMSR market.

The ledger owns its PricingEngine and asks it for every price and cost;
it never evaluates the cost function itself. What the ledger adds is
bookkeeping and the solvency rule:

  A trade executes only if the participant has a position and
  collateral >= cost. Otherwise it is declined and nothing changes.

Executed trades move three things together: collateral -= cost,
position.shares[outcome] += delta, engine shares[outcome] += delta.
All three happen under the ledger lock after the cost was read under
the same lock, so an interleaved trade cannot change the cost basis.

Invariant: for every outcome i,
  engine.outstanding_shares[i] == sum(pos.shares[i] for pos in participants)
for a ledger whose engine started from zero.
"""

import logging
import math
import threading
from typing import Optional

from lmsr_market.config import MarketConfig
from lmsr_market.lmsr import PricingEngine
from lmsr_market.models import (
    Position, TradeResult,
    UNKNOWN_PARTICIPANT, INSUFFICIENT_COLLATERAL,
)
from lmsr_market.snapshot_models import (
    EngineSnapshot, LedgerSnapshot, PositionSnapshot,
)


logger = logging.getLogger(__name__)


class Ledger:

    def __init__(self, engine: PricingEngine):
        self.engine = engine
        self.participants: dict[str, Position] = {}
        self.trades: list[TradeResult] = []
        self._lock = threading.Lock()

    @classmethod
    def new(cls, liquidity: float, num_outcomes: int) -> "Ledger":
        return cls(PricingEngine(liquidity, num_outcomes))

    @classmethod
    def from_config(cls, config: MarketConfig) -> "Ledger":
        return cls.new(config.liquidity, config.num_outcomes)

    # ------------------------------------------------------------------
    # Collateral
    # ------------------------------------------------------------------

    def deposit_collateral(self, participant_id: str, amount: float) -> None:
        """
        Add collateral for a participant, creating an empty position on
        first deposit. Negative or non-finite amounts are rejected.
        """
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(
                f"deposit must be a non-negative amount, got {amount}")
        with self._lock:
            pos = self.participants.get(participant_id)
            if pos is None:
                pos = Position.new(self.engine.num_outcomes)
                self.participants[participant_id] = pos
            pos.collateral += amount
            logger.debug(f"deposit {participant_id}: +{amount}, "
                         f"collateral {pos.collateral}")

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def trade(self, participant_id: str, outcome_id: int,
              delta_shares: float) -> TradeResult:
        """
        Buy (delta > 0) or sell (delta < 0) shares of an outcome against
        the market maker.

        Returns an executed TradeResult, or a declined one with reason
        UNKNOWN_PARTICIPANT / INSUFFICIENT_COLLATERAL. Raises
        InvalidOutcomeIndex for a bad outcome id.
        """
        if not math.isfinite(delta_shares):
            raise ValueError(f"share amount must be finite, got {delta_shares}")
        with self._lock:
            return self._execute_trade(participant_id, outcome_id, delta_shares)

    def buy_with_max_price(self, participant_id: str, outcome_id: int,
                           shares: float,
                           max_price: float) -> Optional[TradeResult]:
        """
        Buy up to `shares` of an outcome without pushing its price past
        max_price.

        If the cap is reached first, only the shares needed to hit it are
        bought. Negative `shares` is a no-op and returns None, after the
        outcome id and cap have been validated. The cap is computed from
        the current engine state inside the same critical section as the
        trade.
        """
        if not math.isfinite(shares):
            raise ValueError(f"share amount must be finite, got {shares}")
        with self._lock:
            shares_to_max = self.engine.shares_to_reach_price(
                outcome_id, max_price)
            if shares < 0:
                return None
            return self._execute_trade(
                participant_id, outcome_id, min(shares, shares_to_max))

    def _execute_trade(self, participant_id: str, outcome_id: int,
                       delta_shares: float) -> TradeResult:
        """Trade core. Caller holds the lock."""
        cost = self.engine.cost_to_trade(outcome_id, delta_shares)

        pos = self.participants.get(participant_id)
        if pos is None:
            logger.info(f"trade declined for {participant_id}: "
                        f"no position")
            return TradeResult.declined(participant_id, outcome_id,
                                        delta_shares, cost,
                                        UNKNOWN_PARTICIPANT)
        if pos.collateral < cost:
            logger.info(f"trade declined for {participant_id}: "
                        f"need {cost}, have {pos.collateral}")
            return TradeResult.declined(participant_id, outcome_id,
                                        delta_shares, cost,
                                        INSUFFICIENT_COLLATERAL)

        pos.collateral -= cost
        pos.shares[outcome_id] += delta_shares
        self.engine.trade(outcome_id, delta_shares)

        result = TradeResult.ok(participant_id, outcome_id, delta_shares, cost)
        self.trades.append(result)
        logger.debug(f"trade {participant_id}: {delta_shares:+} of outcome "
                     f"{outcome_id} for {cost}, collateral {pos.collateral}")
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def position(self, participant_id: str) -> Optional[Position]:
        """A copy of the participant's position, or None. Edits don't reach the ledger."""
        with self._lock:
            pos = self.participants.get(participant_id)
            if pos is None:
                return None
            return Position(shares=list(pos.shares), collateral=pos.collateral)

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            engine = self.engine
            return LedgerSnapshot(
                engine=EngineSnapshot(
                    liquidity=engine.liquidity,
                    outstanding_shares=list(engine.outstanding_shares),
                    prices=engine.prices(),
                    cost=engine.cost(),
                ),
                participants={
                    pid: PositionSnapshot(shares=list(pos.shares),
                                          collateral=pos.collateral)
                    for pid, pos in self.participants.items()
                },
                num_trades=len(self.trades),
            )
