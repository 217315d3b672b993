"""
Pydantic snapshot models. Plain data for whatever stores or ships a
ledger: model_dump() / model_dump_json() give JSON-safe output.
"""

from pydantic import BaseModel


class PositionSnapshot(BaseModel):
    shares: list[float]
    collateral: float


class EngineSnapshot(BaseModel):
    liquidity: float
    outstanding_shares: list[float]
    prices: list[float]
    cost: float


class LedgerSnapshot(BaseModel):
    engine: EngineSnapshot
    participants: dict[str, PositionSnapshot]
    num_trades: int
