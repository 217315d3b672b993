"""
LMSR (Logarithmic Market Scoring Rule) pricing.

The module-level functions are pure math over a share vector: they take
floats and return floats and never touch state. PricingEngine wraps one
share vector, validates inputs at its boundary and is the only place
where shares change.

Notation:
    q: sequence of outstanding shares, index = outcome id
    b: float, liquidity parameter (higher = deeper book, max loss = b * ln(n))

All sums of exponentials go through log-sum-exp: max(q_i / b) is taken
out before exponentiating and added back after the log, so q / b in the
thousands stays finite.
"""

import math
from typing import Optional, Sequence


class InvalidLiquidity(ValueError):
    pass


class InvalidOutcomeIndex(ValueError, IndexError):
    pass


class InvalidPriceTarget(ValueError):
    pass


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _scaled(q: Sequence[float], b: float,
            bump: Optional[tuple[int, float]] = None) -> list[float]:
    """q_i / b, with bump=(outcome, delta) applied to one entry on the fly."""
    if bump is None:
        return [v / b for v in q]
    outcome, delta = bump
    return [(v + delta if i == outcome else v) / b for i, v in enumerate(q)]


def _log_sum_exp(x: Sequence[float]) -> float:
    """ln(Σ e^x_i), stabilized by the max."""
    m = max(x)
    return m + math.log(sum(math.exp(v - m) for v in x))


# ---------------------------------------------------------------------------
# Core functions
# ---------------------------------------------------------------------------

def cost(q: Sequence[float], b: float,
         bump: Optional[tuple[int, float]] = None) -> float:
    """
    Cost function: C(q) = b * ln(Σ e^(q_i / b))

    The total collateral the market maker has collected to reach q from
    the all-zero vector, plus the constant b * ln(n). Only differences
    C(after) - C(before) are meaningful as trade costs.

    bump evaluates C at q with one entry shifted, without building a
    second vector.
    """
    return b * _log_sum_exp(_scaled(q, b, bump))


def prices(q: Sequence[float], b: float) -> list[float]:
    """
    Current prices (probabilities) for each outcome.

    p_i = e^(q_i / b) / Σ e^(q_j / b)

    Softmax over q / b. Always sums to 1.
    """
    x = _scaled(q, b)
    m = max(x)
    exp_vals = [math.exp(v - m) for v in x]
    total = sum(exp_vals)
    return [v / total for v in exp_vals]


def price(q: Sequence[float], b: float, outcome: int) -> float:
    x = _scaled(q, b)
    return math.exp(x[outcome] - _log_sum_exp(x))


def cost_to_trade(q: Sequence[float], b: float,
                  outcome: int, delta: float) -> float:
    """
    Collateral required to issue `delta` shares of `outcome`.

    cost = C(q_after) - C(q_before)

    Positive for buys. For selling, pass a negative delta: the result is
    negative (collateral paid back). q itself is only read.
    """
    return cost(q, b, bump=(outcome, delta)) - cost(q, b)


def shares_for_cost(q: Sequence[float], b: float,
                    outcome: int, budget: float) -> float:
    """
    Inverse of cost_to_trade. Given a collateral budget, how many shares
    of `outcome` does it buy?

    amount = b * ln(S * (e^(budget/b) - 1) / e_o + 1)

    where S = Σ e^(q_i/b) and e_o = e^(q_outcome/b).

    Positive budget -> shares you can buy.
    Negative budget -> shares you must sell to receive that much back.
    """
    x = _scaled(q, b)
    ratio = math.exp(_log_sum_exp(x) - x[outcome])    # S / e_o
    inner = ratio * math.expm1(budget / b)
    if inner <= -1:
        raise ValueError(
            f"refund of {-budget} exceeds what outcome {outcome} can pay back")
    return b * math.log1p(inner)


def shares_to_reach_price(q: Sequence[float], b: float,
                          outcome: int, target_price: float) -> float:
    """
    Signed shares of `outcome` that move its price to target_price.

    amount = b * (ln(t / p) - ln((1 - t) / (1 - p)))
           = b * (logit(t) - logit(p))

    where p is the current price. This is the two-outcome closed form.
    It also holds for n > 2 when the shares are applied to `outcome`
    alone: the other outcomes then act as one lumped counter-outcome
    whose weight Σ_{j != o} e^(q_j/b) does not move, so the odds
    p / (1 - p) scale by exactly e^(amount/b). It says nothing about
    reaching the target by trading any other outcome.

    logit(p) = q_o/b - ln(Σ_{j != o} e^(q_j/b)) is taken straight from
    the shares. p itself rounds to 1.0 once q_o/b leads by ~37, and
    1 - p would then be zero.
    """
    x = _scaled(q, b)
    logit_p = x[outcome] - _log_sum_exp(x[:outcome] + x[outcome + 1:])
    return b * (math.log(target_price / (1 - target_price)) - logit_p)


def max_loss(b: float, n: int) -> float:
    """Maximum market maker loss: b * ln(n). The subsidy backing a market."""
    return b * math.log(n)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class PricingEngine:
    """
    LMSR state for one market: liquidity b and outstanding shares.

    Every query validates the outcome id and reads the share vector in
    place; trade() is the only mutator and does no solvency checking.
    """

    def __init__(self, liquidity: float, num_outcomes: int,
                 outstanding_shares: Optional[Sequence[float]] = None):
        if not (math.isfinite(liquidity) and liquidity > 0):
            raise InvalidLiquidity(
                f"liquidity must be a positive number, got {liquidity}")
        if num_outcomes < 2:
            raise ValueError(f"need at least two outcomes, got {num_outcomes}")
        if outstanding_shares is None:
            outstanding_shares = [0.0] * num_outcomes
        elif len(outstanding_shares) != num_outcomes:
            raise ValueError(
                f"expected {num_outcomes} share entries, "
                f"got {len(outstanding_shares)}")
        self.liquidity = float(liquidity)
        self.outstanding_shares: list[float] = [float(v) for v in outstanding_shares]

    @property
    def num_outcomes(self) -> int:
        return len(self.outstanding_shares)

    def cost(self) -> float:
        return cost(self.outstanding_shares, self.liquidity)

    def price(self, outcome_id: int) -> float:
        self._check_outcome(outcome_id)
        return price(self.outstanding_shares, self.liquidity, outcome_id)

    def prices(self) -> list[float]:
        return prices(self.outstanding_shares, self.liquidity)

    def cost_to_trade(self, outcome_id: int, delta_shares: float) -> float:
        self._check_outcome(outcome_id)
        return cost_to_trade(self.outstanding_shares, self.liquidity,
                             outcome_id, delta_shares)

    def shares_for_cost(self, outcome_id: int, budget: float) -> float:
        self._check_outcome(outcome_id)
        return shares_for_cost(self.outstanding_shares, self.liquidity,
                               outcome_id, budget)

    def shares_to_reach_price(self, outcome_id: int,
                              target_price: float) -> float:
        """
        Shares of `outcome_id` to buy (positive) or sell (negative) to move
        its price to target_price. Two-outcome closed form; see the
        module-level function for why it carries over to n > 2.

        Raises InvalidPriceTarget unless 0 < target_price < 1.
        """
        self._check_outcome(outcome_id)
        if not 0 < target_price < 1:
            raise InvalidPriceTarget(
                f"target price must be in (0, 1), got {target_price}")
        return shares_to_reach_price(self.outstanding_shares, self.liquidity,
                                     outcome_id, target_price)

    def max_loss(self) -> float:
        return max_loss(self.liquidity, self.num_outcomes)

    def trade(self, outcome_id: int, delta_shares: float) -> None:
        self._check_outcome(outcome_id)
        self.outstanding_shares[outcome_id] += delta_shares

    def _check_outcome(self, outcome_id: int) -> None:
        if (not isinstance(outcome_id, int) or isinstance(outcome_id, bool)
                or not 0 <= outcome_id < len(self.outstanding_shares)):
            raise InvalidOutcomeIndex(
                f"unknown outcome: {outcome_id!r} "
                f"(market has {len(self.outstanding_shares)})")
