"""Cost estimation over a job's windowed run history."""

import logging
from dataclasses import dataclass
from typing import Iterable

from src.audit.pricing import DEFAULT_PRICING, PricingTable
from src.constants import MIN_TOKENS_PER_RUN, MONEY_DECIMALS, TOKENS_PER_SUMMARY_CHAR
from src.models import RunRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostStats:
    """Aggregated spend for one job over the analysis window.

    Values are unrounded; use ``rounded()`` for display.
    """

    total_cost: float = 0.0
    avg_cost_per_run: float = 0.0
    total_tokens: int = 0
    run_count: int = 0

    def rounded(self) -> "CostStats":
        return CostStats(
            total_cost=round(self.total_cost, MONEY_DECIMALS),
            avg_cost_per_run=round(self.avg_cost_per_run, MONEY_DECIMALS),
            total_tokens=self.total_tokens,
            run_count=self.run_count,
        )


class CostEstimator:
    """Converts run records into dollar figures using a pricing table."""

    def __init__(self, pricing: PricingTable = DEFAULT_PRICING):
        self.pricing = pricing

    def run_cost(self, run: RunRecord, rate: float) -> float:
        """Recorded cost when non-zero, otherwise a token estimate.

        Runs with no (or a zero) recorded cost predate cost tracking; their
        size is guessed from the summary length with a fixed overhead floor.
        """
        if run.cost:
            return run.cost
        tokens = max(MIN_TOKENS_PER_RUN, (run.summary_length or 0) * TOKENS_PER_SUMMARY_CHAR)
        return tokens / 1_000_000 * rate

    def estimate(self, runs: Iterable[RunRecord], model: str) -> CostStats:
        """Fold already-filtered runs into ``CostStats``."""
        runs = list(runs)
        if not runs:
            return CostStats()

        rate = self.pricing.rate_for(model)
        total_cost = 0.0
        total_tokens = 0
        for run in runs:
            total_tokens += run.total_tokens
            total_cost += self.run_cost(run, rate)

        logger.debug(
            f"{model}: {len(runs)} runs, ${total_cost:.4f} at ${rate}/M tokens"
        )
        return CostStats(
            total_cost=total_cost,
            avg_cost_per_run=total_cost / len(runs),
            total_tokens=total_tokens,
            run_count=len(runs),
        )
