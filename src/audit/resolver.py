"""Verdict rules: turn cost, frequency and intent signals into one classification.

The rules form an ordered table; the first rule whose condition holds
decides the verdict. Frequency problems are checked before model fit,
and a job that matches nothing is right-sized.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from src.audit.cost import CostStats
from src.audit.frequency import FrequencySource, resolve_runs_per_day
from src.audit.pricing import DEFAULT_PRICING, PricingTable
from src.audit.signals import SignalScores
from src.constants import (
    BASH_SCORE_THRESHOLD,
    DAYS_PER_MONTH,
    FREQUENCY_REDUCTION_FACTOR,
    FREQUENCY_SAVINGS_RATIO,
    HOURS_PER_DAY,
    MAX_RUNS_PER_DAY,
    MIN_COST_PER_RUN,
    MIN_SUGGESTED_RUNS_PER_DAY,
    MONEY_DECIMALS,
    MONTHLY_DECIMALS,
    RATE_DECIMALS,
)
from src.models import Classification, ClassificationResult, Job

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Compact number for recommendations: ``24`` rather than ``24.0``."""
    return f"{value:.4f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class VerdictContext:
    """Everything a rule may look at, unrounded."""

    job: Job
    stats: CostStats
    signals: SignalScores
    runs_per_day: float
    cost_per_day: float
    pricing: PricingTable

    @property
    def current_rate(self) -> float:
        return self.pricing.rate_for(self.job.model)


@dataclass(frozen=True)
class Verdict:
    classification: Classification
    recommendation: Optional[str]
    savings_per_day: float


@dataclass(frozen=True)
class Rule:
    """One row of the decision table."""

    classification: Classification
    applies: Callable[[VerdictContext], bool]
    outcome: Callable[[VerdictContext], Verdict]

    def evaluate(self, ctx: VerdictContext) -> Optional[Verdict]:
        if self.applies(ctx):
            return self.outcome(ctx)
        return None


# ==================== Rules ====================


def _is_bash_replaceable(ctx: VerdictContext) -> bool:
    return ctx.signals.bash_score >= BASH_SCORE_THRESHOLD and ctx.signals.ai_score == 0


def _replace_with_bash(ctx: VerdictContext) -> Verdict:
    cost = format_number(round(ctx.cost_per_day, MONEY_DECIMALS))
    return Verdict(
        Classification.BASH_REPLACEABLE,
        f"Replace with bash script. Current: {ctx.job.model} @ ${cost}/day",
        ctx.cost_per_day,
    )


def _is_frequency_excessive(ctx: VerdictContext) -> bool:
    return (
        ctx.runs_per_day > MAX_RUNS_PER_DAY
        and ctx.stats.avg_cost_per_run > MIN_COST_PER_RUN
    )


def _reduce_frequency(ctx: VerdictContext) -> Verdict:
    suggested = max(
        MIN_SUGGESTED_RUNS_PER_DAY,
        round_half_up(ctx.runs_per_day / FREQUENCY_REDUCTION_FACTOR),
    )
    current = format_number(round(ctx.runs_per_day, RATE_DECIMALS))
    return Verdict(
        Classification.FREQUENCY_EXCESSIVE,
        f"Reduce from {current}/day to {suggested}/day (or switch to bash)",
        ctx.cost_per_day * FREQUENCY_SAVINGS_RATIO,
    )


def _is_downgradable(ctx: VerdictContext) -> bool:
    return (
        ctx.signals.haiku_score > 0
        and ctx.signals.ai_score == 0
        and not ctx.pricing.is_cheapest(ctx.job.model)
    )


def _downgrade_model(ctx: VerdictContext) -> Verdict:
    cheapest = ctx.pricing.cheapest_rate
    ratio = ctx.current_rate / cheapest if cheapest > 0 else math.inf
    savings = ctx.cost_per_day * max(0.0, 1 - 1 / ratio)
    return Verdict(
        Classification.MODEL_DOWNGRADE,
        f"Downgrade to {ctx.pricing.cheapest_key.title()} ({ratio:.1f}x cheaper)",
        savings,
    )


DECISION_TABLE: tuple[Rule, ...] = (
    Rule(Classification.BASH_REPLACEABLE, _is_bash_replaceable, _replace_with_bash),
    Rule(Classification.FREQUENCY_EXCESSIVE, _is_frequency_excessive, _reduce_frequency),
    Rule(Classification.MODEL_DOWNGRADE, _is_downgradable, _downgrade_model),
)

RIGHT_SIZED = Verdict(Classification.RIGHT_SIZED, None, 0.0)


class VerdictResolver:
    """Applies the decision table to a single job."""

    def __init__(
        self,
        pricing: PricingTable = DEFAULT_PRICING,
        window_hours: float = HOURS_PER_DAY,
        rules: tuple[Rule, ...] = DECISION_TABLE,
    ):
        if window_hours <= 0:
            raise ValueError(f"window_hours must be positive, got {window_hours}")
        self.pricing = pricing
        self.window_hours = window_hours
        self.rules = rules

    def decide(self, ctx: VerdictContext) -> Verdict:
        """First matching rule wins; right-sized otherwise."""
        for rule in self.rules:
            verdict = rule.evaluate(ctx)
            if verdict is not None:
                return verdict
        return RIGHT_SIZED

    def resolve(
        self,
        job: Job,
        stats: CostStats,
        signals: SignalScores,
        runs_per_day: Optional[float] = None,
    ) -> ClassificationResult:
        """Build the final result for ``job``.

        ``runs_per_day`` overrides the history/schedule estimate when given.
        """
        source: FrequencySource
        if runs_per_day is None:
            runs_per_day, source = resolve_runs_per_day(
                stats.run_count, self.window_hours, job.schedule
            )
        else:
            source = "history"

        cost_per_day = stats.total_cost * (HOURS_PER_DAY / self.window_hours)
        ctx = VerdictContext(
            job=job,
            stats=stats,
            signals=signals,
            runs_per_day=runs_per_day,
            cost_per_day=cost_per_day,
            pricing=self.pricing,
        )
        verdict = self.decide(ctx)
        # Never promise more than the job costs today
        savings = min(max(verdict.savings_per_day, 0.0), cost_per_day)

        logger.debug(
            f"{job.id}: {verdict.classification.value} "
            f"(bash={signals.bash_score}, haiku={signals.haiku_score}, ai={signals.ai_score}, "
            f"runs/day={runs_per_day:.1f} from {source})"
        )

        return ClassificationResult(
            id=job.id,
            name=job.name,
            enabled=job.enabled,
            model=job.model,
            schedule=job.schedule_display,
            runs_per_day=round(runs_per_day, RATE_DECIMALS),
            cost_per_day=round(cost_per_day, MONEY_DECIMALS),
            avg_cost_per_run=round(stats.avg_cost_per_run, MONEY_DECIMALS),
            total_tokens=stats.total_tokens,
            classification=verdict.classification,
            recommendation=verdict.recommendation,
            estimated_savings_per_day=round(savings, MONEY_DECIMALS),
            estimated_savings_per_month=round(savings * DAYS_PER_MONTH, MONTHLY_DECIMALS),
            bash_score=signals.bash_score,
            haiku_score=signals.haiku_score,
            ai_score=signals.ai_score,
            frequency_source=source,
        )
