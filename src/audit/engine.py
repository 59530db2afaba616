"""Audit engine: classify every job against its windowed run history."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from src.audit.cost import CostEstimator
from src.audit.pricing import DEFAULT_PRICING, PricingTable
from src.audit.resolver import VerdictResolver
from src.audit.signals import SignalScorer
from src.constants import FINISHED_STATUS, HOURS_PER_DAY
from src.models import ClassificationResult, Job, RunRecord

logger = logging.getLogger(__name__)

RunsFor = Callable[[str, datetime], Optional[Iterable[RunRecord]]]


class AuditEngine:
    """Runs cost estimation, signal scoring and verdict resolution per job.

    Usage:
        engine = AuditEngine(window_hours=24)
        results = engine.run(jobs, RunHistory(runs_dir))
    """

    def __init__(
        self,
        pricing: PricingTable = DEFAULT_PRICING,
        window_hours: float = HOURS_PER_DAY,
        scorer: Optional[SignalScorer] = None,
    ):
        """
        Initialize engine.

        Args:
            pricing: Model rate table shared by estimator and resolver
            window_hours: Length of the analysis window ending at ``now``
            scorer: Intent scorer (default pattern families if omitted)
        """
        self.window_hours = window_hours
        self.estimator = CostEstimator(pricing)
        self.scorer = scorer or SignalScorer()
        self.resolver = VerdictResolver(pricing, window_hours)

    def window_start(self, now: datetime) -> datetime:
        return now - timedelta(hours=self.window_hours)

    def qualifying_runs(
        self, runs: Optional[Iterable[RunRecord]], now: datetime
    ) -> list[RunRecord]:
        """Finished runs whose timestamp lies inside the window."""
        start = self.window_start(now)
        return [
            run
            for run in runs or ()
            if run.status == FINISHED_STATUS and start <= run.timestamp <= now
        ]

    def classify(
        self,
        job: Job,
        runs: Optional[Iterable[RunRecord]],
        now: datetime,
    ) -> ClassificationResult:
        """Classify one job. ``runs`` may be unfiltered."""
        window_runs = self.qualifying_runs(runs, now)
        stats = self.estimator.estimate(window_runs, job.model)
        signals = self.scorer.score(job.intent_text)
        return self.resolver.resolve(job, stats, signals)

    def run(
        self,
        jobs: Iterable[Job],
        runs_for: RunsFor,
        now: Optional[datetime] = None,
    ) -> list[ClassificationResult]:
        """Classify ``jobs`` in input order.

        Args:
            jobs: Job definitions
            runs_for: ``(job_id, window_start) -> runs``; None means no runs
            now: End of the analysis window (defaults to current UTC time)

        Returns:
            One result per job, same order as ``jobs``
        """
        now = now or datetime.now(timezone.utc)
        start = self.window_start(now)
        results = [self.classify(job, runs_for(job.id, start), now) for job in jobs]
        logger.info(f"Classified {len(results)} jobs over a {self.window_hours}h window")
        return results
