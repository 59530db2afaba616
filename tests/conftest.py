"""Pytest configuration and shared fixtures."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.models import Job, RunRecord


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed end of the analysis window."""
    return NOW


@pytest.fixture
def make_job():
    """Factory for jobs in the on-disk (jobs.json) shape."""
    def _make(job_id="job-1", message="", model="claude-sonnet-4-5", schedule=None, **extra):
        entry = {"id": job_id, "payload": {"message": message, "model": model}, **extra}
        if schedule is not None:
            entry["schedule"] = schedule
        return Job.model_validate(entry)
    return _make


@pytest.fixture
def make_runs(now):
    """Factory for ``count`` runs spread evenly over the last ``hours``."""
    def _make(count, hours=24, status="finished", **fields):
        step = timedelta(hours=hours) / (count + 1)
        return [
            RunRecord(timestamp=now - step * (i + 1), status=status, **fields)
            for i in range(count)
        ]
    return _make


@pytest.fixture
def cron_home(tmp_path):
    """Temporary jobs.json + runs/ layout.

    Returns a helper ``write(jobs, runs_by_id)`` that writes the files and
    returns (jobs_path, runs_dir).
    """
    jobs_path = tmp_path / "jobs.json"
    runs_dir = tmp_path / "runs"
    runs_dir.mkdir()

    def _write(jobs, runs_by_id=None):
        jobs_path.write_text(json.dumps({"jobs": jobs}), encoding="utf-8")
        for job_id, lines in (runs_by_id or {}).items():
            content = "\n".join(
                line if isinstance(line, str) else json.dumps(line) for line in lines
            )
            (runs_dir / f"{job_id}.jsonl").write_text(content + "\n", encoding="utf-8")
        return jobs_path, runs_dir

    return _write
