"""Loading of job definitions and run history from disk.

Layout:
    jobs.json            {"jobs": [...]} or a bare list
    runs/<jobId>.jsonl   one JSON object per finished/failed run
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from src.audit.pricing import PricingTable
from src.constants import FINISHED_STATUS, RUN_FILE_SUFFIX
from src.models import Job, RunRecord
from src.storage.exceptions import (
    JobsFileFormatError,
    JobsFileNotFoundError,
    PricingFileError,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _job_entries(raw: Any) -> list:
    if isinstance(raw, dict):
        jobs = raw.get("jobs")
        return jobs if isinstance(jobs, list) else []
    if isinstance(raw, list):
        return raw
    return []


def load_jobs(path: PathLike) -> list[Job]:
    """
    Загрузить задания из jobs.json.

    Args:
        path: Путь к jobs.json

    Returns:
        Список заданий (invalid entries are skipped)

    Raises:
        JobsFileNotFoundError: файл отсутствует
        JobsFileFormatError: файл не является корректным JSON
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise JobsFileNotFoundError(f"jobs file not found at {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JobsFileFormatError(f"{path}: {e}") from e

    jobs: list[Job] = []
    seen: set[str] = set()
    for index, entry in enumerate(_job_entries(raw)):
        try:
            job = Job.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping job #{index} in {path.name}: {e.error_count()} validation errors")
            continue
        if job.id in seen:
            logger.warning(f"Skipping duplicate job id '{job.id}'")
            continue
        seen.add(job.id)
        jobs.append(job)

    logger.debug(f"Loaded {len(jobs)} jobs from {path}")
    return jobs


def parse_run_line(line: str) -> Optional[RunRecord]:
    """Parse one jsonl line, None if it is blank or malformed."""
    if not line.strip():
        return None
    try:
        return RunRecord.model_validate(json.loads(line))
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping unparsable run line: {e}")
    except ValidationError as e:
        logger.debug(f"Skipping malformed run record: {e.error_count()} errors")
    return None


def load_runs(runs_dir: PathLike, job_id: str, window_start: datetime) -> list[RunRecord]:
    """Finished runs of ``job_id`` at or after ``window_start``.

    A missing history file means the job never ran.
    """
    run_file = Path(runs_dir).expanduser() / f"{job_id}{RUN_FILE_SUFFIX}"
    if not run_file.is_file():
        return []

    runs = []
    with open(run_file, encoding="utf-8", errors="replace") as f:
        for line in f:
            run = parse_run_line(line)
            if run is None:
                continue
            if run.status == FINISHED_STATUS and run.timestamp >= window_start:
                runs.append(run)
    return runs


class RunHistory:
    """Callable adapter over a runs directory: ``history(job_id, window_start)``."""

    def __init__(self, runs_dir: PathLike):
        self.runs_dir = Path(runs_dir).expanduser()

    def __call__(self, job_id: str, window_start: datetime) -> list[RunRecord]:
        return load_runs(self.runs_dir, job_id, window_start)


def load_pricing(path: PathLike) -> PricingTable:
    """Load a ``{model_key: dollars_per_million_tokens}`` JSON file."""
    path = Path(path).expanduser()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PricingFileError(f"Cannot read pricing file {path}: {e}") from e

    if not isinstance(raw, dict) or not raw:
        raise PricingFileError(f"{path}: expected a non-empty JSON object of model rates")
    try:
        return PricingTable.from_mapping(raw)
    except (TypeError, ValueError) as e:
        raise PricingFileError(f"{path}: invalid rate ({e})") from e
