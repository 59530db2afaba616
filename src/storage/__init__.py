"""Модуль загрузки заданий и истории запусков."""

from .exceptions import (
    JobsFileFormatError,
    JobsFileNotFoundError,
    PricingFileError,
    StorageError,
)
from .loader import RunHistory, load_jobs, load_pricing, load_runs, parse_run_line

__all__ = [
    "RunHistory",
    "load_jobs",
    "load_pricing",
    "load_runs",
    "parse_run_line",
    "StorageError",
    "JobsFileNotFoundError",
    "JobsFileFormatError",
    "PricingFileError",
]
