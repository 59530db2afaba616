"""Модели данных для заданий cron и истории запусков."""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.constants import DEFAULT_MODEL_KEY


# ==================== Schedules ====================
# jobs.json stores the schedule as {"kind": "every" | "cron" | "at", ...}.


class IntervalSchedule(BaseModel):
    """Fixed period between runs."""
    kind: Literal["every"] = "every"
    every_ms: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("everyMs", "every_ms")
    )

    def display(self) -> str:
        if not self.every_ms:
            return "every ?"
        return f"every {round(self.every_ms / 60_000)}m"


class CronSchedule(BaseModel):
    """Five-field cron expression."""
    kind: Literal["cron"] = "cron"
    expr: str = ""

    def display(self) -> str:
        return self.expr


class OneShotSchedule(BaseModel):
    """Single run at a fixed instant."""
    kind: Literal["at"] = "at"
    at: str = ""

    def display(self) -> str:
        return f"at {self.at}"


Schedule = Annotated[
    Union[IntervalSchedule, CronSchedule, OneShotSchedule],
    Field(discriminator="kind"),
]

SCHEDULE_KINDS = ("every", "cron", "at")


class Job(BaseModel):
    """Задание cron, как оно описано в jobs.json.

    On disk the model and instruction text live under ``payload``;
    they are lifted to top-level fields during validation.
    """

    id: str
    name: str = ""
    enabled: bool = True
    model: str = DEFAULT_MODEL_KEY
    intent_text: str = ""
    schedule: Optional[Schedule] = None

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _lift_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        payload = data.pop("payload", None)
        if isinstance(payload, dict):
            data.setdefault("model", payload.get("model"))
            data.setdefault("intentText", payload.get("message"))
        if isinstance(data.get("id"), int) and not isinstance(data.get("id"), bool):
            data["id"] = str(data["id"])
        if data.get("enabled") is None:
            data.pop("enabled", None)
        # Empty values fall back to defaults
        for key in ("model", "intentText", "name"):
            if not data.get(key):
                data.pop(key, None)
        if "name" not in data and isinstance(data.get("id"), str):
            data["name"] = data["id"]
        schedule = data.get("schedule")
        if not isinstance(schedule, dict) or schedule.get("kind") not in SCHEDULE_KINDS:
            data.pop("schedule", None)
        return data

    @property
    def schedule_display(self) -> str:
        """Human-readable schedule, ``unknown`` when absent."""
        if self.schedule is None:
            return "unknown"
        return self.schedule.display()


def _optional_number(value: Any) -> Optional[float]:
    """Coerce a loosely typed JSON value into a non-negative number or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


class RunRecord(BaseModel):
    """One execution of a job, parsed from a ``<jobId>.jsonl`` line."""

    timestamp: datetime = Field(validation_alias=AliasChoices("ts", "timestamp"))
    status: str = Field(default="", validation_alias=AliasChoices("status", "action"))
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cost: Optional[float] = None
    summary_length: Optional[int] = None

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _summary_to_length(cls, data: Any) -> Any:
        if isinstance(data, dict) and "summaryLength" not in data:
            summary = data.get("summary")
            if isinstance(summary, str):
                data = {**data, "summaryLength": len(summary)}
        return data

    @field_validator("cost", mode="before")
    @classmethod
    def _lenient_cost(cls, value: Any) -> Optional[float]:
        return _optional_number(value)

    @field_validator("input_tokens", "output_tokens", "summary_length", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> Optional[int]:
        number = _optional_number(value)
        return None if number is None else int(number)

    @field_validator("status", mode="before")
    @classmethod
    def _lenient_status(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def total_tokens(self) -> int:
        return (self.input_tokens or 0) + (self.output_tokens or 0)


class Classification(str, Enum):
    """Verdict assigned to a job."""
    BASH_REPLACEABLE = "bash-replaceable"
    FREQUENCY_EXCESSIVE = "frequency-excessive"
    MODEL_DOWNGRADE = "model-downgrade"
    RIGHT_SIZED = "right-sized"


class ClassificationResult(BaseModel):
    """Результат аудита одного задания.

    Money fields are rounded for display; serialized with camelCase keys
    (``model_dump(by_alias=True)``) to match the jobs.json convention.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str
    name: str
    enabled: bool
    model: str
    schedule: str
    runs_per_day: float
    cost_per_day: float
    avg_cost_per_run: float
    total_tokens: int
    classification: Classification
    recommendation: Optional[str] = None
    estimated_savings_per_day: float = 0.0
    estimated_savings_per_month: float = 0.0
    bash_score: int = 0
    haiku_score: int = 0
    ai_score: int = 0
    frequency_source: Literal["history", "schedule", "default"] = "default"
