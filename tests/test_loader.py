"""Tests for loading jobs, run history and pricing from disk.

Run after changes to: src/storage/loader.py
"""

import json
from datetime import timedelta

import pytest

from src.storage import (
    JobsFileFormatError,
    JobsFileNotFoundError,
    PricingFileError,
    RunHistory,
    load_jobs,
    load_pricing,
    load_runs,
    parse_run_line,
)
from tests.helpers import ts_ms


class TestLoadJobs:
    def test_wrapped_job_list(self, cron_home):
        jobs_path, _ = cron_home([{"id": "a"}, {"id": "b", "name": "Bee"}])

        jobs = load_jobs(jobs_path)

        assert [j.id for j in jobs] == ["a", "b"]
        assert jobs[1].name == "Bee"

    def test_bare_list(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([{"id": "solo"}]), encoding="utf-8")

        assert [j.id for j in load_jobs(path)] == ["solo"]

    def test_other_shapes_give_empty_list(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps({"version": 1}), encoding="utf-8")

        assert load_jobs(path) == []

    def test_empty_list_is_valid(self, cron_home):
        jobs_path, _ = cron_home([])

        assert load_jobs(jobs_path) == []

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(JobsFileNotFoundError):
            load_jobs(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(JobsFileFormatError):
            load_jobs(path)

    def test_undecodable_jobs_file(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_bytes(b'{"jobs": ["\xff\xfe"]}')

        with pytest.raises(JobsFileFormatError):
            load_jobs(path)

    def test_invalid_entries_skipped(self, cron_home):
        jobs_path, _ = cron_home([{"id": "ok"}, {"name": "missing id"}, "garbage", {"id": "ok2"}])

        assert [j.id for j in load_jobs(jobs_path)] == ["ok", "ok2"]

    def test_duplicate_ids_keep_first(self, cron_home):
        jobs_path, _ = cron_home([{"id": "a", "name": "first"}, {"id": "a", "name": "second"}])

        jobs = load_jobs(jobs_path)

        assert len(jobs) == 1
        assert jobs[0].name == "first"


class TestLoadRuns:
    def test_missing_file_means_no_runs(self, tmp_path, now):
        assert load_runs(tmp_path, "ghost", now - timedelta(hours=24)) == []

    def test_filters_status_and_window(self, cron_home, now):
        _, runs_dir = cron_home([], {"job": [
            {"ts": ts_ms(now - timedelta(hours=1)), "action": "finished", "cost": 0.1},
            {"ts": ts_ms(now - timedelta(hours=2)), "action": "failed", "cost": 0.1},
            {"ts": ts_ms(now - timedelta(hours=3)), "action": "started"},
            {"ts": ts_ms(now - timedelta(hours=48)), "action": "finished", "cost": 0.1},
        ]})

        runs = load_runs(runs_dir, "job", now - timedelta(hours=24))

        assert len(runs) == 1
        assert runs[0].cost == 0.1

    def test_bad_lines_skipped_individually(self, cron_home, now):
        """One broken line must not discard the rest of the history."""
        good = {"ts": ts_ms(now - timedelta(hours=1)), "action": "finished"}
        _, runs_dir = cron_home([], {"job": [good, "{broken", "", "[1, 2]", {"action": "finished"}, good]})

        runs = load_runs(runs_dir, "job", now - timedelta(hours=24))

        assert len(runs) == 2

    def test_undecodable_bytes_skip_only_their_line(self, cron_home, now):
        """Invalid UTF-8 in one line must not abort the audit."""
        _, runs_dir = cron_home([])
        good = json.dumps({"ts": ts_ms(now - timedelta(hours=1)), "action": "finished"}).encode()
        (runs_dir / "job.jsonl").write_bytes(good + b"\n\xff\xfe garbage\n" + good + b"\n")

        runs = load_runs(runs_dir, "job", now - timedelta(hours=24))

        assert len(runs) == 2

    def test_undecodable_bytes_inside_a_record(self, cron_home, now):
        _, runs_dir = cron_home([])
        line = b'{"ts": ' + str(ts_ms(now)).encode() + b', "action": "finished", "summary": "\xff\xfe"}\n'
        (runs_dir / "job.jsonl").write_bytes(line)

        runs = load_runs(runs_dir, "job", now - timedelta(hours=1))

        assert len(runs) == 1
        assert runs[0].summary_length == 2

    def test_run_history_adapter(self, cron_home, now):
        _, runs_dir = cron_home([], {"a": [{"ts": ts_ms(now), "action": "finished"}]})
        history = RunHistory(runs_dir)

        assert len(history("a", now - timedelta(hours=1))) == 1
        assert history("b", now - timedelta(hours=1)) == []

    def test_parse_run_line_blank(self):
        assert parse_run_line("   \n") is None


class TestLoadPricing:
    def test_valid_file(self, tmp_path):
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps({"opus": 15, "haiku": 0.8}), encoding="utf-8")

        table = load_pricing(path)

        assert table.rate_for("claude-opus-4-6") == 15.0
        assert table.cheapest_rate == 0.8

    @pytest.mark.parametrize("content", ["[]", "{}", "{oops", '{"opus": "free"}'])
    def test_invalid_files(self, tmp_path, content):
        path = tmp_path / "pricing.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(PricingFileError):
            load_pricing(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PricingFileError):
            load_pricing(tmp_path / "missing.json")
