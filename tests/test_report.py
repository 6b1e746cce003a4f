"""Tests for report rendering, age computation and author resolution."""

import logging
import os
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

from github_pr_mcp.github.models import AUTHOR_LOGIN_PATHS, Comment, PullRequest, resolve_field
from github_pr_mcp.utils.errors import ConfigurationError
from github_pr_mcp.pr.report import (
    DEFAULT_RULES,
    RulesContext,
    build_analysis_prompt,
    compute_days_old,
    format_timestamp,
    load_rules,
    render_analysis_report,
)

NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


class TestDaysOld:

    def test_floor_not_round(self):
        # 3 days and 2 hours before NOW
        assert compute_days_old("2025-03-07T10:00:00Z", now=NOW) == 3

    def test_almost_four_days(self):
        assert compute_days_old("2025-03-06T12:00:01Z", now=NOW) == 3

    def test_exact_boundary(self):
        assert compute_days_old("2025-03-06T12:00:00Z", now=NOW) == 4

    def test_same_day(self):
        assert compute_days_old("2025-03-10T11:59:59Z", now=NOW) == 0

    def test_offset_timestamp(self):
        assert compute_days_old("2025-03-07T12:00:00+02:00", now=NOW) == 3


class TestAuthorResolution:

    def test_primary_field_wins(self):
        data = {"user": {"login": "alice"}, "author": {"login": "bob"}}
        assert resolve_field(data, AUTHOR_LOGIN_PATHS) == "alice"

    def test_fallback_field(self):
        assert PullRequest({"author": {"login": "bob"}}).author == "bob"

    def test_empty_primary_falls_through(self):
        data = {"user": {"login": ""}, "author": {"login": "bob"}}
        assert resolve_field(data, AUTHOR_LOGIN_PATHS) == "bob"

    @pytest.mark.parametrize("data", [{}, {"user": None}, {"user": {}, "author": {"login": None}}])
    def test_unknown_when_absent(self, data):
        assert PullRequest(data).author == "Unknown"

    def test_comment_author(self):
        assert Comment({"id": 1, "user": {"login": "pr-bot"}}).author == "pr-bot"
        assert Comment({"id": 1}).author == "Unknown"


class TestReport:

    def make_pr(self, **overrides):
        data = {
            "id": 1,
            "number": 17,
            "title": "Fix flaky test",
            "state": "closed",
            "author": {"login": "bob"},
            "created_at": "2025-03-07T10:00:00Z",
            "updated_at": "2025-03-08T09:30:00Z",
            "html_url": "https://github.com/octocat/hello-world/pull/17",
        }
        data.update(overrides)
        return PullRequest(data)

    def test_report_contents(self):
        report = render_analysis_report(self.make_pr(), 3)

        assert report.startswith("## PR Analysis Report")
        assert "- **PR Number:** #17" in report
        assert "- **Title:** Fix flaky test" in report
        assert "- **Author:** @bob" in report
        assert "- **Created:** 2025-03-07 10:00:00 UTC" in report
        assert "- **Last Updated:** 2025-03-08 09:30:00 UTC" in report
        assert "- **URL:** https://github.com/octocat/hello-world/pull/17" in report
        assert "PR Status: **CLOSED**" in report
        assert "Days Since Creation: **3** days" in report
        for guideline in DEFAULT_RULES.guidelines:
            assert f"- {guideline}" in report
        assert "1. " + DEFAULT_RULES.recommendations[0] in report

    def test_unknown_author_in_report(self):
        pr = PullRequest({"number": 1, "title": "t", "state": "open", "created_at": "2025-03-07T10:00:00Z"})
        assert "@Unknown" in render_analysis_report(pr, 0)

    def test_format_timestamp_passthrough(self):
        assert format_timestamp("not a date") == "not a date"


class TestRules:

    def test_default_rules(self):
        assert load_rules(None) is DEFAULT_RULES

    def test_rules_from_file(self, tmp_path):
        rules_file = tmp_path / "Rules.md"
        rules_file.write_text(
            "# Team rules\n\n- Variables use snake_case\n* Functions have docstrings\nSome prose\n",
            encoding="utf-8"
        )

        rules = load_rules(str(rules_file))

        assert rules.rules_file == str(rules_file)
        assert rules.guidelines == ("Variables use snake_case", "Functions have docstrings")
        assert rules.recommendations == DEFAULT_RULES.recommendations

    def test_rules_file_without_bullets_keeps_defaults(self, tmp_path, caplog):
        rules_file = tmp_path / "RULES.md"
        rules_file.write_text("Nothing listed here.\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="github_pr_mcp.pr.report"):
            rules = RulesContext.from_file(str(rules_file))

        assert rules.guidelines == DEFAULT_RULES.guidelines
        warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert str(rules_file) in warnings[0].getMessage()

    def test_missing_rules_file(self, tmp_path):
        missing = tmp_path / "missing" / "Rules.md"

        with pytest.raises(ConfigurationError) as exc_info:
            load_rules(str(missing))

        assert exc_info.value.variables == ["PR_RULES_FILE"]
        assert str(missing) in exc_info.value.message

    def test_server_exits_cleanly_on_missing_rules_file(self, tmp_path):
        missing = tmp_path / "missing" / "Rules.md"
        root = Path(__file__).resolve().parent.parent
        env = {**os.environ, "PR_RULES_FILE": str(missing), "PYTHONPATH": str(root)}
        env.pop("LOG_FILE", None)

        completed = subprocess.run(
            [sys.executable, "-m", "github_pr_mcp.server", "--transport", "stdio"],
            env=env,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=60,
        )

        assert completed.returncode == 1
        assert "Traceback" not in completed.stderr
        assert str(missing) in completed.stderr

    def test_custom_rules_flow_into_report_and_prompt(self):
        rules = RulesContext(
            rules_file="docs/RULES.md",
            guidelines=("No print statements",),
            compliance=("Checked",),
            recommendations=("Remove debug output",),
        )
        pr = PullRequest({"number": 2, "title": "t", "state": "open", "created_at": "2025-03-07T10:00:00Z"})

        report = render_analysis_report(pr, 1, rules)
        prompt = build_analysis_prompt(rules)

        assert "**Rules File:** docs/RULES.md" in report
        assert "### Compliance Check (Based on RULES.md)" in report
        assert "✓ Checked" in report
        assert "1. Remove debug output" in report
        assert "Reference Rules File: docs/RULES.md" in prompt
        assert "- No print statements" in prompt
