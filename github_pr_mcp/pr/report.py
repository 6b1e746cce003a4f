"""Render the PR analysis report and the analysis prompt text."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Tuple

from ..github.models import PullRequest
from ..utils.errors import ConfigurationError
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

PROMPT_NAME = "analyze_pull_request"
REPORT_FOOTER = "*This analysis was automatically generated by GitHub MCP Server*"


@dataclass(frozen=True)
class RulesContext:
    """Project rules the report and the prompt refer to.

    Swappable: load your own with RulesContext.from_file().
    """

    rules_file: str
    guidelines: Tuple[str, ...]
    compliance: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    @classmethod
    def from_file(cls, path: str) -> "RulesContext":
        """
        Load guideline bullets from a markdown rules file.

        Every line starting with "- " or "* " becomes a guideline. Compliance
        and recommendation lines keep their defaults.

        Args:
            path: Path to the rules file

        Returns:
            RulesContext referring to the file

        Raises:
            ConfigurationError: If the file cannot be read
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read rules file {path}: {e}", variables=["PR_RULES_FILE"])
        guidelines = tuple(
            line.strip()[2:].strip()
            for line in text.splitlines()
            if line.strip().startswith(("- ", "* ")) and line.strip()[2:].strip()
        )
        if not guidelines:
            logger.warning(f"No guideline bullets in rules file {path}; using the default guidelines")
        return replace(
            DEFAULT_RULES,
            rules_file=str(path),
            guidelines=guidelines or DEFAULT_RULES.guidelines,
        )


DEFAULT_RULES = RulesContext(
    rules_file="Rules.md",
    guidelines=(
        "Code quality standards must be maintained",
        "Proper naming conventions apply",
        "Follow linting and formatting rules",
    ),
    compliance=(
        "PR Analysis performed following project rules",
        "Code review guidelines applied",
        "Naming conventions verified",
    ),
    recommendations=(
        "Verify naming conventions against the project rules",
        "Verify code quality against defined standards",
        "Check for proper documentation",
    ),
)


def load_rules(path: Optional[str]) -> RulesContext:
    """Rules from path if given, otherwise the built-in defaults."""
    if not path:
        return DEFAULT_RULES
    return RulesContext.from_file(path)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp ("2025-01-01T00:00:00Z")."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_days_old(created_at: str, now: Optional[datetime] = None) -> int:
    """
    Whole days elapsed since created_at, rounded down.

    Args:
        created_at: GitHub creation timestamp
        now: Reference time (defaults to the current UTC time)

    Returns:
        Number of complete days
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return (now - parse_timestamp(created_at)) // timedelta(days=1)


def format_timestamp(value: str) -> str:
    """Human readable UTC form of a GitHub timestamp; unparsable input is returned as-is."""
    try:
        parsed = parse_timestamp(value)
    except (TypeError, ValueError):
        return value
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def build_analysis_prompt(rules: RulesContext = DEFAULT_RULES) -> str:
    """Instruction text served by the analyze_pull_request prompt."""
    lines = [
        "Analyze GitHub Pull Requests and provide insights following project standards.",
        "",
        f"Reference Rules File: {rules.rules_file}",
        "",
        "Code Quality Guidelines:",
    ]
    lines.extend(f"- {guideline}" for guideline in rules.guidelines)
    lines.extend([
        "",
        "When analyzing PRs:",
        "1. Check the changes against every guideline above",
        "",
        "Provide comprehensive analysis reports in markdown format.",
    ])
    return "\n".join(lines)


def render_analysis_report(
    pr: PullRequest,
    days_old: int,
    rules: RulesContext = DEFAULT_RULES
) -> str:
    """
    Render the markdown analysis comment for a pull request.

    Args:
        pr: Pull request being analyzed
        days_old: Whole days since the PR was opened
        rules: Rules context to embed

    Returns:
        Markdown report
    """
    report = []

    report.append("## PR Analysis Report")
    report.append("")
    report.append("### PR Information")
    report.append(f"- **PR Number:** #{pr.number}")
    report.append(f"- **Title:** {pr.title}")
    report.append(f"- **State:** {pr.state}")
    report.append(f"- **Author:** @{pr.author}")
    report.append(f"- **Created:** {format_timestamp(pr.created_at)}")
    report.append(f"- **Last Updated:** {format_timestamp(pr.updated_at)}")
    report.append(f"- **URL:** {pr.url}")
    report.append("")

    report.append("### Rules Context")
    report.append(f"**Rules File:** {rules.rules_file}")
    report.extend(f"- {guideline}" for guideline in rules.guidelines)
    report.append("")

    report.append("### Analysis Details")
    report.append(f"- PR Status: **{pr.state.upper()}**")
    report.append(f"- Days Since Creation: **{days_old}** days")
    report.append(f"- Author: **@{pr.author}**")
    report.append("- Submission Period: Recent submission for review")
    report.append("")

    report.append(f"### Compliance Check (Based on {Path(rules.rules_file).name})")
    report.extend(f"✓ {item}" for item in rules.compliance)
    report.append("")

    report.append("### Recommendations")
    report.extend(f"{i}. {item}" for i, item in enumerate(rules.recommendations, start=1))
    report.append("")

    report.append("---")
    report.append(REPORT_FOOTER)
    report.append(f"*Rules reference: {rules.rules_file}*")
    report.append(f"*Generated using the {PROMPT_NAME} prompt*")

    return "\n".join(report)
