"""Pull request workflows behind the MCP tools.

Each function returns a standardized response dict (success_response or
error_response) and never raises.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..github.client import GitHubClient
from ..github.models import Comment, PullRequest
from ..config import ErrorCode
from ..utils.errors import MCPError, error_response, success_response
from ..utils.redact import redact_token
from .report import (
    DEFAULT_RULES,
    PROMPT_NAME,
    RulesContext,
    compute_days_old,
    render_analysis_report,
)


logger = logging.getLogger(__name__)


def _validate_target(owner: str, repo: str, pull_number: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Return an INVALID_INPUT response if the coordinates are unusable, else None."""
    if not owner or not owner.strip():
        return error_response(ErrorCode.INVALID_INPUT, "owner is required", {"field": "owner"})
    if not repo or not repo.strip():
        return error_response(ErrorCode.INVALID_INPUT, "repo is required", {"field": "repo"})
    if pull_number is not None and pull_number <= 0:
        return error_response(
            ErrorCode.INVALID_INPUT,
            "pull_number must be greater than 0",
            {"field": "pull_number"}
        )
    return None


def _failure(error: Exception, action: str) -> Dict[str, Any]:
    """Convert an exception raised during a workflow into an error response."""
    if isinstance(error, MCPError):
        return error_response(error.code, redact_token(error.message), error.details)
    logger.error(f"Unexpected error while {action}: {redact_token(str(error))}", exc_info=True)
    return error_response(
        ErrorCode.UNEXPECTED_ERROR,
        f"Unexpected error while {action}: {redact_token(str(error))}",
        {}
    )


async def list_repository_pull_requests(
    owner: str,
    repo: str,
    token: Optional[str] = None
) -> Dict[str, Any]:
    """
    List the open pull requests of a repository.

    Returns:
        Standardized response with the raw GitHub pull request list
    """
    invalid = _validate_target(owner, repo)
    if invalid:
        return invalid

    try:
        client = GitHubClient()
        pulls = await client.list_pull_requests(owner, repo, token)
        return success_response(pulls)
    except Exception as e:
        return _failure(e, f"listing pull requests of {owner}/{repo}")


async def fetch_pull_request(
    owner: str,
    repo: str,
    pull_number: int,
    token: Optional[str] = None
) -> Dict[str, Any]:
    """
    Fetch a single pull request.

    Returns:
        Standardized response with the raw GitHub pull request object
    """
    invalid = _validate_target(owner, repo, pull_number)
    if invalid:
        return invalid

    try:
        client = GitHubClient()
        pull = await client.get_pull_request(owner, repo, pull_number, token)
        return success_response(pull)
    except Exception as e:
        return _failure(e, f"fetching {owner}/{repo}#{pull_number}")


async def comment_on_pull_request(
    owner: str,
    repo: str,
    pull_number: int,
    body: str,
    token: Optional[str] = None
) -> Dict[str, Any]:
    """
    Post a comment on a pull request.

    Returns:
        Standardized response with the created comment summary
    """
    invalid = _validate_target(owner, repo, pull_number)
    if invalid:
        return invalid
    if not body or not body.strip():
        return error_response(ErrorCode.INVALID_INPUT, "body cannot be empty", {"field": "body"})

    try:
        client = GitHubClient()
        comment = Comment(await client.post_comment(owner, repo, pull_number, body, token))
        logger.info(f"Posted comment {comment.id} on {owner}/{repo}#{pull_number}")
        return success_response({
            "success": True,
            "comment": comment.to_dict(),
            "message": "Comment successfully posted on PR"
        })
    except Exception as e:
        return _failure(e, f"commenting on {owner}/{repo}#{pull_number}")


async def analyze_and_comment(
    owner: str,
    repo: str,
    pull_number: int,
    token: Optional[str] = None,
    rules: RulesContext = DEFAULT_RULES,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Analyze a pull request and post the analysis report as a comment.

    Args:
        owner: Repository owner
        repo: Repository name
        pull_number: Pull request number
        token: Optional GitHub token (required by GitHub to post comments)
        rules: Rules context embedded in the report
        now: Reference time for the age computation (defaults to now, UTC)

    Returns:
        Standardized response with PR and comment summaries
    """
    invalid = _validate_target(owner, repo, pull_number)
    if invalid:
        return invalid

    try:
        client = GitHubClient()
        pr = PullRequest(await client.get_pull_request(owner, repo, pull_number, token))

        days_old = compute_days_old(pr.created_at, now)
        report = render_analysis_report(pr, days_old, rules)
        logger.debug(f"Rendered analysis report for {owner}/{repo}#{pull_number}: {days_old} days old, author {pr.author}")

        comment = Comment(await client.post_comment(owner, repo, pull_number, report, token))
        logger.info(f"Posted analysis comment {comment.id} on {owner}/{repo}#{pull_number}")

        pr_summary = pr.summary()
        pr_summary["author"] = pr.author
        pr_summary["days_old"] = days_old
        return success_response({
            "success": True,
            "pr": pr_summary,
            "comment": {"id": comment.id, "created_at": comment.created_at},
            "rules_file": rules.rules_file,
            "registered_prompt": PROMPT_NAME,
            "message": "PR analysis successfully posted with rules compliance check"
        })
    except Exception as e:
        return _failure(e, f"analyzing {owner}/{repo}#{pull_number}")
