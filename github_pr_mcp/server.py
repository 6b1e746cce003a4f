"""GitHub PR Analysis MCP Server.

An MCP server that lists and fetches GitHub pull requests, posts comments,
and posts an automated analysis report on a pull request.

Served over streamable HTTP by default (one random session id per
connection, managed by the MCP SDK); stdio and SSE are also available.
"""

import argparse
import sys
from typing import Annotated, List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult
from pydantic import Field

from .config import (
    SERVER_NAME,
    SERVER_VERSION,
    SUPPORTED_TRANSPORTS,
    ServerConfig,
)
from .utils.errors import ConfigurationError, error_result, to_tool_result
from .utils.logging_config import setup_logging, get_logger
from .utils.redact import redact_token
from .pr.api import (
    analyze_and_comment,
    comment_on_pull_request,
    fetch_pull_request,
    list_repository_pull_requests,
)
from .pr.report import PROMPT_NAME, build_analysis_prompt, load_rules

# Configuration is read once, here
try:
    config = ServerConfig.from_env()
except ConfigurationError as e:
    print(f"Invalid server configuration: {e.message}", file=sys.stderr)
    sys.exit(1)

# Setup logging before initializing MCP server
setup_logging(log_level=config.log_level, log_file=config.log_file)
logger = get_logger(__name__)

try:
    rules = load_rules(config.rules_file)
except ConfigurationError as e:
    logger.error(e.message)
    print(f"Invalid server configuration: {e.message}", file=sys.stderr)
    sys.exit(1)

# Initialize MCP server
mcp = FastMCP(SERVER_NAME)
mcp._mcp_server.version = SERVER_VERSION

logger.info(f"{SERVER_NAME} MCP Server {SERVER_VERSION} initialized (rules: {rules.rules_file})")


Owner = Annotated[str, Field(description="Repository owner")]
Repo = Annotated[str, Field(description="Repository name")]
PullNumber = Annotated[int, Field(description="Pull request number")]
Token = Annotated[Optional[str], Field(description="GitHub API token (optional)")]


# ============================================================================
# MCP Prompts
# ============================================================================

@mcp.prompt(
    name=PROMPT_NAME,
    description="Analyze a GitHub pull request following the project rules"
)
def analyze_pull_request() -> str:
    """Static analysis instructions; takes no input."""
    return build_analysis_prompt(rules)


# ============================================================================
# MCP Tools
# ============================================================================

@mcp.tool(
    name="get_prs_of_repo",
    description="Get pull requests for a GitHub repository",
    annotations={
        "title": "List Pull Requests",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def get_prs_of_repo(owner: Owner, repo: Repo, token: Token = None) -> CallToolResult:
    """List the open pull requests of a repository as a JSON array."""
    try:
        logger.info(f"get_prs_of_repo called: repo={owner}/{repo}")
        return to_tool_result(await list_repository_pull_requests(owner, repo, token))
    except Exception as e:
        logger.error(f"Unexpected error in get_prs_of_repo: {redact_token(str(e))}", exc_info=True)
        return error_result(redact_token(str(e)))


@mcp.tool(
    name="get_pr",
    description="Get a single pull request from a GitHub repository by PR number",
    annotations={
        "title": "Get Pull Request",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def get_pr(
    owner: Owner,
    repo: Repo,
    pull_number: PullNumber,
    token: Token = None
) -> CallToolResult:
    """Fetch one pull request as a JSON object."""
    try:
        logger.info(f"get_pr called: repo={owner}/{repo}, pull_number={pull_number}")
        return to_tool_result(await fetch_pull_request(owner, repo, pull_number, token))
    except Exception as e:
        logger.error(f"Unexpected error in get_pr: {redact_token(str(e))}", exc_info=True)
        return error_result(redact_token(str(e)))


@mcp.tool(
    name="post_comment_on_pr",
    description="Post a comment on a GitHub pull request",
    annotations={
        "title": "Comment on Pull Request",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def post_comment_on_pr(
    owner: Owner,
    repo: Repo,
    pull_number: PullNumber,
    body: Annotated[str, Field(description="Comment body text")],
    token: Token = None
) -> CallToolResult:
    """Post a comment and return {success, comment: {id, created_at, author}, message}."""
    try:
        logger.info(f"post_comment_on_pr called: repo={owner}/{repo}, pull_number={pull_number}")
        return to_tool_result(await comment_on_pull_request(owner, repo, pull_number, body, token))
    except Exception as e:
        logger.error(f"Unexpected error in post_comment_on_pr: {redact_token(str(e))}", exc_info=True)
        return error_result(redact_token(str(e)))


@mcp.tool(
    name="analyze_and_comment_pr",
    description="Analyze a pull request and post the analysis as a comment on the PR",
    annotations={
        "title": "Analyze and Comment on Pull Request",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def analyze_and_comment_pr(
    owner: Owner,
    repo: Repo,
    pull_number: PullNumber,
    token: Token = None
) -> CallToolResult:
    """Analyze a pull request and post the markdown report as a PR comment.

    The report covers PR metadata, the number of whole days since the PR
    was opened, the resolved author and the configured project rules.
    Every call posts a new comment.
    """
    try:
        logger.info(f"analyze_and_comment_pr called: repo={owner}/{repo}, pull_number={pull_number}")
        return to_tool_result(await analyze_and_comment(owner, repo, pull_number, token, rules))
    except Exception as e:
        logger.error(f"Unexpected error in analyze_and_comment_pr: {redact_token(str(e))}", exc_info=True)
        return error_result(redact_token(str(e)))


# ============================================================================
# Server Entry Point
# ============================================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Command line overrides for the configured transport."""
    parser = argparse.ArgumentParser(description="GitHub PR analysis MCP server")
    parser.add_argument("--transport", choices=SUPPORTED_TRANSPORTS, default=config.transport)
    parser.add_argument("--host", default=config.host)
    parser.add_argument("--port", type=int, default=config.port)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    mcp.settings.host = args.host
    mcp.settings.port = args.port
    if args.transport == "stdio":
        logger.info("GitHub MCP server running on stdio")
    else:
        logger.info(f"GitHub MCP server running on {args.host}:{args.port} ({args.transport})")
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
