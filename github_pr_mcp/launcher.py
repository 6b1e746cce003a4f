"""Run the MCP server once against a pull request.

Reads PR_OWNER, PR_REPO, PR_NUMBER and GITHUB_TOKEN, spawns the server on
stdio, sends a single analyze_and_comment_pr call and relays the server's
output to the console until the server exits.

Usage:
    PR_OWNER=octocat PR_REPO=hello-world PR_NUMBER=42 GITHUB_TOKEN=... \\
        python -m github_pr_mcp.launcher
"""

import asyncio
import codecs
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

from .config import LAUNCHER_RPC_METHOD, LAUNCHER_TOOL_NAME, LauncherConfig
from .utils.errors import ConfigurationError
from .utils.logging_config import setup_logging, get_logger
from .utils.redact import redact_dict, redact_token


logger = get_logger(__name__)

REQUEST_ID = 1
READ_CHUNK_SIZE = 65536


def server_command() -> List[str]:
    """Command that starts the MCP server on stdio with this interpreter."""
    return [sys.executable, "-m", "github_pr_mcp.server", "--transport", "stdio"]


def build_request(config: LauncherConfig) -> Dict[str, Any]:
    """JSON-RPC 2.0 request asking the server to analyze and comment on the PR."""
    return {
        "jsonrpc": "2.0",
        "id": REQUEST_ID,
        "method": LAUNCHER_RPC_METHOD,
        "params": {
            "name": LAUNCHER_TOOL_NAME,
            "arguments": {
                "owner": config.owner,
                "repo": config.repo,
                "pull_number": config.pull_number,
                "token": config.token,
            },
        },
    }


def encode_request(request: Dict[str, Any]) -> bytes:
    """Serialize a request as a single newline-terminated JSON line."""
    return (json.dumps(request) + "\n").encode("utf-8")


async def _read_output(stream: asyncio.StreamReader, queue: asyncio.Queue, stdin: asyncio.StreamWriter) -> None:
    """Push every stdout chunk onto the queue; None marks end of stream.

    Closes the child's stdin once a complete response line has arrived so
    the server can shut down.
    """
    answered = False
    try:
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            await queue.put(chunk)
            if not answered and b"\n" in chunk:
                answered = True
                stdin.close()
    finally:
        await queue.put(None)


async def _relay_output(queue: asyncio.Queue) -> None:
    """Single consumer: print every chunk the server wrote.

    Chunks are decoded incrementally so a character split across two reads
    is printed whole.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await queue.get()
        text = decoder.decode(b"", final=True) if chunk is None else decoder.decode(chunk)
        if text:
            logger.info(f"MCP Response: {redact_token(text)}")
        if chunk is None:
            return


async def _wait_for_exit(process: asyncio.subprocess.Process) -> int:
    code = await process.wait()
    logger.info(f"MCP server exited: {code}")
    return code


async def run(config: LauncherConfig, command: Optional[Sequence[str]] = None) -> int:
    """
    Spawn the server, send the analyze request and relay its output.

    Args:
        config: Pull request coordinates and token
        command: Server command line (defaults to server_command())

    Returns:
        The server's exit code
    """
    command = list(command or server_command())
    logger.info(f"Running MCP for PR #{config.pull_number} on {config.owner}/{config.repo}")

    process = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=None,
    )

    request = build_request(config)
    logger.info(f"Sending request: {json.dumps(redact_dict(request))}")
    process.stdin.write(encode_request(request))
    await process.stdin.drain()

    queue: asyncio.Queue = asyncio.Queue()
    _, _, code = await asyncio.gather(
        _read_output(process.stdout, queue, process.stdin),
        _relay_output(queue),
        _wait_for_exit(process),
    )
    if not process.stdin.is_closing():
        process.stdin.close()
    return code


def main() -> None:
    setup_logging(console=True)

    try:
        config = LauncherConfig.from_env()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)

    sys.exit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
