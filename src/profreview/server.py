"""MCP server for profreview - ask the professor about code from your editor."""

import asyncio
import concurrent.futures
import json
import logging
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from profreview.config import Settings
from profreview.errors import ProfReviewError

logger = logging.getLogger(__name__)

mcp = FastMCP("profreview")
_settings: Settings | None = None
_pipeline: Any = None

# The DSPy model call is blocking; run it off the MCP server's event loop.
# A single worker also serializes the lazy pipeline setup.
_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)


def _get_pipeline() -> Any:
    """Get or create the ReviewPipeline (lazy init to avoid slow startup)."""
    global _pipeline
    if _pipeline is None:
        from profreview.review.pipeline import ReviewPipeline

        _pipeline = ReviewPipeline.from_settings(_settings)
    return _pipeline


def _do_review(code: str, output_format: str) -> str:
    """Synchronous review - runs in thread pool."""
    review = _get_pipeline().run(code)
    if output_format == "json":
        return json.dumps(review.to_json_dict(), ensure_ascii=False, indent=2)
    return review.to_markdown()


@mcp.tool()
async def review_code(code: str, output_format: str = "markdown") -> str:
    """Ask the professor a round of questions about a piece of source code.

    The code is trimmed and clipped to the configured length, then the
    professor writes 5-10 pointed questions that quote concrete identifiers
    from the code, each with its intent and a hint, plus optional quick wins.

    Args:
        code: Source code to review (any language).
        output_format: "markdown" for the rendered review or "json" for
                       ``{text, data}``. Defaults to "markdown".

    Returns:
        The review as markdown or JSON string
    """
    if not code.strip():
        return "Error: no code given"
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(_executor, _do_review, code, output_format)
    except ProfReviewError as e:
        logger.error(f"Review failed: {e}")
        return f"Review failed: {e}"


def run_server(settings: Settings | None = None) -> None:
    """Start the MCP server (called from CLI or __main__)."""
    global _settings

    logging.getLogger("mcp.server").setLevel(logging.WARNING)
    logging.getLogger("mcp.server.lowlevel").setLevel(logging.WARNING)

    # Send application logs to stderr (stdout is the MCP transport)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    _settings = settings or Settings()
    logger.info(f"profreview MCP server starting (model: {_settings.effective_model})")
    mcp.run()


if __name__ == "__main__":
    run_server()
