"""
run_analyze.py: score comments from the command line through the paced client.

Reads PERSPECTIVE_* settings from the environment / .env, submits every
argument as a comment (prefix with "!" for HIGH priority) and prints the
TOXICITY score of each response as it is released.

Usage:
    PERSPECTIVE_API_KEY=... python run_analyze.py "you are great" "!you are an idiot"
"""

import asyncio
import logging
import sys

from comment_analyzer import (
    AnalyzeCommentRequest,
    AnalyzerClient,
    Attribute,
    ClientSettings,
    Priority,
)
from comment_analyzer.core.logging import setup_logging

logger = logging.getLogger("run_analyze")


async def main(comments: list[str]) -> int:
    settings = ClientSettings()
    setup_logging(settings.log_level, settings.log_json)

    async with AnalyzerClient(settings) as client:
        texts: dict[str, str] = {}
        for comment in comments:
            priority = Priority.HIGH if comment.startswith("!") else Priority.NORMAL
            text = comment.removeprefix("!")
            request = AnalyzeCommentRequest.for_text(text, Attribute.TOXICITY)
            texts[await client.submit(request, priority)] = text

        failures = 0
        for _ in comments:
            response = await client.receive()
            if response is None:
                break
            text = texts.get(response.request_id, "?")
            if response.is_success:
                score = response.payload.summary_score(Attribute.TOXICITY)
                shown = f"{score:.3f}" if score is not None else "  n/a"
                print(f"{shown}  [{response.priority.name}] {text}")
            else:
                failures += 1
                logger.error("%s: %s (%s)", text, response.status.value, response.error_message)

    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1:])))
