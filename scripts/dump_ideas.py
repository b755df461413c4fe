#!/usr/bin/env python3
"""Dump the ideas, scores and MVP features visible to a signed-in account.

Usage
-----
Set environment variables and run::

    export IDEALAUNCHER_BASE_URL="https://idealauncher.example.com"
    export IDEALAUNCHER_SESSION_COOKIE="next-auth.session-token=..."
    python scripts/dump_ideas.py

Options::

    --idea ID            Only dump this idea (default: all ideas)
    --sort-by FIELD      title | iceScore | riceScore | createdAt | updatedAt
    --skip-scores        Skip the score endpoint
    --skip-features      Skip the MVP feature endpoint
    --output FILE        Write JSON to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from idealauncher import ApiError, IdeaLauncherClient, IdeaLauncherConfig  # noqa: E402


async def dump_idea(
    client: IdeaLauncherClient,
    idea_id: str,
    *,
    skip: set[str],
) -> dict[str, Any]:
    """Fetch one idea and its derived data; endpoint failures are recorded, not raised."""
    result: dict[str, Any] = {}
    idea = await client.get_idea(idea_id)
    result["idea"] = idea.model_dump(mode="json")

    if "scores" not in skip:
        try:
            scores = await client.get_scores(idea_id)
            result["scores"] = [score.model_dump(mode="json") for score in scores]
        except ApiError as exc:
            result["scores_error"] = f"{exc.type}: {exc}"

    if "features" not in skip:
        try:
            features = await client.get_features(idea_id)
            result["features"] = [feature.model_dump(mode="json") for feature in features]
        except ApiError as exc:
            result["features_error"] = f"{exc.type}: {exc}"

    return result


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump IdeaLauncher ideas as JSON")
    parser.add_argument("--idea", help="Only dump this idea id")
    parser.add_argument(
        "--sort-by",
        choices=["title", "iceScore", "riceScore", "createdAt", "updatedAt"],
        default=None,
    )
    parser.add_argument("--skip-scores", action="store_true", help="Skip score endpoint")
    parser.add_argument("--skip-features", action="store_true", help="Skip MVP feature endpoint")
    parser.add_argument("--output", help="Write JSON output to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    skip: set[str] = set()
    if args.skip_scores:
        skip.add("scores")
    if args.skip_features:
        skip.add("features")

    config = IdeaLauncherConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "base_url": config.base_url,
        "ideas": [],
    }

    async with IdeaLauncherClient(config) as client:
        if args.idea:
            idea_ids = [args.idea]
        else:
            ideas = await client.list_ideas(sort_by=args.sort_by, sort_order="desc")
            idea_ids = [idea.id for idea in ideas]

        for idea_id in idea_ids:
            result["ideas"].append(await dump_idea(client, idea_id, skip=skip))

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
