"""CLI entry point for running probe suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from probe_engine.config import EngineConfig
from probe_engine.engine import TestEngine
from probe_engine.models.events import TestComplete
from probe_engine.models.result import RunSummary
from probe_engine.resolver import CircularDependencyError
from probe_engine.suites.loading import load_suite_manifest

STATUS_SYMBOLS = {
    "supported": "✅",
    "unsupported": "❌",
    "partial": "◐",
    "error": "❗",
    "skipped": "⏭",
}

EXIT_CYCLE = 2


def log_results_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log a formatted summary of test results grouped by category."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in summary.results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s [%s]: %s (%.0fms)",
            symbol,
            result.test_name,
            result.category,
            result.status,
            result.duration_ms,
        )
        if result.status in {"error", "skipped"} and result.details:
            log.info("  Details: %s", result.details)

    for category, counts in summary.categories.items():
        log.info(
            "Category %s: %d%% (%d/%d supported)",
            category,
            counts.score,
            counts.supported,
            counts.total,
        )
    log.info("Overall score: %d%%", summary.overall_score)


def format_output(summary: RunSummary) -> dict[str, Any]:
    """Format a run summary for JSON output."""
    results = [
        {
            "name": result.test_name,
            "category": result.category,
            "status": result.status,
            "details": result.details,
            "score": result.score,
            "duration_ms": result.duration_ms,
            "attempts": result.attempts,
        }
        for result in summary.results
    ]

    return {
        "total": summary.total_tests,
        "completed": summary.completed_tests,
        "supported": summary.status_counts.get("supported", 0),
        "unsupported": summary.status_counts.get("unsupported", 0),
        "partial": summary.status_counts.get("partial", 0),
        "errors": summary.status_counts.get("error", 0),
        "skipped": summary.status_counts.get("skipped", 0),
        "overall_score": summary.overall_score,
        "duration_ms": summary.duration_ms,
        "results": results,
    }


async def run(suite_keys: Sequence[str], config_json: str = "{}") -> int:
    """Run the given suites and return an exit code."""
    log = logging.getLogger("probe_engine")

    config = EngineConfig(**json.loads(config_json))
    engine = TestEngine(config)

    for key in suite_keys:
        log.info("Loading suite: %s", key)
        manifest = load_suite_manifest(key)
        engine.register_suite(manifest.suite_factory())

    def report_progress(event: TestComplete) -> None:
        log.info(
            "[%3.0f%%] %s: %s",
            event.progress * 100,
            event.test_name,
            event.result.status,
        )

    engine.on("test_complete", report_progress)

    try:
        summary = await engine.run()
    except CircularDependencyError as exc:
        log.error("Cannot order tests: %s", exc)
        return EXIT_CYCLE

    log_results_summary(log, summary)
    print(json.dumps(format_output(summary), indent=2, default=str))

    return 1 if summary.status_counts.get("error", 0) else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run capability probe suites")
    parser.add_argument(
        "--suite",
        dest="suites",
        action="append",
        required=True,
        help="Suite key to run (repeatable), e.g. runtime",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help="JSON engine configuration, e.g. '{\"default_timeout_ms\": 2000}'",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sys.exit(asyncio.run(run(args.suites, args.config)))


if __name__ == "__main__":  # pragma: no cover
    main()
