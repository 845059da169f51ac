"""
Generate a competitive intelligence report from the CLI.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from app.cache import build_cache_gateway
from app.config import get_cache_settings, validate_settings
from app.domain.report import REPORT_FILENAME, STANDARD_SECTIONS, ReportRequest
from app.logging_utils import configure_logging
from app.services.progress import ProgressChannel
from app.services.report_orchestrator import ReportPipelineError, build_report_orchestrator


async def _run(request: ReportRequest, output: Path) -> int:
    cache = build_cache_gateway(get_cache_settings())
    channel = ProgressChannel()
    orchestrator = build_report_orchestrator(cache)

    async def _print_progress() -> None:
        async for event in channel.subscribe():
            print(event.message, flush=True)

    printer = asyncio.create_task(_print_progress())
    try:
        document = await orchestrator.generate(request, channel)
    except ReportPipelineError as exc:
        print(f"Report generation failed at stage={exc.stage}: {exc}", file=sys.stderr)
        return 1
    finally:
        await printer
        await cache.close()

    output.write_bytes(document.content)
    print(f"Wrote {document.content_length} bytes to {output}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a competitive intelligence PDF report.")
    parser.add_argument("competitors", nargs="+", help="Competitor identifiers or URLs.")
    parser.add_argument(
        "--section",
        dest="sections",
        action="append",
        default=None,
        help="Report section title; repeat to request several. Defaults to all standard sections.",
    )
    parser.add_argument(
        "--format",
        dest="report_format",
        choices=["detailed", "summary", "presentation"],
        default="detailed",
    )
    parser.add_argument("--output", type=Path, default=Path(REPORT_FILENAME))
    args = parser.parse_args()

    configure_logging()
    errors = validate_settings()
    if errors:
        parser.error("; ".join(errors))

    request = ReportRequest(
        competitors=args.competitors,
        sections=args.sections or list(STANDARD_SECTIONS),
        format=args.report_format,
    )
    return asyncio.run(_run(request, args.output))


if __name__ == "__main__":
    raise SystemExit(main())
