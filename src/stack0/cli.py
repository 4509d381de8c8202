"""Command-line interface for the Stack0 API. Use --help for usage."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from config import load_config
from core.errors import Stack0Error
from core.logging import generate_trace_id, log_exception, set_log_context, setup_logging
from core.utils import json_serializer
from stack0.client import Stack0

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_USAGE = 2


def _parse_var(text: str) -> tuple[str, Any]:
    """KEY=VALUE; VALUE is decoded as JSON when it parses, else kept as a string."""
    key, sep, raw = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stack0",
        description="Capture screenshots, extract content and run workflows on Stack0",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Full-page PNG screenshot, waiting for the result
    stack0 screenshot https://example.com --full-page

    # Markdown extraction without waiting
    stack0 extract https://example.com/article --mode markdown --no-wait

    # Run a workflow with variables (values are JSON when they parse)
    stack0 run-workflow content-pipeline --var topic=AI --var count=3

    # Check a run started earlier
    stack0 get-run run_abc123

The API key is read from STACK0_API_KEY (a .env file is loaded if present)
or from the stack0.api_key setting of the config file.
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML config file (default: $STACK0_CONFIG or ./stack0.yaml)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL (default: from config or https://api.stack0.dev/v1)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for an operation to finish (default: per operation)",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between status checks (default: per operation)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write logs to stderr as JSON lines",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    screenshot = subparsers.add_parser("screenshot", help="Capture a screenshot of a URL")
    screenshot.add_argument("url")
    screenshot.add_argument("--format", choices=["png", "jpeg", "webp", "pdf"], default=None)
    screenshot.add_argument("--full-page", action="store_true", help="Capture the full scrollable page")
    screenshot.add_argument("--device", choices=["desktop", "tablet", "mobile"], default=None)
    screenshot.add_argument("--no-wait", action="store_true", help="Print the created job and exit")

    extract = subparsers.add_parser("extract", help="Extract content from a URL")
    extract.add_argument("url")
    extract.add_argument("--mode", choices=["auto", "schema", "markdown", "raw"], default=None)
    extract.add_argument("--no-wait", action="store_true", help="Print the created job and exit")

    run_workflow = subparsers.add_parser("run-workflow", help="Run a workflow by slug")
    run_workflow.add_argument("slug")
    run_workflow.add_argument(
        "--var",
        dest="variables",
        action="append",
        type=_parse_var,
        default=[],
        metavar="KEY=VALUE",
        help="Workflow variable (repeatable)",
    )
    run_workflow.add_argument("--no-wait", action="store_true", help="Print the created run and exit")

    get_run = subparsers.add_parser("get-run", help="Show a workflow run")
    get_run.add_argument("run_id")

    return parser


async def run_command(client: Stack0, args: argparse.Namespace) -> Any:
    """Execute one parsed command against the API and return its JSON result."""
    wait = {"poll_interval": args.poll_interval, "timeout": args.timeout}

    if args.command == "screenshot":
        request = {
            "url": args.url,
            "format": args.format,
            "full_page": args.full_page or None,
            "device_type": args.device,
        }
        if args.no_wait:
            return await client.screenshots.capture(request)
        return await client.screenshots.capture_and_wait(request, **wait)

    if args.command == "extract":
        request = {"url": args.url, "mode": args.mode}
        if args.no_wait:
            return await client.extraction.extract(request)
        return await client.extraction.extract_and_wait(request, **wait)

    if args.command == "run-workflow":
        request = {"workflow_slug": args.slug, "variables": dict(args.variables) or None}
        if args.no_wait:
            return await client.workflows.run(request)
        return await client.workflows.run_and_wait(request, **wait)

    if args.command == "get-run":
        return await client.workflows.get_run(args.run_id)

    raise ValueError(f"Unknown command: {args.command}")


async def _main_async(args: argparse.Namespace, client: Stack0) -> Any:
    async with client:
        return await run_command(client, args)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        json_format=args.json_logs,
    )
    set_log_context(trace_id=generate_trace_id())

    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url

    try:
        config = load_config(config_path=args.config, overrides=overrides)
        client = Stack0.from_config(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        result = asyncio.run(_main_async(args, client))
    except Stack0Error as e:
        log_exception(logger, e, "Command failed", level=logging.DEBUG)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_API_ERROR
    except ValueError as e:
        # Request models reject invalid input before anything is sent
        print(f"Invalid request: {e}", file=sys.stderr)
        return EXIT_USAGE

    print(json.dumps(result, default=json_serializer, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
