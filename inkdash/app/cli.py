from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..bitmap import OutputFormat
from ..config import Settings
from ..errors import InkdashError
from ..pipeline import DashboardPipeline
from ..rendering import BrowserCapture, render_dashboard_html
from ..sensors import HomeAssistantClient, collect_dashboard

log = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="inkdash: home sensor dashboard for monochrome e-paper panels.",
        epilog="Hub URL and token come from $HA_URL and $HA_TOKEN.",
    )
    commands = parser.add_subparsers(dest="command")

    serve_parser = commands.add_parser("serve", help="Run the HTTP server (default)")
    _add_server_args(serve_parser)

    snapshot_parser = commands.add_parser("snapshot", help="Render the dashboard once to a file and exit")
    snapshot_parser.add_argument("--output", "-o", metavar="PATH", required=True, help="File to write")
    snapshot_parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        help="Image format (default: taken from the PATH suffix, else png)",
    )

    args_list = list(sys.argv[1:] if argv is None else argv)
    if not args_list or args_list[0] not in ("serve", "snapshot", "-h", "--help"):
        args_list.insert(0, "serve")
    return parser.parse_args(args_list)


def _add_server_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", help="Address to listen on (default: $INKDASH_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: $PORT or 3000)")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if getattr(args, "host", None):
        settings = replace(settings, host=args.host)
    if getattr(args, "port", None):
        settings = replace(settings, port=args.port)
    return settings


def _resolve_format(args: argparse.Namespace) -> OutputFormat:
    if args.format:
        return OutputFormat.from_name(args.format)
    return OutputFormat.from_name(Path(args.output).suffix or "png")


def snapshot(settings: Settings, path: str, fmt: OutputFormat) -> int:
    client = HomeAssistantClient(settings.ha_url, settings.ha_token, settings.ha_timeout)
    try:
        html = render_dashboard_html(collect_dashboard(client, settings))
    finally:
        client.close()
    with BrowserCapture(settings.public_url, settings.capture_timeout) as capture:
        image = DashboardPipeline(capture).render(html, fmt)
    Path(path).write_bytes(image.data)
    log.info("Wrote %s (%d bytes)", path, len(image.data))
    return 0


def serve(settings: Settings) -> int:
    from ..server import create_app

    client = HomeAssistantClient(settings.ha_url, settings.ha_token, settings.ha_timeout)
    capture = BrowserCapture(settings.base_url, settings.capture_timeout)
    capture.start()
    try:
        app = create_app(settings, client, DashboardPipeline(capture))
        log.info("Serving dashboard on %s:%d", settings.host, settings.port)
        app.run(host=settings.host, port=settings.port, threaded=True)
    finally:
        capture.close()
        client.close()
    return 0


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    try:
        settings = _resolve_settings(args)
    except InkdashError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    configure_logging(settings.log_level)
    try:
        if args.command == "snapshot":
            return snapshot(settings, args.output, _resolve_format(args))
        return serve(settings)
    except (InkdashError, ValueError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
