#!/usr/bin/env python3
"""
Command-line entry point: fetch subtitles for one Bilibili video.

Examples:
  python main.py                        # sample video, plain-text subtitles
  python main.py BV1xx411c7mD           # BV id
  python main.py https://www.bilibili.com/video/BV1xx411c7mD --timestamps
"""

import argparse
import json
import os
import sys

from logging_setup import configure_logging
from subtitle_service import fetch_subtitle

DEFAULT_VIDEO = "BV1xx411c7mD"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract Bilibili subtitles through the web extraction tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "video",
        nargs="?",
        default=DEFAULT_VIDEO,
        help=f"BV id or full video URL (default: {DEFAULT_VIDEO})",
    )
    parser.add_argument(
        "--timestamps",
        action="store_true",
        help="Keep subtitle content as timestamped SRT instead of plain text",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Use human-readable log lines instead of JSON",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(log_level=args.log_level, use_json=not args.plain_logs)

    result = fetch_subtitle(args.video, text_only=not args.timestamps)
    if result.success:
        print(json.dumps(result.data, ensure_ascii=False, indent=2))
        return 0

    print(f"Subtitle fetch failed: {result.error}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
