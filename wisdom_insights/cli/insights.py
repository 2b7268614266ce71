"""
Command-line interface for pattern reports and event pattern recognition.

Prints the JSON payload to stdout and can optionally deliver the rendered
pattern report to Telegram.
"""
import argparse
import json
from typing import List, Optional

from wisdom_insights.config import settings
from wisdom_insights.core.insights import render_report_message
from wisdom_insights.core.patterns import build_pattern_report
from wisdom_insights.core.recognizer import recognize_patterns
from wisdom_insights.data_access.factory import build_dal
from wisdom_insights.infra import log_utils
from wisdom_insights.infra.telegram_sender import send_telegram_message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate insight reports.")
    parser.add_argument(
        "--type",
        choices=["patterns", "recognize"],
        required=True,
        help="The type of report to generate.",
    )
    parser.add_argument("--user-id", required=True, help="The user to analyse.")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.PATTERN_DAYS,
        help="Pattern window in days.",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=settings.RECOGNITION_WINDOW_DAYS,
        help="Event window in days for pattern recognition.",
    )
    parser.add_argument("--save", action="store_true", help="Store recognised patterns as insights.")
    parser.add_argument("--send", action="store_true", help="Send the pattern report to Telegram.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parses CLI arguments and prints the requested report."""
    args = build_parser().parse_args(argv)
    log_utils.log_message(f"Insights CLI invoked for '{args.type}' report.", "INFO")

    dal = build_dal()
    try:
        if args.type == "recognize":
            result = recognize_patterns(dal, args.user_id, window_days=args.window_days, save=args.save)
            print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
            return 0

        report = build_pattern_report(dal, args.user_id, days=args.days)
    finally:
        dal.close()

    print(json.dumps(report.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))

    if args.send:
        if not settings.TELEGRAM_TOKEN or not settings.TELEGRAM_CHAT_ID:
            log_utils.log_message("TELEGRAM_TOKEN or TELEGRAM_CHAT_ID not set. Skipping message.", "WARN")
            return 1
        sent = send_telegram_message(
            token=settings.TELEGRAM_TOKEN,
            chat_id=settings.TELEGRAM_CHAT_ID,
            message=render_report_message(report),
        )
        return 0 if sent else 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
