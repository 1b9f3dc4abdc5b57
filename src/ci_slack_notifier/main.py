"""Entry point for ci-slack-notifier."""

from __future__ import annotations

import argparse
import logging
import os
import sys

import requests

from ci_slack_notifier.config import load_config
from ci_slack_notifier.context import ContextError, load_context
from ci_slack_notifier.models import JobStatus
from ci_slack_notifier.notifier import notify

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ci-slack-notifier",
        description="Post a GitHub Actions workflow status message to a Slack webhook.",
    )
    parser.add_argument(
        "--status",
        required=True,
        choices=[s.value for s in JobStatus],
        help="Outcome of the job being reported",
    )
    parser.add_argument(
        "--webhook-url",
        metavar="URL",
        default=None,
        help="Slack incoming webhook URL (default: $SLACK_WEBHOOK_URL)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Path to config YAML (default: ~/.config/ci-slack-notifier/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        level=getattr(logging, args.log_level),
    )

    webhook_url = args.webhook_url or os.environ.get("SLACK_WEBHOOK_URL")
    if not webhook_url:
        logger.error("No webhook URL given (use --webhook-url or SLACK_WEBHOOK_URL)")
        sys.exit(1)

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        logger.error("Config file not found: %s", exc)
        sys.exit(1)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    try:
        context = load_context(config=config)
    except ContextError as exc:
        logger.error("Invalid CI context: %s", exc)
        sys.exit(1)

    try:
        notify(JobStatus(args.status), webhook_url, context, config=config)
    except requests.RequestException as exc:
        logger.error("Failed to send notification: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
