"""Slack incoming-webhook sender for workflow status notifications."""

import json
import logging
import time
from datetime import datetime, timezone

import requests

from ci_slack_notifier.config import Config
from ci_slack_notifier.formatter import format_message
from ci_slack_notifier.models import (
    ChatAttachment,
    EventContext,
    JobStatus,
    ScheduleEvent,
    StatusDisplay,
)

logger = logging.getLogger(__name__)

_STATUS_DISPLAY = {
    JobStatus.SUCCESS: StatusDisplay(color="good", text="*Succeeded*"),
    JobStatus.FAILURE: StatusDisplay(color="danger", text="*Failed*"),
    JobStatus.CANCELLED: StatusDisplay(color="warning", text="was *Cancelled*"),
}


def status_display(status: JobStatus) -> StatusDisplay:
    """Map a job status to its attachment color and status phrase."""
    return _STATUS_DISPLAY[status]


def _pushed_at_ms(pushed_at: int | str | None) -> int | None:
    """Convert a repository ``pushed_at`` value to epoch milliseconds.

    Push payloads carry epoch seconds; every other payload carries an
    ISO-8601 string. Returns None when the value is missing or unparseable.
    """
    if pushed_at is None or isinstance(pushed_at, bool):
        return None
    if isinstance(pushed_at, (int, float)):
        return int(pushed_at * 1000)
    try:
        parsed = datetime.fromisoformat(str(pushed_at).replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable repository pushed_at %r", pushed_at)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def build_attachment(
    context: EventContext,
    display: StatusDisplay,
    message: str,
    *,
    config: Config,
    now: float | None = None,
) -> ChatAttachment:
    """Assemble the Slack attachment for a formatted message.

    The timestamp is the repository's last push time, except for scheduled
    runs (no associated push) where the current time is used. ``now`` is the
    current time in epoch seconds and defaults to ``time.time()``.
    """
    if now is None:
        now = time.time()

    ts_ms = None
    if not isinstance(context.event, ScheduleEvent):
        ts_ms = _pushed_at_ms(context.pushed_at)
    if ts_ms is None:
        ts_ms = int(now * 1000)

    sender = context.sender
    return ChatAttachment(
        author_name=sender.login,
        author_link=sender.html_url,
        author_icon=sender.avatar_url,
        color=display.color,
        footer=f"<{context.repository_link}|{context.repository}>",
        footer_icon=config.footer_icon,
        ts=str(ts_ms),
        text=message,
    )


def notify(
    status: JobStatus,
    webhook_url: str,
    context: EventContext,
    *,
    config: Config,
) -> bool:
    """Post a workflow status notification to a Slack incoming webhook.

    Args:
        status: Outcome of the job being reported.
        webhook_url: Destination incoming-webhook URL.
        context: The run's event context.
        config: Application configuration (footer icon, request timeout).

    Returns:
        True if a message was sent, False if the event kind is unsupported
        and nothing was sent.

    Raises:
        requests.RequestException: on connection failure or a non-2xx reply.
    """
    display = status_display(status)

    logger.debug("Event context: %s", json.dumps(context.payload, default=str))

    message = format_message(context, display.text)
    if message is None:
        logger.info("We don't support the [%s] event yet.", context.event_name)
        return False

    attachment = build_attachment(context, display, message, config=config)
    payload = {"attachments": [attachment.to_dict()]}

    resp = requests.post(webhook_url, json=payload, timeout=config.timeout)
    resp.raise_for_status()

    logger.info(
        "Notification sent: event=%s status=%s color=%s",
        context.event_name,
        status.value,
        display.color,
    )
    return True
