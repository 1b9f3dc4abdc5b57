"""Message text for each supported CI event kind."""

import logging

from ci_slack_notifier.models import (
    BranchCreateEvent,
    BranchDeleteEvent,
    CommitPushEvent,
    EventContext,
    PullRequestEvent,
    ReleaseEvent,
    ScheduleEvent,
    TagPushEvent,
    UnsupportedEvent,
)

logger = logging.getLogger(__name__)


def _link(url: str, label: str) -> str:
    return f"<{url}|{label}>"


def format_message(context: EventContext, status_text: str) -> str | None:
    """Build the Slack mrkdwn message for a finished workflow run.

    Returns ``None`` when the event kind is not supported; callers should
    treat that as "nothing to send" rather than an error.

    Args:
        context: The run's event context.
        status_text: Status phrase, e.g. ``"*Succeeded*"``.
    """
    event = context.event
    run_url = context.run_url
    during = (
        f"{status_text} during {_link(run_url, context.job)} "
        f"({_link(run_url, context.workflow)})"
    )

    if isinstance(event, PullRequestEvent):
        return f"PR {_link(event.url, f' #{event.number} {event.title}')} {during}"

    if isinstance(event, ReleaseEvent):
        return f"Release {_link(event.url, event.title)} {during}"

    if isinstance(event, TagPushEvent):
        return f"Tag {_link(event.url, event.name)} {during}"

    if isinstance(event, CommitPushEvent):
        return f"{_link(event.url, event.title)} {during}"

    if isinstance(event, ScheduleEvent):
        # No commit is associated with a scheduled run, so no status phrase.
        return f"Scheduled Workflow {_link(run_url, context.workflow)}"

    if isinstance(event, BranchCreateEvent):
        return f"Branch {_link(event.url, event.name)} creation {during}"

    if isinstance(event, BranchDeleteEvent):
        return f"Branch `{event.name}` deletion {during}"

    if isinstance(event, UnsupportedEvent):
        logger.debug("No message for %s event: %s", event.event_name, event.reason)
        return None

    raise TypeError(f"Unknown event variant: {type(event).__name__}")
