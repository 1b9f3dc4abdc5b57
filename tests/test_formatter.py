"""Tests for the per-event message formatter."""

import pytest

from ci_slack_notifier.context import build_context
from ci_slack_notifier.formatter import format_message
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

RUN_URL = "https://github.com/octo/repo/actions/runs/42"
JOB_LINK = f"<{RUN_URL}|build>"
WORKFLOW_LINK = f"<{RUN_URL}|CI>"


def make_context(event, **overrides) -> EventContext:
    """Create an EventContext with sensible defaults, overriding specific fields."""
    defaults = dict(
        event_name="push",
        event=event,
        repository="octo/repo",
        run_id="42",
        job="build",
        workflow="CI",
        sha="abc1234def",
    )
    defaults.update(overrides)
    return EventContext(**defaults)


# ── Supported events ──────────────────────────────────────────────


SUPPORTED = [
    ("pull_request", PullRequestEvent(number=7, title="Add feature", url="https://pr/7")),
    ("release", ReleaseEvent(title="v2.0", url="https://rel/2")),
    ("push", TagPushEvent(name="v1.2.0", compare=None, url="https://tag/v1.2.0")),
    ("push", CommitPushEvent(message="Fix bug", url="https://commit/1")),
    ("create", BranchCreateEvent(name="feature", url="https://tree/feature")),
    ("delete", BranchDeleteEvent(name="old-branch")),
]


class TestSupportedEvents:
    @pytest.mark.parametrize("event_name,event", SUPPORTED)
    def test_contains_status_job_and_workflow_links(self, event_name, event):
        ctx = make_context(event, event_name=event_name)
        message = format_message(ctx, "*Succeeded*")

        assert message is not None
        assert "*Succeeded*" in message
        assert f"during {JOB_LINK} ({WORKFLOW_LINK})" in message

    def test_pull_request(self):
        ctx = make_context(
            PullRequestEvent(number=7, title="Add feature", url="https://pr/7"),
            event_name="pull_request",
        )
        assert format_message(ctx, "*Failed*") == (
            f"PR <https://pr/7| #7 Add feature> *Failed* during {JOB_LINK} ({WORKFLOW_LINK})"
        )

    def test_release(self):
        ctx = make_context(ReleaseEvent(title="v2.0", url="https://rel/2"), event_name="release")
        assert format_message(ctx, "*Succeeded*") == (
            f"Release <https://rel/2|v2.0> *Succeeded* during {JOB_LINK} ({WORKFLOW_LINK})"
        )

    def test_tag_push(self):
        ctx = make_context(
            TagPushEvent(
                name="v1.2.0",
                compare="https://github.com/octo/repo/compare/v1.1...v1.2.0",
                url="https://github.com/octo/repo/releases/tag/v1.2.0",
            )
        )
        message = format_message(ctx, "*Failed*")

        assert message.startswith(
            "Tag <https://github.com/octo/repo/releases/tag/v1.2.0|v1.2.0> *Failed*"
        )

    def test_commit_push_uses_first_line(self):
        ctx = make_context(
            CommitPushEvent(message="Fix bug\n\nlonger body", url="https://commit/1")
        )
        message = format_message(ctx, "*Succeeded*")

        assert message == (
            f"<https://commit/1|Fix bug> *Succeeded* during {JOB_LINK} ({WORKFLOW_LINK})"
        )
        assert "longer body" not in message

    def test_commit_push_null_message_from_payload(self):
        ctx = build_context(
            "push",
            {"ref": "refs/heads/main", "head_commit": {"message": None, "url": "u"}},
            repository="octo/repo",
            run_id="42",
            job="build",
            workflow="CI",
        )
        assert format_message(ctx, "*Succeeded*") == (
            f"<u|> *Succeeded* during {JOB_LINK} ({WORKFLOW_LINK})"
        )

    def test_commit_push_single_line_message(self):
        ctx = make_context(CommitPushEvent(message="Bump version", url="https://commit/2"))
        assert format_message(ctx, "*Succeeded*").startswith(
            "<https://commit/2|Bump version> "
        )

    def test_branch_create(self):
        ctx = make_context(
            BranchCreateEvent(name="feature", url="https://github.com/octo/repo/tree/feature"),
            event_name="create",
        )
        assert format_message(ctx, "was *Cancelled*") == (
            "Branch <https://github.com/octo/repo/tree/feature|feature> creation "
            f"was *Cancelled* during {JOB_LINK} ({WORKFLOW_LINK})"
        )

    def test_branch_delete(self):
        ctx = make_context(BranchDeleteEvent(name="old-branch"), event_name="delete")
        assert format_message(ctx, "*Succeeded*") == (
            f"Branch `old-branch` deletion *Succeeded* during {JOB_LINK} ({WORKFLOW_LINK})"
        )


# ── Schedule ──────────────────────────────────────────────────────


class TestSchedule:
    def test_schedule_message_is_exact(self):
        ctx = make_context(ScheduleEvent(), event_name="schedule")
        assert format_message(ctx, "*Succeeded*") == f"Scheduled Workflow {WORKFLOW_LINK}"

    def test_schedule_has_no_status_phrase(self):
        ctx = make_context(ScheduleEvent(), event_name="schedule")
        assert "*Failed*" not in format_message(ctx, "*Failed*")


# ── Unsupported ───────────────────────────────────────────────────


class TestUnsupported:
    @pytest.mark.parametrize(
        "event",
        [
            UnsupportedEvent("issues"),
            UnsupportedEvent("create", reason="ref_type 'tag'"),
            UnsupportedEvent("delete", reason="ref_type 'tag'"),
        ],
    )
    def test_returns_none(self, event):
        ctx = make_context(event, event_name=event.event_name)
        assert format_message(ctx, "*Succeeded*") is None


# ── Run URL ───────────────────────────────────────────────────────


class TestRunUrl:
    def test_custom_server_url(self):
        ctx = make_context(
            ScheduleEvent(), event_name="schedule", server_url="https://ghe.example.com"
        )
        assert format_message(ctx, "") == (
            "Scheduled Workflow <https://ghe.example.com/octo/repo/actions/runs/42|CI>"
        )
