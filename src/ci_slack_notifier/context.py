"""Build an :class:`EventContext` from the GitHub Actions environment.

All access to the raw webhook payload happens here. Each supported event kind
is parsed once into its own variant so the formatter never has to poke at
optional payload fields.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

from ci_slack_notifier.config import Config
from ci_slack_notifier.models import (
    BranchCreateEvent,
    BranchDeleteEvent,
    CommitPushEvent,
    Event,
    EventContext,
    PullRequestEvent,
    ReleaseEvent,
    ScheduleEvent,
    Sender,
    TagPushEvent,
    UnsupportedEvent,
)

logger = logging.getLogger(__name__)

TAGS_PREFIX = "refs/tags/"
HEADS_PREFIX = "refs/heads/"

_REQUIRED_VARS = ("GITHUB_EVENT_NAME", "GITHUB_REPOSITORY", "GITHUB_RUN_ID")


class ContextError(ValueError):
    """Raised when the CI environment is incomplete or unreadable."""


def _strip_prefix(ref: str, prefix: str) -> str:
    if ref.startswith(prefix):
        return ref[len(prefix):]
    return ref


def parse_event(
    event_name: str,
    payload: Mapping[str, Any],
    *,
    ref: str = "",
    repository_url: str = "",
) -> Event:
    """Turn a raw webhook payload into one of the event variants.

    Args:
        event_name: The triggering event kind (``GITHUB_EVENT_NAME``).
        payload: The decoded webhook payload.
        ref: The workflow ref (``GITHUB_REF``); used to name created branches.
        repository_url: HTML URL of the repository, for tag/branch links.
    """
    if event_name == "pull_request":
        pr = payload.get("pull_request") or {}
        return PullRequestEvent(
            number=pr.get("number"),
            title=pr.get("title", ""),
            url=pr.get("html_url", ""),
        )

    if event_name == "release":
        release = payload.get("release") or {}
        return ReleaseEvent(
            title=release.get("name") or release.get("tag_name", ""),
            url=release.get("html_url", ""),
        )

    if event_name == "push":
        push_ref = payload.get("ref", "")
        if "tags" in push_ref:
            name = _strip_prefix(push_ref, TAGS_PREFIX)
            return TagPushEvent(
                name=name,
                compare=payload.get("compare"),
                url=f"{repository_url}/releases/tag/{name}",
            )

        head_commit = payload.get("head_commit")
        if not head_commit:
            return UnsupportedEvent(event_name, reason="push without a head commit")
        return CommitPushEvent(
            message=head_commit.get("message") or "",
            url=head_commit.get("url") or "",
        )

    if event_name == "schedule":
        return ScheduleEvent()

    if event_name == "create":
        if payload.get("ref_type") != "branch":
            return UnsupportedEvent(
                event_name, reason=f"ref_type {payload.get('ref_type')!r}"
            )
        name = _strip_prefix(ref, HEADS_PREFIX) if ref else payload.get("ref", "")
        return BranchCreateEvent(name=name, url=f"{repository_url}/tree/{name}")

    if event_name == "delete":
        if payload.get("ref_type") != "branch":
            return UnsupportedEvent(
                event_name, reason=f"ref_type {payload.get('ref_type')!r}"
            )
        return BranchDeleteEvent(name=payload.get("ref", ""))

    return UnsupportedEvent(event_name)


def _read_payload(path: str | None) -> dict[str, Any]:
    if not path:
        logger.debug("GITHUB_EVENT_PATH not set; using an empty payload")
        return {}

    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ContextError(f"Cannot read event payload {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ContextError(
            f"Event payload must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def build_context(
    event_name: str,
    payload: Mapping[str, Any],
    *,
    repository: str,
    run_id: str,
    job: str = "",
    workflow: str = "",
    sha: str = "",
    ref: str = "",
    server_url: str = "https://github.com",
) -> EventContext:
    """Assemble an EventContext from already-extracted values."""
    server_url = server_url.rstrip("/")
    repo_payload = payload.get("repository") or {}
    repository_url = repo_payload.get("html_url") or f"{server_url}/{repository}"

    sender_payload = payload.get("sender") or {}
    sender = Sender(
        login=sender_payload.get("login"),
        html_url=sender_payload.get("html_url"),
        avatar_url=sender_payload.get("avatar_url"),
    )

    event = parse_event(event_name, payload, ref=ref, repository_url=repository_url)

    return EventContext(
        event_name=event_name,
        event=event,
        repository=repository,
        run_id=str(run_id),
        job=job,
        workflow=workflow,
        sha=sha,
        server_url=server_url,
        sender=sender,
        repository_url=repository_url,
        pushed_at=repo_payload.get("pushed_at"),
        payload=dict(payload),
    )


def load_context(
    environ: Mapping[str, str] | None = None,
    config: Config | None = None,
) -> EventContext:
    """Read the current workflow run's context from environment variables.

    Raises:
        ContextError: when a required variable is missing or the event
            payload file cannot be read.
    """
    if environ is None:
        environ = os.environ
    if config is None:
        config = Config()

    missing = [name for name in _REQUIRED_VARS if not environ.get(name)]
    if missing:
        raise ContextError(f"Missing environment variables: {', '.join(missing)}")

    payload = _read_payload(environ.get("GITHUB_EVENT_PATH"))

    return build_context(
        environ["GITHUB_EVENT_NAME"],
        payload,
        repository=environ["GITHUB_REPOSITORY"],
        run_id=environ["GITHUB_RUN_ID"],
        job=environ.get("GITHUB_JOB", ""),
        workflow=environ.get("GITHUB_WORKFLOW", ""),
        sha=environ.get("GITHUB_SHA", ""),
        ref=environ.get("GITHUB_REF", ""),
        server_url=environ.get("GITHUB_SERVER_URL") or config.server_url,
    )
