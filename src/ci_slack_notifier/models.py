"""Shared data structures used across all components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class JobStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StatusDisplay:
    color: str  # attachment color bar: "good", "danger" or "warning"
    text: str  # status phrase inserted into the message


@dataclass(frozen=True)
class Sender:
    login: str | None = None
    html_url: str | None = None
    avatar_url: str | None = None


# -- event variants ----------------------------------------------------------


@dataclass(frozen=True)
class PullRequestEvent:
    number: int
    title: str
    url: str


@dataclass(frozen=True)
class ReleaseEvent:
    title: str  # release name, or tag name when the release is unnamed
    url: str


@dataclass(frozen=True)
class TagPushEvent:
    name: str  # e.g. "v1.2.0"
    compare: str | None
    url: str


@dataclass(frozen=True)
class CommitPushEvent:
    message: str
    url: str

    @property
    def title(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class ScheduleEvent:
    pass


@dataclass(frozen=True)
class BranchCreateEvent:
    name: str
    url: str


@dataclass(frozen=True)
class BranchDeleteEvent:
    name: str


@dataclass(frozen=True)
class UnsupportedEvent:
    event_name: str
    reason: str = "unsupported event kind"


Event = (
    PullRequestEvent
    | ReleaseEvent
    | TagPushEvent
    | CommitPushEvent
    | ScheduleEvent
    | BranchCreateEvent
    | BranchDeleteEvent
    | UnsupportedEvent
)


@dataclass(frozen=True)
class EventContext:
    event_name: str  # raw GITHUB_EVENT_NAME, e.g. "push"
    event: Event
    repository: str  # "owner/repo"
    run_id: str
    job: str
    workflow: str
    sha: str = ""
    server_url: str = "https://github.com"
    sender: Sender = field(default_factory=Sender)
    repository_url: str | None = None  # payload repository.html_url
    pushed_at: int | str | None = None  # epoch seconds (push) or ISO-8601
    payload: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def run_url(self) -> str:
        return f"{self.server_url}/{self.repository}/actions/runs/{self.run_id}"

    @property
    def repository_link(self) -> str:
        return f"{self.server_url}/{self.repository}"


@dataclass
class ChatAttachment:
    author_name: str | None
    author_link: str | None
    author_icon: str | None
    color: str
    footer: str
    footer_icon: str
    ts: str  # epoch milliseconds
    text: str
    mrkdwn_in: list[str] = field(default_factory=lambda: ["text"])

    def to_dict(self) -> dict[str, Any]:
        return {
            "author_name": self.author_name,
            "author_link": self.author_link,
            "author_icon": self.author_icon,
            "color": self.color,
            "footer": self.footer,
            "footer_icon": self.footer_icon,
            "mrkdwn_in": list(self.mrkdwn_in),
            "ts": self.ts,
            "text": self.text,
        }
