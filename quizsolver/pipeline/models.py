"""Data models for the task-processing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


@dataclass(frozen=True)
class TaskRequest:
    """One validated inbound request: who is asking and which page to solve."""

    email: str
    secret: str
    url: str


@dataclass(frozen=True)
class SubmitLink:
    """An anchor on the page whose href or text mentions ``submit``."""

    href: str
    text: str


@dataclass(frozen=True)
class PageExtract:
    """Text snapshot of the rendered quiz page."""

    body_text: str
    pre_text: Optional[str] = None
    result_text: Optional[str] = None
    submit_links: List[SubmitLink] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)

    @property
    def search_text(self) -> str:
        """The text the decoder scans: ``<pre>``, else ``#result``, else the body."""
        return self.pre_text or self.result_text or self.body_text or ""


@dataclass(frozen=True)
class DecodedPayload:
    """Text decoded from one base64 run found in the page."""

    text: str
    candidate: str
    plausible: bool
    index: int = 0


@dataclass(frozen=True)
class Instruction:
    """Structured directive parsed from a decoded payload."""

    resource_url: str
    submission_url: Optional[str] = None
    fields: dict[str, Any] = field(default_factory=dict)


class ResourceKind(str, Enum):
    PDF = "pdf"
    UNKNOWN = "unknown"


@dataclass
class FetchedResource:
    """Downloaded bytes plus their classification."""

    url: str
    content: bytes
    content_type: str
    kind: ResourceKind


@dataclass(frozen=True)
class Answer:
    """Rounded numeric answer computed from a resource."""

    value: int
    resource_url: str
    total: float = 0.0
    numbers_found: int = 0


@dataclass
class SubmissionResult:
    """Outcome of posting an :class:`Answer` to the submission endpoint."""

    endpoint: str
    status_code: Optional[int] = None
    body: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and self.status_code < 400


class TaskOutcome(str, Enum):
    SUBMITTED = "submitted"
    SUBMISSION_FAILED = "submission_failed"
    NO_PAYLOAD = "no_payload"
    NO_INSTRUCTION = "no_instruction"
    UNSUPPORTED_RESOURCE = "unsupported_resource"
    BUDGET_EXCEEDED = "budget_exceeded"
    NAVIGATION_FAILED = "navigation_failed"
    FETCH_FAILED = "fetch_failed"
    FAILED = "failed"


@dataclass
class TaskReport:
    """Terminal record of one task run.  Logged; never returned to the HTTP caller."""

    url: str
    outcome: TaskOutcome
    answer: Optional[Answer] = None
    submission: Optional[SubmissionResult] = None
    error: Optional[str] = None
    elapsed: float = 0.0
