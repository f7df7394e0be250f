"""Exception taxonomy for the task pipeline.

Every exception raised by a pipeline stage derives from ``PipelineError`` so
the orchestrator can map it onto a :class:`~quizsolver.pipeline.models.TaskOutcome`.
A missing payload or instruction is not an exception: the decoder and
resolver return ``None`` for those.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for all stage failures."""


class BudgetExceeded(PipelineError):
    """Not enough time left to start, or the pipeline outran the task budget."""


class NavigationFailure(PipelineError):
    """The browser session could not be opened or the page failed to load."""


class FetchFailure(PipelineError):
    """Downloading the instruction's resource failed."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code is not None else reason or "network error"
        super().__init__(f"Failed download {url}: {detail}")


class UnsupportedResourceKind(PipelineError):
    """No answer strategy is registered for the resource's kind."""

    def __init__(self, kind: str, content_type: str = "") -> None:
        self.kind = kind
        self.content_type = content_type
        super().__init__(f"Unsupported resource kind {kind!r} (content type {content_type!r})")


class SubmissionFailure(PipelineError):
    """Posting the answer failed.  Recorded on the result, never propagated."""
