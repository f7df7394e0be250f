"""Resource download and classification."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from quizsolver.config import Settings
from quizsolver.pipeline.deadline import Deadline
from quizsolver.pipeline.errors import FetchFailure
from quizsolver.pipeline.models import FetchedResource, Instruction, ResourceKind

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; QuizSolver/1.0)",
}


def classify(url: str, content_type: Optional[str]) -> ResourceKind:
    """Return the :class:`ResourceKind` for a response.

    A resource is a PDF when the declared content type mentions ``pdf`` or the
    URL path ends in ``.pdf``; the header alone is not trusted to be present.
    """
    if content_type and "pdf" in content_type.lower():
        return ResourceKind.PDF
    if urlparse(url).path.lower().endswith(".pdf") or url.endswith(".pdf"):
        return ResourceKind.PDF
    return ResourceKind.UNKNOWN


class ResourceFetcher:
    """GET the resource an instruction points at."""

    def __init__(self, settings: Settings) -> None:
        self._timeout = settings.request_timeout

    async def fetch(self, instruction: Instruction, deadline: Deadline) -> FetchedResource:
        """Download ``instruction.resource_url``.

        Raises:
            FetchFailure: On a non-2xx status or a transport error.
            BudgetExceeded: If the task budget is already spent.
        """
        url = instruction.resource_url
        deadline.check("fetch")
        logger.info(f"[FETCH] Downloading resource: {url}")

        try:
            async with httpx.AsyncClient(
                headers=_DEFAULT_HEADERS,
                timeout=deadline.clamp(self._timeout),
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise FetchFailure(url, reason=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise FetchFailure(url, status_code=response.status_code)

        content_type = response.headers.get("content-type", "")
        kind = classify(url, content_type)
        logger.info(
            f"[FETCH] {len(response.content)} bytes, content type {content_type!r}, kind {kind.value}"
        )
        return FetchedResource(
            url=url,
            content=response.content,
            content_type=content_type,
            kind=kind,
        )
