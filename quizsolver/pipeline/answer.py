"""Answer computation, one strategy per resource kind.

The only registered strategy today handles PDF-class documents: extract all
text with ``pypdf``, sum every signed decimal literal in it and round half up.
It is a crude, order-independent aggregate with no notion of which numbers
matter.
"""

from __future__ import annotations

import asyncio
import io
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from quizsolver.pipeline.errors import UnsupportedResourceKind
from quizsolver.pipeline.models import Answer, FetchedResource, ResourceKind

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[-+]?[0-9]*\.?[0-9]+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def extract_pdf_text(data: bytes) -> str:
    """Return all text extracted from the PDF in *data* using ``pypdf``."""
    import pypdf  # noqa: PLC0415

    reader = pypdf.PdfReader(io.BytesIO(data))
    pages: list[str] = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text.strip():
            pages.append(text)

    return "\n\n".join(pages)


def find_numbers(text: str) -> List[float]:
    """Every signed decimal literal in *text*, in order."""
    return [float(m.group(0)) for m in _NUMBER.finditer(text)]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards positive infinity."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class AnswerStrategy(ABC):
    """Computes an :class:`Answer` for one :class:`ResourceKind`."""

    kind: ResourceKind

    @abstractmethod
    async def compute(self, resource: FetchedResource) -> Answer:
        """Return the answer for *resource*."""


class NumberSumStrategy(AnswerStrategy):
    """Sum of all numeric literals in a PDF's text, rounded."""

    kind = ResourceKind.PDF

    async def compute(self, resource: FetchedResource) -> Answer:
        # pypdf is CPU-bound; keep it off the event loop.
        text = await asyncio.to_thread(extract_pdf_text, resource.content)
        numbers = find_numbers(text)
        total = sum(numbers)
        logger.info(f"[ANSWER] Crude sum of {len(numbers)} number(s) in PDF: {total}")
        return Answer(
            value=round_half_up(total),
            resource_url=resource.url,
            total=total,
            numbers_found=len(numbers),
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class AnswerEngine:
    """Dispatch a fetched resource to the strategy registered for its kind."""

    def __init__(self, strategies: Optional[Iterable[AnswerStrategy]] = None) -> None:
        self._strategies: Dict[ResourceKind, AnswerStrategy] = {}
        for strategy in strategies if strategies is not None else [NumberSumStrategy()]:
            self.register(strategy)

    def register(self, strategy: AnswerStrategy) -> None:
        self._strategies[strategy.kind] = strategy

    def supports(self, kind: ResourceKind) -> bool:
        return kind in self._strategies

    async def compute_answer(self, resource: FetchedResource) -> Answer:
        """Compute the answer for *resource*.

        Raises:
            UnsupportedResourceKind: If no strategy handles ``resource.kind``.
        """
        strategy = self._strategies.get(resource.kind)
        if strategy is None:
            raise UnsupportedResourceKind(resource.kind.value, resource.content_type)
        return await strategy.compute(resource)
