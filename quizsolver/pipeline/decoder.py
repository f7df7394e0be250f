"""Base64 payload discovery and decoding.

The quiz page hides its instruction as a long base64 block.  The decoder scans
the page's search text for every run of base64-alphabet characters (newlines
allowed) at least ``min_length`` long, decodes each one and ranks the results:

1. a decoded text containing a *marker substring* wins outright, and decoding
   stops at the first such candidate;
2. otherwise the first candidate that decoded is kept as a
   lower-confidence fallback.

Candidates that are not valid base64 are skipped.  Decoded bytes that are not
valid UTF-8 become U+FFFD replacement characters rather than disqualifying
the candidate, so a marker next to a stray byte still wins.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from quizsolver.config import DEFAULT_MARKERS
from quizsolver.pipeline.models import DecodedPayload, PageExtract

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 100

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Candidate:
    """One decoded base64 run and its rank inputs."""

    index: int
    raw: str
    text: str
    plausible: bool

    @property
    def score(self) -> tuple[int, int]:
        """Sort key: plausible candidates first, then discovery order."""
        return (0 if self.plausible else 1, self.index)


def find_runs(text: str, min_length: int = DEFAULT_MIN_LENGTH) -> List[str]:
    """Return every base64-looking run of at least *min_length* chars, in order."""
    pattern = re.compile(r"[A-Za-z0-9+/=\n]{%d,}" % min_length)
    return pattern.findall(text or "")


def decode_run(run: str) -> Optional[str]:
    """Decode one base64 run to text, or return ``None`` if it is not decodable."""
    clean = _WHITESPACE.sub("", run)
    clean += "=" * (-len(clean) % 4)
    try:
        raw = base64.b64decode(clean, validate=True)
    except binascii.Error:
        return None
    return raw.decode("utf-8", errors="replace") or None


def has_marker(text: str, markers: Iterable[str] = DEFAULT_MARKERS) -> bool:
    return any(marker in text for marker in markers)


def iter_candidates(
    runs: Sequence[str],
    markers: Iterable[str] = DEFAULT_MARKERS,
) -> Iterator[Candidate]:
    """Yield decodable candidates in discovery order, stopping after the first marker hit."""
    markers = tuple(markers)
    for index, run in enumerate(runs):
        text = decode_run(run)
        if text is None:
            logger.debug(f"[DECODE] Skipping undecodable run #{index} ({len(run)} chars)")
            continue
        candidate = Candidate(index=index, raw=run, text=text, plausible=has_marker(text, markers))
        yield candidate
        if candidate.plausible:
            return


def rank_candidates(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Return *candidates* best first."""
    return sorted(candidates, key=lambda c: c.score)


def decode(
    extract: PageExtract,
    markers: Iterable[str] = DEFAULT_MARKERS,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> Optional[DecodedPayload]:
    """Find and decode the instruction payload hidden in *extract*.

    Returns ``None`` when the search text holds no base64 run at all, or when
    none of the runs decodes to text.
    """
    runs = find_runs(extract.search_text, min_length)
    if not runs:
        logger.info("[DECODE] No base64 candidates found in page text")
        return None

    ranked = rank_candidates(iter_candidates(runs, markers))
    if not ranked:
        logger.info(f"[DECODE] {len(runs)} candidate(s) found but none decoded")
        return None

    best = ranked[0]
    if not best.plausible:
        logger.info("[DECODE] No marker matched; using first decoded candidate as fallback")
    return DecodedPayload(
        text=best.text,
        candidate=best.raw,
        plausible=best.plausible,
        index=best.index,
    )
